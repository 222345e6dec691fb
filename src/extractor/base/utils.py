"""Optional-path lookup and string helpers shared by the site adapters."""

from collections.abc import Mapping, Sequence
from typing import Any
from urllib.parse import urlsplit

_MISSING = object()


def _step(node: Any, key: Any) -> Any:
    if isinstance(node, Mapping):
        return node.get(key, _MISSING)
    if (
        isinstance(key, int)
        and not isinstance(key, bool)
        and isinstance(node, Sequence)
        and not isinstance(node, str)
    ):
        if -len(node) <= key < len(node):
            return node[key]
    return _MISSING


def object_exists(root: Any, *keys: Any) -> bool:
    """Check that every key along a path through nested data is present.

    Absent intermediates, non-container intermediates and out of range list
    indexes all report False rather than raising.
    """
    node = root
    for key in keys:
        node = _step(node, key)
        if node is _MISSING:
            return False
    return True


def get_path(root: Any, *keys: Any, default: Any = None) -> Any:
    """Look up a value along a path through nested data.

    Args:
    ----
        root: Mapping or list to start from
        *keys: Mapping keys or list indexes, outermost first
        default: Value returned when any step of the path is absent

    Returns:
    -------
        The value at the end of the path, or ``default``

    """
    node = root
    for key in keys:
        node = _step(node, key)
        if node is _MISSING:
            return default
    return node


def stringify(value: Any) -> Any:
    """Force numeric identifiers into their canonical string form.

    Booleans and non-numbers pass through unchanged. Integral floats drop
    their fractional part so ``139404290.0`` and ``139404290`` agree.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return repr(value)
    return value


def trim_url_argument(url: str) -> str:
    """Drop the query string, cutting at the last question mark."""
    argument_start = url.rfind("?")
    if argument_start != -1:
        return url[:argument_start]
    return url


def host_check(url: str, host_suffix: str) -> bool:
    """Check that a URL's host is, or is a subdomain of, ``host_suffix``.

    Only http and https pages match. Any failure to parse the location is
    treated as a non-match.
    """
    try:
        parts = urlsplit(url)
        if parts.scheme not in ("http", "https"):
            return False
        hostname = parts.hostname or ""
        return hostname == host_suffix or hostname.endswith("." + host_suffix)
    except (ValueError, AttributeError, TypeError):
        return False


def nth_last_index_of(text: str, char: str, n: int, start: int | None = None) -> int:
    """Return the index of the ``n``-th occurrence of ``char`` counting back.

    The search starts at ``start`` (inclusive), or at the end of the text when
    ``start`` is None. Returns -1 when there are fewer than ``n`` occurrences.
    """
    index = len(text) - 1 if start is None else min(start, len(text) - 1)
    found = 0
    while index >= 0:
        if text[index] == char:
            found += 1
            if found == n:
                return index
        index -= 1
    return -1


def is_integer_string(text: str) -> bool:
    """Check that a non-empty string is made of ASCII digits only."""
    return bool(text) and all("0" <= c <= "9" for c in text)


def substring_after(text: str, marker: str, *, last: bool = False) -> str | None:
    """Return the text following ``marker``, or None when it is absent."""
    index = text.rfind(marker) if last else text.find(marker)
    if index == -1:
        return None
    return text[index + len(marker) :]
