"""Cross-source sanity checks and canonicalization of identity fields.

Two in-page sources of the same identifier must agree exactly. A media URL
that does not embed the item ID independently resolved from the page is stale
or foreign content and invalidates the extraction.
"""

from collections.abc import Iterable
from typing import Any

from .models import DisplayName


def non_empty(value: Any) -> Any:
    """Treat empty strings as unresolved."""
    if value is None or value == "":
        return None
    return value


def ids_agree(first: Any, second: Any) -> bool:
    """Check two identifier sources agree byte for byte."""
    return isinstance(first, str) and first != "" and first == second


def url_segment_starts_with_id(url: str, item_id: str, separator: str) -> bool:
    """Check the last path segment of ``url`` begins with ``<item_id><separator>``."""
    segment_start = url.rfind("/")
    if segment_start == -1:
        return False
    return url.startswith(item_id + separator, segment_start + 1)


def url_references_id(url: str, item_id: str) -> bool:
    """Check that ``url`` ends with ``/<item_id>`` or contains ``/<item_id>/``."""
    return url.endswith("/" + item_id) or ("/" + item_id + "/") in url


def canonical_title(raw_title: str, untitled_sentinels: Iterable[str] = ()) -> str:
    """Trim a title and map a site's untitled placeholder to the empty string."""
    title = raw_title.strip()
    if title in untitled_sentinels:
        return ""
    return title


def display_name(title: Any, owner_name: Any) -> DisplayName | None:
    """Pair a title with its owner name.

    An item whose owner cannot be named is unresolved, never anonymous.
    """
    if not isinstance(title, str) or not isinstance(owner_name, str):
        return None
    if owner_name == "":
        return None
    return DisplayName(title, owner_name)


def looks_like_filename(text: str, extensions: Iterable[str]) -> bool:
    """Check whether a title is really an uploaded file's name."""
    lowered = text.lower()
    return any(lowered.endswith(extension) for extension in extensions)
