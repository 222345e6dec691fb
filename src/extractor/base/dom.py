"""DOM capability helpers over BeautifulSoup trees.

These mirror the handful of browser DOM operations the adapters rely on:
nested class-name narrowing, text content, attribute and URL properties and
inline style values. All lookups return None or an empty value instead of
raising when a node is absent.
"""

import re
from collections.abc import Sequence
from urllib.parse import urljoin

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PreformattedString

from .context import HTML_PARSER

_CSS_URL = re.compile(r"""^url\(\s*(['"]?)(.*?)\1\s*\)$""", re.IGNORECASE)
_PIXELS = re.compile(r"^(-?\d+(?:\.\d+)?)(px)?$", re.IGNORECASE)

Node = Tag | BeautifulSoup


def is_tag(element: object, tag_name: str) -> bool:
    """Check that ``element`` is an element with the given tag name."""
    return isinstance(element, Tag) and element.name == tag_name.lower()


def has_class_name(element: Tag | None, class_name: str) -> bool:
    if element is None:
        return False
    return class_name in (element.get("class") or [])


def child_elements(element: Tag) -> list[Tag]:
    """Return the direct element children, skipping text and comments."""
    return [child for child in element.children if isinstance(child, Tag)]


def first_by_class_names(
    class_names: Sequence[str], start: Node, tag_name: str | None = None
) -> Tag | None:
    """Narrow through successive class-name filters, first match at each level.

    Args:
    ----
        class_names: Class names, outermost first
        start: Node whose descendants are searched
        tag_name: Required tag name of the final element

    Returns:
    -------
        The element reached by the last filter, or None

    """
    node: Node | None = start
    for class_name in class_names:
        node = node.find(class_=class_name) if node is not None else None
        if node is None:
            return None
    if tag_name is not None and not is_tag(node, tag_name):
        return None
    return node


def all_by_class_names(class_names: Sequence[str], start: Node) -> list[Tag]:
    """Collect every element matching the last class name.

    Each match of an outer filter is searched in turn, in document order.
    """
    if not class_names:
        return []
    matches = start.find_all(class_=class_names[0])
    if len(class_names) == 1:
        return list(matches)

    collected: list[Tag] = []
    for match in matches:
        collected.extend(all_by_class_names(class_names[1:], match))
    return collected


def element_by_id(root: Node, element_id: str, tag_name: str | None = None) -> Tag | None:
    element = root.find(id=element_id)
    if element is None or (tag_name is not None and not is_tag(element, tag_name)):
        return None
    return element


def text_content(node: Node | None) -> str:
    """Concatenate the text nodes beneath ``node``.

    Comments, CDATA sections, doctypes and processing instructions are
    excluded whatever parser produced the tree.
    """
    if node is None:
        return ""
    if isinstance(node, NavigableString):
        return "" if isinstance(node, PreformattedString) else str(node)
    return "".join(
        str(descendant)
        for descendant in node.descendants
        if isinstance(descendant, NavigableString)
        and not isinstance(descendant, PreformattedString)
    )


def get_attribute(element: Tag, name: str) -> str | None:
    """Return an attribute's raw value, or None when it is absent."""
    value = element.get(name)
    if value is None:
        return None
    if isinstance(value, list):
        return " ".join(value)
    return value


def url_property(element: Tag, name: str, base_url: str) -> str:
    """Return a URL attribute resolved the way the ``src``/``href`` properties are."""
    value = get_attribute(element, name)
    if value is None:
        return ""
    return urljoin(base_url, value.strip())


def inline_style(element: Tag, property_name: str) -> str:
    """Return one property of the element's inline style, or an empty string."""
    style = get_attribute(element, "style") or ""
    value = ""
    for declaration in style.split(";"):
        name, separator, raw_value = declaration.partition(":")
        if separator and name.strip().lower() == property_name:
            value = raw_value.strip()
    return value


def background_image(element: Tag, base_url: str) -> str:
    """Return the inline background image as ``url("<absolute url>")``."""
    value = inline_style(element, "background-image")
    match = _CSS_URL.match(value)
    if match is None:
        return value
    return f'url("{urljoin(base_url, match.group(2))}")'


def pixel_left(element: Tag) -> int:
    """Return the inline ``left`` offset in whole pixels, 0 when unset."""
    match = _PIXELS.match(inline_style(element, "left"))
    if match is None:
        return 0
    return int(float(match.group(1)))


def decode_html_text(text: str) -> str:
    """Decode entities and drop markup, as reading back assigned HTML does."""
    return text_content(BeautifulSoup(text, HTML_PARSER))
