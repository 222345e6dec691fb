"""Host-side profiles built from extraction results.

The adapters hand back raw, untrimmed strings; this module enforces the
length limits, compounds the display name, normalizes tags and attaches the
URLs the host rebuilds from each record.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum

from .base.config import ProfileLimits
from .base.models import ContentAdapter, ExtractionResult, ExtractionStatus, ItemIdentity, Site

logger = logging.getLogger(__name__)

TAG_DELIMITERS = " .,!?:;()[]#+-=/'\"\t"
TAG_INNER_CHARACTERS = "-"
DISPLAY_NAME_SEPARATOR = "\0"
MEDIA_REFERENCE_SEPARATOR = "\0"
ELLIPSIS = "..."


class BrowsedPageStatus(Enum):
    """Outcome of one browsed page as seen by the host."""

    NOT_READY = "not_ready"
    NO_PROFILE = "no_profile"
    PROFILE = "profile"


@dataclass
class ItemProfile:
    """Length-checked profile of a browsed item."""

    site: Site
    item_id: str
    owner_id: str | None
    display_name: str
    media_reference: str | None = None
    tags: list[str] = field(default_factory=list)
    item_url: str | None = None
    thumbnail_url: str | None = None
    large_image_url: str | None = None
    # Human readable site name shown with the profile
    site_label: str = ""

    @property
    def title(self) -> str:
        return self.display_name.split(DISPLAY_NAME_SEPARATOR, 1)[0]

    @property
    def owner_name(self) -> str | None:
        _, separator, owner_name = self.display_name.partition(DISPLAY_NAME_SEPARATOR)
        return owner_name if separator else None


@dataclass
class BrowsedPageResult:
    status: BrowsedPageStatus
    profile: ItemProfile | None = None

    @property
    def ready(self) -> bool:
        return self.status is not BrowsedPageStatus.NOT_READY


# Tag processing


def _seek_whitespace(raw: str, index: int) -> int:
    while index < len(raw) and not raw[index].isspace():
        index += 1
    return index


def _seek_tag_start(raw: str, index: int) -> int:
    while index < len(raw):
        character = raw[index]
        if character.isalnum():
            break
        # A token opening with an invalid character is skipped whole
        if character not in TAG_DELIMITERS:
            index = _seek_whitespace(raw, index + 1)
        index += 1
    return index


def _add_tag(raw: str, start: int, end: int, tags: dict[str, None], limits: ProfileLimits) -> None:
    if raw[end - 1] in TAG_INNER_CHARACTERS:
        end -= 1
    if limits.min_tag_length <= end - start <= limits.max_tag_length:
        tags[raw[start:end].lower()] = None


def _process_tag(raw: str, start: int, tags: dict[str, None], limits: ProfileLimits) -> int:
    index = start + 1
    previous_alphanumeric = True

    while index < len(raw):
        character = raw[index]
        if character.isalnum():
            previous_alphanumeric = True
        elif character in TAG_INNER_CHARACTERS:
            if not previous_alphanumeric:
                # Successive inner characters invalidate the rest of the token
                return _seek_whitespace(raw, index + 1)
            previous_alphanumeric = False
        elif character in TAG_DELIMITERS:
            break
        else:
            return _seek_whitespace(raw, index + 1)
        index += 1

    _add_tag(raw, start, index, tags, limits)
    return index


def _process_raw_tag(raw: str, tags: dict[str, None], limits: ProfileLimits) -> None:
    index = 0
    while (index := _seek_tag_start(raw, index)) < len(raw):
        index = _process_tag(raw, index, tags, limits)
        if len(tags) >= limits.max_tags or index >= len(raw):
            break


def process_tags(raw_tags: list[str] | tuple[str, ...], limits: ProfileLimits) -> list[str]:
    """Normalize raw site tags into searchable profile tags.

    Each raw tag may hold several words. Words are split on the permitted
    delimiters; a single hyphen may join alphanumeric runs, while any other
    character drops the word it appears in.

    Args:
    ----
        raw_tags: Tags as extracted from the page
        limits: Tag length and count limits

    Returns:
    -------
        Lowercased, deduplicated tags in first-seen order

    """
    tags: dict[str, None] = {}
    for raw_tag in raw_tags:
        if len(tags) >= limits.max_tags:
            break
        _process_raw_tag(raw_tag, tags, limits)
    return list(tags)


# Display names


def truncate_with_ellipsis(text: str, max_length: int) -> str:
    """Shorten ``text`` to ``max_length`` characters, ending in "..."."""
    if len(text) <= max_length:
        return text
    return text[: max_length - len(ELLIPSIS)] + ELLIPSIS


def compound_display_name(title: str, owner_name: str, limits: ProfileLimits) -> str:
    """Join a title and owner name, truncating only the title.

    The owner name is kept whole, so the result may still exceed the limit.
    """
    allowance = limits.max_display_name_length - len(owner_name) - 1
    # Fewer than four characters would leave nothing but the ellipsis
    if len(title) > allowance and allowance > len(ELLIPSIS):
        title = truncate_with_ellipsis(title, allowance)
    return title + DISPLAY_NAME_SEPARATOR + owner_name


def build_profile(
    result: ExtractionResult, adapter: ContentAdapter, limits: ProfileLimits
) -> BrowsedPageResult:
    """Turn one extraction result into the host's browsed page result.

    Args:
    ----
        result: Outcome of ``ContentAdapter.try_extract``
        adapter: Adapter that produced the result, used to rebuild URLs
        limits: Host-side length and count limits

    Returns:
    -------
        BrowsedPageResult carrying a profile only when every limit holds

    """
    if result.status is ExtractionStatus.NOT_READY:
        return BrowsedPageResult(BrowsedPageStatus.NOT_READY)
    if result.status is ExtractionStatus.NO_ITEM or result.item is None:
        return BrowsedPageResult(BrowsedPageStatus.NO_PROFILE)

    item = result.item
    profile = _profile_from_item(item, adapter, limits)
    if profile is None:
        logger.debug(f"{item.site.value}: item {item.item_id[:20]!r} exceeds profile limits")
        return BrowsedPageResult(BrowsedPageStatus.NO_PROFILE)
    return BrowsedPageResult(BrowsedPageStatus.PROFILE, profile)


def _profile_from_item(
    item: ItemIdentity, adapter: ContentAdapter, limits: ProfileLimits
) -> ItemProfile | None:
    owner_name = item.display_name.owner_name
    if owner_name is not None:
        display_name = compound_display_name(item.display_name.title, owner_name, limits)
    else:
        display_name = truncate_with_ellipsis(
            item.display_name.title, limits.max_display_name_length
        )

    media_reference = None
    if item.media_reference is not None:
        media_reference = MEDIA_REFERENCE_SEPARATOR.join(item.media_reference)

    if len(item.item_id) > limits.max_item_id_length:
        return None
    if item.owner_id is not None and len(item.owner_id) > limits.max_owner_id_length:
        return None
    if len(display_name) > limits.max_display_name_length:
        return None
    if media_reference is not None and len(media_reference) > limits.max_media_reference_length:
        return None

    return ItemProfile(
        site=item.site,
        item_id=item.item_id,
        owner_id=item.owner_id,
        display_name=display_name,
        media_reference=media_reference,
        tags=process_tags(item.tags, limits) if item.tags is not None else [],
        item_url=_within_limit(adapter.item_url(item), limits),
        thumbnail_url=_within_limit(adapter.thumbnail_url(item), limits),
        large_image_url=_within_limit(adapter.large_image_url(item), limits),
        site_label=adapter.display_label,
    )


def _within_limit(url: str | None, limits: ProfileLimits) -> str | None:
    if url is None or len(url) > limits.max_url_length:
        return None
    return url
