"""Site-agnostic base models for the multi-site extraction architecture.

This module defines the identity record every site adapter produces, the
tri-state result handed back to the host, and the adapter interface with its
registry. Site-specific knowledge lives in ``src.extractor.sites``.
"""

import logging
import traceback
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar

from .context import PageContext
from .utils import host_check

logger = logging.getLogger(__name__)


class Site(Enum):
    """Supported photo sites."""

    FLICKR = "flickr"
    FIVEHUNDRED_PX = "500px"
    IPERNITY = "ipernity"
    ONE_X = "1x"
    SEVENTY_TWO_DPI = "72dpi"
    PHOTOSHELTER = "photoshelter"
    PIXOTO = "pixoto"
    SMUGMUG = "smugmug"
    TRIPLEJ = "triplej"
    VIEWBUG = "viewbug"
    YOUPIC = "youpic"


class WireField(str, Enum):
    """Positional fields an adapter may place on the wire."""

    ITEM_ID = "item_id"
    OWNER_ID = "owner_id"
    # [title, owner name]
    DISPLAY_NAME = "display_name"
    # Title only, for sites without a separate owner name
    TITLE = "title"
    # Array of media tokens
    MEDIA_REFERENCE = "media_reference"
    # Single media token
    MEDIA_KEY = "media_key"
    TAGS = "tags"


class ExtractionStatus(Enum):
    """Outcome of a single extraction attempt."""

    NOT_READY = "not_ready"
    NO_ITEM = "no_item"
    FOUND = "found"


@dataclass(frozen=True)
class DisplayName:
    """Human readable title and owner name of an item.

    An empty title means untitled. ``owner_name`` is ``None`` for sites whose
    wire record carries a title only.
    """

    title: str
    owner_name: str | None = None


@dataclass(frozen=True)
class ItemIdentity:
    """Canonical identity of the item currently being viewed."""

    site: Site
    item_id: str
    owner_id: str | None
    display_name: DisplayName
    media_reference: tuple[str, ...] | None = None
    tags: tuple[str, ...] | None = None

    def media_key(self) -> str | None:
        """Return the single media token of one-token sites."""
        if not self.media_reference:
            return None
        return self.media_reference[0]

    def to_wire(self, fields: tuple[WireField, ...]) -> list[Any]:
        """Encode the record as a positional array.

        Args:
        ----
            fields: Ordered wire contract of the producing adapter

        Returns:
        -------
            Flat list with nested lists for pairs and tuples

        """
        encoded: list[Any] = []
        for wire_field in fields:
            if wire_field is WireField.ITEM_ID:
                encoded.append(self.item_id)
            elif wire_field is WireField.OWNER_ID:
                encoded.append(self.owner_id)
            elif wire_field is WireField.DISPLAY_NAME:
                encoded.append([self.display_name.title, self.display_name.owner_name])
            elif wire_field is WireField.TITLE:
                encoded.append(self.display_name.title)
            elif wire_field is WireField.MEDIA_REFERENCE:
                encoded.append(
                    list(self.media_reference)
                    if self.media_reference is not None
                    else None
                )
            elif wire_field is WireField.MEDIA_KEY:
                encoded.append(self.media_key())
            elif wire_field is WireField.TAGS:
                encoded.append(list(self.tags) if self.tags is not None else None)
        return encoded

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "site": self.site.value,
            "item_id": self.item_id,
            "owner_id": self.owner_id,
            "title": self.display_name.title,
            "owner_name": self.display_name.owner_name,
            "media_reference": (
                list(self.media_reference) if self.media_reference is not None else None
            ),
            "tags": list(self.tags) if self.tags is not None else None,
        }


@dataclass(frozen=True)
class ExtractionResult:
    """Tri-state result of one extraction attempt.

    ``NOT_READY`` asks the host to call again, ``NO_ITEM`` is terminal for the
    page view and ``FOUND`` carries a fully resolved record.
    """

    status: ExtractionStatus
    item: ItemIdentity | None = None
    wire_fields: tuple[WireField, ...] = field(default=(), repr=False)

    @classmethod
    def not_ready(cls) -> "ExtractionResult":
        return cls(ExtractionStatus.NOT_READY)

    @classmethod
    def no_item(cls) -> "ExtractionResult":
        return cls(ExtractionStatus.NO_ITEM)

    @classmethod
    def found(
        cls, item: ItemIdentity, wire_fields: tuple[WireField, ...]
    ) -> "ExtractionResult":
        return cls(ExtractionStatus.FOUND, item, wire_fields)

    @property
    def ready(self) -> bool:
        return self.status is not ExtractionStatus.NOT_READY

    def to_wire(self) -> list[Any]:
        """Encode as ``[ready, flat_array | None]`` for the host transport."""
        if self.item is None:
            return [self.ready, None]
        return [True, self.item.to_wire(self.wire_fields)]


class ContentAdapter(ABC):
    """Abstract base class for all site adapters.

    An adapter knows where one site keeps the identity of the item being
    viewed, across every view variant the site renders. Subclasses declare
    their host, wire contract and the script globals they read, and implement
    ``extract_active_item``.
    """

    host_suffix: ClassVar[str] = ""
    display_label: ClassVar[str] = ""
    wire_fields: ClassVar[tuple[WireField, ...]] = ()
    optional_fields: ClassVar[frozenset[WireField]] = frozenset()
    # Window globals a live capture must serialize for this adapter
    script_globals: ClassVar[tuple[str, ...]] = ()

    def __init__(self, debug_sink: Callable[[str], None] | None = None):
        """Initialize the adapter.

        Args:
        ----
            debug_sink: Optional host callable receiving diagnostic text for
                faults caught while the page context has debugging enabled

        """
        self.debug_sink = debug_sink

    @property
    @abstractmethod
    def site(self) -> Site:
        """Return the site this adapter handles."""
        pass

    def host_matches(self, context: PageContext) -> bool:
        """Check whether the current page belongs to this adapter's site."""
        return host_check(context.url, self.host_suffix)

    def page_ready(self, context: PageContext) -> bool:
        """Check whether the host document has finished loading."""
        return context.ready_state == "complete"

    @abstractmethod
    def extract_active_item(self, context: PageContext) -> ItemIdentity | None:
        """Resolve the identity of the item being viewed.

        Args:
        ----
            context: Read-only snapshot of the current page

        Returns:
        -------
            A fully resolved record, or None when any required field is
            unresolved or fails cross-validation

        """
        pass

    def try_extract(self, context: PageContext) -> ExtractionResult:
        """Make one non-blocking extraction attempt.

        Every unexpected fault is caught here and reported as not ready.
        """
        try:
            if not self.host_matches(context):
                return ExtractionResult.no_item()
            if not self.page_ready(context):
                return ExtractionResult.not_ready()

            item = self.extract_active_item(context)
            if item is None:
                return ExtractionResult.no_item()
            return ExtractionResult.found(item, self.wire_fields)
        except Exception as e:
            logger.debug(f"{self.site.value}: extraction fault: {e}")
            if context.debug and self.debug_sink is not None:
                self.debug_sink(traceback.format_exc())
            return ExtractionResult.not_ready()

    def assemble(
        self,
        resolved: Mapping[str, Any] | None,
        *,
        display_name: DisplayName | None = None,
    ) -> ItemIdentity | None:
        """Build a record from pipeline output, all or nothing.

        Args:
        ----
            resolved: Pipeline output keyed by ``WireField`` values, or None
            display_name: Overrides the display name for title-only sites

        Returns:
        -------
            ItemIdentity if every field of the wire contract is present

        """
        if resolved is None:
            return None

        for wire_field in self.wire_fields:
            if wire_field in self.optional_fields:
                continue
            if wire_field is WireField.TITLE and display_name is not None:
                continue
            if resolved.get(wire_field.value) is None:
                logger.debug(f"{self.site.value}: missing {wire_field.value}")
                return None

        if display_name is None:
            display_name = resolved.get(WireField.DISPLAY_NAME.value)
        if display_name is None:
            display_name = DisplayName(resolved[WireField.TITLE.value])

        media = resolved.get(WireField.MEDIA_REFERENCE.value)
        if media is None and resolved.get(WireField.MEDIA_KEY.value) is not None:
            media = (resolved[WireField.MEDIA_KEY.value],)
        tags = resolved.get(WireField.TAGS.value)

        return ItemIdentity(
            site=self.site,
            item_id=resolved[WireField.ITEM_ID.value],
            owner_id=resolved.get(WireField.OWNER_ID.value),
            display_name=display_name,
            media_reference=tuple(media) if media is not None else None,
            tags=tuple(tags) if tags is not None else None,
        )

    # Host-side URL reconstruction. Sites override what they can rebuild.

    def item_url(self, item: ItemIdentity) -> str | None:
        return None

    def thumbnail_url(self, item: ItemIdentity) -> str | None:
        return None

    def large_image_url(self, item: ItemIdentity) -> str | None:
        return None

    def short_name(self, item: ItemIdentity) -> str:
        """Return the item's title, or a placeholder when untitled."""
        return item.display_name.title or "Untitled"

    def full_name(self, item: ItemIdentity) -> str:
        """Return a "title by owner" caption for the item."""
        owner = item.display_name.owner_name or "Unknown"
        return f"{self.short_name(item)} by {owner}"


class AdapterRegistry:
    """Registry for site adapters supporting auto-discovery."""

    _adapters: dict[Site, type[ContentAdapter]] = {}

    @classmethod
    def register(cls, site: Site, adapter_class: type[ContentAdapter]):
        """Register an adapter class for a site."""
        logger.debug(f"Registering adapter {adapter_class.__name__} for {site.value}")
        cls._adapters[site] = adapter_class

    @classmethod
    def get_adapter_class(cls, site: Site) -> type[ContentAdapter] | None:
        """Get the adapter class for a site."""
        return cls._adapters.get(site)

    @classmethod
    def get_available_sites(cls) -> list[Site]:
        """Get list of sites with registered adapters."""
        return list(cls._adapters.keys())

    @classmethod
    def is_site_supported(cls, site: Site) -> bool:
        """Check if a site has a registered adapter."""
        return site in cls._adapters


def register_adapter(site: Site):
    """Decorator to register an adapter class for a site.

    Usage:
        @register_adapter(Site.FLICKR)
        class FlickrAdapter(ContentAdapter):
            ...
    """

    def decorator(adapter_class: type[ContentAdapter]):
        AdapterRegistry.register(site, adapter_class)
        return adapter_class

    return decorator
