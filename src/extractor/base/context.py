"""Read-only page context handed down the extraction pipeline.

A ``PageContext`` is a snapshot of everything an adapter may read: the page
location, the parsed document, its ready state, serialized window globals and
the documents of same-origin frames. It is built once per extraction attempt
and never kept past it.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urljoin, urlsplit

from bs4 import BeautifulSoup, Tag

HTML_PARSER = "html.parser"


@dataclass(frozen=True)
class PageContext:
    """Snapshot of a rendered page.

    Attributes
    ----------
        url: Location of the page
        document: Parsed document tree
        ready_state: Value of ``document.readyState`` at capture time
        script_state: Window globals by name, as JSON-like data
        frames: Frame documents keyed by iframe id or src, None when the
            frame is cross-origin
        debug: Forward caught faults to the adapter's debug sink

    """

    url: str
    document: BeautifulSoup
    ready_state: str = "complete"
    script_state: Mapping[str, Any] = field(default_factory=dict)
    frames: Mapping[str, "PageContext | None"] = field(default_factory=dict)
    debug: bool = False

    @classmethod
    def from_html(
        cls,
        url: str,
        html: str,
        ready_state: str = "complete",
        script_state: Mapping[str, Any] | None = None,
        frames: Mapping[str, "PageContext | None"] | None = None,
        debug: bool = False,
    ) -> "PageContext":
        """Parse ``html`` and wrap it in a context."""
        return cls(
            url=url,
            document=BeautifulSoup(html, HTML_PARSER),
            ready_state=ready_state,
            script_state=dict(script_state or {}),
            frames=dict(frames or {}),
            debug=debug,
        )

    @classmethod
    def from_snapshot(cls, snapshot: Mapping[str, Any], debug: bool = False) -> "PageContext":
        """Build a context from a serialized snapshot.

        Args:
        ----
            snapshot: Mapping with ``url`` and ``html`` keys and optional
                ``ready_state``, ``script_state`` and ``frames``; each frame
                is itself a snapshot or None

        Returns:
        -------
            PageContext for the snapshot

        Raises:
        ------
            ValueError: If the snapshot has no url or html

        """
        if "url" not in snapshot or "html" not in snapshot:
            raise ValueError("Page snapshot requires 'url' and 'html'")

        frames = {
            key: cls.from_snapshot(frame, debug) if frame is not None else None
            for key, frame in (snapshot.get("frames") or {}).items()
        }
        return cls.from_html(
            url=snapshot["url"],
            html=snapshot["html"],
            ready_state=snapshot.get("ready_state", "complete"),
            script_state=snapshot.get("script_state"),
            frames=frames,
            debug=debug,
        )

    @property
    def scheme(self) -> str:
        return urlsplit(self.url).scheme

    @property
    def hostname(self) -> str:
        return urlsplit(self.url).hostname or ""

    @property
    def pathname(self) -> str:
        return urlsplit(self.url).path or "/"

    @property
    def title(self) -> str:
        """Document title with runs of whitespace collapsed."""
        title_element = self.document.find("title")
        if title_element is None:
            return ""
        return " ".join(title_element.get_text().split())

    @property
    def body(self) -> Tag | None:
        return self.document.find("body")

    def element_by_id(self, element_id: str) -> Tag | None:
        return self.document.find(id=element_id)

    def meta_elements(self) -> list[Tag]:
        """Return the meta elements of the document head."""
        root = self.document.find("head") or self.document
        return root.find_all("meta")

    def resolve_url(self, reference: str) -> str:
        """Resolve a possibly relative reference against the page URL."""
        return urljoin(self.url, reference)

    def frame_document(self, frame_element: Tag) -> "PageContext | None":
        """Return the document of an iframe, or None when it is inaccessible."""
        key = frame_element.get("id")
        if key and key in self.frames:
            return self.frames[key]
        source = frame_element.get("src")
        if source:
            if source in self.frames:
                return self.frames[source]
            return self.frames.get(self.resolve_url(source))
        return None
