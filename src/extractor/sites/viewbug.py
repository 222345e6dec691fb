"""ViewBug photo page adapter.

Photo pages may render the photo inside the ``photoframe`` iframe; when that
frame is absent or inaccessible the top document is searched instead. The
photo ID comes from the copy-protection overlay and is checked against the
image URL, which embeds it as ``/media/mediafiles/<key>/<id>_<size>.jpg``.
"""

from ..base.context import PageContext
from ..base.dom import (
    Node,
    element_by_id,
    first_by_class_names,
    get_attribute,
    text_content,
    url_property,
)
from ..base.models import ContentAdapter, ItemIdentity, Site, WireField, register_adapter
from ..base.pipeline import FieldPipeline
from ..base.utils import trim_url_argument
from ..base.validators import display_name, non_empty

MEDIA_FILES_MARKER = "/media/mediafiles/"
MEDIA_BASE_URL = "http://www.viewbug.com/media/mediafiles/"
DETAILS_CLASS_NAMES = ("main_content", "topphoto", "profile", "details")


@register_adapter(Site.VIEWBUG)
class ViewBugAdapter(ContentAdapter):
    """Adapter for viewbug.com photo pages."""

    host_suffix = "viewbug.com"
    display_label = "ViewBug"
    wire_fields = (
        WireField.ITEM_ID,
        WireField.OWNER_ID,
        WireField.DISPLAY_NAME,
        WireField.MEDIA_KEY,
        WireField.TAGS,
    )

    @property
    def site(self) -> Site:
        return Site.VIEWBUG

    @staticmethod
    def root_context(context: PageContext) -> PageContext:
        """Return the photo frame's document, or the page itself."""
        frame = element_by_id(context.document, "photoframe", "iframe")
        if frame is not None:
            frame_context = context.frame_document(frame)
            if frame_context is not None:
                return frame_context
        return context

    def extract_active_item(self, context: PageContext) -> ItemIdentity | None:
        root = self.root_context(context)
        document = root.document
        resolved = (
            FieldPipeline("viewbug")
            .field(WireField.ITEM_ID, lambda r: self._photo_id(document))
            .bind(
                "details",
                lambda r: first_by_class_names(DETAILS_CLASS_NAMES, document, "div"),
            )
            .field(WireField.OWNER_ID, lambda r: self._photographer_id(r["details"]))
            .field(
                WireField.DISPLAY_NAME,
                lambda r: self._display_name(document, r["details"]),
            )
            .field(WireField.MEDIA_KEY, lambda r: self._thumbnail_id(root, r["item_id"]))
            .field(WireField.TAGS, lambda r: self._tags(document))
            .run()
        )
        return self.assemble(resolved)

    @staticmethod
    def _photo_id(document: Node) -> str | None:
        wrapper = element_by_id(document, "photo-wrapper", "div")
        if wrapper is None:
            return None
        # Read from the overlay so the image URL can be checked against it
        overlay = first_by_class_names(["protect-photo"], wrapper, "div")
        if overlay is None:
            return None
        photo_id = get_attribute(overlay, "media_id")
        return non_empty(photo_id.strip()) if photo_id is not None else None

    @staticmethod
    def _photographer_id(details) -> str | None:
        links = details.find_all("a")
        if len(links) != 1:
            return None
        user_id = get_attribute(links[0], "user_id")
        return non_empty(user_id.strip()) if user_id is not None else None

    @staticmethod
    def _display_name(document: Node, details):
        photo = element_by_id(document, "main_image", "img")
        if photo is None:
            return None
        title = (get_attribute(photo, "alt") or "").strip()

        headings = details.find_all("h6")
        if len(headings) != 1:
            return None
        return display_name(title, text_content(headings[0]).strip())

    @staticmethod
    def _thumbnail_id(root: PageContext, photo_id: str) -> str | None:
        photo = element_by_id(root.document, "main_image", "img")
        if photo is None:
            return None

        photo_url = trim_url_argument(url_property(photo, "src", root.url))
        start = photo_url.find(MEDIA_FILES_MARKER)
        if start == -1:
            return None
        start += len(MEDIA_FILES_MARKER)
        end = photo_url.rfind("/" + photo_id + "_")
        if end < start:
            return None
        return non_empty(photo_url[start:end])

    @staticmethod
    def _tags(document: Node) -> list[str] | None:
        info = element_by_id(document, "photo-info", "div")
        if info is None:
            return None

        # No tags container when the photo is untagged
        container = first_by_class_names(["tags"], info, "div")
        if container is None:
            return []
        return [
            tag for tag in (text_content(link) for link in container.find_all("a")) if tag
        ]

    def item_url(self, item: ItemIdentity) -> str | None:
        return f"http://www.viewbug.com/photo/{item.item_id}"

    def thumbnail_url(self, item: ItemIdentity) -> str | None:
        return f"{MEDIA_BASE_URL}{item.media_key()}/{item.item_id}_200x200.jpg"

    def large_image_url(self, item: ItemIdentity) -> str | None:
        return f"{MEDIA_BASE_URL}{item.media_key()}/{item.item_id}_large.jpg"
