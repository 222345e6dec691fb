"""Pixoto image page adapter.

Pixoto shows an image either on its own page or as an overlay above another
page. In both cases the image is hosted by Google, at
``//lh<server>.googleusercontent.com/<path>=<size options>`` or, for older
images, ``//lh<server>.ggpht.com/...``.
"""

from enum import Enum

from bs4 import Tag

from ..base.context import PageContext
from ..base.dom import (
    Node,
    all_by_class_names,
    element_by_id,
    first_by_class_names,
    has_class_name,
    inline_style,
    is_tag,
    text_content,
    url_property,
)
from ..base.models import ContentAdapter, ItemIdentity, Site, WireField, register_adapter
from ..base.pipeline import FieldPipeline
from ..base.utils import is_integer_string, trim_url_argument
from ..base.validators import display_name, non_empty

IMAGE_HOSTS = (".googleusercontent.com/", ".ggpht.com/")
OWNER_INFO_CLASS_NAMES = ("image-title-bar", "image-title-bar-inner", "img-owner")
TAG_LIST_CLASS_NAMES = ("main-content", "image-attributes", "tags-list", "img-tags-list")


class PixotoView(Enum):
    """Image views, as the id of the displayed image element."""

    STANDALONE = "theImage"
    OVERLAY = "DETAIL_IMAGE"


def parse_image_url(photo_url: str) -> tuple[str, str] | None:
    """Split a Google-hosted image URL into its server and path IDs."""
    start = photo_url.find("://lh")
    if start == -1:
        return None
    start += len("://lh")

    for host in IMAGE_HOSTS:
        end = photo_url.find(host, start)
        if end != -1:
            server_id = photo_url[start:end]
            path_start = end + len(host)
            break
    else:
        return None

    options_start = photo_url.rfind("=")
    # The path ID never spans a slash
    if options_start <= path_start or photo_url.find("/", path_start) != -1:
        return None
    return server_id, photo_url[path_start:options_start]


@register_adapter(Site.PIXOTO)
class PixotoAdapter(ContentAdapter):
    """Adapter for pixoto.com image pages."""

    host_suffix = "pixoto.com"
    display_label = "Pixoto"
    wire_fields = (
        WireField.ITEM_ID,
        WireField.OWNER_ID,
        WireField.DISPLAY_NAME,
        WireField.MEDIA_REFERENCE,
        WireField.TAGS,
    )

    @property
    def site(self) -> Site:
        return Site.PIXOTO

    def detect_view(self, context: PageContext):
        """Return the view with its info and tags root elements, or None."""
        if has_class_name(context.body, "image-detail-pg"):
            root = element_by_id(context.document, "main", "div")
            if root is None:
                return None
            # Owner information sits outside the main element on standalone pages
            container = element_by_id(context.document, "container", "div")
            return PixotoView.STANDALONE, container, root

        overlay = self._visible_overlay(context)
        if overlay is None:
            return None
        return PixotoView.OVERLAY, overlay, overlay

    @staticmethod
    def _visible_overlay(context: PageContext) -> Tag | None:
        details = element_by_id(context.document, "image-1-details", "div")
        if details is None:
            return None
        parent = details.parent
        # Hidden overlays keep display:none until shown again
        if (
            is_tag(parent, "div")
            and has_class_name(parent, "image-detail-overlay")
            and inline_style(parent, "display") == "block"
        ):
            return parent
        return None

    def extract_active_item(self, context: PageContext) -> ItemIdentity | None:
        detected = self.detect_view(context)
        if detected is None:
            return None
        view, info_root, tags_root = detected

        resolved = (
            FieldPipeline(f"pixoto/{view.name.lower()}")
            .field(WireField.ITEM_ID, lambda r: self._photo_id(context))
            .bind(
                "owner_info",
                lambda r: first_by_class_names(OWNER_INFO_CLASS_NAMES, info_root, "div")
                if info_root is not None
                else None,
            )
            .field(WireField.OWNER_ID, lambda r: self._photographer_id(context, r["owner_info"]))
            .field(WireField.DISPLAY_NAME, lambda r: self._display_name(r["owner_info"]))
            .bind("photo_url", lambda r: self._photo_url(context, view))
            .field(WireField.MEDIA_REFERENCE, lambda r: parse_image_url(r["photo_url"]))
            .field(WireField.TAGS, lambda r: self._tags(tags_root))
            .run()
        )
        return self.assemble(resolved)

    @staticmethod
    def _photo_id(context: PageContext) -> str | None:
        path = context.pathname
        start = max(path.rfind("/"), path.rfind("-"))
        if start == -1:
            return None
        photo_id = path[start + 1 :]
        return photo_id if is_integer_string(photo_id) else None

    @staticmethod
    def _owner_link(owner_info: Tag) -> Tag | None:
        return first_by_class_names(["owner-link"], owner_info, "a")

    def _photographer_id(self, context: PageContext, owner_info: Tag) -> str | None:
        owner_link = self._owner_link(owner_info)
        if owner_link is None:
            return None
        link = trim_url_argument(url_property(owner_link, "href", context.url))
        start = link.rfind("/")
        if start == -1:
            return None
        return non_empty(link[start + 1 :])

    def _display_name(self, owner_info: Tag):
        # Untitled images have no title heading on standalone pages
        title_element = first_by_class_names(["image-title"], owner_info, "h1")
        title = text_content(title_element).strip() if title_element is not None else ""

        owner_link = self._owner_link(owner_info)
        if owner_link is None:
            return None
        return display_name(title, text_content(owner_link).strip())

    @staticmethod
    def _photo_url(context: PageContext, view: PixotoView) -> str | None:
        photo = element_by_id(context.document, view.value, "img")
        if photo is None:
            return None
        # The size options follow '=', so URL arguments must go first
        return trim_url_argument(url_property(photo, "src", context.url))

    @staticmethod
    def _tags(tags_root: Node) -> list[str] | None:
        # Present even when the image has no tags
        tag_list = first_by_class_names(TAG_LIST_CLASS_NAMES, tags_root, "ul")
        if tag_list is None:
            return None
        return [
            tag
            for tag in (text_content(element) for element in all_by_class_names(["tag"], tag_list))
            if tag
        ]

    def _image_url(self, item: ItemIdentity, size_options: str) -> str:
        server_id, path_id = item.media_reference
        return f"http://lh{server_id}.googleusercontent.com/{path_id}={size_options}"

    def item_url(self, item: ItemIdentity) -> str | None:
        return f"http://www.pixoto.com/images/{item.item_id}"

    def thumbnail_url(self, item: ItemIdentity) -> str | None:
        return self._image_url(item, "s100-c")

    def large_image_url(self, item: ItemIdentity) -> str | None:
        return self._image_url(item, "s900")
