"""SmugMug gallery adapter.

A focused lightbox takes precedence over the SmugMug-style gallery it opens
from. Either way the owner is the subdomain of the photo link, falling back
to the og:url meta tag when images are served from ``photos.smugmug.com``,
and the media reference is parsed from the canonical og:image URL::

    https://<owner>.smugmug.com/<album path>/i-<id>/0/<size>/<filename>-<size>.<suffix>

SmugMug has no separate owner display name, so the record carries a title
only; a non-empty caption stands in for a missing title.
"""

from enum import Enum

from bs4 import Tag

from ..base.context import PageContext
from ..base.dom import (
    Node,
    background_image,
    element_by_id,
    first_by_class_names,
    get_attribute,
    has_class_name,
    is_tag,
    text_content,
    url_property,
)
from ..base.models import ContentAdapter, ItemIdentity, Site, WireField, register_adapter
from ..base.pipeline import FieldPipeline
from ..base.utils import nth_last_index_of
from ..base.validators import non_empty

SMUGMUG_SUFFIX = ".smugmug.com/"
SHARED_IMAGE_HOST = "photos"


class SmugMugView(Enum):
    """Views, as (title info class names, keyword class names)."""

    LIGHTBOX = (("sm-lightbox-info",), ("sm-lightbox-info", "sm-lightbox-keywords"))
    GALLERY = (("sm-tile-info",), ("sm-tile-info", "sm-tile-keywords"))

    @property
    def info_class_names(self) -> tuple[str, ...]:
        return self.value[0]

    @property
    def keyword_class_names(self) -> tuple[str, ...]:
        return self.value[1]


def photo_id_from_link(photo_link: str) -> str | None:
    """Return the ID following the last ``/i-`` of a gallery link."""
    start = photo_link.rfind("/i-")
    if start == -1:
        return None
    start += len("/i-")
    # Tolerate a trailing slash
    end = photo_link.find("/", start)
    return non_empty(photo_link[start:] if end == -1 else photo_link[start:end])


def lightbox_photo_id(image_link: str) -> str | None:
    """Return the ID from ``.../i-<id>/0/<size>/<file>`` of a lightbox image."""
    start = nth_last_index_of(image_link, "/", 4)
    if start == -1 or not image_link.startswith("/i-", start):
        return None
    start += len("/i-")
    end = image_link.find("/", start)
    if end == -1:
        return None
    return non_empty(image_link[start:end])


def user_id_from_link(photo_link: str) -> str | None:
    """Return the owner subdomain of a ``<owner>.smugmug.com`` link."""
    domain_start = photo_link.find("://")
    if domain_start == -1:
        return None
    domain_start += len("://")

    suffix_start = photo_link.find(SMUGMUG_SUFFIX, domain_start)
    if suffix_start == -1:
        return None
    first_slash = photo_link.find("/", domain_start)
    first_dot = photo_link.find(".", domain_start)
    if first_slash <= suffix_start or first_dot != suffix_start:
        return None

    user_id = photo_link[domain_start:suffix_start]
    if user_id == SHARED_IMAGE_HOST:
        return None
    return non_empty(user_id)


def parse_image_source(image_source: str, photo_id: str) -> tuple[str, str, str] | None:
    """Split an image URL into album path, filename and suffix.

    The folder after the album path must be ``i-<photo_id>``.
    """
    if "?" in image_source:
        return None

    album_start = image_source.find(SMUGMUG_SUFFIX)
    if album_start == -1:
        return None
    album_start += len(SMUGMUG_SUFFIX)

    filename_start = image_source.rfind("/") + 1
    if filename_start == 0:
        return None
    suffix_dot = image_source.rfind(".")
    if suffix_dot <= filename_start:
        return None
    suffix = image_source[suffix_dot + 1 :]

    # Filename ends at the hyphen before the non-blank size code
    size_hyphen = image_source.rfind("-", 0, suffix_dot - 1)
    if size_hyphen <= filename_start:
        return None
    filename = image_source[filename_start:size_hyphen]

    album_end = nth_last_index_of(image_source, "/", 3, filename_start - 2)
    if album_end == -1 or not image_source.startswith("/i-" + photo_id, album_end):
        return None
    return image_source[album_start:album_end], filename, suffix


@register_adapter(Site.SMUGMUG)
class SmugMugAdapter(ContentAdapter):
    """Adapter for smugmug.com galleries."""

    host_suffix = "smugmug.com"
    display_label = "SmugMug"
    wire_fields = (
        WireField.ITEM_ID,
        WireField.OWNER_ID,
        WireField.TITLE,
        WireField.MEDIA_REFERENCE,
        WireField.TAGS,
    )

    @property
    def site(self) -> Site:
        return Site.SMUGMUG

    def detect_view(self, context: PageContext):
        """Return the active view and its root element, or None."""
        # Hidden lightboxes switch to sm-lightbox-hidden
        lightbox = first_by_class_names(["sm-lightbox-focused"], context.document, "div")
        if lightbox is not None:
            return SmugMugView.LIGHTBOX, lightbox

        gallery = element_by_id(context.document, "sm-gallery", "div")
        if gallery is not None and has_class_name(gallery, "sm-gallery-smugmug"):
            container = first_by_class_names(["sm-gallery-image-container"], gallery, "div")
            if container is not None:
                return SmugMugView.GALLERY, container
        return None

    def extract_active_item(self, context: PageContext) -> ItemIdentity | None:
        detected = self.detect_view(context)
        if detected is None:
            return None
        view, root = detected

        resolved = (
            FieldPipeline(f"smugmug/{view.name.lower()}")
            .bind("photo_link", lambda r: self._photo_link(context, view, root))
            .field(WireField.ITEM_ID, lambda r: self._photo_id(view, r["photo_link"]))
            .field(
                WireField.OWNER_ID,
                lambda r: user_id_from_link(r["photo_link"])
                or self._user_id_from_meta(context, r["item_id"]),
            )
            .field(WireField.TITLE, lambda r: self._photo_title(root, view.info_class_names))
            .field(
                WireField.MEDIA_REFERENCE,
                lambda r: self._media_reference_from_meta(context, r["item_id"]),
            )
            .field(WireField.TAGS, lambda r: self._tags(root, view.keyword_class_names))
            .run()
        )
        return self.assemble(resolved)

    def _photo_link(self, context: PageContext, view: SmugMugView, root: Tag) -> str | None:
        if view is SmugMugView.LIGHTBOX:
            return self._lightbox_image_link(context, root)
        return self._gallery_photo_link(context, root)

    @staticmethod
    def _photo_id(view: SmugMugView, photo_link: str) -> str | None:
        if view is SmugMugView.LIGHTBOX:
            return lightbox_photo_id(photo_link)
        return photo_id_from_link(photo_link)

    @staticmethod
    def _lightbox_image_link(context: PageContext, lightbox: Tag) -> str | None:
        image = first_by_class_names(["sm-lightbox-image"], lightbox, "img")
        if image is None:
            return None
        background = background_image(image, context.url)
        if background.strip():
            return background
        return url_property(image, "src", context.url)

    @staticmethod
    def _gallery_photo_link(context: PageContext, container: Tag) -> str | None:
        link = first_by_class_names(["sm-tile-content"], container, "a")
        if link is None:
            return None
        return url_property(link, "href", context.url)

    @staticmethod
    def _user_id_from_meta(context: PageContext, photo_id: str) -> str | None:
        # Only the first og:url tag is considered
        for meta in context.meta_elements():
            if get_attribute(meta, "property") != "og:url":
                continue
            content = get_attribute(meta, "content") or ""
            if content.endswith("/i-" + photo_id):
                return user_id_from_link(content)
            return None
        return None

    @staticmethod
    def _media_reference_from_meta(context: PageContext, photo_id: str):
        for meta in context.meta_elements():
            if get_attribute(meta, "property") == "og:image":
                return parse_image_source(get_attribute(meta, "content") or "", photo_id)
        return None

    @staticmethod
    def _photo_title(root: Node, info_class_names) -> str | None:
        info = first_by_class_names(info_class_names, root, "div")
        if info is None:
            return None

        name = None
        caption = None
        for child in info.children:
            if not isinstance(child, Tag):
                continue
            data_name = get_attribute(child, "data-name")
            if data_name == "Title":
                name = text_content(child).strip()
            elif data_name == "CaptionRaw":
                caption = text_content(child).strip()

        # A caption stands in for an empty title
        if name:
            return name
        if caption is not None:
            return caption
        return ""

    @staticmethod
    def _tags(root: Node, keyword_class_names) -> list[str]:
        keywords = first_by_class_names(keyword_class_names, root, "p")
        if keywords is None:
            return []
        return [
            text_content(child)
            for child in keywords.children
            if is_tag(child, "a") and has_class_name(child, "sm-muted")
        ]

    def _image_url(self, item: ItemIdentity, size_code: str) -> str:
        album, filename, suffix = item.media_reference
        return (
            f"https://{item.owner_id}.smugmug.com/{album}/i-{item.item_id}/0/{size_code}/"
            f"{filename}-{size_code}.{suffix}"
        )

    def item_url(self, item: ItemIdentity) -> str | None:
        album = item.media_reference[0]
        return f"http://{item.owner_id}.smugmug.com/{album}/i-{item.item_id}"

    def thumbnail_url(self, item: ItemIdentity) -> str | None:
        return self._image_url(item, "Th")

    def large_image_url(self, item: ItemIdentity) -> str | None:
        return self._image_url(item, "L")

    def full_name(self, item: ItemIdentity) -> str:
        return f"{self.short_name(item)} by {item.owner_id}"
