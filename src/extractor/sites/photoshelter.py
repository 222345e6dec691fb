"""PhotoShelter photo page adapter.

PhotoShelter serves two generations of pages. Pages on the newer Beam
platform expose ``window.C2_CFG.customEnv`` and render one of a handful of
themes, each with its own rule for whether the single-image view is on top.
Everything else is an archive or legacy "classic" page, handled in order:

1. the default archive view of a single photo (``/img-get2/`` links)
2. the classic single photo view (``/img-get/`` links)
3. the classic portfolio slider
4. a classic page embedding a Beam slideshow in an iframe

Archive and classic pages name the owner only through the
``<owner>.photoshelter.com`` host. Titles that are really uploaded
filenames are replaced by the description, or left empty, so that the same
photo reads identically whichever view it was browsed from.
"""

from enum import Enum
from typing import Any

from bs4 import Tag

from ..base.context import PageContext
from ..base.dom import (
    Node,
    all_by_class_names,
    background_image,
    child_elements,
    element_by_id,
    first_by_class_names,
    get_attribute,
    has_class_name,
    is_tag,
    pixel_left,
    text_content,
    url_property,
)
from ..base.models import ContentAdapter, ItemIdentity, Site, WireField, register_adapter
from ..base.pipeline import FieldPipeline
from ..base.utils import get_path, object_exists
from ..base.validators import looks_like_filename, non_empty

# PhotoShelter's list of supported upload types
FILENAME_EXTENSIONS = (".jpg", ".tif", ".tiff", ".raw", ".psd", ".dng", ".pdf")
HOST_SUFFIX = ".photoshelter.com"
THEMED_IMAGE_PREFIX = "/img-get2/"
CLASSIC_IMAGE_PREFIX = "/img-get/"
IMAGE_BASE_URL = "http://cdn.c.photoshelter.com/img-get2/"


class PhotoShelterTheme(Enum):
    """Supported Beam themes, as (theme name, gallery class name, gallery tag)."""

    MARQUEE = ("Marquee", "gallerySingleImage", "section")
    PROMENADE = ("Promenade", "gallerySingleImage", "section")
    SHUFFLE = ("Shuffle", "gallerySingleImage", "section")
    ELEMENT = ("Element", "gallerySingleImage", "section")
    EAST = ("East", "gallerySingleImage", "section")
    DOWNTOWN = ("Downtown", "gallerySingleImage", "section")
    PIVOT = ("Pivot", "gallerySingleImage", "section")
    SONNET = ("Sonnet", "slideShow", "div")

    @property
    def theme_name(self) -> str:
        return self.value[0]

    @property
    def gallery_class_name(self) -> str:
        return self.value[1]

    @property
    def gallery_tag(self) -> str:
        return self.value[2]

    @classmethod
    def from_name(cls, theme_name: Any) -> "PhotoShelterTheme | None":
        # Horizon has no single active photo and is left unsupported
        for theme in cls:
            if theme.theme_name == theme_name:
                return theme
        return None


class PhotoShelterView(Enum):
    """Archive and classic page variants, in detection order."""

    ARCHIVE = "archive"
    CLASSIC = "classic"
    CLASSIC_PORTFOLIO = "classic_portfolio"
    EMBEDDED_SLIDESHOW = "embedded_slideshow"


def is_photo_filename(text: str) -> bool:
    return looks_like_filename(text, FILENAME_EXTENSIONS)


def photo_id_from_image_link(image_link: str, prefix: str) -> str | None:
    """Return the path segment following ``prefix`` in an image link."""
    start = image_link.find(prefix)
    if start == -1:
        return None
    start += len(prefix)
    end = image_link.find("/", start)
    if end == -1:
        return None
    return non_empty(image_link[start:end])


def non_filename_title(parent: Tag, heading_tag: str, description_tag: str) -> str:
    """Pick a title from the heading and description children of ``parent``.

    Neither element carries a class name, so each is taken to be the only
    child of its kind. A missing or filename-like heading falls back to the
    description.

    Args:
    ----
        parent: Element holding the photo heading and description
        heading_tag: Tag name of the heading child
        description_tag: Tag name of the description child

    Returns:
    -------
        The title, or an empty string for an untitled photo

    """
    name = None
    description = None
    for child in child_elements(parent):
        if child.name == heading_tag:
            name = text_content(child).strip()
        elif child.name == description_tag:
            description = text_content(child).strip()

    if name is not None and not is_photo_filename(name):
        return name
    if description is not None and not is_photo_filename(description):
        return description
    return ""


def legacy_photographer_id(hostname: str) -> str | None:
    """Return the owner subdomain of ``<owner>.photoshelter.com``."""
    end = hostname.find(".")
    if end == -1 or end != hostname.find(HOST_SUFFIX):
        return None
    if end + len(HOST_SUFFIX) != len(hostname):
        return None
    user_id = hostname[:end]
    if user_id == "www":
        return None
    return non_empty(user_id)


def themed_photo_id(gallery: Node, base_url: str) -> str | None:
    image_stage = first_by_class_names(["ImageStage", "current"], gallery, "div")
    if image_stage is None:
        return None
    return photo_id_from_image_link(background_image(image_stage, base_url), THEMED_IMAGE_PREFIX)


def themed_photo_title(gallery: Node) -> str | None:
    content = first_by_class_names(["MetaViewer", "content"], gallery, "div")
    if content is None:
        return None
    return non_filename_title(content, "h1", "div")


@register_adapter(Site.PHOTOSHELTER)
class PhotoShelterAdapter(ContentAdapter):
    """Adapter for photoshelter.com photographer sites."""

    host_suffix = "photoshelter.com"
    display_label = "PhotoShelter"
    wire_fields = (WireField.ITEM_ID, WireField.OWNER_ID, WireField.TITLE)
    script_globals = ("C2_CFG",)

    @property
    def site(self) -> Site:
        return Site.PHOTOSHELTER

    def extract_active_item(self, context: PageContext) -> ItemIdentity | None:
        if object_exists(context.script_state, "C2_CFG", "customEnv"):
            pipeline = self._themed_pipeline(context)
        else:
            pipeline = self._legacy_pipeline(context)
        if pipeline is None:
            return None
        return self.assemble(pipeline.run())

    # Beam themes

    def detect_theme(self, context: PageContext) -> tuple[PhotoShelterTheme, Tag] | None:
        """Return the active theme and its gallery element, or None."""
        theme = PhotoShelterTheme.from_name(
            get_path(context.script_state, "C2_CFG", "customEnv", "theme_name")
        )
        if theme is None:
            return None
        gallery = first_by_class_names([theme.gallery_class_name], context.document, theme.gallery_tag)
        if gallery is None:
            return None
        return theme, gallery

    def is_photo_visible(self, context: PageContext, theme: PhotoShelterTheme, gallery: Tag) -> bool:
        """Check the single-image view is not hidden behind a grid or gallery index."""
        if theme is PhotoShelterTheme.MARQUEE:
            mode_index = element_by_id(context.document, "mode-index", "div")
            return has_class_name(mode_index, "collapse") and self._thumb_viewer_hidden(
                gallery, "ThumbViewer"
            )
        if theme is PhotoShelterTheme.PROMENADE:
            # The grid view moves the image stage under stack-top, marked hidden
            image_stage = first_by_class_names(
                ["stack-top", "gallerySingleImage", "ImageStage"], context.document, "div"
            )
            return image_stage is not None and not has_class_name(image_stage, "hidden")
        if theme in (PhotoShelterTheme.SHUFFLE, PhotoShelterTheme.EAST, PhotoShelterTheme.PIVOT):
            mode_index = element_by_id(context.document, "mode-index", "div")
            return has_class_name(mode_index, "stack")
        if theme is PhotoShelterTheme.ELEMENT:
            return self._thumb_viewer_hidden(gallery, "ThumbViewer")
        if theme is PhotoShelterTheme.DOWNTOWN:
            return self._thumb_viewer_hidden(gallery, "ThumbFocus")
        return has_class_name(gallery, "on")

    @staticmethod
    def _thumb_viewer_hidden(gallery: Tag, class_name: str) -> bool:
        # The thumbnail viewer gains 'on' while it covers the photo
        viewer = first_by_class_names([class_name], gallery)
        return viewer is not None and not has_class_name(viewer, "on")

    def _themed_pipeline(self, context: PageContext) -> FieldPipeline | None:
        detected = self.detect_theme(context)
        if detected is None:
            return None
        theme, gallery = detected
        if not self.is_photo_visible(context, theme, gallery):
            return None

        custom_env = get_path(context.script_state, "C2_CFG", "customEnv")
        return (
            FieldPipeline(f"photoshelter/{theme.name.lower()}")
            .field(WireField.ITEM_ID, lambda r: themed_photo_id(gallery, context.url))
            .field(WireField.OWNER_ID, lambda r: self._themed_photographer_id(custom_env))
            .field(
                WireField.TITLE,
                lambda r: self._themed_photo_title(context, theme, gallery, r["item_id"]),
            )
        )

    @staticmethod
    def _themed_photographer_id(custom_env: Any) -> str | None:
        label = get_path(custom_env, "label")
        if not isinstance(label, str):
            return None
        return non_empty(label.strip())

    def _themed_photo_title(
        self, context: PageContext, theme: PhotoShelterTheme, gallery: Tag, photo_id: str
    ) -> str | None:
        if theme is PhotoShelterTheme.PIVOT:
            return self._pivot_photo_title(context, photo_id)
        return themed_photo_title(gallery)

    @staticmethod
    def _pivot_photo_title(context: PageContext, photo_id: str) -> str | None:
        # Pivot keeps the metadata with each gallery image, as h2 and p
        for image in all_by_class_names(["stack-top", "GalleryViewer", "img"], context.document):
            if get_attribute(image, "data-index") != photo_id:
                continue
            meta = first_by_class_names(["meta"], image, "div")
            if meta is not None:
                return non_filename_title(meta, "h2", "p")
        return None

    # Archive and classic pages

    def detect_view(self, context: PageContext) -> tuple[PhotoShelterView, Tag, PageContext] | None:
        """Return the legacy view, its root element and the document holding it."""
        image = self._content_image(context, ["imageWrap", "imageWidget"])
        if image is not None:
            return PhotoShelterView.ARCHIVE, image, context

        image = self._content_image(context, ["imageWidget"])
        if image is not None:
            return PhotoShelterView.CLASSIC, image, context

        slider = first_by_class_names(["PSPortfolio", "psport_slider"], context.document, "div")
        if slider is not None:
            return PhotoShelterView.CLASSIC_PORTFOLIO, slider, context

        embedded = self._embedded_slideshow(context)
        if embedded is not None:
            frame_context, base = embedded
            return PhotoShelterView.EMBEDDED_SLIDESHOW, base, frame_context
        return None

    @staticmethod
    def _content_image(context: PageContext, class_names: list[str]) -> Tag | None:
        widget = first_by_class_names(class_names, context.document, "div")
        if widget is None:
            return None
        for image in widget.find_all("img"):
            if get_attribute(image, "itemprop") == "contentURL":
                return image
        return None

    @staticmethod
    def _embedded_slideshow(context: PageContext) -> tuple[PageContext, Tag] | None:
        embed = first_by_class_names(["psEmbed"], context.document, "div")
        if embed is None or get_attribute(embed, "data-ps-embed-type") != "slideshow":
            return None
        for child in child_elements(embed):
            if not is_tag(child, "iframe"):
                continue
            # Frames from the photographer's own domain are inaccessible
            frame_context = context.frame_document(child)
            if frame_context is None:
                continue
            base = element_by_id(frame_context.document, "mode-slideshow", "div")
            if base is not None:
                return frame_context, base
        return None

    def _legacy_pipeline(self, context: PageContext) -> FieldPipeline | None:
        detected = self.detect_view(context)
        if detected is None:
            return None
        view, root, root_context = detected
        pipeline = FieldPipeline(f"photoshelter/{view.value}")

        if view is PhotoShelterView.CLASSIC_PORTFOLIO:
            pipeline.bind("slide", lambda r: self._active_portfolio_slide(root))
            pipeline.field(WireField.ITEM_ID, lambda r: self._portfolio_photo_id(context, r["slide"]))
        elif view is PhotoShelterView.EMBEDDED_SLIDESHOW:
            pipeline.field(WireField.ITEM_ID, lambda r: themed_photo_id(root, root_context.url))
        else:
            prefix = THEMED_IMAGE_PREFIX if view is PhotoShelterView.ARCHIVE else CLASSIC_IMAGE_PREFIX
            pipeline.field(
                WireField.ITEM_ID,
                lambda r: photo_id_from_image_link(url_property(root, "src", context.url), prefix),
            )

        pipeline.field(WireField.OWNER_ID, lambda r: legacy_photographer_id(context.hostname))

        if view is PhotoShelterView.CLASSIC_PORTFOLIO:
            pipeline.field(WireField.TITLE, lambda r: self._portfolio_photo_title(r["slide"]))
        elif view is PhotoShelterView.EMBEDDED_SLIDESHOW:
            pipeline.field(WireField.TITLE, lambda r: themed_photo_title(root))
        else:
            pipeline.field(WireField.TITLE, lambda r: self._legacy_photo_title(context, root))
        return pipeline

    @staticmethod
    def _legacy_photo_title(context: PageContext, image: Tag) -> str | None:
        """Read the title prefixing the document title.

        The document title matches the Beam views, where the in-page headings
        often do not. Titles themselves rarely contain the separator, and the
        gallery name may follow in a further segment.
        """
        document_title = context.title
        separator = document_title.find(" | ")
        if separator == -1:
            return None

        title = document_title[:separator].strip()
        if title and not is_photo_filename(title):
            return title
        # The alt text carries the description shown by the Beam views
        description = (get_attribute(image, "alt") or "").strip()
        if description and not is_photo_filename(description):
            return description
        return ""

    @staticmethod
    def _active_portfolio_slide(slider: Tag) -> Tag | None:
        offset = -pixel_left(slider)
        for child in child_elements(slider):
            if child.name == "div" and pixel_left(child) == offset:
                return child
        return None

    @staticmethod
    def _portfolio_photo_id(context: PageContext, slide: Tag) -> str | None:
        for child in child_elements(slide):
            if child.name != "img":
                continue
            photo_id = photo_id_from_image_link(
                url_property(child, "src", context.url), CLASSIC_IMAGE_PREFIX
            )
            if photo_id is not None:
                return photo_id
        return None

    @staticmethod
    def _portfolio_photo_title(slide: Tag) -> str | None:
        title = None

        headline = first_by_class_names(["psport_headline"], slide, "span")
        if headline is not None:
            name = text_content(headline).strip()
            if name and not is_photo_filename(name):
                return name
            title = ""

        caption = first_by_class_names(["psport_cap"], slide, "div")
        if caption is not None:
            description = text_content(caption).strip()
            title = description if description and not is_photo_filename(description) else ""
        return title

    def thumbnail_url(self, item: ItemIdentity) -> str | None:
        return f"{IMAGE_BASE_URL}{item.item_id}/fill=350x350"

    def large_image_url(self, item: ItemIdentity) -> str | None:
        return f"{IMAGE_BASE_URL}{item.item_id}/fit=1440x1440"

    def item_url(self, item: ItemIdentity) -> str | None:
        return f"http://{item.owner_id}.photoshelter.com/image/{item.item_id}"
