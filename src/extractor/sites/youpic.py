"""YouPic image page adapter.

Image files are named ``<owner id>_<key>.<ext>``; the owner ID and thumbnail
key are both read from the image URL, keeping the extension as-is since its
case varies between photos.
"""

from enum import Enum
from typing import Any

from ..base.context import PageContext
from ..base.dom import Node, first_by_class_names, text_content, url_property
from ..base.models import ContentAdapter, ItemIdentity, Site, WireField, register_adapter
from ..base.pipeline import FieldPipeline
from ..base.utils import get_path, stringify, trim_url_argument
from ..base.validators import canonical_title, display_name, ids_agree, non_empty

# The lightbox shows blank titles as Untitled; the state object keeps them raw
UNTITLED_SENTINELS = ("Untitled",)
IMAGE_BASE_URL = "https://df0179xsabjj8.cloudfront.net/"

LIGHTBOX_PHOTO_CLASS_NAMES = ("imdl", "imdl-image-box", "imdl-img", "imdl-box", "imdl-fullscreen")
LIGHTBOX_ASIDE_CLASS_NAMES = ("imdl", "imdl-aside")
LIGHTBOX_TAG_CLASS_NAMES = ("imdl-aside-info", "imdl-aside-story")
REGULAR_TAG_CLASS_NAMES = ("imgp-info", "imgp-info-aside", "imgp-aside-box", "imgp-desc")


class YouPicView(Enum):
    LIGHTBOX = "lightbox"
    REGULAR = "regular"


def photographer_id(photo_url: str) -> str | None:
    """Return the owner ID prefixing the image filename."""
    start = photo_url.rfind("/")
    if start == -1:
        return None
    start += 1
    end = photo_url.find("_", start)
    if end == -1:
        return None
    return non_empty(photo_url[start:end])


def thumbnail_id(photo_url: str, owner_id: str) -> str | None:
    """Return the filename after ``<owner id>_``, extension included."""
    start = photo_url.rfind("/" + owner_id + "_")
    if start == -1:
        return None
    return non_empty(photo_url[start + len(owner_id) + 2 :])


def photo_tags(start: Node, class_names) -> list[str] | None:
    paragraph = first_by_class_names(class_names, start, "p")
    if paragraph is None:
        return None
    return [tag for tag in (text_content(link) for link in paragraph.find_all("a")) if tag]


@register_adapter(Site.YOUPIC)
class YouPicAdapter(ContentAdapter):
    """Adapter for youpic.com image pages."""

    host_suffix = "youpic.com"
    display_label = "YouPic"
    wire_fields = (
        WireField.ITEM_ID,
        WireField.OWNER_ID,
        WireField.DISPLAY_NAME,
        WireField.MEDIA_KEY,
        WireField.TAGS,
    )
    script_globals = ("State",)

    @property
    def site(self) -> Site:
        return Site.YOUPIC

    def detect_view(self, context: PageContext):
        photo_box = first_by_class_names(LIGHTBOX_PHOTO_CLASS_NAMES, context.document, "div")
        if photo_box is not None:
            return YouPicView.LIGHTBOX, photo_box
        return YouPicView.REGULAR, None

    def extract_active_item(self, context: PageContext) -> ItemIdentity | None:
        view, photo_box = self.detect_view(context)
        if view is YouPicView.LIGHTBOX:
            pipeline = self._lightbox_pipeline(context, photo_box)
        else:
            pipeline = self._regular_pipeline(context)
        return self.assemble(pipeline.run())

    def _lightbox_pipeline(self, context: PageContext, photo_box) -> FieldPipeline:
        return (
            FieldPipeline("youpic/lightbox")
            .field(WireField.ITEM_ID, lambda r: self._lightbox_photo_id(context, photo_box))
            .bind("photo_url", lambda r: self._lightbox_photo_url(context, photo_box))
            .field(WireField.OWNER_ID, lambda r: photographer_id(r["photo_url"]))
            .bind(
                "aside",
                lambda r: first_by_class_names(
                    LIGHTBOX_ASIDE_CLASS_NAMES, context.document, "aside"
                ),
            )
            .field(WireField.DISPLAY_NAME, lambda r: self._lightbox_display_name(r["aside"]))
            .field(
                WireField.MEDIA_KEY,
                lambda r: thumbnail_id(r["photo_url"], r["owner_id"]),
            )
            .field(WireField.TAGS, lambda r: photo_tags(r["aside"], LIGHTBOX_TAG_CLASS_NAMES))
        )

    def _regular_pipeline(self, context: PageContext) -> FieldPipeline:
        image_state = get_path(context.script_state, "State", "image")
        return (
            FieldPipeline("youpic/regular")
            .field(WireField.ITEM_ID, lambda r: self._regular_photo_id(context))
            .check(
                "state_matches_url",
                lambda r: ids_agree(
                    r["item_id"], stringify(get_path(image_state, "image_id"))
                ),
            )
            .bind("photo_url", lambda r: self._regular_photo_url(image_state))
            .field(WireField.OWNER_ID, lambda r: photographer_id(r["photo_url"]))
            .field(WireField.DISPLAY_NAME, lambda r: self._regular_display_name(image_state))
            .field(
                WireField.MEDIA_KEY,
                lambda r: thumbnail_id(r["photo_url"], r["owner_id"]),
            )
            .field(
                WireField.TAGS,
                lambda r: photo_tags(context.document, REGULAR_TAG_CLASS_NAMES),
            )
        )

    @staticmethod
    def _lightbox_photo_id(context: PageContext, photo_box) -> str | None:
        links = photo_box.find_all("a")
        if len(links) != 1:
            return None

        link = trim_url_argument(url_property(links[0], "href", context.url))
        start = link.find("/image/")
        if start == -1:
            return None
        start += len("/image/")
        slash = link.find("/", start)
        if slash == -1:
            return non_empty(link[start:])
        if slash == len(link) - 1:
            return non_empty(link[start:slash])
        return None

    @staticmethod
    def _lightbox_photo_url(context: PageContext, photo_box) -> str | None:
        images = photo_box.find_all("img")
        if len(images) != 1:
            return None
        return trim_url_argument(url_property(images[0], "src", context.url))

    @staticmethod
    def _lightbox_display_name(aside):
        title_element = first_by_class_names(("imdl-aside-info", "imdl-aside-ttl"), aside, "h4")
        if title_element is None:
            return None
        title = canonical_title(text_content(title_element), UNTITLED_SENTINELS)

        name_box = first_by_class_names(("imdl-aside-box", "imdl-aside-name"), aside, "div")
        if name_box is None:
            return None
        links = name_box.find_all("a")
        if len(links) != 1:
            return None
        return display_name(title, text_content(links[0]).strip())

    @staticmethod
    def _regular_photo_id(context: PageContext) -> str | None:
        path = context.pathname
        if not path.startswith("/image/"):
            return None
        return non_empty(path[len("/image/") :].split("/", 1)[0])

    @staticmethod
    def _regular_photo_url(image_state: Any) -> str | None:
        small_url = get_path(image_state, "image_urls", "small")
        if not isinstance(small_url, str):
            return None
        return trim_url_argument(small_url.strip())

    @staticmethod
    def _regular_display_name(image_state: Any):
        title = get_path(image_state, "image_name")
        owner_name = get_path(image_state, "user", "display_name")
        if not isinstance(title, str) or not isinstance(owner_name, str):
            return None
        # Blank titles are raw here; a literal Untitled gets the lightbox treatment
        return display_name(canonical_title(title, UNTITLED_SENTINELS), owner_name.strip())

    def item_url(self, item: ItemIdentity) -> str | None:
        return f"https://youpic.com/image/{item.item_id}"

    def thumbnail_url(self, item: ItemIdentity) -> str | None:
        return f"{IMAGE_BASE_URL}small/{item.owner_id}_{item.media_key()}"

    def large_image_url(self, item: ItemIdentity) -> str | None:
        return f"{IMAGE_BASE_URL}large/{item.owner_id}_{item.media_key()}"
