"""500px photo page adapter.

The active photo is taken from the page's Backbone collection, captured from
the ``App`` global as::

    {"selectedPhotoOffset": 3, "photos": [<photo>, ...]}

where each photo follows the 500px API shape (``id``, ``user_id``, ``name``,
``tags``, ``nsfw``, ``privacy``, ``images: [{"size", "url"}]`` and
``user: {"fullname"}``). The photo ID in the browser URL must agree with the
ID of the selected photo model.
"""

from enum import Enum
from typing import Any

from ..base.context import PageContext
from ..base.dom import element_by_id
from ..base.models import ContentAdapter, ItemIdentity, Site, WireField, register_adapter
from ..base.pipeline import FieldPipeline
from ..base.utils import get_path, object_exists, stringify, trim_url_argument
from ..base.validators import display_name, ids_agree, non_empty

IMAGE_BASE_URL = "http://drscdn.500px.org/photo/"

# 140 x 140 thumbnail and 900 pixel large image
THUMBNAIL_SIZE = 2
LARGE_IMAGE_SIZE = 4


class FiveHundredPxView(Enum):
    """Views holding a photo collection, as a path into the ``App`` global."""

    # Lightbox over a gallery of photos by different users, eg. popular
    LIGHTBOX_GALLERY = ("content", "currentView", "body", "collection")
    # Lightbox over a single user's gallery
    LIGHTBOX_USER_GALLERY = (
        "controller",
        "layout",
        "bodyRegion",
        "currentView",
        "collection",
    )
    # Photo opened on its own page
    REGULAR = ("content", "currentView", "navigationContext")


@register_adapter(Site.FIVEHUNDRED_PX)
class FiveHundredPxAdapter(ContentAdapter):
    """Adapter for 500px.com photo pages."""

    host_suffix = "500px.com"
    display_label = "500px"
    wire_fields = (
        WireField.ITEM_ID,
        WireField.OWNER_ID,
        WireField.DISPLAY_NAME,
        WireField.MEDIA_REFERENCE,
        WireField.TAGS,
    )
    script_globals = ("App",)

    @property
    def site(self) -> Site:
        return Site.FIVEHUNDRED_PX

    @staticmethod
    def browser_url_photo_id(context: PageContext) -> str | None:
        """Return the photo ID from a ``/photo/<id>/<slug>`` path."""
        path = context.pathname
        if not path.startswith("/photo/"):
            return None
        end = path.find("/", len("/photo/"))
        if end == -1:
            return None
        return non_empty(path[len("/photo/") : end])

    def detect_view(self, context: PageContext) -> FiveHundredPxView | None:
        app = context.script_state.get("App")
        if element_by_id(context.document, "pxLightbox-1") is not None:
            candidates = (
                FiveHundredPxView.LIGHTBOX_GALLERY,
                FiveHundredPxView.LIGHTBOX_USER_GALLERY,
            )
        else:
            candidates = (FiveHundredPxView.REGULAR,)

        for view in candidates:
            if object_exists(app, *view.value):
                return view
        return None

    def active_photo(self, context: PageContext) -> dict[str, Any] | None:
        view = self.detect_view(context)
        if view is None:
            return None

        collection = get_path(context.script_state, "App", *view.value)
        offset = get_path(collection, "selectedPhotoOffset")
        if not isinstance(offset, int) or isinstance(offset, bool) or offset < 0:
            return None
        photo = get_path(collection, "photos", offset)
        return photo if isinstance(photo, dict) else None

    def extract_active_item(self, context: PageContext) -> ItemIdentity | None:
        resolved = (
            FieldPipeline("500px")
            .bind("url_photo_id", lambda r: self.browser_url_photo_id(context))
            .bind("photo", lambda r: self.active_photo(context))
            .check(
                "photo_matches_url",
                lambda r: ids_agree(stringify(r["photo"].get("id")), r["url_photo_id"]),
            )
            .check("public", lambda r: r["photo"].get("privacy") is False)
            .check("not_nsfw", lambda r: not r["photo"].get("nsfw"))
            .field(WireField.ITEM_ID, lambda r: stringify(r["photo"].get("id")))
            .field(
                WireField.OWNER_ID,
                lambda r: non_empty(stringify(r["photo"].get("user_id"))),
            )
            .field(WireField.DISPLAY_NAME, lambda r: self._display_name(r["photo"]))
            .field(
                WireField.MEDIA_REFERENCE,
                lambda r: self._image_keys(r["photo"], r["item_id"]),
            )
            .field(WireField.TAGS, lambda r: self._tags(r["photo"]))
            .run()
        )
        return self.assemble(resolved)

    @staticmethod
    def _display_name(photo: dict[str, Any]):
        title = photo.get("name")
        title = title.strip() if isinstance(title, str) else ""

        owner_name = get_path(photo, "user", "fullname")
        if not isinstance(owner_name, str):
            return None
        return display_name(title, owner_name.strip())

    @staticmethod
    def _image_path(photo: dict[str, Any], size: int) -> str | None:
        for image in photo.get("images") or []:
            if get_path(image, "size") == size and isinstance(get_path(image, "url"), str):
                return image["url"]
        return None

    def _image_keys(self, photo: dict[str, Any], photo_id: str) -> tuple[str, str] | None:
        thumbnail_url = self._image_path(photo, THUMBNAIL_SIZE)
        if thumbnail_url is None:
            return None
        thumbnail_key = self.image_key(thumbnail_url, photo_id)
        if thumbnail_key is None:
            return None

        large_url = self._image_path(photo, LARGE_IMAGE_SIZE)
        if large_url is None:
            return None
        large_key = self.image_key(large_url, photo_id)
        if large_key is None:
            return None
        return thumbnail_key, large_key

    @staticmethod
    def image_key(image_url: str, photo_id: str) -> str | None:
        """Return the key following ``/<photo id>/<dimensions>/`` in an image URL."""
        image_url = trim_url_argument(image_url)
        if image_url.endswith("/"):
            image_url = image_url[:-1]

        id_start = image_url.find("/" + photo_id + "/")
        if id_start == -1:
            return None
        dimensions_start = id_start + len(photo_id) + 2
        key_start = image_url.find("/", dimensions_start)
        if key_start == -1:
            return None
        key_start += 1
        if key_start >= len(image_url):
            return None
        return image_url[key_start:]

    @staticmethod
    def _tags(photo: dict[str, Any]) -> list[str] | None:
        tags = photo.get("tags")
        if not isinstance(tags, list):
            return None
        return [tag for tag in tags if isinstance(tag, str)]

    def item_url(self, item: ItemIdentity) -> str | None:
        return f"http://500px.com/photo/{item.item_id}"

    def thumbnail_url(self, item: ItemIdentity) -> str | None:
        thumbnail_key = item.media_reference[0]
        return f"{IMAGE_BASE_URL}{item.item_id}/q%3D50_w%3D140_h%3D140/{thumbnail_key}"

    def large_image_url(self, item: ItemIdentity) -> str | None:
        large_key = item.media_reference[1]
        return f"{IMAGE_BASE_URL}{item.item_id}/m%3D900/{large_key}"
