"""Flickr photo page adapter.

Flickr keeps the state of the displayed photo in the ``appContext`` global,
whose model registries are captured as plain mappings keyed by ID::

    appContext.modelRegistries["photo-models"][<photo id>]
    appContext.modelRegistries["photo-privacy-models"][<photo id>]
    appContext.modelRegistries["person-models"][<owner id>]
    appContext.modelRegistries["photo-tags-models"][<photo id>]["tags"]
    appContext.modelRegistries["tag-models"][<tag id>]

The photo ID is read from the displayed image and every other field is keyed
on it. Thumbnail URLs come from the og:image meta tag, which carries the most
canonical link, and must embed the same photo ID.
"""

import logging
from enum import Enum
from typing import Any

from ..base.context import PageContext
from ..base.dom import first_by_class_names, get_attribute, url_property
from ..base.models import (
    ContentAdapter,
    DisplayName,
    ItemIdentity,
    Site,
    WireField,
    register_adapter,
)
from ..base.pipeline import FieldPipeline
from ..base.utils import get_path, object_exists, stringify
from ..base.validators import display_name, non_empty, url_segment_starts_with_id

logger = logging.getLogger(__name__)

PHOTO_MODELS = "photo-models"
PRIVACY_MODELS = "photo-privacy-models"
PERSON_MODELS = "person-models"
PHOTO_TAG_MODELS = "photo-tags-models"
TAG_MODELS = "tag-models"

# Public (0) and moderate (1) content only
PERMITTED_SAFETY_LEVELS = (0, 1)


class FlickrView(Enum):
    """Photo views, as (view parent class, photo image class names)."""

    REGULAR = ("photo-well-scrappy-view", ("photo-well-media-scrappy-view", "low-res-photo"))
    LIGHTBOX = (
        "photo-page-lightbox-scrappy-view",
        ("photo-well-media-view", "low-res-photo"),
    )

    @property
    def parent_class(self) -> str:
        return self.value[0]

    @property
    def photo_class_names(self) -> tuple[str, ...]:
        return self.value[1]


@register_adapter(Site.FLICKR)
class FlickrAdapter(ContentAdapter):
    """Adapter for flickr.com photo pages."""

    host_suffix = "flickr.com"
    display_label = "Flickr"
    wire_fields = (
        WireField.ITEM_ID,
        WireField.OWNER_ID,
        WireField.DISPLAY_NAME,
        WireField.MEDIA_REFERENCE,
        WireField.TAGS,
    )
    script_globals = ("appContext",)

    @property
    def site(self) -> Site:
        return Site.FLICKR

    def detect_view(self, context: PageContext):
        """Return the active view and its parent element, or None."""
        if not object_exists(context.script_state, "appContext"):
            return None

        for view in FlickrView:
            parent = first_by_class_names([view.parent_class], context.document, "div")
            if parent is not None:
                return view, parent
        return None

    def extract_active_item(self, context: PageContext) -> ItemIdentity | None:
        detected = self.detect_view(context)
        if detected is None:
            return None
        view, parent = detected

        registries = get_path(context.script_state, "appContext", "modelRegistries")

        def photo_value(photo_id: str, key: str) -> Any:
            return get_path(registries, PHOTO_MODELS, photo_id, key)

        resolved = (
            FieldPipeline(f"flickr/{view.name.lower()}")
            .field(
                WireField.ITEM_ID,
                lambda r: stringify(self._photo_id(context, parent, view)),
            )
            .check(
                "media_type",
                lambda r: photo_value(r["item_id"], "mediaType") == "photo",
            )
            .check("public", lambda r: self._is_public(registries, r["item_id"]))
            .check(
                "safety_level",
                lambda r: self._is_permitted_safety_level(
                    photo_value(r["item_id"], "safetyLevel")
                ),
            )
            .field(
                WireField.OWNER_ID,
                lambda r: non_empty(
                    stringify(get_path(registries, PHOTO_MODELS, r["item_id"], "owner", "id"))
                ),
            )
            .field(
                WireField.DISPLAY_NAME,
                lambda r: self._display_name(registries, r["item_id"], r["owner_id"]),
            )
            .bind("thumbnail_url", lambda r: self._thumbnail_url(context, r["item_id"]))
            .field(
                WireField.MEDIA_REFERENCE,
                lambda r: self.parse_thumbnail_url(r["thumbnail_url"]),
            )
            .field(WireField.TAGS, lambda r: self._tags(registries, r["item_id"]))
            .run()
        )
        return self.assemble(resolved)

    def _photo_id(self, context: PageContext, parent, view: FlickrView) -> str | None:
        image = first_by_class_names(view.photo_class_names, parent, "img")
        if image is None:
            return None

        image_url = url_property(image, "src", context.url)
        start = image_url.rfind("/")
        if start == -1:
            return None
        start += 1
        end = image_url.find("_", start)
        if end == -1:
            return None
        return image_url[start:end] or None

    @staticmethod
    def _is_public(registries: Any, photo_id: str) -> bool:
        # Not yet initialised until shortly after the photo is browsed
        is_public = get_path(registries, PRIVACY_MODELS, photo_id, "isPublic")
        return isinstance(is_public, bool) and is_public

    @staticmethod
    def _is_permitted_safety_level(safety_level: Any) -> bool:
        return (
            isinstance(safety_level, int)
            and not isinstance(safety_level, bool)
            and safety_level in PERMITTED_SAFETY_LEVELS
        )

    @staticmethod
    def _display_name(registries: Any, photo_id: str, owner_id: str) -> DisplayName | None:
        title = get_path(registries, PHOTO_MODELS, photo_id, "title")
        if not isinstance(title, str):
            return None

        # Real name first, username as the fallback, as the page displays them
        owner_name = get_path(registries, PERSON_MODELS, owner_id, "realname")
        if owner_name is None or owner_name == "":
            owner_name = get_path(registries, PERSON_MODELS, owner_id, "username")
        if not isinstance(owner_name, str):
            return None

        return display_name(title.strip(), owner_name.strip())

    @staticmethod
    def _thumbnail_url(context: PageContext, photo_id: str) -> str | None:
        for meta in context.meta_elements():
            if get_attribute(meta, "property") != "og:image":
                continue
            content = get_attribute(meta, "content") or ""
            if url_segment_starts_with_id(content, photo_id, "_"):
                return content
        return None

    @staticmethod
    def parse_thumbnail_url(thumbnail_url: str) -> tuple[str, str, str] | None:
        """Split a static thumbnail URL into its farm, server and secret.

        Handles ``//farm<farm>.staticflickr.com/<server>/<id>_<secret>_q.jpg``
        and the older ``//c1.staticflickr.com/<farm>/<server>/...`` form.
        """
        start = thumbnail_url.find("//farm")
        if start != -1:
            start += len("//farm")
            end = thumbnail_url.find(".staticflickr.com/", start)
            if end == -1:
                return None
            farm_id = thumbnail_url[start:end]
            start = end + len(".staticflickr.com/")
        else:
            start = thumbnail_url.find(".staticflickr.com/")
            if start == -1:
                return None
            start = thumbnail_url.find("/", start) + 1
            end = thumbnail_url.find("/", start)
            if start >= end:
                return None
            farm_id = thumbnail_url[start:end]
            start = end + 1

        end = thumbnail_url.find("/", start)
        if end == -1:
            return None
        server_id = thumbnail_url[start:end]

        start = thumbnail_url.find("_", end)
        if start == -1:
            return None
        start += 1
        end = thumbnail_url.find("_", start)
        if end == -1:
            return None
        return farm_id, server_id, thumbnail_url[start:end]

    @staticmethod
    def _tags(registries: Any, photo_id: str) -> list[str] | None:
        # Partially initialised until the first image loads; None retries later
        tag_list = get_path(registries, PHOTO_TAG_MODELS, photo_id, "tags")
        if not isinstance(tag_list, list):
            return None

        tags = []
        for tag_model in tag_list:
            raw_tag = get_path(
                registries, TAG_MODELS, stringify(get_path(tag_model, "id")), "tagRaw"
            )
            if not isinstance(raw_tag, str):
                logger.debug(f"flickr: tag model missing for photo {photo_id}")
                return None
            # Raw tags keep their case and spacing for host-side processing
            if raw_tag:
                tags.append(raw_tag)
        return tags

    def _image_base(self, item: ItemIdentity) -> str:
        farm_id, server_id, secret = item.media_reference
        return (
            f"http://farm{farm_id}.staticflickr.com/{server_id}/{item.item_id}_{secret}"
        )

    def item_url(self, item: ItemIdentity) -> str | None:
        return f"http://www.flickr.com/photos/{item.owner_id}/{item.item_id}/"

    def thumbnail_url(self, item: ItemIdentity) -> str | None:
        return self._image_base(item) + "_q.jpg"

    def large_image_url(self, item: ItemIdentity) -> str | None:
        return self._image_base(item) + "_b.jpg"
