"""Ipernity document page adapter.

Two views expose the photo document: the lightbox (``window["lightbox-instance"]``
with ``current_doc`` and ``users``) and the regular page (``window.doc_id`` with
the ``Data.doc`` and ``Data.user`` maps). Titles and names arrive HTML-escaped.

Thumbnails are served either from the CDN,
``//cdn.ipernity.com/<path>/<id>.<secret>.<size>.jpg``, or from a numbered
farm, ``//u<farm>.ipernity.com/<path>/<id>.<secret>.<size>.jpg``. Some photos
only exist in the older farm form, so the media reference keeps an empty farm
for CDN photos.
"""

from enum import Enum
from typing import Any

from ..base.context import PageContext
from ..base.dom import decode_html_text, element_by_id, get_attribute
from ..base.models import ContentAdapter, ItemIdentity, Site, WireField, register_adapter
from ..base.pipeline import FieldPipeline
from ..base.utils import get_path, object_exists, stringify, trim_url_argument
from ..base.validators import display_name, non_empty

LIGHTBOX_GLOBAL = "lightbox-instance"
CDN_HOST = "//cdn.ipernity.com/"

PHOTO_DOCUMENT_TYPE = "1"
# Permission bitset with every bit set: shared with everyone
PUBLIC_SHARE = "31"


class IpernityView(Enum):
    LIGHTBOX = "lightbox"
    REGULAR = "regular"


def _trimmed_id(value: Any) -> str | None:
    value = stringify(value)
    if not isinstance(value, str):
        return None
    return non_empty(value.strip())


def _is_public_photo(document: Any) -> bool:
    return (
        get_path(document, "type") == PHOTO_DOCUMENT_TYPE
        and get_path(document, "share") == PUBLIC_SHARE
    )


@register_adapter(Site.IPERNITY)
class IpernityAdapter(ContentAdapter):
    """Adapter for ipernity.com photo documents."""

    host_suffix = "ipernity.com"
    display_label = "ipernity"
    wire_fields = (
        WireField.ITEM_ID,
        WireField.OWNER_ID,
        WireField.DISPLAY_NAME,
        WireField.MEDIA_REFERENCE,
    )
    script_globals = (LIGHTBOX_GLOBAL, "doc_id", "Data")

    @property
    def site(self) -> Site:
        return Site.IPERNITY

    def detect_view(self, context: PageContext) -> IpernityView | None:
        state = context.script_state
        if object_exists(state, LIGHTBOX_GLOBAL) and get_path(
            state, LIGHTBOX_GLOBAL, "is_shown"
        ):
            return IpernityView.LIGHTBOX
        if object_exists(state, "doc_id"):
            return IpernityView.REGULAR
        return None

    def extract_active_item(self, context: PageContext) -> ItemIdentity | None:
        view = self.detect_view(context)
        if view is IpernityView.LIGHTBOX:
            resolved = self._lightbox_pipeline(context).run()
        elif view is IpernityView.REGULAR:
            resolved = self._regular_pipeline(context).run()
        else:
            return None
        return self.assemble(resolved)

    def _lightbox_pipeline(self, context: PageContext) -> FieldPipeline:
        lightbox = context.script_state[LIGHTBOX_GLOBAL]
        return (
            FieldPipeline("ipernity/lightbox")
            .bind("document", lambda r: get_path(lightbox, "current_doc"))
            .check("public_photo", lambda r: _is_public_photo(r["document"]))
            .field(WireField.ITEM_ID, lambda r: _trimmed_id(r["document"].get("doc_id")))
            .field(WireField.OWNER_ID, lambda r: _trimmed_id(r["document"].get("user_id")))
            .field(
                WireField.DISPLAY_NAME,
                lambda r: self._display_name(
                    r["document"], get_path(lightbox, "users", r["owner_id"])
                ),
            )
            .field(
                WireField.MEDIA_REFERENCE,
                lambda r: self._lightbox_thumbnail_elements(r["document"]),
            )
        )

    def _regular_pipeline(self, context: PageContext) -> FieldPipeline:
        state = context.script_state
        return (
            FieldPipeline("ipernity/regular")
            .field(WireField.ITEM_ID, lambda r: _trimmed_id(state.get("doc_id")))
            .bind("document", lambda r: get_path(state, "Data", "doc", r["item_id"]))
            .check("public_photo", lambda r: _is_public_photo(r["document"]))
            .field(WireField.OWNER_ID, lambda r: _trimmed_id(r["document"].get("user_id")))
            .field(
                WireField.DISPLAY_NAME,
                lambda r: self._display_name(
                    r["document"], get_path(state, "Data", "user", r["owner_id"])
                ),
            )
            .bind("photo_url", lambda r: self._photo_url(context))
            .field(
                WireField.MEDIA_REFERENCE,
                lambda r: self.parse_thumbnail_url(r["photo_url"], r["item_id"]),
            )
        )

    @staticmethod
    def _display_name(document: Any, owner: Any):
        title = get_path(document, "title")
        owner_name = get_path(owner, "title")
        if not isinstance(title, str) or not isinstance(owner_name, str):
            return None
        return display_name(
            decode_html_text(title.strip()), decode_html_text(owner_name.strip())
        )

    @staticmethod
    def _lightbox_thumbnail_elements(document: Any) -> tuple[str, str, str] | None:
        thumbnail = get_path(document, "thumbs", "240")
        path_id = stringify(get_path(thumbnail, "path"))
        if not isinstance(path_id, str):
            return None
        path_id = path_id.strip()
        if len(path_id) < 2 or not (path_id.startswith("/") and path_id.endswith("/")):
            return None
        path_id = path_id[1:-1]

        secret = stringify(get_path(thumbnail, "secret"))
        if not isinstance(secret, str):
            return None
        if CDN_HOST in (get_path(thumbnail, "url") or ""):
            return "", path_id, secret.strip()

        farm_id = stringify(get_path(thumbnail, "farm"))
        if not isinstance(farm_id, str):
            return None
        return farm_id.strip(), path_id, secret.strip()

    @staticmethod
    def _photo_url(context: PageContext) -> str | None:
        # src may point at a higher resolution than the thumbnail size
        photo = element_by_id(context.document, "doc_img", "img")
        if photo is None:
            return None
        low_resolution = get_attribute(photo, "data-lowres")
        return low_resolution.strip() if low_resolution is not None else None

    @staticmethod
    def parse_thumbnail_url(photo_url: str, photo_id: str) -> tuple[str, str, str] | None:
        """Split a CDN or farm photo URL into farm, path and secret.

        The farm is empty for CDN URLs. The URL must name ``photo_id``.
        """
        photo_url = trim_url_argument(photo_url)
        if not photo_url.endswith(".jpg"):
            return None

        cdn_start = photo_url.find(CDN_HOST)
        if cdn_start != -1:
            farm_id = ""
            path_start = cdn_start + len(CDN_HOST)
        else:
            farm_start = photo_url.find("//u")
            if farm_start == -1:
                return None
            farm_start += len("//u")
            farm_end = photo_url.find(".ipernity.com/", farm_start)
            if farm_end == -1:
                return None
            farm_id = photo_url[farm_start:farm_end]
            path_start = farm_end + len(".ipernity.com/")

        path_end = photo_url.find("/" + photo_id + ".", path_start)
        if path_end == -1:
            return None
        secret_start = path_end + len(photo_id) + 2
        secret_end = photo_url.find(".", secret_start)
        if secret_end == -1:
            return None
        return farm_id, photo_url[path_start:path_end], photo_url[secret_start:secret_end]

    def _image_url(self, item: ItemIdentity, size: str) -> str:
        farm_id, path_id, secret = item.media_reference
        host = "cdn.ipernity.com" if farm_id == "" else f"u{farm_id}.ipernity.com"
        return f"http://{host}/{path_id}/{item.item_id}.{secret}.{size}.jpg"

    def item_url(self, item: ItemIdentity) -> str | None:
        return f"http://www.ipernity.com/doc/{item.owner_id}/{item.item_id}"

    def thumbnail_url(self, item: ItemIdentity) -> str | None:
        return self._image_url(item, "240")

    def large_image_url(self, item: ItemIdentity) -> str | None:
        return self._image_url(item, "800")
