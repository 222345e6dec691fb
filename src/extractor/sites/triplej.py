"""triple j presenter profile adapter.

Profiles live under ``abc.net.au/triplej/people/<id>.htm``. There is no owner
for a presenter profile, so the record carries the profile ID, the
presenter's name and, when the sidebar has one, an extra photo reference.
"""

from ..base.context import PageContext
from ..base.dom import (
    element_by_id,
    first_by_class_names,
    get_attribute,
    is_tag,
    url_property,
)
from ..base.models import ContentAdapter, ItemIdentity, Site, WireField, register_adapter
from ..base.pipeline import FieldPipeline
from ..base.utils import host_check
from ..base.validators import non_empty

PROFILE_PATH_PREFIX = "/triplej/people/"
PROFILE_BASE_URL = "http://www.abc.net.au/triplej/people/"
EXTRA_PHOTO_MARKER = "img/extras/"


@register_adapter(Site.TRIPLEJ)
class TripleJAdapter(ContentAdapter):
    """Adapter for triple j presenter profiles on abc.net.au."""

    host_suffix = "abc.net.au"
    display_label = "triple j"
    wire_fields = (WireField.ITEM_ID, WireField.TITLE, WireField.MEDIA_KEY)
    # Quite a few presenters have no sidebar photo
    optional_fields = frozenset({WireField.MEDIA_KEY})

    @property
    def site(self) -> Site:
        return Site.TRIPLEJ

    def host_matches(self, context: PageContext) -> bool:
        return host_check(context.url, self.host_suffix) and context.pathname.startswith(
            PROFILE_PATH_PREFIX
        )

    def extract_active_item(self, context: PageContext) -> ItemIdentity | None:
        resolved = (
            FieldPipeline("triplej")
            .field(WireField.ITEM_ID, lambda r: self._profile_id(context))
            .field(WireField.TITLE, lambda r: self._presenter_name(context))
            .field(WireField.MEDIA_KEY, lambda r: self._photo_key(context), required=False)
            .run()
        )
        return self.assemble(resolved)

    @staticmethod
    def _profile_id(context: PageContext) -> str | None:
        path = context.pathname
        if not path.endswith(".htm"):
            return None
        return non_empty(path[path.rfind("/") + 1 : -len(".htm")])

    @staticmethod
    def _presenter_name(context: PageContext) -> str | None:
        holder = element_by_id(context.document, "midhold", "div")
        if holder is None:
            return None
        picture = first_by_class_names(["picture"], holder, "div")
        if picture is None:
            return None

        # The picture frame must hold the portrait and nothing else
        children = list(picture.children)
        if len(children) != 1 or not is_tag(children[0], "img"):
            return None
        return non_empty((get_attribute(children[0], "alt") or "").strip())

    @staticmethod
    def _photo_key(context: PageContext) -> str | None:
        sidebar = element_by_id(context.document, "people-col-left-b", "div")
        if sidebar is None:
            return None
        thumbs = first_by_class_names(["thumbs"], sidebar, "div")
        if thumbs is None:
            return None
        images = thumbs.find_all("img")
        if not images:
            return None

        photo_url = url_property(images[0], "src", context.url)
        if not photo_url.endswith(".jpg"):
            return None
        start = photo_url.find(EXTRA_PHOTO_MARKER)
        if start == -1:
            return None
        # May include subfolders below img/extras/
        return non_empty(photo_url[start + len(EXTRA_PHOTO_MARKER) : -len(".jpg")])

    def item_url(self, item: ItemIdentity) -> str | None:
        return f"{PROFILE_BASE_URL}{item.item_id}.htm"

    def thumbnail_url(self, item: ItemIdentity) -> str | None:
        photo_key = item.media_key()
        if photo_key:
            return f"{PROFILE_BASE_URL}img/extras/{photo_key}.jpg"
        return f"{PROFILE_BASE_URL}img/main/{item.item_id}.jpg"

    def large_image_url(self, item: ItemIdentity) -> str | None:
        return self.thumbnail_url(item)

    def full_name(self, item: ItemIdentity) -> str:
        return f"Triple J's {item.display_name.title}"
