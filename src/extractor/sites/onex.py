"""1x.com photo page adapter."""

from ..base.context import PageContext
from ..base.dom import element_by_id, get_attribute, text_content
from ..base.models import ContentAdapter, ItemIdentity, Site, WireField, register_adapter
from ..base.pipeline import FieldPipeline
from ..base.utils import substring_after
from ..base.validators import display_name, non_empty

PHOTO_PATH_PREFIX = "/photo/"
OWNER_NAME_PREFIX = "by "
LOW_DEFINITION_SUFFIX = "-ld.jpg"


@register_adapter(Site.ONE_X)
class OneXAdapter(ContentAdapter):
    """Adapter for 1x.com photo pages.

    The photo page keeps the owner ID and the low definition image URL in
    hidden inputs named after the photo ID.
    """

    host_suffix = "1x.com"
    display_label = "1x"
    wire_fields = (
        WireField.ITEM_ID,
        WireField.OWNER_ID,
        WireField.DISPLAY_NAME,
        WireField.MEDIA_KEY,
    )

    @property
    def site(self) -> Site:
        return Site.ONE_X

    def extract_active_item(self, context: PageContext) -> ItemIdentity | None:
        resolved = (
            FieldPipeline("1x")
            .field(WireField.ITEM_ID, lambda r: self._photo_id(context))
            .field(
                WireField.OWNER_ID,
                lambda r: self._hidden_value(context, "loadimg_userid_" + r["item_id"]),
            )
            .field(WireField.DISPLAY_NAME, lambda r: self._display_name(context))
            .field(WireField.MEDIA_KEY, lambda r: self._thumbnail_id(context, r["item_id"]))
            .run()
        )
        return self.assemble(resolved)

    @staticmethod
    def _photo_id(context: PageContext) -> str | None:
        path = context.pathname
        if not path.startswith(PHOTO_PATH_PREFIX):
            return None
        photo_id = path[len(PHOTO_PATH_PREFIX) :].split("/", 1)[0]
        return non_empty(photo_id)

    @staticmethod
    def _hidden_value(context: PageContext, element_id: str) -> str | None:
        element = element_by_id(context.document, element_id, "input")
        if element is None:
            return None
        return non_empty(get_attribute(element, "value") or "")

    @staticmethod
    def _display_name(context: PageContext):
        title_element = element_by_id(context.document, "phototitle", "span")
        if title_element is None:
            return None
        title = text_content(title_element).strip()

        name_element = element_by_id(context.document, "slideshow_name", "div")
        if name_element is None:
            return None
        name_text = text_content(name_element)
        name_start = name_text.find(OWNER_NAME_PREFIX)
        if name_start == -1:
            return None
        return display_name(title, name_text[name_start + len(OWNER_NAME_PREFIX) :].strip())

    def _thumbnail_id(self, context: PageContext, photo_id: str) -> str | None:
        photo_url = self._hidden_value(context, "loadimg_src_ld_" + photo_id)
        if photo_url is None:
            return None
        filename = substring_after(photo_url, "/", last=True)
        if filename is None:
            return None
        end = filename.find(LOW_DEFINITION_SUFFIX)
        if end == -1:
            return None
        return non_empty(filename[:end])

    def item_url(self, item: ItemIdentity) -> str | None:
        return f"http://1x.com/photo/{item.item_id}"

    def thumbnail_url(self, item: ItemIdentity) -> str | None:
        return f"https://1x.com/images/user/{item.media_key()}-sq.jpg"

    def large_image_url(self, item: ItemIdentity) -> str | None:
        return f"https://1x.com/images/user/{item.media_key()}-sd.jpg"
