"""72dpi photo page adapter.

The photo title cell reads ``"<title>" © <owner name>``, with the owner name
in a nested span. Untitled photos carry an explicit ``Untitled`` title.
"""

from ..base.context import PageContext
from ..base.dom import first_by_class_names, get_attribute, text_content, url_property
from ..base.models import ContentAdapter, ItemIdentity, Site, WireField, register_adapter
from ..base.pipeline import FieldPipeline
from ..base.utils import substring_after
from ..base.validators import canonical_title, display_name, non_empty, url_references_id

UNTITLED_SENTINELS = ("Untitled",)
COPYRIGHT_PREFIX = "© "


@register_adapter(Site.SEVENTY_TWO_DPI)
class SeventyTwoDpiAdapter(ContentAdapter):
    """Adapter for 72dpi.com photo pages."""

    host_suffix = "72dpi.com"
    display_label = "72dpi"
    wire_fields = (WireField.ITEM_ID, WireField.OWNER_ID, WireField.DISPLAY_NAME)

    @property
    def site(self) -> Site:
        return Site.SEVENTY_TWO_DPI

    def extract_active_item(self, context: PageContext) -> ItemIdentity | None:
        resolved = (
            FieldPipeline("72dpi")
            .field(WireField.ITEM_ID, lambda r: self._photo_id(context))
            .check("og_url_matches", lambda r: self._og_url_matches(context, r["item_id"]))
            .field(WireField.OWNER_ID, lambda r: self._photographer_id(context))
            .field(WireField.DISPLAY_NAME, lambda r: self._display_name(context))
            .run()
        )
        return self.assemble(resolved)

    @staticmethod
    def _photo_id(context: PageContext) -> str | None:
        path = context.pathname
        if not path.startswith("/photo/"):
            return None
        return non_empty(path[len("/photo/") :].split("/", 1)[0])

    @staticmethod
    def _og_url_matches(context: PageContext, photo_id: str) -> bool:
        return any(
            get_attribute(meta, "property") == "og:url"
            and url_references_id(get_attribute(meta, "content") or "", photo_id)
            for meta in context.meta_elements()
        )

    @staticmethod
    def _photographer_id(context: PageContext) -> str | None:
        name_link = first_by_class_names(["namelink"], context.document, "a")
        if name_link is None:
            return None

        photographer_id = substring_after(
            url_property(name_link, "href", context.url), "gallery/", last=True
        )
        if photographer_id is None:
            return None
        if photographer_id.endswith("/"):
            photographer_id = photographer_id[:-1]
        return non_empty(photographer_id)

    @staticmethod
    def _display_name(context: PageContext):
        title_cell = first_by_class_names(["phototitle"], context.document, "td")
        if title_cell is None:
            return None
        raw_text = text_content(title_cell)

        name_element = first_by_class_names(["medtxt"], title_cell, "span")
        if name_element is None:
            return None
        name_text = text_content(name_element)
        name_start = raw_text.find(name_text)
        if name_start == -1:
            return None

        title = raw_text[:name_start].strip()
        if title.startswith('"'):
            title = title[1:]
        if title.endswith('"'):
            title = title[:-1]
        title = canonical_title(title, UNTITLED_SENTINELS)

        copyright_start = name_text.find(COPYRIGHT_PREFIX)
        if copyright_start == -1:
            return None
        owner_name = name_text[copyright_start + len(COPYRIGHT_PREFIX) :].strip()
        return display_name(title, owner_name)

    def item_url(self, item: ItemIdentity) -> str | None:
        return f"http://www.72dpi.com/photo/{item.item_id}"

    def thumbnail_url(self, item: ItemIdentity) -> str | None:
        return f"http://www.72dpi.com/p100/{item.item_id}.jpg"

    def large_image_url(self, item: ItemIdentity) -> str | None:
        return f"http://www.72dpi.com/p900/{item.item_id}.jpg"
