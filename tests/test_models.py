"""Unit tests for the field pipeline, identity records and the readiness gate."""

from unittest.mock import MagicMock

import pytest

from src.extractor.base.context import PageContext
from src.extractor.base.dom import element_by_id, get_attribute, text_content, url_property
from src.extractor.base.models import (
    AdapterRegistry,
    ContentAdapter,
    DisplayName,
    ExtractionResult,
    ExtractionStatus,
    ItemIdentity,
    Site,
    WireField,
)
from src.extractor.base.pipeline import FieldPipeline
from src.extractor.base.validators import display_name, non_empty, url_segment_starts_with_id

GALLERY_URL = "https://www.gallery-example.com/photo/123"

GALLERY_HTML = """
<div id="photo" data-item-id="123">
  <a id="owner" href="https://www.gallery-example.com/gallery/42/">Ann Lee</a>
  <h1 id="title">  My Photo  </h1>
  <img id="thumb" src="https://img.gallery-example.com/7/{thumb}_s3cr3t_t.jpg">
  <ul id="tags"></ul>
</div>
"""


class GalleryAdapter(ContentAdapter):
    """Minimal adapter over a single-view gallery page."""

    host_suffix = "gallery-example.com"
    wire_fields = (
        WireField.ITEM_ID,
        WireField.OWNER_ID,
        WireField.TITLE,
        WireField.MEDIA_REFERENCE,
        WireField.TAGS,
    )

    @property
    def site(self) -> Site:
        return Site.FLICKR

    def extract_active_item(self, context: PageContext):
        document = context.document
        resolved = (
            FieldPipeline("gallery")
            .field(
                WireField.ITEM_ID,
                lambda r: non_empty(get_attribute(element_by_id(document, "photo"), "data-item-id")),
            )
            .field(WireField.OWNER_ID, lambda r: self._owner_id(context))
            .field(WireField.TITLE, lambda r: text_content(element_by_id(document, "title")).strip())
            .bind("thumb_url", lambda r: url_property(element_by_id(document, "thumb"), "src", context.url))
            .check("thumb_matches", lambda r: url_segment_starts_with_id(r["thumb_url"], r["item_id"], "_"))
            .field(WireField.MEDIA_REFERENCE, lambda r: self._thumbnail_tuple(r["thumb_url"]))
            .field(
                WireField.TAGS,
                lambda r: [text_content(li) for li in element_by_id(document, "tags").find_all("li")],
            )
            .run()
        )
        return self.assemble(resolved)

    @staticmethod
    def _owner_id(context: PageContext):
        href = url_property(element_by_id(context.document, "owner"), "href", context.url)
        return non_empty(href.rstrip("/").rsplit("/", 1)[-1])

    @staticmethod
    def _thumbnail_tuple(thumb_url: str):
        server = thumb_url.split("/")[-2]
        _, secret, _ = thumb_url.rsplit("/", 1)[-1].split("_")
        return (server, secret)


def gallery_context(thumb_id: str = "123", **kwargs) -> PageContext:
    return PageContext.from_html(GALLERY_URL, GALLERY_HTML.format(thumb=thumb_id), **kwargs)


class TestFieldPipeline:
    """Test ordered, short-circuiting resolution."""

    @pytest.mark.unit
    def test_resolves_in_order_with_earlier_values(self):
        seen = []

        def second(resolved):
            seen.append(dict(resolved))
            return resolved["first"] + 1

        resolved = FieldPipeline("t").field("first", lambda r: 1).field("second", second).run()
        assert resolved == {"first": 1, "second": 2}
        assert seen == [{"first": 1}]

    @pytest.mark.unit
    def test_unresolved_step_stops_the_run(self):
        later = MagicMock(return_value="x")
        result = FieldPipeline("t").field("a", lambda r: None).field("b", later).run()
        assert result is None
        later.assert_not_called()

    @pytest.mark.unit
    def test_failed_check_stops_the_run(self):
        later = MagicMock(return_value="x")
        result = (
            FieldPipeline("t").field("a", lambda r: "1").check("gate", lambda r: False).field("b", later).run()
        )
        assert result is None
        later.assert_not_called()

    @pytest.mark.unit
    def test_optional_step_records_none(self):
        result = (
            FieldPipeline("t").field("a", lambda r: "1").field("b", lambda r: None, required=False).run()
        )
        assert result == {"a": "1", "b": None}

    @pytest.mark.unit
    def test_wire_field_names_key_by_value(self):
        result = (
            FieldPipeline("t")
            .field(WireField.ITEM_ID, lambda r: "1")
            .bind(WireField.OWNER_ID, lambda r: "o" + r["item_id"])
            .check(WireField.TAGS, lambda r: r["owner_id"] == "o1")
            .run()
        )
        assert result == {"item_id": "1", "owner_id": "o1"}

    @pytest.mark.unit
    def test_empty_string_is_a_resolved_value(self):
        assert FieldPipeline("t").field("title", lambda r: "").run() == {"title": ""}


class TestIdentityWire:
    """Test positional wire encoding."""

    @pytest.mark.unit
    def test_to_wire_display_name_pair(self):
        item = ItemIdentity(
            site=Site.FLICKR,
            item_id="1",
            owner_id="o",
            display_name=DisplayName("Sunset", "Ann"),
            media_reference=("f", "s", "x"),
            tags=("a",),
        )
        fields = (
            WireField.ITEM_ID,
            WireField.OWNER_ID,
            WireField.DISPLAY_NAME,
            WireField.MEDIA_REFERENCE,
            WireField.TAGS,
        )
        assert item.to_wire(fields) == ["1", "o", ["Sunset", "Ann"], ["f", "s", "x"], ["a"]]

    @pytest.mark.unit
    def test_to_wire_title_and_media_key(self):
        item = ItemIdentity(Site.ONE_X, "1", "o", DisplayName("T"), media_reference=("k",))
        assert item.to_wire((WireField.ITEM_ID, WireField.TITLE, WireField.MEDIA_KEY)) == ["1", "T", "k"]

    @pytest.mark.unit
    def test_result_wire_forms(self):
        item = ItemIdentity(Site.ONE_X, "1", "o", DisplayName("T"))
        assert ExtractionResult.not_ready().to_wire() == [False, None]
        assert ExtractionResult.no_item().to_wire() == [True, None]
        assert ExtractionResult.found(item, (WireField.ITEM_ID,)).to_wire() == [True, ["1"]]

    @pytest.mark.unit
    def test_to_dict(self):
        item = ItemIdentity(Site.FIVEHUNDRED_PX, "1", "o", DisplayName("T", "Ann"), ("a", "b"))
        assert item.to_dict()["site"] == "500px"
        assert item.to_dict()["media_reference"] == ["a", "b"]
        assert item.to_dict()["tags"] is None


class TestGalleryScenario:
    """Test a complete extraction over a fixture page."""

    @pytest.mark.unit
    def test_fixture_page_yields_record(self):
        result = GalleryAdapter().try_extract(gallery_context())
        assert result.status is ExtractionStatus.FOUND
        assert result.to_wire() == [True, ["123", "42", "My Photo", ["7", "s3cr3t"], []]]

    @pytest.mark.unit
    def test_foreign_thumbnail_yields_nothing(self):
        result = GalleryAdapter().try_extract(gallery_context(thumb_id="999"))
        assert result.status is ExtractionStatus.NO_ITEM
        assert result.to_wire() == [True, None]

    @pytest.mark.unit
    def test_repeated_extraction_is_identical(self):
        adapter = GalleryAdapter()
        context = gallery_context()
        assert adapter.try_extract(context).to_wire() == adapter.try_extract(context).to_wire()


class TestReadinessGate:
    """Test the tri-state entry point."""

    @pytest.mark.unit
    def test_host_mismatch_is_no_item(self):
        context = PageContext.from_html("https://notgallery-example.com/photo/123", GALLERY_HTML)
        assert GalleryAdapter().try_extract(context).status is ExtractionStatus.NO_ITEM

    @pytest.mark.unit
    def test_loading_page_is_not_ready(self):
        result = GalleryAdapter().try_extract(gallery_context(ready_state="loading"))
        assert result.status is ExtractionStatus.NOT_READY
        assert not result.ready

    @pytest.mark.unit
    def test_fault_is_not_ready_and_reported_when_debugging(self):
        sink = MagicMock()
        adapter = GalleryAdapter(debug_sink=sink)
        adapter.extract_active_item = MagicMock(side_effect=TypeError("unexpected value"))

        result = adapter.try_extract(gallery_context(debug=True))
        assert result.status is ExtractionStatus.NOT_READY
        sink.assert_called_once()
        assert "TypeError" in sink.call_args[0][0]

    @pytest.mark.unit
    def test_fault_without_debug_flag_is_silent(self):
        sink = MagicMock()
        adapter = GalleryAdapter(debug_sink=sink)
        adapter.extract_active_item = MagicMock(side_effect=KeyError("x"))

        assert adapter.try_extract(gallery_context()).status is ExtractionStatus.NOT_READY
        sink.assert_not_called()


class TestAssemble:
    """Test all-or-nothing record building."""

    @pytest.mark.unit
    def test_missing_required_field(self):
        assert GalleryAdapter().assemble({"item_id": "1", "owner_id": "o", "title": "T"}) is None

    @pytest.mark.unit
    def test_none_input(self):
        assert GalleryAdapter().assemble(None) is None

    @pytest.mark.unit
    def test_empty_tags_are_resolved(self):
        item = GalleryAdapter().assemble(
            {"item_id": "1", "owner_id": "o", "title": "", "media_reference": ["a"], "tags": []}
        )
        assert item is not None
        assert item.display_name == DisplayName("")
        assert item.tags == ()

    @pytest.mark.unit
    def test_display_name_pair_passes_through(self):
        class PairAdapter(GalleryAdapter):
            wire_fields = (WireField.ITEM_ID, WireField.OWNER_ID, WireField.DISPLAY_NAME)

        item = PairAdapter().assemble(
            {"item_id": "1", "owner_id": "o", "display_name": display_name("T", "Ann")}
        )
        assert item.display_name == DisplayName("T", "Ann")

    @pytest.mark.unit
    def test_captions(self):
        adapter = GalleryAdapter()
        item = ItemIdentity(Site.FLICKR, "1", "o", DisplayName("", "Ann"))
        assert adapter.short_name(item) == "Untitled"
        assert adapter.full_name(item) == "Untitled by Ann"
        assert adapter.item_url(item) is None


class TestAdapterRegistry:
    """Test adapter registration."""

    @pytest.mark.unit
    def test_site_adapters_register_on_import(self):
        from src.extractor.sites import FlickrAdapter

        assert AdapterRegistry.get_adapter_class(Site.FLICKR) is FlickrAdapter
        assert AdapterRegistry.is_site_supported(Site.FLICKR)
        assert set(Site) <= set(AdapterRegistry.get_available_sites())
