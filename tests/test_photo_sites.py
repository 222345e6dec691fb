"""Unit tests for the Flickr, 500px, ipernity, 1x and 72dpi adapters."""

import copy

import pytest

from src.extractor.base import ExtractionStatus
from src.extractor.sites.fivehundredpx import FiveHundredPxAdapter
from src.extractor.sites.flickr import FlickrAdapter
from src.extractor.sites.ipernity import IpernityAdapter
from src.extractor.sites.onex import OneXAdapter
from src.extractor.sites.seventytwodpi import SeventyTwoDpiAdapter

# Flickr

FLICKR_URL = "https://www.flickr.com/photos/ann/123/"

FLICKR_HTML = """
<html><head>
<meta property="og:image" content="https://farm1.staticflickr.com/65535/{thumb}_abc_q.jpg">
</head><body>
<div class="{parent}">
  <div class="{media}"><img class="low-res-photo" src="//c1.staticflickr.com/1/65535/123_abc_z.jpg"></div>
</div>
</body></html>
"""

FLICKR_STATE = {
    "appContext": {
        "modelRegistries": {
            "photo-models": {
                "123": {
                    "mediaType": "photo",
                    "safetyLevel": 0,
                    "owner": {"id": "42@N00"},
                    "title": " Sunset ",
                }
            },
            "photo-privacy-models": {"123": {"isPublic": True}},
            "person-models": {"42@N00": {"realname": "", "username": "ann"}},
            "photo-tags-models": {"123": {"tags": [{"id": "t1"}, {"id": "t2"}]}},
            "tag-models": {"t1": {"tagRaw": "Golden Hour"}, "t2": {"tagRaw": "sea"}},
        }
    }
}


def flickr_context(
    make_context,
    state=None,
    thumb="123",
    parent="photo-well-scrappy-view",
    media="photo-well-media-scrappy-view",
):
    html = FLICKR_HTML.format(thumb=thumb, parent=parent, media=media)
    return make_context(FLICKR_URL, html, script_state=state or FLICKR_STATE)


def flickr_registries(state):
    return state["appContext"]["modelRegistries"]


class TestFlickrAdapter:
    """Test Flickr photo extraction."""

    @pytest.mark.unit
    def test_regular_view(self, make_context):
        result = FlickrAdapter().try_extract(flickr_context(make_context))
        assert result.to_wire() == [
            True,
            ["123", "42@N00", ["Sunset", "ann"], ["1", "65535", "abc"], ["Golden Hour", "sea"]],
        ]

    @pytest.mark.unit
    def test_lightbox_view(self, make_context):
        context = flickr_context(
            make_context,
            parent="photo-page-lightbox-scrappy-view",
            media="photo-well-media-view",
        )
        assert FlickrAdapter().extract_active_item(context).item_id == "123"

    @pytest.mark.unit
    def test_real_name_is_preferred(self, make_context):
        state = copy.deepcopy(FLICKR_STATE)
        flickr_registries(state)["person-models"]["42@N00"]["realname"] = "Ann Lee"
        item = FlickrAdapter().extract_active_item(flickr_context(make_context, state))
        assert item.display_name.owner_name == "Ann Lee"

    @pytest.mark.unit
    def test_foreign_thumbnail(self, make_context):
        assert FlickrAdapter().extract_active_item(flickr_context(make_context, thumb="999")) is None

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "registry,key,value",
        [
            ("photo-privacy-models", "isPublic", False),
            ("photo-models", "safetyLevel", 2),
            ("photo-models", "mediaType", "video"),
        ],
    )
    def test_unpermitted_photos(self, make_context, registry, key, value):
        state = copy.deepcopy(FLICKR_STATE)
        flickr_registries(state)[registry]["123"][key] = value
        assert FlickrAdapter().extract_active_item(flickr_context(make_context, state)) is None

    @pytest.mark.unit
    def test_uninitialised_tags(self, make_context):
        state = copy.deepcopy(FLICKR_STATE)
        del flickr_registries(state)["photo-tags-models"]["123"]
        assert FlickrAdapter().extract_active_item(flickr_context(make_context, state)) is None

    @pytest.mark.unit
    def test_without_app_context(self, make_context):
        context = make_context(FLICKR_URL, FLICKR_HTML)
        assert FlickrAdapter().try_extract(context).status is ExtractionStatus.NO_ITEM

    @pytest.mark.unit
    def test_parse_older_thumbnail_form(self):
        url = "https://c1.staticflickr.com/9/8000/123_s3cr3t_q.jpg"
        assert FlickrAdapter.parse_thumbnail_url(url) == ("9", "8000", "s3cr3t")


# 500px

FIVEHUNDRED_PHOTO = {
    "id": 456,
    "user_id": 789,
    "name": " Harbour ",
    "privacy": False,
    "nsfw": False,
    "images": [
        {"size": 2, "url": "https://drscdn.500px.org/photo/456/q%3D50_w%3D140_h%3D140/abc123?v=1"},
        {"size": 4, "url": "https://drscdn.500px.org/photo/456/m%3D900/def456"},
    ],
    "user": {"fullname": "Bo Chen"},
    "tags": ["harbour", "dusk"],
}


def fivehundred_state(photo=None, path=("content", "currentView", "navigationContext")):
    collection = {"selectedPhotoOffset": 0, "photos": [photo or FIVEHUNDRED_PHOTO]}
    for key in reversed(path):
        collection = {key: collection}
    return {"App": collection}


class TestFiveHundredPxAdapter:
    """Test 500px photo extraction."""

    @pytest.mark.unit
    def test_regular_view(self, make_context):
        context = make_context(
            "https://500px.com/photo/456/harbour-dusk", "<p></p>", script_state=fivehundred_state()
        )
        assert FiveHundredPxAdapter().try_extract(context).to_wire() == [
            True,
            ["456", "789", ["Harbour", "Bo Chen"], ["abc123", "def456"], ["harbour", "dusk"]],
        ]

    @pytest.mark.unit
    def test_lightbox_over_user_gallery(self, make_context):
        state = fivehundred_state(
            path=("controller", "layout", "bodyRegion", "currentView", "collection")
        )
        context = make_context(
            "https://500px.com/photo/456/harbour-dusk",
            '<div id="pxLightbox-1"></div>',
            script_state=state,
        )
        assert FiveHundredPxAdapter().extract_active_item(context).owner_id == "789"

    @pytest.mark.unit
    def test_url_and_model_must_agree(self, make_context):
        context = make_context(
            "https://500px.com/photo/999/other", "<p></p>", script_state=fivehundred_state()
        )
        assert FiveHundredPxAdapter().extract_active_item(context) is None

    @pytest.mark.unit
    @pytest.mark.parametrize("key,value", [("privacy", True), ("nsfw", True)])
    def test_hidden_photos(self, make_context, key, value):
        photo = dict(FIVEHUNDRED_PHOTO, **{key: value})
        context = make_context(
            "https://500px.com/photo/456/x", "<p></p>", script_state=fivehundred_state(photo)
        )
        assert FiveHundredPxAdapter().extract_active_item(context) is None

    @pytest.mark.unit
    def test_image_key(self):
        assert FiveHundredPxAdapter.image_key("http://x/photo/456/m%3D900/key/", "456") == "key"
        assert FiveHundredPxAdapter.image_key("http://x/photo/457/m%3D900/key", "456") is None


# ipernity

IPERNITY_STATE = {
    "doc_id": 555,
    "Data": {
        "doc": {"555": {"type": "1", "share": "31", "user_id": 12, "title": "Tom &amp; Jerry"}},
        "user": {"12": {"title": " Ann &lt;3 "}},
    },
}

IPERNITY_HTML = '<img id="doc_img" data-lowres="http://cdn.ipernity.com/12/34/56/555.abc.240.jpg?x=1">'

IPERNITY_LIGHTBOX_STATE = {
    "lightbox-instance": {
        "is_shown": True,
        "current_doc": {
            "type": "1",
            "share": "31",
            "doc_id": "555",
            "user_id": "12",
            "title": "Dawn",
            "thumbs": {
                "240": {
                    "path": "/12/34/56/",
                    "secret": "abc",
                    "farm": 3,
                    "url": "http://u3.ipernity.com/12/34/56/555.abc.240.jpg",
                }
            },
        },
        "users": {"12": {"title": "Ann"}},
    }
}


class TestIpernityAdapter:
    """Test ipernity document extraction."""

    @pytest.mark.unit
    def test_regular_view_decodes_entities(self, make_context):
        context = make_context(
            "http://www.ipernity.com/doc/ann/555", IPERNITY_HTML, script_state=IPERNITY_STATE
        )
        assert IpernityAdapter().try_extract(context).to_wire() == [
            True,
            ["555", "12", ["Tom & Jerry", "Ann <3"], ["", "12/34/56", "abc"]],
        ]

    @pytest.mark.unit
    def test_lightbox_view_with_farm(self, make_context):
        context = make_context(
            "http://www.ipernity.com/home/ann", "<p></p>", script_state=IPERNITY_LIGHTBOX_STATE
        )
        item = IpernityAdapter().extract_active_item(context)
        assert item.media_reference == ("3", "12/34/56", "abc")
        assert IpernityAdapter().thumbnail_url(item) == (
            "http://u3.ipernity.com/12/34/56/555.abc.240.jpg"
        )

    @pytest.mark.unit
    def test_restricted_share(self, make_context):
        state = copy.deepcopy(IPERNITY_STATE)
        state["Data"]["doc"]["555"]["share"] = "0"
        context = make_context("http://www.ipernity.com/doc/ann/555", IPERNITY_HTML, script_state=state)
        assert IpernityAdapter().extract_active_item(context) is None

    @pytest.mark.unit
    def test_thumbnail_must_name_the_document(self):
        url = "http://u2.ipernity.com/1/2/777.abc.240.jpg"
        assert IpernityAdapter.parse_thumbnail_url(url, "555") is None
        assert IpernityAdapter.parse_thumbnail_url(url, "777") == ("2", "1/2", "abc")


# 1x

ONEX_HTML = """
<input type="hidden" id="loadimg_userid_321" value="99">
<input type="hidden" id="loadimg_src_ld_321" value="https://1x.com/images/user/{key}-ld.jpg">
<span id="phototitle"> Fog </span>
<div id="slideshow_name">Photo by Cara Diaz</div>
"""


class TestOneXAdapter:
    """Test 1x photo extraction."""

    @pytest.mark.unit
    def test_photo_page(self, make_context):
        context = make_context("https://1x.com/photo/321/fog", ONEX_HTML.format(key="abc123"))
        assert OneXAdapter().try_extract(context).to_wire() == [
            True,
            ["321", "99", ["Fog", "Cara Diaz"], "abc123"],
        ]

    @pytest.mark.unit
    def test_inputs_for_another_photo(self, make_context):
        context = make_context("https://1x.com/photo/322/fog", ONEX_HTML.format(key="abc123"))
        assert OneXAdapter().extract_active_item(context) is None

    @pytest.mark.unit
    def test_empty_thumbnail_key(self, make_context):
        context = make_context("https://1x.com/photo/321/fog", ONEX_HTML.format(key=""))
        assert OneXAdapter().extract_active_item(context) is None


# 72dpi

SEVENTY_TWO_DPI_HTML = """
<html><head><meta property="og:url" content="http://www.72dpi.com/photo/{og_id}"></head>
<body>
<a class="namelink" href="/gallery/42/">Ann</a>
<table><tr><td class="phototitle">"{title}" <span class="medtxt">© Ann Lee</span></td></tr></table>
</body></html>
"""


def seventy_two_dpi_context(make_context, title="  My Photo  ", og_id="123"):
    return make_context(
        "http://www.72dpi.com/photo/123/my-photo",
        SEVENTY_TWO_DPI_HTML.format(title=title, og_id=og_id),
    )


class TestSeventyTwoDpiAdapter:
    """Test 72dpi photo extraction."""

    @pytest.mark.unit
    def test_photo_page(self, make_context):
        result = SeventyTwoDpiAdapter().try_extract(seventy_two_dpi_context(make_context))
        assert result.to_wire() == [True, ["123", "42", ["My Photo", "Ann Lee"]]]

    @pytest.mark.unit
    def test_untitled_matches_empty_title(self, make_context):
        adapter = SeventyTwoDpiAdapter()
        untitled = adapter.extract_active_item(seventy_two_dpi_context(make_context, "Untitled"))
        empty = adapter.extract_active_item(seventy_two_dpi_context(make_context, ""))
        assert untitled.display_name.title == ""
        assert untitled == empty

    @pytest.mark.unit
    def test_og_url_for_another_photo(self, make_context):
        context = seventy_two_dpi_context(make_context, og_id="1234")
        assert SeventyTwoDpiAdapter().extract_active_item(context) is None
