"""Unit tests for optional-path lookup, string helpers and validators."""

import pytest

from src.extractor.base.models import DisplayName
from src.extractor.base.utils import (
    get_path,
    host_check,
    is_integer_string,
    nth_last_index_of,
    object_exists,
    stringify,
    substring_after,
    trim_url_argument,
)
from src.extractor.base.validators import (
    canonical_title,
    display_name,
    ids_agree,
    looks_like_filename,
    non_empty,
    url_references_id,
    url_segment_starts_with_id,
)


class TestOptionalPath:
    """Test lookups through nested script data."""

    STATE = {"a": {"b": [{"c": 1}, None]}, "flag": False}

    @pytest.mark.unit
    def test_object_exists_full_path(self):
        assert object_exists(self.STATE, "a", "b", 0, "c")

    @pytest.mark.unit
    def test_object_exists_missing_intermediate(self):
        assert not object_exists(self.STATE, "a", "x", "c")

    @pytest.mark.unit
    def test_object_exists_non_container_intermediate(self):
        """Stepping into a scalar reports absence rather than raising."""
        assert not object_exists(self.STATE, "flag", "anything")

    @pytest.mark.unit
    def test_object_exists_index_out_of_range(self):
        assert not object_exists(self.STATE, "a", "b", 5)

    @pytest.mark.unit
    def test_object_exists_present_null(self):
        """A key holding None still exists."""
        assert object_exists(self.STATE, "a", "b", 1)

    @pytest.mark.unit
    def test_get_path_value_and_default(self):
        assert get_path(self.STATE, "a", "b", 0, "c") == 1
        assert get_path(self.STATE, "a", "missing") is None
        assert get_path(self.STATE, "a", "missing", default="x") == "x"

    @pytest.mark.unit
    def test_get_path_ignores_bool_index(self):
        assert get_path([1, 2], True) is None

    @pytest.mark.unit
    def test_get_path_without_keys_returns_root(self):
        assert get_path(self.STATE) is self.STATE


class TestStringHelpers:
    """Test string helpers used by URL parsing."""

    @pytest.mark.unit
    def test_stringify_numbers(self):
        assert stringify(139404290) == "139404290"
        assert stringify(139404290.0) == "139404290"
        assert stringify(1.5) == "1.5"

    @pytest.mark.unit
    def test_stringify_passes_through_other_values(self):
        assert stringify(True) is True
        assert stringify("42") == "42"
        assert stringify(None) is None

    @pytest.mark.unit
    def test_trim_url_argument(self):
        assert trim_url_argument("http://a/b.jpg?x=1") == "http://a/b.jpg"
        assert trim_url_argument("http://a/b?x=1?y") == "http://a/b?x=1"
        assert trim_url_argument("http://a/b.jpg") == "http://a/b.jpg"

    @pytest.mark.unit
    def test_nth_last_index_of(self):
        text = "a/b/c/d"
        assert nth_last_index_of(text, "/", 1) == 5
        assert nth_last_index_of(text, "/", 3) == 1
        assert nth_last_index_of(text, "/", 4) == -1
        assert nth_last_index_of(text, "/", 1, 4) == 3

    @pytest.mark.unit
    def test_is_integer_string(self):
        assert is_integer_string("0123")
        assert not is_integer_string("")
        assert not is_integer_string("12a")
        assert not is_integer_string("-1")

    @pytest.mark.unit
    def test_substring_after(self):
        assert substring_after("a/img/b", "/img/") == "b"
        assert substring_after("x/y/z", "/", last=True) == "z"
        assert substring_after("abc", "/") is None


class TestHostCheck:
    """Test host matching boundaries."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "url,expected",
        [
            ("https://flickr.com/photos/x/1", True),
            ("https://www.flickr.com/photos/x/1", True),
            ("http://m.www.flickr.com/", True),
            ("https://notflickr.com/", False),
            ("https://flickr.com.evil.net/", False),
            ("ftp://www.flickr.com/", False),
            ("file:///flickr.com/", False),
            ("not a url", False),
        ],
    )
    def test_host_boundaries(self, url, expected):
        assert host_check(url, "flickr.com") is expected

    @pytest.mark.unit
    def test_malformed_url_is_non_match(self):
        assert host_check("http://[::1", "flickr.com") is False


class TestValidators:
    """Test cross-source checks and canonicalization."""

    @pytest.mark.unit
    def test_non_empty(self):
        assert non_empty("") is None
        assert non_empty(None) is None
        assert non_empty("x") == "x"
        assert non_empty([]) == []

    @pytest.mark.unit
    def test_ids_agree(self):
        assert ids_agree("123", "123")
        assert not ids_agree("123", "1234")
        assert not ids_agree("", "")
        assert not ids_agree(123, 123)
        assert not ids_agree("123", None)

    @pytest.mark.unit
    def test_url_segment_starts_with_id(self):
        url = "https://live.staticflickr.com/65535/123_abc_z.jpg"
        assert url_segment_starts_with_id(url, "123", "_")
        assert not url_segment_starts_with_id(url, "12", "_")
        assert not url_segment_starts_with_id("no-slashes", "123", "_")

    @pytest.mark.unit
    def test_url_references_id(self):
        assert url_references_id("http://72dpi.com/photo/55", "55")
        assert url_references_id("http://72dpi.com/photo/55/", "55")
        assert not url_references_id("http://72dpi.com/photo/555", "55")

    @pytest.mark.unit
    def test_canonical_title(self):
        assert canonical_title("  Sunset ") == "Sunset"
        assert canonical_title(" Untitled ", ("Untitled",)) == ""
        assert canonical_title("Untitled") == "Untitled"

    @pytest.mark.unit
    def test_display_name(self):
        assert display_name("Sunset", "Ann") == DisplayName("Sunset", "Ann")
        assert display_name("", "Ann") == DisplayName("", "Ann")
        assert display_name("Sunset", "") is None
        assert display_name(None, "Ann") is None
        assert display_name("Sunset", 7) is None

    @pytest.mark.unit
    def test_looks_like_filename(self):
        assert looks_like_filename("IMG_0001.JPG", (".jpg",))
        assert not looks_like_filename("Harbour", (".jpg",))
