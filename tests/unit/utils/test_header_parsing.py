"""Tests for header string parsing and normalization."""

import pytest

from headershim.utils.headers import (
    MASKED_VALUE,
    canonicalize_header_name,
    mask_header_values,
    normalize_headers,
    parse_headers_string,
)


class TestParseHeadersString:
    """Test the flat "Key: Value, ..." parser."""

    def test_parses_multiple_pairs(self):
        assert parse_headers_string("X-A: 1, X-B: 2") == {"X-A": "1", "X-B": "2"}

    def test_empty_string_yields_empty_dict(self):
        result = parse_headers_string("")

        assert result == {}
        assert result is not None

    def test_colon_inside_value_is_preserved(self):
        assert parse_headers_string("Authorization: Bearer abc:def") == {
            "Authorization": "Bearer abc:def"
        }

    def test_whitespace_trimmed_on_both_sides(self):
        assert parse_headers_string("  X-Spaced  :  v  ") == {"X-Spaced": "v"}

    def test_malformed_pairs_are_dropped(self):
        assert parse_headers_string("bad-pair-no-colon, X-Ok: 1") == {"X-Ok": "1"}

    def test_empty_key_is_dropped(self):
        assert parse_headers_string(" : orphan, X-Ok: 1") == {"X-Ok": "1"}

    def test_empty_value_is_kept(self):
        assert parse_headers_string("X-Empty:") == {"X-Empty": ""}

    def test_last_duplicate_wins(self):
        assert parse_headers_string("X-A: 1, X-A: 2") == {"X-A": "2"}

    def test_only_separators(self):
        assert parse_headers_string(" , ,, ") == {}

    def test_key_case_is_kept(self):
        assert parse_headers_string("x-lower: a") == {"x-lower": "a"}


class TestNormalizeHeaders:
    """Test coercion of configured header sources."""

    def test_none(self):
        assert normalize_headers(None) == {}

    def test_mapping_values_are_stringified(self):
        assert normalize_headers({"X-Retry": 3}) == {"X-Retry": "3"}

    def test_json_object_string(self):
        assert normalize_headers('{"X-A": "1", "X-B": "two"}') == {
            "X-A": "1",
            "X-B": "two",
        }

    def test_delimited_string(self):
        assert normalize_headers("X-A: 1, X-B: 2") == {"X-A": "1", "X-B": "2"}

    def test_bytes_are_decoded(self):
        assert normalize_headers(b"X-A: 1") == {"X-A": "1"}

    def test_invalid_json_raises(self):
        with pytest.raises(ValueError, match="Invalid JSON"):
            normalize_headers('{"X-A": ')

    def test_nested_json_value_raises(self):
        with pytest.raises(ValueError, match="scalars"):
            normalize_headers('{"X-A": {"nested": true}}')

    def test_unsupported_type_raises(self):
        with pytest.raises(ValueError, match="Unsupported"):
            normalize_headers(["X-A: 1"])


class TestDisplayHelpers:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("content-type", "Content-Type"),
            ("x-request-id", "X-Request-Id"),
            ("etag", "ETag"),
            ("  WWW-authenticate ", "WWW-Authenticate"),
        ],
    )
    def test_canonicalize_header_name(self, name, expected):
        assert canonicalize_header_name(name) == expected

    def test_mask_header_values_hides_secrets(self):
        masked = mask_header_values({"x-proxy-token": "secret"})

        assert masked == {"X-Proxy-Token": MASKED_VALUE}
        assert "secret" not in masked.values()
