"""Tests for target normalization and redirect URL building."""

from urllib.parse import parse_qs, urlparse

import pytest

from app.core.destination import (
    build_redirect_url,
    extract_utm_params,
    is_absolute_url,
    normalize_target,
)


class TestNormalizeTarget:
    @pytest.mark.parametrize("raw, expected", [
        ("example.com/page", "https://example.com/page"),
        ("  example.com  ", "https://example.com"),
        ("http://example.com", "http://example.com"),
        ("HTTPS://Example.com/x", "HTTPS://Example.com/x"),
        ("", ""),
        (None, ""),
    ])
    def test_scheme_prepended_only_when_missing(self, raw, expected):
        assert normalize_target(raw) == expected


class TestIsAbsoluteUrl:
    @pytest.mark.parametrize("url", ["https://example.com", "http://a.b/c?d=1"])
    def test_valid(self, url):
        assert is_absolute_url(url)

    @pytest.mark.parametrize("url", ["", "example.com", "/relative", "https://", "https://exa mple.com"])
    def test_invalid(self, url):
        assert not is_absolute_url(url)


class TestBuildRedirectUrl:
    def test_click_id_appended(self):
        url = build_redirect_url("https://example.com/page", "abc123")
        parsed = urlparse(url)
        assert parsed.netloc == "example.com"
        assert parsed.path == "/page"
        assert parse_qs(parsed.query) == {"sb_click": ["abc123"]}

    def test_existing_query_kept(self):
        url = build_redirect_url("https://example.com/p?ref=home", "abc123")
        assert parse_qs(urlparse(url).query) == {"ref": ["home"], "sb_click": ["abc123"]}

    def test_utm_forwarded_and_overrides_target(self):
        url = build_redirect_url(
            "https://example.com/p?utm_source=old",
            "abc123",
            {"utm_source": "instagram", "utm_campaign": "fall"},
        )
        qs = parse_qs(urlparse(url).query)
        assert qs["utm_source"] == ["instagram"]
        assert qs["utm_campaign"] == ["fall"]
        assert qs["sb_click"] == ["abc123"]

    def test_target_query_kept_verbatim(self):
        url = build_redirect_url("https://shop.example.com/p?flag&x=1", "abc")
        assert url == "https://shop.example.com/p?flag&x=1&sb_click=abc"

    def test_target_encoding_and_fragment_kept(self):
        url = build_redirect_url("https://example.com/p?q=a%2Fb+c&empty=#top", "abc")
        assert url == "https://example.com/p?q=a%2Fb+c&empty=&sb_click=abc#top"

    def test_existing_pairs_for_injected_keys_dropped(self):
        url = build_redirect_url(
            "https://example.com/p?flag&utm_source=old&utm_source=older&sb_click=stale",
            "abc",
            {"utm_source": "spring sale"},
        )
        assert url == "https://example.com/p?flag&sb_click=abc&utm_source=spring%20sale"

    def test_custom_click_param(self):
        url = build_redirect_url("https://example.com", "abc123", click_param="cid")
        assert parse_qs(urlparse(url).query) == {"cid": ["abc123"]}

    def test_malformed_target_returned_verbatim(self):
        assert build_redirect_url("not a url", "abc123") == "not a url"
        assert build_redirect_url("example.com/page", "abc123") == "example.com/page"


def test_extract_utm_params_ignores_others_and_blanks():
    params = {"utm_source": "ig", "utm_medium": "", "foo": "bar", "utm_campaign": "fall"}
    assert extract_utm_params(params) == {"utm_source": "ig", "utm_campaign": "fall"}
