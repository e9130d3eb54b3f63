import pytest

from linkweaver.exceptions import LinkParseError
from linkweaver.utils.urls import is_fetchable, parse_seed, resolve_link, same_host


def test_resolve_relative_to_containing_page():
    assert resolve_link("intro.html", "https://example.com/docs/") == "https://example.com/docs/intro.html"
    assert resolve_link("/about", "https://example.com/docs/") == "https://example.com/about"


def test_resolve_drops_fragment():
    assert resolve_link("/faq#billing", "https://example.com/") == "https://example.com/faq"


def test_resolve_strips_surrounding_whitespace():
    assert resolve_link("  /faq\n", "https://example.com/") == "https://example.com/faq"


def test_resolve_keeps_other_schemes():
    assert resolve_link("mailto:me@example.com", "https://example.com/") == "mailto:me@example.com"
    assert resolve_link("httq://invalid_scheme.html", "https://example.com/") == "httq://invalid_scheme.html"


@pytest.mark.parametrize("href", ["http:// /", "http://[::1", "http://example.com:port/", "http://"])
def test_resolve_rejects_malformed_urls(href):
    with pytest.raises(LinkParseError) as exc:
        resolve_link(href, "https://example.com/")
    assert exc.value.link == href


def test_parse_seed_appends_separator():
    assert parse_seed("https://example.com") == "https://example.com/"
    assert parse_seed("https://example.com/blog") == "https://example.com/blog/"
    assert parse_seed("https://example.com/") == "https://example.com/"


def test_parse_seed_requires_absolute_url():
    with pytest.raises(LinkParseError):
        parse_seed("example.com/page")


def test_is_fetchable():
    assert is_fetchable("https://example.com/")
    assert is_fetchable("httq://typo")
    assert not is_fetchable("mailto:me@example.com")
    assert not is_fetchable("javascript:void(0)")
    assert not is_fetchable("tel:+15555550100")


def test_same_host():
    assert same_host("https://example.com/", "http://example.com/other")
    assert not same_host("https://example.com/", "https://www.example.com/")
    assert not same_host("https://example.com/", "mailto:me@example.com")
