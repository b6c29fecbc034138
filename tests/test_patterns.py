import pytest

from sitegate.patterns import InvalidInput, parse_pattern, parse_url


def test_parse_plain_domain() -> None:
    pattern = parse_pattern("  Example.COM ")
    assert pattern.hostname == "example.com"
    assert pattern.base_domain == "example.com"
    assert pattern.protocol is None
    assert pattern.path == ""
    assert not pattern.is_wildcard_subdomain
    assert not pattern.is_exact_anchor
    assert not pattern.has_wildcard_suffix


def test_parse_wildcard_subdomain() -> None:
    pattern = parse_pattern("*.website.com")
    assert pattern.is_wildcard_subdomain
    assert pattern.hostname == "*.website.com"
    assert pattern.base_domain == "website.com"


def test_base_domain_strips_conventional_prefixes() -> None:
    assert parse_pattern("www.reddit.com").base_domain == "reddit.com"
    assert parse_pattern("m.youtube.com").base_domain == "youtube.com"
    assert parse_pattern("www.reddit.com").hostname == "www.reddit.com"
    assert parse_pattern("mail.google.com").base_domain == "mail.google.com"


def test_parse_protocol_port_and_path() -> None:
    pattern = parse_pattern("https://Example.com:8080/Some/Path")
    assert pattern.protocol == "https"
    assert pattern.hostname == "example.com"
    assert pattern.port == "8080"
    assert pattern.path == "/some/path"
    assert pattern.resource_segment == "/some/path"


def test_wildcard_scheme_means_any_scheme() -> None:
    assert parse_pattern("*://example.com/*").protocol is None


def test_anchor_is_stripped() -> None:
    pattern = parse_pattern("website.com/page$")
    assert pattern.is_exact_anchor
    assert pattern.path == "/page"


def test_anchor_without_path_pins_root() -> None:
    pattern = parse_pattern("website.com$")
    assert pattern.is_exact_anchor
    assert pattern.path == "/"


def test_wildcard_path_and_resource_segment() -> None:
    pattern = parse_pattern("reddit.com/r/askscience/*")
    assert pattern.has_wildcard_suffix
    assert pattern.resource_segment == "/r/askscience"
    assert parse_pattern("reddit.com/r/*").resource_segment is None
    assert parse_pattern("reddit.com/r").resource_segment is None


def test_query_is_kept_apart_from_path() -> None:
    pattern = parse_pattern("youtube.com/watch?v=abcdef")
    assert pattern.path == "/watch"
    assert pattern.query == "v=abcdef"


def test_raw_regex_has_no_structure() -> None:
    pattern = parse_pattern("^https?://(www\\.)?example\\.com/.*")
    assert pattern.is_raw_regex
    assert pattern.hostname == ""
    assert pattern.path == ""
    assert pattern.protocol is None


def test_hostless_input_degrades_to_literal_host() -> None:
    pattern = parse_pattern("/only/a/path")
    assert pattern.hostname == "/only/a/path"
    assert pattern.path == ""


@pytest.mark.parametrize("value", ["", "   ", None])
def test_blank_input_is_rejected(value) -> None:
    with pytest.raises(InvalidInput):
        parse_pattern(value)


def test_parse_url() -> None:
    parsed = parse_url("https://WWW.Reddit.com/r/Cars/?sort=new#top")
    assert parsed is not None
    assert parsed.protocol == "https"
    assert parsed.hostname == "www.reddit.com"
    assert parsed.base_domain == "reddit.com"
    assert parsed.path == "/r/cars/"
    assert parsed.query == "sort=new"
    assert parsed.fragment == "top"


@pytest.mark.parametrize("value", ["", "not a url", "reddit.com/r/cars", "http://[::1"])
def test_parse_url_rejects_non_urls(value: str) -> None:
    assert parse_url(value) is None
