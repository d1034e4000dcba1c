"""Tests for app.services.extractor."""

from app.models.fetch import PageFetchResult
from app.services.extractor import extract_signals, image_format

_URL = "https://example.com/page"


def _page(head: str = "", body: str = "", lang: str = "") -> str:
    lang_attr = f' lang="{lang}"' if lang else ""
    return f"<!DOCTYPE html><html{lang_attr}><head>{head}</head><body>{body}</body></html>"


# ---------------------------------------------------------------------------
# Meta tags
# ---------------------------------------------------------------------------

class TestMetaTags:
    def test_basic_tags(self):
        html = _page(
            head=(
                "<title> My Page </title>"
                '<meta name="description" content="A description">'
                '<meta name="viewport" content="width=device-width">'
                '<meta name="robots" content="index, follow">'
                '<meta name="author" content="Jo">'
                '<meta name="keywords" content="a, b">'
                '<link rel="canonical" href="https://example.com/page">'
            ),
            lang="en",
        )
        meta = extract_signals(html, _URL).meta_tags
        assert meta.title == "My Page"
        assert meta.description == "A description"
        assert meta.viewport == "width=device-width"
        assert meta.robots == "index, follow"
        assert meta.author == "Jo"
        assert meta.keywords == "a, b"
        assert meta.canonical == "https://example.com/page"
        assert meta.language == "en"

    def test_attribute_names_and_values_are_case_insensitive(self):
        html = _page(head='<META NAME="Description" CONTENT="Upper case">')
        assert extract_signals(html, _URL).meta_tags.description == "Upper case"

    def test_empty_content_is_not_recorded(self):
        html = _page(head='<meta name="description" content="   "><meta name="keywords">')
        meta = extract_signals(html, _URL).meta_tags
        assert meta.description is None
        assert meta.keywords is None

    def test_first_occurrence_wins(self):
        html = _page(
            head='<meta name="description" content="first"><meta name="description" content="second">'
        )
        assert extract_signals(html, _URL).meta_tags.description == "first"

    def test_open_graph_and_twitter_are_independent(self):
        html = _page(
            head=(
                '<meta property="og:title" content="OG Title">'
                '<meta property="og:image" content="https://example.com/og.png">'
            )
        )
        meta = extract_signals(html, _URL).meta_tags
        assert meta.og_title == "OG Title"
        assert meta.og_image == "https://example.com/og.png"
        assert meta.twitter_title is None
        assert meta.twitter_image is None
        assert meta.title is None

    def test_twitter_fields_accept_property_attribute(self):
        html = _page(
            head=(
                '<meta name="twitter:card" content="summary_large_image">'
                '<meta property="twitter:site" content="@example">'
            )
        )
        meta = extract_signals(html, _URL).meta_tags
        assert meta.twitter_card == "summary_large_image"
        assert meta.twitter_site == "@example"

    def test_language_falls_back_to_content_language(self):
        html = _page(head='<meta http-equiv="Content-Language" content="de">')
        assert extract_signals(html, _URL).meta_tags.language == "de"


# ---------------------------------------------------------------------------
# Headings
# ---------------------------------------------------------------------------

class TestHeadings:
    def test_nested_markup_is_stripped(self):
        html = _page(body="<h2>Hello <span>big</span> <em>World</em></h2>")
        assert extract_signals(html, _URL).headings.h2 == ["Hello big World"]

    def test_empty_headings_are_excluded(self):
        html = _page(body='<h1>  </h1><h1><img src="a.png"></h1><h1>Real</h1>')
        assert extract_signals(html, _URL).headings.h1 == ["Real"]

    def test_order_is_preserved_within_level(self):
        html = _page(body="<h3>One</h3><h2>Mid</h2><h3>Two</h3><h3>Three</h3>")
        headings = extract_signals(html, _URL).headings
        assert headings.h3 == ["One", "Two", "Three"]
        assert headings.h2 == ["Mid"]
        assert headings.h6 == []


# ---------------------------------------------------------------------------
# Links
# ---------------------------------------------------------------------------

class TestLinks:
    _LINKS = (
        '<a href="/about">About</a>'
        '<a href="https://example.com/x">X</a>'
        '<a href="https://other.org/">Other</a>'
        '<a href="#top">Top</a>'
        '<a href="javascript:void(0)">JS</a>'
        '<a href="mailto:team@example.com">Mail</a>'
        '<a href="https://other.org/p" rel="nofollow noopener">Sponsored</a>'
    )

    def test_counts(self):
        links = extract_signals(_page(body=self._LINKS), _URL).links
        assert links.total == 7
        assert links.internal == 2
        assert links.external == 2
        assert links.nofollow == 1

    def test_internal_plus_external_never_exceeds_total(self):
        links = extract_signals(_page(body=self._LINKS), _URL).links
        assert links.internal + links.external <= links.total

    def test_host_match_is_scheme_insensitive(self):
        html = _page(body='<a href="http://EXAMPLE.com/plain">Plain</a>')
        links = extract_signals(html, _URL).links
        assert links.internal == 1
        assert links.external == 0

    def test_empty_href_counts_toward_neither(self):
        links = extract_signals(_page(body='<a href="">Empty</a>'), _URL).links
        assert links.internal == 0
        assert links.external == 0

    def test_www_is_a_different_host_by_default(self):
        html = _page(body='<a href="https://example.com/a">A</a>')
        links = extract_signals(html, "https://www.example.com/", treat_www_as_same_host=False).links
        assert links.external == 1

    def test_www_policy_treats_hosts_as_equal(self):
        html = _page(body='<a href="https://example.com/a">A</a>')
        links = extract_signals(html, "https://www.example.com/", treat_www_as_same_host=True).links
        assert links.internal == 1
        assert links.external == 0


# ---------------------------------------------------------------------------
# Images
# ---------------------------------------------------------------------------

class TestImages:
    def test_alt_and_formats(self):
        html = _page(
            body=(
                '<img src="/a.PNG" alt="A">'
                '<img src="b.jpg?v=2" alt=" ">'
                '<img src="data:image/svg+xml;base64,PHN2Zz4=">'
                "<img>"
            )
        )
        images = extract_signals(html, _URL).images
        assert images.total == 4
        assert images.with_alt == 1
        assert images.without_alt == 3
        assert images.with_alt + images.without_alt == images.total
        assert images.formats == {"png": 1, "jpg": 1, "svg": 1, "unknown": 1}

    def test_image_format_helper(self):
        assert image_format("https://cdn.example.com/img/photo.WEBP#x") == "webp"
        assert image_format("https://cdn.example.com/img/photo") == "unknown"
        assert image_format("/path.with.dots/file") == "unknown"
        assert image_format("") == "unknown"


# ---------------------------------------------------------------------------
# Whole-bundle behaviour
# ---------------------------------------------------------------------------

class TestExtractSignals:
    def test_minimal_valid_page(self):
        html = "<html><head><title>Hi</title></head><body><h1>Hi</h1><p>word word word</p></body></html>"
        bundle = extract_signals(html, _URL)
        assert bundle.headings.h1 == ["Hi"]
        assert bundle.content.word_count == 3
        assert bundle.meta_tags.title == "Hi"
        assert bundle.meta_tags.description is None

    def test_empty_input_yields_zeroed_bundle(self):
        bundle = extract_signals("", _URL)
        assert bundle.links.total == 0
        assert bundle.images.total == 0
        assert bundle.images.formats == {}
        assert bundle.content.word_count == 0
        assert bundle.content.paragraph_count == 0
        assert bundle.content.readability_score == 0
        assert bundle.content.content_length == "short"
        assert bundle.content.keyword_density == {}
        assert bundle.schema_info.count == 0
        assert bundle.performance.html_size == 0
        assert bundle.performance.estimated_load_time == 0
        assert bundle.headings.total() == 0
        assert all(value is None for value in bundle.meta_tags.model_dump().values())

    def test_non_html_input_does_not_raise(self):
        bundle = extract_signals("just some plain text, not markup at all", _URL)
        assert bundle.headings.total() == 0
        assert bundle.meta_tags.title is None

    def test_malformed_markup_degrades_gracefully(self):
        html = '<html><head><title>Broken</title><body><h1>Unclosed <p>text here <a href="http://[bad">x</a>'
        bundle = extract_signals(html, _URL)
        assert bundle.links.total == 1
        assert bundle.links.internal == 0
        assert bundle.links.external == 0

    def test_https_page_with_mixed_content(self):
        html = _page(body='<img src="http://insecure.example.com/a.png">')
        bundle = extract_signals(html, "https://example.com")
        assert bundle.security.is_https is True
        assert bundle.security.mixed_content is True

    def test_fetch_metadata_feeds_security_and_performance(self):
        html = _page(body="<p>Hello there</p>")
        fetch = PageFetchResult(
            url=_URL,
            response_time_ms=250,
            html=html,
            headers=[("Content-Encoding", "br"), ("strict-transport-security", "max-age=3600")],
        )
        bundle = extract_signals(html, _URL, fetch)
        assert bundle.performance.response_time_ms == 250
        assert bundle.performance.compression_enabled is True
        assert bundle.security.has_hsts is True

    def test_repeated_extraction_is_identical(self):
        html = _page(body="<p>beta alpha beta alpha gamma delta</p>")
        first = extract_signals(html, _URL)
        second = extract_signals(html, _URL)
        assert first.model_dump_json() == second.model_dump_json()
        assert list(first.content.keyword_density) == list(second.content.keyword_density)
