import requests

from smartvault.sources import metadata
from smartvault.sources.metadata import clean_metadata_title, fetch_metadata, parse_metadata


PAGE = """
<html><head>
<title>Fallback &amp; Title</title>
<meta property="og:title" content="Chef Ana on Instagram: &quot;Crispy tofu bowls&quot;">
<meta name="description" content="Weeknight dinner idea">
<meta property="og:image" content="/static/cover.jpg">
</head><body></body></html>
"""


class FakeResponse:
    def __init__(self, text, url, status=200):
        self.text = text
        self.url = url
        self.status = status

    def raise_for_status(self):
        if self.status >= 400:
            raise requests.HTTPError(f"{self.status} error")


class TestParseMetadata:
    def test_open_graph_tags(self):
        meta = parse_metadata(PAGE, "https://www.instagram.com/reel/abc/")
        assert meta.title == 'Chef Ana on Instagram: "Crispy tofu bowls"'
        assert meta.description == "Weeknight dinner idea"
        assert meta.image_url == "https://www.instagram.com/static/cover.jpg"

    def test_title_tag_fallback(self):
        meta = parse_metadata("<title>  Plain\n Page </title>", "https://example.com/a")
        assert meta.title == "Plain Page"
        assert meta.description is None
        assert meta.image_url is None

    def test_angle_bracket_inside_content(self):
        html = '<title>Fallback</title><meta property="og:title" content="Cats > Dogs: the debate">'
        assert parse_metadata(html, "https://example.com/a").title == "Cats > Dogs: the debate"

    def test_unquoted_attributes(self):
        html = "<meta property=og:title content=Hello><meta name=description content=Short>"
        meta = parse_metadata(html, "https://example.com/a")
        assert meta.title == "Hello"
        assert meta.description == "Short"

    def test_twitter_tags_by_name(self):
        html = '<meta name="twitter:title" content="Tweet title"><meta name="twitter:image" content="https://cdn.x/i.png">'
        meta = parse_metadata(html, "https://example.com/a")
        assert meta.title == "Tweet title"
        assert meta.image_url == "https://cdn.x/i.png"

    def test_hostname_when_no_title(self):
        assert parse_metadata("<html></html>", "https://example.com/a").title == "example.com"


class TestFetchMetadata:
    def test_fetches_and_parses(self, monkeypatch):
        seen = {}

        def fake_get(url, **kwargs):
            seen.update(kwargs, url=url)
            return FakeResponse(PAGE, url)

        monkeypatch.setattr(metadata.requests, "get", fake_get)
        meta = fetch_metadata("https://www.instagram.com/reel/abc/")

        assert meta.description == "Weeknight dinner idea"
        assert seen["timeout"] == metadata.TIMEOUT
        assert "User-Agent" in seen["headers"]

    def test_http_error_returns_hostname(self, monkeypatch):
        monkeypatch.setattr(metadata.requests, "get", lambda url, **kw: FakeResponse("", url, status=503))
        meta = fetch_metadata("https://example.com/a")
        assert meta.title == "example.com"
        assert meta.image_url is None

    def test_connection_error_returns_hostname(self, monkeypatch):
        def boom(url, **kwargs):
            raise requests.ConnectionError("refused")

        monkeypatch.setattr(metadata.requests, "get", boom)
        assert fetch_metadata("https://example.com/a").title == "example.com"


class TestCleanMetadataTitle:
    def test_strips_account_prefix_hashtags_and_quotes(self):
        raw = 'Chef Ana on Instagram: "Best pasta ever #pasta #food"'
        assert clean_metadata_title(raw) == "Best pasta ever"

    def test_long_title_cut_at_word(self):
        raw = "word " * 40
        cleaned = clean_metadata_title(raw)
        assert cleaned.endswith("word...")
        assert len(cleaned) <= 103

    def test_only_hashtags(self):
        assert clean_metadata_title("#food #yum") == "Video"
