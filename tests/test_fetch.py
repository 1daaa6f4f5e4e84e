"""Tests for source fetching, HTML extraction and feed parsing."""

import httpx
import pytest

from news_collector.config import ExtractConfig, FetchConfig
from news_collector.core.types import Source
from news_collector.errors import FetchError
from news_collector.fetch import HttpSourceFetcher, extract_text, fetch_source_text, parse_feed_text

PAGE = """
<html>
  <head><title>Front page</title><style>body { color: red; }</style></head>
  <body>
    <script>var tracking = 1;</script>
    <h2>Rates cut by central bank</h2>
    <p>The bank lowered rates on Tuesday.</p>
    <h2>Storm hits coast</h2>
  </body>
</html>
"""

FEED = """<?xml version="1.0"?>
<rss version="2.0">
  <channel>
    <title>Example feed</title>
    <item>
      <title>First headline</title>
      <description>&lt;p&gt;Short &lt;b&gt;summary&lt;/b&gt;&lt;/p&gt;</description>
      <link>https://example.com/1</link>
    </item>
    <item>
      <title>Second headline</title>
      <link>https://example.com/2</link>
    </item>
  </channel>
</rss>
"""


def test_extract_text_bs4_keeps_body_text_and_drops_scripts():
    text = extract_text(PAGE, "bs4", [])

    assert text.splitlines() == [
        "Rates cut by central bank",
        "The bank lowered rates on Tuesday.",
        "Storm hits coast",
    ]


def test_extract_text_skips_unknown_methods():
    assert extract_text(PAGE, "nonexistent", ["bs4"]).startswith("Rates cut")


def test_extract_text_returns_none_for_empty_page():
    assert extract_text("<html><body></body></html>", "bs4", []) is None


def test_parse_feed_text_renders_one_block_per_entry():
    text = parse_feed_text(FEED)

    first, second = text.split("\n\n")
    assert first == "First headline\nShort summary\nhttps://example.com/1"
    assert second == "Second headline\nhttps://example.com/2"


def test_parse_feed_without_entries_raises():
    with pytest.raises(FetchError):
        parse_feed_text(b"<html><body>not a feed</body></html>", url="https://example.com")


def _transport(routes):
    def handler(request):
        status, body, content_type = routes[str(request.url)]
        return httpx.Response(status, content=body.encode("utf-8"), headers={"Content-Type": content_type})

    return httpx.MockTransport(handler)


def test_fetch_source_text_page_and_feed():
    transport = _transport(
        {
            "https://news.example.com/": (200, PAGE, "text/html; charset=utf-8"),
            "https://news.example.com/rss": (200, FEED, "application/rss+xml"),
        }
    )
    page = Source(name="Page", url="https://news.example.com/")
    feed = Source(name="Feed", url="https://news.example.com/rss", is_rss=True)

    assert "Storm hits coast" in fetch_source_text(page, FetchConfig(), ExtractConfig(), transport=transport)
    assert "Second headline" in fetch_source_text(feed, FetchConfig(), ExtractConfig(), transport=transport)


def test_fetch_source_text_non_success_raises_fetch_error():
    transport = _transport({"https://gone.example.com/": (404, "missing", "text/plain")})
    fetcher = HttpSourceFetcher(FetchConfig(), ExtractConfig(), transport=transport)

    with pytest.raises(FetchError) as excinfo:
        fetcher(Source(name="Gone", url="https://gone.example.com/"))

    assert excinfo.value.status_code == 404
    assert excinfo.value.url == "https://gone.example.com/"
