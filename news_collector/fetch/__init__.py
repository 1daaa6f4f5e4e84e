"""
Source fetching and text extraction.

This package handles HTTP fetching, HTML-to-text extraction
and feed parsing for configured sources.
"""

from .extractor import extract_text, html_to_text
from .feeds import parse_feed_text
from .fetcher import FetchResult, HttpSourceFetcher, fetch_source_text, fetch_url

__all__ = [
    "FetchResult",
    "HttpSourceFetcher",
    "extract_text",
    "fetch_source_text",
    "fetch_url",
    "html_to_text",
    "parse_feed_text",
]
