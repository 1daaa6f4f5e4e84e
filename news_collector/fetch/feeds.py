"""RSS/Atom feed parsing into plain text for extraction."""

from __future__ import annotations

from typing import Any

import feedparser

from ..errors import FetchError
from .extractor import html_to_text


def parse_feed_text(raw: bytes | str, url: str | None = None) -> str:
    """Render feed entries as plain-text blocks, one block per entry.

    Each block holds the entry title, its summary stripped of HTML, and its
    link. A malformed feed is tolerated as long as entries were recovered.

    Raises:
        FetchError: If the document has no entries
    """
    # feedparser treats str input as a possible URL or path
    if isinstance(raw, str):
        raw = raw.encode("utf-8")
    feed = feedparser.parse(raw)
    entries = getattr(feed, "entries", None) or []
    if not entries:
        msg = "Feed has no entries"
        exc = getattr(feed, "bozo_exception", None)
        if getattr(feed, "bozo", 0) and exc:
            msg = f"Invalid RSS/Atom feed ({exc})"
        raise FetchError(msg, url=url)
    return "\n\n".join(_entry_block(entry) for entry in entries)


def _entry_block(entry: dict[str, Any]) -> str:
    title = (entry.get("title") or "").strip()
    summary = html_to_text(entry.get("summary") or entry.get("description") or "")
    link = (entry.get("link") or "").strip()
    lines = [line for line in (title, summary, link) if line]
    return "\n".join(lines)
