"""
Core data types for the News Collector.

This module defines the fundamental data structures used throughout the pipeline:
- Source: A configured origin with a per-run extraction limit
- News: One item extracted from a chunk of a source's text
- UnifiedNews: An event grouping one or more News items with an importance score
- ChatMessage / ChatResponse / ModelInfo: LLM boundary payloads
- ExtractionResult / SourceResult / UnificationResult: explicit step outcomes
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any
import uuid


def _new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Source:
    """A user-configured content source.

    Attributes:
        name: Display name
        url: Page or feed URL to fetch
        is_rss: True when the URL is an RSS/Atom feed, False for a free-text page
        limit: Maximum number of News items extracted from this source per run
        id: Stable identifier
    """

    name: str
    url: str
    is_rss: bool = False
    limit: int = 10
    id: str = field(default_factory=_new_id)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "url": self.url,
            "isRss": self.is_rss,
            "limit": self.limit,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Source":
        if not data.get("name") or not data.get("url"):
            raise ValueError("source entry requires name and url")
        is_rss = data.get("isRss", data.get("is_rss", False))
        kwargs: dict[str, Any] = {
            "name": str(data.get("name") or ""),
            "url": str(data.get("url") or ""),
            "is_rss": bool(is_rss),
            "limit": int(data.get("limit", 10)),
        }
        if data.get("id"):
            kwargs["id"] = str(data["id"])
        return cls(**kwargs)


@dataclass(frozen=True)
class News:
    """One news item extracted by the LLM from a chunk of source text.

    Attributes:
        title: Headline
        content: Summary text
        url: Origin URL (the source page the item was extracted from)
        date: Extraction timestamp
        source: The Source this item came from
    """

    title: str
    content: str
    url: str
    date: datetime
    source: Source


@dataclass(frozen=True)
class UnifiedNews:
    """An event merging one or more News items across sources.

    Attributes:
        title: Event headline
        main_content: Merged summary text
        published_date: Timestamp the event was produced
        sources: Distinct sources of original_articles, in order of first appearance
        original_articles: Constituent News items
        importance_score: Higher is more important
        id: Generated identifier
    """

    title: str
    main_content: str
    published_date: datetime
    sources: tuple[Source, ...]
    original_articles: tuple[News, ...]
    importance_score: int = 0
    id: str = field(default_factory=_new_id)


@dataclass(frozen=True)
class ChatMessage:
    role: str
    content: str


@dataclass(frozen=True)
class ChatResponse:
    """Chat completion response; only choice message contents are kept."""

    choices: list[str] = field(default_factory=list)

    @property
    def first_content(self) -> str:
        return self.choices[0] if self.choices else ""


@dataclass(frozen=True)
class ModelInfo:
    """A model entry from the provider catalog."""

    id: str
    name: str
    input_modalities: tuple[str, ...] = ()
    output_modalities: tuple[str, ...] = ()
    prompt_price: str | None = None
    completion_price: str | None = None

    @property
    def is_text_model(self) -> bool:
        return "text" in self.input_modalities and "text" in self.output_modalities

    @property
    def display_name(self) -> str:
        return f"{self.name} ({self.prompt_price or 'nan'}, {self.completion_price or 'nan'})"


@dataclass
class ExtractionResult:
    """Outcome of one extraction call.

    status is "ok", "empty" (model returned no items), "provider_error"
    or "parse_error". On error, items is empty and error holds the reason.
    """

    items: list[News] = field(default_factory=list)
    status: str = "ok"
    error: str | None = None

    @property
    def failed(self) -> bool:
        return self.status in ("provider_error", "parse_error")


@dataclass
class SourceResult:
    """Outcome of processing one source across its chunks.

    status is "ok", "empty" or "fetch_error".
    """

    source: Source
    items: list[News] = field(default_factory=list)
    status: str = "ok"
    error: str | None = None
    chunks_total: int = 0
    chunks_processed: int = 0


@dataclass
class UnificationResult:
    """Outcome of the unification step.

    status is "ok", "empty" (no input) or "fallback" (grouping failed and
    every input item became its own event).
    """

    events: list[UnifiedNews] = field(default_factory=list)
    status: str = "ok"
    error: str | None = None


class RunState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    FAILED = "failed"
