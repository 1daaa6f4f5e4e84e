"""Merge News items from all sources into ranked-ready UnifiedNews events."""

from __future__ import annotations

from datetime import datetime
import logging
from typing import Sequence

from ..core.types import ChatMessage, News, Source, UnificationResult, UnifiedNews, utcnow
from ..errors import UnificationError
from ..llm.json_output import EventGroup, decode_event_groups
from ..llm.prompts import build_unification_prompt
from ..llm.providers.base import ChatProvider
from ..llm.tracing import record_span_error, set_span_output, start_span
from ..logging_utils import log_event

logger = logging.getLogger(__name__)


class Unifier:
    """Group News items into events with one LLM call.

    When the call or the decoding of its output fails, every input item
    becomes its own event with importance 0.
    """

    def __init__(self, provider: ChatProvider):
        self.provider = provider

    def unify(self, all_news: Sequence[News], model_id: str) -> UnificationResult:
        if not all_news:
            return UnificationResult(events=[], status="empty")

        try:
            events = self._group(all_news, model_id)
        except Exception as exc:  # noqa: BLE001
            error = exc if isinstance(exc, UnificationError) else UnificationError(f"{type(exc).__name__}: {exc}")
            log_event(
                logger,
                "Unification failed, using per-article fallback",
                level=logging.WARNING,
                event="unification_fallback",
                items=len(all_news),
                error=str(error),
            )
            return UnificationResult(events=fallback_events(all_news), status="fallback", error=str(error))

        log_event(
            logger,
            "Unification complete",
            event="unification_complete",
            items=len(all_news),
            events=len(events),
        )
        return UnificationResult(events=events, status="ok")

    def _group(self, all_news: Sequence[News], model_id: str) -> list[UnifiedNews]:
        prompt = build_unification_prompt(all_news)
        with start_span(
            "news_collector.unify",
            kind="llm",
            input_value=prompt,
            attributes={"llm.model": model_id, "news.count": len(all_news)},
        ) as span:
            try:
                response = self.provider.chat(model_id, [ChatMessage("user", prompt)])
                content = response.first_content
                set_span_output(span, content)
                groups = decode_event_groups(content)
            except Exception as exc:
                record_span_error(span, exc)
                raise UnificationError(f"{type(exc).__name__}: {exc}") from exc

        published = utcnow()
        return [build_event(group, all_news, published) for group in groups]


def build_event(group: EventGroup, all_news: Sequence[News], published: datetime) -> UnifiedNews:
    """Resolve a decoded group against the positional News list.

    Indices outside the list are dropped.
    """
    matching = tuple(all_news[idx] for idx in group.ids if 0 <= idx < len(all_news))
    return UnifiedNews(
        title=group.title,
        main_content=group.summary,
        published_date=published,
        sources=distinct_sources(matching),
        original_articles=matching,
        importance_score=group.importance,
    )


def distinct_sources(news: Sequence[News]) -> tuple[Source, ...]:
    """Distinct sources of news, in order of first appearance."""
    seen: dict[str, Source] = {}
    for item in news:
        seen.setdefault(item.source.id, item.source)
    return tuple(seen.values())


def fallback_events(all_news: Sequence[News]) -> list[UnifiedNews]:
    """One singleton event per News item, importance 0, input order kept."""
    return [
        UnifiedNews(
            title=item.title,
            main_content=item.content,
            published_date=item.date,
            sources=(item.source,),
            original_articles=(item,),
            importance_score=0,
        )
        for item in all_news
    ]
