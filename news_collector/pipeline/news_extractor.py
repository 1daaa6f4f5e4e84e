"""Extraction of News items from one chunk of source text via a single LLM call."""

from __future__ import annotations

import logging

from ..core.types import ChatMessage, ExtractionResult, News, Source, utcnow
from ..errors import ExtractionError, LLMOutputError, ProviderError
from ..llm.json_output import decode_extracted_items
from ..llm.prompts import build_extraction_prompt
from ..llm.providers.base import ChatProvider
from ..llm.tracing import record_span_error, set_span_output, start_span
from ..logging_utils import log_event

logger = logging.getLogger(__name__)


class NewsExtractor:
    """Turn a text chunk into News items attributed to a Source.

    Provider and decode failures never propagate: they produce an empty
    ExtractionResult whose status says what went wrong.
    """

    def __init__(self, provider: ChatProvider):
        self.provider = provider

    def extract(
        self,
        chunk: str,
        source: Source,
        model_id: str,
        max_items: int | None = None,
    ) -> ExtractionResult:
        prompt = build_extraction_prompt(chunk, source, max_items)
        with start_span(
            "news_collector.extract",
            kind="llm",
            input_value=prompt,
            attributes={"llm.model": model_id, "source.name": source.name},
        ) as span:
            try:
                response = self.provider.chat(model_id, [ChatMessage("user", prompt)])
                content = response.first_content
                set_span_output(span, content)
                decoded = decode_extracted_items(content)
            except ProviderError as exc:
                record_span_error(span, exc)
                return self._failed(source, "provider_error", exc)
            except LLMOutputError as exc:
                record_span_error(span, exc)
                return self._failed(source, "parse_error", exc)

        extracted_at = utcnow()
        items = [
            News(
                title=item.title,
                content=item.summary,
                url=source.url,
                date=extracted_at,
                source=source,
            )
            for item in decoded
        ]
        return ExtractionResult(items=items, status="ok" if items else "empty")

    def _failed(self, source: Source, status: str, cause: Exception) -> ExtractionResult:
        exc = ExtractionError(f"{type(cause).__name__}: {cause}")
        log_event(
            logger,
            "Extraction failed",
            level=logging.WARNING,
            event="extraction_failed",
            source=source.name,
            status=status,
            error=str(exc),
        )
        return ExtractionResult(items=[], status=status, error=str(exc))
