"""Per-source driver: fetch, chunk, and extract until the source limit is reached."""

from __future__ import annotations

import logging
from typing import Callable

from ..core.chunker import DEFAULT_CHUNK_CHARS, chunk_text
from ..core.types import News, Source, SourceResult
from ..errors import FetchError
from ..logging_utils import log_event
from .news_extractor import NewsExtractor

logger = logging.getLogger(__name__)

SourceFetcher = Callable[[Source], str]


class SourceProcessor:
    """Extract at most source.limit News items from one source.

    Chunks are processed in order. Before each chunk the remaining quota is
    computed; once it reaches zero iteration stops, and every extraction is
    truncated to the remaining quota. A fetch failure yields an empty
    result with status "fetch_error" instead of raising.
    """

    def __init__(
        self,
        fetcher: SourceFetcher,
        extractor: NewsExtractor,
        chunk_chars: int = DEFAULT_CHUNK_CHARS,
    ):
        self.fetcher = fetcher
        self.extractor = extractor
        self.chunk_chars = chunk_chars

    def process(
        self,
        source: Source,
        model_id: str,
        should_continue: Callable[[], bool] | None = None,
    ) -> SourceResult:
        try:
            text = self.fetcher(source)
        except FetchError as exc:
            return self._fetch_failed(source, str(exc))
        except Exception as exc:  # noqa: BLE001
            logger.exception("Unexpected error fetching %s", source.url)
            return self._fetch_failed(source, f"{type(exc).__name__}: {exc}")

        chunks = chunk_text(text, self.chunk_chars)
        items: list[News] = []
        processed = 0
        for chunk in chunks:
            remaining = source.limit - len(items)
            if remaining <= 0:
                break
            if should_continue is not None and not should_continue():
                break
            result = self.extractor.extract(chunk, source, model_id, max_items=remaining)
            items.extend(result.items[:remaining])
            processed += 1

        log_event(
            logger,
            "Source processed",
            event="source_processed",
            source=source.name,
            items=len(items),
            limit=source.limit,
            chunks_total=len(chunks),
            chunks_processed=processed,
        )
        return SourceResult(
            source=source,
            items=items,
            status="ok" if items else "empty",
            chunks_total=len(chunks),
            chunks_processed=processed,
        )

    def _fetch_failed(self, source: Source, error: str) -> SourceResult:
        log_event(
            logger,
            "Source fetch failed",
            level=logging.WARNING,
            event="fetch_failed",
            source=source.name,
            url=source.url,
            error=error,
        )
        return SourceResult(source=source, items=[], status="fetch_error", error=error)
