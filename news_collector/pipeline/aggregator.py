"""Run the source processor over every configured source."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
import logging
from typing import Callable, Sequence

from ..core.types import News, Source, SourceResult
from ..logging_utils import log_event
from .source_processor import SourceProcessor

logger = logging.getLogger(__name__)


class Aggregator:
    """Collect News from all sources.

    Sources run sequentially by default. With concurrency > 1 they run on a
    thread pool; results are still merged in source-list order, so the
    aggregated list does not depend on completion order.
    """

    def __init__(self, processor: SourceProcessor, concurrency: int = 1):
        self.processor = processor
        self.concurrency = max(1, concurrency)

    def aggregate(
        self,
        sources: Sequence[Source],
        model_id: str,
        should_continue: Callable[[], bool] | None = None,
    ) -> list[News]:
        news: list[News] = []
        for result in self.aggregate_results(sources, model_id, should_continue):
            news.extend(result.items)
        return news

    def aggregate_results(
        self,
        sources: Sequence[Source],
        model_id: str,
        should_continue: Callable[[], bool] | None = None,
    ) -> list[SourceResult]:
        if self.concurrency == 1 or len(sources) <= 1:
            results = []
            for source in sources:
                if should_continue is not None and not should_continue():
                    break
                results.append(self.processor.process(source, model_id, should_continue))
        else:
            with ThreadPoolExecutor(max_workers=self.concurrency) as pool:
                results = list(
                    pool.map(
                        lambda source: self.processor.process(source, model_id, should_continue),
                        sources,
                    )
                )

        log_event(
            logger,
            "Aggregation complete",
            event="aggregation_complete",
            sources=len(sources),
            failed=sum(1 for r in results if r.status == "fetch_error"),
            items=sum(len(r.items) for r in results),
        )
        return results
