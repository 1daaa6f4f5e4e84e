"""Ingestion, extraction and unification pipeline stages."""

from .aggregator import Aggregator
from .news_extractor import NewsExtractor
from .orchestrator import PipelineOrchestrator, RunOutcome
from .source_processor import SourceProcessor
from .unifier import Unifier, fallback_events

__all__ = [
    "Aggregator",
    "NewsExtractor",
    "PipelineOrchestrator",
    "RunOutcome",
    "SourceProcessor",
    "Unifier",
    "fallback_events",
]
