"""
News Collector - LLM-powered news extraction and unification.

This package fetches a user-configured list of sources, extracts discrete
news items from each source's text with a chat-completion model, merges
near-duplicates across sources into events and ranks them by importance.

Main entry point is the CLI via `news-collector refresh`.

Example:
    $ news-collector sources add "Example" https://example.com --limit 5
    $ news-collector select-model openai/gpt-4o-mini
    $ news-collector refresh
"""

__all__ = [
    "__version__",
    "News",
    "PipelineOrchestrator",
    "RefreshScheduler",
    "SettingsStore",
    "Source",
    "UnifiedNews",
]
__version__ = "0.1.0"

from .core.types import News, Source, UnifiedNews
from .pipeline.orchestrator import PipelineOrchestrator
from .scheduler import RefreshScheduler
from .settings import SettingsStore
