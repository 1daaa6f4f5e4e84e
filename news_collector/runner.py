"""
Wiring of the collection pipeline from configuration.

build_orchestrator assembles provider, fetcher, extractor, source
processor, aggregator and unifier around a settings store. run_refresh
sets up logging and tracing and performs one synchronous refresh.
"""

from __future__ import annotations

import logging

from .config import AppConfig
from .fetch.fetcher import HttpSourceFetcher
from .llm.providers.base import ChatProvider
from .llm.providers.factory import create_provider
from .llm.tracing import setup_langfuse
from .logging_utils import setup_llm_logger, setup_logging
from .pipeline.aggregator import Aggregator
from .pipeline.news_extractor import NewsExtractor
from .pipeline.orchestrator import PipelineOrchestrator, RunOutcome
from .pipeline.source_processor import SourceFetcher, SourceProcessor
from .pipeline.unifier import Unifier
from .settings import SettingsStore


def build_settings(cfg: AppConfig) -> SettingsStore:
    return SettingsStore(cfg.settings.resolved_path(), token_env=cfg.provider.api_key_env)


def build_provider(
    cfg: AppConfig,
    settings: SettingsStore,
    llm_logger: logging.Logger | None = None,
) -> ChatProvider:
    return create_provider(cfg.provider, settings.bearer_token, cfg.logging, llm_logger)


def build_orchestrator(
    cfg: AppConfig,
    settings: SettingsStore,
    provider: ChatProvider | None = None,
    fetcher: SourceFetcher | None = None,
    llm_logger: logging.Logger | None = None,
) -> PipelineOrchestrator:
    """Assemble the pipeline. provider and fetcher default to the HTTP implementations."""
    provider = provider or build_provider(cfg, settings, llm_logger)
    fetcher = fetcher or HttpSourceFetcher(cfg.fetch, cfg.extract)
    processor = SourceProcessor(fetcher, NewsExtractor(provider), chunk_chars=cfg.chunk.max_chars)
    aggregator = Aggregator(processor, concurrency=cfg.pipeline.source_concurrency)
    return PipelineOrchestrator(settings, aggregator, Unifier(provider))


def run_refresh(cfg: AppConfig, settings: SettingsStore | None = None) -> tuple[PipelineOrchestrator, RunOutcome]:
    """Set up logging/tracing and run one refresh.

    Raises:
        ConfigurationError: If no model or credential is configured
    """
    setup_logging(cfg.logging)
    llm_logger = setup_llm_logger(cfg.logging)
    setup_langfuse(cfg.langfuse)
    settings = settings or build_settings(cfg)
    orchestrator = build_orchestrator(cfg, settings, llm_logger=llm_logger)
    outcome = orchestrator.refresh()
    return orchestrator, outcome
