"""Provider factory and registry for chat-completion backends."""

from __future__ import annotations

import logging
from typing import Callable

from ...config import LoggingConfig, ProviderConfig
from .base import ChatProvider
from .openrouter import OpenRouterProvider


ProviderBuilder = type[ChatProvider]

_PROVIDER_REGISTRY: dict[str, ProviderBuilder] = {
    "openrouter": OpenRouterProvider,
    "openai": OpenRouterProvider,
    "openai_compatible": OpenRouterProvider,
    "openai-compatible": OpenRouterProvider,
}


def available_providers() -> list[str]:
    """Return the set of registered provider names."""
    return sorted(_PROVIDER_REGISTRY.keys())


def create_provider(
    provider_cfg: ProviderConfig,
    token_getter: Callable[[], str | None],
    log_cfg: LoggingConfig,
    llm_logger: logging.Logger | None = None,
) -> ChatProvider:
    """Build a provider instance from runtime config."""
    name = provider_cfg.name.lower().strip()
    builder = _PROVIDER_REGISTRY.get(name)
    if builder is None:
        supported = ", ".join(available_providers())
        raise ValueError(f"Unsupported provider: {provider_cfg.name}. Supported: {supported}")
    return builder(provider_cfg, token_getter, log_cfg, llm_logger)
