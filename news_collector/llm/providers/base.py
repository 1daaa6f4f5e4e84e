"""Abstract interface for chat-completion LLM backends."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ...core.types import ChatMessage, ChatResponse, ModelInfo


class ChatProvider(ABC):
    """Provider interface for the chat-completion and model catalog boundary."""

    @abstractmethod
    def chat(self, model_id: str, messages: list[ChatMessage]) -> ChatResponse:
        """Send one chat-completion request.

        Raises:
            ProviderError: On transport failure or non-success status
            ConfigurationError: When no credential is available
        """
        raise NotImplementedError

    @abstractmethod
    def list_models(self) -> list[ModelInfo]:
        """Return the models offered by the provider."""
        raise NotImplementedError


def select_text_models(models: list[ModelInfo]) -> list[ModelInfo]:
    """Keep models that accept and produce text."""
    return [model for model in models if model.is_text_model]
