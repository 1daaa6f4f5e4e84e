"""Exception types raised across the news collection pipeline."""

from __future__ import annotations


class NewsCollectorError(Exception):
    """Base class for all pipeline errors."""


class ConfigurationError(NewsCollectorError):
    """Raised when a run cannot start: no model selected or no credential."""


class FetchError(NewsCollectorError):
    """Raised when a source's content cannot be fetched or yields no text."""

    def __init__(self, message: str, url: str | None = None, status_code: int | None = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class ProviderError(NewsCollectorError):
    """Raised by the LLM boundary on transport failure or non-success status."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class LLMOutputError(NewsCollectorError):
    """Raised when model output cannot be decoded into the expected structure."""


class ExtractionError(NewsCollectorError):
    """Extraction of one chunk failed; the chunk contributes nothing."""


class UnificationError(NewsCollectorError):
    """The grouping call failed; the unifier falls back to singleton events."""


class FatalRunError(NewsCollectorError):
    """An unexpected failure aborted a pipeline run."""
