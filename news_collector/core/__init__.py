"""
Core domain models and pure pipeline logic.

This package contains data types and business logic that is
independent of any I/O boundary.
"""

from .chunker import chunk_text, iter_chunks
from .observable import Observable
from .ranker import rank
from .types import (
    ChatMessage,
    ChatResponse,
    ExtractionResult,
    ModelInfo,
    News,
    RunState,
    Source,
    SourceResult,
    UnificationResult,
    UnifiedNews,
)

__all__ = [
    "ChatMessage",
    "ChatResponse",
    "ExtractionResult",
    "ModelInfo",
    "News",
    "Observable",
    "RunState",
    "Source",
    "SourceResult",
    "UnificationResult",
    "UnifiedNews",
    "chunk_text",
    "iter_chunks",
    "rank",
]
