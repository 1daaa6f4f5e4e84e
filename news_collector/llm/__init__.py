"""LLM boundary, prompt rendering and observability."""

from .json_output import (
    EventGroup,
    ExtractedItem,
    decode_event_groups,
    decode_extracted_items,
    strip_code_fences,
)
from .prompts import build_extraction_prompt, build_unification_prompt
from .providers.base import ChatProvider, select_text_models
from .providers.factory import available_providers, create_provider
from .providers.openrouter import OpenRouterProvider
from .tracing import flush, record_span_error, set_span_output, setup_langfuse, start_span

__all__ = [
    "ChatProvider",
    "EventGroup",
    "ExtractedItem",
    "OpenRouterProvider",
    "available_providers",
    "build_extraction_prompt",
    "build_unification_prompt",
    "create_provider",
    "decode_event_groups",
    "decode_extracted_items",
    "flush",
    "record_span_error",
    "select_text_models",
    "set_span_output",
    "setup_langfuse",
    "start_span",
    "strip_code_fences",
]
