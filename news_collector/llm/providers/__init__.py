from .base import ChatProvider, select_text_models
from .factory import available_providers, create_provider
from .openrouter import OpenRouterProvider

__all__ = [
    "ChatProvider",
    "OpenRouterProvider",
    "available_providers",
    "create_provider",
    "select_text_models",
]
