from .base_provider import BaseProvider
from .gemini_adapter import GeminiAdapter
from .openai_adapter import OpenAIAdapter
from .registry import ProviderClient

__all__ = [
    "BaseProvider",
    "GeminiAdapter",
    "OpenAIAdapter",
    "ProviderClient"
]
