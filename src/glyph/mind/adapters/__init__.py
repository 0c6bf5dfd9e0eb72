"""Provider adapters for the streaming client."""

from glyph.mind.adapters.base import ProviderAdapter
from glyph.mind.adapters.anthropic_adapter import AnthropicAdapter
from glyph.mind.adapters.ollama_adapter import OllamaAdapter
from glyph.mind.adapters.openai_adapter import OpenAICompatibleAdapter

__all__ = [
    "ProviderAdapter",
    "AnthropicAdapter",
    "OllamaAdapter",
    "OpenAICompatibleAdapter",
]
