"""Streaming text-generation client.

One uniform, cancellable interface over Groq-style OpenAI-compatible
endpoints, a local Ollama server, and the Anthropic Messages API.
"""

from __future__ import annotations

from glyph.mind.client import (
    Client,
    StreamClient,
    VALID_PROVIDERS,
    build_adapter,
    client_from_config,
)
from glyph.mind.framing import END_OF_STREAM, EventStreamScanner, NDJSONScanner
from glyph.mind.models import (
    DEFAULT_OLLAMA_HOST,
    SKIP,
    TERMINAL,
    ChatMessage,
    Delta,
    Frame,
    HTTPRequestSpec,
    ProviderConfig,
    Role,
    Skip,
    Terminal,
    Text,
)
from glyph.mind.stream import FRAGMENT_BUFFER_SIZE, FragmentStream

__all__ = [
    "Client",
    "StreamClient",
    "VALID_PROVIDERS",
    "build_adapter",
    "client_from_config",
    # Streaming
    "FragmentStream",
    "FRAGMENT_BUFFER_SIZE",
    # Framing
    "END_OF_STREAM",
    "EventStreamScanner",
    "NDJSONScanner",
    # Models
    "DEFAULT_OLLAMA_HOST",
    "SKIP",
    "TERMINAL",
    "ChatMessage",
    "Delta",
    "Frame",
    "HTTPRequestSpec",
    "ProviderConfig",
    "Role",
    "Skip",
    "Terminal",
    "Text",
]
