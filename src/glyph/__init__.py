"""glyph - small AI helpers for the terminal, built on a streaming client."""

from __future__ import annotations

from glyph.config import Config, load_config
from glyph.errors import (
    AuthenticationError,
    ConfigError,
    GitError,
    GlyphError,
    NotFoundError,
    RateLimitError,
    RemoteError,
    ServerError,
    StoreError,
    TransportError,
)
from glyph.mind import FragmentStream, ProviderConfig, StreamClient, client_from_config

__version__ = "0.1.0"

__all__ = [
    "Config",
    "load_config",
    "FragmentStream",
    "ProviderConfig",
    "StreamClient",
    "client_from_config",
    # Errors
    "AuthenticationError",
    "ConfigError",
    "GitError",
    "GlyphError",
    "NotFoundError",
    "RateLimitError",
    "RemoteError",
    "ServerError",
    "StoreError",
    "TransportError",
]
