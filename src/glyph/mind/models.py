"""Data models for the streaming client.

Defines chat messages, provider configuration, the adapter's request
description, decoded frames, and the per-frame ``Delta`` tagged union.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Union

if TYPE_CHECKING:
    from glyph.config import Config

DEFAULT_OLLAMA_HOST = "http://localhost:11434"

# ---------------------------------------------------------------------------
# Messages
# ---------------------------------------------------------------------------


class Role(str, enum.Enum):
    """Message roles used by the single-exchange protocol."""

    SYSTEM = "system"
    USER = "user"


@dataclass(frozen=True)
class ChatMessage:
    """One message of the outgoing request."""

    role: Role
    content: str

    @classmethod
    def system(cls, text: str) -> ChatMessage:
        return cls(role=Role.SYSTEM, content=text)

    @classmethod
    def user(cls, text: str) -> ChatMessage:
        return cls(role=Role.USER, content=text)

    def to_dict(self) -> dict[str, str]:
        return {"role": self.role.value, "content": self.content}


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


@dataclass
class ProviderConfig:
    """What the provider factory needs to build a client.

    All fields are pass-through strings; the factory only checks presence.
    """

    provider: str = ""
    model: str = ""
    api_key: str = ""
    host: str = ""

    @classmethod
    def from_config(cls, config: Config) -> ProviderConfig:
        """Project the tool configuration onto the fields the factory reads."""
        return cls(
            provider=config.ai_provider,
            model=config.ai_model,
            api_key=config.api_key,
            host=config.ollama_host,
        )


@dataclass
class HTTPRequestSpec:
    """Everything the transport needs to issue one POST."""

    url: str
    body: dict[str, Any]
    headers: dict[str, str] = field(default_factory=dict)


# ---------------------------------------------------------------------------
# Frames and deltas
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Frame:
    """One decoded protocol unit read from a response body.

    ``event`` is the current event-stream event type (empty when the
    protocol has none). ``data`` is the payload text, or ``None`` for a
    bare ``event:`` line.
    """

    event: str
    data: str | None


@dataclass(frozen=True)
class Text:
    """A non-empty fragment to emit.

    When ``final`` is set the stream ends right after this fragment.
    """

    text: str
    final: bool = False


@dataclass(frozen=True)
class Terminal:
    """The stream ends now; no further frames are read."""


@dataclass(frozen=True)
class Skip:
    """The frame carried nothing of interest."""

    reason: str = ""


Delta = Union[Text, Terminal, Skip]

TERMINAL = Terminal()
SKIP = Skip()
