"""Base protocol for provider adapters."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from glyph.mind.framing import FrameScanner
from glyph.mind.models import Delta, Frame, HTTPRequestSpec


@runtime_checkable
class ProviderAdapter(Protocol):
    """Protocol that all provider adapters must satisfy.

    Each adapter owns one remote service's protocol knowledge: the endpoint,
    headers and request body, which framing the response uses, and how a
    decoded frame maps to a :data:`~glyph.mind.models.Delta`.
    """

    @property
    def name(self) -> str:
        """Return the provider identifier (e.g. 'groq', 'claude')."""
        ...

    def build_request(self, system: str, user: str) -> HTTPRequestSpec:
        """Describe the POST for one system + user exchange."""
        ...

    def new_scanner(self) -> FrameScanner:
        """Return a fresh scanner for one response body."""
        ...

    def extract_delta(self, frame: Frame) -> Delta:
        """Map one decoded frame to Text, Terminal or Skip."""
        ...
