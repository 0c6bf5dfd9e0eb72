"""Ollama local inference adapter."""

from __future__ import annotations

import json
import logging
from typing import Any

from glyph.mind.framing import NDJSONScanner
from glyph.mind.models import (
    DEFAULT_OLLAMA_HOST,
    SKIP,
    TERMINAL,
    ChatMessage,
    Delta,
    Frame,
    HTTPRequestSpec,
    Skip,
    Text,
)

logger = logging.getLogger(__name__)


class OllamaAdapter:
    """Adapter for Ollama's ``/api/chat`` endpoint.

    The response is newline-delimited JSON, one
    ``{"message": {"content": ...}, "done": bool}`` object per line. A line
    with ``done`` set ends the stream after its content (if any) is emitted.
    """

    def __init__(self, model: str, host: str = "") -> None:
        self._model = model
        self._host = (host or DEFAULT_OLLAMA_HOST).rstrip("/")

    @property
    def name(self) -> str:
        return "ollama"

    @property
    def model(self) -> str:
        return self._model

    @property
    def url(self) -> str:
        return f"{self._host}/api/chat"

    def build_request(self, system: str, user: str) -> HTTPRequestSpec:
        messages = [ChatMessage.system(system), ChatMessage.user(user)]
        return HTTPRequestSpec(
            url=self.url,
            body={
                "model": self._model,
                "messages": [m.to_dict() for m in messages],
                "stream": True,
            },
        )

    def new_scanner(self) -> NDJSONScanner:
        return NDJSONScanner()

    def extract_delta(self, frame: Frame) -> Delta:
        if frame.data is None:
            return SKIP
        try:
            line: Any = json.loads(frame.data)
        except (ValueError, RecursionError) as exc:
            logger.debug("Skipping malformed line: %s", exc)
            return Skip("malformed json")
        if not isinstance(line, dict):
            return Skip("unexpected payload")

        message = line.get("message") or {}
        content = message.get("content") if isinstance(message, dict) else None
        done = line.get("done") is True
        if isinstance(content, str) and content:
            return Text(content, final=done)
        if done:
            return TERMINAL
        return SKIP
