"""Anthropic Messages API adapter."""

from __future__ import annotations

import json
import logging
from typing import Any

from glyph.mind.framing import EventStreamScanner
from glyph.mind.models import (
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

ANTHROPIC_MESSAGES_URL = "https://api.anthropic.com/v1/messages"
ANTHROPIC_VERSION = "2023-06-01"
DEFAULT_CLAUDE_MODEL = "claude-sonnet-4-6"
CLAUDE_MAX_TOKENS = 8192


class AnthropicAdapter:
    """Adapter for the Anthropic Messages API.

    Anthropic's event stream differs from the OpenAI convention:

    * each payload is preceded by an ``event: <type>`` line;
    * text arrives on ``content_block_delta`` events whose inner delta has
      ``type == "text_delta"``;
    * the stream ends with a ``message_stop`` event, there is no ``[DONE]``.
    """

    def __init__(self, api_key: str, model: str = "") -> None:
        self._api_key = api_key
        self._model = model or DEFAULT_CLAUDE_MODEL

    @property
    def name(self) -> str:
        return "claude"

    @property
    def model(self) -> str:
        return self._model

    @property
    def url(self) -> str:
        return ANTHROPIC_MESSAGES_URL

    def build_request(self, system: str, user: str) -> HTTPRequestSpec:
        return HTTPRequestSpec(
            url=ANTHROPIC_MESSAGES_URL,
            headers={
                "x-api-key": self._api_key,
                "anthropic-version": ANTHROPIC_VERSION,
            },
            body={
                "model": self._model,
                "max_tokens": CLAUDE_MAX_TOKENS,
                "system": system,
                "messages": [ChatMessage.user(user).to_dict()],
                "stream": True,
            },
        )

    def new_scanner(self) -> EventStreamScanner:
        return EventStreamScanner(sentinel=None)

    def extract_delta(self, frame: Frame) -> Delta:
        if frame.event == "message_stop":
            return TERMINAL
        if frame.event == "error" and frame.data is not None:
            logger.warning("Anthropic stream reported an error: %s", frame.data)
            return Skip("error event")
        if frame.event != "content_block_delta" or frame.data is None:
            return SKIP

        try:
            payload: Any = json.loads(frame.data)
        except (ValueError, RecursionError) as exc:
            logger.debug("Skipping malformed content_block_delta: %s", exc)
            return Skip("malformed json")
        if not isinstance(payload, dict):
            return Skip("unexpected payload")

        delta = payload.get("delta") or {}
        if not isinstance(delta, dict) or delta.get("type") != "text_delta":
            return SKIP
        text = delta.get("text")
        if isinstance(text, str) and text:
            return Text(text)
        return SKIP
