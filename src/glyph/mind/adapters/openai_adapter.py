"""OpenAI-compatible chat completions adapter (Groq by default)."""

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

GROQ_CHAT_URL = "https://api.groq.com/openai/v1/chat/completions"
DONE_SENTINEL = "[DONE]"


class OpenAICompatibleAdapter:
    """Adapter for ``/openai/v1/chat/completions`` style endpoints.

    Each ``data:`` line is a self-contained JSON chunk; event types are
    ignored. The stream ends on the literal ``[DONE]`` payload or on a
    chunk whose first choice reports ``finish_reason == "stop"``.
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        *,
        url: str = GROQ_CHAT_URL,
        provider: str = "groq",
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._url = url
        self._provider = provider

    @property
    def name(self) -> str:
        return self._provider

    @property
    def model(self) -> str:
        return self._model

    @property
    def url(self) -> str:
        return self._url

    def build_request(self, system: str, user: str) -> HTTPRequestSpec:
        messages = [ChatMessage.system(system), ChatMessage.user(user)]
        return HTTPRequestSpec(
            url=self._url,
            headers={"Authorization": f"Bearer {self._api_key}"},
            body={
                "model": self._model,
                "messages": [m.to_dict() for m in messages],
                "stream": True,
            },
        )

    def new_scanner(self) -> EventStreamScanner:
        return EventStreamScanner(sentinel=DONE_SENTINEL)

    def extract_delta(self, frame: Frame) -> Delta:
        if frame.data is None:
            return SKIP
        try:
            chunk: Any = json.loads(frame.data)
        except (ValueError, RecursionError) as exc:
            logger.debug("Skipping malformed chunk: %s", exc)
            return Skip("malformed json")
        if not isinstance(chunk, dict):
            return Skip("unexpected payload")

        choices = chunk.get("choices")
        if not isinstance(choices, list) or not choices:
            return SKIP
        choice = choices[0]
        if not isinstance(choice, dict):
            return SKIP
        if choice.get("finish_reason") == "stop":
            return TERMINAL

        delta = choice.get("delta") or {}
        content = delta.get("content") if isinstance(delta, dict) else None
        if isinstance(content, str) and content:
            return Text(content)
        return SKIP
