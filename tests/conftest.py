"""Shared fixtures: a scripted HTTP server built on httpx.MockTransport."""

from __future__ import annotations

import json
from collections.abc import AsyncIterator, Callable
from typing import Any

import httpx
import pytest


class ScriptedBody(httpx.AsyncByteStream):
    """Response body that serves canned lines and records how it was used."""

    def __init__(self, lines: list[str], *, fail_after: int | None = None) -> None:
        self._chunks = [(line + "\n").encode("utf-8") for line in lines]
        self._fail_after = fail_after
        self.reads = 0
        self.closed = False

    async def __aiter__(self) -> AsyncIterator[bytes]:
        for index, chunk in enumerate(self._chunks):
            if self._fail_after is not None and index >= self._fail_after:
                raise httpx.ReadError("connection reset by peer")
            self.reads += 1
            yield chunk

    async def aclose(self) -> None:
        self.closed = True


class FakeServer:
    """Answers every request with one scripted response."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.body: ScriptedBody | None = None
        self._status = 200
        self._error_text = ""
        self._raise: Exception | None = None

    def stream_lines(self, lines: list[str], *, fail_after: int | None = None) -> ScriptedBody:
        self.body = ScriptedBody(lines, fail_after=fail_after)
        self._status = 200
        return self.body

    def fail(self, status: int, text: str) -> None:
        self._status = status
        self._error_text = text

    def refuse(self, exc: Exception) -> None:
        self._raise = exc

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self._raise is not None:
            raise self._raise
        if self._status >= 400:
            return httpx.Response(self._status, text=self._error_text)
        assert self.body is not None, "stream_lines() was not called"
        return httpx.Response(self._status, stream=self.body)

    def http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> dict[str, Any]:
        return json.loads(self.last_request.content)


@pytest.fixture()
def fake_server() -> FakeServer:
    return FakeServer()


@pytest.fixture()
def isolated_config(tmp_path, monkeypatch) -> Callable[..., None]:
    """Point config and data discovery at *tmp_path* and clear GLYPH_* overrides."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.chdir(tmp_path)
    for var in (
        "GLYPH_AI_PROVIDER",
        "GLYPH_AI_MODEL",
        "GLYPH_API_KEY",
        "GLYPH_OLLAMA_HOST",
        "GLYPH_STYLE",
    ):
        monkeypatch.delenv(var, raising=False)

    def write(text: str) -> None:
        path = tmp_path / "xdg" / "glyph" / "config.toml"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")

    return write
