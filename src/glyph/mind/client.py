"""Client contract and provider factory."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Protocol, runtime_checkable

import httpx

from glyph.errors import ConfigError
from glyph.mind.adapters.anthropic_adapter import AnthropicAdapter
from glyph.mind.adapters.base import ProviderAdapter
from glyph.mind.adapters.ollama_adapter import OllamaAdapter
from glyph.mind.adapters.openai_adapter import OpenAICompatibleAdapter
from glyph.mind.models import ProviderConfig
from glyph.mind.stream import FragmentStream
from glyph.mind.transport import post

if TYPE_CHECKING:
    from glyph.config import Config

logger = logging.getLogger(__name__)

VALID_PROVIDERS = ("groq", "ollama", "claude")

# Connect and write are bounded; reads are not, since a local model can take
# a long time between tokens.
DEFAULT_TIMEOUT = httpx.Timeout(30.0, read=None)


@runtime_checkable
class Client(Protocol):
    """What every caller depends on: one stateless system + user exchange."""

    async def stream(
        self,
        system: str,
        user: str,
        *,
        cancel: asyncio.Event | None = None,
    ) -> FragmentStream:
        """Start a call and return its fragment stream.

        Startup failures (transport, HTTP status) are raised here. Anything
        that goes wrong afterwards ends the returned stream early instead.
        """
        ...


class StreamClient:
    """Runs one adapter's protocol over HTTP.

    Owns an ``httpx.AsyncClient`` unless one is injected. Use as an async
    context manager, or call :meth:`aclose`, to release it.
    """

    def __init__(
        self,
        adapter: ProviderAdapter,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._adapter = adapter
        self._owns_http = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=DEFAULT_TIMEOUT)

    @property
    def adapter(self) -> ProviderAdapter:
        return self._adapter

    async def stream(
        self,
        system: str,
        user: str,
        *,
        cancel: asyncio.Event | None = None,
    ) -> FragmentStream:
        """Send the request and hand the live body to a producer task.

        Args:
            system: System instruction text.
            user: User message text.
            cancel: Optional event; setting it stops the producer and ends
                the stream without further fragments.

        Returns:
            A :class:`FragmentStream` yielding text fragments in order.

        Raises:
            TransportError: The request could not be built or sent.
            RemoteError: The service answered with HTTP >= 400.
        """
        spec = self._adapter.build_request(system, user)
        response = await post(
            self._http,
            spec.url,
            spec.headers,
            spec.body,
            provider=self._adapter.name,
        )
        return FragmentStream(
            response,
            self._adapter.new_scanner(),
            self._adapter.extract_delta,
            cancel=cancel,
            provider=self._adapter.name,
        )

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    async def __aenter__(self) -> StreamClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


def build_adapter(config: ProviderConfig) -> ProviderAdapter:
    """Select the adapter for *config*, validating it without network I/O.

    Raises:
        ConfigError: Unknown provider name or missing API key.
    """
    provider = config.provider.strip().lower()

    if provider == "ollama":
        return OllamaAdapter(model=config.model, host=config.host)

    if provider in ("groq", ""):
        if not config.api_key:
            raise ConfigError("api_key is required for groq provider")
        return OpenAICompatibleAdapter(api_key=config.api_key, model=config.model)

    if provider == "claude":
        if not config.api_key:
            raise ConfigError("api_key is required for claude provider")
        return AnthropicAdapter(api_key=config.api_key, model=config.model)

    raise ConfigError(
        f"unknown ai_provider {config.provider!r} (valid: {', '.join(VALID_PROVIDERS)})"
    )


def client_from_config(
    config: ProviderConfig | Config,
    *,
    http_client: httpx.AsyncClient | None = None,
) -> StreamClient:
    """Construct the appropriate client from configuration.

    Args:
        config: Either a :class:`ProviderConfig` or the tool
            :class:`~glyph.config.Config`.
        http_client: Optional shared HTTP client (tests inject a
            ``MockTransport`` here).

    Raises:
        ConfigError: The configuration names an unknown provider or lacks a
            required credential.
    """
    if not isinstance(config, ProviderConfig):
        config = ProviderConfig.from_config(config)
    adapter = build_adapter(config)
    logger.debug("Using %s adapter (model=%s)", adapter.name, config.model or "default")
    return StreamClient(adapter, http_client=http_client)
