"""JSON POST helper shared by every adapter."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from glyph.errors import TransportError, error_from_status

logger = logging.getLogger(__name__)


async def post(
    http_client: httpx.AsyncClient,
    url: str,
    headers: dict[str, str] | None,
    body: dict[str, Any],
    *,
    provider: str = "",
) -> httpx.Response:
    """Send a JSON POST and return the open streaming response.

    The caller owns the returned response and must close it.

    Args:
        http_client: Client used to send the request.
        url: Endpoint URL.
        headers: Extra headers; ``Content-Type`` is always set to JSON.
        body: Request payload, serialised to JSON.
        provider: Provider name attached to raised errors.

    Returns:
        The live response with its body not yet read.

    Raises:
        TransportError: The request could not be built or sent.
        RemoteError: The service answered with HTTP >= 400.
    """
    merged = dict(headers or {})
    merged["Content-Type"] = "application/json"

    try:
        request = http_client.build_request("POST", url, json=body, headers=merged)
    except (httpx.InvalidURL, TypeError, ValueError) as exc:
        raise TransportError("create request", cause=exc) from exc

    logger.debug("POST %s (%s)", url, provider or "unknown provider")
    try:
        response = await http_client.send(request, stream=True)
    except httpx.HTTPError as exc:
        raise TransportError("request", cause=exc) from exc

    if response.status_code >= 400:
        try:
            await response.aread()
            text = response.text
        except httpx.HTTPError as exc:
            logger.debug("Failed to read error body: %s", exc)
            text = ""
        finally:
            await response.aclose()
        logger.debug("%s returned %d", url, response.status_code)
        raise error_from_status(response.status_code, text, provider=provider)

    return response
