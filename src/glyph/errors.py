"""Error hierarchy for glyph.

Every failure that can reach a caller before streaming starts is a
:class:`GlyphError`. Once a :class:`~glyph.mind.stream.FragmentStream` has
been handed out, protocol noise and dropped connections are no longer
raised; the stream simply ends.
"""

from __future__ import annotations


class GlyphError(Exception):
    """Base exception for all glyph errors.

    Attributes:
        message: Human readable description.
        cause: Underlying exception, if any.
    """

    def __init__(self, message: str, *, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.message}: {self.cause}"
        return self.message


class ConfigError(GlyphError):
    """Invalid provider selection, missing credential, or unreadable config."""


class TransportError(GlyphError):
    """The request could not be built or the connection could not be made."""


class GitError(GlyphError):
    """A git invocation failed."""


class StoreError(GlyphError):
    """The pin store could not be read or written, or an entry is missing."""


class RemoteError(GlyphError):
    """The remote service answered the initial request with HTTP >= 400.

    Attributes:
        status_code: HTTP status code.
        body: Response body text, as returned by the service.
        provider: Which adapter made the request.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int,
        body: str = "",
        provider: str = "",
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body
        self.provider = provider


class AuthenticationError(RemoteError):
    """401/403: invalid API key or insufficient permissions."""


class NotFoundError(RemoteError):
    """404: unknown model or endpoint."""


class RateLimitError(RemoteError):
    """429: rate limit exceeded."""


class ServerError(RemoteError):
    """500-599: provider internal error."""


# ---------------------------------------------------------------------------
# HTTP status code mapping
# ---------------------------------------------------------------------------

_STATUS_TO_ERROR: dict[int, type[RemoteError]] = {
    401: AuthenticationError,
    403: AuthenticationError,
    404: NotFoundError,
    429: RateLimitError,
}


def error_from_status(status_code: int, body: str, *, provider: str = "") -> RemoteError:
    """Create the appropriate RemoteError subclass from an HTTP status code.

    Args:
        status_code: HTTP status code from the provider response.
        body: Response body text.
        provider: Provider name.

    Returns:
        An instance of the appropriate RemoteError subclass.
    """
    cls = _STATUS_TO_ERROR.get(status_code)
    if cls is None:
        cls = ServerError if status_code >= 500 else RemoteError
    message = f"server returned {status_code}: {body}"
    return cls(message, status_code=status_code, body=body, provider=provider)
