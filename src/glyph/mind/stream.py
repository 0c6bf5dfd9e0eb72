"""Fragment delivery for one streaming call.

A :class:`FragmentStream` owns a live HTTP response and a detached producer
task. The producer reads the body line by line, turns lines into frames with
the adapter's scanner, frames into deltas with the adapter's extractor, and
pushes text fragments into a bounded queue. The caller consumes the
fragments with ``async for``.

The sequence ends exactly once: on a terminal frame or sentinel, when the
remote closes the connection, on a mid-stream transport failure, or when
the cancellation event is set. In every case the response is closed.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Any

import httpx

from glyph.mind.framing import END_OF_STREAM, FrameScanner
from glyph.mind.models import Delta, Frame, Terminal, Text

logger = logging.getLogger(__name__)

FRAGMENT_BUFFER_SIZE = 64


async def _first_completed(*aws: Awaitable[Any]) -> None:
    """Wait until any of *aws* finishes, then cancel the rest."""
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
    finally:
        for task in tasks:
            if not task.done():
                task.cancel()


class FragmentStream:
    """Async iterator over the text fragments of one call.

    Attributes:
        provider: Name of the adapter that produced the stream.
        interrupted: The transport exception that ended the stream early,
            or ``None``. A dropped connection is never raised to the
            consumer; this is the only place it is visible.
    """

    def __init__(
        self,
        response: httpx.Response,
        scanner: FrameScanner,
        extract: Callable[[Frame], Delta],
        *,
        cancel: asyncio.Event | None = None,
        provider: str = "",
        maxsize: int = FRAGMENT_BUFFER_SIZE,
    ) -> None:
        self.provider = provider
        self.interrupted: BaseException | None = None
        self._response = response
        self._scanner = scanner
        self._extract = extract
        self._cancel = cancel if cancel is not None else asyncio.Event()
        self._queue: asyncio.Queue[str] = asyncio.Queue(maxsize=maxsize)
        self._done = asyncio.Event()
        self._task = asyncio.create_task(
            self._produce(), name=f"glyph-stream-{provider or 'anon'}"
        )

    # -----------------------------------------------------------------
    # Producer
    # -----------------------------------------------------------------

    async def _produce(self) -> None:
        lines = self._response.aiter_lines()
        try:
            while not self._cancel.is_set():
                try:
                    line = await lines.__anext__()
                except StopAsyncIteration:
                    break
                if self._cancel.is_set():
                    break
                if not await self._handle_line(line):
                    break
        except httpx.HTTPError as exc:
            self.interrupted = exc
            logger.warning("%s stream ended early: %s", self.provider or "Provider", exc)
        finally:
            await lines.aclose()
            await self._response.aclose()
            self._done.set()
            logger.debug(
                "%s stream closed (cancelled=%s)", self.provider, self._cancel.is_set()
            )

    async def _handle_line(self, line: str) -> bool:
        """Process one body line. Returns False when the stream must end."""
        scanned = self._scanner.feed(line)
        if scanned is None:
            return True
        if scanned is END_OF_STREAM:
            return False

        delta = self._extract(scanned)
        if isinstance(delta, Terminal):
            return False
        if isinstance(delta, Text):
            if not await self._emit(delta.text):
                return False
            return not delta.final
        return True

    async def _emit(self, fragment: str) -> bool:
        """Queue *fragment*, waiting for room unless cancelled first."""
        if self._cancel.is_set():
            return False
        try:
            self._queue.put_nowait(fragment)
            return True
        except asyncio.QueueFull:
            pass

        put = asyncio.ensure_future(self._queue.put(fragment))
        await _first_completed(put, self._cancel.wait())
        return put.done() and not put.cancelled()

    # -----------------------------------------------------------------
    # Consumer
    # -----------------------------------------------------------------

    def __aiter__(self) -> AsyncIterator[str]:
        return self

    async def __anext__(self) -> str:
        while True:
            if self._cancel.is_set():
                raise StopAsyncIteration
            if not self._queue.empty():
                return self._queue.get_nowait()
            if self._done.is_set():
                raise StopAsyncIteration

            getter = asyncio.ensure_future(self._queue.get())
            await _first_completed(getter, self._done.wait(), self._cancel.wait())
            if getter.done() and not getter.cancelled():
                return getter.result()

    @property
    def closed(self) -> bool:
        """Whether the producer has finished and released the response."""
        return self._done.is_set()

    @property
    def cancelled(self) -> bool:
        return self._cancel.is_set()

    def cancel(self) -> None:
        """Signal the producer to stop at its next check."""
        self._cancel.set()

    async def wait_closed(self) -> None:
        """Wait until the producer has released the response."""
        await self._done.wait()

    async def aclose(self) -> None:
        """Cancel the stream and wait for the producer to release the response."""
        self._cancel.set()
        if not self._task.done():
            self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if current is not None and current.cancelling():
                raise
        finally:
            # A producer cancelled before its first step never reaches its own cleanup.
            if not self._done.is_set():
                await self._response.aclose()
                self._done.set()

    async def collect(self) -> str:
        """Drain every remaining fragment and return them joined."""
        return "".join([fragment async for fragment in self])

    async def __aenter__(self) -> FragmentStream:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
