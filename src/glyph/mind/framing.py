"""Line-oriented frame scanners.

Both scanners are fed one line at a time by the producer loop and return
either a :class:`~glyph.mind.models.Frame`, ``None`` (nothing to decode),
or :data:`END_OF_STREAM` when a literal sentinel closes the stream.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol, Union

from glyph.mind.models import Frame

logger = logging.getLogger(__name__)


class _EndOfStream:
    def __repr__(self) -> str:
        return "END_OF_STREAM"


END_OF_STREAM = _EndOfStream()

ScanResult = Union[Frame, _EndOfStream, None]

_EVENT_PREFIX = "event:"
_DATA_PREFIX = "data:"


class FrameScanner(Protocol):
    """Turns raw body lines into frames."""

    def feed(self, line: str) -> ScanResult:
        ...


@dataclass
class EventStreamScanner:
    """Scanner for ``text/event-stream`` bodies.

    The current event type arrives on its own ``event:`` line and applies to
    the ``data:`` lines that follow, so it is carried here as state. It
    persists until the next ``event:`` line.

    Attributes:
        sentinel: Literal ``data:`` payload that ends the stream, or ``None``
            if the protocol has no such marker.
        event: The most recently announced event type.
    """

    sentinel: str | None = None
    event: str = ""

    def feed(self, line: str) -> ScanResult:
        if line.startswith(_EVENT_PREFIX):
            self.event = line[len(_EVENT_PREFIX):].strip()
            return Frame(event=self.event, data=None)

        if not line.startswith(_DATA_PREFIX):
            return None

        payload = line[len(_DATA_PREFIX):].strip()
        if self.sentinel is not None and payload == self.sentinel:
            logger.debug("Stream sentinel %r received", payload)
            return END_OF_STREAM
        if not payload:
            return None
        return Frame(event=self.event, data=payload)


@dataclass
class NDJSONScanner:
    """Scanner for newline-delimited JSON bodies: one document per line."""

    def feed(self, line: str) -> ScanResult:
        line = line.strip()
        if not line:
            return None
        return Frame(event="", data=line)
