"""Terminal rendering for streamed answers and status lines."""

from __future__ import annotations

import sys
from collections.abc import AsyncIterable
from typing import IO

from rich.console import Console
from rich.theme import Theme

STYLES = ("ascii", "rounded", "minimal")

_THEMES: dict[str, Theme] = {
    "rounded": Theme({"glyph.error": "bold red", "glyph.muted": "grey50"}),
    "minimal": Theme({"glyph.error": "red", "glyph.muted": "dim"}),
    "ascii": Theme({"glyph.error": "none", "glyph.muted": "none"}),
}


def make_console(
    style: str = "rounded", *, stderr: bool = False, file: IO[str] | None = None
) -> Console:
    """Return a console themed for *style*; unknown styles fall back to rounded."""
    style = style if style in _THEMES else "rounded"
    return Console(
        theme=_THEMES[style],
        stderr=stderr,
        file=file,
        no_color=style == "ascii",
        highlight=False,
    )


def print_error(console: Console, message: str) -> None:
    console.print(f"Error: {message}", style="glyph.error", markup=False, emoji=False)


def print_muted(console: Console, message: str) -> None:
    console.print(message, style="glyph.muted", markup=False, emoji=False)


class StreamPrinter:
    """Writes streamed fragments as they arrive, then ends the line."""

    def __init__(self, console: Console | None = None) -> None:
        self._console = console or Console(file=sys.stdout, highlight=False)

    def print(self, fragment: str) -> None:
        self._console.print(
            fragment, end="", markup=False, emoji=False, highlight=False, soft_wrap=True
        )

    async def print_stream(self, fragments: AsyncIterable[str]) -> str:
        """Print every fragment, then a newline. Returns the full text."""
        parts: list[str] = []
        async for fragment in fragments:
            self.print(fragment)
            parts.append(fragment)
        self._console.print()
        return "".join(parts)
