"""Tests for glyph.render."""

from __future__ import annotations

import io

import pytest

from glyph.render import StreamPrinter, make_console, print_error, print_muted


async def _fragments(*parts: str):
    for part in parts:
        yield part


@pytest.mark.asyncio
async def test_print_stream_writes_fragments_then_newline() -> None:
    buffer = io.StringIO()
    printer = StreamPrinter(make_console("ascii", file=buffer))
    text = await printer.print_stream(_fragments("Hel", "lo", " [bold]x[/bold]"))
    assert text == "Hello [bold]x[/bold]"
    assert buffer.getvalue() == "Hello [bold]x[/bold]\n"


@pytest.mark.asyncio
async def test_empty_stream_prints_newline() -> None:
    buffer = io.StringIO()
    await StreamPrinter(make_console("minimal", file=buffer)).print_stream(_fragments())
    assert buffer.getvalue() == "\n"


def test_status_lines() -> None:
    buffer = io.StringIO()
    console = make_console("unknown-style", file=buffer)
    print_error(console, "boom [x]")
    print_muted(console, "quiet")
    assert buffer.getvalue() == "Error: boom [x]\nquiet\n"
