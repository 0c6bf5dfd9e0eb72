"""Tests for the event-stream and NDJSON frame scanners."""

from __future__ import annotations

from glyph.mind.framing import END_OF_STREAM, EventStreamScanner, NDJSONScanner
from glyph.mind.models import Frame


class TestEventStreamScanner:
    def test_data_line_is_trimmed(self) -> None:
        scanner = EventStreamScanner()
        assert scanner.feed('data:   {"a": 1}  ') == Frame(event="", data='{"a": 1}')

    def test_event_line_sets_state_for_following_data(self) -> None:
        scanner = EventStreamScanner()
        assert scanner.feed("event: content_block_delta") == Frame(
            event="content_block_delta", data=None
        )
        frame = scanner.feed("data: {}")
        assert frame == Frame(event="content_block_delta", data="{}")
        assert scanner.event == "content_block_delta"

    def test_event_persists_until_next_event_line(self) -> None:
        scanner = EventStreamScanner()
        scanner.feed("event: one")
        scanner.feed("")
        assert scanner.feed("data: x") == Frame(event="one", data="x")
        scanner.feed("event: two")
        assert scanner.feed("data: y") == Frame(event="two", data="y")

    def test_sentinel_ends_stream(self) -> None:
        scanner = EventStreamScanner(sentinel="[DONE]")
        assert scanner.feed("data: [DONE]") is END_OF_STREAM

    def test_sentinel_ignored_when_protocol_has_none(self) -> None:
        scanner = EventStreamScanner(sentinel=None)
        assert scanner.feed("data: [DONE]") == Frame(event="", data="[DONE]")

    def test_other_lines_yield_nothing(self) -> None:
        scanner = EventStreamScanner(sentinel="[DONE]")
        for line in ("", ": keep-alive", "id: 7", "retry: 100", "garbage"):
            assert scanner.feed(line) is None

    def test_empty_data_payload_yields_nothing(self) -> None:
        scanner = EventStreamScanner()
        assert scanner.feed("data:   ") is None


class TestNDJSONScanner:
    def test_each_line_is_a_frame(self) -> None:
        scanner = NDJSONScanner()
        assert scanner.feed('{"done": false}') == Frame(event="", data='{"done": false}')

    def test_blank_lines_skipped(self) -> None:
        scanner = NDJSONScanner()
        assert scanner.feed("") is None
        assert scanner.feed("   ") is None
