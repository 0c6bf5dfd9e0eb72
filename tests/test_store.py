"""Tests for the JSON-file pin store."""

from __future__ import annotations

import json
from datetime import datetime, timezone

import pytest

from glyph.errors import StoreError
from glyph.store import PinEntry, PinStore, infer_type, pin_store_path, short_id, truncate


@pytest.fixture()
def store(tmp_path) -> PinStore:
    return PinStore(tmp_path / "pin" / "pins.json")


class TestHelpers:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("https://example.com/docs", "url"),
            ("ftp://mirror.example.org/pub", "url"),
            ("git rebase -i HEAD~3", "cmd"),
            ("  Sudo apt update", "cmd"),
            ("remember to rotate keys", "note"),
            ("example.com", "note"),
        ],
    )
    def test_infer_type(self, text: str, expected: str) -> None:
        assert infer_type(text) == expected

    def test_short_id(self) -> None:
        assert short_id("0123456789abcdef") == "01234567"
        assert short_id("abc") == "abc"

    def test_truncate(self) -> None:
        assert truncate("short", 10) == "short"
        assert truncate("abcdefghij", 5) == "abcd…"

    def test_default_path_under_xdg_data_home(self, tmp_path, monkeypatch) -> None:
        monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path))
        assert pin_store_path() == tmp_path / "glyph" / "pin" / "pins.json"


class TestPinStore:
    def test_missing_file_is_empty(self, store) -> None:
        assert store.load() == []
        assert not store.path.exists()

    def test_append_persists_json_array(self, store) -> None:
        created = datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
        store.append(PinEntry(text="ls -la", tag="fs", kind="cmd", id="abc123", created_at=created))

        raw = json.loads(store.path.read_text(encoding="utf-8"))
        assert raw == [
            {
                "id": "abc123",
                "created_at": "2026-01-02T03:04:05+00:00",
                "text": "ls -la",
                "tag": "fs",
                "type": "cmd",
            }
        ]
        assert store.load()[0].created_at == created
        assert not store.path.with_name("pins.json.tmp").exists()

    def test_entries_keep_insertion_order(self, store) -> None:
        for text in ("one", "two", "three"):
            store.append(PinEntry(text=text))
        assert [e.text for e in store.load()] == ["one", "two", "three"]

    def test_get_by_full_or_short_id(self, store) -> None:
        entry = PinEntry(text="note")
        store.append(entry)
        assert store.get(entry.id).text == "note"
        assert store.get(short_id(entry.id)).text == "note"

    def test_get_unknown_id(self, store) -> None:
        with pytest.raises(StoreError, match="no entry with id 'nope'"):
            store.get("nope")

    def test_remove(self, store) -> None:
        keep, drop = PinEntry(text="keep"), PinEntry(text="drop")
        store.append(keep)
        store.append(drop)
        assert store.remove(short_id(drop.id)).text == "drop"
        assert [e.id for e in store.load()] == [keep.id]

    def test_search_matches_text_and_tag(self, store) -> None:
        store.append(PinEntry(text="docker ps", tag="ops"))
        store.append(PinEntry(text="buy milk", tag="home"))
        store.append(PinEntry(text="kubectl get pods", tag="OPS"))
        assert [e.text for e in store.search("ops")] == ["docker ps", "kubectl get pods"]
        assert [e.text for e in store.search("MILK")] == ["buy milk"]

    @pytest.mark.parametrize("content", ["{not json", '{"id": "x"}', '[{"text": "no id"}]'])
    def test_corrupt_file_raises(self, store, content: str) -> None:
        store.path.parent.mkdir(parents=True)
        store.path.write_text(content, encoding="utf-8")
        with pytest.raises(StoreError, match="cannot decode"):
            store.load()
