"""JSON-file store for pinned snippets.

Entries live in one JSON array at ``$XDG_DATA_HOME/glyph/pin/pins.json``.
Every write replaces the whole file through a temporary sibling, so a crash
mid-write leaves the previous contents intact.
"""

from __future__ import annotations

import json
import logging
import os
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

from glyph.config import data_dir
from glyph.errors import StoreError

logger = logging.getLogger(__name__)

PIN_TYPES = ("url", "cmd", "note")
SHORT_ID_LENGTH = 8

_URL_SCHEMES = ("http", "https", "ftp")
_COMMAND_PREFIXES = (
    "sudo ", "git ", "go ", "npm ", "docker ", "kubectl ",
    "make ", "ls ", "cd ", "cat ", "grep ", "awk ", "sed ",
    "curl ", "wget ", "ssh ", "scp ",
)


def _new_id() -> str:
    return uuid.uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def infer_type(text: str) -> str:
    """Guess whether *text* is a URL, a shell command, or a plain note."""
    parsed = urlparse(text.strip())
    if parsed.scheme in _URL_SCHEMES and parsed.netloc:
        return "url"
    if text.strip().lower().startswith(_COMMAND_PREFIXES):
        return "cmd"
    return "note"


def short_id(entry_id: str) -> str:
    return entry_id[:SHORT_ID_LENGTH]


def truncate(text: str, width: int) -> str:
    """Shorten *text* to *width* characters, ending with an ellipsis when cut."""
    if len(text) <= width:
        return text
    return text[: width - 1] + "…"


@dataclass
class PinEntry:
    """One pinned snippet."""

    text: str
    tag: str = ""
    kind: str = "note"
    id: str = field(default_factory=_new_id)
    created_at: datetime = field(default_factory=_utcnow)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "created_at": self.created_at.isoformat(),
            "text": self.text,
            "tag": self.tag,
            "type": self.kind,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PinEntry:
        return cls(
            text=data["text"],
            tag=data.get("tag", ""),
            kind=data.get("type", "note"),
            id=data["id"],
            created_at=datetime.fromisoformat(data["created_at"]),
        )

    def matches(self, query: str) -> bool:
        """Case-insensitive substring match on text or tag."""
        query = query.lower()
        return query in self.text.lower() or query in self.tag.lower()


def pin_store_path() -> Path:
    return data_dir("pin") / "pins.json"


class PinStore:
    """Load, append to, and rewrite the pin file.

    Args:
        path: JSON file to use. Defaults to :func:`pin_store_path`.
    """

    def __init__(self, path: str | Path | None = None) -> None:
        self.path = Path(path) if path is not None else pin_store_path()

    def load(self) -> list[PinEntry]:
        """Return every entry; a missing file means an empty store."""
        if not self.path.is_file():
            return []
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except OSError as exc:
            raise StoreError(f"cannot read {self.path}", cause=exc) from exc
        except ValueError as exc:
            raise StoreError(f"cannot decode {self.path}", cause=exc) from exc
        if not isinstance(raw, list):
            raise StoreError(f"cannot decode {self.path}: expected a JSON array")
        try:
            return [PinEntry.from_dict(item) for item in raw]
        except (KeyError, TypeError, ValueError) as exc:
            raise StoreError(f"cannot decode {self.path}", cause=exc) from exc

    def save(self, entries: list[PinEntry]) -> None:
        """Replace the file contents with *entries*."""
        payload = json.dumps([e.to_dict() for e in entries], indent=2, ensure_ascii=False)
        tmp = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(payload, encoding="utf-8")
            os.replace(tmp, self.path)
        except OSError as exc:
            raise StoreError(f"cannot write {self.path}", cause=exc) from exc
        logger.debug("Saved %d pin(s) to %s", len(entries), self.path)

    def append(self, entry: PinEntry) -> None:
        entries = self.load()
        entries.append(entry)
        self.save(entries)

    def get(self, entry_id: str) -> PinEntry:
        """Find an entry by full or short id."""
        entries = self.load()
        return entries[self._index(entries, entry_id)]

    def remove(self, entry_id: str) -> PinEntry:
        """Delete the entry with *entry_id* and return it."""
        entries = self.load()
        removed = entries.pop(self._index(entries, entry_id))
        self.save(entries)
        return removed

    def search(self, query: str) -> list[PinEntry]:
        return [e for e in self.load() if e.matches(query)]

    @staticmethod
    def _index(entries: list[PinEntry], entry_id: str) -> int:
        for index, entry in enumerate(entries):
            if entry.id == entry_id or short_id(entry.id) == entry_id:
                return index
        raise StoreError(f"no entry with id {entry_id!r}")
