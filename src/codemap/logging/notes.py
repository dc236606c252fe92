"""Notes log stored as a JSON list."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from codemap.index.store import atomic_write_json

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class NoteEntry:
    timestamp: str
    note: str


class NotesLog:
    """Ordered list of timestamped notes in log.json."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def create(self) -> bool:
        """Write an empty list when the log does not exist; return True when written."""
        if self._path.exists():
            return False
        self._path.parent.mkdir(parents=True, exist_ok=True)
        atomic_write_json(self._path, [])
        return True

    def read(self) -> list[NoteEntry]:
        """Read all well-formed entries in insertion order."""
        if not self._path.exists():
            return []
        text = self._path.read_text(encoding="utf-8")
        if not text.strip():
            return []
        try:
            payload = json.loads(text)
        except json.JSONDecodeError:
            logger.warning("notes log %s is not valid JSON; ignoring it", self._path)
            return []
        if not isinstance(payload, list):
            return []
        entries: list[NoteEntry] = []
        for item in payload:
            if not isinstance(item, dict):
                continue
            timestamp = item.get("timestamp")
            note = item.get("note")
            if isinstance(timestamp, str) and isinstance(note, str):
                entries.append(NoteEntry(timestamp=timestamp, note=note))
        return entries

    def recent(self, limit: int) -> list[NoteEntry]:
        """Return the most recent ``limit`` entries, oldest first."""
        if limit < 1:
            return []
        return self.read()[-limit:]
