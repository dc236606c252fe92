"""Notes log persisted under the data directory."""

from .notes import NoteEntry, NotesLog

__all__ = ["NoteEntry", "NotesLog"]
