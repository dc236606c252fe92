"""Deterministic command registration primitives."""

from __future__ import annotations

import argparse
from collections.abc import Callable
from dataclasses import dataclass, field

CommandHandler = Callable[[argparse.Namespace], int]


@dataclass(slots=True, frozen=True)
class CommandError(Exception):
    """Represents a surfaced command failure with a stable code."""

    code: str
    message: str

    def __str__(self) -> str:
        return self.message


@dataclass(slots=True)
class CommandRegistry:
    """In-memory command registry preserving deterministic insertion order."""

    _handlers: dict[str, CommandHandler] = field(default_factory=dict)

    def register(self, name: str, handler: CommandHandler) -> None:
        """Register a named handler."""
        self._handlers[name] = handler

    def get(self, name: str) -> CommandHandler | None:
        """Return a handler by name."""
        return self._handlers.get(name)

    def dispatch(self, name: str, args: argparse.Namespace) -> int:
        """Dispatch to a registered command by name."""
        handler = self.get(name)
        if handler is None:
            raise CommandError(code="UNKNOWN_COMMAND", message=f"Unknown command: {name}")
        return handler(args)
