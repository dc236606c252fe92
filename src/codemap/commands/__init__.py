"""Subcommand interfaces and registrations."""

from .builtin import register_builtin_commands
from .registry import CommandError, CommandHandler, CommandRegistry

__all__ = ["CommandError", "CommandHandler", "CommandRegistry", "register_builtin_commands"]
