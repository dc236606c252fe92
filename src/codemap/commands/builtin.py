"""Built-in codemap subcommands."""

from __future__ import annotations

import argparse
import getpass
from collections.abc import Callable

from codemap.commands.registry import CommandError, CommandHandler, CommandRegistry
from codemap.config import API_KEY_ENV_VAR, set_api_key
from codemap.index.manager import IndexManager
from codemap.index.metrics import format_metrics_line

PromptFn = Callable[[str], str]


def register_builtin_commands(
    registry: CommandRegistry,
    manager: IndexManager,
    prompt_secret: PromptFn | None = None,
) -> None:
    """Register the codemap command set."""
    registry.register("init", _init_handler(manager))
    registry.register("update", _update_handler(manager))
    registry.register("show", _show_handler(manager))
    registry.register("summary", _summary_handler(manager))
    registry.register("auth", _auth_handler(manager, prompt_secret))
    registry.register("edit", _reserved_handler("edit"))
    registry.register("delete", _reserved_handler("delete"))


def _init_handler(manager: IndexManager) -> CommandHandler:
    def handler(_: argparse.Namespace) -> int:
        result = manager.init()
        for message in result.messages:
            print(message)
        return 0

    return handler


def _update_handler(manager: IndexManager) -> CommandHandler:
    def handler(_: argparse.Namespace) -> int:
        result = manager.update()
        print("Updated .codemap/context.json")
        print(format_metrics_line(result.metrics))
        return 0

    return handler


def _show_handler(manager: IndexManager) -> CommandHandler:
    def handler(args: argparse.Namespace) -> int:
        num = args.num
        if num is None:
            num = manager.load_config().default_note_count
        if num <= 0:
            raise CommandError(
                code="INVALID_ARGUMENT",
                message="Please provide a positive number of entries to show.",
            )
        for entry in manager.notes.recent(num):
            print(f"{entry.timestamp}: {entry.note}")
        return 0

    return handler


def _summary_handler(manager: IndexManager) -> CommandHandler:
    def handler(_: argparse.Namespace) -> int:
        context = manager.store.load_context()
        if context.project_brief is not None:
            print(f"== Project Brief ==\n{context.project_brief}\n")
        else:
            print("(no project brief yet)\n")
        if not context.entry_points:
            print("(no entry points yet)")
            return 0
        print("== Top Entry Points ==")
        for entry_point in context.entry_points:
            print(f"[{entry_point.rank}] {entry_point.path} - {entry_point.reason}")
        return 0

    return handler


def _auth_handler(manager: IndexManager, prompt_secret: PromptFn | None) -> CommandHandler:
    def handler(args: argparse.Namespace) -> int:
        key = args.key
        if key is None:
            key = (prompt_secret or getpass.getpass)("OpenAI API key (sk-...): ")
        if not key.strip():
            raise CommandError(code="INVALID_ARGUMENT", message="API key must not be empty.")
        manager.store.ensure_data_dir()
        set_api_key(manager.store.config_path, key)
        print(f"API key saved. (Env var {API_KEY_ENV_VAR} overrides config.)")
        return 0

    return handler


def _reserved_handler(name: str) -> CommandHandler:
    def handler(_: argparse.Namespace) -> int:
        print(f"{name} (not implemented)")
        return 0

    return handler
