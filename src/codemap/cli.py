"""Command-line entrypoint."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Mapping
from pathlib import Path

from codemap.commands import CommandError, CommandRegistry, register_builtin_commands
from codemap.config import ConfigError
from codemap.index.manager import IndexManager
from codemap.index.models import IndexFormatError
from codemap.index.store import NotInitializedError
from codemap.ranking import Ranker

logger = logging.getLogger(__name__)

EXIT_ERROR = 1
EXIT_USAGE = 2
_USAGE_ERROR_CODES = frozenset({"INVALID_ARGUMENT", "UNKNOWN_COMMAND"})
_HANDLER_ATTR = "_codemap_stderr_handler"


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for the codemap subcommands."""
    parser = argparse.ArgumentParser(prog="codemap", description="A CLI for understanding codebases")
    parser.add_argument("--repo-root", required=False, default=".")
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true")
    verbosity.add_argument("-q", "--quiet", action="store_true")
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("init", help="create .codemap and index the repository")
    subparsers.add_parser("update", help="refresh the index, keeping stable summaries")
    show = subparsers.add_parser("show", help="print the most recent notes")
    show.add_argument("num", nargs="?", type=int, default=None)
    subparsers.add_parser("summary", help="print the project brief and entry points")
    auth = subparsers.add_parser("auth", help="store the ranking API key in config.toml")
    auth.add_argument("key", nargs="?", default=None)
    subparsers.add_parser("edit", help="reserved")
    subparsers.add_parser("delete", help="reserved")
    return parser


def configure_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Send codemap diagnostics to stderr, replacing any handler from a prior call."""
    package_logger = logging.getLogger("codemap")
    for handler in list(package_logger.handlers):
        if getattr(handler, _HANDLER_ATTR, False):
            package_logger.removeHandler(handler)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))
    setattr(handler, _HANDLER_ATTR, True)
    package_logger.addHandler(handler)
    if verbose:
        package_logger.setLevel(logging.DEBUG)
    elif quiet:
        package_logger.setLevel(logging.WARNING)
    else:
        package_logger.setLevel(logging.INFO)


def main(
    argv: list[str] | None = None,
    ranker: Ranker | None = None,
    environ: Mapping[str, str] | None = None,
) -> int:
    """Entrypoint for the codemap executable."""
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    configure_logging(verbose=args.verbose, quiet=args.quiet)

    manager = IndexManager(repo_root=Path(args.repo_root), ranker=ranker, environ=environ)
    registry = CommandRegistry()
    register_builtin_commands(registry, manager)

    try:
        return registry.dispatch(args.command, args)
    except CommandError as exc:
        logger.error("error: %s", exc.message)
        return EXIT_USAGE if exc.code in _USAGE_ERROR_CODES else EXIT_ERROR
    except NotInitializedError as exc:
        logger.error("error: %s", exc)
    except IndexFormatError as exc:
        logger.error("error: malformed index: %s", exc)
    except ConfigError as exc:
        logger.error("error: invalid config: %s", exc)
    except OSError as exc:
        logger.error("error: %s", exc)
    return EXIT_ERROR


if __name__ == "__main__":
    raise SystemExit(main())
