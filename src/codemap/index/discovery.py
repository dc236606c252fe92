"""Deterministic repository walk and fresh snapshot construction."""

from __future__ import annotations

import logging
import os
import time
from collections.abc import Iterator
from dataclasses import asdict, dataclass
from pathlib import Path, PurePosixPath

from codemap.adapters import ExtractorRegistry, build_extractor_registry, extract_functions
from codemap.index.languages import classify_path
from codemap.index.models import FileEntry, FolderEntry, ProjectContext
from codemap.index.store import DATA_DIR_NAME

logger = logging.getLogger(__name__)

EXCLUDED_DIR_NAMES = frozenset({"target", ".git", "node_modules", ".venv", "__pycache__"})
ROOT_FOLDER_KEY = "."


@dataclass(slots=True, frozen=True)
class WalkEntry:
    """One visited folder or file, with repository-relative POSIX path."""

    path: str
    kind: str
    full_path: Path
    children: tuple[str, ...] = ()


@dataclass(slots=True, frozen=True)
class BuildProfile:
    """Deterministic diagnostics for one snapshot build."""

    folders: int
    files_indexed: int
    files_unsupported: int
    files_unreadable: int
    functions: int
    total_seconds: float


def is_excluded(relative_path: str) -> bool:
    """Return True when any component of the path is an excluded directory name."""
    return any(part in EXCLUDED_DIR_NAMES for part in PurePosixPath(relative_path).parts)


def is_hidden(name: str) -> bool:
    """Return True for dot-names other than the index's own storage directory."""
    return name.startswith(".") and not name.startswith(DATA_DIR_NAME)


def walk(root: Path) -> Iterator[WalkEntry]:
    """Yield folders then their contents in name order, pruning excluded subtrees.

    Unreadable directories are skipped without aborting the walk.
    """
    resolved = root.resolve()
    stack: list[Path] = [resolved]
    while stack:
        current = stack.pop()
        try:
            with os.scandir(current) as entries:
                ordered_entries = sorted(entries, key=lambda item: item.name)
        except OSError as exc:
            logger.debug("skipping unreadable directory %s: %s", current, exc)
            continue
        relative_dir = (
            ROOT_FOLDER_KEY if current == resolved else current.relative_to(resolved).as_posix()
        )
        yield WalkEntry(
            path=relative_dir,
            kind="dir",
            full_path=current,
            children=tuple(entry.name for entry in ordered_entries),
        )
        subdirs: list[Path] = []
        for entry in ordered_entries:
            if is_hidden(entry.name):
                continue
            full_path = Path(entry.path)
            relative = full_path.relative_to(resolved).as_posix()
            if is_excluded(relative):
                continue
            try:
                if entry.is_dir(follow_symlinks=False):
                    subdirs.append(full_path)
                    continue
                if not entry.is_file():
                    continue
            except OSError:
                continue
            yield WalkEntry(path=relative, kind="file", full_path=full_path)
        stack.extend(reversed(subdirs))


def read_source_text(path: Path) -> str:
    """Read file bytes and decode lossily as UTF-8."""
    return path.read_bytes().decode("utf-8", errors="replace")


def build_snapshot(
    root: Path,
    registry: ExtractorRegistry | None = None,
    profile: dict[str, object] | None = None,
) -> ProjectContext:
    """Compose walk, classification and extraction into a fresh ProjectContext."""
    started = time.perf_counter()
    extractors = registry or build_extractor_registry()
    logger.debug("snapshot: extractors %s", ", ".join(extractors.names()))
    folders: dict[str, FolderEntry] = {}
    files: dict[str, FileEntry] = {}
    unsupported = 0
    unreadable = 0
    function_total = 0

    for entry in walk(root):
        if entry.kind == "dir":
            folders[entry.path] = FolderEntry(children=entry.children)
            continue
        language = classify_path(entry.path)
        if language is None:
            unsupported += 1
            continue
        try:
            text = read_source_text(entry.full_path)
        except OSError as exc:
            logger.debug("skipping unreadable file %s: %s", entry.path, exc)
            unreadable += 1
            continue
        functions = tuple(extract_functions(text, language, extractors))
        function_total += len(functions)
        files[entry.path] = FileEntry(language=language, functions=functions)

    if profile is not None:
        payload = BuildProfile(
            folders=len(folders),
            files_indexed=len(files),
            files_unsupported=unsupported,
            files_unreadable=unreadable,
            functions=function_total,
            total_seconds=time.perf_counter() - started,
        )
        profile.update(asdict(payload))
    return ProjectContext(folders=folders, files=files)
