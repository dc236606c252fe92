"""Init and update workflows over the persistent project index."""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

from codemap.config import CodemapConfig, load_effective_config, write_default_config
from codemap.index.discovery import build_snapshot
from codemap.index.merge import merge_project
from codemap.index.metrics import build_update_metrics, diff_function_counts
from codemap.index.models import ProjectContext, UpdateMetrics
from codemap.index.store import CodemapStore
from codemap.logging.notes import NotesLog
from codemap.ranking import Ranker, refresh_entry_points

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class InitResult:
    """Outcome of `codemap init`."""

    already_initialized: bool
    messages: tuple[str, ...]
    file_count: int = 0
    function_count: int = 0


@dataclass(slots=True, frozen=True)
class UpdateResult:
    """Outcome of `codemap update`."""

    context: ProjectContext
    metrics: UpdateMetrics
    build_profile: dict[str, object]


class IndexManager:
    """Sequences snapshot build, merge, ranking, metrics and persistence."""

    def __init__(
        self,
        repo_root: Path,
        ranker: Ranker | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self._repo_root = repo_root.resolve()
        self._store = CodemapStore(self._repo_root)
        self._ranker = ranker
        self._environ = environ

    @property
    def store(self) -> CodemapStore:
        return self._store

    @property
    def notes(self) -> NotesLog:
        return NotesLog(self._store.notes_path)

    def load_config(self) -> CodemapConfig:
        """Return defaults merged with config.toml (if any) and the environment."""
        return load_effective_config(self._store.config_path, self._environ)

    def init(self) -> InitResult:
        """Create the data directory, default config and an initial snapshot."""
        if self._store.is_initialized():
            return InitResult(already_initialized=True, messages=("codemap already initialized.",))

        messages: list[str] = []
        if self._store.ensure_data_dir():
            messages.append("Created ./.codemap")
        if self.notes.create():
            messages.append("Wrote .codemap/log.json")
        if not self._store.config_path.exists():
            write_default_config(self._store.config_path)
            messages.append("Wrote .codemap/config.toml")

        context = build_snapshot(self._repo_root)
        self._store.save_context(context)
        messages.append("Wrote .codemap/context.json")
        logger.debug(
            "init: indexed %d files, %d functions", len(context.files), context.function_count()
        )
        return InitResult(
            already_initialized=False,
            messages=tuple(messages),
            file_count=len(context.files),
            function_count=context.function_count(),
        )

    def update(self) -> UpdateResult:
        """Merge a fresh snapshot into the stored one and append a metrics record."""
        start = time.perf_counter()
        previous = self._store.load_context()
        config = self.load_config()
        logger.debug("update: effective config %s", config.to_public_dict())
        history = self._store.load_metrics_history()

        build_profile: dict[str, object] = {}
        fresh = build_snapshot(self._repo_root, profile=build_profile)
        merged = merge_project(previous, fresh)
        merged, outcome = refresh_entry_points(merged, self._repo_root, config, self._ranker)

        delta = diff_function_counts(previous, merged)
        metrics = build_update_metrics(
            delta,
            merged,
            timestamp=_utc_now_iso(),
            duration_ms=int((time.perf_counter() - start) * 1000),
            ranker_called=outcome.called,
            ranker_ok=outcome.ok,
            ranker_duration_ms=outcome.duration_ms,
        )
        logger.info(
            "codemap: files=%d, functions=%d, added=%d, modified=%d, unchanged=%d, "
            "removed=%d, reuse=%.2f, entry_points=%d",
            metrics.total_files,
            metrics.total_functions,
            metrics.added_functions,
            metrics.modified_functions,
            metrics.unchanged_functions,
            metrics.removed_functions,
            metrics.reuse_ratio,
            metrics.entry_point_count,
        )

        self._store.save_context(merged)
        self._store.append_metrics(metrics, history)
        return UpdateResult(context=merged, metrics=metrics, build_profile=build_profile)


def _utc_now_iso() -> str:
    return datetime.now(tz=UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")
