"""On-disk state under the .codemap directory."""

from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path

from codemap.index.models import IndexFormatError, ProjectContext, UpdateMetrics

DATA_DIR_NAME = ".codemap"
CONFIG_FILE = "config.toml"
CONTEXT_FILE = "context.json"
METRICS_FILE = "metrics.json"
NOTES_FILE = "log.json"


class NotInitializedError(RuntimeError):
    """Raised when a command needs an index that `codemap init` has not created."""


class CodemapStore:
    """Reads and writes the pretty-printed JSON state files."""

    def __init__(self, repo_root: Path) -> None:
        self._repo_root = repo_root.resolve()
        self._data_dir = self._repo_root / DATA_DIR_NAME

    @property
    def repo_root(self) -> Path:
        return self._repo_root

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    @property
    def config_path(self) -> Path:
        return self._data_dir / CONFIG_FILE

    @property
    def context_path(self) -> Path:
        return self._data_dir / CONTEXT_FILE

    @property
    def metrics_path(self) -> Path:
        return self._data_dir / METRICS_FILE

    @property
    def notes_path(self) -> Path:
        return self._data_dir / NOTES_FILE

    def is_initialized(self) -> bool:
        """Return True when both the context and the config file exist."""
        return self.context_path.exists() and self.config_path.exists()

    def ensure_data_dir(self) -> bool:
        """Create the data directory; return True when it did not exist before."""
        existed = self._data_dir.is_dir()
        self._data_dir.mkdir(parents=True, exist_ok=True)
        return not existed

    def load_context(self) -> ProjectContext:
        """Load context.json; missing is NotInitializedError, malformed is IndexFormatError."""
        if not self.context_path.exists():
            raise NotInitializedError("Codemap not initialized. Run `codemap init`.")
        payload = _read_json(self.context_path)
        return ProjectContext.from_dict(payload)

    def save_context(self, context: ProjectContext) -> None:
        self._data_dir.mkdir(parents=True, exist_ok=True)
        atomic_write_json(self.context_path, context.to_dict())

    def load_metrics_history(self) -> list[dict[str, object]]:
        """Return the ordered metrics history; an absent file is an empty history."""
        if not self.metrics_path.exists():
            return []
        payload = _read_json(self.metrics_path)
        if not isinstance(payload, list) or not all(isinstance(item, dict) for item in payload):
            raise IndexFormatError(f"{self.metrics_path.name} must contain a list of objects.")
        return payload

    def append_metrics(
        self,
        metrics: UpdateMetrics,
        history: list[dict[str, object]] | None = None,
    ) -> list[dict[str, object]]:
        """Append one record to the history file and return the new history."""
        records = list(history) if history is not None else self.load_metrics_history()
        records.append(asdict(metrics))
        self._data_dir.mkdir(parents=True, exist_ok=True)
        atomic_write_json(self.metrics_path, records)
        return records


def _read_json(path: Path) -> object:
    try:
        with path.open("r", encoding="utf-8") as handle:
            return json.load(handle)
    except json.JSONDecodeError as exc:
        raise IndexFormatError(f"{path.name} is not valid JSON: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise IndexFormatError(f"{path.name} is not valid UTF-8: {exc}") from exc


def atomic_write_json(path: Path, payload: object) -> None:
    """Write pretty-printed, key-sorted JSON via a temporary sibling file."""
    tmp = path.with_suffix(path.suffix + ".tmp")
    with tmp.open("w", encoding="utf-8") as handle:
        json.dump(payload, handle, indent=2, sort_keys=True, ensure_ascii=False)
        handle.write("\n")
    tmp.replace(path)
