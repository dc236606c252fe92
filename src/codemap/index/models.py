"""Typed models for the persisted project index."""

from __future__ import annotations

from dataclasses import dataclass, field


class IndexFormatError(ValueError):
    """Raised when a persisted index document does not match the expected shape."""


@dataclass(slots=True, frozen=True)
class FunctionRecord:
    """One extracted function with positional and content-hash identity."""

    name: str
    line: int
    body_hash: str
    summary: str | None = None

    def to_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "line": self.line,
            "summary": self.summary,
            "hash": self.body_hash,
        }

    @classmethod
    def from_dict(cls, payload: object, where: str) -> FunctionRecord:
        obj = _require_mapping(payload, where)
        summary = obj.get("summary")
        if summary is not None and not isinstance(summary, str):
            raise IndexFormatError(f"{where}.summary must be a string or null.")
        return cls(
            name=_require_str(obj.get("name"), f"{where}.name"),
            line=_require_int(obj.get("line"), f"{where}.line"),
            body_hash=_require_str(obj.get("hash"), f"{where}.hash"),
            summary=summary,
        )


@dataclass(slots=True, frozen=True)
class FileEntry:
    """Indexed source file: language label plus ordered function records."""

    language: str
    functions: tuple[FunctionRecord, ...] = ()

    def to_dict(self) -> dict[str, object]:
        return {
            "language": self.language,
            "functions": [function.to_dict() for function in self.functions],
        }

    @classmethod
    def from_dict(cls, payload: object, where: str) -> FileEntry:
        obj = _require_mapping(payload, where)
        raw_functions = obj.get("functions", [])
        if not isinstance(raw_functions, list):
            raise IndexFormatError(f"{where}.functions must be a list.")
        return cls(
            language=_require_str(obj.get("language"), f"{where}.language"),
            functions=tuple(
                FunctionRecord.from_dict(item, f"{where}.functions[{index}]")
                for index, item in enumerate(raw_functions)
            ),
        )


@dataclass(slots=True, frozen=True)
class FolderEntry:
    """Informational folder node listing immediate child names."""

    children: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, object]:
        return {"children": list(self.children)}

    @classmethod
    def from_dict(cls, payload: object, where: str) -> FolderEntry:
        obj = _require_mapping(payload, where)
        raw_children = obj.get("children", [])
        if not isinstance(raw_children, list):
            raise IndexFormatError(f"{where}.children must be a list.")
        return cls(
            children=tuple(
                _require_str(item, f"{where}.children[{index}]")
                for index, item in enumerate(raw_children)
            )
        )


@dataclass(slots=True, frozen=True)
class EntryPoint:
    """File judged important for onboarding, with rank and short rationale."""

    path: str
    rank: int
    reason: str

    def to_dict(self) -> dict[str, object]:
        return {"path": self.path, "rank": self.rank, "reason": self.reason}

    @classmethod
    def from_dict(cls, payload: object, where: str) -> EntryPoint:
        obj = _require_mapping(payload, where)
        return cls(
            path=_require_str(obj.get("path"), f"{where}.path"),
            rank=_require_int(obj.get("rank"), f"{where}.rank"),
            reason=_require_str(obj.get("reason"), f"{where}.reason"),
        )


@dataclass(slots=True, frozen=True)
class ProjectContext:
    """Root snapshot aggregate persisted as context.json."""

    folders: dict[str, FolderEntry] = field(default_factory=dict)
    files: dict[str, FileEntry] = field(default_factory=dict)
    entry_points: tuple[EntryPoint, ...] = ()
    project_brief: str | None = None

    def function_count(self) -> int:
        """Return the number of function records across all files."""
        return sum(len(entry.functions) for entry in self.files.values())

    def to_dict(self) -> dict[str, object]:
        return {
            "folders": {path: folder.to_dict() for path, folder in self.folders.items()},
            "files": {path: entry.to_dict() for path, entry in self.files.items()},
            "entry_points": [entry_point.to_dict() for entry_point in self.entry_points],
            "project_brief": self.project_brief,
        }

    @classmethod
    def from_dict(cls, payload: object) -> ProjectContext:
        obj = _require_mapping(payload, "context")
        raw_folders = _require_mapping(obj.get("folders", {}), "context.folders")
        raw_files = _require_mapping(obj.get("files", {}), "context.files")
        raw_entry_points = obj.get("entry_points", [])
        if not isinstance(raw_entry_points, list):
            raise IndexFormatError("context.entry_points must be a list.")
        brief = obj.get("project_brief")
        if brief is not None and not isinstance(brief, str):
            raise IndexFormatError("context.project_brief must be a string or null.")
        return cls(
            folders={
                path: FolderEntry.from_dict(value, f"context.folders[{path!r}]")
                for path, value in raw_folders.items()
            },
            files={
                path: FileEntry.from_dict(value, f"context.files[{path!r}]")
                for path, value in raw_files.items()
            },
            entry_points=tuple(
                EntryPoint.from_dict(item, f"context.entry_points[{index}]")
                for index, item in enumerate(raw_entry_points)
            ),
            project_brief=brief,
        )


@dataclass(slots=True, frozen=True)
class FunctionDelta:
    """Per-function change classification between two snapshots."""

    total: int
    added: int
    modified: int
    unchanged: int
    removed: int

    @property
    def reuse_ratio(self) -> float:
        """Fraction of comparable functions whose content is unchanged."""
        denominator = self.unchanged + self.modified
        if denominator == 0:
            return 1.0
        return self.unchanged / denominator


@dataclass(slots=True, frozen=True)
class UpdateMetrics:
    """One timestamped record appended to metrics.json per update."""

    timestamp: str
    total_files: int
    total_functions: int
    added_functions: int
    modified_functions: int
    removed_functions: int
    unchanged_functions: int
    reuse_ratio: float
    duration_ms: int
    ranker_called: bool = False
    ranker_ok: bool = False
    ranker_duration_ms: int = 0
    entry_point_count: int = 0


def _require_mapping(value: object, where: str) -> dict[str, object]:
    if not isinstance(value, dict):
        raise IndexFormatError(f"{where} must be an object.")
    return value


def _require_str(value: object, where: str) -> str:
    if not isinstance(value, str):
        raise IndexFormatError(f"{where} must be a string.")
    return value


def _require_int(value: object, where: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise IndexFormatError(f"{where} must be an integer.")
    return value
