"""Project index models, merge engine and persistence.

The walker (``codemap.index.discovery``) and the command orchestrator
(``codemap.index.manager``) depend on the extractor adapters and are
imported by their full module path.
"""

from .hashing import digest
from .languages import LANGUAGE_BY_EXTENSION, classify, classify_path
from .merge import functions_by_name, merge_file, merge_project
from .metrics import build_update_metrics, diff_function_counts, format_metrics_line
from .models import (
    EntryPoint,
    FileEntry,
    FolderEntry,
    FunctionDelta,
    FunctionRecord,
    IndexFormatError,
    ProjectContext,
    UpdateMetrics,
)
from .store import CodemapStore, NotInitializedError, atomic_write_json

__all__ = [
    "CodemapStore",
    "EntryPoint",
    "FileEntry",
    "FolderEntry",
    "FunctionDelta",
    "FunctionRecord",
    "IndexFormatError",
    "LANGUAGE_BY_EXTENSION",
    "NotInitializedError",
    "ProjectContext",
    "UpdateMetrics",
    "atomic_write_json",
    "build_update_metrics",
    "classify",
    "classify_path",
    "diff_function_counts",
    "digest",
    "format_metrics_line",
    "functions_by_name",
    "merge_file",
    "merge_project",
]
