"""Function-level change counts and metrics records."""

from __future__ import annotations

from codemap.index.merge import functions_by_name
from codemap.index.models import FunctionDelta, ProjectContext, UpdateMetrics


def diff_function_counts(previous: ProjectContext, merged: ProjectContext) -> FunctionDelta:
    """Classify every merged function as added, modified or unchanged.

    Removals are counted from the previous side: functions whose name no
    longer appears in a surviving file, plus every function of a file that
    disappeared.
    """
    total = 0
    added = 0
    modified = 0
    unchanged = 0
    removed = 0

    for path, merged_file in merged.files.items():
        total += len(merged_file.functions)
        previous_file = previous.files.get(path)
        if previous_file is None:
            added += len(merged_file.functions)
            continue
        previous_by_name = functions_by_name(previous_file.functions)
        for function in merged_file.functions:
            prior = previous_by_name.get(function.name)
            if prior is None:
                added += 1
            elif prior.body_hash == function.body_hash:
                unchanged += 1
            else:
                modified += 1

    for path, previous_file in previous.files.items():
        merged_file = merged.files.get(path)
        if merged_file is None:
            removed += len(previous_file.functions)
            continue
        surviving = {function.name for function in merged_file.functions}
        removed += sum(
            1 for name in functions_by_name(previous_file.functions) if name not in surviving
        )

    return FunctionDelta(
        total=total,
        added=added,
        modified=modified,
        unchanged=unchanged,
        removed=removed,
    )


def build_update_metrics(
    delta: FunctionDelta,
    merged: ProjectContext,
    *,
    timestamp: str,
    duration_ms: int,
    ranker_called: bool = False,
    ranker_ok: bool = False,
    ranker_duration_ms: int = 0,
) -> UpdateMetrics:
    """Assemble one metrics record for the history file."""
    return UpdateMetrics(
        timestamp=timestamp,
        total_files=len(merged.files),
        total_functions=delta.total,
        added_functions=delta.added,
        modified_functions=delta.modified,
        removed_functions=delta.removed,
        unchanged_functions=delta.unchanged,
        reuse_ratio=delta.reuse_ratio,
        duration_ms=duration_ms,
        ranker_called=ranker_called,
        ranker_ok=ranker_ok,
        ranker_duration_ms=ranker_duration_ms,
        entry_point_count=len(merged.entry_points),
    )


def format_metrics_line(metrics: UpdateMetrics) -> str:
    """Render the one-line human summary printed after an update."""
    return (
        f"metrics: files={metrics.total_files}, funcs={metrics.total_functions}, "
        f"+{metrics.added_functions} ~{metrics.modified_functions} "
        f"={metrics.unchanged_functions} -{metrics.removed_functions} "
        f"reuse={metrics.reuse_ratio * 100:.0f}% time={metrics.duration_ms}ms "
        f"ranker_called={str(metrics.ranker_called).lower()} "
        f"ranker_ok={str(metrics.ranker_ok).lower()} "
        f"ranker_time={metrics.ranker_duration_ms}ms"
    )
