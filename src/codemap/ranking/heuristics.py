"""Heuristic entry-point labeling when no ranker result is available."""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path

from codemap.index.models import EntryPoint, ProjectContext
from codemap.ranking.candidates import gather_candidates, is_readme

FALLBACK_MAX_FILES = 10
FALLBACK_KEEP = 7
FALLBACK_TOP_RANK = 10
FALLBACK_BRIEF = (
    "No LLM brief available. Showing heuristic entry points to start reading the codebase."
)


def heuristic_reason(path: str) -> str:
    """Return a short rationale from the first matching path pattern."""
    lowered = path.lower()
    if lowered.endswith("src/main.rs"):
        return "Binary entrypoint"
    if lowered.endswith("src/lib.rs"):
        return "Library root"
    if lowered.startswith("src/bin/"):
        return "CLI subcommand entrypoint"
    if "router" in lowered or "route" in lowered:
        return "Routing hub"
    if "handler" in lowered:
        return "Request handler"
    if "server" in lowered:
        return "Server bootstrap"
    if is_readme(lowered):
        return "Project docs"
    return "Likely important module"


def apply_heuristic_fallback(
    context: ProjectContext,
    repo_root: Path,
    max_bytes_per_file: int,
) -> ProjectContext:
    """Fill empty entry points from candidates; set the placeholder brief if absent."""
    if context.entry_points:
        return context
    candidates = gather_candidates(
        context,
        repo_root,
        max_files=FALLBACK_MAX_FILES,
        max_bytes_per_file=max_bytes_per_file,
    )
    entry_points = tuple(
        EntryPoint(
            path=candidate.path,
            rank=max(FALLBACK_TOP_RANK - index, 1),
            reason=heuristic_reason(candidate.path),
        )
        for index, candidate in enumerate(candidates[:FALLBACK_KEEP])
    )
    brief = context.project_brief if context.project_brief is not None else FALLBACK_BRIEF
    return replace(context, entry_points=entry_points, project_brief=brief)
