"""Typed models for entry-point ranking."""

from __future__ import annotations

from dataclasses import dataclass

from codemap.index.models import EntryPoint


@dataclass(slots=True, frozen=True)
class Candidate:
    """Candidate onboarding file with a byte-bounded content snippet."""

    path: str
    snippet: str


@dataclass(slots=True, frozen=True)
class RankingResult:
    """Validated ranker response."""

    entry_points: tuple[EntryPoint, ...]
    project_brief: str


@dataclass(slots=True, frozen=True)
class RankerOutcome:
    """Whether the external ranker ran, succeeded, and how long it took."""

    called: bool = False
    ok: bool = False
    duration_ms: int = 0
