"""Heuristic candidate selection for onboarding entry points."""

from __future__ import annotations

from pathlib import Path

from codemap.index.models import ProjectContext
from codemap.ranking.models import Candidate

CANONICAL_ROOTS = ("src/main.rs", "src/lib.rs")
BIN_PREFIX = "src/bin/"
ROLE_PATTERNS = ("route", "router", "handler", "server", "controller", "cli", "command")


def truncate_utf8(text: str, max_bytes: int) -> str:
    """Truncate at a UTF-8 character boundary not exceeding ``max_bytes`` bytes."""
    encoded = text.encode("utf-8")
    if len(encoded) <= max_bytes:
        return text
    end = max(max_bytes, 0)
    while end > 0 and (encoded[end] & 0xC0) == 0x80:
        end -= 1
    return encoded[:end].decode("utf-8")


def is_readme(path: str) -> bool:
    lowered = path.lower()
    return lowered.endswith("readme.md") or lowered.endswith("readme")


class _CandidateCollector:
    """Ordered, de-duplicated candidate list bounded by ``max_files``."""

    def __init__(
        self,
        context: ProjectContext,
        repo_root: Path,
        max_files: int,
        max_bytes_per_file: int,
    ) -> None:
        self._context = context
        self._repo_root = repo_root
        self._max_files = max_files
        self._max_bytes_per_file = max_bytes_per_file
        self._seen: set[str] = set()
        self.candidates: list[Candidate] = []

    @property
    def full(self) -> bool:
        return len(self.candidates) >= self._max_files

    def seen(self, path: str) -> bool:
        return path in self._seen

    def push(self, path: str) -> None:
        if self.full or path in self._seen or path not in self._context.files:
            return
        try:
            raw = (self._repo_root / path).read_bytes()
        except OSError:
            return
        text = raw.decode("utf-8", errors="replace")
        self.candidates.append(
            Candidate(path=path, snippet=truncate_utf8(text, self._max_bytes_per_file))
        )
        self._seen.add(path)


def gather_candidates(
    context: ProjectContext,
    repo_root: Path,
    max_files: int,
    max_bytes_per_file: int,
) -> list[Candidate]:
    """Collect candidates by bucket priority: README, roots, bins, role names, function count."""
    collector = _CandidateCollector(context, repo_root, max_files, max_bytes_per_file)
    if max_files < 1:
        return collector.candidates
    paths = list(context.files.keys())

    readme = next((path for path in paths if is_readme(path)), None)
    if readme is not None:
        collector.push(readme)

    for path in CANONICAL_ROOTS:
        collector.push(path)

    for path in sorted(path for path in paths if path.startswith(BIN_PREFIX)):
        collector.push(path)

    role_paths = sorted(
        path for path in paths if any(pattern in path.lower() for pattern in ROLE_PATTERNS)
    )
    for path in role_paths:
        collector.push(path)

    remaining = [path for path in paths if not collector.seen(path)]
    remaining.sort(key=lambda path: -len(context.files[path].functions))
    for path in remaining:
        if collector.full:
            break
        collector.push(path)

    return collector.candidates
