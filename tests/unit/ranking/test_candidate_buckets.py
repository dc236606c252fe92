from __future__ import annotations

from pathlib import Path

from codemap.index.models import FileEntry, FunctionRecord, ProjectContext
from codemap.ranking import gather_candidates, is_readme, truncate_utf8


def _functions(count: int) -> tuple[FunctionRecord, ...]:
    return tuple(
        FunctionRecord(name=f"f{index}", line=index + 1, body_hash="a" * 64) for index in range(count)
    )


def _setup(root: Path, files: dict[str, int]) -> ProjectContext:
    entries: dict[str, FileEntry] = {}
    for relative, function_count in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(f"// {relative}\n", encoding="utf-8")
        entries[relative] = FileEntry(language="rust", functions=_functions(function_count))
    return ProjectContext(files=entries)


def test_buckets_are_visited_in_priority_order(tmp_path: Path) -> None:
    context = _setup(
        tmp_path,
        {
            "small.rs": 1,
            "lib/util.rs": 3,
            "big.rs": 5,
            "app/cli_tool.rs": 0,
            "api/router.rs": 0,
            "src/bin/zeta.rs": 0,
            "src/bin/alpha.rs": 0,
            "src/lib.rs": 0,
            "src/main.rs": 0,
            "README": 0,
        },
    )

    candidates = gather_candidates(context, tmp_path, max_files=15, max_bytes_per_file=100)

    assert [candidate.path for candidate in candidates] == [
        "README",
        "src/main.rs",
        "src/lib.rs",
        "src/bin/alpha.rs",
        "src/bin/zeta.rs",
        "api/router.rs",
        "app/cli_tool.rs",
        "big.rs",
        "lib/util.rs",
        "small.rs",
    ]
    assert candidates[1].snippet == "// src/main.rs\n"


def test_candidates_are_bounded_and_unique(tmp_path: Path) -> None:
    context = _setup(tmp_path, {"src/main.rs": 0, "server.rs": 2, "a.rs": 1, "b.rs": 1})

    candidates = gather_candidates(context, tmp_path, max_files=2, max_bytes_per_file=100)

    assert [candidate.path for candidate in candidates] == ["src/main.rs", "server.rs"]
    assert gather_candidates(context, tmp_path, max_files=0, max_bytes_per_file=100) == []


def test_paths_absent_from_index_or_disk_are_skipped(tmp_path: Path) -> None:
    context = _setup(tmp_path, {"handler.rs": 0})
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "main.rs").write_text("fn main() {}\n", encoding="utf-8")
    context.files["ghost_router.rs"] = FileEntry(language="rust")

    candidates = gather_candidates(context, tmp_path, max_files=15, max_bytes_per_file=100)

    assert [candidate.path for candidate in candidates] == ["handler.rs"]


def test_snippets_are_truncated_at_utf8_boundaries(tmp_path: Path) -> None:
    context = _setup(tmp_path, {"src/main.rs": 0})
    (tmp_path / "src" / "main.rs").write_text("héllo", encoding="utf-8")

    candidates = gather_candidates(context, tmp_path, max_files=1, max_bytes_per_file=2)

    assert candidates[0].snippet == "h"


def test_truncate_utf8_backs_off_from_continuation_bytes() -> None:
    assert truncate_utf8("héllo", 2) == "h"
    assert truncate_utf8("héllo", 3) == "hé"
    assert truncate_utf8("héllo", 100) == "héllo"
    assert truncate_utf8("abc", 0) == ""


def test_readme_detection_is_case_insensitive() -> None:
    assert is_readme("README.md")
    assert is_readme("docs/Readme.MD")
    assert is_readme("README")
    assert not is_readme("readme.txt")
