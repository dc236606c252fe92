from __future__ import annotations

import json
from pathlib import Path

from codemap.index.discovery import build_snapshot
from codemap.index.merge import merge_file, merge_project
from codemap.index.models import (
    EntryPoint,
    FileEntry,
    FolderEntry,
    FunctionRecord,
    ProjectContext,
)

HASH_A = "a" * 64
HASH_B = "b" * 64
HASH_C = "c" * 64


def _file(*functions: FunctionRecord) -> FileEntry:
    return FileEntry(language="rust", functions=functions)


def test_unchanged_body_keeps_prior_summary_and_takes_new_line() -> None:
    old = _file(FunctionRecord(name="run", line=3, body_hash=HASH_A, summary="runs things"))
    new = _file(FunctionRecord(name="run", line=9, body_hash=HASH_A))

    merged = merge_file(old, new)

    assert merged.functions == (
        FunctionRecord(name="run", line=9, body_hash=HASH_A, summary="runs things"),
    )


def test_changed_body_clears_summary() -> None:
    old = _file(FunctionRecord(name="run", line=3, body_hash=HASH_A, summary="stale"))
    new = _file(FunctionRecord(name="run", line=3, body_hash=HASH_B))

    merged = merge_file(old, new)

    assert merged.functions[0].summary is None
    assert merged.functions[0].body_hash == HASH_B


def test_deleted_functions_are_dropped_and_new_ones_added() -> None:
    old = _file(
        FunctionRecord(name="keep", line=1, body_hash=HASH_A, summary="kept"),
        FunctionRecord(name="gone", line=5, body_hash=HASH_B, summary="removed"),
    )
    new = _file(
        FunctionRecord(name="keep", line=1, body_hash=HASH_A),
        FunctionRecord(name="fresh", line=7, body_hash=HASH_C),
    )

    merged = merge_file(old, new)

    assert [(record.name, record.summary) for record in merged.functions] == [
        ("keep", "kept"),
        ("fresh", None),
    ]


def test_duplicate_names_in_old_file_resolve_to_last_occurrence() -> None:
    old = _file(
        FunctionRecord(name="dup", line=1, body_hash=HASH_A, summary="first"),
        FunctionRecord(name="dup", line=4, body_hash=HASH_B, summary="second"),
    )
    new = _file(
        FunctionRecord(name="dup", line=1, body_hash=HASH_A),
        FunctionRecord(name="dup", line=4, body_hash=HASH_B),
    )

    merged = merge_file(old, new)

    assert [record.summary for record in merged.functions] == [None, "second"]


def test_merge_project_adds_drops_files_and_carries_ranking_state() -> None:
    entry_points = (EntryPoint(path="src/main.rs", rank=10, reason="Binary entrypoint"),)
    old = ProjectContext(
        folders={".": FolderEntry(children=("old.rs", "src"))},
        files={
            "src/main.rs": _file(
                FunctionRecord(name="main", line=1, body_hash=HASH_A, summary="entry")
            ),
            "old.rs": _file(FunctionRecord(name="legacy", line=1, body_hash=HASH_B)),
        },
        entry_points=entry_points,
        project_brief="A tool.",
    )
    new = ProjectContext(
        folders={".": FolderEntry(children=("new.rs", "src"))},
        files={
            "src/main.rs": _file(FunctionRecord(name="main", line=2, body_hash=HASH_A)),
            "new.rs": _file(FunctionRecord(name="novel", line=1, body_hash=HASH_C)),
        },
    )

    merged = merge_project(old, new)

    assert merged.folders == new.folders
    assert sorted(merged.files) == ["new.rs", "src/main.rs"]
    assert merged.files["src/main.rs"].functions[0].summary == "entry"
    assert merged.files["src/main.rs"].functions[0].line == 2
    assert merged.files["new.rs"] == new.files["new.rs"]
    assert merged.entry_points == entry_points
    assert merged.project_brief == "A tool."


def test_merge_project_with_empty_previous_is_fresh_snapshot() -> None:
    new = ProjectContext(
        folders={".": FolderEntry(children=("a.rs",))},
        files={"a.rs": _file(FunctionRecord(name="a", line=1, body_hash=HASH_A))},
    )

    merged = merge_project(ProjectContext(), new)

    assert merged == new


def test_merging_rebuild_of_unchanged_tree_is_identity(tmp_path: Path) -> None:
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "main.rs").write_text("fn main() {}\nfn help() {}\n", encoding="utf-8")
    (tmp_path / "util.py").write_text("def util():\n    pass\n", encoding="utf-8")
    first = build_snapshot(tmp_path)

    merged = merge_project(first, build_snapshot(tmp_path))

    assert merged == first
    assert json.dumps(merged.to_dict(), sort_keys=True) == json.dumps(first.to_dict(), sort_keys=True)
