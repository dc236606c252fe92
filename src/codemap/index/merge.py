"""Carry-forward merge of a previous snapshot into a fresh one."""

from __future__ import annotations

from dataclasses import replace

from codemap.index.models import FileEntry, FunctionRecord, ProjectContext


def functions_by_name(functions: tuple[FunctionRecord, ...]) -> dict[str, FunctionRecord]:
    """Map records by name; a repeated name resolves to its last occurrence."""
    return {function.name: function for function in functions}


def merge_file(old: FileEntry, new: FileEntry) -> FileEntry:
    """Merge one file: keep summaries of unchanged bodies, clear changed, drop deleted."""
    previous = functions_by_name(old.functions)
    merged: list[FunctionRecord] = []
    for function in new.functions:
        prior = previous.get(function.name)
        if prior is not None and prior.body_hash == function.body_hash:
            merged.append(replace(function, summary=prior.summary))
            continue
        merged.append(replace(function, summary=None))
    return FileEntry(language=new.language, functions=tuple(merged))


def merge_project(old: ProjectContext, new: ProjectContext) -> ProjectContext:
    """Merge snapshots; entry points and brief carry over until a ranker replaces them."""
    files: dict[str, FileEntry] = {}
    for path, new_file in new.files.items():
        old_file = old.files.get(path)
        files[path] = new_file if old_file is None else merge_file(old_file, new_file)
    return ProjectContext(
        folders=dict(new.folders),
        files=files,
        entry_points=old.entry_points,
        project_brief=old.project_brief,
    )
