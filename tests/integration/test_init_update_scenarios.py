from __future__ import annotations

import json
from pathlib import Path

from codemap.cli import main
from codemap.index.hashing import digest
from codemap.ranking import FALLBACK_BRIEF


def _run(root: Path, *argv: str) -> int:
    return main(["--repo-root", str(root), *argv], environ={})


def _write(root: Path, relative: str, text: str) -> None:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def _context(root: Path) -> dict[str, object]:
    return json.loads((root / ".codemap" / "context.json").read_text(encoding="utf-8"))


def _functions(root: Path, relative: str) -> dict[str, dict[str, object]]:
    files = _context(root)["files"]
    assert isinstance(files, dict)
    return {function["name"]: function for function in files[relative]["functions"]}


def _last_metrics(root: Path) -> dict[str, object]:
    history = json.loads((root / ".codemap" / "metrics.json").read_text(encoding="utf-8"))
    return history[-1]


def test_init_indexes_single_rust_function(tmp_path: Path) -> None:
    _write(tmp_path, "src/main.rs", "fn main() {}\n")

    assert _run(tmp_path, "init") == 0

    assert _context(tmp_path)["files"] == {
        "src/main.rs": {
            "language": "rust",
            "functions": [
                {"name": "main", "line": 1, "summary": None, "hash": digest("fn main() {}\n")}
            ],
        }
    }
    assert (tmp_path / ".codemap" / "config.toml").exists()
    assert json.loads((tmp_path / ".codemap" / "log.json").read_text(encoding="utf-8")) == []


def test_unchanged_update_reports_full_reuse(tmp_path: Path) -> None:
    _write(tmp_path, "src/main.rs", "fn main() {}\n")
    _run(tmp_path, "init")
    before = _functions(tmp_path, "src/main.rs")

    assert _run(tmp_path, "update") == 0

    metrics = _last_metrics(tmp_path)
    assert metrics["reuse_ratio"] == 1.0
    assert metrics["added_functions"] == 0
    assert metrics["modified_functions"] == 0
    assert metrics["unchanged_functions"] == 1
    assert metrics["removed_functions"] == 0
    assert metrics["ranker_called"] is False
    assert _functions(tmp_path, "src/main.rs") == before


def test_summary_carry_forward_edit_and_deletion(tmp_path: Path) -> None:
    _write(tmp_path, "src/main.rs", "fn main() {}\n")
    _run(tmp_path, "init")
    _run(tmp_path, "update")

    context_path = tmp_path / ".codemap" / "context.json"
    payload = json.loads(context_path.read_text(encoding="utf-8"))
    payload["files"]["src/main.rs"]["functions"][0]["summary"] = "entry"
    context_path.write_text(json.dumps(payload), encoding="utf-8")
    _write(tmp_path, "src/main.rs", "fn main() {}\nfn help() {}\n")

    assert _run(tmp_path, "update") == 0
    functions = _functions(tmp_path, "src/main.rs")
    assert functions["main"]["summary"] == "entry"
    assert functions["help"]["summary"] is None
    assert functions["help"]["line"] == 2
    metrics = _last_metrics(tmp_path)
    assert (metrics["added_functions"], metrics["unchanged_functions"]) == (1, 1)

    _write(tmp_path, "src/main.rs", 'fn main() { println!("hi"); }\nfn help() {}\n')
    assert _run(tmp_path, "update") == 0
    functions = _functions(tmp_path, "src/main.rs")
    assert functions["main"]["summary"] is None
    metrics = _last_metrics(tmp_path)
    assert metrics["modified_functions"] == 1
    assert metrics["unchanged_functions"] == 1

    _write(tmp_path, "src/main.rs", 'fn main() { println!("hi"); }\n')
    assert _run(tmp_path, "update") == 0
    functions = _functions(tmp_path, "src/main.rs")
    assert "help" not in functions
    metrics = _last_metrics(tmp_path)
    assert metrics["removed_functions"] == 1
    assert (
        metrics["added_functions"] + metrics["modified_functions"] + metrics["unchanged_functions"]
        == metrics["total_functions"]
        == 1
    )


def test_update_without_credential_uses_heuristic_entry_points(tmp_path: Path) -> None:
    _write(tmp_path, "src/main.rs", "fn main() {}\n")
    _write(tmp_path, "src/bin/worker.rs", "fn main() {}\n")
    _run(tmp_path, "init")

    assert _run(tmp_path, "update") == 0

    context = _context(tmp_path)
    entry_points = context["entry_points"]
    assert entry_points[0] == {"path": "src/main.rs", "rank": 10, "reason": "Binary entrypoint"}
    assert entry_points[1] == {
        "path": "src/bin/worker.rs",
        "rank": 9,
        "reason": "CLI subcommand entrypoint",
    }
    ranks = [entry["rank"] for entry in entry_points]
    assert all(1 <= rank <= 10 for rank in ranks)
    assert ranks == sorted(ranks, reverse=True)
    assert context["project_brief"] == FALLBACK_BRIEF


def test_unusable_api_key_declines_and_update_still_saves(tmp_path: Path) -> None:
    _write(tmp_path, "src/main.rs", "fn main() {}\n")
    _run(tmp_path, "init")

    exit_code = main(
        ["--repo-root", str(tmp_path), "update"], environ={"OPENAI_API_KEY": "sk-pasted…"}
    )

    assert exit_code == 0
    metrics = _last_metrics(tmp_path)
    assert metrics["ranker_called"] is True
    assert metrics["ranker_ok"] is False
    context = _context(tmp_path)
    assert context["entry_points"][0]["path"] == "src/main.rs"
    assert context["project_brief"] == FALLBACK_BRIEF


def test_metrics_history_grows_by_one_per_update(tmp_path: Path) -> None:
    _write(tmp_path, "lib.rs", "fn a() {}\n")
    _run(tmp_path, "init")

    _run(tmp_path, "update")
    _run(tmp_path, "update")

    history = json.loads((tmp_path / ".codemap" / "metrics.json").read_text(encoding="utf-8"))
    assert len(history) == 2
    assert history[0]["timestamp"] <= history[1]["timestamp"]


def test_deleted_file_leaves_index(tmp_path: Path) -> None:
    _write(tmp_path, "a.rs", "fn a() {}\n")
    _write(tmp_path, "b.rs", "fn b() {}\nfn c() {}\n")
    _run(tmp_path, "init")

    (tmp_path / "b.rs").unlink()
    _run(tmp_path, "update")

    assert sorted(_context(tmp_path)["files"]) == ["a.rs"]
    assert _last_metrics(tmp_path)["removed_functions"] == 2


def test_malformed_context_fails_without_writing(tmp_path: Path) -> None:
    _write(tmp_path, "a.rs", "fn a() {}\n")
    _run(tmp_path, "init")
    context_path = tmp_path / ".codemap" / "context.json"
    context_path.write_text("{oops", encoding="utf-8")

    assert _run(tmp_path, "update") == 1

    assert context_path.read_text(encoding="utf-8") == "{oops"
    assert not (tmp_path / ".codemap" / "metrics.json").exists()


def test_malformed_metrics_history_fails_before_context_write(tmp_path: Path) -> None:
    _write(tmp_path, "a.rs", "fn a() {}\n")
    _run(tmp_path, "init")
    context_path = tmp_path / ".codemap" / "context.json"
    original = context_path.read_text(encoding="utf-8")
    (tmp_path / ".codemap" / "metrics.json").write_text("{}", encoding="utf-8")
    _write(tmp_path, "b.rs", "fn b() {}\n")

    assert _run(tmp_path, "update") == 1

    assert context_path.read_text(encoding="utf-8") == original
