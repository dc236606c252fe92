"""Fixed file-extension to language-label classification."""

from __future__ import annotations

from pathlib import PurePosixPath

LANGUAGE_BY_EXTENSION: dict[str, str] = {
    "rs": "rust",
    "py": "python",
    "js": "javascript",
    "ts": "typescript",
    "java": "java",
    "go": "go",
    "c": "c",
    "cpp": "cpp",
    "cc": "cpp",
    "cxx": "cpp",
    "c++": "cpp",
}


def classify(extension: str) -> str | None:
    """Return the language label for an extension (without dot), case-insensitively."""
    return LANGUAGE_BY_EXTENSION.get(extension.lower())


def classify_path(relative_path: str) -> str | None:
    """Classify a path by its final suffix; None when there is no supported suffix."""
    suffix = PurePosixPath(relative_path).suffix
    if not suffix:
        return None
    return classify(suffix[1:])
