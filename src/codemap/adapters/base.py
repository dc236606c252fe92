"""Core extractor protocol and shared record checks."""

from __future__ import annotations

from typing import Protocol

from codemap.index.models import FunctionRecord


class ExtractorContractError(ValueError):
    """Raised when extractor output violates the shared function-record contract."""


def validate_function_records(records: list[FunctionRecord]) -> None:
    """Validate records against required invariant fields."""
    for record in records:
        if not record.name.strip():
            raise ExtractorContractError("Function record name must be non-empty.")
        if record.line < 1:
            raise ExtractorContractError("Function record line must be >= 1.")
        if len(record.body_hash) != 64:
            raise ExtractorContractError("Function record hash must be 64 hex characters.")
        if record.summary is not None:
            raise ExtractorContractError("Freshly extracted records must not carry a summary.")


def source_lines(text: str) -> list[str]:
    """Split text into lines on ``\\n``, dropping one trailing ``\\r`` per line.

    Unlike ``str.splitlines`` this does not break on form feeds or other
    Unicode separators, so line numbers match what an editor shows.
    """
    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


class FunctionExtractor(Protocol):
    """Protocol implemented by per-language function extractors."""

    name: str

    def supports_language(self, language: str) -> bool:
        """Return True when the extractor handles a language label."""

    def extract(self, text: str) -> list[FunctionRecord]:
        """Return function records in source order."""
