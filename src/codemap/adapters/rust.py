"""Lexical Rust function extractor keyed on brace depth."""

from __future__ import annotations

import re

from codemap.adapters.base import source_lines, validate_function_records
from codemap.index.hashing import digest
from codemap.index.models import FunctionRecord

_FN_RE = re.compile(r"^\s*(?:pub\s+)?(?:async\s+)?fn\s+(\w+)")


class RustFunctionExtractor:
    """Regex header match plus brace counting over raw lines.

    Braces inside string literals and comments are counted like code braces.
    """

    name = "rust_lexical"

    def supports_language(self, language: str) -> bool:
        """Return True for the rust label."""
        return language == "rust"

    def extract(self, text: str) -> list[FunctionRecord]:
        """Extract every matching fn header with its hashed body text."""
        lines = source_lines(text)
        records: list[FunctionRecord] = []
        for index, line in enumerate(lines):
            matched = _FN_RE.match(line)
            if matched is None:
                continue
            body = _capture_body(lines, index)
            records.append(
                FunctionRecord(
                    name=matched.group(1),
                    line=index + 1,
                    body_hash=digest(body),
                )
            )
        validate_function_records(records)
        return records


def _capture_body(lines: list[str], start: int) -> str:
    """Accumulate lines from ``start`` until the first opened brace closes, or EOF."""
    parts: list[str] = []
    depth = 0
    seen_open = False
    for line in lines[start:]:
        parts.append(line)
        parts.append("\n")
        for char in line:
            if char == "{":
                depth += 1
                seen_open = True
            elif char == "}":
                depth -= 1
        if seen_open and depth == 0:
            break
    return "".join(parts)
