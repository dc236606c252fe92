"""Fallback extractor for languages without function extraction."""

from __future__ import annotations

from codemap.index.models import FunctionRecord


class NullFunctionExtractor:
    """Default extractor that yields no function records."""

    name = "none"

    def supports_language(self, language: str) -> bool:
        """Fallback supports any language."""
        _ = language
        return True

    def extract(self, text: str) -> list[FunctionRecord]:
        """Fallback returns an empty record list."""
        _ = text
        return []
