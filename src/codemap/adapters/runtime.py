"""Runtime extractor registry construction."""

from __future__ import annotations

from codemap.adapters.fallback import NullFunctionExtractor
from codemap.adapters.registry import ExtractorRegistry
from codemap.adapters.rust import RustFunctionExtractor
from codemap.index.models import FunctionRecord


def build_extractor_registry() -> ExtractorRegistry:
    """Build the default extractor registry."""
    registry = ExtractorRegistry()
    registry.register(RustFunctionExtractor())
    registry.register(NullFunctionExtractor(), fallback=True)
    return registry


def extract_functions(
    text: str,
    language: str,
    registry: ExtractorRegistry | None = None,
) -> list[FunctionRecord]:
    """Extract function records for ``language`` using the selected extractor."""
    selected = (registry or build_extractor_registry()).select(language)
    return selected.extract(text)
