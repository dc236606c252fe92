"""Per-language function extractors."""

from .base import (
    ExtractorContractError,
    FunctionExtractor,
    source_lines,
    validate_function_records,
)
from .fallback import NullFunctionExtractor
from .registry import ExtractorRegistry
from .runtime import build_extractor_registry, extract_functions
from .rust import RustFunctionExtractor

__all__ = [
    "ExtractorContractError",
    "ExtractorRegistry",
    "FunctionExtractor",
    "NullFunctionExtractor",
    "RustFunctionExtractor",
    "build_extractor_registry",
    "extract_functions",
    "source_lines",
    "validate_function_records",
]
