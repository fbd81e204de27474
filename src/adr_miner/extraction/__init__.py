"""Per-commit extraction: architectural signals, deltas and significance."""

from .base import CommitExtractor, compute_significance, merge_signals
from .models import (
    ArchitecturalSignal,
    CommitExtraction,
    DeltaChange,
    FunctionDelta,
    PatternDelta,
    SignalType,
)
from .patterns import NullPatternStore, PatternStore
from .registry import ExtractorRegistry
from .rules import LANGUAGE_RULES, LanguageRules

__all__ = [
    "ArchitecturalSignal",
    "CommitExtraction",
    "CommitExtractor",
    "DeltaChange",
    "ExtractorRegistry",
    "FunctionDelta",
    "LANGUAGE_RULES",
    "LanguageRules",
    "NullPatternStore",
    "PatternDelta",
    "PatternStore",
    "SignalType",
    "compute_significance",
    "merge_signals",
]
