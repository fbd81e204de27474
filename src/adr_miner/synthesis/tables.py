"""Exhaustive mapping tables for synthesis.

Every enum member must appear in each table; ``_check_exhaustive`` fails at
import time when a new SignalType or DecisionCategory is added without one.
"""

from ..categories import DecisionCategory
from ..extraction.models import SignalType

_C = DecisionCategory

SIGNAL_CATEGORY: dict[SignalType, DecisionCategory] = {
    SignalType.NEW_ABSTRACTION: _C.PATTERN_INTRODUCTION,
    SignalType.LAYER_CHANGE: _C.ARCHITECTURE_CHANGE,
    SignalType.API_SURFACE_CHANGE: _C.API_CHANGE,
    SignalType.DATA_MODEL_CHANGE: _C.ARCHITECTURE_CHANGE,
    SignalType.CONFIG_CHANGE: _C.INFRASTRUCTURE,
    SignalType.BUILD_CHANGE: _C.INFRASTRUCTURE,
    SignalType.TEST_STRATEGY_CHANGE: _C.TESTING_STRATEGY,
    SignalType.ERROR_HANDLING_CHANGE: _C.PATTERN_INTRODUCTION,
    SignalType.AUTH_CHANGE: _C.SECURITY_ENHANCEMENT,
    SignalType.INTEGRATION_CHANGE: _C.TECHNOLOGY_ADOPTION,
}

CATEGORY_VERB: dict[DecisionCategory, str] = {
    _C.TECHNOLOGY_ADOPTION: "Adopt",
    _C.TECHNOLOGY_REMOVAL: "Remove",
    _C.PATTERN_INTRODUCTION: "Introduce",
    _C.PATTERN_MIGRATION: "Migrate",
    _C.ARCHITECTURE_CHANGE: "Restructure",
    _C.API_CHANGE: "Update API",
    _C.SECURITY_ENHANCEMENT: "Enhance security",
    _C.PERFORMANCE_OPTIMIZATION: "Optimize",
    _C.REFACTORING: "Refactor",
    _C.TESTING_STRATEGY: "Update testing",
    _C.INFRASTRUCTURE: "Update infrastructure",
    _C.OTHER: "Change",
}

# Multi-commit decision statements; categories without one use the earliest subject.
# "{files}" is replaced with the cluster's file count.
CATEGORY_STATEMENT: dict[DecisionCategory, str] = {
    _C.TECHNOLOGY_ADOPTION: (
        "Adopt new technology/library as indicated by dependency additions and code changes."
    ),
    _C.TECHNOLOGY_REMOVAL: "Remove deprecated technology/library and migrate to alternatives.",
    _C.PATTERN_INTRODUCTION: "Introduce new coding pattern or abstraction across the codebase.",
    _C.ARCHITECTURE_CHANGE: "Restructure code architecture affecting {files} files.",
    _C.API_CHANGE: "Modify API surface with changes to endpoints or contracts.",
    _C.SECURITY_ENHANCEMENT: "Enhance security measures in authentication or authorization.",
    _C.REFACTORING: "Refactor code for improved maintainability without changing behavior.",
}


def _check_exhaustive() -> None:
    missing_signals = set(SignalType) - set(SIGNAL_CATEGORY)
    if missing_signals:
        raise RuntimeError(f"SIGNAL_CATEGORY is missing {sorted(s.value for s in missing_signals)}")
    missing_verbs = set(DecisionCategory) - set(CATEGORY_VERB)
    if missing_verbs:
        raise RuntimeError(f"CATEGORY_VERB is missing {sorted(c.value for c in missing_verbs)}")


_check_exhaustive()
