"""Data models for per-commit extraction."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from ..history.dependencies import DependencyDelta
from ..history.message_parser import MessageSignal, SignalKind
from ..history.models import Commit, Language


class SignalType(Enum):
    """Closed vocabulary of architectural signals."""

    NEW_ABSTRACTION = "new-abstraction"
    LAYER_CHANGE = "layer-change"
    API_SURFACE_CHANGE = "api-surface-change"
    DATA_MODEL_CHANGE = "data-model-change"
    CONFIG_CHANGE = "config-change"
    BUILD_CHANGE = "build-change"
    TEST_STRATEGY_CHANGE = "test-strategy-change"
    ERROR_HANDLING_CHANGE = "error-handling-change"
    AUTH_CHANGE = "auth-change"
    INTEGRATION_CHANGE = "integration-change"


class DeltaChange(Enum):
    ADDED = "added"
    REMOVED = "removed"
    MODIFIED = "modified"


@dataclass(frozen=True)
class ArchitecturalSignal:
    type: SignalType
    description: str
    files: tuple[str, ...]
    confidence: float


@dataclass(frozen=True)
class FunctionDelta:
    """File-level stand-in for a function change. Not an AST diff."""

    id: str
    name: str
    qualified_name: str
    file: str
    change_type: DeltaChange
    is_entry_point: bool = False
    signature_changed: bool = False


@dataclass(frozen=True)
class PatternDelta:
    pattern_id: str
    pattern_name: str
    category: str
    change_type: DeltaChange
    locations_before: int = 0
    locations_after: int = 0
    files_affected: tuple[str, ...] = ()


@dataclass(frozen=True)
class CommitExtraction:
    commit: Commit
    primary_language: Language
    languages_affected: tuple[Language, ...] = ()
    patterns_affected: tuple[PatternDelta, ...] = ()
    functions_changed: tuple[FunctionDelta, ...] = ()
    dependency_changes: tuple[DependencyDelta, ...] = ()
    message_signals: tuple[MessageSignal, ...] = ()
    architectural_signals: tuple[ArchitecturalSignal, ...] = ()
    significance: float = 0.1
    extracted_at: datetime = field(default_factory=datetime.now)

    @property
    def keywords(self) -> set[str]:
        return {s.value for s in self.message_signals if s.kind == SignalKind.KEYWORD}

    @property
    def pattern_ids(self) -> set[str]:
        return {p.pattern_id for p in self.patterns_affected}

    @property
    def entry_point_changes(self) -> int:
        return sum(1 for f in self.functions_changed if f.is_entry_point)

    def signal(self, signal_type: SignalType) -> Optional[ArchitecturalSignal]:
        """First architectural signal of the given type, if any."""
        for s in self.architectural_signals:
            if s.type == signal_type:
                return s
        return None
