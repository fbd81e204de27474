"""Rule-driven commit extractor shared by every language."""

from datetime import datetime
from pathlib import PurePosixPath
from typing import Optional

from ..history.dependencies import DependencyDelta, DependencyDiffAnalyzer
from ..history.message_parser import CommitParser, MessageSignal
from ..history.models import Commit, FileChange, FileStatus, Language
from ..logging_config import get_logger
from .models import (
    ArchitecturalSignal,
    CommitExtraction,
    DeltaChange,
    FunctionDelta,
    PatternDelta,
    SignalType,
)
from .patterns import NullPatternStore, PatternStore
from .rules import LanguageRules

logger = get_logger(__name__)

# Generic path keywords checked after the language table.
# (keywords, signal type, base confidence, added files only)
_GENERIC_RULES: list[tuple[tuple[str, ...], SignalType, float, bool]] = [
    (("interface", "abstract", "base", "contract"), SignalType.NEW_ABSTRACTION, 0.7, True),
    (
        ("controller", "route", "endpoint", "api", "handler"),
        SignalType.API_SURFACE_CHANGE,
        0.6,
        False,
    ),
    (("model", "entity", "schema", "migration"), SignalType.DATA_MODEL_CHANGE, 0.6, False),
]

_GENERIC_ENTRY_POINT_WORDS = ("controller", "handler", "route", "endpoint", "main", "index", "app")

# Significance weights
_BASE_SIGNIFICANCE = 0.1
_MESSAGE_WEIGHT = 0.3
_ARCHITECTURE_WEIGHT = 0.3
_PER_ENTRY_POINT, _MAX_ENTRY_POINT = 0.05, 0.2
_PER_PATTERN, _MAX_PATTERN = 0.05, 0.2
_PER_DEPENDENCY, _MAX_DEPENDENCY = 0.05, 0.15


def _clamp(value: float, low: float = 0.1, high: float = 1.0) -> float:
    return max(low, min(high, value))


def compute_significance(
    message_signals,
    architectural_signals,
    functions_changed,
    patterns_affected,
    dependency_changes,
) -> float:
    """Combine per-commit evidence into a 0..1 significance score."""
    score = _BASE_SIGNIFICANCE
    score += _MESSAGE_WEIGHT * max((s.confidence for s in message_signals), default=0.0)
    score += _ARCHITECTURE_WEIGHT * max(
        (s.confidence for s in architectural_signals), default=0.0
    )
    entry_points = sum(1 for f in functions_changed if f.is_entry_point)
    score += min(_MAX_ENTRY_POINT, _PER_ENTRY_POINT * entry_points)
    score += min(_MAX_PATTERN, _PER_PATTERN * len(patterns_affected))
    score += min(_MAX_DEPENDENCY, _PER_DEPENDENCY * len(dependency_changes))
    return min(1.0, score)


def merge_signals(signals: list[ArchitecturalSignal]) -> list[ArchitecturalSignal]:
    """Merge signals sharing (type, description): union files, keep max confidence.

    First-seen order is preserved.
    """
    merged: dict[tuple[SignalType, str], ArchitecturalSignal] = {}
    for signal in signals:
        key = (signal.type, signal.description)
        existing = merged.get(key)
        if existing is None:
            merged[key] = signal
            continue
        files = existing.files + tuple(f for f in signal.files if f not in existing.files)
        merged[key] = ArchitecturalSignal(
            type=signal.type,
            description=signal.description,
            files=files,
            confidence=max(existing.confidence, signal.confidence),
        )
    return list(merged.values())


class CommitExtractor:
    """Turns one commit into a CommitExtraction using a language's rule table.

    Language-specific behaviour lives entirely in ``LanguageRules``; this class
    holds the shared algorithm:

      1. Keep only files this language owns (empty extraction if none).
      2. Parse message signals.
      3. Apply the rule table, then the generic path keywords for signal
         types the file has not matched yet.
      4. Adjust confidences for added, large and test files.
      5. Merge duplicate signals.
      6. Derive file-level function deltas and entry points.
      7. Collect dependency and pattern deltas.
      8. Score significance.
    """

    def __init__(
        self,
        rules: LanguageRules,
        parser: Optional[CommitParser] = None,
        dependency_analyzer: Optional[DependencyDiffAnalyzer] = None,
        pattern_store: Optional[PatternStore] = None,
    ):
        self.rules = rules
        self.language = rules.language
        self.parser = parser or CommitParser()
        self.dependency_analyzer = dependency_analyzer or DependencyDiffAnalyzer()
        self.pattern_store = pattern_store or NullPatternStore()
        self._compiled = rules.compiled_rules()
        self._entry_points = rules.compiled_entry_points()

    def can_handle(self, path: str) -> bool:
        return PurePosixPath(path).suffix.lower() in self.rules.extensions

    def extract(
        self, commit: Commit, primary_language: Optional[Language] = None
    ) -> CommitExtraction:
        """Extract one commit.

        Args:
            commit: Commit to analyze
            primary_language: Language to record on the extraction. Defaults to
                this extractor's language; the registry passes ``MIXED`` when
                no language dominates.
        """
        owned = [f for f in commit.files if self.can_handle(f.path)]
        message_signals = tuple(self.parser.extract_signals(commit.subject, commit.body))

        if not owned:
            return self._empty_extraction(commit, message_signals)

        architectural = tuple(self._architectural_signals(owned))
        functions = tuple(self._function_deltas(owned))
        dependencies: tuple[DependencyDelta, ...] = tuple(
            self.dependency_analyzer.analyze_changes(commit)
        )
        patterns: tuple[PatternDelta, ...] = tuple(
            self.pattern_store.changes_for(commit, [f.path for f in owned])
        )

        significance = compute_significance(
            message_signals, architectural, functions, patterns, dependencies
        )
        logger.debug(
            "%s: %d signals, significance %.2f",
            commit.short_hash,
            len(architectural),
            significance,
        )

        return CommitExtraction(
            commit=commit,
            primary_language=primary_language or self.language,
            languages_affected=self._languages_affected(commit),
            patterns_affected=patterns,
            functions_changed=functions,
            dependency_changes=dependencies,
            message_signals=message_signals,
            architectural_signals=architectural,
            significance=significance,
            extracted_at=datetime.now(),
        )

    def is_entry_point(self, path: str) -> bool:
        if any(p.search(path) for p in self._entry_points):
            return True
        name = PurePosixPath(path).name.lower()
        return any(word in name for word in _GENERIC_ENTRY_POINT_WORDS)

    def _architectural_signals(self, files: list[FileChange]) -> list[ArchitecturalSignal]:
        raw: list[ArchitecturalSignal] = []
        for file in files:
            matched_types = set()
            for pattern, signal_type, description, confidence in self._compiled:
                if pattern.search(file.path):
                    matched_types.add(signal_type)
                    raw.append(self._adjusted(file, signal_type, description, confidence))

            lower = file.path.lower()
            for keywords, signal_type, confidence, added_only in _GENERIC_RULES:
                if signal_type in matched_types:
                    continue
                if added_only and file.status != FileStatus.ADDED:
                    continue
                if any(word in lower for word in keywords):
                    raw.append(
                        self._adjusted(
                            file, signal_type, self._generic_description(signal_type, file), confidence
                        )
                    )
        return merge_signals(raw)

    @staticmethod
    def _generic_description(signal_type: SignalType, file: FileChange) -> str:
        if signal_type == SignalType.NEW_ABSTRACTION:
            return f"New abstraction file: {file.path}"
        if signal_type == SignalType.API_SURFACE_CHANGE:
            return f"API file {file.status.value}: {file.path}"
        return f"Data model file {file.status.value}: {file.path}"

    @staticmethod
    def _adjusted(
        file: FileChange, signal_type: SignalType, description: str, confidence: float
    ) -> ArchitecturalSignal:
        if file.status == FileStatus.ADDED:
            confidence += 0.1
        if file.lines_changed > 50:
            confidence += 0.1
        if file.is_test:
            confidence -= 0.2
        return ArchitecturalSignal(
            type=signal_type,
            description=description,
            files=(file.path,),
            confidence=round(_clamp(confidence), 4),
        )

    def _function_deltas(self, files: list[FileChange]) -> list[FunctionDelta]:
        deltas = []
        for file in files:
            if file.status == FileStatus.ADDED:
                deltas.append(
                    FunctionDelta(
                        id=f"{file.path}:new",
                        name="[new file]",
                        qualified_name=file.path,
                        file=file.path,
                        change_type=DeltaChange.ADDED,
                        is_entry_point=self.is_entry_point(file.path),
                    )
                )
            elif file.status == FileStatus.DELETED:
                deltas.append(
                    FunctionDelta(
                        id=f"{file.path}:deleted",
                        name="[deleted file]",
                        qualified_name=file.path,
                        file=file.path,
                        change_type=DeltaChange.REMOVED,
                    )
                )
            elif file.status == FileStatus.MODIFIED and file.lines_changed > 10:
                deltas.append(
                    FunctionDelta(
                        id=f"{file.path}:modified",
                        name="[modified]",
                        qualified_name=file.path,
                        file=file.path,
                        change_type=DeltaChange.MODIFIED,
                        is_entry_point=self.is_entry_point(file.path),
                        signature_changed=file.additions > 5 and file.deletions > 5,
                    )
                )
        return deltas

    @staticmethod
    def _languages_affected(commit: Commit) -> tuple[Language, ...]:
        seen: dict[Language, None] = {}
        for file in commit.files:
            if file.language.is_source:
                seen.setdefault(file.language, None)
        return tuple(seen)

    @staticmethod
    def _empty_extraction(
        commit: Commit, message_signals: tuple[MessageSignal, ...]
    ) -> CommitExtraction:
        return CommitExtraction(
            commit=commit,
            primary_language=Language.MIXED,
            message_signals=message_signals,
            significance=_BASE_SIGNIFICANCE,
            extracted_at=datetime.now(),
        )
