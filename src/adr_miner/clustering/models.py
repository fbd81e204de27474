"""Data models for commit clusters."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from ..history.dependencies import DependencyDelta
from ..extraction.models import PatternDelta
from ..history.models import Commit, Language


class ReasonKind(Enum):
    TEMPORAL = "temporal"
    FILE_OVERLAP = "file-overlap"


@dataclass(frozen=True)
class ClusterReason:
    kind: ReasonKind
    description: str
    days_span: Optional[int] = None
    files: tuple[str, ...] = ()
    overlap_percent: Optional[float] = None


@dataclass(frozen=True)
class CommitCluster:
    """Related commits that together represent one decision. Immutable once built."""

    id: str
    commits: tuple[Commit, ...]
    commit_hashes: frozenset[str]
    reasons: tuple[ClusterReason, ...]
    date_range: tuple[datetime, datetime]
    duration: str
    files_affected: tuple[str, ...] = ()
    languages: tuple[Language, ...] = ()
    primary_language: Language = Language.MIXED
    total_lines_changed: int = 0
    authors: tuple[str, ...] = ()
    patterns_affected: tuple[PatternDelta, ...] = ()
    dependency_changes: tuple[DependencyDelta, ...] = ()

    @property
    def size(self) -> int:
        return len(self.commits)

    @property
    def earliest(self) -> Commit:
        return self.commits[0]


@dataclass
class ClusteringResult:
    clusters: list[CommitCluster] = field(default_factory=list)
    rejected: list[CommitCluster] = field(default_factory=list)
