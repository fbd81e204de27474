"""Data models for mined decisions."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from ..categories import DecisionCategory
from ..clustering.models import CommitCluster
from ..extraction.models import PatternDelta
from ..history.dependencies import DependencyDelta


class ConfidenceLevel(Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class DecisionStatus(Enum):
    DRAFT = "draft"
    CONFIRMED = "confirmed"
    SUPERSEDED = "superseded"
    REJECTED = "rejected"


class EvidenceType(Enum):
    COMMIT_MESSAGE = "commit-message"
    DEPENDENCY_CHANGE = "dependency-change"
    PATTERN_CHANGE = "pattern-change"


@dataclass(frozen=True)
class Evidence:
    type: EvidenceType
    description: str
    source: str
    confidence: float


@dataclass(frozen=True)
class Reference:
    type: str  # "commit" | "issue" | "pr"
    id: str
    title: Optional[str] = None


@dataclass(frozen=True)
class ADR:
    context: str
    decision: str
    consequences: tuple[str, ...] = ()
    references: tuple[Reference, ...] = ()
    evidence: tuple[Evidence, ...] = ()


@dataclass
class Decision:
    """A mined architectural decision.

    Created as ``DRAFT``. Only the decision store changes ``status`` and the
    curation fields afterwards.
    """

    id: str
    title: str
    category: DecisionCategory
    confidence: ConfidenceLevel
    confidence_score: float
    cluster: CommitCluster
    adr: ADR
    status: DecisionStatus = DecisionStatus.DRAFT
    tags: list[str] = field(default_factory=list)
    mined_at: datetime = field(default_factory=datetime.now)
    last_updated: datetime = field(default_factory=datetime.now)
    confirmed_by: Optional[str] = None
    notes: Optional[str] = None

    @property
    def date_range(self) -> tuple[datetime, datetime]:
        return self.cluster.date_range

    @property
    def duration(self) -> str:
        return self.cluster.duration

    @property
    def patterns_changed(self) -> tuple[PatternDelta, ...]:
        return self.cluster.patterns_affected

    @property
    def dependencies_changed(self) -> tuple[DependencyDelta, ...]:
        return self.cluster.dependency_changes
