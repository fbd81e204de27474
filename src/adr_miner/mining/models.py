"""Result types for a mining run."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from ..clustering.models import CommitCluster
from ..synthesis.models import Decision


class MiningErrorType(Enum):
    GIT_ERROR = "git-error"  # fatal, aborts the run
    EXTRACTION_ERROR = "extraction-error"  # one commit skipped
    SYNTHESIS_ERROR = "synthesis-error"  # one cluster skipped


@dataclass(frozen=True)
class MiningError:
    type: MiningErrorType
    message: str
    commit_hash: Optional[str] = None
    cluster_id: Optional[str] = None
    stack: Optional[str] = None

    @property
    def is_fatal(self) -> bool:
        return self.type == MiningErrorType.GIT_ERROR


@dataclass
class MiningSummary:
    """Aggregate counts for one run. Derived data, rebuilt every run."""

    total_decisions: int = 0
    by_status: dict[str, int] = field(default_factory=dict)
    by_category: dict[str, int] = field(default_factory=dict)
    by_confidence: dict[str, int] = field(default_factory=dict)
    by_language: dict[str, int] = field(default_factory=dict)
    date_range: Optional[tuple[datetime, datetime]] = None
    total_commits_analyzed: int = 0
    significant_commits: int = 0
    avg_cluster_size: float = 0.0
    top_patterns: list[tuple[str, int]] = field(default_factory=list)
    top_dependencies: list[tuple[str, int]] = field(default_factory=list)
    mining_duration: float = 0.0  # seconds
    last_mined: datetime = field(default_factory=datetime.now)


@dataclass
class MiningResult:
    """Everything one run produced.

    Partial failure is reported through ``errors``; always check it even
    when ``decisions`` is non-empty.
    """

    decisions: list[Decision] = field(default_factory=list)
    summary: MiningSummary = field(default_factory=MiningSummary)
    rejected_clusters: list[CommitCluster] = field(default_factory=list)
    errors: list[MiningError] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def failed(self) -> bool:
        """True when a fatal error stopped the run."""
        return any(e.is_fatal for e in self.errors)
