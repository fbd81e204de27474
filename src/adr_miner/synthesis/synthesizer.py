"""Turn a commit cluster into a decision record."""

from datetime import datetime
from typing import Optional, Sequence

from ..categories import DecisionCategory
from ..clustering.models import CommitCluster
from ..config import DEFAULT_THRESHOLDS, ThresholdConfig
from ..exceptions import SynthesisError
from ..extraction.models import CommitExtraction
from ..history.dependencies import DependencyChangeType
from ..history.message_parser import SignalKind
from ..logging_config import get_logger
from .models import (
    ADR,
    ConfidenceLevel,
    Decision,
    DecisionStatus,
    Evidence,
    EvidenceType,
    Reference,
)
from .tables import CATEGORY_STATEMENT, CATEGORY_VERB, SIGNAL_CATEGORY

logger = get_logger(__name__)

_MAX_TITLE_KEYWORDS = 3
_MAX_SUBJECT_TITLE = 60
_MAX_EVIDENCE_PER_KIND = 3
_DEPENDENCY_VOTE = 0.5


def infer_category(
    cluster: CommitCluster, extractions: Sequence[CommitExtraction]
) -> DecisionCategory:
    """Vote for a category from message hints, architectural signals and dependencies.

    Equal scores resolve to the category declared first in DecisionCategory.
    """
    scores: dict[DecisionCategory, float] = {}

    def vote(category: DecisionCategory, weight: float) -> None:
        scores[category] = scores.get(category, 0.0) + weight

    for e in extractions:
        for signal in e.message_signals:
            if signal.category_hint is not None:
                vote(signal.category_hint, signal.confidence)
        for arch in e.architectural_signals:
            vote(SIGNAL_CATEGORY[arch.type], arch.confidence)

    change_types = {d.change_type for d in cluster.dependency_changes}
    has_added = DependencyChangeType.ADDED in change_types
    has_removed = DependencyChangeType.REMOVED in change_types
    if has_added and not has_removed:
        vote(DecisionCategory.TECHNOLOGY_ADOPTION, _DEPENDENCY_VOTE)
    elif has_removed and not has_added:
        vote(DecisionCategory.TECHNOLOGY_REMOVAL, _DEPENDENCY_VOTE)

    best = DecisionCategory.OTHER
    best_score = 0.0
    for category in DecisionCategory:
        score = scores.get(category, 0.0)
        if score > best_score:
            best, best_score = category, score
    return best


def score_confidence(cluster: CommitCluster, extractions: Sequence[CommitExtraction]) -> float:
    score = min(0.2, 0.05 * cluster.size)
    if extractions:
        score += 0.3 * (sum(e.significance for e in extractions) / len(extractions))
    if any(e.architectural_signals for e in extractions):
        score += 0.2
    if cluster.dependency_changes:
        score += 0.15
    if cluster.patterns_affected:
        score += 0.15
    return min(1.0, score)


def confidence_level(score: float, thresholds: ThresholdConfig = DEFAULT_THRESHOLDS) -> ConfidenceLevel:
    if score >= thresholds.high_confidence:
        return ConfidenceLevel.HIGH
    if score >= thresholds.medium_confidence:
        return ConfidenceLevel.MEDIUM
    return ConfidenceLevel.LOW


class DecisionSynthesizer:
    """Build a Decision (category, title, ADR text, evidence) from one cluster."""

    def __init__(self, min_confidence: float = 0.5, thresholds: ThresholdConfig = DEFAULT_THRESHOLDS):
        self.min_confidence = min_confidence
        self.thresholds = thresholds

    def synthesize(
        self, cluster: CommitCluster, extractions: Sequence[CommitExtraction]
    ) -> Optional[Decision]:
        """Synthesize a decision, or None when confidence is below ``min_confidence``.

        Args:
            cluster: Accepted cluster
            extractions: Extractions to draw from; only the cluster's members are used

        Raises:
            SynthesisError: If the cluster is empty or none of its commits were extracted
        """
        if not cluster.commits:
            raise SynthesisError(cluster.id, "cluster has no commits")

        by_hash = {e.commit.hash: e for e in extractions if e.commit.hash in cluster.commit_hashes}
        members = [by_hash[c.hash] for c in cluster.commits if c.hash in by_hash]
        if not members:
            raise SynthesisError(cluster.id, "no extractions for cluster commits")

        score = score_confidence(cluster, members)
        if score < self.min_confidence:
            logger.debug(
                "Dropping %s: confidence %.2f below %.2f", cluster.id, score, self.min_confidence
            )
            return None

        category = infer_category(cluster, members)
        now = datetime.now()
        return Decision(
            id=f"DEC-{cluster.earliest.short_hash.upper()}",
            title=self._title(cluster, members, category),
            category=category,
            confidence=confidence_level(score, self.thresholds),
            confidence_score=round(score, 4),
            cluster=cluster,
            adr=ADR(
                context=self._context(cluster, category),
                decision=self._statement(cluster, category),
                consequences=tuple(self._consequences(cluster)),
                references=tuple(self._references(cluster, members)),
                evidence=tuple(self._evidence(cluster)),
            ),
            status=DecisionStatus.DRAFT,
            tags=self._tags(cluster, category),
            mined_at=now,
            last_updated=now,
        )

    def _title(
        self,
        cluster: CommitCluster,
        members: Sequence[CommitExtraction],
        category: DecisionCategory,
    ) -> str:
        keywords: dict[str, None] = {}
        for e in members:
            for signal in e.message_signals:
                if signal.kind == SignalKind.KEYWORD:
                    keywords.setdefault(signal.value, None)

        verb = CATEGORY_VERB[category]
        if keywords:
            return f"{verb} {', '.join(list(keywords)[:_MAX_TITLE_KEYWORDS])}"

        subject = cluster.earliest.subject
        if len(subject) < _MAX_SUBJECT_TITLE:
            return subject
        return f"{verb} ({cluster.size} commits)"

    @staticmethod
    def _context(cluster: CommitCluster, category: DecisionCategory) -> str:
        start, end = cluster.date_range
        parts = [
            f"Between {start.date().isoformat()} and {end.date().isoformat()}, "
            f"{cluster.size} commits were made affecting {len(cluster.files_affected)} files."
        ]

        if category == DecisionCategory.TECHNOLOGY_ADOPTION:
            added = [
                d.name for d in cluster.dependency_changes
                if d.change_type == DependencyChangeType.ADDED
            ]
            if added:
                parts.append(f"New dependencies were introduced: {', '.join(added)}.")
        elif category == DecisionCategory.TECHNOLOGY_REMOVAL:
            removed = [
                d.name for d in cluster.dependency_changes
                if d.change_type == DependencyChangeType.REMOVED
            ]
            if removed:
                parts.append(f"Dependencies were removed: {', '.join(removed)}.")
        elif category == DecisionCategory.ARCHITECTURE_CHANGE:
            languages = ", ".join(lang.value for lang in cluster.languages) or "unclassified"
            parts.append(f"Architectural changes were made across {languages} code.")
        elif category == DecisionCategory.API_CHANGE:
            parts.append("API surface changes were detected in the codebase.")
        else:
            parts.append(
                f"Changes were made primarily in {cluster.primary_language.value} code."
            )

        return " ".join(parts)

    @staticmethod
    def _statement(cluster: CommitCluster, category: DecisionCategory) -> str:
        if cluster.size == 1:
            return cluster.earliest.subject
        template = CATEGORY_STATEMENT.get(category)
        if template is None:
            return cluster.earliest.subject
        return template.format(files=len(cluster.files_affected))

    @staticmethod
    def _consequences(cluster: CommitCluster) -> list[str]:
        consequences = [
            f"{len(cluster.files_affected)} files were modified.",
            f"{cluster.total_lines_changed} lines of code were changed.",
        ]
        if cluster.dependency_changes:
            consequences.append(f"{len(cluster.dependency_changes)} dependency changes were made.")
        if cluster.patterns_affected:
            consequences.append(f"{len(cluster.patterns_affected)} code patterns were affected.")
        return consequences

    @staticmethod
    def _references(
        cluster: CommitCluster, members: Sequence[CommitExtraction]
    ) -> list[Reference]:
        references = [Reference("commit", c.hash, c.subject) for c in cluster.commits]
        seen = set()
        for e in members:
            for signal in e.message_signals:
                if signal.kind != SignalKind.REFERENCE:
                    continue
                ref_type, _, ref_id = signal.value.partition(":")
                if ref_type in ("issue", "pr") and (ref_type, ref_id) not in seen:
                    seen.add((ref_type, ref_id))
                    references.append(Reference(ref_type, ref_id))
        return references

    @staticmethod
    def _evidence(cluster: CommitCluster) -> list[Evidence]:
        evidence = [
            Evidence(EvidenceType.COMMIT_MESSAGE, c.subject, c.hash, 0.7)
            for c in cluster.commits[:_MAX_EVIDENCE_PER_KIND]
        ]
        evidence.extend(
            Evidence(
                EvidenceType.DEPENDENCY_CHANGE,
                f"{d.change_type.value}: {d.name}",
                d.source_file,
                0.8,
            )
            for d in cluster.dependency_changes[:_MAX_EVIDENCE_PER_KIND]
        )
        evidence.extend(
            Evidence(
                EvidenceType.PATTERN_CHANGE,
                f"{p.change_type.value}: {p.pattern_name}",
                p.files_affected[0] if p.files_affected else "unknown",
                0.6,
            )
            for p in cluster.patterns_affected[:_MAX_EVIDENCE_PER_KIND]
        )
        return evidence

    @staticmethod
    def _tags(cluster: CommitCluster, category: DecisionCategory) -> list[str]:
        tags = [category.value]
        tags.extend(lang.value for lang in cluster.languages)
        if len(cluster.authors) == 1:
            tags.append(f"author:{cluster.authors[0]}")
        return tags
