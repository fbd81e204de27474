"""Greedy single-pass commit clustering."""

import math
from collections import Counter
from datetime import timedelta
from typing import Sequence

from ..config import DEFAULT_THRESHOLDS, ThresholdConfig
from ..extraction.models import CommitExtraction, PatternDelta
from ..history.dependencies import DependencyDelta
from ..history.models import Language
from ..logging_config import get_logger
from .models import ClusteringResult, ClusterReason, CommitCluster, ReasonKind
from .similarity import similarity

logger = get_logger(__name__)

_SECONDS_PER_DAY = 86400
_SECONDS_PER_HOUR = 3600


def format_duration(span: timedelta) -> str:
    """Human label for a cluster's time span: "3 days", "1 hour", "less than an hour"."""
    seconds = max(0.0, span.total_seconds())
    days = int(seconds // _SECONDS_PER_DAY)
    if days >= 1:
        return f"{days} day{'s' if days > 1 else ''}"
    hours = int(seconds // _SECONDS_PER_HOUR)
    if hours >= 1:
        return f"{hours} hour{'s' if hours > 1 else ''}"
    return "less than an hour"


def build_cluster(members: Sequence[CommitExtraction]) -> CommitCluster:
    """Aggregate member extractions into a CommitCluster.

    ``members`` must be non-empty and in date order; the first member's short
    hash names the cluster.
    """
    if not members:
        raise ValueError("cannot build a cluster from zero commits")

    commits = tuple(m.commit for m in members)
    dates = [c.date for c in commits]
    start, end = min(dates), max(dates)
    span = end - start

    files: dict[str, None] = {}
    for commit in commits:
        for path in commit.file_paths:
            files.setdefault(path, None)

    languages: dict[Language, None] = {}
    for m in members:
        for language in m.languages_affected:
            languages.setdefault(language, None)

    patterns: dict[str, PatternDelta] = {}
    dependencies: dict[str, DependencyDelta] = {}
    for m in members:
        for p in m.patterns_affected:
            patterns.setdefault(p.pattern_id, p)
        for d in m.dependency_changes:
            dependencies.setdefault(d.name, d)

    authors: dict[str, None] = {}
    for commit in commits:
        authors.setdefault(commit.author_name, None)

    total_lines = sum(f.lines_changed for c in commits for f in c.files)

    days_span = math.ceil(span.total_seconds() / _SECONDS_PER_DAY)
    reasons = [
        ClusterReason(
            kind=ReasonKind.TEMPORAL,
            description=f"Commits span {days_span} day{'s' if days_span != 1 else ''}",
            days_span=days_span,
        )
    ]
    if len(files) < 3 * len(commits):
        overlap = len(files) / (3 * len(commits))
        reasons.append(
            ClusterReason(
                kind=ReasonKind.FILE_OVERLAP,
                description=f"{len(files)} files shared across {len(commits)} commits",
                files=tuple(list(files)[:5]),
                overlap_percent=round(overlap, 4),
            )
        )

    return CommitCluster(
        id=f"cluster-{commits[0].short_hash}-{len(commits)}",
        commits=commits,
        commit_hashes=frozenset(c.hash for c in commits),
        reasons=tuple(reasons),
        date_range=(start, end),
        duration=format_duration(span),
        files_affected=tuple(files),
        languages=tuple(languages),
        primary_language=_cluster_language(members),
        total_lines_changed=total_lines,
        authors=tuple(authors),
        patterns_affected=tuple(patterns.values()),
        dependency_changes=tuple(dependencies.values()),
    )


def _cluster_language(members: Sequence[CommitExtraction]) -> Language:
    """Most common member primary language; ties and no source language give MIXED."""
    counts = Counter(
        m.primary_language for m in members if m.primary_language.is_source
    )
    if not counts:
        return Language.MIXED
    ranked = counts.most_common()
    if len(ranked) > 1 and ranked[0][1] == ranked[1][1]:
        return Language.MIXED
    return ranked[0][0]


class CommitClusterer:
    """Group significant commits into clusters.

    For each unvisited seed in date order, scan forward while the candidate is
    within ``temporal_window_days`` of the seed, adding every unvisited
    candidate whose similarity to the seed reaches ``similarity_threshold``.
    Seeds are compared to candidates only, never to other members, so the
    result depends on date order alone.
    """

    def __init__(self, thresholds: ThresholdConfig = DEFAULT_THRESHOLDS, min_cluster_size: int = 2):
        self.thresholds = thresholds
        self.min_cluster_size = min_cluster_size

    def cluster(self, extractions: Sequence[CommitExtraction]) -> ClusteringResult:
        # Sort key includes the hash so equal timestamps stay deterministic
        ordered = sorted(extractions, key=lambda e: (e.commit.date, e.commit.hash))
        window = timedelta(days=self.thresholds.temporal_window_days)
        visited: set[str] = set()
        result = ClusteringResult()

        for i, seed in enumerate(ordered):
            if seed.commit.hash in visited:
                continue
            visited.add(seed.commit.hash)
            members = [seed]

            for candidate in ordered[i + 1 :]:
                if candidate.commit.hash in visited:
                    continue
                if candidate.commit.date - seed.commit.date > window:
                    break
                if similarity(seed, candidate, self.thresholds) >= self.thresholds.similarity_threshold:
                    members.append(candidate)
                    visited.add(candidate.commit.hash)

            cluster = build_cluster(members)
            if len(members) >= self.min_cluster_size:
                result.clusters.append(cluster)
            else:
                result.rejected.append(cluster)

        logger.debug(
            "Clustered %d commits into %d clusters (%d rejected)",
            len(ordered),
            len(result.clusters),
            len(result.rejected),
        )
        return result
