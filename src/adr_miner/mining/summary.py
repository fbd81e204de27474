"""Summary aggregation over mined decisions."""

from collections import Counter
from datetime import datetime
from typing import Optional, Sequence

from ..categories import DecisionCategory
from ..history.models import SOURCE_LANGUAGES, Language
from ..synthesis.models import ConfidenceLevel, Decision, DecisionStatus
from .models import MiningSummary

_TOP_N = 10

# Declaration order, so summaries list languages consistently
_SUMMARY_LANGUAGES = [lang for lang in Language if lang in SOURCE_LANGUAGES] + [Language.MIXED]


def _zeroed(members) -> dict[str, int]:
    return {m.value: 0 for m in members}


def empty_summary() -> MiningSummary:
    return MiningSummary(
        by_status=_zeroed(DecisionStatus),
        by_category=_zeroed(DecisionCategory),
        by_confidence=_zeroed(ConfidenceLevel),
        by_language=_zeroed(_SUMMARY_LANGUAGES),
    )


def _top(counter: Counter) -> list[tuple[str, int]]:
    # sorted() is stable: equal counts keep first-seen order
    return sorted(counter.items(), key=lambda item: -item[1])[:_TOP_N]


def build_summary(
    decisions: Sequence[Decision],
    total_commits: int,
    significant_commits: int,
    date_range: Optional[tuple[datetime, datetime]],
    duration_seconds: float,
) -> MiningSummary:
    summary = empty_summary()
    summary.total_decisions = len(decisions)
    summary.date_range = date_range
    summary.total_commits_analyzed = total_commits
    summary.significant_commits = significant_commits
    summary.mining_duration = duration_seconds

    patterns: Counter = Counter()
    dependencies: Counter = Counter()
    for d in decisions:
        summary.by_status[d.status.value] += 1
        summary.by_category[d.category.value] += 1
        summary.by_confidence[d.confidence.value] += 1
        language = d.cluster.primary_language.value
        summary.by_language[language] = summary.by_language.get(language, 0) + 1
        for p in d.patterns_changed:
            patterns[p.pattern_name] += 1
        for dep in d.dependencies_changed:
            dependencies[dep.name] += 1

    summary.top_patterns = _top(patterns)
    summary.top_dependencies = _top(dependencies)
    if decisions:
        summary.avg_cluster_size = sum(d.cluster.size for d in decisions) / len(decisions)
    return summary
