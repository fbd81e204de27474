"""Weighted similarity between two commit extractions.

Four components, each in [0, 1]:

    file overlap      always applied
    pattern overlap   only when both commits touched tracked patterns
    keyword overlap   only when both messages carried keyword signals
    same author       always applied

The result is the weighted mean over the applied components, so commits
without pattern or keyword data are not penalised for the missing data.
"""

from ..config import DEFAULT_THRESHOLDS, ThresholdConfig
from ..extraction.models import CommitExtraction


def overlap_ratio(a: set, b: set) -> float:
    """|a ∩ b| / max(|a|, |b|); two empty sets count as identical."""
    largest = max(len(a), len(b))
    if largest == 0:
        return 1.0
    return len(a & b) / largest


def similarity(
    a: CommitExtraction, b: CommitExtraction, thresholds: ThresholdConfig = DEFAULT_THRESHOLDS
) -> float:
    score = thresholds.file_overlap_weight * overlap_ratio(
        set(a.commit.file_paths), set(b.commit.file_paths)
    )
    weights = thresholds.file_overlap_weight

    a_patterns, b_patterns = a.pattern_ids, b.pattern_ids
    if a_patterns and b_patterns:
        score += thresholds.pattern_overlap_weight * overlap_ratio(a_patterns, b_patterns)
        weights += thresholds.pattern_overlap_weight

    a_keywords, b_keywords = a.keywords, b.keywords
    if a_keywords and b_keywords:
        score += thresholds.keyword_overlap_weight * overlap_ratio(a_keywords, b_keywords)
        weights += thresholds.keyword_overlap_weight

    if a.commit.author_email == b.commit.author_email:
        score += thresholds.author_weight
    weights += thresholds.author_weight

    if weights <= 0:
        return 0.0
    return min(1.0, score / weights)
