"""Commit clustering: similarity metric and greedy clusterer."""

from .clusterer import CommitClusterer, build_cluster, format_duration
from .models import ClusteringResult, ClusterReason, CommitCluster, ReasonKind
from .similarity import overlap_ratio, similarity

__all__ = [
    "ClusterReason",
    "ClusteringResult",
    "CommitCluster",
    "CommitClusterer",
    "ReasonKind",
    "build_cluster",
    "format_duration",
    "overlap_ratio",
    "similarity",
]
