"""Mining orchestration: pipeline, result types and summary."""

from .miner import NO_COMMITS_WARNING, DecisionMiner, HistoryProvider
from .models import MiningError, MiningErrorType, MiningResult, MiningSummary
from .summary import build_summary, empty_summary

__all__ = [
    "DecisionMiner",
    "HistoryProvider",
    "MiningError",
    "MiningErrorType",
    "MiningResult",
    "MiningSummary",
    "NO_COMMITS_WARNING",
    "build_summary",
    "empty_summary",
]
