"""
adr-miner - Architectural decisions recovered from git history

Walks a repository's commits, extracts architectural signals per commit,
clusters related commits and synthesizes each cluster into a draft
Architecture Decision Record that a human can confirm or reject.
"""

__version__ = "0.1.0"

from .api import mine
from .categories import DecisionCategory
from .config import MiningConfig, ThresholdConfig, load_config
from .mining import DecisionMiner, MiningError, MiningResult, MiningSummary
from .storage import DecisionStore
from .synthesis import Decision, DecisionStatus

__all__ = [
    "mine",  # Main entry point
    "DecisionMiner",  # Direct pipeline access with custom collaborators
    "MiningConfig",
    "ThresholdConfig",
    "load_config",
    "MiningResult",
    "MiningSummary",
    "MiningError",
    "Decision",
    "DecisionCategory",
    "DecisionStatus",
    "DecisionStore",
]
