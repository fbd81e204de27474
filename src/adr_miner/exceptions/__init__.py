"""Exception hierarchy for adr-miner."""

from .base import AdrMinerError
from .config import ConfigurationError, InvalidConfigError, InvalidPathError
from .mining import ExtractionError, HistoryError, MiningPipelineError, SynthesisError
from .storage import DecisionNotFoundError, InvalidStatusTransitionError, StorageError

__all__ = [
    "AdrMinerError",
    "ConfigurationError",
    "InvalidConfigError",
    "InvalidPathError",
    "MiningPipelineError",
    "HistoryError",
    "ExtractionError",
    "SynthesisError",
    "StorageError",
    "DecisionNotFoundError",
    "InvalidStatusTransitionError",
]
