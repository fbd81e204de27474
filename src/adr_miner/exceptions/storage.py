"""Decision store exceptions."""

from .base import AdrMinerError


class StorageError(AdrMinerError):
    """Base class for decision store errors."""

    pass


class DecisionNotFoundError(StorageError):
    """Raised when a decision id has no stored record."""

    def __init__(self, decision_id: str):
        super().__init__(f"Decision not found: {decision_id}", details={"id": decision_id})
        self.decision_id = decision_id


class InvalidStatusTransitionError(StorageError):
    """Raised when a status change is not allowed from the current status."""

    def __init__(self, decision_id: str, current: str, requested: str):
        super().__init__(
            f"Cannot move {decision_id} from {current} to {requested}",
            details={"id": decision_id, "current": current, "requested": requested},
        )
        self.decision_id = decision_id
        self.current = current
        self.requested = requested
