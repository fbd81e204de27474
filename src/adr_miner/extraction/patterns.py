"""Pattern-tracking store interface."""

from typing import Protocol, Sequence

from ..history.models import Commit
from .models import PatternDelta


class PatternStore(Protocol):
    """Reports which tracked code patterns a commit touched."""

    def changes_for(self, commit: Commit, files: Sequence[str]) -> list[PatternDelta]: ...


class NullPatternStore:
    """Store used when pattern tracking is disabled. Always empty."""

    def changes_for(self, commit: Commit, files: Sequence[str]) -> list[PatternDelta]:
        return []
