"""Commit history: models, file classification, git walking, message and manifest parsing."""

from .dependencies import DependencyChangeType, DependencyDelta, DependencyDiffAnalyzer
from .git_walker import GitWalker
from .languages import detect_language, is_config_path, is_test_path
from .message_parser import CommitParser, MessageSignal, SignalKind
from .models import Commit, FileChange, FileStatus, HistoryWalk, Language

__all__ = [
    "Commit",
    "FileChange",
    "FileStatus",
    "HistoryWalk",
    "Language",
    "GitWalker",
    "CommitParser",
    "MessageSignal",
    "SignalKind",
    "DependencyDelta",
    "DependencyChangeType",
    "DependencyDiffAnalyzer",
    "detect_language",
    "is_config_path",
    "is_test_path",
]
