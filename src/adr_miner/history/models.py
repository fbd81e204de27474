"""Data models for commit history."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class Language(Enum):
    """Language tag attached to files, extractions and clusters."""

    TYPESCRIPT = "typescript"
    JAVASCRIPT = "javascript"
    PYTHON = "python"
    JAVA = "java"
    CSHARP = "csharp"
    PHP = "php"
    OTHER = "other"
    CONFIG = "config"
    DOCS = "docs"
    MIXED = "mixed"

    @property
    def is_source(self) -> bool:
        return self in SOURCE_LANGUAGES


SOURCE_LANGUAGES = frozenset(
    {
        Language.TYPESCRIPT,
        Language.JAVASCRIPT,
        Language.PYTHON,
        Language.JAVA,
        Language.CSHARP,
        Language.PHP,
    }
)


class FileStatus(Enum):
    ADDED = "added"
    MODIFIED = "modified"
    DELETED = "deleted"
    RENAMED = "renamed"


@dataclass(frozen=True)
class FileChange:
    path: str
    status: FileStatus
    additions: int
    deletions: int
    language: Language
    is_test: bool = False
    is_config: bool = False
    previous_path: Optional[str] = None

    @property
    def lines_changed(self) -> int:
        return self.additions + self.deletions


@dataclass(frozen=True)
class Commit:
    """One commit as read from history. Never mutated by the pipeline."""

    hash: str
    short_hash: str
    author_name: str
    author_email: str
    date: datetime  # timezone-aware author date
    subject: str
    body: str = ""
    files: tuple[FileChange, ...] = ()
    parents: tuple[str, ...] = ()
    is_merge: bool = False

    @property
    def file_paths(self) -> list[str]:
        return [f.path for f in self.files]


@dataclass
class HistoryWalk:
    commits: list[Commit]  # newest first, as git returns them
    date_range: Optional[tuple[datetime, datetime]]  # (earliest, latest)
    total_commits: int = 0
    has_more: bool = False  # max_commits cut the walk short
    excluded: int = 0  # commits dropped because every file matched an exclude glob

    @property
    def is_empty(self) -> bool:
        return not self.commits
