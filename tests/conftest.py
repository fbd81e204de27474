"""Shared test fixtures for adr-miner: commit/extraction builders and a scratch git repo."""

import hashlib
import itertools
import os
import shutil
import subprocess
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from adr_miner.extraction.models import (
    ArchitecturalSignal,
    CommitExtraction,
    DeltaChange,
    PatternDelta,
)
from adr_miner.history.languages import detect_language, is_config_path, is_test_path
from adr_miner.history.message_parser import MessageSignal, SignalKind
from adr_miner.history.models import Commit, FileChange, FileStatus, Language

BASE_DATE = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)

_counter = itertools.count(1)


def pytest_addoption(parser):
    """Add --run-slow option for slow tests."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="run slow tests",
    )


def pytest_configure(config):
    """Configure slow marker."""
    config.addinivalue_line("markers", "slow: mark test as slow to run")


def pytest_collection_modifyitems(config, items):
    """Skip slow tests unless --run-slow is given."""
    if config.getoption("--run-slow"):
        return
    skip_slow = pytest.mark.skip(reason="need --run-slow option to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


# ── Builders ─────────────────────────────────────────────────────────


def build_file(path, status=FileStatus.MODIFIED, additions=10, deletions=2, previous_path=None):
    return FileChange(
        path=path,
        status=status,
        additions=additions,
        deletions=deletions,
        language=detect_language(path),
        is_test=is_test_path(path),
        is_config=is_config_path(path),
        previous_path=previous_path,
    )


def build_commit(
    subject="Update code",
    files=(),
    days=0.0,
    author="Alice",
    email="alice@example.com",
    body="",
    sha=None,
):
    """Commit dated ``days`` after BASE_DATE. ``files`` may mix paths and FileChanges."""
    if sha is None:
        sha = hashlib.sha1(f"commit-{next(_counter)}".encode()).hexdigest()
    changes = tuple(f if isinstance(f, FileChange) else build_file(f) for f in files)
    return Commit(
        hash=sha,
        short_hash=sha[:7],
        author_name=author,
        author_email=email,
        date=BASE_DATE + timedelta(days=days),
        subject=subject,
        body=body,
        files=changes,
        parents=("0" * 40,),
    )


def build_extraction(
    commit,
    significance=0.6,
    keywords=(),
    hints=(),
    signals=(),
    patterns=(),
    dependencies=(),
    primary_language=None,
):
    """Extraction with hand-picked evidence.

    ``hints`` are (category, confidence) pairs turned into pattern-kind message signals;
    ``signals`` are (SignalType, confidence) pairs; ``patterns`` are pattern ids.
    """
    message_signals = [MessageSignal(SignalKind.KEYWORD, k, 0.7) for k in keywords]
    message_signals += [
        MessageSignal(SignalKind.PATTERN, f"hint:{c.value}", conf, c) for c, conf in hints
    ]
    architectural = [
        ArchitecturalSignal(t, f"{t.value} signal", tuple(commit.file_paths[:1]), conf)
        for t, conf in signals
    ]
    pattern_deltas = [
        PatternDelta(
            pattern_id=p,
            pattern_name=p.replace("-", " "),
            category="structural",
            change_type=DeltaChange.ADDED,
            locations_after=1,
            files_affected=tuple(commit.file_paths[:1]),
        )
        for p in patterns
    ]
    languages = tuple(dict.fromkeys(f.language for f in commit.files if f.language.is_source))
    return CommitExtraction(
        commit=commit,
        primary_language=primary_language or (languages[0] if languages else Language.OTHER),
        languages_affected=languages,
        patterns_affected=tuple(pattern_deltas),
        dependency_changes=tuple(dependencies),
        message_signals=tuple(message_signals),
        architectural_signals=tuple(architectural),
        significance=significance,
    )


@pytest.fixture
def make_file():
    return build_file


@pytest.fixture
def make_commit():
    return build_commit


@pytest.fixture
def make_extraction():
    return build_extraction


# ── Scratch git repository ───────────────────────────────────────────


class GitRepo:
    """Throwaway repository driven through the git CLI."""

    def __init__(self, path: Path):
        self.path = path

    def git(self, *args, env=None) -> str:
        result = subprocess.run(
            ["git", "-C", str(self.path), *args],
            check=True,
            capture_output=True,
            text=True,
            env=env,
        )
        return result.stdout

    def init(self) -> "GitRepo":
        self.path.mkdir(parents=True, exist_ok=True)
        self.git("init", "-q")
        self.git("config", "user.name", "Alice")
        self.git("config", "user.email", "alice@example.com")
        self.git("config", "commit.gpgsign", "false")
        return self

    def commit(self, message, files, date="2024-03-01T12:00:00+00:00", author=None) -> str:
        """Write ``files`` (path -> content, None deletes) and commit them. Returns the hash."""
        for rel, content in files.items():
            target = self.path / rel
            if content is None:
                self.git("rm", "-q", rel)
                continue
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content)
        self.git("add", "-A")

        env = {**os.environ, "GIT_AUTHOR_DATE": date, "GIT_COMMITTER_DATE": date}
        args = ["commit", "-q", "-m", message]
        if author:
            args += ["--author", author]
        self.git(*args, env=env)
        return self.git("rev-parse", "HEAD").strip()


@pytest.fixture
def git_repo(tmp_path):
    if shutil.which("git") is None:
        pytest.skip("git is not installed")
    return GitRepo(tmp_path / "repo").init()
