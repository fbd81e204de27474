"""Read commit history via the git CLI."""

import fnmatch
import re
import subprocess
from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional, Sequence

from ..exceptions import HistoryError
from ..logging_config import get_logger
from .languages import detect_language, is_config_path, is_test_path
from .models import Commit, FileChange, FileStatus, HistoryWalk

logger = get_logger(__name__)

# Record separator opens each commit, unit separator splits fields,
# group separator closes the free-text body so numstat lines follow it.
_RS, _US, _GS = "\x1e", "\x1f", "\x1d"
_FORMAT = "--format=%x1e%H%x1f%h%x1f%an%x1f%ae%x1f%aI%x1f%P%x1f%s%x1f%b%x1d"

_NUMSTAT_RE = re.compile(r"^(\d+|-)\t(\d+|-)\t(.+)$")
_CREATE_RE = re.compile(r"^ create mode \d+ (.+)$")
_DELETE_RE = re.compile(r"^ delete mode \d+ (.+)$")
_RENAME_RE = re.compile(r"^ (?:rename|copy) (.+) \(\d+%\)$")
_BRACE_RE = re.compile(r"^(.*)\{(.*) => (.*)\}(.*)$")


def _split_rename(spec: str) -> tuple[Optional[str], str]:
    """Expand git's rename notation into (old_path, new_path).

    Handles both ``old => new`` and ``dir/{old => new}/rest``.
    """
    match = _BRACE_RE.match(spec)
    if match:
        prefix, old, new, suffix = match.groups()
        old_path = f"{prefix}{old}{suffix}".replace("//", "/")
        new_path = f"{prefix}{new}{suffix}".replace("//", "/")
        return old_path, new_path
    if " => " in spec:
        old_path, new_path = spec.split(" => ", 1)
        return old_path, new_path
    return None, spec


def matches_any(path: str, patterns: Iterable[str]) -> bool:
    return any(fnmatch.fnmatch(path, pattern) for pattern in patterns)


class GitWalker:
    """Walk git log into Commit records."""

    def __init__(self, timeout_seconds: int = 60):
        self.timeout_seconds = timeout_seconds

    def walk(
        self,
        root_dir: str,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
        max_commits: Optional[int] = None,
        include_merges: bool = False,
        exclude_paths: Sequence[str] = (),
    ) -> HistoryWalk:
        """Read commits from ``root_dir``, newest first.

        Raises:
            HistoryError: git is missing, the path is not a repository,
                or ``git log`` fails or times out
        """
        repo = str(Path(root_dir).resolve())
        if not self._is_git_repo(repo):
            raise HistoryError(repo, "not a git repository")

        args = ["log", _FORMAT, "--numstat", "--summary", "-M"]
        if not include_merges:
            args.append("--no-merges")
        if since is not None:
            args.append(f"--since={since.isoformat()}")
        if until is not None:
            args.append(f"--until={until.isoformat()}")
        if max_commits:
            # One extra commit tells us whether the history goes further
            args.append(f"-n{max_commits + 1}")

        try:
            raw = self._git(repo, args)
        except HistoryError as e:
            # A freshly initialised repository has no HEAD yet
            if e.stderr and "does not have any commits" in e.stderr:
                logger.info("Repository has no commits yet")
                return HistoryWalk(commits=[], date_range=None)
            raise

        parsed = self._parse_log(raw)
        has_more = bool(max_commits) and len(parsed) > max_commits
        if has_more:
            parsed = parsed[:max_commits]

        commits = parsed
        if exclude_paths:
            commits = [
                c for c in parsed
                if not c.files or not all(matches_any(f.path, exclude_paths) for f in c.files)
            ]

        date_range = None
        if commits:
            dates = [c.date for c in commits]
            date_range = (min(dates), max(dates))

        logger.debug(
            "Read %d commits from %s (%d excluded)", len(commits), repo, len(parsed) - len(commits)
        )
        return HistoryWalk(
            commits=commits,
            date_range=date_range,
            total_commits=len(commits),
            has_more=has_more,
            excluded=len(parsed) - len(commits),
        )

    def file_at(self, root_dir: str, rev: str, path: str) -> Optional[str]:
        """Return the content of ``path`` at ``rev``, or None when absent."""
        try:
            return self._git(str(Path(root_dir).resolve()), ["show", f"{rev}:{path}"])
        except HistoryError:
            return None

    def _is_git_repo(self, repo: str) -> bool:
        try:
            result = subprocess.run(
                ["git", "-C", repo, "rev-parse", "--git-dir"],
                capture_output=True,
                text=True,
                timeout=5,
            )
        except FileNotFoundError:
            raise HistoryError(repo, "git executable not found")
        except subprocess.TimeoutExpired:
            return False
        return result.returncode == 0

    def _git(self, repo: str, args: list[str]) -> str:
        cmd = ["git", "-C", repo, *args]
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=self.timeout_seconds,
            )
        except FileNotFoundError:
            raise HistoryError(repo, "git executable not found")
        except subprocess.TimeoutExpired:
            raise HistoryError(repo, f"git {args[0]} timed out after {self.timeout_seconds}s")

        if result.returncode != 0:
            raise HistoryError(
                repo, f"git {args[0]} exited with {result.returncode}", stderr=result.stderr.strip()
            )
        return result.stdout

    def _parse_log(self, raw: str) -> list[Commit]:
        commits = []
        for record in raw.split(_RS):
            if not record.strip():
                continue
            commit = self._parse_record(record)
            if commit is not None:
                commits.append(commit)
        return commits

    def _parse_record(self, record: str) -> Optional[Commit]:
        header, _, stats = record.partition(_GS)
        parts = header.split(_US, 7)
        if len(parts) < 8:
            logger.debug("Skipping malformed log record: %r", header[:80])
            return None

        full_hash, short_hash, author_name, author_email, date_str, parents_str, subject, body = parts
        try:
            date = datetime.fromisoformat(date_str.strip())
        except ValueError:
            logger.debug("Skipping commit %s with unparseable date %r", short_hash, date_str)
            return None

        parents = tuple(parents_str.split())
        return Commit(
            hash=full_hash.strip(),
            short_hash=short_hash.strip(),
            author_name=author_name,
            author_email=author_email,
            date=date,
            subject=subject.strip(),
            body=body.strip(),
            files=tuple(self._parse_files(stats)),
            parents=parents,
            is_merge=len(parents) > 1,
        )

    def _parse_files(self, stats: str) -> list[FileChange]:
        """Combine --numstat counts with --summary create/delete/rename lines."""
        counts: dict[str, tuple[int, int]] = {}
        previous: dict[str, str] = {}
        order: list[str] = []
        statuses: dict[str, FileStatus] = {}

        for line in stats.split("\n"):
            if not line.strip():
                continue

            numstat = _NUMSTAT_RE.match(line)
            if numstat:
                added, deleted, spec = numstat.groups()
                old_path, path = _split_rename(spec)
                # Binary files report "-"
                counts[path] = (
                    0 if added == "-" else int(added),
                    0 if deleted == "-" else int(deleted),
                )
                if old_path is not None:
                    previous[path] = old_path
                    statuses[path] = FileStatus.RENAMED
                if path not in order:
                    order.append(path)
                continue

            created = _CREATE_RE.match(line)
            if created:
                statuses[created.group(1)] = FileStatus.ADDED
                continue

            deleted_match = _DELETE_RE.match(line)
            if deleted_match:
                statuses[deleted_match.group(1)] = FileStatus.DELETED
                continue

            renamed = _RENAME_RE.match(line)
            if renamed:
                old_path, path = _split_rename(renamed.group(1))
                statuses[path] = FileStatus.RENAMED
                if old_path is not None:
                    previous[path] = old_path

        files = []
        for path in order:
            additions, deletions = counts[path]
            files.append(
                FileChange(
                    path=path,
                    status=statuses.get(path, FileStatus.MODIFIED),
                    additions=additions,
                    deletions=deletions,
                    language=detect_language(path),
                    is_test=is_test_path(path),
                    is_config=is_config_path(path),
                    previous_path=previous.get(path),
                )
            )
        return files
