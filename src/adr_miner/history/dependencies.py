"""Dependency manifest diffing.

Two modes:
  - With a content provider, npm/pip/composer manifests are read at the
    parent and at the commit and compared entry by entry.
  - Without one (or when a manifest can't be read), each changed manifest
    yields a single placeholder delta such as ``[package.json modified]``.
"""

import json
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import PurePosixPath
from typing import Callable, Optional

from ..logging_config import get_logger
from .languages import manifest_type
from .models import Commit, FileChange, FileStatus

logger = get_logger(__name__)

# (rev, path) -> content or None
ContentProvider = Callable[[str, str], Optional[str]]


class DependencyChangeType(Enum):
    ADDED = "added"
    REMOVED = "removed"
    UPGRADED = "upgraded"
    DOWNGRADED = "downgraded"


@dataclass(frozen=True)
class DependencyDelta:
    name: str
    change_type: DependencyChangeType
    source_file: str
    is_dev: bool = False
    version_before: Optional[str] = None
    version_after: Optional[str] = None


# name -> (version, is_dev)
Manifest = dict[str, tuple[str, bool]]

_REQUIREMENT_RE = re.compile(r"^([A-Za-z0-9_.-]+)(?:\[.*\])?\s*(?:([<>=!~]+)\s*([^;\s]+))?")
_DIFFABLE = ("package.json", "composer.json")


def parse_package_json(content: str) -> Manifest:
    data = _load_json(content)
    deps: Manifest = {}
    for name, version in (data.get("dependencies") or {}).items():
        deps[name] = (str(version), False)
    for name, version in (data.get("devDependencies") or {}).items():
        deps.setdefault(name, (str(version), True))
    return deps


def parse_composer_json(content: str) -> Manifest:
    data = _load_json(content)
    deps: Manifest = {}
    for name, version in (data.get("require") or {}).items():
        if name != "php":
            deps[name] = (str(version), False)
    for name, version in (data.get("require-dev") or {}).items():
        deps.setdefault(name, (str(version), True))
    return deps


def parse_requirements(content: str, is_dev: bool = False) -> Manifest:
    deps: Manifest = {}
    for line in content.splitlines():
        line = line.split("#", 1)[0].strip()
        # Skip blanks and options such as -r / -e / --index-url
        if not line or line.startswith("-"):
            continue
        match = _REQUIREMENT_RE.match(line)
        if match:
            deps[match.group(1).lower()] = (match.group(3) or "*", is_dev)
    return deps


def _load_json(content: str) -> dict:
    try:
        data = json.loads(content)
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


def _is_diffable(path: str) -> bool:
    name = PurePosixPath(path).name
    return name in _DIFFABLE or (name.startswith("requirements") and name.endswith(".txt"))


def _version_key(version: str):
    numbers = re.findall(r"\d+", version)
    return tuple(int(n) for n in numbers) if numbers else (version,)


def compare_manifests(before: Manifest, after: Manifest, source_file: str) -> list[DependencyDelta]:
    """Diff two parsed manifests. Version ordering is numeric-component based, not semver."""
    deltas = []
    for name, (version, is_dev) in after.items():
        if name not in before:
            deltas.append(
                DependencyDelta(
                    name, DependencyChangeType.ADDED, source_file, is_dev, version_after=version
                )
            )
            continue
        old_version = before[name][0]
        if old_version == version:
            continue
        try:
            upgraded = _version_key(version) > _version_key(old_version)
        except TypeError:
            upgraded = version > old_version
        deltas.append(
            DependencyDelta(
                name,
                DependencyChangeType.UPGRADED if upgraded else DependencyChangeType.DOWNGRADED,
                source_file,
                is_dev,
                version_before=old_version,
                version_after=version,
            )
        )
    for name, (version, is_dev) in before.items():
        if name not in after:
            deltas.append(
                DependencyDelta(
                    name, DependencyChangeType.REMOVED, source_file, is_dev, version_before=version
                )
            )
    return deltas


class DependencyDiffAnalyzer:
    """Derive dependency changes from a commit's manifest files."""

    def __init__(self, content_provider: Optional[ContentProvider] = None):
        self.content_provider = content_provider

    def analyze_changes(self, commit: Commit) -> list[DependencyDelta]:
        deltas: list[DependencyDelta] = []
        for file in commit.files:
            ecosystem = manifest_type(file.path)
            if ecosystem is None:
                continue

            detailed = None
            if self.content_provider is not None and _is_diffable(file.path):
                detailed = self._diff_manifest(commit, file, ecosystem, self.content_provider)

            if detailed is not None:
                deltas.extend(detailed)
            else:
                placeholder = self._placeholder(file)
                if placeholder is not None:
                    deltas.append(placeholder)
        return deltas

    def _diff_manifest(
        self, commit: Commit, file: FileChange, ecosystem: str, provider: ContentProvider
    ) -> Optional[list[DependencyDelta]]:
        before_path = file.previous_path or file.path
        before = None
        if commit.parents and file.status != FileStatus.ADDED:
            before = provider(commit.parents[0], before_path)
        after = None
        if file.status != FileStatus.DELETED:
            after = provider(commit.hash, file.path)

        if before is None and after is None:
            logger.debug("No manifest content for %s at %s", file.path, commit.short_hash)
            return None

        parse = self._parser_for(ecosystem, file.path)
        return compare_manifests(parse(before or ""), parse(after or ""), file.path)

    @staticmethod
    def _parser_for(ecosystem: str, path: str) -> Callable[[str], Manifest]:
        if ecosystem == "npm":
            return parse_package_json
        if ecosystem == "composer":
            return parse_composer_json
        is_dev = "dev" in PurePosixPath(path).name
        return lambda content: parse_requirements(content, is_dev)

    @staticmethod
    def _placeholder(file: FileChange) -> Optional[DependencyDelta]:
        name = PurePosixPath(file.path).name
        if name == "package.json":
            # Modified package.json only; the change direction is unknown
            if file.status == FileStatus.MODIFIED and file.lines_changed > 0:
                return DependencyDelta(
                    "[package.json modified]", DependencyChangeType.ADDED, file.path
                )
            return None

        if file.status not in (FileStatus.ADDED, FileStatus.MODIFIED):
            return None
        if name.startswith("requirements") and name.endswith(".txt"):
            label, is_dev = "requirements.txt", "dev" in name
        elif name.endswith(".csproj"):
            label, is_dev = ".csproj", False
        elif name.startswith("build.gradle"):
            label, is_dev = "build.gradle", False
        elif name in ("composer.json", "pom.xml"):
            label, is_dev = name, False
        else:
            return None
        change_type = (
            DependencyChangeType.ADDED
            if file.status == FileStatus.ADDED
            else DependencyChangeType.UPGRADED
        )
        return DependencyDelta(f"[{label} modified]", change_type, file.path, is_dev)
