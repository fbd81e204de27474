"""Configuration loading and management for adr-miner.

Configuration sources are merged in priority order:
    1. Defaults (defined in MiningConfig)
    2. Global config (~/.adr-miner.toml)
    3. Project config (./adr-miner.toml)
    4. Explicit config file
    5. Environment variables (ADR_MINER_* prefix)
    6. Keyword overrides (typically CLI flags)

Example:
    >>> config = load_config(min_confidence=0.6)
    >>> config.min_confidence
    0.6
    >>> config.thresholds.temporal_window_days
    14
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import ConfigurationError, InvalidConfigError
from .logging_config import verbosity_from_flags

Verbosity = Literal["quiet", "normal", "verbose"]

_ENV_PREFIX = "ADR_MINER_"
_CONFIG_FILE_NAME = "adr-miner.toml"


@dataclass(frozen=True)
class ThresholdConfig:
    """Clustering and scoring constants.

    The defaults are heuristics tuned on mid-sized application repositories.
    Repositories with very bursty or very slow commit cadence may want a
    different temporal window.

    Attributes:
        Clustering:
            temporal_window_days: Candidates further than this from the seed end the scan
            similarity_threshold: Minimum seed/candidate similarity to join a cluster
            file_overlap_weight: Weight of shared-file overlap (always applied)
            pattern_overlap_weight: Weight of shared-pattern overlap (when both have patterns)
            keyword_overlap_weight: Weight of shared message keywords (when both have keywords)
            author_weight: Weight of the same-author bonus (always applied)

        Language detection:
            mixed_language_ratio: Share of files the dominant language needs when
                several languages are present, otherwise the commit is "mixed"

        Confidence levels:
            high_confidence: Scores at or above this are "high"
            medium_confidence: Scores at or above this are "medium"
    """

    temporal_window_days: int = 14
    similarity_threshold: float = 0.30

    # Similarity weights (sum = 1.0)
    file_overlap_weight: float = 0.4
    pattern_overlap_weight: float = 0.3
    keyword_overlap_weight: float = 0.2
    author_weight: float = 0.1

    mixed_language_ratio: float = 0.7

    high_confidence: float = 0.7
    medium_confidence: float = 0.4

    def __post_init__(self) -> None:
        """Validate threshold configuration."""
        if self.temporal_window_days < 0:
            raise InvalidConfigError(
                "temporal_window_days", self.temporal_window_days, "must be non-negative"
            )

        unit_fields = [
            "similarity_threshold",
            "file_overlap_weight",
            "pattern_overlap_weight",
            "keyword_overlap_weight",
            "author_weight",
            "mixed_language_ratio",
            "high_confidence",
            "medium_confidence",
        ]
        for field_name in unit_fields:
            value = getattr(self, field_name)
            if not 0.0 <= value <= 1.0:
                raise InvalidConfigError(field_name, value, "must be between 0.0 and 1.0")

        weight_sum = (
            self.file_overlap_weight
            + self.pattern_overlap_weight
            + self.keyword_overlap_weight
            + self.author_weight
        )
        if not 0.99 <= weight_sum <= 1.01:
            raise InvalidConfigError(
                "similarity weights", f"{weight_sum:.3f}", "must sum to 1.0"
            )

        if self.file_overlap_weight + self.author_weight <= 0:
            raise InvalidConfigError(
                "file_overlap_weight", self.file_overlap_weight,
                "file overlap and author weights cannot both be zero",
            )

        if self.medium_confidence > self.high_confidence:
            raise InvalidConfigError(
                "medium_confidence", self.medium_confidence, "must not exceed high_confidence"
            )


DEFAULT_THRESHOLDS = ThresholdConfig()


@dataclass(frozen=True)
class MiningConfig:
    """Configuration for a mining run.

    Attributes:
        History:
            max_commits: Maximum commits to read from history (0 = unlimited)
            include_merge_commits: Include merge commits in the walk
            exclude_paths: Glob patterns; commits touching only matching files are dropped
            git_timeout_seconds: Timeout for each git subprocess

        Pipeline:
            min_cluster_size: Minimum commits for a cluster to become a decision
            min_confidence: Significance filter and decision confidence floor (0-1)
            workers: Parallel workers for extraction/synthesis (None = auto-detect)
            use_pattern_data: Consult the pattern store during extraction
            analyze_manifests: Diff dependency manifests against the parent commit

        Output:
            decisions_dir: Directory (relative to the repo root) holding stored decisions
            verbosity: Logging verbosity level
    """

    # History
    max_commits: int = 1000
    include_merge_commits: bool = False
    exclude_paths: list[str] = field(default_factory=list)
    git_timeout_seconds: int = 60

    # Pipeline
    min_cluster_size: int = 2
    min_confidence: float = 0.5
    workers: Optional[int] = None
    use_pattern_data: bool = False
    analyze_manifests: bool = True

    # Output
    decisions_dir: str = ".adr-miner"
    verbosity: Verbosity = "normal"

    thresholds: ThresholdConfig = field(default_factory=ThresholdConfig)

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.max_commits < 0:
            raise InvalidConfigError("max_commits", self.max_commits, "must be non-negative")
        if self.git_timeout_seconds < 1:
            raise InvalidConfigError(
                "git_timeout_seconds", self.git_timeout_seconds, "must be at least 1"
            )
        if self.min_cluster_size < 1:
            raise InvalidConfigError(
                "min_cluster_size", self.min_cluster_size, "must be at least 1"
            )
        if not 0.0 <= self.min_confidence <= 1.0:
            raise InvalidConfigError(
                "min_confidence", self.min_confidence, "must be between 0.0 and 1.0"
            )
        if self.workers is not None and self.workers < 1:
            raise InvalidConfigError("workers", self.workers, "must be at least 1")
        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise InvalidConfigError(
                "verbosity", self.verbosity, "must be quiet, normal or verbose"
            )
        if not self.decisions_dir:
            raise InvalidConfigError("decisions_dir", self.decisions_dir, "must not be empty")

    @property
    def worker_count(self) -> int:
        """Resolved worker count (CPU count capped at 8 when not set)."""
        if self.workers is not None:
            return self.workers
        return min(os.cpu_count() or 4, 8)


def load_config(config_file: Optional[Path] = None, **overrides) -> MiningConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags). ``None`` values
            are ignored so unset CLI options do not mask file settings.

    Returns:
        Validated MiningConfig instance

    Raises:
        ConfigurationError: If a config file is invalid or missing
        InvalidConfigError: If a value fails validation
    """
    merged: dict = {}

    global_config = Path.home() / f".{_CONFIG_FILE_NAME}"
    if global_config.exists():
        _merge_layer(merged, _load_toml_file(global_config))

    project_config = Path.cwd() / _CONFIG_FILE_NAME
    if project_config.exists():
        _merge_layer(merged, _load_toml_file(project_config))

    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")
        _merge_layer(merged, _load_toml_file(config_file))

    _merge_layer(merged, _load_env_vars())

    flagged = verbosity_from_flags(overrides.pop("verbose", False), overrides.pop("quiet", False))
    if flagged is not None:
        overrides["verbosity"] = flagged

    _merge_layer(merged, {k: v for k, v in overrides.items() if v is not None})

    thresholds_value = merged.pop("thresholds", None)
    if thresholds_value is not None:
        if isinstance(thresholds_value, dict):
            try:
                merged["thresholds"] = ThresholdConfig(**thresholds_value)
            except TypeError as e:
                raise ConfigurationError(f"Invalid [thresholds] config: {e}")
        elif isinstance(thresholds_value, ThresholdConfig):
            merged["thresholds"] = thresholds_value
        else:
            raise InvalidConfigError("thresholds", thresholds_value, "must be a table")

    if "exclude_paths" in merged:
        merged["exclude_paths"] = list(merged["exclude_paths"])

    try:
        return MiningConfig(**merged)
    except TypeError as e:
        raise ConfigurationError(f"Invalid configuration: {e}")


def _merge_layer(merged: dict, layer: dict) -> None:
    """Apply one config source on top of ``merged``.

    The ``[thresholds]`` table merges key by key so that a higher-priority
    file setting one threshold keeps the others from lower sources.
    """
    for key, value in layer.items():
        if key == "thresholds" and isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = {**merged[key], **value}
        else:
            merged[key] = value


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from ADR_MINER_* environment variables.

    Scalar fields only (e.g. ADR_MINER_MIN_CONFIDENCE=0.6,
    ADR_MINER_INCLUDE_MERGE_COMMITS=true). List fields and the nested
    thresholds table are file-only.
    """
    type_hints = get_type_hints(MiningConfig)
    result: dict[str, Any] = {}

    for field_name in MiningConfig.__dataclass_fields__:
        env_key = f"{_ENV_PREFIX}{field_name.upper()}"
        env_value = os.environ.get(env_key)
        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
        except ValueError as e:
            raise InvalidConfigError(env_key, env_value, str(e))
        if parsed is not None:
            result[field_name] = parsed

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse an environment variable string to the field's type.

    Returns None for types that cannot be expressed as a single string.
    """
    origin = getattr(type_hint, "__origin__", None)

    # Optional[X] is Union[X, None]
    args = getattr(type_hint, "__args__", ())
    if type(None) in args:
        non_none_types = [t for t in args if t is not type(None)]
        if non_none_types:
            type_hint = non_none_types[0]
            origin = getattr(type_hint, "__origin__", None)

    if origin is list or type_hint is list or type_hint is ThresholdConfig:
        return None

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        if lower in ("false", "0", "no", "off"):
            return False
        raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    """Load a TOML file and return the parsed dict.

    Raises:
        ConfigurationError: If the file cannot be read or parsed
    """
    try:
        import tomllib
    except ModuleNotFoundError:
        import tomli as tomllib  # type: ignore[no-redef]

    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigurationError(f"Invalid config file '{path}': {e}")
