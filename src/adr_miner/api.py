"""Public API for adr-miner.

Example:
    >>> from adr_miner import mine
    >>>
    >>> result = mine("/path/to/repo")
    >>> for decision in result.decisions:
    ...     print(decision.id, decision.category.value, decision.title)
    >>>
    >>> # With customization
    >>> result = mine("/path/to/repo", since=datetime(2024, 1, 1), min_confidence=0.6)
"""

from __future__ import annotations

import threading
from datetime import datetime
from pathlib import Path
from typing import Optional

from .config import load_config
from .exceptions import InvalidPathError
from .logging_config import get_logger
from .mining import DecisionMiner, MiningResult

logger = get_logger(__name__)


def mine(
    path: str = ".",
    config_file: Optional[Path] = None,
    since: Optional[datetime] = None,
    until: Optional[datetime] = None,
    cancel_event: Optional[threading.Event] = None,
    **overrides,
) -> MiningResult:
    """Mine architectural decisions from a repository's git history.

    Loads configuration (auto-discovered TOML, environment, then
    ``overrides``), builds the default collaborators and runs the pipeline.

    Args:
        path: Repository root (default: current directory)
        config_file: Optional explicit config file path
        since: Only commits after this time
        until: Only commits before this time
        cancel_event: Optional event; setting it stops the run at the next
            phase boundary
        **overrides: Configuration overrides (e.g. min_confidence=0.6)

    Returns:
        MiningResult. Git failures are reported in ``result.errors``.

    Raises:
        InvalidPathError: If ``path`` is not a directory
        ConfigurationError: If configuration is invalid
    """
    root = Path(path).resolve()
    if not root.is_dir():
        raise InvalidPathError(root, "not a directory")

    config = load_config(config_file=config_file, **overrides)
    logger.debug("Mining %s with %s", root, config)

    return DecisionMiner(config).mine(str(root), since=since, until=until, cancel_event=cancel_event)
