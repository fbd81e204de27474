"""
Logging configuration for adr-miner.

Maps the ``verbosity`` setting onto a RichHandler on stderr, so ``--json``
output on stdout stays parseable, and times the pipeline phases.
"""

import logging
import time
from contextlib import contextmanager
from typing import Iterator, Optional

from rich.console import Console
from rich.logging import RichHandler

_ROOT_LOGGER = "adr_miner"

VERBOSITY_LEVELS = {
    "quiet": logging.ERROR,
    "normal": logging.WARNING,
    "verbose": logging.DEBUG,
}


def verbosity_from_flags(verbose: bool = False, quiet: bool = False) -> Optional[str]:
    """Translate ``--verbose``/``--quiet`` into a verbosity name.

    Returns None when neither flag is set so lower-priority sources
    (config files, environment) keep their say. ``quiet`` wins.
    """
    if quiet:
        return "quiet"
    if verbose:
        return "verbose"
    return None


def setup_logging(verbosity: str = "normal", log_file: Optional[str] = None) -> logging.Logger:
    """
    Configure logging for a run.

    Args:
        verbosity: One of ``quiet`` (errors only), ``normal`` (warnings)
            or ``verbose`` (debug output, tracebacks with locals)
        log_file: Optional file path that receives every record at INFO
            and above, whatever the console verbosity

    Returns:
        Configured logger instance for adr_miner

    Raises:
        ValueError: Unknown verbosity name
    """
    try:
        level = VERBOSITY_LEVELS[verbosity]
    except KeyError:
        raise ValueError(f"Unknown verbosity: {verbosity!r}") from None
    verbose = verbosity == "verbose"

    console_handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        tracebacks_show_locals=verbose,
        markup=False,
        show_time=True,
        show_path=verbose,
    )
    console_handler.setLevel(level)
    handlers: list[logging.Handler] = [console_handler]
    root_level = level

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a")
        file_handler.setLevel(min(level, logging.INFO))
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
            )
        )
        handlers.append(file_handler)
        root_level = min(level, logging.INFO)

    logging.basicConfig(
        level=root_level, format="%(message)s", datefmt="[%X]", handlers=handlers, force=True
    )

    logger = logging.getLogger(_ROOT_LOGGER)
    logger.setLevel(root_level)

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger instance for a specific module.

    Args:
        name: Module name (e.g., 'adr_miner.mining')
              If None, returns the root adr_miner logger

    Returns:
        Logger instance
    """
    if name is None:
        return logging.getLogger(_ROOT_LOGGER)

    if not name.startswith(_ROOT_LOGGER):
        name = f"{_ROOT_LOGGER}.{name}"

    return logging.getLogger(name)


@contextmanager
def log_phase(logger: logging.Logger, phase: str) -> Iterator[None]:
    """Log the start and elapsed time of one pipeline phase.

    Nothing is logged on the way out when the block raises; the caller
    reports the failure.
    """
    logger.debug("Phase %s started", phase)
    started = time.perf_counter()
    yield
    logger.info("Phase %s finished in %.2fs", phase, time.perf_counter() - started)
