"""
Logging setup shared by the library and the scripts.

Library modules only call get_logger(__name__); handlers are configured
once by the entry point through setup_logging().
"""

from __future__ import annotations

import logging
import sys
import time
from contextlib import contextmanager
from typing import Iterator, Optional

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(
    level: str = "INFO",
    format_string: Optional[str] = None,
) -> None:
    """Configure root logging to stdout.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR).
        format_string: Custom format string (uses DEFAULT_FORMAT if None).
    """
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format=format_string or DEFAULT_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )


def get_logger(name: str) -> logging.Logger:
    """Get logger for a module (typically called with __name__)."""
    return logging.getLogger(name)


@contextmanager
def timed(logger: logging.Logger, label: str) -> Iterator[dict]:
    """Log wall-clock time spent inside the block at DEBUG level.

    Yields a dict whose "elapsed" key holds the duration in seconds once
    the block exits, so callers can record it as well.
    """
    record = {"elapsed": 0.0}
    start = time.perf_counter()
    try:
        yield record
    finally:
        record["elapsed"] = time.perf_counter() - start
        logger.debug("%s finished in %.3f s", label, record["elapsed"])
