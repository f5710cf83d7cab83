"""
Logging configuration for splitdiff.

The viewer owns the whole terminal while it runs, so log records must never
reach stdout/stderr. By default a NullHandler swallows them; pass a file path
to keep a log for debugging.
"""

from __future__ import annotations

import logging
from pathlib import Path

LOGGER_NAME = "splitdiff"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(
    level: int | str = logging.WARNING, log_file: str | Path | None = None
) -> logging.Logger:
    """Attach a single handler to the package logger.

    Args:
        level: Log level (int or level name such as "DEBUG").
        log_file: Optional file to write records to.

    Returns:
        The configured package logger.
    """
    logger = logging.getLogger(LOGGER_NAME)
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING
    logger.setLevel(level)

    for existing in list(logger.handlers):
        logger.removeHandler(existing)
        existing.close()

    handler: logging.Handler
    if log_file is not None:
        handler = logging.FileHandler(log_file, encoding="utf-8")
    else:
        handler = logging.NullHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)

    # Records must not bubble up to a root handler writing to the terminal
    logger.propagate = False
    return logger


def get_logger(name: str) -> logging.Logger:
    """Return a logger by name (use __name__ from inside the package)."""
    return logging.getLogger(name)
