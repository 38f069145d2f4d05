"""Logging utilities for lddgraph runs."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

_LOGGER_NAME = "lddgraph"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the lddgraph hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


class _BelowWarning(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < logging.WARNING


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Send progress lines to stdout and warnings to stderr, plus an optional file sink."""
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Reset handlers to avoid duplicate output when the CLI is invoked multiple times.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    progress_handler = logging.StreamHandler(sys.stdout)
    progress_handler.setLevel(level)
    progress_handler.addFilter(_BelowWarning())
    progress_handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(progress_handler)

    warning_handler = logging.StreamHandler(sys.stderr)
    warning_handler.setLevel(logging.WARNING)
    warning_handler.setFormatter(logging.Formatter("[lddgraph] %(levelname)s %(message)s"))
    logger.addHandler(warning_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(file_handler)

    return logger


__all__ = ["configure_logging", "get_logger"]
