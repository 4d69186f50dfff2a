"""Logging setup for feedterm.

All modules log through children of the ``feedterm`` logger. Output goes to
stderr unless a log file is configured, in which case a rotating file is used
so the terminal stays clean.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Union

if TYPE_CHECKING:
    from feedterm.config import AppConfig

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

logger = logging.getLogger("feedterm")


def setup_logging(
    config: Optional["AppConfig"] = None,
    level: Union[str, int, None] = None,
    log_file: Union[str, Path, None] = None,
) -> logging.Logger:
    """Configure the ``feedterm`` logger.

    Explicit arguments win over ``FEEDTERM_LOG_LEVEL`` / ``FEEDTERM_LOG_FILE``,
    which win over the configuration.

    Args:
        config: application configuration supplying defaults
        level: log level name or number
        log_file: write to this file instead of stderr

    Returns:
        the configured package logger
    """
    if level is None:
        level = os.environ.get("FEEDTERM_LOG_LEVEL") or (config.log_level if config else "WARNING")
    if log_file is None:
        log_file = os.environ.get("FEEDTERM_LOG_FILE") or (config.log_file if config else None)

    if isinstance(level, str):
        level = level.upper()

    logger.setLevel(level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if log_file:
        path = Path(log_file).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = RotatingFileHandler(
            path, maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8"
        )
    else:
        handler = logging.StreamHandler(sys.stderr)

    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)

    logger.debug(f"logging configured at level {logging.getLevelName(logger.level)}")
    return logger
