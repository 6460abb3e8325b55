"""Logging for broker events and the default warning sink."""

import logging
import sys
from typing import Callable, Optional

from pubst.settings import log_level_from_env

WARNING_PREFIX = "WARNING:"


def get_logger(name: str, level: Optional[int] = None) -> logging.Logger:
    """Return a logger with a stdout handler attached on first use (level from PUBST_LOG_LEVEL)."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s | %(name)s | %(levelname)s | %(message)s"
            )
        )
        logger.addHandler(handler)
        logger.setLevel(level if level is not None else log_level_from_env())
    return logger


def warning_sink(name: str) -> Callable[[str], None]:
    """A warn(message) callable that logs at WARNING on the named logger."""
    logger = get_logger(name)

    def warn(message: str) -> None:
        logger.warning("%s %s", WARNING_PREFIX, message)

    return warn
