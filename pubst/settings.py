"""Environment-driven defaults (a .env file is loaded by the entry point, see example.py)."""

import logging
import os

DEFAULT_SHOW_WARNINGS = True
DEFAULT_LOG_LEVEL = logging.INFO

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def show_warnings_from_env() -> bool:
    """PUBST_SHOW_WARNINGS; anything unrecognized falls back to the default."""
    raw = (os.environ.get("PUBST_SHOW_WARNINGS") or "").strip().lower()
    if raw in _TRUE:
        return True
    if raw in _FALSE:
        return False
    return DEFAULT_SHOW_WARNINGS


def log_level_from_env() -> int:
    """PUBST_LOG_LEVEL as a level name (INFO) or number (20)."""
    raw = (os.environ.get("PUBST_LOG_LEVEL") or "").strip()
    if not raw:
        return DEFAULT_LOG_LEVEL
    try:
        return int(raw)
    except (ValueError, TypeError):
        level = logging.getLevelName(raw.upper())
        return level if isinstance(level, int) else DEFAULT_LOG_LEVEL
