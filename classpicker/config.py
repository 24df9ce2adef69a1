"""
Runtime configuration.

Values come from environment variables with sensible defaults:

    CLASSPICKER_DATA_DIR     where picked ids and preferences are stored
    CLASSPICKER_LOG_LEVEL    default logging level (WARNING)
    CLASSPICKER_MAX_CREDIT   credit limit used by the planner (24)
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

PACKAGE_DIR = Path(__file__).resolve().parent

LOG_LEVEL = os.getenv("CLASSPICKER_LOG_LEVEL", "WARNING")


def _int_env(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, default))
    except ValueError:
        return default


DEFAULT_MAX_CREDIT = _int_env("CLASSPICKER_MAX_CREDIT", 24)


def data_dir() -> Path:
    """
    Return the directory holding user state (picked ids, preferences).
    """
    env = os.getenv("CLASSPICKER_DATA_DIR")
    return Path(env) if env else PACKAGE_DIR / "data"


def picked_ids_path(base: Path | None = None) -> Path:
    return (base or data_dir()) / "picked_classes.json"


def preferences_path(base: Path | None = None) -> Path:
    return (base or data_dir()) / "preferences.json"


def get_log_level() -> int:
    level = logging.getLevelName(LOG_LEVEL.upper())
    return level if isinstance(level, int) else logging.WARNING


def configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else get_log_level()
    logging.basicConfig(level=level, format="%(levelname)s:%(name)s:%(message)s")
