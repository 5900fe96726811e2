# music_bands/config.py

"""Shared configuration and environment setup."""

from __future__ import annotations

import logging
from os import getenv
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(override=False)

DEFAULT_LOG_LEVEL = "WARNING"


def get_project_root() -> Path:
    """Return the project root directory.

    Prefers MUSIC_BANDS_PROJECT_ROOT env var. Falls back to current working
    directory.
    """
    if root := getenv("MUSIC_BANDS_PROJECT_ROOT"):
        return Path(root).resolve()
    return Path.cwd()


def get_default_collection_path() -> Path | None:
    """Collection file from MUSIC_BANDS_FILE, relative to the project root."""
    value = getenv("MUSIC_BANDS_FILE")
    if not value:
        return None
    path = Path(value).expanduser()
    if not path.is_absolute():
        path = get_project_root() / path
    return path


def get_log_level() -> int:
    """Logging level from MUSIC_BANDS_LOG_LEVEL (name or number)."""
    value = getenv("MUSIC_BANDS_LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper()
    if value.isdigit():
        return int(value)
    level = logging.getLevelName(value)
    if isinstance(level, int):
        return level
    return logging.getLevelName(DEFAULT_LOG_LEVEL)
