from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

ENV_CM_DB = "CM_DB"
ENV_CM_HOME = "CM_HOME"
ENV_CM_LOG_LEVEL = "CM_LOG_LEVEL"

DB_FILENAME = "command_manager.db"
LOG_FILENAME = "cm.log"
DEFAULT_LOG_LEVEL = "INFO"


class ConfigError(Exception):
    """A configured path or setting is unusable."""


@dataclass(frozen=True)
class CmDirs:
    base_dir: Path

    @property
    def db_path(self) -> Path:
        return self.base_dir / DB_FILENAME

    @property
    def log_path(self) -> Path:
        return self.base_dir / LOG_FILENAME


def get_cm_dirs() -> CmDirs:
    """
    Resolve the directory holding the database and the log file.

    Priority:
    - $CM_HOME
    - ~/.cm
    """
    env = os.environ.get(ENV_CM_HOME)
    if env:
        return CmDirs(Path(env).expanduser())
    return CmDirs(Path.home() / ".cm")


def get_db_path(explicit: Optional[str] = None) -> Path:
    """
    Resolve the SQLite database file.

    An explicit path (the `--db` flag, then $CM_DB) must already exist: a typo
    should not silently start an empty database somewhere else. The default
    location is created on demand.
    """
    chosen = explicit or os.environ.get(ENV_CM_DB)
    if chosen:
        p = Path(chosen).expanduser()
        if not p.is_file():
            raise ConfigError(f"database file not found: {p}")
        return p

    dirs = get_cm_dirs()
    try:
        dirs.base_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ConfigError(f"cannot create {dirs.base_dir}: {e}") from e
    return dirs.db_path


def log_path() -> Path:
    return get_cm_dirs().log_path


def get_log_level(explicit: Optional[str] = None) -> int:
    name = (explicit or os.environ.get(ENV_CM_LOG_LEVEL) or DEFAULT_LOG_LEVEL).strip().upper()
    level = logging.getLevelName(name)
    if not isinstance(level, int):
        raise ConfigError(f"unknown log level: {name!r}")
    return level
