# src/todo_desk/config.py

"""Application settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the app shell (logging, paging, defaults).
- The task database location is fixed (see tasks.task_store.default_db_path)
  and is deliberately not part of the settings.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from .tasks.task_models import TaskFilter, TaskSort

ENV_PREFIX = "TODO"

logger = logging.getLogger(__name__)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


# Local .env (gitignored) never overrides variables already set in the environment.
load_dotenv(override=False)


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_int(name: str, default: int, *, minimum: int | None = None) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    if minimum is not None and value < minimum:
        return default
    return value


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


def _env_filter(name: str, default: TaskFilter) -> TaskFilter:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return TaskFilter.parse(raw)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r", name, raw)
        return default


def _env_sort(name: str, default: TaskSort) -> TaskSort:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return TaskSort.parse(raw)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r", name, raw)
        return default


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    log_dir: Path
    log_max_bytes: int
    log_backup_count: int

    # ---- List view ----
    page_size: int
    load_more_threshold: int
    default_filter: TaskFilter
    default_sort: TaskSort

    @staticmethod
    def from_env() -> "Settings":
        return Settings(
            app_name=_env(_k("APP_NAME"), "todo-desk") or "todo-desk",
            log_level=_env(_k("LOG_LEVEL"), "WARNING"),
            log_dir=_env_path(_k("LOG_DIR"), Path.home() / ".todo_app" / "logs"),
            log_max_bytes=_env_int(_k("LOG_MAX_BYTES"), 1_000_000, minimum=0),
            log_backup_count=_env_int(_k("LOG_BACKUP_COUNT"), 3, minimum=0),
            page_size=_env_int(_k("PAGE_SIZE"), 20, minimum=1),
            load_more_threshold=_env_int(_k("LOAD_MORE_THRESHOLD"), 3, minimum=0),
            default_filter=_env_filter(_k("DEFAULT_FILTER"), TaskFilter.ALL),
            default_sort=_env_sort(_k("DEFAULT_SORT"), TaskSort.CREATED_DESC),
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
