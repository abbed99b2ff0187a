# tests/test_config.py

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from todo_desk.config import Settings
from todo_desk.logging_setup import console_level_from_name, setup_logging
from todo_desk.tasks.task_models import TaskFilter, TaskSort

_VARS = (
    "TODO_APP_NAME",
    "TODO_LOG_LEVEL",
    "TODO_LOG_DIR",
    "TODO_LOG_MAX_BYTES",
    "TODO_LOG_BACKUP_COUNT",
    "TODO_PAGE_SIZE",
    "TODO_LOAD_MORE_THRESHOLD",
    "TODO_DEFAULT_FILTER",
    "TODO_DEFAULT_SORT",
)


@pytest.fixture()
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env: pytest.MonkeyPatch) -> None:
    s = Settings.from_env()
    assert s.app_name == "todo-desk"
    assert s.log_level == "WARNING"
    assert s.log_max_bytes == 1_000_000
    assert s.log_backup_count == 3
    assert s.page_size == 20
    assert s.load_more_threshold == 3
    assert s.default_filter is TaskFilter.ALL
    assert s.default_sort is TaskSort.CREATED_DESC


def test_overrides(clean_env: pytest.MonkeyPatch, tmp_path: Path) -> None:
    clean_env.setenv("TODO_APP_NAME", "my tasks")
    clean_env.setenv("TODO_LOG_DIR", str(tmp_path / "logs"))
    clean_env.setenv("TODO_PAGE_SIZE", "50")
    clean_env.setenv("TODO_LOG_MAX_BYTES", "0")
    clean_env.setenv("TODO_LOG_BACKUP_COUNT", "7")
    clean_env.setenv("TODO_DEFAULT_FILTER", "Active")
    clean_env.setenv("TODO_DEFAULT_SORT", "az")

    s = Settings.from_env()
    assert s.app_name == "my tasks"
    assert s.log_dir == tmp_path / "logs"
    assert s.page_size == 50
    assert s.log_max_bytes == 0
    assert s.log_backup_count == 7
    assert s.default_filter is TaskFilter.ACTIVE
    assert s.default_sort is TaskSort.TITLE_ASC


def test_invalid_values_fall_back(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("TODO_PAGE_SIZE", "0")
    clean_env.setenv("TODO_LOAD_MORE_THRESHOLD", "lots")
    clean_env.setenv("TODO_DEFAULT_FILTER", "someday")
    clean_env.setenv("TODO_DEFAULT_SORT", "by_mood")
    clean_env.setenv("TODO_LOG_BACKUP_COUNT", "-1")

    s = Settings.from_env()
    assert s.page_size == 20
    assert s.load_more_threshold == 3
    assert s.log_backup_count == 3
    assert s.default_filter is TaskFilter.ALL
    assert s.default_sort is TaskSort.CREATED_DESC


@pytest.fixture()
def root_handlers():
    """Restore the root logger after setup_logging() replaced its handlers."""
    root = logging.getLogger()
    saved = list(root.handlers)
    yield root
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()
    for h in saved:
        root.addHandler(h)
    logging.captureWarnings(False)


def _flush(root: logging.Logger) -> None:
    for h in root.handlers:
        h.flush()


def test_setup_logging_writes_file(tmp_path: Path, root_handlers: logging.Logger) -> None:
    log_file = setup_logging(log_dir=tmp_path / "logs")
    logging.getLogger("todo_desk.test").debug("hello file")
    _flush(root_handlers)

    assert log_file == tmp_path / "logs" / "todo.log"
    assert "hello file" in log_file.read_text("utf-8")


def test_log_file_rotates_and_keeps_backups(tmp_path: Path, root_handlers: logging.Logger) -> None:
    log_file = setup_logging(log_dir=tmp_path, max_bytes=400, backup_count=2)
    log = logging.getLogger("todo_desk.test")
    for i in range(60):
        log.debug("line %02d %s", i, "x" * 40)
    _flush(root_handlers)

    assert log_file.exists()
    assert (tmp_path / "todo.log.1").exists()
    assert (tmp_path / "todo.log.2").exists()
    assert not (tmp_path / "todo.log.3").exists()
    assert log_file.stat().st_size <= 400
    assert "line 59" in log_file.read_text("utf-8")


def test_log_file_without_rotation_grows(tmp_path: Path, root_handlers: logging.Logger) -> None:
    log_file = setup_logging(log_dir=tmp_path, max_bytes=0, backup_count=2)
    log = logging.getLogger("todo_desk.test")
    for i in range(60):
        log.debug("line %02d %s", i, "x" * 40)
    _flush(root_handlers)

    assert not (tmp_path / "todo.log.1").exists()
    assert "line 00" in log_file.read_text("utf-8")


def test_console_level_from_name() -> None:
    assert console_level_from_name("info") == logging.INFO
    assert console_level_from_name(" DEBUG ") == logging.DEBUG
    assert console_level_from_name("chatty") == logging.WARNING
    assert console_level_from_name(None, default=logging.ERROR) == logging.ERROR
