# tests/conftest.py

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from types import SimpleNamespace

import pytest

from todo_desk.core.controller import TaskListController
from todo_desk.core.state import AppState
from todo_desk.tasks.task_models import TaskFilter, TaskSort
from todo_desk.tasks.task_store import TaskStore

from .fakes import FakeClock, FakeNotifier


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def store(tmp_path: Path, clock: FakeClock) -> Iterator[TaskStore]:
    """A fresh, open SQLite store per test (never the real ~/.todo_app database)."""
    s = TaskStore(tmp_path / "todos.db", clock=clock)
    s.initialize()
    yield s
    s.shutdown()


@pytest.fixture()
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the controller.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment.
    """
    return SimpleNamespace(
        app_name="todo-test",
        log_level="WARNING",
        log_dir=tmp_path / "logs",
        log_max_bytes=0,
        log_backup_count=0,
        page_size=5,
        load_more_threshold=2,
        default_filter=TaskFilter.ALL,
        default_sort=TaskSort.CREATED_DESC,
    )


@pytest.fixture()
def controller(store: TaskStore, notifier: FakeNotifier, settings: SimpleNamespace) -> TaskListController:
    return TaskListController(
        store,
        notifier,
        page_size=settings.page_size,
        load_more_threshold=settings.load_more_threshold,
    )


@pytest.fixture()
def state(settings: SimpleNamespace, store: TaskStore, controller: TaskListController) -> AppState:
    return AppState(settings=settings, store=store, controller=controller)
