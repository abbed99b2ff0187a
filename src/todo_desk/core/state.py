# src/todo_desk/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..tasks.task_store import TaskStore
from .controller import TaskListController


@dataclass
class AppState:
    # Settings object (config.Settings or a test stand-in).
    settings: Any

    store: TaskStore
    controller: TaskListController

    # False when the store could not be initialized; the app keeps running.
    storage_ok: bool = True
