# src/todo_desk/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- opens the task store (a failure leaves the app in degraded mode),
- wires the store and a notifier into the presentation controller.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.controller import TaskListController
from ..core.ports import Notifier
from ..core.state import AppState
from ..tasks.errors import StorageUnavailable
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def open_store(store: TaskStore) -> bool:
    """Initialize the store; returns False (after logging) if storage is unavailable."""
    try:
        store.initialize()
    except StorageUnavailable as e:
        logger.error("Task storage unavailable (%s); continuing without persistence.", e)
        return False
    return True


def create_initial_state(
    *,
    notifier: Notifier,
    settings=None,
    store: TaskStore | None = None,
) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings and the store injectable makes the app easier to test.
    If store is None, the store at the fixed per-user location is used.
    """
    if settings is None:
        settings = get_settings()
    if store is None:
        store = TaskStore()

    storage_ok = open_store(store)

    controller = TaskListController(
        store,
        notifier,
        page_size=settings.page_size,
        load_more_threshold=settings.load_more_threshold,
        task_filter=settings.default_filter,
        sort=settings.default_sort,
    )
    return AppState(
        settings=settings,
        store=store,
        controller=controller,
        storage_ok=storage_ok,
    )
