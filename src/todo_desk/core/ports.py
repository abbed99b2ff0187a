# src/todo_desk/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the presentation controller.

The controller depends on Protocols instead of the concrete SQLite store
and console, which keeps front-ends swappable and makes testing easier.
"""

from typing import Any, Protocol


class TaskRepo(Protocol):
    def insert(self, title: str, description: str = "") -> int: ...

    def query(
            self,
            limit: int = 20,
            offset: int = 0,
            search: str = "",
            task_filter: Any = None,
            sort: Any = None,
    ) -> list[Any]: ...

    def try_query(
            self,
            limit: int = 20,
            offset: int = 0,
            search: str = "",
            task_filter: Any = None,
            sort: Any = None,
    ) -> Any: ...  # QueryOutcome

    def get(self, task_id: int) -> Any | None: ...
    def update(self, task_id: int, title: str, description: str, completed: bool) -> bool: ...
    def toggle_completed(self, task_id: int, completed: bool) -> bool: ...
    def delete(self, task_id: int) -> bool: ...
    def clear_completed(self) -> bool: ...
    def count(self) -> int: ...


class Notifier(Protocol):
    """Transient user-facing messages ("Task added successfully", ...)."""

    def notify(self, text: str) -> None: ...
