# src/todo_desk/core/controller.py

"""
Presentation controller for the task list.

Holds the transient list state (search text, filter, sort, loaded pages)
and re-queries the store whenever one of those changes. Every store call is
dispatched to a worker thread so the front-end stays responsive, and calls
are issued one at a time.

A storage round-trip cannot be cancelled once issued. If the view changes
while a page is in flight, the late page is discarded.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, TypeVar

from ..tasks.errors import ReadFailed
from ..tasks.task_models import INSERT_FAILED, Task, TaskFilter, TaskSort
from .ports import Notifier, TaskRepo

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 20
DEFAULT_LOAD_MORE_THRESHOLD = 3


@dataclass(slots=True)
class ListView:
    search: str = ""
    task_filter: TaskFilter = TaskFilter.ALL
    sort: TaskSort = TaskSort.CREATED_DESC

    tasks: list[Task] = field(default_factory=list)
    page: int = 0
    has_more: bool = True
    last_error: ReadFailed | None = None

    def find(self, task_id: int) -> Task | None:
        for t in self.tasks:
            if t.id == task_id:
                return t
        return None


class TaskListController:
    def __init__(
        self,
        store: TaskRepo,
        notifier: Notifier,
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
        load_more_threshold: int = DEFAULT_LOAD_MORE_THRESHOLD,
        task_filter: TaskFilter = TaskFilter.ALL,
        sort: TaskSort = TaskSort.CREATED_DESC,
    ) -> None:
        self._store = store
        self._notifier = notifier
        self.page_size = max(1, int(page_size))
        self.load_more_threshold = max(0, int(load_more_threshold))
        self.view = ListView(task_filter=task_filter, sort=sort)

        self._lock = asyncio.Lock()
        # Bumped whenever search/filter/sort change or the list is reloaded.
        self._generation = 0

    # ---- dispatch ----

    async def _call(self, fn: Callable[..., T], *args: Any) -> T:
        async with self._lock:
            return await asyncio.to_thread(fn, *args)

    def _notify(self, text: str) -> None:
        try:
            self._notifier.notify(text)
        except Exception:
            logger.exception("Notifier failed text=%r", text)

    async def _fetch_page(self, offset: int) -> list[Task] | None:
        """Fetch one page for the current view. None if the view changed meanwhile."""
        generation = self._generation
        v = self.view
        outcome = await self._call(
            self._store.try_query,
            self.page_size,
            offset,
            v.search,
            v.task_filter,
            v.sort,
        )
        if generation != self._generation:
            logger.debug("Discarding stale page offset=%s (view changed)", offset)
            return None

        v.last_error = outcome.error
        if outcome.error is not None:
            logger.warning("Task list read failed offset=%s: %s", offset, outcome.error)
        return list(outcome.tasks)

    # ---- list state ----

    async def refresh(self) -> list[Task]:
        """Reload the first page for the current search/filter/sort."""
        self._generation += 1
        tasks = await self._fetch_page(0)
        if tasks is None:
            return self.view.tasks
        self.view.tasks = tasks
        self.view.page = 0
        self.view.has_more = len(tasks) >= self.page_size
        return self.view.tasks

    async def set_search(self, text: str) -> list[Task]:
        text = text or ""
        if text == self.view.search:
            return self.view.tasks
        self.view.search = text
        return await self.refresh()

    async def set_filter(self, task_filter: TaskFilter | str) -> list[Task]:
        f = TaskFilter.parse(task_filter)
        if f == self.view.task_filter:
            return self.view.tasks
        self.view.task_filter = f
        return await self.refresh()

    async def set_sort(self, sort: TaskSort | str) -> list[Task]:
        s = TaskSort.parse(sort)
        if s == self.view.sort:
            return self.view.tasks
        self.view.sort = s
        return await self.refresh()

    async def load_more(self) -> list[Task]:
        """
        Append the next page. Returns only the newly loaded tasks.

        The offset is the number of rows already shown, so rows removed locally
        (delete, toggle out of the filter) do not shift the next page past unseen rows.
        """
        v = self.view
        if not v.has_more:
            return []

        page = await self._fetch_page(len(v.tasks))
        if page is None:
            return []

        has_more = len(page) >= self.page_size
        seen = {t.id for t in v.tasks}
        tasks = [t for t in page if t.id not in seen]
        if tasks:
            v.tasks = v.tasks + tasks
            v.page += 1
            v.has_more = has_more
        else:
            v.has_more = False
        return tasks

    def should_load_more(self, last_visible_index: int) -> bool:
        return (
            self.view.has_more
            and last_visible_index >= len(self.view.tasks) - self.load_more_threshold
        )

    async def on_scrolled(self, last_visible_index: int) -> list[Task]:
        """Scroll hook: fetch the next page once the end of the list is near."""
        if not self.should_load_more(last_visible_index):
            return []
        return await self.load_more()

    # ---- mutations ----

    async def add(self, title: str, description: str = "") -> int:
        if not title or not title.strip():
            self._notify("Task title cannot be empty")
            return INSERT_FAILED

        task_id = await self._call(self._store.insert, title, description or "")
        if task_id == INSERT_FAILED:
            self._notify("Failed to add task")
            return INSERT_FAILED

        if self.view.task_filter != TaskFilter.COMPLETED:
            await self.refresh()
        self._notify("Task added successfully")
        return task_id

    async def toggle(self, task_id: int, completed: bool) -> bool:
        """
        Optimistic toggle: the local view is updated before the write.
        On failure the view is reloaded from the store.
        """
        v = self.view
        current = v.find(task_id)
        if current is not None:
            updated = current.with_completed(completed)
            if v.task_filter.matches(updated):
                v.tasks = [updated if t.id == task_id else t for t in v.tasks]
            else:
                v.tasks = [t for t in v.tasks if t.id != task_id]

        ok = await self._call(self._store.toggle_completed, task_id, completed)
        if not ok:
            self._notify("Failed to update task")
            if current is not None:
                await self.refresh()
        return ok

    async def edit(self, task_id: int, title: str, description: str) -> bool:
        if not title or not title.strip():
            self._notify("Task title cannot be empty")
            return False

        current = self.view.find(task_id)
        if current is None:
            current = await self._call(self._store.get, task_id)
        if current is None:
            self._notify("Failed to update task")
            return False

        description = description or ""
        ok = await self._call(self._store.update, task_id, title, description, current.completed)
        if not ok:
            self._notify("Failed to update task")
            return False

        self.view.tasks = [
            t.with_text(title, description) if t.id == task_id else t for t in self.view.tasks
        ]
        self._notify("Task updated")
        return True

    async def delete(self, task_id: int) -> bool:
        ok = await self._call(self._store.delete, task_id)
        if not ok:
            self._notify("Failed to delete task")
            return False
        self.view.tasks = [t for t in self.view.tasks if t.id != task_id]
        self._notify("Task deleted")
        return True

    async def clear_completed(self) -> bool:
        ok = await self._call(self._store.clear_completed)
        if not ok:
            self._notify("Failed to clear tasks")
            return False
        await self.refresh()
        self._notify("Cleared completed tasks")
        return True

    async def total(self) -> int:
        return await self._call(self._store.count)
