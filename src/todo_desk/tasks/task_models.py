# tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import StrEnum

from .errors import ReadFailed

# Returned by TaskStore.insert when the row was not written.
INSERT_FAILED = -1


def _normalize_choice(raw: str) -> str:
    return raw.strip().lower().replace("-", "_").replace(" ", "_")


class TaskFilter(StrEnum):
    """Completion-status predicate applied before sorting."""

    ALL = "all"
    ACTIVE = "active"
    COMPLETED = "completed"

    @classmethod
    def parse(cls, raw: str | TaskFilter | None) -> TaskFilter:
        if isinstance(raw, cls):
            return raw
        if raw is None or not raw.strip():
            return cls.ALL
        return cls(_normalize_choice(raw))

    def matches(self, task: Task) -> bool:
        if self is TaskFilter.ACTIVE:
            return not task.completed
        if self is TaskFilter.COMPLETED:
            return task.completed
        return True


class TaskSort(StrEnum):
    CREATED_DESC = "created_desc"
    CREATED_ASC = "created_asc"
    TITLE_ASC = "title_asc"
    TITLE_DESC = "title_desc"

    @classmethod
    def parse(cls, raw: str | TaskSort | None) -> TaskSort:
        """
        Accepts enum values ("title_asc"), names ("TITLE_ASC") and
        the console aliases newest / oldest / az / za.
        """
        if isinstance(raw, cls):
            return raw
        if raw is None or not raw.strip():
            return cls.CREATED_DESC
        key = _normalize_choice(raw)
        return cls(_SORT_ALIASES.get(key, key))


_SORT_ALIASES = {
    "newest": TaskSort.CREATED_DESC.value,
    "oldest": TaskSort.CREATED_ASC.value,
    "az": TaskSort.TITLE_ASC.value,
    "a_z": TaskSort.TITLE_ASC.value,
    "za": TaskSort.TITLE_DESC.value,
    "z_a": TaskSort.TITLE_DESC.value,
}


@dataclass(frozen=True, slots=True)
class Task:
    id: int
    title: str
    description: str
    completed: bool = False
    created_at: int = 0  # ms since epoch

    def with_completed(self, completed: bool) -> Task:
        return replace(self, completed=bool(completed))

    def with_text(self, title: str, description: str) -> Task:
        return replace(self, title=title, description=description)

    @property
    def created_datetime(self) -> datetime:
        return datetime.fromtimestamp(self.created_at / 1000).astimezone()


@dataclass(frozen=True, slots=True)
class QueryOutcome:
    """
    Result of TaskStore.try_query.

    Unlike TaskStore.query, a failed round-trip is reported in `error`
    instead of looking like an empty result.
    """

    tasks: list[Task] = field(default_factory=list)
    error: ReadFailed | None = None

    @property
    def ok(self) -> bool:
        return self.error is None
