# tasks/task_query.py

"""
SQL for the paginated task query.

User-supplied values are always bound as parameters; only the fixed
fragments below are interpolated into the statement.
"""

from __future__ import annotations

from typing import Any

from .task_models import TaskFilter, TaskSort

LIKE_ESCAPE = "\\"

_FILTER_CONDITIONS: dict[TaskFilter, str | None] = {
    TaskFilter.ALL: None,
    TaskFilter.ACTIVE: "completed = 0",
    TaskFilter.COMPLETED: "completed = 1",
}

# id breaks ties so that adjacent pages never overlap or skip rows.
_ORDER_BY: dict[TaskSort, str] = {
    TaskSort.CREATED_DESC: "created_at DESC, id DESC",
    TaskSort.CREATED_ASC: "created_at ASC, id ASC",
    TaskSort.TITLE_ASC: "title COLLATE CASEFOLD ASC, id ASC",
    TaskSort.TITLE_DESC: "title COLLATE CASEFOLD DESC, id DESC",
}

_SEARCH_CONDITION = (
    f"(casefold(title) LIKE ? ESCAPE '{LIKE_ESCAPE}' "
    f"OR casefold(description) LIKE ? ESCAPE '{LIKE_ESCAPE}')"
)


def casefold_text(value: Any) -> str | None:
    """SQL function `casefold(x)`; also used to normalize the search text."""
    if value is None:
        return None
    return str(value).casefold()


def casefold_collation(a: str, b: str) -> int:
    """SQL collation `CASEFOLD`: case-insensitive, Unicode aware."""
    fa, fb = a.casefold(), b.casefold()
    return (fa > fb) - (fa < fb)


def escape_like(text: str) -> str:
    return (
        text.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def search_pattern(text: str) -> str:
    return f"%{escape_like(casefold_text(text) or '')}%"


def build_page_query(
    *,
    limit: int,
    offset: int,
    search: str = "",
    task_filter: TaskFilter | str = TaskFilter.ALL,
    sort: TaskSort | str = TaskSort.CREATED_DESC,
) -> tuple[str, list[Any]]:
    """
    Build `SELECT ... WHERE <search> AND <filter> ORDER BY <sort> LIMIT ? OFFSET ?`.

    Raises ValueError for unknown filter/sort values.
    """
    conditions: list[str] = []
    params: list[Any] = []

    if search and search.strip():
        pattern = search_pattern(search)
        conditions.append(_SEARCH_CONDITION)
        params.extend((pattern, pattern))

    filter_sql = _FILTER_CONDITIONS[TaskFilter.parse(task_filter)]
    if filter_sql:
        conditions.append(filter_sql)

    where = f"WHERE {' AND '.join(conditions)} " if conditions else ""
    order_by = _ORDER_BY[TaskSort.parse(sort)]

    sql = (
        "SELECT id, title, description, completed, created_at "
        f"FROM todos {where}ORDER BY {order_by} LIMIT ? OFFSET ?"
    )
    params.extend((int(limit), max(0, int(offset))))
    return sql, params
