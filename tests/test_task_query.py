# tests/test_task_query.py

from __future__ import annotations

import pytest

from todo_desk.tasks.task_models import TaskFilter, TaskSort
from todo_desk.tasks.task_query import build_page_query, casefold_collation, escape_like, search_pattern


def test_no_search_no_filter_has_no_where() -> None:
    sql, params = build_page_query(limit=20, offset=40)
    assert "WHERE" not in sql
    assert sql.endswith("ORDER BY created_at DESC, id DESC LIMIT ? OFFSET ?")
    assert params == [20, 40]


def test_search_and_filter_are_and_combined() -> None:
    sql, params = build_page_query(
        limit=10,
        offset=0,
        search="Milk",
        task_filter=TaskFilter.ACTIVE,
        sort=TaskSort.TITLE_ASC,
    )
    assert "WHERE (casefold(title) LIKE ?" in sql
    assert "OR casefold(description) LIKE ?" in sql
    assert ") AND completed = 0 ORDER BY" in sql
    assert "title COLLATE CASEFOLD ASC, id ASC" in sql
    assert params == ["%milk%", "%milk%", 10, 0]


def test_blank_search_is_ignored() -> None:
    sql, params = build_page_query(limit=5, offset=0, search="  \t", task_filter="completed")
    assert "LIKE" not in sql
    assert "WHERE completed = 1 ORDER BY" in sql
    assert params == [5, 0]


def test_negative_offset_is_clamped() -> None:
    _, params = build_page_query(limit=5, offset=-3)
    assert params == [5, 0]


def test_unknown_filter_raises() -> None:
    with pytest.raises(ValueError):
        build_page_query(limit=5, offset=0, task_filter="someday")


def test_escape_like() -> None:
    assert escape_like("50%_off\\now") == "50\\%\\_off\\\\now"
    assert search_pattern("100% SURE") == "%100\\% sure%"


def test_casefold_collation_orders_case_insensitively() -> None:
    assert casefold_collation("apple", "APPLE") == 0
    assert casefold_collation("Apple", "banana") < 0
    assert casefold_collation("cherry", "Banana") > 0


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("newest", TaskSort.CREATED_DESC),
        ("oldest", TaskSort.CREATED_ASC),
        ("AZ", TaskSort.TITLE_ASC),
        ("z-a", TaskSort.TITLE_DESC),
        ("TITLE_DESC", TaskSort.TITLE_DESC),
        ("created-asc", TaskSort.CREATED_ASC),
        ("", TaskSort.CREATED_DESC),
    ],
)
def test_sort_parse_aliases(raw: str, expected: TaskSort) -> None:
    assert TaskSort.parse(raw) is expected


def test_filter_parse() -> None:
    assert TaskFilter.parse(" Active ") is TaskFilter.ACTIVE
    assert TaskFilter.parse(None) is TaskFilter.ALL
    with pytest.raises(ValueError):
        TaskFilter.parse("done")
