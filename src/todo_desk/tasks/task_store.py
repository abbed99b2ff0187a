# tasks/task_store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any

from .errors import ReadFailed, StorageUnavailable
from .task_models import INSERT_FAILED, QueryOutcome, Task, TaskFilter, TaskSort
from .task_query import build_page_query, casefold_collation, casefold_text

logger = logging.getLogger(__name__)

APP_DIR_NAME = ".todo_app"
DB_FILE_NAME = "todos.db"


def default_db_path() -> Path:
    """Fixed per-user location of the task database (~/.todo_app/todos.db)."""
    return Path.home() / APP_DIR_NAME / DB_FILE_NAME


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


class TaskStore:
    """
    SQLite task store.

    Lifecycle: closed -> initialize() -> open -> shutdown() -> closed.
    One connection is held for the whole open period. There is no caching:
    every read goes to the database.

    Failures never escape as exceptions (except from initialize()):
    writes return False / INSERT_FAILED, reads return an empty list.
    Use try_query() to tell an empty result from a failed one.

    Thread-safety:
    - the connection may be used from worker threads, but callers must
      issue one operation at a time
    """

    def __init__(
        self,
        db_path: str | Path | None = None,
        *,
        clock: Callable[[], int] | None = None,
    ) -> None:
        self._db_path = Path(db_path) if db_path is not None else default_db_path()
        self._clock = clock or _now_ms
        self._conn: sqlite3.Connection | None = None

    @property
    def db_path(self) -> Path:
        return self._db_path

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    def __enter__(self) -> TaskStore:
        self.initialize()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()

    # ---- lifecycle ----

    def initialize(self) -> None:
        """
        Open (or create) the database and make sure the todos table exists.

        Raises StorageUnavailable if the location cannot be opened or the
        schema cannot be created. The store then stays closed.
        """
        if self._conn is not None:
            return

        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(str(self._db_path), timeout=30.0, check_same_thread=False)
        except (OSError, sqlite3.Error) as e:
            logger.error("TaskStore cannot open db=%s: %s", self._db_path, e)
            raise StorageUnavailable(f"cannot open {self._db_path}: {e}") from e

        try:
            conn.row_factory = sqlite3.Row
            self._configure_conn(conn)
            self._ensure_schema(conn)
        except sqlite3.Error as e:
            with contextlib.suppress(sqlite3.Error):
                conn.close()
            logger.error("TaskStore schema setup failed db=%s: %s", self._db_path, e)
            raise StorageUnavailable(f"cannot initialize {self._db_path}: {e}") from e

        self._conn = conn
        logger.info("TaskStore ready db=%s total=%s", self._db_path, self.count())

    def shutdown(self) -> None:
        """Release the connection. Safe to call repeatedly or after a failed initialize()."""
        conn, self._conn = self._conn, None
        if conn is None:
            return
        try:
            conn.close()
        except sqlite3.Error:
            logger.exception("TaskStore close failed db=%s", self._db_path)
            return
        logger.info("TaskStore closed db=%s", self._db_path)

    close = shutdown

    # ---- low-level helpers ----

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        conn.create_function("casefold", 1, casefold_text, deterministic=True)
        conn.create_collation("CASEFOLD", casefold_collation)
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")

    @staticmethod
    def _ensure_schema(conn: sqlite3.Connection) -> None:
        with conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS todos (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    title TEXT NOT NULL,
                    description TEXT NOT NULL,
                    completed INTEGER NOT NULL DEFAULT 0,
                    created_at INTEGER NOT NULL
                )
                """
            )
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_todos_created ON todos(created_at, id)"
            )

    def _require_conn(self) -> sqlite3.Connection:
        if self._conn is None:
            raise StorageUnavailable(f"task store is not open (db={self._db_path})")
        return self._conn

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task:
        return Task(
            id=int(row["id"]),
            title=str(row["title"]),
            description=str(row["description"] or ""),
            completed=bool(row["completed"]),
            created_at=int(row["created_at"]),
        )

    def _write(self, op: str, sql: str, params: tuple[Any, ...] = ()) -> int:
        """Run one write statement; returns affected rows, or -1 on failure."""
        try:
            conn = self._require_conn()
            with conn:
                cur = conn.execute(sql, params)
            return cur.rowcount
        except StorageUnavailable as e:
            logger.warning("%s skipped: %s", op, e)
        except sqlite3.Error:
            logger.exception("%s failed", op)
        return -1

    # ---- public API ----

    def insert(self, title: str, description: str = "") -> int:
        """Append a new active task; returns its id or INSERT_FAILED."""
        try:
            conn = self._require_conn()
            with conn:
                cur = conn.execute(
                    "INSERT INTO todos (title, description, completed, created_at) "
                    "VALUES (?, ?, 0, ?)",
                    (title, description, int(self._clock())),
                )
        except StorageUnavailable as e:
            logger.warning("insert skipped: %s", e)
            return INSERT_FAILED
        except sqlite3.Error:
            logger.exception("insert failed title=%r", title)
            return INSERT_FAILED

        if cur.lastrowid is None:
            logger.error("SQLite did not return lastrowid for todos insert")
            return INSERT_FAILED
        task_id = int(cur.lastrowid)
        logger.debug("Task added id=%s", task_id)
        return task_id

    def try_query(
        self,
        limit: int = 20,
        offset: int = 0,
        search: str = "",
        task_filter: TaskFilter | str = TaskFilter.ALL,
        sort: TaskSort | str = TaskSort.CREATED_DESC,
    ) -> QueryOutcome:
        """
        One page of tasks matching `search` AND `task_filter`, ordered by `sort`.

        search: case-insensitive substring of title OR description (ignored if blank).
        limit < 1 yields an empty page; a negative offset is treated as 0.
        """
        if limit < 1:
            return QueryOutcome(tasks=[])

        try:
            sql, params = build_page_query(
                limit=limit,
                offset=offset,
                search=search,
                task_filter=task_filter,
                sort=sort,
            )
            conn = self._require_conn()
            rows = conn.execute(sql, params).fetchall()
        except StorageUnavailable as e:
            logger.warning("query skipped: %s", e)
            return QueryOutcome(tasks=[], error=ReadFailed(str(e)))
        except (sqlite3.Error, ValueError) as e:
            logger.exception(
                "query failed limit=%s offset=%s filter=%s sort=%s",
                limit,
                offset,
                task_filter,
                sort,
            )
            return QueryOutcome(tasks=[], error=ReadFailed(str(e)))

        return QueryOutcome(tasks=[self._row_to_task(r) for r in rows])

    def query(
        self,
        limit: int = 20,
        offset: int = 0,
        search: str = "",
        task_filter: TaskFilter | str = TaskFilter.ALL,
        sort: TaskSort | str = TaskSort.CREATED_DESC,
    ) -> list[Task]:
        """Like try_query(), but a failed read is indistinguishable from no matches."""
        return self.try_query(limit, offset, search, task_filter, sort).tasks

    def get(self, task_id: int) -> Task | None:
        try:
            conn = self._require_conn()
            row = conn.execute(
                "SELECT id, title, description, completed, created_at FROM todos WHERE id = ?",
                (int(task_id),),
            ).fetchone()
        except StorageUnavailable as e:
            logger.warning("get skipped: %s", e)
            return None
        except sqlite3.Error:
            logger.exception("get failed id=%s", task_id)
            return None
        return self._row_to_task(row) if row else None

    def update(self, task_id: int, title: str, description: str, completed: bool) -> bool:
        n = self._write(
            f"update id={task_id}",
            "UPDATE todos SET title = ?, description = ?, completed = ? WHERE id = ?",
            (title, description, 1 if completed else 0, int(task_id)),
        )
        return n > 0

    def toggle_completed(self, task_id: int, completed: bool) -> bool:
        n = self._write(
            f"toggle id={task_id}",
            "UPDATE todos SET completed = ? WHERE id = ?",
            (1 if completed else 0, int(task_id)),
        )
        return n > 0

    def delete(self, task_id: int) -> bool:
        n = self._write(f"delete id={task_id}", "DELETE FROM todos WHERE id = ?", (int(task_id),))
        if n > 0:
            logger.debug("Task deleted id=%s", task_id)
        return n > 0

    def clear_completed(self) -> bool:
        """Delete every completed task in one statement; True iff something was removed."""
        n = self._write("clear_completed", "DELETE FROM todos WHERE completed = 1")
        if n > 0:
            logger.info("Cleared %s completed task(s)", n)
        return n > 0

    def count(self) -> int:
        try:
            conn = self._require_conn()
            (n,) = conn.execute("SELECT COUNT(*) FROM todos").fetchone()
            return int(n)
        except StorageUnavailable as e:
            logger.warning("count skipped: %s", e)
        except sqlite3.Error:
            logger.exception("count failed")
        return 0
