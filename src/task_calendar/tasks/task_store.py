# src/task_calendar/tasks/task_store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
import time
import uuid
from collections.abc import Sequence
from datetime import date
from pathlib import Path

from ..core.dates import to_day
from ..core.errors import InvalidRecurrenceConfig, TaskNotFound
from ..core.models import RepeatType, Task, TaskCompletion, TaskSkip
from ..core.recurrence import validate_recurrence

logger = logging.getLogger(__name__)


class TaskStore:
    """
    SQLite store for tasks, completions and skips.

    The schema is intentionally simple and migration-safe:
    - create tables if missing
    - use PRAGMA table_info to detect missing columns
    - add columns with ALTER TABLE only when needed

    Days are stored as ISO strings ("YYYY-MM-DD"); (task_id, day) is UNIQUE in
    both record tables, so the store never produces inconsistent records itself.

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(self, db_path: str | Path = "tasks.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        try:
            total = self.count_tasks()
        except Exception:
            total = -1
        logger.info("TaskStore ready db=%s total=%s", self._db_path, total)

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        self._configure_conn(conn)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(Exception):
            conn.execute("PRAGMA journal_mode=WAL")

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()

            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS tasks (
                    id TEXT PRIMARY KEY,
                    title TEXT NOT NULL,
                    start_date TEXT NOT NULL,
                    repeat_type TEXT NOT NULL DEFAULT 'none',
                    repeat_day INTEGER,
                    sort_order INTEGER NOT NULL DEFAULT 0,
                    created_at REAL NOT NULL,
                    updated_at REAL NOT NULL
                )
                """
            )
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS task_completions (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    task_id TEXT NOT NULL,
                    day TEXT NOT NULL,
                    completed INTEGER NOT NULL DEFAULT 1,
                    updated_at REAL NOT NULL,
                    UNIQUE(task_id, day)
                )
                """
            )
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS task_skips (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    task_id TEXT NOT NULL,
                    day TEXT NOT NULL,
                    created_at REAL NOT NULL,
                    UNIQUE(task_id, day)
                )
                """
            )

            # Migrations (safe): add missing columns.
            cur.execute("PRAGMA table_info(tasks)")
            cols = {row["name"] for row in cur.fetchall()}

            def add_col(name: str, decl: str) -> None:
                if name in cols:
                    return
                cur.execute(f"ALTER TABLE tasks ADD COLUMN {name} {decl}")
                logger.info("TaskStore migration: added column %s", name)

            add_col("repeat_day", "INTEGER")
            add_col("sort_order", "INTEGER NOT NULL DEFAULT 0")
            add_col("updated_at", "REAL NOT NULL DEFAULT 0")

            cur.execute("CREATE INDEX IF NOT EXISTS idx_tasks_order ON tasks(sort_order)")

            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task:
        repeat_day = row["repeat_day"]
        return Task(
            id=str(row["id"]),
            title=str(row["title"] or ""),
            start_date=to_day(row["start_date"]),
            repeat_type=RepeatType.parse(row["repeat_type"] or "none"),
            repeat_day=int(repeat_day) if repeat_day is not None else None,
            sort_order=int(row["sort_order"] or 0),
        )

    @staticmethod
    def _clean_title(title: str) -> str:
        if not title or not title.strip():
            raise ValueError("title is required")
        return title.strip()

    @staticmethod
    def _stored_repeat_day(rt: RepeatType, repeat_day: int | None) -> int | None:
        # repeat_day is meaningless for none/daily; don't persist stale values.
        return repeat_day if rt.needs_weekday else None

    def _require_task(self, conn: sqlite3.Connection, task_id: str) -> None:
        cur = conn.execute("SELECT 1 FROM tasks WHERE id = ?", (task_id,))
        if cur.fetchone() is None:
            raise TaskNotFound(task_id)

    # ---- snapshots ----

    def count_tasks(self) -> int:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT COUNT(*) FROM tasks")
            (n,) = cur.fetchone()
            return int(n)
        finally:
            conn.close()

    def list_tasks(self) -> list[Task]:
        conn = self._get_conn()
        try:
            cur = conn.execute("SELECT * FROM tasks ORDER BY sort_order ASC, created_at ASC")
            out: list[Task] = []
            for row in cur.fetchall():
                try:
                    out.append(self._row_to_task(row))
                except (ValueError, InvalidRecurrenceConfig):
                    logger.warning("Skipping malformed task row id=%s", row["id"])
            return out
        finally:
            conn.close()

    def get_task(self, task_id: str) -> Task | None:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT * FROM tasks WHERE id = ?", (task_id,)).fetchone()
            return self._row_to_task(row) if row else None
        finally:
            conn.close()

    def list_completions(self) -> list[TaskCompletion]:
        conn = self._get_conn()
        try:
            cur = conn.execute("SELECT task_id, day, completed FROM task_completions ORDER BY id ASC")
            return [
                TaskCompletion(
                    task_id=str(r["task_id"]),
                    day=to_day(r["day"]),
                    completed=bool(r["completed"]),
                )
                for r in cur.fetchall()
            ]
        finally:
            conn.close()

    def list_skips(self) -> list[TaskSkip]:
        conn = self._get_conn()
        try:
            cur = conn.execute("SELECT task_id, day FROM task_skips ORDER BY id ASC")
            return [TaskSkip(task_id=str(r["task_id"]), day=to_day(r["day"])) for r in cur.fetchall()]
        finally:
            conn.close()

    # ---- task mutations ----

    def add_task(
        self,
        *,
        title: str,
        start_date: date,
        repeat_type: RepeatType | str,
        repeat_day: int | None = None,
    ) -> str:
        title = self._clean_title(title)
        rt = validate_recurrence(repeat_type, repeat_day)
        start = to_day(start_date)

        now = time.time()
        task_id = str(uuid.uuid4())

        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT COALESCE(MAX(sort_order), -1) FROM tasks")
            (max_order,) = cur.fetchone()
            cur.execute(
                """
                INSERT INTO tasks(
                    id, title, start_date, repeat_type, repeat_day,
                    sort_order, created_at, updated_at
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    task_id,
                    title,
                    start.isoformat(),
                    rt.value,
                    self._stored_repeat_day(rt, repeat_day),
                    int(max_order) + 1,
                    now,
                    now,
                ),
            )
            conn.commit()
            logger.debug(
                "Task added id=%s repeat=%s day=%s start=%s",
                task_id,
                rt.value,
                repeat_day,
                start,
            )
            return task_id
        finally:
            conn.close()

    def update_task(
        self,
        task_id: str,
        *,
        title: str,
        repeat_type: RepeatType | str,
        repeat_day: int | None = None,
    ) -> None:
        title = self._clean_title(title)
        rt = validate_recurrence(repeat_type, repeat_day)

        conn = self._get_conn()
        try:
            self._require_task(conn, task_id)
            conn.execute(
                """
                UPDATE tasks
                SET title = ?, repeat_type = ?, repeat_day = ?, updated_at = ?
                WHERE id = ?
                """,
                (title, rt.value, self._stored_repeat_day(rt, repeat_day), time.time(), task_id),
            )
            conn.commit()
            logger.debug("Task updated id=%s repeat=%s day=%s", task_id, rt.value, repeat_day)
        finally:
            conn.close()

    def delete_task(self, task_id: str) -> None:
        conn = self._get_conn()
        try:
            self._require_task(conn, task_id)
            conn.execute("DELETE FROM task_completions WHERE task_id = ?", (task_id,))
            conn.execute("DELETE FROM task_skips WHERE task_id = ?", (task_id,))
            conn.execute("DELETE FROM tasks WHERE id = ?", (task_id,))
            conn.commit()
            logger.debug("Task deleted id=%s", task_id)
        finally:
            conn.close()

    def reorder_tasks(self, ordered_ids: Sequence[str]) -> None:
        """
        Set sort_order to each id's position in `ordered_ids`.

        Ids not mentioned keep their relative order after the listed ones.
        """
        ids = list(dict.fromkeys(ordered_ids))
        now = time.time()

        conn = self._get_conn()
        try:
            for task_id in ids:
                self._require_task(conn, task_id)

            cur = conn.execute("SELECT id FROM tasks ORDER BY sort_order ASC, created_at ASC")
            listed = set(ids)
            rest = [str(r["id"]) for r in cur.fetchall() if str(r["id"]) not in listed]

            for pos, task_id in enumerate(ids + rest):
                conn.execute(
                    "UPDATE tasks SET sort_order = ?, updated_at = ? WHERE id = ?",
                    (pos, now, task_id),
                )
            conn.commit()
            logger.debug("Tasks reordered n=%d", len(ids))
        finally:
            conn.close()

    # ---- per-day records ----

    def toggle_completion(self, task_id: str, day: date, is_completed: bool) -> None:
        d = to_day(day).isoformat()
        conn = self._get_conn()
        try:
            self._require_task(conn, task_id)
            conn.execute(
                """
                INSERT INTO task_completions(task_id, day, completed, updated_at)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(task_id, day)
                DO UPDATE SET completed = excluded.completed, updated_at = excluded.updated_at
                """,
                (task_id, d, 1 if is_completed else 0, time.time()),
            )
            conn.commit()
            logger.debug("Completion set task=%s day=%s completed=%s", task_id, d, is_completed)
        finally:
            conn.close()

    def skip_task_for_date(self, task_id: str, day: date) -> None:
        d = to_day(day).isoformat()
        conn = self._get_conn()
        try:
            self._require_task(conn, task_id)
            conn.execute(
                "INSERT OR IGNORE INTO task_skips(task_id, day, created_at) VALUES (?, ?, ?)",
                (task_id, d, time.time()),
            )
            conn.commit()
            logger.debug("Skip recorded task=%s day=%s", task_id, d)
        finally:
            conn.close()
