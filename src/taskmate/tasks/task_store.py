# src/taskmate/tasks/task_store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
import uuid
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from ..errors import TaskValidationError
from .task_models import DEFAULT_CATEGORY, Task, format_instant, parse_instant, utc_now

logger = logging.getLogger(__name__)

# Wire key -> column. `_id`, `createdAt`, `updatedAt` are owned by the store.
_UPDATABLE_FIELDS: dict[str, str] = {
    "title": "title",
    "description": "description",
    "dueDate": "due_date",
    "category": "category",
    "completed": "completed",
}


class TaskStore:
    """
    SQLite task store.

    One row per task document, keyed by an opaque uuid4 hex id.
    The schema is intentionally simple and migration-safe:
    - create table if missing
    - use PRAGMA table_info to detect missing columns
    - add columns with ALTER TABLE only when needed

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(self, db_path: str | Path = "tasks.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        logger.info("TaskStore ready db=%s total=%s", self._db_path, self.count_tasks())

    @property
    def db_path(self) -> Path:
        return self._db_path

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        self._configure_conn(conn)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(sqlite3.DatabaseError):
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
                    description TEXT NOT NULL DEFAULT '',
                    due_date TEXT NOT NULL,
                    category TEXT NOT NULL DEFAULT 'Medium',
                    completed INTEGER NOT NULL DEFAULT 0,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
                """
            )

            cur.execute("PRAGMA table_info(tasks)")
            cols = {row["name"] for row in cur.fetchall()}

            def add_col(name: str, decl: str) -> None:
                if name in cols:
                    return
                cur.execute(f"ALTER TABLE tasks ADD COLUMN {name} {decl}")
                logger.info("TaskStore migration: added column %s", name)

            add_col("description", "TEXT NOT NULL DEFAULT ''")
            add_col("category", "TEXT NOT NULL DEFAULT 'Medium'")
            add_col("completed", "INTEGER NOT NULL DEFAULT 0")
            add_col("updated_at", "TEXT NOT NULL DEFAULT ''")

            cur.execute("CREATE INDEX IF NOT EXISTS idx_tasks_created ON tasks(created_at)")
            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task:
        due_raw = str(row["due_date"] or "")
        return Task(
            id=str(row["id"]),
            title=str(row["title"] or ""),
            description=str(row["description"] or ""),
            due_at=parse_instant(due_raw),
            category=str(row["category"] or DEFAULT_CATEGORY),
            completed=bool(row["completed"]),
            created_at=parse_instant(row["created_at"]),
            updated_at=parse_instant(row["updated_at"]),
            due_raw=due_raw,
        )

    @staticmethod
    def _clean_fields(payload: Mapping[str, Any], *, creating: bool) -> dict[str, Any]:
        """
        Validate wire fields and convert them to column values.

        On create, title and dueDate are required; on update only the keys
        present are checked. Unknown keys are ignored.
        """
        out: dict[str, Any] = {}

        if "title" in payload or creating:
            title = payload.get("title")
            if not isinstance(title, str) or not title.strip():
                raise TaskValidationError("title is required")
            out["title"] = title.strip()

        if "dueDate" in payload or creating:
            raw_due = payload.get("dueDate")
            if raw_due is None or raw_due == "":
                raise TaskValidationError("dueDate is required")
            due_at = parse_instant(raw_due)
            if due_at is None:
                raise TaskValidationError(f"dueDate is not a valid timestamp: {raw_due!r}")
            out["due_date"] = format_instant(due_at)

        if "description" in payload:
            desc = payload.get("description")
            if desc is not None and not isinstance(desc, str):
                raise TaskValidationError("description must be a string")
            out["description"] = (desc or "").strip()

        if "category" in payload:
            cat = payload.get("category")
            if cat is not None and not isinstance(cat, str):
                raise TaskValidationError("category must be a string")
            out["category"] = (cat or "").strip() or DEFAULT_CATEGORY

        if "completed" in payload:
            completed = payload.get("completed")
            if not isinstance(completed, bool):
                raise TaskValidationError("completed must be a boolean")
            out["completed"] = int(completed)

        return out

    # ---- public API ----

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
        """All tasks, newest-created first."""
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT * FROM tasks ORDER BY created_at DESC, rowid DESC")
            return [self._row_to_task(r) for r in cur.fetchall()]
        finally:
            conn.close()

    def get_task(self, task_id: str) -> Task | None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT * FROM tasks WHERE id = ?", (str(task_id),))
            row = cur.fetchone()
            return self._row_to_task(row) if row else None
        finally:
            conn.close()

    def create_task(self, payload: Mapping[str, Any]) -> Task:
        fields = self._clean_fields(payload, creating=True)

        now = utc_now()
        created_at = parse_instant(payload.get("createdAt")) or now
        task_id = uuid.uuid4().hex

        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO tasks(
                    id, title, description, due_date, category,
                    completed, created_at, updated_at
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    task_id,
                    fields["title"],
                    fields.get("description", ""),
                    fields["due_date"],
                    fields.get("category", DEFAULT_CATEGORY),
                    fields.get("completed", 0),
                    format_instant(created_at),
                    format_instant(now),
                ),
            )
            conn.commit()
        finally:
            conn.close()

        logger.debug("Task added id=%s due=%s", task_id, fields["due_date"])
        task = self.get_task(task_id)
        if task is None:
            raise RuntimeError(f"Task {task_id} vanished right after insert")
        return task

    def update_task(self, task_id: str, changes: Mapping[str, Any]) -> Task | None:
        """
        Partial update. updatedAt is always refreshed, whatever the caller sent.

        Returns None when the id is unknown.
        """
        fields = self._clean_fields(
            {k: v for k, v in changes.items() if k in _UPDATABLE_FIELDS},
            creating=False,
        )

        current = self.get_task(task_id)
        if current is None:
            return None

        now = utc_now()
        # Keep updatedAt monotonic even if the clock stepped back.
        if current.updated_at is not None and current.updated_at > now:
            now = current.updated_at

        assignments = [f"{col} = ?" for col in fields]
        params: list[Any] = list(fields.values())
        assignments.append("updated_at = ?")
        params.append(format_instant(now))
        params.append(str(task_id))

        sql = f"UPDATE tasks SET {', '.join(assignments)} WHERE id = ?"

        conn = self._get_conn()
        try:
            cur = conn.execute(sql, params)
            conn.commit()
            if cur.rowcount != 1:
                return None
        finally:
            conn.close()

        logger.debug("Task updated id=%s fields=%s", task_id, sorted(fields))
        return self.get_task(task_id)

    def delete_task(self, task_id: str) -> bool:
        conn = self._get_conn()
        try:
            cur = conn.execute("DELETE FROM tasks WHERE id = ?", (str(task_id),))
            conn.commit()
            deleted = cur.rowcount == 1
        finally:
            conn.close()
        if deleted:
            logger.debug("Task deleted id=%s", task_id)
        return deleted

    def delete_all(self) -> int:
        conn = self._get_conn()
        try:
            cur = conn.execute("DELETE FROM tasks")
            conn.commit()
            n = int(cur.rowcount)
        finally:
            conn.close()
        logger.info("TaskStore purged %d tasks", n)
        return n
