# src/taskmate/tasks/task_models.py

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import StrEnum
from typing import Any

from ..errors import TaskValidationError

DEFAULT_CATEGORY = "Medium"


class Category(StrEnum):
    """
    Priority labels that get their own styling.

    Notes:
    - the stored value is free text; anything outside this set is tolerated
      and rendered with the fallback style.
    """

    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"

    @classmethod
    def parse(cls, raw: str | None) -> Category | None:
        if not raw:
            return None
        try:
            return cls(raw)
        except ValueError:
            return None


def parse_instant(raw: Any) -> datetime | None:
    """
    Parse an ISO-8601 timestamp into an aware datetime.

    Naive values are taken as UTC. Returns None for anything unparseable.
    """
    if isinstance(raw, datetime):
        dt = raw
    elif isinstance(raw, str) and raw.strip():
        try:
            dt = datetime.fromisoformat(raw.strip())
        except ValueError:
            return None
    else:
        return None

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def format_instant(dt: datetime) -> str:
    """UTC, millisecond precision, 'Z' suffix (same shape as JS toISOString)."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    text = dt.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return text.replace("+00:00", "Z")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, slots=True)
class Task:
    id: str
    title: str
    description: str
    due_at: datetime | None
    category: str
    completed: bool
    created_at: datetime | None
    updated_at: datetime | None

    # Raw wire value of dueDate, kept so a bad value can be reported as-is.
    due_raw: str = ""

    @property
    def category_label(self) -> Category | None:
        return Category.parse(self.category)

    def is_overdue(self, now: datetime) -> bool:
        if self.completed or self.due_at is None:
            return False
        return self.due_at < now

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> Task:
        """
        Build a Task from its wire shape (camelCase keys, `_id`).

        Raises TaskValidationError for a malformed record. An unparseable
        dueDate is kept (due_at=None) so the caller can decide what to skip.
        """
        if not isinstance(payload, Mapping):
            raise TaskValidationError(f"Task record must be an object, got {type(payload).__name__}")

        task_id = payload.get("_id")
        if task_id is None or str(task_id).strip() == "":
            raise TaskValidationError("Task record has no _id")

        title = payload.get("title")
        if not isinstance(title, str):
            raise TaskValidationError(f"Task {task_id} has no title")

        completed = payload.get("completed", False)
        if not isinstance(completed, bool):
            raise TaskValidationError(f"Task {task_id} has a non-boolean completed: {completed!r}")

        raw_due = payload.get("dueDate")
        due_raw = raw_due if isinstance(raw_due, str) else ("" if raw_due is None else str(raw_due))

        return cls(
            id=str(task_id),
            title=title,
            description=str(payload.get("description") or ""),
            due_at=parse_instant(raw_due),
            category=str(payload.get("category") or DEFAULT_CATEGORY),
            completed=completed,
            created_at=parse_instant(payload.get("createdAt")),
            updated_at=parse_instant(payload.get("updatedAt")),
            due_raw=due_raw,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "_id": self.id,
            "title": self.title,
            "description": self.description,
            "dueDate": format_instant(self.due_at) if self.due_at is not None else self.due_raw,
            "category": self.category,
            "completed": self.completed,
            "createdAt": format_instant(self.created_at) if self.created_at else None,
            "updatedAt": format_instant(self.updated_at) if self.updated_at else None,
        }
