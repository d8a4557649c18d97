# src/taskmate/core/forms.py

"""
Task form handling: turn raw user input into a validated draft.

Checked here, before any network call: a request with an empty title or a
bad date/time would be rejected by the store anyway.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, tzinfo
from typing import Any

from ..errors import TaskValidationError
from ..tasks.task_models import DEFAULT_CATEGORY, Task, format_instant


@dataclass(frozen=True, slots=True)
class TaskDraft:
    title: str
    description: str
    due_at: datetime
    category: str

    def to_create_payload(self, now: datetime) -> dict[str, Any]:
        stamp = format_instant(now)
        return {
            "title": self.title,
            "description": self.description,
            "dueDate": format_instant(self.due_at),
            "category": self.category,
            "completed": False,
            "createdAt": stamp,
            "updatedAt": stamp,
        }

    def to_update_payload(self, now: datetime) -> dict[str, Any]:
        # Editing never touches the completion flag.
        return {
            "title": self.title,
            "description": self.description,
            "dueDate": format_instant(self.due_at),
            "category": self.category,
            "updatedAt": format_instant(now),
        }


def build_draft(
    *,
    title: str,
    description: str = "",
    due_date: str,
    due_time: str,
    category: str = DEFAULT_CATEGORY,
    tz: tzinfo,
) -> TaskDraft:
    """
    Validate form input. `due_date` is YYYY-MM-DD, `due_time` is HH:MM, both
    read as wall-clock values in `tz`.
    """
    title = (title or "").strip()
    if not title:
        raise TaskValidationError("Title is required")

    due_date = (due_date or "").strip()
    due_time = (due_time or "").strip()
    if not due_date or not due_time:
        raise TaskValidationError("Due date and time are required")

    try:
        day = date.fromisoformat(due_date)
        clock = time.fromisoformat(due_time)
    except ValueError:
        raise TaskValidationError("Invalid date or time") from None

    return TaskDraft(
        title=title,
        description=(description or "").strip(),
        due_at=datetime.combine(day, clock.replace(tzinfo=None), tzinfo=tz),
        category=(category or "").strip() or DEFAULT_CATEGORY,
    )


def draft_fields_from_task(task: Task, tz: tzinfo) -> dict[str, str]:
    """Prefill values for editing an existing task."""
    fields = {
        "title": task.title,
        "description": task.description,
        "due_date": "",
        "due_time": "",
        "category": task.category or DEFAULT_CATEGORY,
    }
    if task.due_at is not None:
        local = task.due_at.astimezone(tz)
        fields["due_date"] = local.date().isoformat()
        fields["due_time"] = local.strftime("%H:%M")
    return fields
