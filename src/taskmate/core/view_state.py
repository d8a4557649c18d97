# src/taskmate/core/view_state.py

"""
View selection policy.

`View` is the single source of truth; the task filter is always derived
from it. Selecting a filter directly maps back onto a view, so the two can
never disagree.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class View(StrEnum):
    TIMELINE = "timeline"
    COMPLETED = "completed"
    ALL = "all"

    @classmethod
    def parse(cls, raw: str) -> View:
        try:
            return cls((raw or "").strip().lower())
        except ValueError:
            choices = ", ".join(v.value for v in cls)
            raise ValueError(f"Unknown view {raw!r} (expected one of: {choices})") from None


class TaskFilter(StrEnum):
    ALL = "all"
    PENDING = "pending"
    COMPLETED = "completed"

    @classmethod
    def parse(cls, raw: str) -> TaskFilter:
        try:
            return cls((raw or "").strip().lower())
        except ValueError:
            choices = ", ".join(f.value for f in cls)
            raise ValueError(f"Unknown filter {raw!r} (expected one of: {choices})") from None


_FILTER_BY_VIEW: dict[View, TaskFilter] = {
    View.TIMELINE: TaskFilter.PENDING,
    View.COMPLETED: TaskFilter.COMPLETED,
    View.ALL: TaskFilter.ALL,
}

_VIEW_BY_FILTER: dict[TaskFilter, View] = {f: v for v, f in _FILTER_BY_VIEW.items()}


def filter_for_view(view: View) -> TaskFilter:
    return _FILTER_BY_VIEW[view]


def view_for_filter(task_filter: TaskFilter) -> View:
    return _VIEW_BY_FILTER[task_filter]


def view_after_toggle(view: View, completed: bool) -> View:
    """Completing a task from the timeline moves the user to the completed view."""
    if completed and view is View.TIMELINE:
        return View.COMPLETED
    return view


@dataclass(frozen=True, slots=True)
class EmptyState:
    headline: str
    hint: str


_EMPTY_STATES: dict[View, EmptyState] = {
    View.TIMELINE: EmptyState("No pending tasks", "Add a new task to get started"),
    View.COMPLETED: EmptyState("No completed tasks yet", "Complete some tasks to see them here"),
    View.ALL: EmptyState("No tasks found", "Add your first task to get started"),
}


def empty_state(view: View) -> EmptyState:
    return _EMPTY_STATES[view]
