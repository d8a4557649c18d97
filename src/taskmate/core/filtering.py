# src/taskmate/core/filtering.py

from __future__ import annotations

from collections.abc import Iterable

from ..tasks.task_models import Task
from .view_state import TaskFilter, View, filter_for_view


def matches_search(task: Task, search_term: str) -> bool:
    """Case-insensitive substring match on title or description."""
    if not search_term:
        return True
    needle = search_term.casefold()
    return needle in task.title.casefold() or needle in (task.description or "").casefold()


def matches_filter(task: Task, task_filter: TaskFilter) -> bool:
    if task_filter is TaskFilter.COMPLETED:
        return task.completed
    if task_filter is TaskFilter.PENDING:
        return not task.completed
    return True


def filter_tasks(tasks: Iterable[Task], task_filter: TaskFilter, search_term: str = "") -> list[Task]:
    return [t for t in tasks if matches_search(t, search_term) and matches_filter(t, task_filter)]


def _due_key(task: Task) -> tuple[bool, float]:
    # With reverse=True: dated tasks first (latest due first), undated last.
    if task.due_at is None:
        return (False, 0.0)
    return (True, task.due_at.timestamp())


def sort_tasks(tasks: Iterable[Task], view: View) -> list[Task]:
    """
    Order by due date, latest first. In the "all" view incomplete tasks come
    before completed ones.

    Both passes are stable, so tasks with equal due dates keep collection order.
    """
    ordered = sorted(tasks, key=_due_key, reverse=True)
    if view is View.ALL:
        ordered.sort(key=lambda t: t.completed)
    return ordered


def visible_tasks(tasks: Iterable[Task], view: View, search_term: str = "") -> list[Task]:
    """The one filter/sort pipeline: the filter is derived from the view."""
    return sort_tasks(filter_tasks(tasks, filter_for_view(view), search_term), view)
