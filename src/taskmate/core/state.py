# src/taskmate/core/state.py

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace
from enum import StrEnum

from ..tasks.task_models import Task
from .filtering import visible_tasks
from .view_state import EmptyState, TaskFilter, View, empty_state, filter_for_view


class NoticeLevel(StrEnum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class Notice:
    """Transient user-visible message (a toast in a browser UI)."""

    level: NoticeLevel
    text: str


@dataclass(frozen=True, slots=True)
class BoardState:
    """
    Everything the views are computed from.

    `tasks` is a cache of the store: fully replaced on load, then patched by id
    after each successful mutation. It is never touched by a failed one.
    """

    tasks: tuple[Task, ...] = ()
    view: View = View.TIMELINE
    search_term: str = ""
    show_time_slots: bool = True
    editing_id: str | None = None
    is_loading: bool = False
    error: str | None = None

    @property
    def task_filter(self) -> TaskFilter:
        return filter_for_view(self.view)

    def find(self, task_id: str) -> Task | None:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    def visible(self) -> list[Task]:
        return visible_tasks(self.tasks, self.view, self.search_term)

    def empty_state(self) -> EmptyState:
        return empty_state(self.view)


# ---- collection patches (pure) ----


def replace_tasks(state: BoardState, tasks: Iterable[Task]) -> BoardState:
    return replace(state, tasks=tuple(tasks))


def insert_task(state: BoardState, task: Task) -> BoardState:
    return replace(state, tasks=(*state.tasks, task))


def replace_task(state: BoardState, task: Task) -> BoardState:
    return replace(state, tasks=tuple(task if t.id == task.id else t for t in state.tasks))


def remove_task(state: BoardState, task_id: str) -> BoardState:
    return replace(state, tasks=tuple(t for t in state.tasks if t.id != task_id))
