# src/taskmate/core/board.py

"""
TaskBoard: the single owner of board state.

Every triggering event (load finished, user input, mutation finished) goes
through one method here, which computes the next BoardState synchronously.
Only the four CRUD calls await the gateway. Failures are recovered at this
boundary: the collection stays as it was, `error` is set and an error notice
is emitted.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime, tzinfo

from ..errors import TaskMateError, TaskValidationError
from ..tasks.task_models import Task, format_instant, utc_now
from .forms import TaskDraft
from .ports import TaskGateway
from .state import (
    BoardState,
    Notice,
    NoticeLevel,
    insert_task,
    remove_task,
    replace_task,
    replace_tasks,
)
from .timeline import TimelineLayout, layout_timeline
from .view_state import TaskFilter, View, view_after_toggle, view_for_filter

logger = logging.getLogger(__name__)

NotifyFn = Callable[[Notice], None]
Clock = Callable[[], datetime]


class TaskBoard:
    def __init__(
        self,
        gateway: TaskGateway,
        *,
        tz: tzinfo,
        clock: Clock = utc_now,
        notify: NotifyFn | None = None,
        state: BoardState | None = None,
    ) -> None:
        self._gateway = gateway
        self._tz = tz
        self._clock = clock
        self._notify_fn = notify
        self._state = state or BoardState()

    @property
    def state(self) -> BoardState:
        return self._state

    @property
    def tz(self) -> tzinfo:
        return self._tz

    def now(self) -> datetime:
        return self._clock()

    # ---- internals ----

    def _set(self, state: BoardState) -> None:
        self._state = state

    def _notify(self, level: NoticeLevel, text: str) -> None:
        if self._notify_fn is None:
            return
        self._notify_fn(Notice(level=level, text=text))

    def _fail(self, message: str, exc: TaskMateError) -> None:
        logger.warning("%s: %s", message, exc)
        self._set(replace(self._state, error=message))
        self._notify(NoticeLevel.ERROR, message)

    def _require(self, task_id: str) -> Task:
        task = self._state.find(task_id)
        if task is None:
            raise TaskValidationError(f"Unknown task id: {task_id}")
        return task

    # ---- data events ----

    async def load(self) -> bool:
        """Replace the cached collection with the store's."""
        self._set(replace(self._state, is_loading=True))
        try:
            tasks = await self._gateway.list_tasks()
        except TaskMateError as exc:
            self._fail("Failed to fetch tasks", exc)
            return False
        finally:
            self._set(replace(self._state, is_loading=False))

        self._set(replace(replace_tasks(self._state, tasks), error=None))
        logger.info("Loaded %d tasks", len(tasks))
        return True

    async def add(self, draft: TaskDraft) -> Task | None:
        self._set(replace(self._state, is_loading=True))
        try:
            task = await self._gateway.create_task(draft.to_create_payload(self.now()))
        except TaskMateError as exc:
            self._fail("Failed to add task", exc)
            return None
        finally:
            self._set(replace(self._state, is_loading=False))

        self._set(insert_task(self._state, task))
        self._notify(NoticeLevel.SUCCESS, "Task added successfully!")
        return task

    async def update(self, task_id: str, draft: TaskDraft) -> Task | None:
        self._set(replace(self._state, is_loading=True))
        try:
            task = await self._gateway.update_task(task_id, draft.to_update_payload(self.now()))
        except TaskMateError as exc:
            self._fail("Failed to update task", exc)
            return None
        finally:
            self._set(replace(self._state, is_loading=False))

        self._set(replace(replace_task(self._state, task), editing_id=None))
        self._notify(NoticeLevel.SUCCESS, "Task updated successfully!")
        return task

    async def save(self, draft: TaskDraft) -> Task | None:
        """Submit the form: update the task being edited, otherwise create."""
        if self._state.editing_id is not None:
            return await self.update(self._state.editing_id, draft)
        return await self.add(draft)

    async def delete(self, task_id: str) -> bool:
        self._set(replace(self._state, is_loading=True))
        try:
            await self._gateway.delete_task(task_id)
        except TaskMateError as exc:
            self._fail("Failed to delete task", exc)
            return False
        finally:
            self._set(replace(self._state, is_loading=False))

        state = remove_task(self._state, task_id)
        if state.editing_id == task_id:
            state = replace(state, editing_id=None)
        self._set(state)
        self._notify(NoticeLevel.SUCCESS, "Task deleted successfully!")
        return True

    async def toggle_complete(self, task_id: str, completed: bool) -> Task | None:
        """Partial update of exactly {completed, updatedAt}."""
        changes = {"completed": completed, "updatedAt": format_instant(self.now())}
        try:
            task = await self._gateway.update_task(task_id, changes)
        except TaskMateError as exc:
            self._fail("Failed to update task status", exc)
            return None

        state = replace_task(self._state, task)
        self._set(replace(state, view=view_after_toggle(state.view, task.completed)))
        self._notify(
            NoticeLevel.SUCCESS,
            "Task completed!" if task.completed else "Task marked as pending!",
        )
        return task

    # ---- UI events ----

    def set_view(self, view: View) -> None:
        self._set(replace(self._state, view=view))

    def select_filter(self, task_filter: TaskFilter) -> None:
        self._set(replace(self._state, view=view_for_filter(task_filter)))

    def set_search(self, term: str) -> None:
        self._set(replace(self._state, search_term=term or ""))

    def toggle_time_slots(self) -> bool:
        self._set(replace(self._state, show_time_slots=not self._state.show_time_slots))
        return self._state.show_time_slots

    def start_edit(self, task_id: str) -> Task:
        task = self._require(task_id)
        self._set(replace(self._state, editing_id=task.id))
        return task

    def cancel_edit(self) -> None:
        self._set(replace(self._state, editing_id=None))

    def dismiss_error(self) -> None:
        self._set(replace(self._state, error=None))

    # ---- derived views ----

    def visible(self) -> list[Task]:
        return self._state.visible()

    def layout(self) -> TimelineLayout:
        return layout_timeline(
            self.visible(),
            now=self.now(),
            tz=self._tz,
            show_time_slots=self._state.show_time_slots,
        )
