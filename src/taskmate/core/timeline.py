# src/taskmate/core/timeline.py

"""
Timeline layout.

Maps tasks onto a rolling 14-day x 24-hour grid anchored at local midnight
of the current day. All positions are fractions (0..1) of the grid width or
height; scaling to pixels/characters belongs to the renderer.

Two modes share the same day-column computation:
- grid mode (time slots shown): vertical position from hour + minute
- list mode (time slots hidden): tasks stack inside their day column in
  the order they were given

Layout of one task never depends on another task; overlaps are left to
the renderer.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo
from enum import StrEnum

from ..tasks.task_models import Category, Task

logger = logging.getLogger(__name__)

DAYS_TO_SHOW = 14
HOURS_PER_DAY = 24


class Tone(StrEnum):
    """Visual classification of a task card."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    DEFAULT = "default"
    MUTED = "muted"


_TONE_BY_CATEGORY: dict[Category, Tone] = {
    Category.HIGH: Tone.HIGH,
    Category.MEDIUM: Tone.MEDIUM,
    Category.LOW: Tone.LOW,
}


@dataclass(frozen=True, slots=True)
class TimelineDay:
    index: int
    day: date
    is_today: bool


@dataclass(frozen=True, slots=True)
class TaskPlacement:
    task: Task
    column: int
    left: float
    width: float
    # Grid mode only.
    top: float | None
    # List mode only: position inside the day column.
    slot: int | None
    tone: Tone
    overdue: bool


@dataclass(frozen=True, slots=True)
class TimelineLayout:
    days: tuple[TimelineDay, ...]
    placements: tuple[TaskPlacement, ...]
    skipped: tuple[str, ...]
    show_time_slots: bool

    def column(self, index: int) -> list[TaskPlacement]:
        return [p for p in self.placements if p.column == index]


def start_of_day(now: datetime, tz: tzinfo) -> date:
    """The local calendar day of `now` in `tz` (the grid's column 0)."""
    return now.astimezone(tz).date()


def day_column(due_at: datetime, today: date, tz: tzinfo) -> int:
    """Calendar-day offset from today, clamped to the visible columns."""
    offset = (due_at.astimezone(tz).date() - today).days
    return max(0, min(offset, DAYS_TO_SHOW - 1))


def hour_fraction(due_at: datetime, tz: tzinfo) -> float:
    local = due_at.astimezone(tz)
    return (local.hour + local.minute / 60) / HOURS_PER_DAY


def task_tone(task: Task) -> Tone:
    if task.completed:
        return Tone.MUTED
    label = task.category_label
    if label is None:
        return Tone.DEFAULT
    return _TONE_BY_CATEGORY[label]


def place_task(
    task: Task,
    *,
    today: date,
    now: datetime,
    tz: tzinfo,
    show_time_slots: bool = True,
    slot: int = 0,
) -> TaskPlacement:
    if task.due_at is None:
        raise ValueError(f"Task {task.id} has no valid due date")

    column = day_column(task.due_at, today, tz)
    return TaskPlacement(
        task=task,
        column=column,
        left=column / DAYS_TO_SHOW,
        width=1 / DAYS_TO_SHOW,
        top=hour_fraction(task.due_at, tz) if show_time_slots else None,
        slot=None if show_time_slots else slot,
        tone=task_tone(task),
        overdue=task.is_overdue(now),
    )


def timeline_days(today: date) -> tuple[TimelineDay, ...]:
    return tuple(
        TimelineDay(index=i, day=today + timedelta(days=i), is_today=(i == 0))
        for i in range(DAYS_TO_SHOW)
    )


def layout_timeline(
    tasks: Iterable[Task],
    *,
    now: datetime,
    tz: tzinfo,
    show_time_slots: bool = True,
) -> TimelineLayout:
    """
    Lay out `tasks` (already filtered and sorted) on the grid.

    Tasks whose due date did not parse are skipped and reported, never raised.
    """
    today = start_of_day(now, tz)

    placements: list[TaskPlacement] = []
    skipped: list[str] = []
    stack_depth: dict[int, int] = {}

    for task in tasks:
        if task.due_at is None:
            logger.warning("Skipping task id=%s from timeline: bad dueDate=%r", task.id, task.due_raw)
            skipped.append(task.id)
            continue

        column = day_column(task.due_at, today, tz)
        slot = stack_depth.get(column, 0)
        stack_depth[column] = slot + 1

        placements.append(
            place_task(
                task,
                today=today,
                now=now,
                tz=tz,
                show_time_slots=show_time_slots,
                slot=slot,
            )
        )

    return TimelineLayout(
        days=timeline_days(today),
        placements=tuple(placements),
        skipped=tuple(skipped),
        show_time_slots=show_time_slots,
    )
