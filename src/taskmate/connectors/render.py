# src/taskmate/connectors/render.py

"""Plain-text rendering of the board for the console connector."""

from __future__ import annotations

from datetime import datetime, tzinfo

from ..core.board import TaskBoard
from ..core.state import BoardState
from ..core.timeline import TaskPlacement, TimelineLayout, Tone
from ..core.view_state import View
from ..tasks.task_models import Task

TONE_MARKERS: dict[Tone, str] = {
    Tone.HIGH: "[H]",
    Tone.MEDIUM: "[M]",
    Tone.LOW: "[L]",
    Tone.DEFAULT: "[*]",
    Tone.MUTED: "[x]",
}

LIST_TITLES: dict[View, str] = {
    View.COMPLETED: "Completed Tasks",
    View.ALL: "All Tasks",
    View.TIMELINE: "Timeline",
}


def format_task_time(dt: datetime, tz: tzinfo) -> str:
    """12-hour clock, e.g. 9:05 AM."""
    local = dt.astimezone(tz)
    hours = local.hour % 12 or 12
    ampm = "PM" if local.hour >= 12 else "AM"
    return f"{hours}:{local.minute:02d} {ampm}"


def format_due_line(task: Task, tz: tzinfo) -> str:
    if task.due_at is None:
        return f"Due: invalid date ({task.due_raw!r})"
    local = task.due_at.astimezone(tz)
    return f"Due: {local:%b} {local.day}, {local.year} at {format_task_time(task.due_at, tz)}"


def format_completed_line(task: Task, tz: tzinfo) -> str:
    if not task.completed or task.updated_at is None:
        return ""
    local = task.updated_at.astimezone(tz)
    return f"Completed: {local:%b} {local.day} at {format_task_time(task.updated_at, tz)}"


def render_empty(state: BoardState) -> str:
    empty = state.empty_state()
    return f"{empty.headline}\n  {empty.hint}"


def render_card(index: int, task: Task, *, tz: tzinfo, now: datetime) -> str:
    check = "x" if task.completed else " "
    lines = [f"{index:>3}. [{check}] {task.title}  ({task.category})"]
    if task.description:
        lines.append(f"       {task.description}")
    meta = format_due_line(task, tz)
    done = format_completed_line(task, tz)
    if done:
        meta = f"{meta}  |  {done}"
    if task.is_overdue(now):
        meta = f"{meta}  |  OVERDUE"
    lines.append(f"       {meta}")
    return "\n".join(lines)


def render_list(state: BoardState, tasks: list[Task], *, tz: tzinfo, now: datetime) -> str:
    title = LIST_TITLES[state.view]
    out = [title, "-" * len(title)]
    out.extend(render_card(i, t, tz=tz, now=now) for i, t in enumerate(tasks, start=1))
    return "\n".join(out)


def _header(layout: TimelineLayout) -> str:
    cells = []
    for d in layout.days:
        cell = f"{d.day:%a} {d.day.day}"
        cells.append(f"*{cell}*" if d.is_today else cell)
    return " | ".join(cells)


def _placement_line(p: TaskPlacement, index: int, *, tz: tzinfo, show_time_slots: bool) -> str:
    marker = TONE_MARKERS[p.tone]
    overdue = " OVERDUE" if p.overdue else ""
    if show_time_slots and p.task.due_at is not None:
        when = p.task.due_at.astimezone(tz).strftime("%H:%M")
    else:
        when = f"#{(p.slot or 0) + 1}"
    return f"    {index:>3}. {when:>5} {marker} {p.task.title}{overdue}"


def render_timeline(layout: TimelineLayout, order: dict[str, int], *, tz: tzinfo) -> str:
    """
    One block per non-empty day column. Grid mode sorts a column by its
    vertical position; list mode keeps the stacking order.
    """
    out = [_header(layout)]
    for d in layout.days:
        column = layout.column(d.index)
        if not column:
            continue
        if layout.show_time_slots:
            column.sort(key=lambda p: p.top or 0.0)
        else:
            column.sort(key=lambda p: p.slot or 0)
        today = " (today)" if d.is_today else ""
        out.append(f"  {d.day:%a %b} {d.day.day}{today}")
        for p in column:
            out.append(
                _placement_line(p, order[p.task.id], tz=tz, show_time_slots=layout.show_time_slots)
            )
    if layout.skipped:
        out.append(f"  ({len(layout.skipped)} task(s) hidden: invalid due date)")
    return "\n".join(out)


def render_board(board: TaskBoard) -> str:
    state = board.state
    tasks = board.visible()
    if not tasks:
        return render_empty(state)

    now = board.now()
    if state.view in (View.COMPLETED, View.ALL):
        return render_list(state, tasks, tz=board.tz, now=now)

    order = {t.id: i for i, t in enumerate(tasks, start=1)}
    slots = "time slots shown" if state.show_time_slots else "time slots hidden"
    return f"Timeline ({slots})\n" + render_timeline(board.layout(), order, tz=board.tz)
