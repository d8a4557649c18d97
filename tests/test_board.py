# tests/test_board.py

from __future__ import annotations

from datetime import timedelta

import pytest

from taskmate.core.board import TaskBoard
from taskmate.core.forms import build_draft
from taskmate.core.state import BoardState, NoticeLevel
from taskmate.core.view_state import TaskFilter, View
from taskmate.errors import TaskTransportError, TaskValidationError

from .fakes import NOW, TZ, FakeTaskGateway, FixedClock, NoticeSink, make_task


def _board(tasks=None, *, view: View = View.TIMELINE):
    clock = FixedClock()
    gateway = FakeTaskGateway(tasks, clock=clock)
    sink = NoticeSink()
    board = TaskBoard(gateway, tz=TZ, clock=clock, notify=sink, state=BoardState(view=view))
    return board, gateway, sink, clock


def _draft(title: str = "New task", *, due_time: str = "10:00"):
    return build_draft(title=title, due_date="2026-10-19", due_time=due_time, category="High", tz=TZ)


@pytest.mark.asyncio
async def test_load_replaces_collection() -> None:
    board, gateway, sink, _ = _board([make_task("a", due_at=NOW), make_task("b", due_at=NOW)])

    assert await board.load() is True
    assert [t.title for t in board.state.tasks] == ["a", "b"]
    assert board.state.is_loading is False
    assert board.state.error is None
    assert sink.notices == []


@pytest.mark.asyncio
async def test_load_failure_keeps_previous_tasks() -> None:
    board, gateway, sink, _ = _board([make_task("a", due_at=NOW)])
    await board.load()

    gateway.fail_with = TaskTransportError("down")
    assert await board.load() is False

    assert [t.title for t in board.state.tasks] == ["a"]
    assert board.state.error == "Failed to fetch tasks"
    assert board.state.is_loading is False
    assert sink.notices[-1].level is NoticeLevel.ERROR


@pytest.mark.asyncio
async def test_add_appends_and_shows_in_timeline() -> None:
    board, gateway, sink, _ = _board()

    task = await board.add(_draft())

    assert task is not None
    assert board.state.find(task.id) == task
    assert [t.id for t in board.visible()] == [task.id]
    assert sink.texts == ["Task added successfully!"]

    kind, payload = gateway.calls[-1]
    assert kind == "create"
    assert payload["completed"] is False
    assert payload["dueDate"] == "2026-10-19T08:00:00.000Z"


@pytest.mark.asyncio
async def test_add_failure_leaves_collection_unchanged() -> None:
    board, gateway, sink, _ = _board([make_task("a", due_at=NOW)])
    await board.load()
    before = board.state.tasks

    gateway.fail_with = TaskValidationError("Error creating task")
    assert await board.add(_draft()) is None

    assert board.state.tasks == before
    assert board.state.error == "Failed to add task"
    assert sink.texts == ["Failed to add task"]


@pytest.mark.asyncio
async def test_save_updates_task_being_edited() -> None:
    existing = make_task("old title", due_at=NOW, completed=True)
    board, gateway, sink, _ = _board([existing], view=View.ALL)
    await board.load()

    board.start_edit(existing.id)
    assert board.state.editing_id == existing.id

    updated = await board.save(_draft("new title"))

    assert updated is not None and updated.id == existing.id
    assert updated.title == "new title"
    # Editing never resets completion.
    assert updated.completed is True
    assert "completed" not in gateway.calls[-1][1][1]
    assert board.state.editing_id is None
    assert len(board.state.tasks) == 1
    assert sink.texts == ["Task updated successfully!"]


@pytest.mark.asyncio
async def test_update_failure_keeps_edit_open() -> None:
    existing = make_task("a", due_at=NOW)
    board, gateway, sink, _ = _board([existing])
    await board.load()
    board.start_edit(existing.id)

    gateway.fail_with = TaskTransportError("timeout")
    assert await board.save(_draft("b")) is None

    assert board.state.editing_id == existing.id
    assert board.state.find(existing.id).title == "a"  # type: ignore[union-attr]
    assert sink.texts == ["Failed to update task"]


@pytest.mark.asyncio
async def test_delete_removes_from_every_view() -> None:
    task = make_task("gone", due_at=NOW)
    board, gateway, sink, _ = _board([task])
    await board.load()
    board.start_edit(task.id)

    assert await board.delete(task.id) is True

    assert board.state.find(task.id) is None
    assert board.state.editing_id is None
    for view in View:
        board.set_view(view)
        assert board.visible() == []
    assert sink.texts == ["Task deleted successfully!"]


@pytest.mark.asyncio
async def test_delete_unknown_reports_failure() -> None:
    board, gateway, sink, _ = _board([make_task("a", due_at=NOW)])
    await board.load()

    assert await board.delete("missing") is False
    assert len(board.state.tasks) == 1
    assert sink.texts == ["Failed to delete task"]


@pytest.mark.asyncio
async def test_toggle_sends_only_completed_and_updated_at() -> None:
    task = make_task("a", due_at=NOW + timedelta(days=1))
    board, gateway, sink, clock = _board([task])
    await board.load()

    clock.advance(minutes=5)
    done = await board.toggle_complete(task.id, True)

    assert done is not None and done.completed is True
    kind, (task_id, changes) = gateway.calls[-1]
    assert (kind, task_id) == ("update", task.id)
    assert set(changes) == {"completed", "updatedAt"}
    assert changes["completed"] is True
    assert done.updated_at is not None and task.updated_at is not None
    assert done.updated_at > task.updated_at


@pytest.mark.asyncio
async def test_completing_from_timeline_switches_to_completed_view() -> None:
    task = make_task("a", due_at=NOW + timedelta(days=1))
    board, _, sink, _ = _board([task])
    await board.load()

    await board.toggle_complete(task.id, True)

    assert board.state.view is View.COMPLETED
    assert board.state.task_filter is TaskFilter.COMPLETED
    assert [t.id for t in board.visible()] == [task.id]
    assert sink.texts == ["Task completed!"]

    await board.toggle_complete(task.id, False)
    assert board.state.view is View.COMPLETED
    assert board.visible() == []
    assert sink.texts[-1] == "Task marked as pending!"


@pytest.mark.asyncio
async def test_toggle_failure_keeps_state() -> None:
    task = make_task("a", due_at=NOW)
    board, gateway, sink, _ = _board([task])
    await board.load()

    gateway.fail_with = TaskTransportError("down")
    assert await board.toggle_complete(task.id, True) is None

    assert board.state.view is View.TIMELINE
    assert board.state.find(task.id).completed is False  # type: ignore[union-attr]
    assert sink.texts == ["Failed to update task status"]


def test_select_filter_moves_view() -> None:
    board, *_ = _board()
    board.select_filter(TaskFilter.COMPLETED)
    assert board.state.view is View.COMPLETED
    board.select_filter(TaskFilter.ALL)
    assert board.state.view is View.ALL


def test_time_slot_toggle_and_layout_mode() -> None:
    board, *_ = _board()
    assert board.state.show_time_slots is True
    assert board.toggle_time_slots() is False
    assert board.layout().show_time_slots is False
    assert board.toggle_time_slots() is True


def test_start_edit_unknown_id_raises() -> None:
    board, *_ = _board()
    with pytest.raises(TaskValidationError):
        board.start_edit("nope")


@pytest.mark.asyncio
async def test_search_with_no_match_shows_empty_state() -> None:
    board, *_ = _board([make_task("Laundry", due_at=NOW)])
    await board.load()

    board.set_search("zzz")
    assert board.visible() == []
    assert board.state.empty_state().headline == "No pending tasks"

    board.set_search("")
    assert len(board.visible()) == 1


@pytest.mark.asyncio
async def test_dismiss_error_clears_banner() -> None:
    board, gateway, *_ = _board()
    gateway.fail_with = TaskTransportError("down")
    await board.load()
    assert board.state.error is not None

    board.dismiss_error()
    assert board.state.error is None
