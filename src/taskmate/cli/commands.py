# src/taskmate/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from ..connectors.render import render_board
from ..core.board import TaskBoard
from ..core.forms import build_draft, draft_fields_from_task
from ..core.view_state import TaskFilter, View
from ..errors import TaskValidationError
from ..tasks.task_models import DEFAULT_CATEGORY, Task

CommandEmitter = Callable[[str], None]
CommandHandler = Callable[[TaskBoard, str, CommandEmitter | None], Awaitable[str]]

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    async def handle(
        self,
        board: TaskBoard,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        name, _, args = line[1:].strip().partition(" ")
        if not name:
            return "Empty command. Use /help to list available commands."

        handler = self._handlers.get(name.lower())
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            return await handler(board, args.strip(), emit)
        except (ValueError, TaskValidationError) as exc:
            return str(exc)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _resolve(board: TaskBoard, token: str) -> Task:
    """Map a 1-based position in the visible list to a task."""
    token = token.strip()
    if not token:
        raise ValueError("Missing task number.")
    try:
        index = int(token)
    except ValueError:
        raise ValueError(f"Not a task number: {token!r}") from None
    visible = board.visible()
    if not 1 <= index <= len(visible):
        raise ValueError(f"No task #{index} in the current view.")
    return visible[index - 1]


def _form_defaults(board: TaskBoard) -> dict[str, str]:
    editing = board.state.editing_id
    task = board.state.find(editing) if editing else None
    if task is not None:
        return draft_fields_from_task(task, board.tz)
    local_now = board.now().astimezone(board.tz)
    return {
        "title": "",
        "description": "",
        "due_date": local_now.date().isoformat(),
        "due_time": local_now.strftime("%H:%M"),
        "category": DEFAULT_CATEGORY,
    }


_FORM_ORDER = ("title", "due_date", "due_time", "category", "description")


async def cmd_help(board: TaskBoard, args: str, emit: CommandEmitter | None = None) -> str:
    return registry.build_help()


async def cmd_list(board: TaskBoard, args: str, emit: CommandEmitter | None = None) -> str:
    return render_board(board)


async def cmd_reload(board: TaskBoard, args: str, emit: CommandEmitter | None = None) -> str:
    await board.load()
    return render_board(board)


async def cmd_view(board: TaskBoard, args: str, emit: CommandEmitter | None = None) -> str:
    """
    /view             -> show current view
    /view timeline    -> pending tasks on the 2-week grid
    /view completed   -> completed tasks list
    /view all         -> every task, pending first
    """
    if not args:
        return f"Current view: {board.state.view.value} (filter: {board.state.task_filter.value})"
    board.set_view(View.parse(args))
    return render_board(board)


async def cmd_filter(board: TaskBoard, args: str, emit: CommandEmitter | None = None) -> str:
    if not args:
        return f"Current filter: {board.state.task_filter.value}"
    board.select_filter(TaskFilter.parse(args))
    return render_board(board)


async def cmd_search(board: TaskBoard, args: str, emit: CommandEmitter | None = None) -> str:
    board.set_search(args)
    return render_board(board)


async def cmd_slots(board: TaskBoard, args: str, emit: CommandEmitter | None = None) -> str:
    board.toggle_time_slots()
    return render_board(board)


async def cmd_add(board: TaskBoard, args: str, emit: CommandEmitter | None = None) -> str:
    """
    /add Title | YYYY-MM-DD | HH:MM | High|Medium|Low | description

    Empty fields keep their defaults (now, Medium), or the current values of
    the task being edited.
    """
    fields = _form_defaults(board)
    for key, raw in zip(_FORM_ORDER, args.split("|")):
        if raw.strip():
            fields[key] = raw.strip()

    draft = build_draft(
        title=fields["title"],
        description=fields["description"],
        due_date=fields["due_date"],
        due_time=fields["due_time"],
        category=fields["category"],
        tz=board.tz,
    )
    task = await board.save(draft)
    if task is None:
        return board.state.error or "Task was not saved."
    return render_board(board)


async def cmd_edit(board: TaskBoard, args: str, emit: CommandEmitter | None = None) -> str:
    task = board.start_edit(_resolve(board, args).id)
    f = draft_fields_from_task(task, board.tz)
    return (
        f"Editing: {task.title}\n"
        f"  {f['title']} | {f['due_date']} | {f['due_time']} | {f['category']} | {f['description']}\n"
        "Use /save with the fields to change (empty fields are kept), or /cancel."
    )


async def cmd_cancel(board: TaskBoard, args: str, emit: CommandEmitter | None = None) -> str:
    board.cancel_edit()
    return "Edit cancelled."


async def cmd_done(board: TaskBoard, args: str, emit: CommandEmitter | None = None) -> str:
    task = _resolve(board, args)
    await board.toggle_complete(task.id, True)
    return render_board(board)


async def cmd_undo(board: TaskBoard, args: str, emit: CommandEmitter | None = None) -> str:
    task = _resolve(board, args)
    await board.toggle_complete(task.id, False)
    return render_board(board)


async def cmd_delete(board: TaskBoard, args: str, emit: CommandEmitter | None = None) -> str:
    task = _resolve(board, args)
    await board.delete(task.id)
    return render_board(board)


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="Show the current view.", aliases=["ls"])
registry.register("reload", cmd_reload, help_text="Fetch all tasks again.")
registry.register("view", cmd_view, help_text="Switch view: /view timeline | completed | all.")
registry.register("filter", cmd_filter, help_text="Filter: /filter pending | completed | all.")
registry.register("search", cmd_search, help_text="Search title/description: /search <text> (empty clears).")
registry.register("slots", cmd_slots, help_text="Show/hide time slots on the timeline.")
registry.register(
    "add",
    cmd_add,
    help_text="Add (or save the edited) task: /add Title | YYYY-MM-DD | HH:MM | Category | Description.",
    aliases=["save"],
)
registry.register("edit", cmd_edit, help_text="Edit task #N: /edit N, then /save ...")
registry.register("cancel", cmd_cancel, help_text="Cancel editing.")
registry.register("done", cmd_done, help_text="Mark task #N completed.")
registry.register("undo", cmd_undo, help_text="Mark task #N pending again.")
registry.register("delete", cmd_delete, help_text="Delete task #N.", aliases=["rm"])
