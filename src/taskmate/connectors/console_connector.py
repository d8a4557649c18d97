# src/taskmate/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.board import TaskBoard
from ..core.state import Notice, NoticeLevel
from .render import render_board

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


def print_notice(notice: Notice) -> None:
    """Notify callback for TaskBoard: notices show up as one-line toasts."""
    tag = "OK" if notice.level is NoticeLevel.SUCCESS else "ERROR"
    _print_ts(f"[{tag}] {notice.text}")


async def run_console_loop(board: TaskBoard) -> None:
    logger.info("Console connector started.")
    _print_ts("[CONSOLE] Use /help for commands. Use /exit to quit.\n")

    await board.load()
    print(render_board(board), flush=True)

    while True:
        try:
            user_input = (await asyncio.to_thread(input, "> ")).strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        if not user_input.startswith("/"):
            # Bare text is a search, like typing into the search box.
            user_input = f"/search {user_input}"

        try:
            response = await command_registry.handle(board, user_input, emit=_print_ts)
        except Exception:
            logger.exception("Command handler crashed.")
            response = "Internal error while handling a command."

        if response is not None:
            print(response, flush=True)

    logger.info("Console connector finished.")
