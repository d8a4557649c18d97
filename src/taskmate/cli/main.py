# src/taskmate/cli/main.py

"""
CLI entrypoint.

Initializes logging, then runs one of:
- serve:   the REST API over the SQLite store
- console: the interactive board against API_BASE_URL
- purge:   delete every stored task
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import signal
import sys

from ..config import Settings, get_settings
from ..connectors.console_connector import print_notice, run_console_loop
from ..logging_setup import setup_logging
from .bootstrap import create_board, create_server_app, create_store

logger = logging.getLogger(__name__)


def _serve(settings: Settings) -> int:
    app = create_server_app(settings=settings)

    def _handle_signal(signum, _frame) -> None:
        logger.info("Signal %s received, shutting down...", signum)
        raise SystemExit(0)

    try:
        signal.signal(signal.SIGTERM, _handle_signal)
    except (ValueError, OSError):
        # Not available on every platform / outside the main thread.
        logger.debug("SIGTERM handler not installed.", exc_info=True)

    logger.info("Serving %s on http://%s:%s/api", settings.app_name, settings.host, settings.port)
    try:
        app.run(host=settings.host, port=settings.port, debug=settings.debug, use_reloader=False)
    except KeyboardInterrupt:
        logger.info("Interrupted.")
    return 0


async def _console(settings: Settings) -> int:
    board, client = create_board(settings=settings, notify=print_notice)
    async with client:
        await run_console_loop(board)
    return 0


def _purge(settings: Settings, *, assume_yes: bool) -> int:
    store = create_store(settings=settings)
    if not assume_yes:
        answer = input(f"Delete all {store.count_tasks()} tasks in {store.db_path}? [y/N] ")
        if answer.strip().lower() not in ("y", "yes"):
            print("Aborted.")
            return 1
    n = store.delete_all()
    print(f"All tasks have been deleted ({n}).")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="taskmate", description="Personal task manager.")
    sub = parser.add_subparsers(dest="command")
    sub.add_parser("serve", help="Run the REST API.")
    sub.add_parser("console", help="Interactive board (talks to the REST API).")
    purge = sub.add_parser("purge", help="Delete every stored task.")
    purge.add_argument("-y", "--yes", action="store_true", help="Do not ask for confirmation.")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()

    level_name = str(settings.log_level).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s (%s)...", settings.app_name, args.command or "console")

    if args.command == "serve":
        return _serve(settings)
    if args.command == "purge":
        return _purge(settings, assume_yes=args.yes)

    try:
        return asyncio.run(_console(settings))
    except KeyboardInterrupt:
        return 0
    finally:
        logger.info("Bye.")


if __name__ == "__main__":
    sys.exit(main())
