# src/taskmate/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires concrete implementations (SQLite store, Flask app, HTTP client, board).
"""

from __future__ import annotations

import logging

from flask import Flask

from ..client.api_client import TaskApiClient
from ..config import Settings, get_settings
from ..core.board import NotifyFn, TaskBoard
from ..server.app import create_app
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings: Settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_db_path.parent.mkdir(parents=True, exist_ok=True)


def create_store(*, settings: Settings | None = None) -> TaskStore:
    """
    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()
    _ensure_local_dirs(settings)
    return TaskStore(settings.tasks_db_path)


def create_server_app(*, settings: Settings | None = None) -> Flask:
    if settings is None:
        settings = get_settings()
    return create_app(create_store(settings=settings), settings=settings)


def create_board(
    *,
    settings: Settings | None = None,
    notify: NotifyFn | None = None,
) -> tuple[TaskBoard, TaskApiClient]:
    """Board wired to the REST API; the caller owns (and must close) the client."""
    if settings is None:
        settings = get_settings()
    client = TaskApiClient(settings.api_base_url, timeout=settings.request_timeout_seconds)
    tz = settings.tz
    logger.info("Board using api=%s tz=%s", settings.api_base_url, tz)
    return TaskBoard(client, tz=tz, notify=notify), client
