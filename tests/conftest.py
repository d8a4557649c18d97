# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest
from flask import Flask
from flask.testing import FlaskClient

from taskmate.server.app import create_app
from taskmate.tasks.task_store import TaskStore


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with the store, the app and the board.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="taskmate-test",
        data_dir=tmp_path,
        tasks_db_path=tmp_path / "tasks.sqlite3",
        cors_origin="*",
        api_base_url="http://testserver/api",
        request_timeout_seconds=5.0,
    )


@pytest.fixture()
def store(settings: SimpleNamespace) -> TaskStore:
    return TaskStore(settings.tasks_db_path)


@pytest.fixture()
def app(store: TaskStore, settings: SimpleNamespace) -> Flask:
    app = create_app(store, settings=settings)
    app.testing = True
    return app


@pytest.fixture()
def http(app: Flask) -> FlaskClient:
    return app.test_client()
