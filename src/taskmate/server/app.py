# src/taskmate/server/app.py

"""
REST API over the task store.

Routes (all JSON):
- GET    /api/tasks       -> list, newest-created first
- POST   /api/tasks       -> create (201)
- PUT    /api/tasks/<id>  -> partial update; updatedAt always refreshed
- DELETE /api/tasks/<id>  -> delete
- GET    /api/health      -> liveness

Error bodies are `{message}` or `{message, error}`.
"""

from __future__ import annotations

import logging
from typing import Any

from flask import Flask, Response, jsonify, request
from werkzeug.exceptions import HTTPException

from ..core.ports import TaskRepo
from ..errors import TaskValidationError
from ..tasks.task_models import format_instant, utc_now

logger = logging.getLogger(__name__)

TASK_NOT_FOUND = "Task not found"


def _error(status: int, message: str, error: Any = None) -> tuple[Response, int]:
    body: dict[str, Any] = {"message": message}
    if error is not None:
        body["error"] = str(error)
    return jsonify(body), status


def _json_object() -> dict[str, Any]:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise TaskValidationError("JSON body must be an object")
    return data


def create_app(store: TaskRepo, *, settings: Any = None) -> Flask:
    """Application factory. `settings` only needs `app_name` and `cors_origin`."""
    app = Flask(str(getattr(settings, "app_name", "taskmate")))
    app.json.sort_keys = False  # type: ignore[attr-defined]
    cors_origin = str(getattr(settings, "cors_origin", "*") or "*")

    @app.after_request
    def _cors(response: Response) -> Response:
        response.headers["Access-Control-Allow-Origin"] = cors_origin
        response.headers["Access-Control-Allow-Methods"] = "GET,POST,PUT,DELETE,OPTIONS"
        response.headers["Access-Control-Allow-Headers"] = "Content-Type"
        logger.debug("%s %s -> %s", request.method, request.path, response.status_code)
        return response

    @app.errorhandler(HTTPException)
    def _http_error(exc: HTTPException):
        # Unknown routes / methods: keep the JSON error shape.
        return _error(exc.code or 500, exc.description or exc.name)

    @app.get("/api/health")
    def health():
        return jsonify({"status": "ok", "timestamp": format_instant(utc_now())})

    @app.get("/api/tasks")
    def list_tasks():
        try:
            tasks = store.list_tasks()
        except Exception as exc:
            logger.exception("Listing tasks failed")
            return _error(500, "Error fetching tasks", exc)
        return jsonify([t.to_dict() for t in tasks])

    @app.post("/api/tasks")
    def create_task():
        try:
            task = store.create_task(_json_object())
        except TaskValidationError as exc:
            return _error(400, "Error creating task", exc)
        logger.info("Task created id=%s", task.id)
        return jsonify(task.to_dict()), 201

    @app.put("/api/tasks/<task_id>")
    def update_task(task_id: str):
        try:
            task = store.update_task(task_id, _json_object())
        except TaskValidationError as exc:
            return _error(400, "Error updating task", exc)
        if task is None:
            return _error(404, TASK_NOT_FOUND)
        return jsonify(task.to_dict())

    @app.delete("/api/tasks/<task_id>")
    def delete_task(task_id: str):
        try:
            deleted = store.delete_task(task_id)
        except Exception as exc:
            logger.exception("Deleting task id=%s failed", task_id)
            return _error(400, "Error deleting task", exc)
        if not deleted:
            return _error(404, TASK_NOT_FOUND)
        logger.info("Task deleted id=%s", task_id)
        return jsonify({"message": "Task deleted successfully"})

    return app
