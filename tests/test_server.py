# tests/test_server.py

from __future__ import annotations

from flask.testing import FlaskClient

from taskmate.server.app import create_app
from taskmate.tasks.task_models import parse_instant

NEW_TASK = {
    "title": "Call the dentist",
    "description": "before noon",
    "dueDate": "2026-10-19T07:00:00.000Z",
    "category": "Low",
    "completed": False,
}


def test_list_starts_empty(http: FlaskClient) -> None:
    resp = http.get("/api/tasks")
    assert resp.status_code == 200
    assert resp.get_json() == []


def test_create_returns_201_with_wire_shape(http: FlaskClient) -> None:
    resp = http.post("/api/tasks", json=NEW_TASK)
    assert resp.status_code == 201

    body = resp.get_json()
    assert set(body) == {
        "_id",
        "title",
        "description",
        "dueDate",
        "category",
        "completed",
        "createdAt",
        "updatedAt",
    }
    assert body["title"] == "Call the dentist"
    assert body["dueDate"] == "2026-10-19T07:00:00.000Z"
    assert body["completed"] is False

    listed = http.get("/api/tasks").get_json()
    assert [t["_id"] for t in listed] == [body["_id"]]


def test_create_validation_failure_is_400(http: FlaskClient) -> None:
    resp = http.post("/api/tasks", json={"title": "", "dueDate": "2026-10-19T07:00:00Z"})
    assert resp.status_code == 400
    body = resp.get_json()
    assert body["message"] == "Error creating task"
    assert "title" in body["error"]


def test_non_object_body_is_400(http: FlaskClient) -> None:
    resp = http.post("/api/tasks", json=["not", "an", "object"])
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Error creating task"


def test_update_refreshes_updated_at(http: FlaskClient) -> None:
    created = http.post("/api/tasks", json=NEW_TASK).get_json()

    resp = http.put(
        f"/api/tasks/{created['_id']}",
        json={"completed": True, "updatedAt": "2000-01-01T00:00:00.000Z"},
    )
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["completed"] is True
    assert body["title"] == NEW_TASK["title"]
    assert parse_instant(body["updatedAt"]) >= parse_instant(created["updatedAt"])


def test_update_unknown_is_404(http: FlaskClient) -> None:
    resp = http.put("/api/tasks/nope", json={"completed": True})
    assert resp.status_code == 404
    assert resp.get_json() == {"message": "Task not found"}


def test_update_invalid_is_400(http: FlaskClient) -> None:
    created = http.post("/api/tasks", json=NEW_TASK).get_json()
    resp = http.put(f"/api/tasks/{created['_id']}", json={"dueDate": "not a date"})
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Error updating task"


def test_delete_then_404(http: FlaskClient) -> None:
    created = http.post("/api/tasks", json=NEW_TASK).get_json()

    resp = http.delete(f"/api/tasks/{created['_id']}")
    assert resp.status_code == 200
    assert resp.get_json() == {"message": "Task deleted successfully"}

    again = http.delete(f"/api/tasks/{created['_id']}")
    assert again.status_code == 404
    assert again.get_json() == {"message": "Task not found"}


def test_health_and_cors_header(http: FlaskClient) -> None:
    resp = http.get("/api/health")
    assert resp.status_code == 200
    assert resp.get_json()["status"] == "ok"
    assert resp.headers["Access-Control-Allow-Origin"] == "*"


def test_unknown_route_is_json_404(http: FlaskClient) -> None:
    resp = http.get("/api/nothing-here")
    assert resp.status_code == 404
    assert "message" in resp.get_json()


class _BrokenStore:
    def list_tasks(self):
        raise RuntimeError("disk on fire")


def test_list_failure_is_500_with_message() -> None:
    app = create_app(_BrokenStore())  # type: ignore[arg-type]
    resp = app.test_client().get("/api/tasks")
    assert resp.status_code == 500
    body = resp.get_json()
    assert body["message"] == "Error fetching tasks"
    assert "disk on fire" in body["error"]


class _FailingDeleteStore:
    def delete_task(self, task_id):
        raise RuntimeError("locked")


def test_delete_failure_is_400_with_message() -> None:
    app = create_app(_FailingDeleteStore())  # type: ignore[arg-type]
    resp = app.test_client().delete("/api/tasks/abc")
    assert resp.status_code == 400
    assert resp.get_json() == {"message": "Error deleting task", "error": "locked"}
