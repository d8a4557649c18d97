# tests/fakes.py

from __future__ import annotations

import itertools
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta, timezone
from typing import Any

import httpx
from flask.testing import FlaskClient

from taskmate.core.state import Notice
from taskmate.errors import TaskMateError, TaskNotFoundError
from taskmate.tasks.task_models import Task, parse_instant

# Fixed-offset zone: deterministic without relying on the host zone or tzdata.
TZ = timezone(timedelta(hours=2))
NOW = datetime(2026, 10, 18, 12, 0, tzinfo=TZ)

_ids = itertools.count(1)


def make_task(
    title: str,
    *,
    due_at: datetime | None,
    completed: bool = False,
    category: str = "Medium",
    description: str = "",
    task_id: str | None = None,
    updated_at: datetime | None = None,
) -> Task:
    return Task(
        id=task_id or f"t{next(_ids)}",
        title=title,
        description=description,
        due_at=due_at,
        category=category,
        completed=completed,
        created_at=NOW - timedelta(days=1),
        updated_at=updated_at or NOW - timedelta(days=1),
        due_raw="" if due_at is not None else "not-a-date",
    )


class FixedClock:
    """Deterministic clock; `advance` moves it forward."""

    def __init__(self, now: datetime = NOW) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


class FakeTaskGateway:
    """
    In-memory TaskGateway used for board unit tests.

    - Captures calls for assertions
    - `fail_with` makes the next call raise (once)
    """

    def __init__(self, tasks: list[Task] | None = None, *, clock: FixedClock | None = None) -> None:
        self.tasks: dict[str, Task] = {t.id: t for t in tasks or []}
        self.clock = clock or FixedClock()
        self.calls: list[tuple[str, Any]] = []
        self.fail_with: TaskMateError | None = None

    def _maybe_fail(self) -> None:
        if self.fail_with is not None:
            exc, self.fail_with = self.fail_with, None
            raise exc

    async def list_tasks(self) -> list[Task]:
        self.calls.append(("list", None))
        self._maybe_fail()
        return list(self.tasks.values())

    async def create_task(self, payload: Mapping[str, Any]) -> Task:
        self.calls.append(("create", dict(payload)))
        self._maybe_fail()
        stamp = self.clock().isoformat()
        task = Task.from_dict({**payload, "_id": f"new{next(_ids)}", "createdAt": stamp, "updatedAt": stamp})
        self.tasks[task.id] = task
        return task

    async def update_task(self, task_id: str, changes: Mapping[str, Any]) -> Task:
        self.calls.append(("update", (task_id, dict(changes))))
        self._maybe_fail()
        current = self.tasks.get(task_id)
        if current is None:
            raise TaskNotFoundError(task_id)
        updated = replace(
            current,
            title=changes.get("title", current.title),
            description=changes.get("description", current.description),
            due_at=parse_instant(changes["dueDate"]) if "dueDate" in changes else current.due_at,
            category=changes.get("category", current.category),
            completed=changes.get("completed", current.completed),
            updated_at=self.clock(),
        )
        self.tasks[task_id] = updated
        return updated

    async def delete_task(self, task_id: str) -> str:
        self.calls.append(("delete", task_id))
        self._maybe_fail()
        if self.tasks.pop(task_id, None) is None:
            raise TaskNotFoundError(task_id)
        return "Task deleted successfully"


@dataclass(slots=True)
class NoticeSink:
    notices: list[Notice] = field(default_factory=list)

    def __call__(self, notice: Notice) -> None:
        self.notices.append(notice)

    @property
    def texts(self) -> list[str]:
        return [n.text for n in self.notices]


def flask_transport(client: FlaskClient) -> httpx.MockTransport:
    """Route httpx requests into the Flask test client (no sockets)."""

    def handler(request: httpx.Request) -> httpx.Response:
        resp = client.open(
            request.url.path,
            method=request.method,
            data=request.content,
            content_type=request.headers.get("Content-Type", "application/json"),
        )
        return httpx.Response(
            resp.status_code,
            content=resp.get_data(),
            headers={"Content-Type": resp.content_type},
        )

    return httpx.MockTransport(handler)
