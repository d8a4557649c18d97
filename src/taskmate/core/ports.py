# src/taskmate/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The board depends on a TaskGateway Protocol instead of the HTTP client,
and the REST API depends on a TaskRepo Protocol instead of SQLite.
This keeps transport/storage swappable and makes testing easier.
"""

from collections.abc import Mapping
from typing import Any, Protocol

from ..tasks.task_models import Task


class TaskGateway(Protocol):
    """Client-side CRUD contract (async; one request per call, no retries)."""

    async def list_tasks(self) -> list[Task]: ...

    async def create_task(self, payload: Mapping[str, Any]) -> Task: ...

    async def update_task(self, task_id: str, changes: Mapping[str, Any]) -> Task: ...

    async def delete_task(self, task_id: str) -> str: ...


class TaskRepo(Protocol):
    """Server-side persistence contract used by the REST API."""

    def list_tasks(self) -> list[Task]: ...

    def create_task(self, payload: Mapping[str, Any]) -> Task: ...

    def update_task(self, task_id: str, changes: Mapping[str, Any]) -> Task | None: ...

    def delete_task(self, task_id: str) -> bool: ...
