# src/taskmate/client/api_client.py

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any
from urllib.parse import quote

import httpx

from ..errors import TaskNotFoundError, TaskTransportError, TaskValidationError
from ..tasks.task_models import Task

logger = logging.getLogger(__name__)


def _make_timeout(seconds: float) -> httpx.Timeout:
    return httpx.Timeout(seconds, connect=min(seconds, 5.0))


def _task_path(task_id: str) -> str:
    # Ids are opaque: escape everything, "/" included.
    return f"/tasks/{quote(task_id, safe='')}"


def _error_message(response: httpx.Response) -> str:
    """Pull `message` out of an error body; fall back to the status line."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        msg = str(body["message"])
        detail = body.get("error")
        return f"{msg}: {detail}" if detail else msg
    return f"HTTP {response.status_code} {response.reason_phrase}".strip()


class TaskApiClient:
    """
    Async client for the /api/tasks endpoints (implements TaskGateway).

    One request per call: no retries, no backoff, no cancellation.
    All failures surface as TaskMateError subclasses.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._http = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=_make_timeout(timeout),
            headers={"Content-Type": "application/json"},
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> TaskApiClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    # ---- transport ----

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: Mapping[str, Any] | None = None,
        task_id: str | None = None,
    ) -> Any:
        try:
            response = await self._http.request(method, path, json=json)
        except httpx.HTTPError as exc:
            logger.info("Task API %s %s failed: %s", method, path, exc.__class__.__name__)
            raise TaskTransportError(f"Task API unreachable: {exc}") from exc

        logger.debug("Task API %s %s -> %s", method, path, response.status_code)

        if response.status_code == 404 and task_id is not None:
            raise TaskNotFoundError(task_id, _error_message(response))
        if response.status_code == 400:
            raise TaskValidationError(_error_message(response))
        if not response.is_success:
            raise TaskTransportError(_error_message(response), status=response.status_code)

        try:
            return response.json()
        except ValueError as exc:
            raise TaskValidationError(f"Task API returned non-JSON body for {method} {path}") from exc

    @staticmethod
    def _task(payload: Any) -> Task:
        return Task.from_dict(payload)

    # ---- CRUD ----

    async def list_tasks(self) -> list[Task]:
        data = await self._request("GET", "/tasks")
        if not isinstance(data, list):
            raise TaskValidationError("Task API returned a non-list body for GET /tasks")
        return [self._task(item) for item in data]

    async def create_task(self, payload: Mapping[str, Any]) -> Task:
        return self._task(await self._request("POST", "/tasks", json=payload))

    async def update_task(self, task_id: str, changes: Mapping[str, Any]) -> Task:
        data = await self._request("PUT", _task_path(task_id), json=changes, task_id=task_id)
        return self._task(data)

    async def delete_task(self, task_id: str) -> str:
        data = await self._request("DELETE", _task_path(task_id), task_id=task_id)
        if isinstance(data, dict):
            return str(data.get("message", ""))
        return ""
