# src/taskmate/errors.py

"""
Error taxonomy shared by the store, the HTTP client and the board.

- TaskValidationError: bad input (missing title, invalid date/time) or a
  response that does not have the expected shape.
- TaskNotFoundError: a mutation targeted an id the store no longer has.
- TaskTransportError: store unreachable or a non-2xx response.
"""

from __future__ import annotations


class TaskMateError(Exception):
    """Base class for all task-mate errors."""


class TaskValidationError(TaskMateError):
    pass


class TaskNotFoundError(TaskMateError):
    def __init__(self, task_id: str, message: str = "Task not found") -> None:
        super().__init__(f"{message}: {task_id}")
        self.task_id = task_id


class TaskTransportError(TaskMateError):
    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status
