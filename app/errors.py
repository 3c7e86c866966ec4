"""Error taxonomy for the task lifecycle.

Each error carries the HTTP status it maps to so the API layer can render it
without knowing about individual cases.
"""

from typing import Dict, List, Optional


class TaskError(Exception):
    status_code = 500
    message = "Internal error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.message
        super().__init__(self.message)


class TaskValidationError(TaskError):
    status_code = 422
    message = "The given data was invalid."

    def __init__(self, errors: Dict[str, List[str]], message: Optional[str] = None):
        self.errors = errors
        super().__init__(message)


class TaskNotFound(TaskError):
    status_code = 404
    message = "Task not found"

    def __init__(self, task_id: str):
        self.task_id = task_id
        super().__init__()


class Unauthorized(TaskError):
    status_code = 401
    message = "Invalid signature"


class BadRequest(TaskError):
    status_code = 400
    message = "Malformed request"


class InvalidTransition(TaskError):
    status_code = 409

    def __init__(self, task_id: str, current: str, target: str):
        self.task_id = task_id
        self.current = current
        self.target = target
        super().__init__(f"Task {task_id} cannot move from {current} to {target}")


class DispatchFailure(TaskError):
    """Outbound call to the workflow engine did not succeed."""

    status_code = 502
    message = "Workflow dispatch failed"


class TransientNetworkError(DispatchFailure):
    """Connection error, timeout or 5xx; worth another attempt."""


class DispatchRejected(DispatchFailure):
    """The workflow engine refused the request (4xx) or replied with garbage."""
