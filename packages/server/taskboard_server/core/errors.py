"""
Domain error taxonomy.

Every error carries the HTTP status and short code the transport maps it to
when running with refined error responses.
"""

from __future__ import annotations


class TaskBoardError(Exception):
    status_code = 500
    code = "internal_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(TaskBoardError):
    status_code = 404
    code = "not_found"

    def __init__(self, collection: str, item_id: str):
        super().__init__(f"{collection} item with ID {item_id} not found.")
        self.collection = collection
        self.item_id = item_id


class MalformedRowError(TaskBoardError):
    code = "malformed_row"


class StoreUnavailableError(TaskBoardError):
    status_code = 503
    code = "store_unavailable"


class TaskLockedError(TaskBoardError):
    status_code = 409
    code = "task_locked"

    def __init__(self, task_id: str, status: str):
        super().__init__(f"Task {task_id} is {status} and can no longer be changed.")
        self.task_id = task_id


class TimerAlreadyRunningError(TaskBoardError):
    status_code = 409
    code = "timer_already_running"

    def __init__(self, task_id: str):
        super().__init__(f"A timer is already running for task {task_id}.")
        self.task_id = task_id


class NoRunningTimerError(TaskBoardError):
    status_code = 409
    code = "no_running_timer"

    def __init__(self, task_id: str):
        super().__init__(f"No running timer found for task {task_id}.")
        self.task_id = task_id


class ConflictError(TaskBoardError):
    status_code = 409
    code = "version_conflict"

    def __init__(self, task_id: str, expected: int, actual: int):
        super().__init__(
            f"Task {task_id} was modified concurrently "
            f"(expected version {expected}, found {actual})."
        )
        self.task_id = task_id
        self.expected = expected
        self.actual = actual


class InvalidCredentialsError(TaskBoardError):
    status_code = 401
    code = "invalid_credentials"

    def __init__(self):
        super().__init__("Invalid username or password.")
