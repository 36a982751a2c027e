from __future__ import annotations

from typing import Optional


class TrackerError(Exception):
    """Base class for tracker errors. None of them are fatal to the app."""


class MalformedTaskError(TrackerError):
    def __init__(self, task_id: Optional[str], reason: str) -> None:
        super().__init__(f"Task {task_id or '<new>'} is malformed: {reason}")
        self.task_id = task_id
        self.reason = reason


class InvalidTransitionError(TrackerError):
    def __init__(self, task_id: str, current: str, requested: str) -> None:
        super().__init__(f"Task {task_id}: cannot move from {current} to {requested}")
        self.task_id = task_id
        self.current = current
        self.requested = requested


class MutationFailedError(TrackerError):
    """The store rejected a write. The caller should offer a retry."""

    def __init__(self, task_id: str, message: str) -> None:
        super().__init__(f"Update of task {task_id} failed: {message}")
        self.task_id = task_id
