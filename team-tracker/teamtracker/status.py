from __future__ import annotations

from dataclasses import replace
from typing import Dict, FrozenSet

from teamtracker.clock import Clock
from teamtracker.errors import InvalidTransitionError
from teamtracker.models import Task, TaskStatus
from teamtracker.store import TaskStore

# Cancelled tasks can only be deleted.
TRANSITIONS: Dict[TaskStatus, FrozenSet[TaskStatus]] = {
    TaskStatus.PENDING: frozenset({TaskStatus.COMPLETED, TaskStatus.CANCELLED, TaskStatus.DELETED}),
    TaskStatus.COMPLETED: frozenset({TaskStatus.PENDING, TaskStatus.DELETED}),
    TaskStatus.CANCELLED: frozenset({TaskStatus.DELETED}),
    TaskStatus.DELETED: frozenset(),
}


def can_transition(current: TaskStatus, requested: TaskStatus) -> bool:
    return requested in TRANSITIONS.get(current, frozenset())


def transition(task: Task, requested: TaskStatus, clock: Clock) -> Task:
    """Return ``task`` moved to ``requested``; completed_at follows the completed state."""
    requested = TaskStatus(requested)
    if not can_transition(task.status, requested):
        raise InvalidTransitionError(task.id, task.status.value, requested.value)

    if requested == TaskStatus.COMPLETED:
        return replace(task, status=requested, completed_at=clock.now())
    return replace(task, status=requested, completed_at=None)


def toggle_complete(task: Task, clock: Clock) -> Task:
    if task.status == TaskStatus.COMPLETED:
        return transition(task, TaskStatus.PENDING, clock)
    return transition(task, TaskStatus.COMPLETED, clock)


def commit_transition(store: TaskStore, task: Task, requested: TaskStatus, clock: Clock) -> Task:
    """Check ``requested`` against the table, then persist it. Returns the stored task."""
    updated = transition(task, requested, clock)
    return store.update_task_status(task.id, updated.status, updated.completed_at)
