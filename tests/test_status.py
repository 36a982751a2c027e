from datetime import datetime, timezone

import pytest
from conftest import make_task

from teamtracker.errors import InvalidTransitionError
from teamtracker.models import Active, Deleted, TaskStatus, visible_tasks
from teamtracker.status import can_transition, commit_transition, toggle_complete, transition


def test_complete_then_reopen_round_trip(clock):
    task = make_task("a", "2025-01-05", "2025-01-06")
    done = transition(task, TaskStatus.COMPLETED, clock)
    assert done.status == TaskStatus.COMPLETED
    assert done.completed_at == datetime(2025, 1, 15, 1, 0, tzinfo=timezone.utc)

    reopened = transition(done, TaskStatus.PENDING, clock)
    assert reopened.status == TaskStatus.PENDING
    assert reopened.completed_at is None
    assert reopened.start_date == task.start_date and reopened.amount == task.amount


def test_toggle_complete(clock):
    task = make_task("a", "2025-01-05", "2025-01-06")
    assert toggle_complete(task, clock).status == TaskStatus.COMPLETED
    assert toggle_complete(toggle_complete(task, clock), clock).status == TaskStatus.PENDING


@pytest.mark.parametrize(
    "current, requested",
    [
        (TaskStatus.CANCELLED, TaskStatus.PENDING),
        (TaskStatus.CANCELLED, TaskStatus.COMPLETED),
        (TaskStatus.COMPLETED, TaskStatus.CANCELLED),
        (TaskStatus.DELETED, TaskStatus.PENDING),
        (TaskStatus.DELETED, TaskStatus.COMPLETED),
        (TaskStatus.PENDING, TaskStatus.PENDING),
    ],
)
def test_invalid_transitions_raise(clock, current, requested):
    task = make_task("a", "2025-01-05", "2025-01-06", status=current)
    assert not can_transition(current, requested)
    with pytest.raises(InvalidTransitionError) as excinfo:
        transition(task, requested, clock)
    assert excinfo.value.current == current.value
    assert excinfo.value.requested == requested.value


def test_deleting_a_completed_task_clears_completed_at(clock):
    task = make_task("a", "2025-01-05", "2025-01-06", status=TaskStatus.COMPLETED)
    deleted = transition(task, TaskStatus.DELETED, clock)
    assert deleted.completed_at is None
    assert isinstance(deleted.state, Deleted)
    assert visible_tasks([deleted]) == []


def test_state_variant():
    assert make_task("a", status=TaskStatus.CANCELLED).state == Active(TaskStatus.CANCELLED)
    assert make_task("b", status=TaskStatus.DELETED).state == Deleted()


class RecordingStore:
    def __init__(self):
        self.writes = []

    def update_task_status(self, task_id, status, completed_at):
        self.writes.append((task_id, status, completed_at))
        return make_task(task_id, "2025-01-05", "2025-01-06", status=status, completed_at=completed_at)


@pytest.mark.parametrize("current", [TaskStatus.PENDING, TaskStatus.COMPLETED, TaskStatus.CANCELLED])
def test_commit_transition_deletes_from_any_live_state(clock, current):
    store = RecordingStore()
    task = make_task("a", "2025-01-05", "2025-01-06", status=current)
    saved = commit_transition(store, task, TaskStatus.DELETED, clock)
    assert store.writes == [("a", TaskStatus.DELETED, None)]
    assert saved.status == TaskStatus.DELETED


def test_commit_transition_checks_table_before_writing(clock):
    store = RecordingStore()
    task = make_task("a", "2025-01-05", "2025-01-06", status=TaskStatus.CANCELLED)
    with pytest.raises(InvalidTransitionError):
        commit_transition(store, task, TaskStatus.PENDING, clock)
    assert store.writes == []
