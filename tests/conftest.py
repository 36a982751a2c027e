from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from teamtracker.clock import FixedClock
from teamtracker.models import Task, TaskStatus
from teamtracker.store import SqlTaskStore
from teamtracker.store.db import dispose_all


def make_task(
    task_id,
    start=None,
    end=None,
    *,
    member_id="m1",
    amount=0,
    points=0,
    status=TaskStatus.PENDING,
    scheduled=None,
    completed_at=None,
):
    if status == TaskStatus.COMPLETED and completed_at is None:
        completed_at = datetime(2025, 1, 20, 3, 0, tzinfo=timezone.utc)
    return Task(
        id=task_id,
        title=f"Task {task_id}",
        member_id=member_id,
        amount=amount,
        points=points,
        status=status,
        start_date=date.fromisoformat(start) if start else None,
        end_date=date.fromisoformat(end) if end else None,
        scheduled_date=date.fromisoformat(scheduled) if scheduled else None,
        completed_at=completed_at,
    )


@pytest.fixture
def clock():
    # 2025-01-15 10:00 in Tokyo
    return FixedClock(datetime(2025, 1, 15, 1, 0, tzinfo=timezone.utc), tz=ZoneInfo("Asia/Tokyo"))


@pytest.fixture
def store(tmp_path):
    s = SqlTaskStore(f"sqlite:///{(tmp_path / 'tracker.db').as_posix()}")
    yield s
    dispose_all()
