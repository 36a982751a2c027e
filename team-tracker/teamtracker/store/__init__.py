"""Storage for tasks, members and monthly goals.

The calendar and dashboard engines only talk to the ``TaskStore`` protocol;
``SqlTaskStore`` is the SQLAlchemy implementation the pages use.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, List, Optional, Protocol

from sqlalchemy.exc import SQLAlchemyError

from teamtracker.errors import InvalidTransitionError, MutationFailedError
from teamtracker.models import Member, MonthlyGoal, ReportingWindow, Task, TaskStatus
from teamtracker.store import repo

logger = logging.getLogger(__name__)


class TaskStore(Protocol):
    def list_tasks(
        self,
        statuses: Optional[Iterable[TaskStatus]] = None,
        window: Optional[ReportingWindow] = None,
    ) -> List[Task]: ...

    def list_members(self) -> List[Member]: ...

    def update_task_status(
        self, task_id: str, status: TaskStatus, completed_at: Optional[datetime]
    ) -> Task: ...


class SqlTaskStore:
    def __init__(self, database_url: str) -> None:
        self.database_url = database_url
        repo.init_db(database_url)

    def list_tasks(
        self,
        statuses: Optional[Iterable[TaskStatus]] = None,
        window: Optional[ReportingWindow] = None,
    ) -> List[Task]:
        records = repo.list_tasks(self.database_url, statuses=statuses, window=window)
        return [Task.from_record(r) for r in records]

    def list_members(self) -> List[Member]:
        return [Member.from_record(r) for r in repo.list_members(self.database_url)]

    def update_task_status(
        self, task_id: str, status: TaskStatus, completed_at: Optional[datetime]
    ) -> Task:
        try:
            record = repo.update_task_status(self.database_url, task_id, status, completed_at)
        except SQLAlchemyError as exc:
            logger.warning("Status update of task %s failed: %s", task_id, exc)
            raise MutationFailedError(task_id, str(exc)) from exc
        if record is None:
            raise MutationFailedError(task_id, "task not found")
        return Task.from_record(record)

    def create_task(self, task: Task, by: str = "system") -> Task:
        return Task.from_record(repo.create_task(self.database_url, task, by=by))

    def create_member(self, name: str, color: str) -> Member:
        return Member.from_record(repo.create_member(self.database_url, name=name, color=color))

    def soft_delete_task(self, task_id: str) -> bool:
        """Mark a task deleted. False when it does not exist; already-deleted tasks raise."""
        record = repo.get_task(self.database_url, task_id)
        if record is None:
            return False
        current = TaskStatus(record["status"])
        if current == TaskStatus.DELETED:
            raise InvalidTransitionError(task_id, current.value, TaskStatus.DELETED.value)
        return repo.soft_delete_task(self.database_url, task_id)

    def get_goal(self, month: str) -> Optional[MonthlyGoal]:
        record = repo.get_goal(self.database_url, month)
        if record is None:
            return None
        return MonthlyGoal(
            month=record["month"],
            target_amount=record["target_amount"],
            target_points=record["target_points"],
            id=record["id"],
        )

    def list_goals(self) -> List[MonthlyGoal]:
        return [
            MonthlyGoal(month=r["month"], target_amount=r["target_amount"], target_points=r["target_points"], id=r["id"])
            for r in repo.list_goals(self.database_url)
        ]

    def upsert_goal(self, month: str, target_amount: int, target_points: int) -> MonthlyGoal:
        record = repo.upsert_goal(
            self.database_url, month=month, target_amount=target_amount, target_points=target_points
        )
        return MonthlyGoal(
            month=record["month"],
            target_amount=record["target_amount"],
            target_points=record["target_points"],
            id=record["id"],
        )
