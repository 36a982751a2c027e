"""Tracker domain types.

Records coming from the store are plain dicts; ``Task.from_record`` and
``Member.from_record`` turn them into the immutable types the engines use.
Legacy single-date tasks (``scheduled_date`` only) are normalised there, once,
into ``start_date == end_date == scheduled_date``.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from teamtracker import dates
from teamtracker.errors import MalformedTaskError


class TaskStatus(str, enum.Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    DELETED = "deleted"


@dataclass(frozen=True)
class Active:
    status: TaskStatus


@dataclass(frozen=True)
class Deleted:
    pass


TaskState = Union[Active, Deleted]


@dataclass(frozen=True)
class Task:
    id: str
    title: str
    member_id: str
    amount: int = 0
    points: int = 0
    status: TaskStatus = TaskStatus.PENDING
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    scheduled_date: Optional[date] = None
    completed_at: Optional[datetime] = None
    notes: str = ""
    created_at: Optional[datetime] = None

    @property
    def state(self) -> TaskState:
        return task_state(self)

    @property
    def span(self) -> Optional[Tuple[date, date]]:
        return task_span(self)

    def validate(self) -> None:
        """Raise MalformedTaskError unless the task may be accepted into the store."""
        if self.amount < 0 or self.points < 0:
            raise MalformedTaskError(self.id, "amount and points must be non-negative")
        if not self.member_id:
            raise MalformedTaskError(self.id, "missing owner")
        if task_span(self) is None:
            raise MalformedTaskError(self.id, "missing or inverted date range")
        if (self.status == TaskStatus.COMPLETED) != (self.completed_at is not None):
            raise MalformedTaskError(self.id, "completed_at must be set exactly when completed")

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Task":
        scheduled = dates.parse_date(record.get("scheduled_date"))
        start = dates.parse_date(record.get("start_date"))
        end = dates.parse_date(record.get("end_date"))
        if scheduled is not None and (start is None or end is None):
            start = start or scheduled
            end = end or scheduled
        return cls(
            id=str(record["id"]),
            title=str(record.get("title") or ""),
            member_id=str(record.get("member_id") or ""),
            amount=int(record.get("amount") or 0),
            points=int(record.get("points") or 0),
            status=TaskStatus(record.get("status") or TaskStatus.PENDING.value),
            start_date=start,
            end_date=end,
            scheduled_date=scheduled,
            completed_at=_parse_ts(record.get("completed_at")),
            notes=str(record.get("notes") or ""),
            created_at=_parse_ts(record.get("created_at")),
        )

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "member_id": self.member_id,
            "amount": self.amount,
            "points": self.points,
            "status": self.status.value,
            "start_date": self.start_date.isoformat() if self.start_date else None,
            "end_date": self.end_date.isoformat() if self.end_date else None,
            "scheduled_date": self.scheduled_date.isoformat() if self.scheduled_date else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "notes": self.notes,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass(frozen=True)
class Member:
    id: str
    name: str
    color: str = "#BAE1FF"
    created_at: Optional[datetime] = None

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Member":
        return cls(
            id=str(record["id"]),
            name=str(record.get("name") or ""),
            color=str(record.get("color") or "#BAE1FF"),
            created_at=_parse_ts(record.get("created_at")),
        )


@dataclass(frozen=True)
class ReportingWindow:
    """Closed date interval [start, end]."""

    start: date
    end: date

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise ValueError(f"window end {self.end} precedes start {self.start}")

    @classmethod
    def for_month(cls, year: int, month: int) -> "ReportingWindow":
        return cls(date(year, month, 1), date(year, month, dates.days_in_month(year, month)))

    @classmethod
    def trailing_months(cls, today: date, months: int) -> "ReportingWindow":
        """The last ``months`` calendar months, current month included."""
        year, month = dates.shift_month(today.year, today.month, -(months - 1))
        return cls(date(year, month, 1), cls.for_month(today.year, today.month).end)

    @classmethod
    def all_time(cls) -> "ReportingWindow":
        return cls(date.min, date.max)

    def contains(self, d: date) -> bool:
        return dates.is_within(d, self.start, self.end)

    def days(self) -> List[date]:
        return list(dates.iter_days(self.start, self.end))


@dataclass(frozen=True)
class MonthlyGoal:
    month: str  # YYYY-MM
    target_amount: int
    target_points: int
    id: Optional[str] = field(default=None, compare=False)


def task_state(task: Task) -> TaskState:
    if task.status == TaskStatus.DELETED:
        return Deleted()
    return Active(task.status)


def task_span(task: Task) -> Optional[Tuple[date, date]]:
    """Inclusive (start, end) of a task, or None when it cannot be scheduled."""
    start = task.start_date
    end = task.end_date
    if start is None or end is None:
        if task.scheduled_date is None:
            return None
        start = end = task.scheduled_date
    if end < start:
        return None
    return start, end


def visible_tasks(tasks: Iterable[Task]) -> List[Task]:
    """Drop soft-deleted tasks. Every listing, aggregation and render goes through here."""
    return [t for t in tasks if isinstance(task_state(t), Active)]


def _parse_ts(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    raw = str(value).strip()
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(raw)
    except ValueError:
        return None
