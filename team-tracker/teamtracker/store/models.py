from __future__ import annotations

import json
import uuid
from datetime import datetime, timezone
from typing import Any, Dict

from sqlalchemy import Column, Date, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import declarative_base


Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


def _iso(ts: datetime | None) -> str | None:
    if ts is None:
        return None
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.isoformat()


class MemberRecord(Base):
    __tablename__ = "members"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String(128), nullable=False)
    color = Column(String(16), nullable=False, default="#BAE1FF")
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "color": self.color,
            "created_at": _iso(self.created_at),
        }


class TaskRecord(Base):
    __tablename__ = "tasks"

    id = Column(String(36), primary_key=True, default=_new_id)
    title = Column(String(512), nullable=False)
    amount = Column(Integer, nullable=False, default=0)
    points = Column(Integer, nullable=False, default=0)
    member_id = Column(String(36), nullable=False, index=True)
    status = Column(String(16), nullable=False, default="pending", index=True)

    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    scheduled_date = Column(Date, nullable=True)  # legacy single-day records

    completed_at = Column(DateTime(timezone=True), nullable=True)
    notes = Column(Text, default="")
    history = Column(Text, default="[]")  # JSON list of {when, what, by}
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    __table_args__ = (
        Index("ix_tasks_range", "start_date", "end_date"),
    )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "amount": self.amount,
            "points": self.points,
            "member_id": self.member_id,
            "status": self.status,
            "start_date": self.start_date.isoformat() if self.start_date else None,
            "end_date": self.end_date.isoformat() if self.end_date else None,
            "scheduled_date": self.scheduled_date.isoformat() if self.scheduled_date else None,
            "completed_at": _iso(self.completed_at),
            "notes": self.notes or "",
            "history": json.loads(self.history or "[]"),
            "created_at": _iso(self.created_at),
        }


class MonthlyGoalRecord(Base):
    __tablename__ = "monthly_goals"

    id = Column(String(36), primary_key=True, default=_new_id)
    month = Column(String(7), nullable=False, unique=True)  # YYYY-MM
    target_amount = Column(Integer, nullable=False, default=0)
    target_points = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "month": self.month,
            "target_amount": self.target_amount,
            "target_points": self.target_points,
        }
