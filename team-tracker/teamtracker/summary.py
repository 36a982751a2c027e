"""Dashboard and analytics aggregation.

``summarize`` works on tasks *scheduled* in a window (date-range overlap).
``monthly_completed``, ``monthly_trend``, ``growth_stats`` and
``recent_activity`` work on tasks *completed* in a window (completion time).
A task scheduled in March but closed in April counts toward March's meter and April's revenue trend.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Dict, Iterable, List, Optional, Sequence

import pandas as pd

from teamtracker import dates
from teamtracker.clock import Clock, to_local_date
from teamtracker.models import Member, MonthlyGoal, ReportingWindow, Task, TaskStatus, task_span, visible_tasks
from teamtracker.overlap import filter_by_window, filter_completed_in_window


def percentage(value: float, target: float) -> int:
    """Progress-meter percentage, clamped at 100 before rounding."""
    if target <= 0:
        return 0
    # half-up rounding, so 12.5% shows as 13
    return int(math.floor(min(value / target, 1) * 100 + 0.5))


@dataclass
class MemberSummary:
    member_id: str
    completed_amount: int = 0
    pending_amount: int = 0
    completed_points: int = 0
    pending_points: int = 0
    completed_count: int = 0
    pending_count: int = 0


@dataclass
class Summary:
    completed_amount: int = 0
    pending_amount: int = 0
    completed_points: int = 0
    pending_points: int = 0
    per_member: List[MemberSummary] = field(default_factory=list)

    def member(self, member_id: str) -> Optional[MemberSummary]:
        for m in self.per_member:
            if m.member_id == member_id:
                return m
        return None


def summarize(tasks: Iterable[Task], window: ReportingWindow) -> Summary:
    summary = Summary()
    by_member: Dict[str, MemberSummary] = {}

    for task in filter_by_window(tasks, window):
        if task.status not in (TaskStatus.COMPLETED, TaskStatus.PENDING):
            continue
        ms = by_member.get(task.member_id)
        if ms is None:
            ms = by_member[task.member_id] = MemberSummary(member_id=task.member_id)

        if task.status == TaskStatus.COMPLETED:
            summary.completed_amount += task.amount
            summary.completed_points += task.points
            ms.completed_amount += task.amount
            ms.completed_points += task.points
            ms.completed_count += 1
        else:
            summary.pending_amount += task.amount
            summary.pending_points += task.points
            ms.pending_amount += task.amount
            ms.pending_points += task.points
            ms.pending_count += 1

    summary.per_member = list(by_member.values())
    return summary


@dataclass(frozen=True)
class CompletedStats:
    count: int
    amount: int
    points: int


def monthly_completed(tasks: Iterable[Task], window: ReportingWindow, clock: Clock) -> CompletedStats:
    done = filter_completed_in_window(tasks, window, clock.tz)
    return CompletedStats(
        count=len(done),
        amount=sum(t.amount for t in done),
        points=sum(t.points for t in done),
    )


def recent_activity(tasks: Iterable[Task], limit: int = 3) -> List[Task]:
    """Most recently completed tasks, newest first."""
    done = [
        t for t in visible_tasks(tasks)
        if t.status == TaskStatus.COMPLETED and t.completed_at is not None
    ]
    done.sort(key=lambda t: _as_utc(t.completed_at), reverse=True)
    return done[:limit]


def monthly_trend(
    tasks: Iterable[Task],
    goals: Iterable[MonthlyGoal],
    months: int,
    clock: Clock,
) -> pd.DataFrame:
    """Completed amount / points per month for the last ``months`` months (oldest first)."""
    today = clock.today()
    keys: List[str] = []
    for offset in range(months - 1, -1, -1):
        year, month = dates.shift_month(today.year, today.month, -offset)
        keys.append(f"{year:04d}-{month:02d}")

    rows = {k: {"month": k, "amount": 0, "points": 0, "target": 0} for k in keys}
    for goal in goals:
        if goal.month in rows:
            rows[goal.month]["target"] = goal.target_amount

    for task in visible_tasks(tasks):
        if task.status != TaskStatus.COMPLETED or task.completed_at is None:
            continue
        key = dates.format_month(to_local_date(task.completed_at, clock.tz))
        if key in rows:
            rows[key]["amount"] += task.amount
            rows[key]["points"] += task.points

    return pd.DataFrame([rows[k] for k in keys], columns=["month", "amount", "points", "target"])


def member_share(tasks: Iterable[Task], members: Sequence[Member]) -> pd.DataFrame:
    """Completed amount per member with percentage share, largest first."""
    task_list = visible_tasks(tasks)
    records = []
    for m in members:
        total = sum(
            t.amount for t in task_list
            if t.member_id == m.id and t.status == TaskStatus.COMPLETED
        )
        if total > 0:
            records.append({"member_id": m.id, "name": m.name, "color": m.color, "amount": total})

    df = pd.DataFrame(records, columns=["member_id", "name", "color", "amount"])
    if df.empty:
        df["percent"] = pd.Series(dtype=float)
        return df
    df = df.sort_values("amount", ascending=False).reset_index(drop=True)
    df["percent"] = df["amount"] / df["amount"].sum() * 100
    return df


@dataclass(frozen=True)
class GrowthStats:
    this_month_amount: int
    last_month_amount: int
    growth_pct: float
    avg_task_amount: float
    completed_count: int


def growth_stats(tasks: Iterable[Task], clock: Clock) -> GrowthStats:
    task_list = list(tasks)
    today = clock.today()
    this_window = ReportingWindow.for_month(today.year, today.month)
    last_year, last_month = dates.shift_month(today.year, today.month, -1)
    last_window = ReportingWindow.for_month(last_year, last_month)

    this_month = monthly_completed(task_list, this_window, clock)
    last = monthly_completed(task_list, last_window, clock)

    growth = 0.0
    if last.amount > 0:
        growth = (this_month.amount - last.amount) / last.amount * 100
    avg = this_month.amount / this_month.count if this_month.count else 0.0
    return GrowthStats(
        this_month_amount=this_month.amount,
        last_month_amount=last.amount,
        growth_pct=growth,
        avg_task_amount=avg,
        completed_count=this_month.count,
    )


def analyst_insight(
    summary: Summary,
    target_amount: int,
    target_points: int,
    clock: Clock,
    members: Sequence[Member] = (),
) -> str:
    """Plain-language commentary for the dashboard."""
    today = clock.today()
    month_progress = round(today.day / dates.days_in_month(today.year, today.month) * 100)
    revenue_pct = percentage(summary.completed_amount, target_amount)
    points_pct = percentage(summary.completed_points, target_points)

    text = f"About {month_progress}% of {today.strftime('%B')} has passed. "
    if revenue_pct >= month_progress:
        text += f"Revenue is at {revenue_pct}% of target, ahead of the calendar. The goal is within reach."
    else:
        text += f"Revenue is at {revenue_pct}% of target, a little behind the calendar."

    names = {m.id: m.name for m in members}
    top = max(summary.per_member, key=lambda m: m.completed_amount, default=None)
    if top is not None and top.completed_amount > 0:
        text += f"\n\nTop contributor so far: {names.get(top.member_id, top.member_id)}."

    if points_pct > 80:
        text += f"\nPoints are above {points_pct}% of target."
    return text


@dataclass(frozen=True)
class PendingItem:
    task: Task
    due: Optional[date]
    is_overdue: bool
    is_due_today: bool


def pending_queue(tasks: Iterable[Task], clock: Clock) -> List[PendingItem]:
    """Pending tasks ordered by end date then start date; undated tasks last."""
    today = clock.today()
    items: List[PendingItem] = []
    for task in visible_tasks(tasks):
        if task.status != TaskStatus.PENDING:
            continue
        span = task_span(task)
        due = span[1] if span else None
        items.append(
            PendingItem(
                task=task,
                due=due,
                is_overdue=due is not None and due < today,
                is_due_today=due is not None and due == today,
            )
        )

    def sort_key(item: PendingItem):
        span = task_span(item.task)
        if span is None:
            return (1, date.max, date.max)
        return (0, span[1], span[0])

    items.sort(key=sort_key)
    return items


def _as_utc(ts: datetime) -> datetime:
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts
