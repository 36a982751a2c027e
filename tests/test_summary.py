from datetime import date, datetime, timezone

import pytest
from conftest import make_task

from teamtracker.models import Member, MonthlyGoal, ReportingWindow, TaskStatus
from teamtracker.summary import (
    analyst_insight,
    growth_stats,
    member_share,
    monthly_completed,
    monthly_trend,
    pending_queue,
    percentage,
    recent_activity,
    summarize,
)

JANUARY = ReportingWindow.for_month(2025, 1)


def _done(task_id, start, end, amount, *, member_id="m1", points=0, when=None):
    return make_task(
        task_id, start, end,
        member_id=member_id,
        amount=amount,
        points=points,
        status=TaskStatus.COMPLETED,
        completed_at=when or datetime(2025, 1, 10, 3, 0, tzinfo=timezone.utc),
    )


def test_summarize_counts_only_tasks_scheduled_in_window():
    tasks = [
        _done("a", "2025-01-05", "2025-01-06", 1000),
        make_task("b", "2025-01-20", "2025-01-21", amount=500),
        make_task("c", "2025-03-01", "2025-03-02", amount=9999),
    ]
    summary = summarize(tasks, JANUARY)
    assert summary.completed_amount == 1000
    assert summary.pending_amount == 500


def test_summarize_excludes_cancelled_and_deleted():
    tasks = [
        make_task("a", "2025-01-05", "2025-01-06", amount=300, status=TaskStatus.CANCELLED),
        make_task("b", "2025-01-05", "2025-01-06", amount=700, status=TaskStatus.DELETED),
        make_task("c", "2025-01-05", "2025-01-06", amount=100, points=5),
    ]
    summary = summarize(tasks, JANUARY)
    assert (summary.completed_amount, summary.pending_amount, summary.pending_points) == (0, 100, 5)


def test_per_member_totals_partition_the_overall_totals():
    tasks = [
        _done("a", "2025-01-05", "2025-01-06", 1000, member_id="m1", points=10),
        _done("b", "2025-01-07", "2025-01-08", 2500, member_id="m2", points=3),
        make_task("c", "2025-01-09", "2025-01-09", member_id="m1", amount=400, points=4),
        make_task("d", "2024-12-30", "2025-01-02", member_id="m3", amount=50),
    ]
    summary = summarize(tasks, JANUARY)
    assert sum(m.completed_amount for m in summary.per_member) == summary.completed_amount == 3500
    assert sum(m.pending_amount for m in summary.per_member) == summary.pending_amount == 450
    assert sum(m.completed_points for m in summary.per_member) == summary.completed_points == 13
    assert summary.member("m1").pending_count == 1
    assert summary.member("nobody") is None


@pytest.mark.parametrize(
    "value, target, expected",
    [
        (150, 100, 100),
        (33, 100, 33),
        (0, 0, 0),
        (50, 0, 0),
        (1, 8, 13),
        (2, 3, 67),
        (0, 100, 0),
    ],
)
def test_percentage(value, target, expected):
    assert percentage(value, target) == expected


def test_monthly_completed_uses_completion_day_in_clock_zone(clock):
    tasks = [
        # scheduled in December, completed in January
        _done("a", "2024-12-20", "2024-12-21", 800, when=datetime(2025, 1, 2, 1, 0, tzinfo=timezone.utc)),
        # completed 31 Dec 20:00 UTC, which is 1 January in Tokyo
        _done("b", "2024-12-30", "2024-12-31", 200, when=datetime(2024, 12, 31, 20, 0, tzinfo=timezone.utc)),
        _done("c", "2025-01-05", "2025-01-06", 50, when=datetime(2024, 12, 10, 1, 0, tzinfo=timezone.utc)),
    ]
    stats = monthly_completed(tasks, JANUARY, clock)
    assert (stats.count, stats.amount) == (2, 1000)


def test_recent_activity_newest_first_and_limited():
    tasks = [
        _done("old", "2025-01-01", "2025-01-01", 1, when=datetime(2025, 1, 1, tzinfo=timezone.utc)),
        _done("new", "2025-01-01", "2025-01-01", 1, when=datetime(2025, 1, 9, tzinfo=timezone.utc)),
        _done("mid", "2025-01-01", "2025-01-01", 1, when=datetime(2025, 1, 5, tzinfo=timezone.utc)),
        make_task("pending", "2025-01-01", "2025-01-01"),
    ]
    assert [t.id for t in recent_activity(tasks, limit=2)] == ["new", "mid"]


def test_monthly_trend_buckets_by_completion_month(clock):
    tasks = [
        _done("a", "2024-11-01", "2024-11-02", 100, points=1, when=datetime(2024, 11, 5, tzinfo=timezone.utc)),
        _done("b", "2025-01-01", "2025-01-02", 300, points=3, when=datetime(2025, 1, 5, tzinfo=timezone.utc)),
        _done("c", "2025-01-03", "2025-01-04", 200, points=2, when=datetime(2025, 1, 6, tzinfo=timezone.utc)),
        _done("too-old", "2024-01-01", "2024-01-02", 999, when=datetime(2024, 1, 5, tzinfo=timezone.utc)),
    ]
    goals = [MonthlyGoal(month="2025-01", target_amount=5000, target_points=50)]
    df = monthly_trend(tasks, goals, 3, clock)
    assert list(df["month"]) == ["2024-11", "2024-12", "2025-01"]
    assert list(df["amount"]) == [100, 0, 500]
    assert list(df["points"]) == [1, 0, 5]
    assert list(df["target"]) == [0, 0, 5000]


def test_member_share_percentages():
    members = [Member("m1", "Aiko"), Member("m2", "Ben"), Member("m3", "Chiara")]
    tasks = [
        _done("a", "2025-01-01", "2025-01-01", 300, member_id="m1"),
        _done("b", "2025-01-01", "2025-01-01", 100, member_id="m2"),
        make_task("c", "2025-01-01", "2025-01-01", member_id="m3", amount=900),
    ]
    df = member_share(tasks, members)
    assert list(df["name"]) == ["Aiko", "Ben"]
    assert list(df["percent"]) == [75.0, 25.0]


def test_member_share_empty():
    df = member_share([], [Member("m1", "Aiko")])
    assert df.empty
    assert "percent" in df.columns


def test_growth_stats(clock):
    tasks = [
        _done("dec", "2024-12-01", "2024-12-02", 1000, when=datetime(2024, 12, 5, tzinfo=timezone.utc)),
        _done("jan1", "2025-01-01", "2025-01-02", 900, when=datetime(2025, 1, 5, tzinfo=timezone.utc)),
        _done("jan2", "2025-01-03", "2025-01-04", 600, when=datetime(2025, 1, 6, tzinfo=timezone.utc)),
    ]
    growth = growth_stats(tasks, clock)
    assert growth.this_month_amount == 1500
    assert growth.last_month_amount == 1000
    assert growth.growth_pct == pytest.approx(50.0)
    assert growth.avg_task_amount == pytest.approx(750.0)
    assert growth.completed_count == 2


def test_growth_stats_without_last_month(clock):
    growth = growth_stats([], clock)
    assert growth.growth_pct == 0.0
    assert growth.avg_task_amount == 0.0


def test_analyst_insight_mentions_progress_and_top_member(clock):
    tasks = [_done("a", "2025-01-05", "2025-01-06", 6_000_000, member_id="m1", points=900)]
    summary = summarize(tasks, JANUARY)
    text = analyst_insight(summary, 10_000_000, 1_000, clock, [Member("m1", "Aiko")])
    assert "48%" in text
    assert "60%" in text
    assert "Aiko" in text
    assert "90%" in text


def test_pending_queue_orders_by_due_date_and_flags(clock):
    tasks = [
        make_task("later", "2025-01-10", "2025-01-20"),
        make_task("today", "2025-01-14", "2025-01-15"),
        make_task("late", "2025-01-02", "2025-01-05"),
        make_task("undated"),
        make_task("done", "2025-01-01", "2025-01-01", status=TaskStatus.COMPLETED),
    ]
    queue = pending_queue(tasks, clock)
    assert [i.task.id for i in queue] == ["late", "today", "later", "undated"]
    assert queue[0].is_overdue and not queue[0].is_due_today
    assert queue[1].is_due_today and not queue[1].is_overdue
    assert queue[1].due == date(2025, 1, 15)
    assert queue[3].due is None
