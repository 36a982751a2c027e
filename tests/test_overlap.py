from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

from conftest import make_task

from teamtracker.models import ReportingWindow, Task, TaskStatus
from teamtracker.overlap import filter_by_window, filter_completed_in_window, occupies, overlaps

JANUARY = ReportingWindow.for_month(2025, 1)


def test_window_for_month_is_inclusive():
    assert JANUARY.start == date(2025, 1, 1)
    assert JANUARY.end == date(2025, 1, 31)
    assert JANUARY.contains(date(2025, 1, 31))
    assert not JANUARY.contains(date(2025, 2, 1))


def test_task_crossing_month_boundary_overlaps_both_months():
    task = make_task("a", "2025-01-28", "2025-02-03")
    assert overlaps(task, JANUARY)
    assert overlaps(task, ReportingWindow.for_month(2025, 2))
    assert not overlaps(task, ReportingWindow.for_month(2024, 12))


def test_touching_window_edges_counts_as_overlap():
    assert overlaps(make_task("a", "2024-12-20", "2025-01-01"), JANUARY)
    assert overlaps(make_task("b", "2025-01-31", "2025-02-10"), JANUARY)
    assert not overlaps(make_task("c", "2024-12-20", "2024-12-31"), JANUARY)


def test_legacy_scheduled_date_is_treated_as_one_day_range():
    task = make_task("legacy", scheduled="2025-01-10")
    assert overlaps(task, JANUARY)
    assert occupies(task, date(2025, 1, 10))
    assert not occupies(task, date(2025, 1, 11))


def test_from_record_normalises_legacy_scheduled_date():
    task = Task.from_record({"id": "x", "member_id": "m1", "status": "pending", "scheduled_date": "2025-01-10"})
    assert task.start_date == date(2025, 1, 10)
    assert task.end_date == date(2025, 1, 10)


def test_filter_skips_malformed_and_deleted_tasks_and_keeps_order():
    tasks = [
        make_task("late", "2025-01-20", "2025-01-22"),
        make_task("no-dates"),
        make_task("inverted", "2025-01-10", "2025-01-05"),
        make_task("gone", "2025-01-05", "2025-01-06", status=TaskStatus.DELETED),
        make_task("early", "2025-01-02", "2025-01-03"),
        make_task("feb", "2025-02-02", "2025-02-03"),
    ]
    assert [t.id for t in filter_by_window(tasks, JANUARY)] == ["late", "early"]


def test_filter_keeps_cancelled_tasks_for_display():
    tasks = [make_task("c", "2025-01-05", "2025-01-06", status=TaskStatus.CANCELLED)]
    assert [t.id for t in filter_by_window(tasks, JANUARY)] == ["c"]


def test_all_time_window_accepts_everything_schedulable():
    tasks = [make_task("a", "1999-01-01", "1999-01-01"), make_task("b", "2030-01-01", "2030-12-31")]
    assert len(filter_by_window(tasks, ReportingWindow.all_time())) == 2


def test_completed_filter_uses_completion_time_not_schedule():
    tokyo = ZoneInfo("Asia/Tokyo")
    # scheduled in December, completed in January
    done = make_task(
        "a", "2024-12-20", "2024-12-22",
        status=TaskStatus.COMPLETED,
        completed_at=datetime(2025, 1, 3, 2, 0, tzinfo=timezone.utc),
    )
    pending = make_task("b", "2025-01-05", "2025-01-06")
    assert [t.id for t in filter_completed_in_window([done, pending], JANUARY, tokyo)] == ["a"]
    assert filter_by_window([done], JANUARY) == []


def test_completed_filter_uses_local_calendar_day():
    tokyo = ZoneInfo("Asia/Tokyo")
    # 2025-01-31 16:00 UTC is already 1 February in Tokyo
    done = make_task(
        "a", "2025-01-30", "2025-01-31",
        status=TaskStatus.COMPLETED,
        completed_at=datetime(2025, 1, 31, 16, 0, tzinfo=timezone.utc),
    )
    assert filter_completed_in_window([done], JANUARY, tokyo) == []
    assert filter_completed_in_window([done], JANUARY, ZoneInfo("UTC")) == [done]
