"""Period overlap filtering.

Two filters live here and they answer different questions:
- ``filter_by_window``: which tasks are *scheduled* in a window (date-range overlap).
- ``filter_completed_in_window``: which tasks were *completed* in a window
  (completion timestamp).
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, List

from zoneinfo import ZoneInfo

from teamtracker.clock import to_local_date
from teamtracker.models import ReportingWindow, Task, TaskStatus, task_span, visible_tasks

logger = logging.getLogger(__name__)


def overlaps(task: Task, window: ReportingWindow) -> bool:
    span = task_span(task)
    if span is None:
        return False
    start, end = span
    return start <= window.end and end >= window.start


def occupies(task: Task, d: date) -> bool:
    span = task_span(task)
    if span is None:
        return False
    return span[0] <= d <= span[1]


def filter_by_window(tasks: Iterable[Task], window: ReportingWindow) -> List[Task]:
    """Non-deleted tasks overlapping ``window``, in input order."""
    selected: List[Task] = []
    for task in visible_tasks(tasks):
        if task_span(task) is None:
            logger.debug("Skipping unschedulable task %s", task.id)
            continue
        if overlaps(task, window):
            selected.append(task)
    return selected


def filter_completed_in_window(
    tasks: Iterable[Task], window: ReportingWindow, tz: ZoneInfo
) -> List[Task]:
    """Completed tasks whose completion day (in ``tz``) falls inside ``window``."""
    selected: List[Task] = []
    for task in visible_tasks(tasks):
        if task.status != TaskStatus.COMPLETED or task.completed_at is None:
            continue
        if window.contains(to_local_date(task.completed_at, tz)):
            selected.append(task)
    return selected
