"""Lane assignment for the per-member calendar timeline.

Tasks of one member are stacked side by side inside the member's column.
Each task gets the lowest lane that no earlier task claims on any of its
days (greedy first-fit over the start-sorted tasks, not a minimum colouring).
Lanes are computed on each task's true date range, while the row position is
clamped to the visible days, so a task keeps its lane when paging months.
"""
from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterable, List, Sequence, Set

from teamtracker import dates
from teamtracker.models import Task, task_span, visible_tasks


@dataclass(frozen=True)
class LaneAssignment:
    task: Task
    lane: int
    start_row: int  # index into the visible dates of the first visible day covered
    span_rows: int  # number of visible days covered


def _sort_key(task: Task):
    start, end = task_span(task)
    # start ascending, longer tasks first on the same start day
    return (start, -end.toordinal())


def assign_lanes(tasks: Iterable[Task], visible_dates: Sequence[date]) -> List[LaneAssignment]:
    """Assign lanes to one member's tasks for the visible date axis.

    Tasks without a usable range, soft-deleted tasks and tasks touching no
    visible day are left out of the result.
    """
    row_of: Dict[date, int] = {d: i for i, d in enumerate(visible_dates)}
    schedulable = [t for t in visible_tasks(tasks) if task_span(t) is not None]

    claimed: Dict[date, Set[int]] = defaultdict(set)
    result: List[LaneAssignment] = []

    for task in sorted(schedulable, key=_sort_key):
        start, end = task_span(task)
        days = list(dates.iter_days(start, end))

        taken: Set[int] = set()
        for d in days:
            taken |= claimed[d]
        lane = 0
        while lane in taken:
            lane += 1
        for d in days:
            claimed[d].add(lane)

        rows = [row_of[d] for d in days if d in row_of]
        if not rows:
            continue
        result.append(
            LaneAssignment(task=task, lane=lane, start_row=min(rows), span_rows=len(rows))
        )

    return result


def assign_member_lanes(
    tasks: Iterable[Task], visible_dates: Sequence[date]
) -> Dict[str, List[LaneAssignment]]:
    by_member: Dict[str, List[Task]] = defaultdict(list)
    for task in tasks:
        by_member[task.member_id].append(task)
    return {
        member_id: assign_lanes(member_tasks, visible_dates)
        for member_id, member_tasks in by_member.items()
    }


def lane_count(assignments: Iterable[LaneAssignment]) -> int:
    return max((a.lane for a in assignments), default=-1) + 1
