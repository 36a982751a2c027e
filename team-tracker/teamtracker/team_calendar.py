"""Team calendar: day axis x member axis, with task bars placed by lane.

Bars are positioned with
  top    = start_row * row_height
  height = span_rows * row_height
  left   = lane * lane_width
inside each member's column. A bar is one widget, but its completion control
lives on the row of the task's end date.
"""
from __future__ import annotations

import html
import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable, Dict, List, Optional, Sequence

from teamtracker import dates
from teamtracker.clock import Clock
from teamtracker.errors import MutationFailedError
from teamtracker.holidays import get_holiday_name
from teamtracker.lanes import assign_member_lanes, lane_count
from teamtracker.models import Member, ReportingWindow, Task, TaskStatus, task_span, visible_tasks
from teamtracker.overlap import filter_by_window
from teamtracker.status import transition
from teamtracker.store import TaskStore
from teamtracker.theme import contrast_color

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DayRow:
    day: date
    weekday: str
    is_today: bool
    is_weekend: bool
    holiday: Optional[str] = None

    @property
    def is_off(self) -> bool:
        return self.is_weekend or self.holiday is not None


def build_day_axis(
    year: int,
    month: int,
    clock: Clock,
    holiday_lookup: Callable[[date], Optional[str]] = get_holiday_name,
) -> List[DayRow]:
    today = clock.today()
    return [
        DayRow(
            day=d,
            weekday=dates.day_of_week(d),
            is_today=d == today,
            is_weekend=dates.is_weekend(d),
            holiday=holiday_lookup(d),
        )
        for d in dates.month_dates(year, month)
    ]


def member_axis(members: Sequence[Member], selected_member_id: Optional[str] = None) -> List[Member]:
    """Members in creation order, optionally narrowed to one."""
    ordered = sorted(members, key=lambda m: (m.created_at is None, m.created_at.timestamp() if m.created_at else 0.0))
    if selected_member_id:
        ordered = [m for m in ordered if m.id == selected_member_id]
    return ordered


@dataclass(frozen=True)
class TaskBlock:
    task: Task
    member: Member
    lane: int
    start_row: int
    span_rows: int
    top: int
    height: int
    left: float
    width: float
    background: str
    foreground: str
    completion_row: Optional[int]  # row of end_date, None when it is off-screen

    @property
    def completed(self) -> bool:
        return self.task.status == TaskStatus.COMPLETED


@dataclass(frozen=True)
class CalendarLayout:
    days: List[DayRow]
    members: List[Member]
    blocks: List[TaskBlock]
    row_height: int
    column_width: Dict[str, float]

    def blocks_for(self, member_id: str) -> List[TaskBlock]:
        return [b for b in self.blocks if b.member.id == member_id]


def can_complete_on(task: Task, day: date) -> bool:
    """The completion control is only live on the task's final day."""
    span = task_span(task)
    return span is not None and task.status == TaskStatus.PENDING and span[1] == day


def layout_calendar(
    tasks: Sequence[Task],
    members: Sequence[Member],
    days: Sequence[DayRow],
    *,
    row_height: int,
    lane_width: int,
    max_column_width: Optional[float] = None,
    selected_member_id: Optional[str] = None,
) -> CalendarLayout:
    """Lay out every visible task as a positioned block.

    When ``max_column_width`` is given and a member needs more lanes than
    fit, that member's lanes shrink to share the column.
    """
    axis = member_axis(members, selected_member_id)
    member_ids = {m.id for m in axis}
    visible_dates = [row.day for row in days]
    row_of = {d: i for i, d in enumerate(visible_dates)}

    own_tasks = [t for t in visible_tasks(tasks) if t.member_id in member_ids]
    lanes_by_member = assign_member_lanes(own_tasks, visible_dates)

    blocks: List[TaskBlock] = []
    column_width: Dict[str, float] = {}
    for member in axis:
        assignments = lanes_by_member.get(member.id, [])
        lanes = max(1, lane_count(assignments))
        width = float(lane_width)
        if max_column_width is not None and lanes * width > max_column_width:
            width = max_column_width / lanes
        column_width[member.id] = lanes * width

        fg = contrast_color(member.color)
        for a in assignments:
            end = task_span(a.task)[1]
            blocks.append(
                TaskBlock(
                    task=a.task,
                    member=member,
                    lane=a.lane,
                    start_row=a.start_row,
                    span_rows=a.span_rows,
                    top=a.start_row * row_height,
                    height=a.span_rows * row_height,
                    left=a.lane * width,
                    width=width,
                    background=member.color,
                    foreground=fg,
                    completion_row=row_of.get(end),
                )
            )

    return CalendarLayout(
        days=list(days),
        members=axis,
        blocks=blocks,
        row_height=row_height,
        column_width=column_width,
    )


class CalendarBoard:
    """In-memory task set behind the calendar screen.

    Status toggles are applied locally first and then written to the store.
    If the write fails the board refetches from the store and re-raises as
    MutationFailedError; local state is never patched by guesswork.
    """

    def __init__(self, store: TaskStore, clock: Clock, window: ReportingWindow) -> None:
        self.store = store
        self.clock = clock
        self.window = window
        self._tasks: List[Task] = []
        self._members: List[Member] = []

    @property
    def tasks(self) -> List[Task]:
        return list(self._tasks)

    @property
    def members(self) -> List[Member]:
        return list(self._members)

    def pending_tasks(self) -> List[Task]:
        return [t for t in self._tasks if t.status == TaskStatus.PENDING]

    def refresh(self) -> None:
        """Replace local state with a fresh read; the latest fetch always wins."""
        fetched = self.store.list_tasks(window=self.window)
        self._tasks = filter_by_window(fetched, self.window)
        self._members = self.store.list_members()

    def show_month(self, year: int, month: int) -> None:
        self.window = ReportingWindow.for_month(year, month)
        self.refresh()

    def complete(self, task_id: str) -> Task:
        return self._apply(task_id, TaskStatus.COMPLETED)

    def reopen(self, task_id: str) -> Task:
        return self._apply(task_id, TaskStatus.PENDING)

    def _apply(self, task_id: str, status: TaskStatus) -> Task:
        current = self._find(task_id)
        optimistic = transition(current, status, self.clock)
        self._replace(optimistic)

        try:
            saved = self.store.update_task_status(task_id, optimistic.status, optimistic.completed_at)
        except Exception as exc:
            logger.warning("Reverting task %s after failed update: %s", task_id, exc)
            self._replace(current)
            try:
                self.refresh()
            except Exception as refetch_exc:
                logger.warning("Refetch after failed update of task %s also failed: %s", task_id, refetch_exc)
            if isinstance(exc, MutationFailedError):
                raise
            raise MutationFailedError(task_id, str(exc)) from exc

        self._replace(saved)
        return saved

    def layout(
        self,
        days: Sequence[DayRow],
        *,
        row_height: int,
        lane_width: int,
        max_column_width: Optional[float] = None,
        selected_member_id: Optional[str] = None,
    ) -> CalendarLayout:
        return layout_calendar(
            self._tasks,
            self._members,
            days,
            row_height=row_height,
            lane_width=lane_width,
            max_column_width=max_column_width,
            selected_member_id=selected_member_id,
        )

    def _find(self, task_id: str) -> Task:
        for t in self._tasks:
            if t.id == task_id:
                return t
        raise KeyError(task_id)

    def _replace(self, task: Task) -> None:
        self._tasks = [task if t.id == task.id else t for t in self._tasks]


def calendar_html(layout: CalendarLayout) -> str:
    """Render the layout as an HTML table with absolutely positioned bars."""
    rows = len(layout.days)
    header_cells = ["<th class='cal-header-cell cal-date-col'>Date</th>"]
    for m in layout.members:
        header_cells.append(
            f"<th class='cal-header-cell' style='min-width:{layout.column_width.get(m.id, 0):.0f}px'>"
            f"<span class='cal-swatch' style='background:{m.color}'></span>{html.escape(m.name)}</th>"
        )

    body_rows: List[str] = []
    for i, row in enumerate(layout.days):
        classes = ["cal-day-cell"]
        if row.is_today:
            classes.append("cal-today")
        if row.is_off:
            classes.append("cal-off")
        label = f"{row.day.day} <span class='cal-weekday'>{row.weekday}</span>"
        if row.holiday:
            label += f" <span class='cal-holiday-tag'>{html.escape(row.holiday)}</span>"
        cells = [
            f"<td class='{' '.join(classes)}' style='height:{layout.row_height}px'>{label}</td>"
        ]
        if i == 0:
            for m in layout.members:
                cells.append(
                    f"<td class='cal-member-col' rowspan='{rows}'>"
                    f"<div class='cal-lane-box' style='height:{rows * layout.row_height}px'>"
                    f"{''.join(_block_html(b, layout.row_height) for b in layout.blocks_for(m.id))}"
                    "</div></td>"
                )
        body_rows.append(f"<tr id='date-{dates.format_date(row.day)}'>" + "".join(cells) + "</tr>")

    return f"""
    <div class='cal-wrapper'>
      <table class='cal-table'>
        <thead><tr>{''.join(header_cells)}</tr></thead>
        <tbody>{''.join(body_rows)}</tbody>
      </table>
    </div>
    """


def _block_html(block: TaskBlock, row_height: int) -> str:
    cls = "cal-task cal-task-done" if block.completed else "cal-task"
    marker = ""
    if block.completion_row is not None:
        offset = (block.completion_row - block.start_row) * row_height
        symbol = "&#10003;" if block.completed else "&#9675;"
        marker = f"<span class='cal-complete-anchor' style='top:{offset}px'>{symbol}</span>"
    return (
        f"<div class='{cls}' title='{html.escape(block.task.title, quote=True)}' "
        f"style='top:{block.top}px;height:{block.height}px;left:{block.left:.1f}px;"
        f"width:{block.width:.1f}px;background:{block.background};color:{block.foreground}'>"
        f"<div class='cal-task-title'>{html.escape(block.task.title)}</div>"
        f"<div class='cal-task-amount'>{block.task.amount:,}</div>"
        f"{marker}</div>"
    )
