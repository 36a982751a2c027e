from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta
from typing import Iterator, List, Optional, Union

from teamtracker.clock import Clock

DateLike = Union[date, datetime, str]

WEEKDAY_LABELS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]


def parse_date(value: Optional[DateLike]) -> Optional[date]:
    """Coerce ISO strings / datetimes to a date. Unparseable input gives None."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip()[:10])
    except ValueError:
        return None


def format_date(d: date) -> str:
    return d.strftime("%Y-%m-%d")


def format_month(d: date) -> str:
    return d.strftime("%Y-%m")


def format_date_long(d: date) -> str:
    return d.strftime("%d %b %Y")


def day_of_week(d: date) -> str:
    return WEEKDAY_LABELS[d.weekday()]


def is_weekend(d: date) -> bool:
    return d.weekday() >= 5


def is_within(d: date, start: date, end: date) -> bool:
    """Inclusive containment: start <= d <= end."""
    return start <= d <= end


def is_today(d: date, clock: Clock) -> bool:
    return d == clock.today()


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def month_dates(year: int, month: int) -> List[date]:
    return [date(year, month, day) for day in range(1, days_in_month(year, month) + 1)]


def iter_days(start: date, end: date) -> Iterator[date]:
    d = start
    while d <= end:
        yield d
        if d == end:
            break
        d += timedelta(days=1)


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    """(year, month) moved by ``delta`` months, e.g. paging the calendar."""
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1
