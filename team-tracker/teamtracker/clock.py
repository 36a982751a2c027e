"""Injectable time sources.

Every function that needs "now" or "today" takes a Clock instead of reading
the system time, so pages pin dates to the configured zone and tests pin them
to a fixed instant.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Protocol
from zoneinfo import ZoneInfo


class Clock(Protocol):
    tz: ZoneInfo

    def now(self) -> datetime: ...

    def today(self) -> date: ...


@dataclass(frozen=True)
class SystemClock:
    tz: ZoneInfo

    @classmethod
    def for_zone(cls, name: str) -> "SystemClock":
        return cls(ZoneInfo(name))

    def now(self) -> datetime:
        return datetime.now(timezone.utc).astimezone(self.tz)

    def today(self) -> date:
        return self.now().date()


@dataclass(frozen=True)
class FixedClock:
    instant: datetime
    tz: ZoneInfo = ZoneInfo("UTC")

    def now(self) -> datetime:
        if self.instant.tzinfo is None:
            return self.instant.replace(tzinfo=self.tz)
        return self.instant.astimezone(self.tz)

    def today(self) -> date:
        return self.now().date()


def to_local_date(ts: datetime, tz: ZoneInfo) -> date:
    """Calendar day of a timestamp in zone ``tz``; naive values are taken as UTC."""
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(tz).date()
