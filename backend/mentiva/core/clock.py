"""Calendar clock shared by every day/week boundary computation."""
from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Callable, Optional


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class CalendarClock:
    """UTC calendar helpers; pass ``now`` to pin the clock in tests."""

    def __init__(self, now: Optional[Callable[[], datetime]] = None):
        self._now = now or _utc_now

    def now(self) -> datetime:
        return self._now()

    def today(self) -> date:
        return self._now().astimezone(timezone.utc).date()

    def yesterday(self) -> date:
        return self.today() - timedelta(days=1)

    def week_start(self, day: date | None = None) -> date:
        """Monday of the week containing ``day`` (defaults to today)."""
        day = day or self.today()
        return day - timedelta(days=day.weekday())

    def week_dates(self, day: date | None = None) -> list[date]:
        start = self.week_start(day)
        return [start + timedelta(days=offset) for offset in range(7)]

    def month_start(self, day: date | None = None) -> date:
        day = day or self.today()
        return day.replace(day=1)

    def day_name(self, day: date | None = None) -> str:
        return (day or self.today()).strftime("%A")

    def is_weekend(self, day: date | None = None) -> bool:
        return (day or self.today()).weekday() >= 5


def fixed_clock(day: date) -> CalendarClock:
    """Clock pinned to noon UTC of ``day``."""
    moment = datetime(day.year, day.month, day.day, 12, 0, tzinfo=timezone.utc)
    return CalendarClock(now=lambda: moment)
