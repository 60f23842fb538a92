from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta
from typing import Iterator


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_hhmm_to_minutes(value: str) -> int:
    """Parse HH:MM into minutes since midnight."""
    t = datetime.strptime(value.strip(), "%H:%M").time()
    return t.hour * 60 + t.minute


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def minutes_of_day(moment: datetime) -> int:
    """Wall-clock minutes since midnight; seconds are ignored."""
    return moment.hour * 60 + moment.minute


def iter_dates(start: date, end: date) -> Iterator[date]:
    day = start
    while day <= end:
        yield day
        day += timedelta(days=1)


def month_bounds(year: int, month: int) -> tuple[date, date]:
    last = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last)


def same_month(a: date, b: date) -> bool:
    return a.year == b.year and a.month == b.month


def is_sunday(day: date) -> bool:
    return day.weekday() == 6
