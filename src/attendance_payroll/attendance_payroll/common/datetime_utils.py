from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Iterable, Iterator


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_hhmm(value: str) -> time:
    """Parse HH:MM (or HH:MM:SS) string into time."""
    value = value.strip()
    fmt = "%H:%M:%S" if value.count(":") == 2 else "%H:%M"
    return datetime.strptime(value, fmt).time()


def parse_holidays(value: str) -> frozenset[date]:
    return frozenset(parse_iso_date(part.strip()) for part in (value or "").split(",") if part.strip())


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def floor_minutes(delta: timedelta) -> int:
    """Whole minutes in ``delta``, rounded toward negative infinity."""
    return int(delta.total_seconds() // 60)


def iter_dates(start: date, end: date) -> Iterator[date]:
    day = start
    while day <= end:
        yield day
        day += timedelta(days=1)


def count_working_days(
    start: date,
    end: date,
    *,
    weekdays: Iterable[int],
    holidays: Iterable[date] = (),
) -> int:
    """Days in [start, end] that fall on one of ``weekdays`` and are not holidays."""
    wanted = frozenset(weekdays)
    skip = frozenset(holidays)
    return sum(1 for d in iter_dates(start, end) if d.weekday() in wanted and d not in skip)
