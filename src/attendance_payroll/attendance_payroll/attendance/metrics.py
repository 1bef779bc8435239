"""Derived per-day attendance figures.

Every value stored in ``total_hours``, ``overtime_hours``, ``late_minutes``
and ``early_departure_minutes`` is computed here and nowhere else.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Optional

from ..common.datetime_utils import floor_minutes
from ..common.numbers import ZERO, round2
from ..core.constants import WEEKEND_WEEKDAYS
from ..rules.model import EffectiveRules
from ..schedules.model import ScheduledShift

_SECONDS_PER_HOUR = Decimal(3600)


@dataclass(frozen=True)
class DayMetrics:
    total_hours: Decimal
    overtime_hours: Decimal
    early_departure_minutes: int


def worked_hours(clock_in: datetime, clock_out: datetime, break_hours: Decimal = ZERO) -> Decimal:
    """(out - in) - break, in hours, never negative."""
    delta = clock_out - clock_in
    seconds = Decimal(delta.days * 86400 + delta.seconds) + Decimal(delta.microseconds) / Decimal(1_000_000)
    hours = seconds / _SECONDS_PER_HOUR - (break_hours or ZERO)
    return round2(max(hours, ZERO))


def overtime_hours(
    total_hours: Decimal,
    *,
    work_date: date,
    rules: EffectiveRules,
    is_holiday: bool = False,
) -> Decimal:
    if rules.weekend_overtime and work_date.weekday() in WEEKEND_WEEKDAYS:
        return round2(total_hours)
    if rules.holiday_overtime and is_holiday:
        return round2(total_hours)
    if total_hours > rules.overtime_threshold_hours:
        return round2(total_hours - rules.overtime_threshold_hours)
    return ZERO


def is_late(clock_in: datetime, *, work_date: date, shift: Optional[ScheduledShift], grace_minutes: int) -> bool:
    """Strictly after the scheduled start plus the grace period, to the second."""
    if shift is None:
        return False
    return clock_in > shift.starts_at(work_date) + timedelta(minutes=grace_minutes)


def late_minutes(clock_in: datetime, *, work_date: date, shift: Optional[ScheduledShift], grace_minutes: int) -> int:
    """Whole minutes past the scheduled start, or 0 when not late."""
    if not is_late(clock_in, work_date=work_date, shift=shift, grace_minutes=grace_minutes):
        return 0
    return floor_minutes(clock_in - shift.starts_at(work_date))


def early_departure_minutes(clock_out: datetime, *, work_date: date, shift: Optional[ScheduledShift]) -> int:
    if shift is None:
        return 0
    early = floor_minutes(shift.ends_at(work_date) - clock_out)
    return early if early > 0 else 0


def derive_day_metrics(
    *,
    clock_in: datetime,
    clock_out: datetime,
    break_hours: Decimal,
    work_date: date,
    shift: Optional[ScheduledShift],
    rules: EffectiveRules,
    is_holiday: bool = False,
) -> DayMetrics:
    total = worked_hours(clock_in, clock_out, break_hours)
    return DayMetrics(
        total_hours=total,
        overtime_hours=overtime_hours(total, work_date=work_date, rules=rules, is_holiday=is_holiday),
        early_departure_minutes=early_departure_minutes(clock_out, work_date=work_date, shift=shift),
    )
