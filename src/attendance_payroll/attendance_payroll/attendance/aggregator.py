from __future__ import annotations

from typing import Iterable

from ..common.numbers import ZERO, round2
from ..core.enums import AttendanceStatus
from .model import AttendanceRecord, AttendanceStats


def summarize(records: Iterable[AttendanceRecord]) -> AttendanceStats:
    """Fold attendance rows into counts and hour totals.

    Pure and order independent. ``average_hours`` divides by the number of
    ``present`` rows and is 0 when there are none.
    """

    counts = {status: 0 for status in AttendanceStatus}
    total = 0
    hours = ZERO
    overtime = ZERO
    for r in records:
        total += 1
        counts[r.status] += 1
        hours += r.total_hours or ZERO
        overtime += r.overtime_hours or ZERO

    present = counts[AttendanceStatus.PRESENT]
    average = round2(hours / present) if present else ZERO

    return AttendanceStats(
        total_records=total,
        present_count=present,
        absent_count=counts[AttendanceStatus.ABSENT],
        late_count=counts[AttendanceStatus.LATE],
        half_day_count=counts[AttendanceStatus.HALF_DAY],
        holiday_count=counts[AttendanceStatus.HOLIDAY],
        total_hours=round2(hours),
        total_overtime_hours=round2(overtime),
        average_hours=average,
    )
