from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta


@dataclass(frozen=True)
class WorkSchedule:
    """Weekly schedule row: one per employee and weekday (Monday=0)."""

    schedule_id: int
    employee_id: int
    day_of_week: int
    start_time: time
    end_time: time
    break_minutes: int = 0


@dataclass(frozen=True)
class ScheduledShift:
    """The shift an employee is expected to work on a given day."""

    start_time: time
    end_time: time
    break_minutes: int = 0

    def starts_at(self, work_date: date) -> datetime:
        return datetime.combine(work_date, self.start_time)

    def ends_at(self, work_date: date) -> datetime:
        end = datetime.combine(work_date, self.end_time)
        # overnight shift
        if self.end_time <= self.start_time:
            end += timedelta(days=1)
        return end
