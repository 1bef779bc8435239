from __future__ import annotations

import logging
from datetime import date, time
from typing import Optional, Sequence

from ..core.constants import DEFAULT_WORKING_WEEKDAYS
from ..core.exceptions import RecordNotFound, ValidationError
from ..core.policy import PayrollPolicy
from .model import ScheduledShift, WorkSchedule
from .repository import WorkScheduleRepository

logger = logging.getLogger(__name__)


class ScheduleService:
    """Weekly work schedules.

    An employee without any schedule row works the default shift
    (policy start/end) Monday to Friday.
    """

    def __init__(self, schedules: WorkScheduleRepository, *, policy: Optional[PayrollPolicy] = None):
        self._schedules = schedules
        self._policy = policy or PayrollPolicy()

    def _default_shift(self) -> ScheduledShift:
        return ScheduledShift(start_time=self._policy.default_shift_start, end_time=self._policy.default_shift_end)

    def shift_for(self, employee_id: int, work_date: date) -> Optional[ScheduledShift]:
        """Expected shift on ``work_date``; None when it is a day off."""
        rows = self._schedules.list_for_employee(int(employee_id))
        weekday = work_date.weekday()
        if not rows:
            return self._default_shift() if weekday in DEFAULT_WORKING_WEEKDAYS else None

        for r in rows:
            if r.day_of_week == weekday:
                return ScheduledShift(start_time=r.start_time, end_time=r.end_time, break_minutes=r.break_minutes)
        return None

    def working_weekdays(self, employee_id: int) -> frozenset[int]:
        rows = self._schedules.list_for_employee(int(employee_id))
        if not rows:
            return DEFAULT_WORKING_WEEKDAYS
        return frozenset(r.day_of_week for r in rows)

    def list_for_employee(self, employee_id: int) -> Sequence[WorkSchedule]:
        return self._schedules.list_for_employee(int(employee_id))

    def assign(
        self,
        *,
        employee_id: int,
        day_of_week: int,
        start_time: time,
        end_time: time,
        break_minutes: int = 0,
    ) -> WorkSchedule:
        if int(employee_id) <= 0:
            raise ValidationError("Invalid employee")
        if not 0 <= int(day_of_week) <= 6:
            raise ValidationError("day_of_week must be between 0 (Monday) and 6 (Sunday)")
        if start_time == end_time:
            raise ValidationError("Shift start and end cannot be equal")
        if int(break_minutes) < 0:
            raise ValidationError("break_minutes must not be negative")

        schedule_id = self._schedules.upsert(
            employee_id=int(employee_id),
            day_of_week=int(day_of_week),
            start_time=start_time,
            end_time=end_time,
            break_minutes=int(break_minutes),
        )
        logger.info("Schedule set employee=%s day=%s %s-%s", employee_id, day_of_week, start_time, end_time)
        return WorkSchedule(
            schedule_id=schedule_id,
            employee_id=int(employee_id),
            day_of_week=int(day_of_week),
            start_time=start_time,
            end_time=end_time,
            break_minutes=int(break_minutes),
        )

    def delete(self, *, schedule_id: int) -> None:
        if not self._schedules.delete(schedule_id=int(schedule_id)):
            raise RecordNotFound("Work schedule not found")
