from __future__ import annotations

from datetime import time
from typing import Protocol, Sequence

from .model import WorkSchedule


class WorkScheduleRepository(Protocol):
    def list_for_employee(self, employee_id: int) -> Sequence[WorkSchedule]:
        raise NotImplementedError

    def upsert(
        self,
        *,
        employee_id: int,
        day_of_week: int,
        start_time: time,
        end_time: time,
        break_minutes: int = 0,
    ) -> int:
        """Create or update the schedule of one weekday.

        Returns schedule_id.
        """

        raise NotImplementedError

    def delete(self, *, schedule_id: int) -> bool:
        raise NotImplementedError
