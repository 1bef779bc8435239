from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ...core.enums import AttendanceStatus
from ...rules.model import EffectiveRules
from ...schedules.model import ScheduledShift
from .base import AttendanceStrategy, StatusDecision


class HalfDayStrategy(AttendanceStrategy):
    """Worked hours below the half-day threshold at clock-out."""

    def decide_clock_in(
        self,
        *,
        now: datetime,
        work_date: date,
        shift: Optional[ScheduledShift],
        rules: EffectiveRules,
    ) -> StatusDecision:
        # Half days are only known once the employee leaves.
        return StatusDecision(status=AttendanceStatus.PRESENT)

    def decide_clock_out(self, *, current: AttendanceStatus, total_hours: Decimal, rules: EffectiveRules) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.HALF_DAY, note=f"Worked {total_hours}h")
