from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ...core.enums import AttendanceStatus
from ...rules.model import EffectiveRules
from ...schedules.model import ScheduledShift
from .base import AttendanceStrategy, StatusDecision


class NormalStrategy(AttendanceStrategy):
    """On-time clock-in, clock-out keeps the current status."""

    def decide_clock_in(
        self,
        *,
        now: datetime,
        work_date: date,
        shift: Optional[ScheduledShift],
        rules: EffectiveRules,
    ) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.PRESENT)

    def decide_clock_out(self, *, current: AttendanceStatus, total_hours: Decimal, rules: EffectiveRules) -> StatusDecision:
        return StatusDecision(status=current)
