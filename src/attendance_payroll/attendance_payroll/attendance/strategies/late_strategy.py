from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ...core.enums import AttendanceStatus
from ...rules.model import EffectiveRules
from ...schedules.model import ScheduledShift
from ..metrics import late_minutes
from .base import AttendanceStrategy, StatusDecision


class LateStrategy(AttendanceStrategy):
    """Clock-in after the scheduled start plus grace period."""

    def decide_clock_in(
        self,
        *,
        now: datetime,
        work_date: date,
        shift: Optional[ScheduledShift],
        rules: EffectiveRules,
    ) -> StatusDecision:
        minutes = late_minutes(now, work_date=work_date, shift=shift, grace_minutes=rules.grace_minutes)
        return StatusDecision(status=AttendanceStatus.LATE, late_minutes=minutes, note=f"Late by {minutes} min")

    def decide_clock_out(self, *, current: AttendanceStatus, total_hours: Decimal, rules: EffectiveRules) -> StatusDecision:
        return StatusDecision(status=current)
