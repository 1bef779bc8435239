from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import AttendanceStatus, LatePenaltyType
from ..rules.model import EffectiveRules
from ..schedules.model import ScheduledShift
from .metrics import is_late
from .strategies.base import AttendanceStrategy
from .strategies.half_day_strategy import HalfDayStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.normal_strategy import NormalStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules."""

    def for_clock_in(
        self,
        *,
        now: datetime,
        work_date: date,
        shift: Optional[ScheduledShift],
        rules: EffectiveRules,
    ) -> AttendanceStrategy:
        if is_late(now, work_date=work_date, shift=shift, grace_minutes=rules.grace_minutes):
            return LateStrategy()
        return NormalStrategy()

    def for_clock_out(self, *, current: AttendanceStatus, total_hours: Decimal, rules: EffectiveRules) -> AttendanceStrategy:
        if total_hours >= rules.half_day_hours:
            return NormalStrategy()
        if current == AttendanceStatus.PRESENT:
            return HalfDayStrategy()
        if current == AttendanceStatus.LATE and rules.late_penalty_type == LatePenaltyType.HALF_DAY:
            return HalfDayStrategy()
        return NormalStrategy()
