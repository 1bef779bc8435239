from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ...core.enums import AttendanceStatus
from ...rules.model import EffectiveRules
from ...schedules.model import ScheduledShift


@dataclass(frozen=True)
class StatusDecision:
    status: AttendanceStatus
    late_minutes: int = 0
    note: Optional[str] = None


class AttendanceStrategy(ABC):
    """Strategy Pattern: encapsulate how we decide an attendance status."""

    @abstractmethod
    def decide_clock_in(
        self,
        *,
        now: datetime,
        work_date: date,
        shift: Optional[ScheduledShift],
        rules: EffectiveRules,
    ) -> StatusDecision:
        raise NotImplementedError

    @abstractmethod
    def decide_clock_out(self, *, current: AttendanceStatus, total_hours: Decimal, rules: EffectiveRules) -> StatusDecision:
        raise NotImplementedError
