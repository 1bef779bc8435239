from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from ..core.enums import LatePenaltyType


@dataclass(frozen=True)
class AttendanceRule:
    """Business rule set for lateness, half days and overtime.

    Thresholds are stored in minutes, as entered by the administrator.
    """

    rule_id: int
    rule_name: str
    late_grace_period: int = 0
    half_day_threshold: Optional[int] = None
    overtime_threshold: Optional[int] = None
    overtime_rate: Decimal = Decimal("1.5")
    late_penalty_type: LatePenaltyType = LatePenaltyType.NONE
    weekend_overtime: bool = False
    holiday_overtime: bool = False
    is_active: bool = True


@dataclass(frozen=True)
class EffectiveRules:
    """Rule values after falling back to the configured policy."""

    grace_minutes: int
    half_day_hours: Decimal
    overtime_threshold_hours: Decimal
    overtime_multiplier: Decimal
    late_penalty_type: LatePenaltyType = LatePenaltyType.NONE
    weekend_overtime: bool = False
    holiday_overtime: bool = False
