from __future__ import annotations

import logging
from decimal import Decimal
from typing import Optional, Sequence

from ..common.validators import require_non_negative
from ..core.enums import LatePenaltyType
from ..core.exceptions import RecordNotFound, ValidationError
from ..core.policy import PayrollPolicy
from .model import AttendanceRule, EffectiveRules
from .repository import AttendanceRuleRepository

logger = logging.getLogger(__name__)


class RuleService:
    """Owns the single active attendance rule set."""

    def __init__(self, rules: AttendanceRuleRepository, *, policy: Optional[PayrollPolicy] = None):
        self._rules = rules
        self._policy = policy or PayrollPolicy()

    def effective(self) -> EffectiveRules:
        rule = self._rules.get_active()
        policy = self._policy
        if rule is None:
            return EffectiveRules(
                grace_minutes=policy.late_grace_minutes,
                half_day_hours=policy.half_day_hours,
                overtime_threshold_hours=policy.standard_daily_hours,
                overtime_multiplier=policy.overtime_multiplier,
            )

        half_day_hours = policy.half_day_hours
        if rule.half_day_threshold is not None:
            half_day_hours = Decimal(rule.half_day_threshold) / 60
        overtime_threshold_hours = policy.standard_daily_hours
        if rule.overtime_threshold is not None:
            overtime_threshold_hours = Decimal(rule.overtime_threshold) / 60

        return EffectiveRules(
            grace_minutes=rule.late_grace_period,
            half_day_hours=half_day_hours,
            overtime_threshold_hours=overtime_threshold_hours,
            overtime_multiplier=rule.overtime_rate,
            late_penalty_type=rule.late_penalty_type,
            weekend_overtime=rule.weekend_overtime,
            holiday_overtime=rule.holiday_overtime,
        )

    def list_all(self) -> Sequence[AttendanceRule]:
        return self._rules.list_all()

    def create(
        self,
        *,
        rule_name: str,
        late_grace_period: int = 0,
        half_day_threshold: Optional[int] = None,
        overtime_threshold: Optional[int] = None,
        overtime_rate: Decimal = Decimal("1.5"),
        late_penalty_type: LatePenaltyType = LatePenaltyType.NONE,
        weekend_overtime: bool = False,
        holiday_overtime: bool = False,
        activate: bool = True,
    ) -> AttendanceRule:
        name = (rule_name or "").strip()
        if not name:
            raise ValidationError("Rule name is required")
        if late_grace_period < 0:
            raise ValidationError("late_grace_period must not be negative")
        require_non_negative(overtime_rate, "overtime_rate")

        rule_id = self._rules.create(
            rule_name=name,
            late_grace_period=int(late_grace_period),
            half_day_threshold=half_day_threshold,
            overtime_threshold=overtime_threshold,
            overtime_rate=overtime_rate,
            late_penalty_type=late_penalty_type,
            weekend_overtime=weekend_overtime,
            holiday_overtime=holiday_overtime,
        )
        if activate:
            self._rules.activate(rule_id)
        logger.info("Attendance rule %s created (active=%s)", rule_id, activate)
        return self.get(rule_id)

    def activate(self, rule_id: int) -> AttendanceRule:
        if not self._rules.activate(int(rule_id)):
            raise RecordNotFound("Attendance rule not found")
        logger.info("Attendance rule %s activated", rule_id)
        return self.get(rule_id)

    def get(self, rule_id: int) -> AttendanceRule:
        rule = self._rules.get_by_id(int(rule_id))
        if not rule:
            raise RecordNotFound("Attendance rule not found")
        return rule
