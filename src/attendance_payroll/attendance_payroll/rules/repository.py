from __future__ import annotations

from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.enums import LatePenaltyType
from .model import AttendanceRule


class AttendanceRuleRepository(Protocol):
    def get_active(self) -> Optional[AttendanceRule]:
        raise NotImplementedError

    def get_by_id(self, rule_id: int) -> Optional[AttendanceRule]:
        raise NotImplementedError

    def list_all(self) -> Sequence[AttendanceRule]:
        raise NotImplementedError

    def create(
        self,
        *,
        rule_name: str,
        late_grace_period: int,
        half_day_threshold: Optional[int],
        overtime_threshold: Optional[int],
        overtime_rate: Decimal,
        late_penalty_type: LatePenaltyType,
        weekend_overtime: bool,
        holiday_overtime: bool,
    ) -> int:
        """Insert an inactive rule; returns rule_id."""

        raise NotImplementedError

    def activate(self, rule_id: int) -> bool:
        """Make ``rule_id`` the only active rule (single transaction)."""

        raise NotImplementedError
