from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from ..core.enums import LatePenaltyType


class RuleCreateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    rule_name: str = Field(min_length=1, max_length=100)
    late_grace_period: int = Field(default=0, ge=0, le=240)
    half_day_threshold: int | None = Field(default=None, ge=0, le=1440)
    overtime_threshold: int | None = Field(default=None, ge=0, le=1440)
    overtime_rate: Decimal = Field(default=Decimal("1.5"), ge=0, le=10)
    late_penalty_type: LatePenaltyType = LatePenaltyType.NONE
    weekend_overtime: bool = False
    holiday_overtime: bool = False
    activate: bool = True


class RuleRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    rule_id: int
    rule_name: str
    late_grace_period: int
    half_day_threshold: int | None
    overtime_threshold: int | None
    overtime_rate: Decimal
    late_penalty_type: LatePenaltyType
    weekend_overtime: bool
    holiday_overtime: bool
    is_active: bool
