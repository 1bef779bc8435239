from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, time
from decimal import Decimal
from typing import Any, Mapping

from ..common.datetime_utils import parse_hhmm, parse_holidays
from . import constants


@dataclass(frozen=True)
class PayrollPolicy:
    """Business-wide defaults applied when no attendance rule is active."""

    late_grace_minutes: int = constants.DEFAULT_LATE_GRACE_MINUTES
    standard_daily_hours: Decimal = constants.DEFAULT_STANDARD_DAILY_HOURS
    standard_monthly_hours: Decimal = constants.DEFAULT_STANDARD_MONTHLY_HOURS
    overtime_multiplier: Decimal = constants.DEFAULT_OVERTIME_MULTIPLIER
    half_day_hours: Decimal = constants.DEFAULT_HALF_DAY_HOURS
    default_shift_start: time = parse_hhmm(constants.DEFAULT_SHIFT_START)
    default_shift_end: time = parse_hhmm(constants.DEFAULT_SHIFT_END)
    public_holidays: frozenset[date] = field(default_factory=frozenset)

    @classmethod
    def from_settings(cls, raw: Mapping[str, Any] | None) -> "PayrollPolicy":
        if not raw:
            return cls()
        defaults = cls()
        return cls(
            late_grace_minutes=int(raw.get("late_grace_minutes", defaults.late_grace_minutes)),
            standard_daily_hours=Decimal(str(raw.get("standard_daily_hours", defaults.standard_daily_hours))),
            standard_monthly_hours=Decimal(str(raw.get("standard_monthly_hours", defaults.standard_monthly_hours))),
            overtime_multiplier=Decimal(str(raw.get("overtime_multiplier", defaults.overtime_multiplier))),
            half_day_hours=Decimal(str(raw.get("half_day_hours", defaults.half_day_hours))),
            default_shift_start=parse_hhmm(str(raw.get("default_shift_start", constants.DEFAULT_SHIFT_START))),
            default_shift_end=parse_hhmm(str(raw.get("default_shift_end", constants.DEFAULT_SHIFT_END))),
            public_holidays=parse_holidays(str(raw.get("public_holidays", ""))),
        )

    def is_holiday(self, day: date) -> bool:
        return day in self.public_holidays
