from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.exceptions import ValidationError


def require_non_negative(value: Decimal, field_name: str) -> Decimal:
    if value < 0:
        raise ValidationError(f"{field_name} must not be negative")
    return value


def require_date_range(start: date, end: date, *, start_name: str = "date_from", end_name: str = "date_to") -> None:
    if end < start:
        raise ValidationError(f"{end_name} must not be before {start_name}")


def require_clock_order(clock_in: Optional[datetime], clock_out: Optional[datetime]) -> None:
    if clock_out is None:
        return
    if clock_in is None:
        raise ValidationError("clock_out_time requires clock_in_time")
    if clock_out < clock_in:
        raise ValidationError("clock_out_time cannot be earlier than clock_in_time")
