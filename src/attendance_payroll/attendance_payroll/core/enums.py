from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Attendance status stored on each per-day record."""

    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"
    HALF_DAY = "half_day"
    HOLIDAY = "holiday"


class SalaryType(str, Enum):
    MONTHLY = "monthly"
    DAILY = "daily"
    HOURLY = "hourly"


class PayrollStatus(str, Enum):
    """Payroll approval flow. Only moves forward: draft -> approved -> paid."""

    DRAFT = "draft"
    APPROVED = "approved"
    PAID = "paid"


class LatePenaltyType(str, Enum):
    NONE = "none"
    HALF_DAY = "half_day"
