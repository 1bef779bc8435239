from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Sequence

from ..common.numbers import ZERO
from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class GeoPoint:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one attendance row per employee and work date."""

    employee_id: int
    work_date: date
    status: AttendanceStatus = AttendanceStatus.PRESENT
    clock_in_time: Optional[datetime] = None
    clock_out_time: Optional[datetime] = None
    total_hours: Optional[Decimal] = None
    overtime_hours: Decimal = ZERO
    break_hours: Decimal = ZERO
    late_minutes: int = 0
    early_departure_minutes: int = 0
    notes: Optional[str] = None
    clock_in_location: Optional[GeoPoint] = None
    clock_out_location: Optional[GeoPoint] = None
    attendance_id: Optional[int] = None

    @property
    def is_open(self) -> bool:
        return self.clock_in_time is not None and self.clock_out_time is None


@dataclass(frozen=True)
class AttendanceStats:
    """Aggregated view over a set of attendance rows."""

    total_records: int = 0
    present_count: int = 0
    absent_count: int = 0
    late_count: int = 0
    half_day_count: int = 0
    holiday_count: int = 0
    total_hours: Decimal = ZERO
    total_overtime_hours: Decimal = ZERO
    average_hours: Decimal = ZERO

    @property
    def payable_days(self) -> Decimal:
        """Days counted for pay: present and late days, half days at 0.5."""
        return Decimal(self.present_count + self.late_count) + Decimal(self.half_day_count) / 2


@dataclass(frozen=True)
class EmployeeMonthStats:
    employee_id: int
    full_name: str
    stats: AttendanceStats


@dataclass(frozen=True)
class MonthlyStats:
    """Per-employee attendance for one calendar month, active employees only."""

    year: int
    month: int
    employees: Sequence[EmployeeMonthStats] = ()


@dataclass(frozen=True)
class AttendanceSummary:
    date_from: date
    date_to: date
    stats: AttendanceStats
    employees_with_attendance: int = 0
    total_active_employees: int = 0
