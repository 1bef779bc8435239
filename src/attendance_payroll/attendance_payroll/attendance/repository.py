from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord, GeoPoint


class AttendanceRepository(Protocol):
    """Attendance record store.

    ``(employee_id, work_date)`` is unique; the clock-in/clock-out writes are
    conditional so that two concurrent requests cannot both succeed.
    """

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_open_record(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        """Record with a clock-in but no clock-out for that day."""

        raise NotImplementedError

    def query_records(
        self,
        *,
        employee_id: Optional[int] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        status: Optional[AttendanceStatus] = None,
        limit: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def create_clock_in(
        self,
        *,
        employee_id: int,
        work_date: date,
        clock_in_time: datetime,
        status: AttendanceStatus,
        late_minutes: int = 0,
        location: Optional[GeoPoint] = None,
        notes: Optional[str] = None,
    ) -> int:
        """Insert the day's record. Raises AlreadyClockedIn if the day exists."""

        raise NotImplementedError

    def fill_clock_in(
        self,
        *,
        attendance_id: int,
        clock_in_time: datetime,
        status: AttendanceStatus,
        late_minutes: int = 0,
        location: Optional[GeoPoint] = None,
        notes: Optional[str] = None,
    ) -> bool:
        """Set clock-in on a record that has none yet and clear its derived hours.

        False if it already had one.
        """

        raise NotImplementedError

    def close_record(
        self,
        *,
        attendance_id: int,
        clock_out_time: datetime,
        break_hours: Decimal,
        total_hours: Decimal,
        overtime_hours: Decimal,
        early_departure_minutes: int,
        status: AttendanceStatus,
        location: Optional[GeoPoint] = None,
        notes: Optional[str] = None,
    ) -> bool:
        """Set clock-out on an open record. False if it was already closed."""

        raise NotImplementedError

    def insert_record(self, record: AttendanceRecord) -> int:
        """Insert a full record. Raises DuplicateRecord if the day exists."""

        raise NotImplementedError

    def upsert_record(self, record: AttendanceRecord) -> int:
        """Insert or replace the record keyed by (employee_id, work_date)."""

        raise NotImplementedError

    def delete(self, attendance_id: int) -> bool:
        raise NotImplementedError
