from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, model_validator

from ..core.constants import DEFAULT_LIST_LIMIT, MAX_LIST_LIMIT
from ..core.enums import AttendanceStatus
from .model import GeoPoint


def _to_local_naive(value: datetime) -> datetime:
    # Records store local wall-clock time.
    if value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


LocalDateTime = Annotated[datetime, AfterValidator(_to_local_naive)]


class Location(BaseModel):
    model_config = ConfigDict(extra="forbid", from_attributes=True)

    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)

    def to_point(self) -> GeoPoint:
        return GeoPoint(latitude=self.latitude, longitude=self.longitude)


class ClockInRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    employee_id: int = Field(ge=1)
    timestamp: LocalDateTime | None = None
    location: Location | None = None
    notes: str | None = Field(default=None, max_length=1000)


class ClockOutRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    employee_id: int = Field(ge=1)
    timestamp: LocalDateTime | None = None
    location: Location | None = None
    break_hours: Decimal | None = Field(default=None, ge=0, le=24)
    notes: str | None = Field(default=None, max_length=1000)


class ManualAttendanceRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    employee_id: int = Field(ge=1)
    work_date: date
    status: AttendanceStatus = AttendanceStatus.PRESENT
    clock_in_time: LocalDateTime | None = None
    clock_out_time: LocalDateTime | None = None
    break_hours: Decimal | None = Field(default=None, ge=0, le=24)
    total_hours: Decimal | None = Field(default=None, ge=0, le=24)
    notes: str | None = Field(default=None, max_length=1000)

    @model_validator(mode="after")
    def _check_times(self) -> "ManualAttendanceRequest":
        if self.clock_out_time and not self.clock_in_time:
            raise ValueError("clock_out_time requires clock_in_time")
        if self.clock_in_time and self.clock_out_time and self.clock_out_time < self.clock_in_time:
            raise ValueError("clock_out_time cannot be earlier than clock_in_time")
        return self


class AttendanceUpdateRequest(BaseModel):
    """Administrative edit. Only the fields sent are changed."""

    model_config = ConfigDict(extra="forbid")

    status: AttendanceStatus | None = None
    clock_in_time: LocalDateTime | None = None
    clock_out_time: LocalDateTime | None = None
    break_hours: Decimal | None = Field(default=None, ge=0, le=24)
    total_hours: Decimal | None = Field(default=None, ge=0, le=24)
    notes: str | None = Field(default=None, max_length=1000)

    @model_validator(mode="after")
    def _status_not_null(self) -> "AttendanceUpdateRequest":
        if "status" in self.model_fields_set and self.status is None:
            raise ValueError("status cannot be null")
        return self

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class StatsQuery(BaseModel):
    model_config = ConfigDict(extra="forbid")

    employee_id: int | None = Field(default=None, ge=1)
    date_from: date | None = None
    date_to: date | None = None


class AttendanceListQuery(StatsQuery):
    status: AttendanceStatus | None = None
    limit: int = Field(default=DEFAULT_LIST_LIMIT, ge=1, le=MAX_LIST_LIMIT)


class TodayQuery(BaseModel):
    model_config = ConfigDict(extra="forbid")

    employee_id: int = Field(ge=1)


class AttendanceRecordRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    attendance_id: int | None
    employee_id: int
    work_date: date
    status: AttendanceStatus
    clock_in_time: datetime | None
    clock_out_time: datetime | None
    total_hours: Decimal | None
    overtime_hours: Decimal
    break_hours: Decimal
    late_minutes: int
    early_departure_minutes: int
    notes: str | None
    clock_in_location: Location | None
    clock_out_location: Location | None


class AttendanceStatsRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_records: int
    present_count: int
    absent_count: int
    late_count: int
    half_day_count: int
    holiday_count: int
    total_hours: Decimal
    total_overtime_hours: Decimal
    average_hours: Decimal
    payable_days: Decimal


class MonthlyStatsQuery(BaseModel):
    model_config = ConfigDict(extra="forbid")

    year: int | None = Field(default=None, ge=1970, le=9999)
    month: int | None = Field(default=None, ge=1, le=12)
    employee_id: int | None = Field(default=None, ge=1)


class SummaryQuery(BaseModel):
    model_config = ConfigDict(extra="forbid")

    date_from: date | None = None
    date_to: date | None = None


class EmployeeMonthStatsRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    employee_id: int
    full_name: str
    stats: AttendanceStatsRead


class MonthlyStatsRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    year: int
    month: int
    employees: list[EmployeeMonthStatsRead]


class AttendanceSummaryRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    date_from: date
    date_to: date
    stats: AttendanceStatsRead
    employees_with_attendance: int
    total_active_employees: int
