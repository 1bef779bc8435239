from __future__ import annotations

from datetime import date, datetime, time
from decimal import Decimal

import pytest

from src.attendance_payroll.attendance_payroll.attendance.model import GeoPoint
from src.attendance_payroll.attendance_payroll.core.enums import AttendanceStatus, LatePenaltyType
from src.attendance_payroll.attendance_payroll.core.exceptions import (
    AlreadyClockedIn,
    DuplicateRecord,
    NotClockedIn,
    RecordNotFound,
    ValidationError,
)


def test_clock_in_on_time_uses_default_schedule(attendance_service):
    record = attendance_service.clock_in(1, timestamp=datetime(2025, 1, 6, 9, 4))

    assert record.work_date == date(2025, 1, 6)
    assert record.status == AttendanceStatus.PRESENT
    assert record.late_minutes == 0
    assert record.clock_out_time is None


def test_clock_in_after_grace_is_late(attendance_service):
    record = attendance_service.clock_in(1, timestamp=datetime(2025, 1, 6, 9, 20, 30))

    assert record.status == AttendanceStatus.LATE
    assert record.late_minutes == 20


def test_clock_in_seconds_past_grace_is_late(attendance_service):
    record = attendance_service.clock_in(1, timestamp=datetime(2025, 1, 6, 9, 5, 59))

    assert record.status == AttendanceStatus.LATE
    assert record.late_minutes == 5


def test_clock_in_stores_location_and_notes(attendance_service):
    record = attendance_service.clock_in(
        1,
        timestamp=datetime(2025, 1, 6, 8, 55),
        location=GeoPoint(latitude=10.77, longitude=106.70),
        notes="front gate",
    )

    assert record.clock_in_location == GeoPoint(latitude=10.77, longitude=106.70)
    assert record.notes == "front gate"


def test_clock_in_uses_service_clock_when_no_timestamp(attendance_service, clock):
    clock.now = datetime(2025, 1, 7, 8, 59)

    record = attendance_service.clock_in(1)

    assert record.clock_in_time == datetime(2025, 1, 7, 8, 59)
    assert record.work_date == date(2025, 1, 7)


def test_scheduled_shift_makes_clock_in_late(container):
    # Monday shift starts at 08:00 instead of the default 09:00.
    container.schedule_service.assign(employee_id=1, day_of_week=0, start_time=time(8, 0), end_time=time(16, 0))

    record = container.attendance_service.clock_in(1, timestamp=datetime(2025, 1, 6, 8, 30))

    assert record.status == AttendanceStatus.LATE
    assert record.late_minutes == 30


def test_day_without_schedule_has_no_lateness(attendance_service):
    # Saturday is not in the default schedule.
    record = attendance_service.clock_in(1, timestamp=datetime(2025, 1, 11, 13, 0))

    assert record.status == AttendanceStatus.PRESENT
    assert record.late_minutes == 0


def test_second_clock_in_is_rejected(attendance_service):
    attendance_service.clock_in(1, timestamp=datetime(2025, 1, 6, 9, 0))

    with pytest.raises(AlreadyClockedIn):
        attendance_service.clock_in(1, timestamp=datetime(2025, 1, 6, 9, 30))


def test_clock_in_after_closed_day_is_rejected(attendance_service):
    attendance_service.clock_in(1, timestamp=datetime(2025, 1, 6, 9, 0))
    attendance_service.clock_out(1, timestamp=datetime(2025, 1, 6, 17, 0))

    with pytest.raises(AlreadyClockedIn):
        attendance_service.clock_in(1, timestamp=datetime(2025, 1, 6, 18, 0))


def test_clock_in_unknown_or_inactive_employee(attendance_service):
    with pytest.raises(RecordNotFound):
        attendance_service.clock_in(99, timestamp=datetime(2025, 1, 6, 9, 0))
    with pytest.raises(ValidationError):
        attendance_service.clock_in(5, timestamp=datetime(2025, 1, 6, 9, 0))


def test_clock_in_fills_pre_entered_day(attendance_service):
    attendance_service.record_manual(employee_id=1, work_date=date(2025, 1, 6), status=AttendanceStatus.ABSENT)

    record = attendance_service.clock_in(1, timestamp=datetime(2025, 1, 6, 9, 0))

    assert record.status == AttendanceStatus.PRESENT
    assert record.clock_in_time == datetime(2025, 1, 6, 9, 0)


def test_clock_in_clears_hours_entered_for_the_day(attendance_service):
    attendance_service.record_manual(
        employee_id=1, work_date=date(2025, 1, 6), status=AttendanceStatus.HALF_DAY, total_hours=Decimal("4")
    )

    record = attendance_service.clock_in(1, timestamp=datetime(2025, 1, 6, 9, 0))

    assert record.is_open
    assert record.status == AttendanceStatus.PRESENT
    assert record.total_hours is None
    assert record.overtime_hours == Decimal("0")
    assert attendance_service.stats(employee_id=1).total_hours == Decimal("0")

    closed = attendance_service.clock_out(1, timestamp=datetime(2025, 1, 6, 17, 0))
    assert closed.total_hours == Decimal("8.00")


def test_clock_out_without_clock_in_is_rejected(attendance_service):
    with pytest.raises(NotClockedIn):
        attendance_service.clock_out(1, timestamp=datetime(2025, 1, 6, 17, 0))


def test_clock_out_twice_is_rejected(attendance_service):
    attendance_service.clock_in(1, timestamp=datetime(2025, 1, 6, 9, 0))
    attendance_service.clock_out(1, timestamp=datetime(2025, 1, 6, 17, 0))

    with pytest.raises(NotClockedIn):
        attendance_service.clock_out(1, timestamp=datetime(2025, 1, 6, 18, 0))


def test_clock_out_computes_hours_and_overtime(attendance_service):
    attendance_service.clock_in(1, timestamp=datetime(2025, 1, 6, 8, 30))

    record = attendance_service.clock_out(1, timestamp=datetime(2025, 1, 6, 19, 0), break_hours=Decimal("1"))

    assert record.total_hours == Decimal("9.50")
    assert record.overtime_hours == Decimal("1.50")
    assert record.break_hours == Decimal("1")
    assert record.early_departure_minutes == 0
    assert record.status == AttendanceStatus.PRESENT


def test_clock_out_break_falls_back_to_schedule(container):
    container.schedule_service.assign(
        employee_id=1, day_of_week=0, start_time=time(9, 0), end_time=time(17, 0), break_minutes=30
    )
    service = container.attendance_service
    service.clock_in(1, timestamp=datetime(2025, 1, 6, 9, 0))

    record = service.clock_out(1, timestamp=datetime(2025, 1, 6, 17, 0))

    assert record.break_hours == Decimal("0.50")
    assert record.total_hours == Decimal("7.50")


def test_clock_out_total_hours_clamped_at_zero(attendance_service):
    attendance_service.clock_in(1, timestamp=datetime(2025, 1, 6, 9, 0))

    record = attendance_service.clock_out(1, timestamp=datetime(2025, 1, 6, 9, 30), break_hours=Decimal("1"))

    assert record.total_hours == Decimal("0")


def test_clock_out_early_short_day_becomes_half_day(attendance_service):
    attendance_service.clock_in(1, timestamp=datetime(2025, 1, 6, 9, 0))

    record = attendance_service.clock_out(1, timestamp=datetime(2025, 1, 6, 12, 0))

    assert record.status == AttendanceStatus.HALF_DAY
    assert record.total_hours == Decimal("3.00")
    assert record.early_departure_minutes == 300


def test_late_short_day_keeps_late_unless_penalty_rule(container):
    service = container.attendance_service
    service.clock_in(1, timestamp=datetime(2025, 1, 6, 10, 0))
    assert service.clock_out(1, timestamp=datetime(2025, 1, 6, 12, 0)).status == AttendanceStatus.LATE

    container.rule_service.create(rule_name="Strict", late_penalty_type=LatePenaltyType.HALF_DAY)
    service.clock_in(1, timestamp=datetime(2025, 1, 7, 10, 0))
    assert service.clock_out(1, timestamp=datetime(2025, 1, 7, 12, 0)).status == AttendanceStatus.HALF_DAY


def test_clock_out_before_clock_in_is_invalid(attendance_service):
    attendance_service.clock_in(1, timestamp=datetime(2025, 1, 6, 9, 0))

    with pytest.raises(ValidationError):
        attendance_service.clock_out(1, timestamp=datetime(2025, 1, 6, 8, 0))


def test_overnight_shift_is_closed_next_morning(container):
    container.schedule_service.assign(employee_id=1, day_of_week=0, start_time=time(22, 0), end_time=time(6, 0))
    service = container.attendance_service
    service.clock_in(1, timestamp=datetime(2025, 1, 6, 22, 0))

    record = service.clock_out(1, timestamp=datetime(2025, 1, 7, 6, 0))

    assert record.work_date == date(2025, 1, 6)
    assert record.total_hours == Decimal("8.00")
    assert record.overtime_hours == Decimal("0")


def test_record_manual_derives_metrics_and_rejects_duplicates(attendance_service):
    record = attendance_service.record_manual(
        employee_id=1,
        work_date=date(2025, 1, 8),
        clock_in_time=datetime(2025, 1, 8, 9, 30),
        clock_out_time=datetime(2025, 1, 8, 18, 30),
        break_hours=Decimal("1"),
    )

    assert record.status == AttendanceStatus.LATE
    assert record.late_minutes == 30
    assert record.total_hours == Decimal("8.00")

    with pytest.raises(DuplicateRecord):
        attendance_service.record_manual(employee_id=1, work_date=date(2025, 1, 8), status=AttendanceStatus.ABSENT)


def test_record_manual_hours_only_for_non_present_statuses(attendance_service):
    record = attendance_service.record_manual(
        employee_id=1, work_date=date(2025, 1, 9), status=AttendanceStatus.HALF_DAY, total_hours=Decimal("4")
    )
    assert record.total_hours == Decimal("4.00")

    with pytest.raises(ValidationError):
        attendance_service.record_manual(
            employee_id=1, work_date=date(2025, 1, 10), status=AttendanceStatus.PRESENT, total_hours=Decimal("8")
        )


def test_update_record_rederives_metrics(attendance_service):
    attendance_service.clock_in(1, timestamp=datetime(2025, 1, 6, 9, 0))
    closed = attendance_service.clock_out(1, timestamp=datetime(2025, 1, 6, 17, 0))

    updated = attendance_service.update_record(
        closed.attendance_id, {"clock_out_time": datetime(2025, 1, 6, 20, 0), "notes": "fixed by admin"}
    )

    assert updated.total_hours == Decimal("11.00")
    assert updated.overtime_hours == Decimal("3.00")
    assert updated.notes == "fixed by admin"


def test_update_record_rejects_identity_fields(attendance_service):
    record = attendance_service.clock_in(1, timestamp=datetime(2025, 1, 6, 9, 0))

    with pytest.raises(ValidationError):
        attendance_service.update_record(record.attendance_id, {"employee_id": 2})


def test_delete_record(attendance_service):
    record = attendance_service.clock_in(1, timestamp=datetime(2025, 1, 6, 9, 0))

    attendance_service.delete_record(record.attendance_id)

    assert attendance_service.get_today_record(1, date(2025, 1, 6)) is None
    with pytest.raises(RecordNotFound):
        attendance_service.delete_record(record.attendance_id)


def test_stats_and_list_filter_by_employee_and_dates(attendance_service):
    attendance_service.clock_in(1, timestamp=datetime(2025, 1, 6, 9, 0))
    attendance_service.clock_out(1, timestamp=datetime(2025, 1, 6, 17, 0))
    attendance_service.clock_in(1, timestamp=datetime(2025, 1, 7, 9, 30))
    attendance_service.clock_out(1, timestamp=datetime(2025, 1, 7, 18, 30))
    attendance_service.clock_in(2, timestamp=datetime(2025, 1, 7, 9, 0))

    stats = attendance_service.stats(employee_id=1, date_from=date(2025, 1, 1), date_to=date(2025, 1, 31))

    assert stats.total_records == 2
    assert stats.present_count == 1
    assert stats.late_count == 1
    assert stats.total_hours == Decimal("17.00")
    assert stats.total_overtime_hours == Decimal("1.00")

    rows = attendance_service.list_records(date_from=date(2025, 1, 7), date_to=date(2025, 1, 7))
    assert {r.employee_id for r in rows} == {1, 2}

    with pytest.raises(ValidationError):
        attendance_service.stats(date_from=date(2025, 2, 1), date_to=date(2025, 1, 1))


def _january_activity(attendance_service):
    attendance_service.clock_in(1, timestamp=datetime(2025, 1, 6, 9, 0))
    attendance_service.clock_out(1, timestamp=datetime(2025, 1, 6, 17, 0))
    attendance_service.clock_in(1, timestamp=datetime(2025, 1, 7, 9, 30))
    attendance_service.clock_out(1, timestamp=datetime(2025, 1, 7, 18, 30))
    attendance_service.record_manual(employee_id=1, work_date=date(2025, 2, 3), status=AttendanceStatus.ABSENT)
    attendance_service.record_manual(employee_id=2, work_date=date(2025, 1, 8), status=AttendanceStatus.ABSENT)
    # inactive employee
    attendance_service.record_manual(employee_id=5, work_date=date(2025, 1, 9), status=AttendanceStatus.ABSENT)


def test_monthly_stats_lists_every_active_employee(attendance_service):
    _january_activity(attendance_service)

    monthly = attendance_service.monthly_stats(2025, 1)

    assert (monthly.year, monthly.month) == (2025, 1)
    assert [e.employee_id for e in monthly.employees] == [1, 2, 3, 4]
    first = monthly.employees[0]
    assert first.full_name == "Monthly Staff"
    assert first.stats.total_records == 2
    assert first.stats.present_count == 1
    assert first.stats.late_count == 1
    assert first.stats.absent_count == 0
    assert first.stats.total_hours == Decimal("17.00")
    assert first.stats.total_overtime_hours == Decimal("1.00")
    assert monthly.employees[1].stats.absent_count == 1
    assert monthly.employees[2].stats.total_records == 0


def test_monthly_stats_filters_and_defaults_to_current_month(attendance_service):
    _january_activity(attendance_service)

    only_two = attendance_service.monthly_stats(2025, 1, employee_id=2)
    assert [e.employee_id for e in only_two.employees] == [2]

    # clock fixture is 2025-01-06
    current = attendance_service.monthly_stats()
    assert (current.year, current.month) == (2025, 1)

    february = attendance_service.monthly_stats(2025, 2, employee_id=1)
    assert february.employees[0].stats.absent_count == 1

    with pytest.raises(ValidationError):
        attendance_service.monthly_stats(2025, 13)


def test_summary_counts_employees_with_attendance(attendance_service):
    _january_activity(attendance_service)

    summary = attendance_service.summary(date_from=date(2025, 1, 1), date_to=date(2025, 1, 31))

    assert summary.stats.total_records == 4
    assert summary.employees_with_attendance == 3
    assert summary.total_active_employees == 4

    today = attendance_service.summary()
    assert (today.date_from, today.date_to) == (date(2025, 1, 6), date(2025, 1, 6))
    assert today.stats.total_records == 1
    assert today.employees_with_attendance == 1
