from __future__ import annotations

import calendar
import logging
from collections import defaultdict
from dataclasses import replace
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Any, Callable, Mapping, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.numbers import ZERO, round2, to_decimal
from ..common.validators import require_clock_order, require_date_range, require_non_negative
from ..core.constants import DEFAULT_LIST_LIMIT, MAX_LIST_LIMIT
from ..core.enums import AttendanceStatus
from ..core.exceptions import AlreadyClockedIn, NotClockedIn, RecordNotFound, ValidationError
from ..core.policy import PayrollPolicy
from ..employees.repository import EmployeeRepository
from ..rules.service import RuleService
from ..schedules.model import ScheduledShift
from ..schedules.service import ScheduleService
from .aggregator import summarize
from .factory import AttendanceStrategyFactory
from .metrics import derive_day_metrics
from .model import (
    AttendanceRecord,
    AttendanceStats,
    AttendanceSummary,
    EmployeeMonthStats,
    GeoPoint,
    MonthlyStats,
)
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

_CLOCKED_STATUSES = (AttendanceStatus.PRESENT, AttendanceStatus.LATE)
_EDITABLE_FIELDS = frozenset({"status", "clock_in_time", "clock_out_time", "break_hours", "total_hours", "notes"})


class AttendanceService:
    """Clock events and the administrative edits of attendance rows."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        schedules: ScheduleService,
        rules: RuleService,
        *,
        strategy_factory: AttendanceStrategyFactory | None = None,
        policy: PayrollPolicy | None = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._attendance = attendance
        self._employees = employees
        self._schedules = schedules
        self._rules = rules
        self._factory = strategy_factory or AttendanceStrategyFactory()
        self._policy = policy or PayrollPolicy()
        self._clock = clock

    def _require_employee(self, employee_id: int):
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise RecordNotFound("Employee not found")
        return employee

    def _require_record(self, attendance_id: int) -> AttendanceRecord:
        record = self._attendance.get_by_id(int(attendance_id))
        if not record:
            raise RecordNotFound("Attendance record not found")
        return record

    @staticmethod
    def _resolve_break(given: Optional[Decimal], current: Decimal, shift: Optional[ScheduledShift]) -> Decimal:
        if given is not None:
            return require_non_negative(to_decimal(given), "break_hours")
        if current and current > 0:
            return current
        if shift is not None and shift.break_minutes:
            return round2(Decimal(shift.break_minutes) / 60)
        return ZERO

    def clock_in(
        self,
        employee_id: int,
        *,
        timestamp: datetime | None = None,
        location: GeoPoint | None = None,
        notes: str | None = None,
        work_date: date | None = None,
    ) -> AttendanceRecord:
        now = timestamp or self._clock()
        work_date = work_date or now.date()

        employee = self._require_employee(employee_id)
        if not employee.is_active:
            raise ValidationError("Employee is not active")

        existing = self._attendance.get_for_employee_and_date(employee.employee_id, work_date)
        if existing and existing.clock_in_time is not None:
            raise AlreadyClockedIn("Already clocked in for this day")

        shift = self._schedules.shift_for(employee.employee_id, work_date)
        rules = self._rules.effective()
        strategy = self._factory.for_clock_in(now=now, work_date=work_date, shift=shift, rules=rules)
        decision = strategy.decide_clock_in(now=now, work_date=work_date, shift=shift, rules=rules)

        if existing:
            attendance_id = existing.attendance_id
            filled = self._attendance.fill_clock_in(
                attendance_id=attendance_id,
                clock_in_time=now,
                status=decision.status,
                late_minutes=decision.late_minutes,
                location=location,
                notes=notes,
            )
            if not filled:
                raise AlreadyClockedIn("Already clocked in for this day")
        else:
            attendance_id = self._attendance.create_clock_in(
                employee_id=employee.employee_id,
                work_date=work_date,
                clock_in_time=now,
                status=decision.status,
                late_minutes=decision.late_minutes,
                location=location,
                notes=notes,
            )

        logger.info(
            "Clock-in employee=%s date=%s status=%s late_minutes=%s",
            employee.employee_id,
            work_date,
            decision.status.value,
            decision.late_minutes,
        )
        return self._require_record(attendance_id)

    def _find_open_record(self, employee_id: int, now: datetime) -> Optional[AttendanceRecord]:
        record = self._attendance.get_open_record(employee_id, now.date())
        if record:
            return record

        # An overnight shift that started yesterday is closed on the next day.
        yesterday = now.date() - timedelta(days=1)
        shift = self._schedules.shift_for(employee_id, yesterday)
        if shift is not None and shift.end_time <= shift.start_time:
            return self._attendance.get_open_record(employee_id, yesterday)
        return None

    def clock_out(
        self,
        employee_id: int,
        *,
        timestamp: datetime | None = None,
        location: GeoPoint | None = None,
        break_hours: Decimal | None = None,
        notes: str | None = None,
        work_date: date | None = None,
    ) -> AttendanceRecord:
        now = timestamp or self._clock()
        if work_date is not None:
            record = self._attendance.get_open_record(int(employee_id), work_date)
        else:
            record = self._find_open_record(int(employee_id), now)
        if not record:
            raise NotClockedIn("No open clock-in for this day")

        require_clock_order(record.clock_in_time, now)

        shift = self._schedules.shift_for(record.employee_id, record.work_date)
        rules = self._rules.effective()
        breaks = self._resolve_break(break_hours, record.break_hours, shift)
        metrics = derive_day_metrics(
            clock_in=record.clock_in_time,
            clock_out=now,
            break_hours=breaks,
            work_date=record.work_date,
            shift=shift,
            rules=rules,
            is_holiday=self._policy.is_holiday(record.work_date),
        )
        strategy = self._factory.for_clock_out(current=record.status, total_hours=metrics.total_hours, rules=rules)
        decision = strategy.decide_clock_out(current=record.status, total_hours=metrics.total_hours, rules=rules)

        closed = self._attendance.close_record(
            attendance_id=record.attendance_id,
            clock_out_time=now,
            break_hours=breaks,
            total_hours=metrics.total_hours,
            overtime_hours=metrics.overtime_hours,
            early_departure_minutes=metrics.early_departure_minutes,
            status=decision.status,
            location=location,
            notes=notes,
        )
        if not closed:
            raise NotClockedIn("No open clock-in for this day")

        logger.info(
            "Clock-out employee=%s date=%s hours=%s overtime=%s status=%s",
            record.employee_id,
            record.work_date,
            metrics.total_hours,
            metrics.overtime_hours,
            decision.status.value,
        )
        return self._require_record(record.attendance_id)

    def _derive(self, record: AttendanceRecord, *, manual_hours: Optional[Decimal] = None) -> AttendanceRecord:
        """Recompute every derived field of an administratively entered record."""

        require_clock_order(record.clock_in_time, record.clock_out_time)
        if record.status in _CLOCKED_STATUSES and manual_hours is not None:
            raise ValidationError("total_hours can only be entered for absent, half-day or holiday records")

        shift = self._schedules.shift_for(record.employee_id, record.work_date)
        rules = self._rules.effective()
        status = record.status
        late = 0

        if record.clock_in_time is not None and status in _CLOCKED_STATUSES:
            strategy = self._factory.for_clock_in(
                now=record.clock_in_time, work_date=record.work_date, shift=shift, rules=rules
            )
            decision = strategy.decide_clock_in(
                now=record.clock_in_time, work_date=record.work_date, shift=shift, rules=rules
            )
            status, late = decision.status, decision.late_minutes

        if record.clock_in_time is not None and record.clock_out_time is not None:
            breaks = self._resolve_break(None, record.break_hours, shift)
            metrics = derive_day_metrics(
                clock_in=record.clock_in_time,
                clock_out=record.clock_out_time,
                break_hours=breaks,
                work_date=record.work_date,
                shift=shift,
                rules=rules,
                is_holiday=self._policy.is_holiday(record.work_date),
            )
            if status in _CLOCKED_STATUSES:
                strategy = self._factory.for_clock_out(current=status, total_hours=metrics.total_hours, rules=rules)
                status = strategy.decide_clock_out(current=status, total_hours=metrics.total_hours, rules=rules).status
            return replace(
                record,
                status=status,
                late_minutes=late,
                break_hours=breaks,
                total_hours=metrics.total_hours,
                overtime_hours=metrics.overtime_hours,
                early_departure_minutes=metrics.early_departure_minutes,
            )

        if manual_hours is not None and status not in _CLOCKED_STATUSES:
            total = round2(require_non_negative(to_decimal(manual_hours), "total_hours"))
        else:
            total = None
        return replace(
            record,
            status=status,
            late_minutes=late,
            total_hours=total,
            overtime_hours=ZERO,
            early_departure_minutes=0,
        )

    def record_manual(
        self,
        *,
        employee_id: int,
        work_date: date,
        status: AttendanceStatus = AttendanceStatus.PRESENT,
        clock_in_time: datetime | None = None,
        clock_out_time: datetime | None = None,
        break_hours: Decimal | None = None,
        total_hours: Decimal | None = None,
        notes: str | None = None,
    ) -> AttendanceRecord:
        employee = self._require_employee(employee_id)
        draft = AttendanceRecord(
            employee_id=employee.employee_id,
            work_date=work_date,
            status=status,
            clock_in_time=clock_in_time,
            clock_out_time=clock_out_time,
            break_hours=require_non_negative(to_decimal(break_hours), "break_hours"),
            notes=notes,
        )
        record = self._derive(draft, manual_hours=total_hours)
        attendance_id = self._attendance.insert_record(record)
        logger.info("Manual attendance employee=%s date=%s status=%s", record.employee_id, work_date, record.status.value)
        return self._require_record(attendance_id)

    def update_record(self, attendance_id: int, changes: Mapping[str, Any]) -> AttendanceRecord:
        """Apply administrative changes; employee and work date are fixed."""

        unknown = set(changes) - _EDITABLE_FIELDS
        if unknown:
            raise ValidationError(f"Fields cannot be changed: {', '.join(sorted(unknown))}")

        current = self._require_record(attendance_id)
        fields = {k: v for k, v in changes.items() if k != "total_hours"}
        if "break_hours" in fields:
            fields["break_hours"] = require_non_negative(to_decimal(fields["break_hours"]), "break_hours")
        merged = replace(current, **fields)

        manual_hours = changes.get("total_hours")
        if manual_hours is None and merged.clock_out_time is None:
            manual_hours = current.total_hours if merged.status not in _CLOCKED_STATUSES else None

        record = self._derive(merged, manual_hours=manual_hours)
        self._attendance.upsert_record(record)
        logger.info("Attendance %s updated (%s)", attendance_id, ", ".join(sorted(changes)))
        return self._require_record(attendance_id)

    def delete_record(self, attendance_id: int) -> None:
        if not self._attendance.delete(int(attendance_id)):
            raise RecordNotFound("Attendance record not found")
        logger.info("Attendance %s deleted", attendance_id)

    def get_today_record(self, employee_id: int, today: date | None = None) -> Optional[AttendanceRecord]:
        """Today's attendance record for an employee, if any."""
        today = today or self._clock().date()
        return self._attendance.get_for_employee_and_date(int(employee_id), today)

    def list_records(
        self,
        *,
        employee_id: int | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
        status: AttendanceStatus | None = None,
        limit: int = DEFAULT_LIST_LIMIT,
    ) -> Sequence[AttendanceRecord]:
        if date_from and date_to:
            require_date_range(date_from, date_to)
        limit = max(1, min(int(limit), MAX_LIST_LIMIT))
        return self._attendance.query_records(
            employee_id=employee_id,
            date_from=date_from,
            date_to=date_to,
            status=status,
            limit=limit,
        )

    def stats(
        self,
        *,
        employee_id: int | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
    ) -> AttendanceStats:
        if date_from and date_to:
            require_date_range(date_from, date_to)
        records = self._attendance.query_records(employee_id=employee_id, date_from=date_from, date_to=date_to)
        return summarize(records)

    def monthly_stats(
        self,
        year: int | None = None,
        month: int | None = None,
        *,
        employee_id: int | None = None,
    ) -> MonthlyStats:
        """One summary per active employee for a calendar month (default: current month).

        Employees without any record in the month are listed with zero stats.
        """

        today = self._clock().date()
        year = int(year) if year is not None else today.year
        month = int(month) if month is not None else today.month
        if not 1 <= month <= 12:
            raise ValidationError("month must be between 1 and 12")
        first = date(year, month, 1)
        last = first.replace(day=calendar.monthrange(year, month)[1])

        employees = [
            e for e in self._employees.list_active() if employee_id is None or e.employee_id == int(employee_id)
        ]
        by_employee: dict[int, list[AttendanceRecord]] = defaultdict(list)
        for r in self._attendance.query_records(employee_id=employee_id, date_from=first, date_to=last):
            by_employee[r.employee_id].append(r)

        return MonthlyStats(
            year=year,
            month=month,
            employees=[
                EmployeeMonthStats(
                    employee_id=e.employee_id,
                    full_name=e.full_name,
                    stats=summarize(by_employee[e.employee_id]),
                )
                for e in employees
            ],
        )

    def summary(self, *, date_from: date | None = None, date_to: date | None = None) -> AttendanceSummary:
        """Company-wide stats for a date range, today by default."""

        today = self._clock().date()
        date_from = date_from or today
        date_to = date_to or today
        require_date_range(date_from, date_to)

        records = self._attendance.query_records(date_from=date_from, date_to=date_to)
        return AttendanceSummary(
            date_from=date_from,
            date_to=date_to,
            stats=summarize(records),
            employees_with_attendance=len({r.employee_id for r in records}),
            total_active_employees=len(self._employees.list_active()),
        )
