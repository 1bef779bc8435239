from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime, time
from decimal import Decimal
from typing import Optional

import pytest

from src.attendance_payroll.attendance_payroll.attendance.model import AttendanceRecord
from src.attendance_payroll.attendance_payroll.container import assemble
from src.attendance_payroll.attendance_payroll.core.enums import PayrollStatus, SalaryType
from src.attendance_payroll.attendance_payroll.core.exceptions import AlreadyClockedIn, DuplicateRecord
from src.attendance_payroll.attendance_payroll.core.policy import PayrollPolicy
from src.attendance_payroll.attendance_payroll.employees.model import Employee
from src.attendance_payroll.attendance_payroll.payroll.model import PayrollRecord
from src.attendance_payroll.attendance_payroll.rules.model import AttendanceRule
from src.attendance_payroll.attendance_payroll.schedules.model import WorkSchedule

# 2025-01-06 is a Monday.
MONDAY = date(2025, 1, 6)


@dataclass
class InMemoryEmployees:
    employees_by_id: dict[int, Employee]

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return self.employees_by_id.get(employee_id)

    def list_active(self):
        return [e for e in self.employees_by_id.values() if e.is_active]


@dataclass
class InMemorySchedules:
    rows: list[WorkSchedule] = field(default_factory=list)
    _id: int = 0

    def list_for_employee(self, employee_id: int):
        return sorted((r for r in self.rows if r.employee_id == employee_id), key=lambda r: r.day_of_week)

    def upsert(self, *, employee_id: int, day_of_week: int, start_time: time, end_time: time, break_minutes: int = 0) -> int:
        for i, r in enumerate(self.rows):
            if r.employee_id == employee_id and r.day_of_week == day_of_week:
                self.rows[i] = replace(r, start_time=start_time, end_time=end_time, break_minutes=break_minutes)
                return r.schedule_id
        self._id += 1
        self.rows.append(WorkSchedule(self._id, employee_id, day_of_week, start_time, end_time, break_minutes))
        return self._id

    def delete(self, *, schedule_id: int) -> bool:
        before = len(self.rows)
        self.rows = [r for r in self.rows if r.schedule_id != schedule_id]
        return len(self.rows) < before


@dataclass
class InMemoryRules:
    rules: dict[int, AttendanceRule] = field(default_factory=dict)
    _id: int = 0

    def get_active(self) -> Optional[AttendanceRule]:
        active = [r for r in self.rules.values() if r.is_active]
        return active[-1] if active else None

    def get_by_id(self, rule_id: int) -> Optional[AttendanceRule]:
        return self.rules.get(rule_id)

    def list_all(self):
        return list(self.rules.values())

    def create(self, **fields) -> int:
        self._id += 1
        self.rules[self._id] = AttendanceRule(rule_id=self._id, is_active=False, **fields)
        return self._id

    def activate(self, rule_id: int) -> bool:
        if rule_id not in self.rules:
            return False
        for rid, rule in self.rules.items():
            self.rules[rid] = replace(rule, is_active=(rid == rule_id))
        return True


class InMemoryAttendance:
    def __init__(self):
        self.by_id: dict[int, AttendanceRecord] = {}
        self._id = 0

    def _key_taken(self, employee_id: int, work_date: date) -> bool:
        return self.get_for_employee_and_date(employee_id, work_date) is not None

    def _next_id(self) -> int:
        self._id += 1
        return self._id

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        return self.by_id.get(attendance_id)

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        for r in self.by_id.values():
            if r.employee_id == employee_id and r.work_date == work_date:
                return r
        return None

    def get_open_record(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        r = self.get_for_employee_and_date(employee_id, work_date)
        return r if r and r.is_open else None

    def query_records(self, *, employee_id=None, date_from=None, date_to=None, status=None, limit=None):
        rows = [
            r
            for r in self.by_id.values()
            if (employee_id is None or r.employee_id == employee_id)
            and (date_from is None or r.work_date >= date_from)
            and (date_to is None or r.work_date <= date_to)
            and (status is None or r.status == status)
        ]
        rows.sort(key=lambda r: (r.work_date, r.employee_id), reverse=True)
        return rows[:limit] if limit is not None else rows

    def create_clock_in(self, *, employee_id, work_date, clock_in_time, status, late_minutes=0, location=None, notes=None) -> int:
        if self._key_taken(employee_id, work_date):
            raise AlreadyClockedIn("Already clocked in for this day")
        attendance_id = self._next_id()
        self.by_id[attendance_id] = AttendanceRecord(
            attendance_id=attendance_id,
            employee_id=employee_id,
            work_date=work_date,
            clock_in_time=clock_in_time,
            status=status,
            late_minutes=late_minutes,
            clock_in_location=location,
            notes=notes,
        )
        return attendance_id

    def fill_clock_in(self, *, attendance_id, clock_in_time, status, late_minutes=0, location=None, notes=None) -> bool:
        r = self.by_id.get(attendance_id)
        if not r or r.clock_in_time is not None:
            return False
        self.by_id[attendance_id] = replace(
            r,
            clock_in_time=clock_in_time,
            status=status,
            late_minutes=late_minutes,
            clock_in_location=location,
            notes=notes if notes is not None else r.notes,
            total_hours=None,
            overtime_hours=Decimal("0"),
            early_departure_minutes=0,
        )
        return True

    def close_record(
        self,
        *,
        attendance_id,
        clock_out_time,
        break_hours,
        total_hours,
        overtime_hours,
        early_departure_minutes,
        status,
        location=None,
        notes=None,
    ) -> bool:
        r = self.by_id.get(attendance_id)
        if not r or not r.is_open:
            return False
        self.by_id[attendance_id] = replace(
            r,
            clock_out_time=clock_out_time,
            break_hours=break_hours,
            total_hours=total_hours,
            overtime_hours=overtime_hours,
            early_departure_minutes=early_departure_minutes,
            status=status,
            clock_out_location=location,
            notes=notes if notes is not None else r.notes,
        )
        return True

    def insert_record(self, record: AttendanceRecord) -> int:
        if self._key_taken(record.employee_id, record.work_date):
            raise DuplicateRecord("Attendance record already exists for this date")
        attendance_id = self._next_id()
        self.by_id[attendance_id] = replace(record, attendance_id=attendance_id)
        return attendance_id

    def upsert_record(self, record: AttendanceRecord) -> int:
        existing = self.get_for_employee_and_date(record.employee_id, record.work_date)
        attendance_id = existing.attendance_id if existing else self._next_id()
        self.by_id[attendance_id] = replace(record, attendance_id=attendance_id)
        return attendance_id

    def delete(self, attendance_id: int) -> bool:
        return self.by_id.pop(attendance_id, None) is not None


class InMemoryPayroll:
    def __init__(self):
        self.by_id: dict[int, PayrollRecord] = {}
        self._id = 0

    def get_by_id(self, payroll_id: int) -> Optional[PayrollRecord]:
        return self.by_id.get(payroll_id)

    def query(self, *, employee_id=None, status=None, period_start=None, period_end=None, limit=None):
        rows = [
            r
            for r in self.by_id.values()
            if (employee_id is None or r.employee_id == employee_id)
            and (status is None or r.status == status)
            and (period_start is None or r.pay_period_start >= period_start)
            and (period_end is None or r.pay_period_end <= period_end)
        ]
        rows.sort(key=lambda r: (r.pay_period_end, r.payroll_id), reverse=True)
        return rows[:limit] if limit is not None else rows

    def insert(self, record: PayrollRecord) -> int:
        for r in self.by_id.values():
            key = (r.employee_id, r.pay_period_start, r.pay_period_end)
            if key == (record.employee_id, record.pay_period_start, record.pay_period_end):
                raise DuplicateRecord("Payroll already exists for this period")
        self._id += 1
        self.by_id[self._id] = replace(record, payroll_id=self._id)
        return self._id

    def update(self, record: PayrollRecord) -> bool:
        current = self.by_id.get(record.payroll_id)
        if not current or current.status == PayrollStatus.PAID:
            return False
        self.by_id[record.payroll_id] = replace(
            record, status=current.status, payment_date=current.payment_date
        )
        return True

    def update_status(self, payroll_id: int, *, expected, status, payment_date=None) -> bool:
        current = self.by_id.get(payroll_id)
        if not current or current.status != expected:
            return False
        self.by_id[payroll_id] = replace(
            current, status=status, payment_date=payment_date or current.payment_date
        )
        return True

    def update_payment_date(self, payroll_id: int, payment_date) -> bool:
        current = self.by_id.get(payroll_id)
        if not current:
            return False
        self.by_id[payroll_id] = replace(current, payment_date=payment_date)
        return True

    def delete(self, payroll_id: int) -> bool:
        current = self.by_id.get(payroll_id)
        if not current or current.status == PayrollStatus.PAID:
            return False
        del self.by_id[payroll_id]
        return True


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def employees():
    return InMemoryEmployees(
        {
            1: Employee(1, "Monthly Staff", SalaryType.MONTHLY, base_salary=Decimal("3000")),
            2: Employee(2, "Daily Worker", SalaryType.DAILY, daily_wage=Decimal("100")),
            3: Employee(3, "Hourly Contractor", SalaryType.HOURLY, hourly_rate=Decimal("20")),
            4: Employee(4, "No Rate", SalaryType.HOURLY),
            5: Employee(5, "Former Staff", SalaryType.MONTHLY, base_salary=Decimal("2000"), is_active=False),
        }
    )


@pytest.fixture
def policy():
    return PayrollPolicy()


@pytest.fixture
def clock():
    return FakeClock(datetime(2025, 1, 6, 9, 0))


@pytest.fixture
def container(employees, policy, clock):
    return assemble(
        employees_repo=employees,
        attendance_repo=InMemoryAttendance(),
        schedules_repo=InMemorySchedules(),
        rules_repo=InMemoryRules(),
        payroll_repo=InMemoryPayroll(),
        policy=policy,
        clock=clock,
        today=lambda: date(2025, 2, 5),
    )


@pytest.fixture
def attendance_service(container):
    return container.attendance_service


@pytest.fixture
def payroll_service(container):
    return container.payroll_service


@pytest.fixture
def app(container):
    from src.attendance_payroll.attendance_payroll.main import create_app

    return create_app(container, settings_module="config.testing")


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def rules_repo():
    return InMemoryRules()


@pytest.fixture
def schedules_repo():
    return InMemorySchedules()
