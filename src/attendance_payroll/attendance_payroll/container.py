from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Optional

from .attendance.factory import AttendanceStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .common.datetime_utils import now_local
from .core.policy import PayrollPolicy
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .payroll.mysql_payroll_repository import MySQLPayrollRepository
from .payroll.repository import PayrollRepository
from .payroll.service import PayrollService
from .rules.mysql_rule_repository import MySQLAttendanceRuleRepository
from .rules.repository import AttendanceRuleRepository
from .rules.service import RuleService
from .schedules.mysql_schedule_repository import MySQLWorkScheduleRepository
from .schedules.repository import WorkScheduleRepository
from .schedules.service import ScheduleService


@dataclass(frozen=True)
class Container:
    policy: PayrollPolicy

    employees_repo: EmployeeRepository
    attendance_repo: AttendanceRepository
    schedules_repo: WorkScheduleRepository
    rules_repo: AttendanceRuleRepository
    payroll_repo: PayrollRepository

    schedule_service: ScheduleService
    rule_service: RuleService
    attendance_service: AttendanceService
    payroll_service: PayrollService

    conn: Optional[DatabaseConnection] = None


def assemble(
    *,
    employees_repo: EmployeeRepository,
    attendance_repo: AttendanceRepository,
    schedules_repo: WorkScheduleRepository,
    rules_repo: AttendanceRuleRepository,
    payroll_repo: PayrollRepository,
    policy: Optional[PayrollPolicy] = None,
    conn: Optional[DatabaseConnection] = None,
    clock: Optional[Callable[[], datetime]] = None,
    today: Optional[Callable[[], date]] = None,
) -> Container:
    """Wire services on top of the given repositories (MySQL or in-memory)."""

    policy = policy or PayrollPolicy()
    schedule_service = ScheduleService(schedules_repo, policy=policy)
    rule_service = RuleService(rules_repo, policy=policy)

    attendance_service = AttendanceService(
        attendance_repo,
        employees_repo,
        schedule_service,
        rule_service,
        strategy_factory=AttendanceStrategyFactory(),
        policy=policy,
        clock=clock or now_local,
    )
    payroll_service = PayrollService(
        payroll_repo,
        employees_repo,
        attendance_repo,
        schedule_service,
        rule_service,
        policy=policy,
        today=today or date.today,
    )

    return Container(
        policy=policy,
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        schedules_repo=schedules_repo,
        rules_repo=rules_repo,
        payroll_repo=payroll_repo,
        schedule_service=schedule_service,
        rule_service=rule_service,
        attendance_service=attendance_service,
        payroll_service=payroll_service,
        conn=conn,
    )


def build_container(*, db_config: dict, policy: Optional[PayrollPolicy] = None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return assemble(
        employees_repo=MySQLEmployeeRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        schedules_repo=MySQLWorkScheduleRepository(conn),
        rules_repo=MySQLAttendanceRuleRepository(conn),
        payroll_repo=MySQLPayrollRepository(conn),
        policy=policy,
        conn=conn,
    )
