from __future__ import annotations

from decimal import Decimal

from ...attendance.model import AttendanceStats
from ...common.numbers import ZERO, round2
from ...core.constants import DEFAULT_STANDARD_DAILY_HOURS, DEFAULT_STANDARD_MONTHLY_HOURS
from ...core.enums import SalaryType
from ...core.exceptions import InvalidSalaryConfiguration
from ...employees.model import Employee
from .base import PayrollCalculator

_RATE_FIELD = {
    SalaryType.MONTHLY: "base_salary",
    SalaryType.DAILY: "daily_wage",
    SalaryType.HOURLY: "hourly_rate",
}


class StandardPayrollCalculator(PayrollCalculator):
    """Pay by salary type.

    monthly: base_salary pro-rated by payable days over working days
    daily:   daily_wage per payable day
    hourly:  hourly_rate per regular (non-overtime) hour
    """

    def __init__(
        self,
        *,
        standard_daily_hours: Decimal = DEFAULT_STANDARD_DAILY_HOURS,
        standard_monthly_hours: Decimal = DEFAULT_STANDARD_MONTHLY_HOURS,
    ):
        self._daily_hours = Decimal(standard_daily_hours)
        self._monthly_hours = Decimal(standard_monthly_hours)

    @staticmethod
    def _rate(employee: Employee) -> Decimal:
        name = _RATE_FIELD[employee.salary_type]
        value = getattr(employee, name)
        if value is None:
            raise InvalidSalaryConfiguration(
                f"Employee {employee.employee_id} has salary type {employee.salary_type.value} but no {name}"
            )
        return Decimal(value)

    def basic_salary(self, employee: Employee, stats: AttendanceStats, working_days: int) -> Decimal:
        rate = self._rate(employee)
        if employee.salary_type == SalaryType.MONTHLY:
            if working_days <= 0:
                return ZERO
            return round2(rate * stats.payable_days / Decimal(working_days))
        if employee.salary_type == SalaryType.DAILY:
            return round2(rate * stats.payable_days)
        regular_hours = max(stats.total_hours - stats.total_overtime_hours, ZERO)
        return round2(rate * regular_hours)

    def hourly_equivalent(self, employee: Employee) -> Decimal:
        rate = self._rate(employee)
        if employee.salary_type == SalaryType.MONTHLY:
            return rate / self._monthly_hours
        if employee.salary_type == SalaryType.DAILY:
            return rate / self._daily_hours
        return rate

    def overtime_amount(self, employee: Employee, stats: AttendanceStats, multiplier: Decimal) -> Decimal:
        hourly = self.hourly_equivalent(employee)
        return round2(stats.total_overtime_hours * hourly * Decimal(multiplier))
