from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal

from ...attendance.model import AttendanceStats
from ...employees.model import Employee


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def basic_salary(self, employee: Employee, stats: AttendanceStats, working_days: int) -> Decimal:
        raise NotImplementedError

    @abstractmethod
    def overtime_amount(self, employee: Employee, stats: AttendanceStats, multiplier: Decimal) -> Decimal:
        raise NotImplementedError
