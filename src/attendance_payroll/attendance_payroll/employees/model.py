from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from ..core.enums import SalaryType


@dataclass(frozen=True)
class Employee:
    """Salary configuration of an employee.

    Employees are managed elsewhere; this core only reads them.
    """

    employee_id: int
    full_name: str
    salary_type: SalaryType = SalaryType.MONTHLY
    base_salary: Optional[Decimal] = None
    daily_wage: Optional[Decimal] = None
    hourly_rate: Optional[Decimal] = None
    is_active: bool = True
