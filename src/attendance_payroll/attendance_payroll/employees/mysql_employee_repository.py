from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..common.numbers import optional_decimal
from ..core.enums import SalaryType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Employee
from .repository import EmployeeRepository


def _row_to_employee(row: Dict[str, Any]) -> Employee:
    return Employee(
        employee_id=int(row["employee_id"]),
        full_name=row["full_name"],
        salary_type=SalaryType(row.get("salary_type") or SalaryType.MONTHLY.value),
        base_salary=optional_decimal(row.get("base_salary")),
        daily_wage=optional_decimal(row.get("daily_wage")),
        hourly_rate=optional_decimal(row.get("hourly_rate")),
        is_active=bool(row.get("is_active", True)),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_id, full_name, salary_type, base_salary, daily_wage, hourly_rate, is_active
                FROM employees
                WHERE employee_id=%s
                """,
                (int(employee_id),),
            )
            row = fetchone(cur)
            if not row:
                return None
            return _row_to_employee(row)

    def list_active(self) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_id, full_name, salary_type, base_salary, daily_wage, hourly_rate, is_active
                FROM employees
                WHERE is_active=1
                ORDER BY employee_id
                """
            )
            return [_row_to_employee(r) for r in fetchall(cur)]
