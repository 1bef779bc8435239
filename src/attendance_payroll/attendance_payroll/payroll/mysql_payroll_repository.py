from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional, Sequence

import mysql.connector

from ..common.numbers import to_decimal
from ..core.enums import PayrollStatus
from ..core.exceptions import DuplicateRecord
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, filtered_select, is_duplicate_key
from .model import PayrollRecord
from .repository import PayrollRepository

_COLUMNS = """
    payroll_id, employee_id, pay_period_start, pay_period_end,
    basic_salary, overtime_amount, bonuses, reimbursements, gross_salary,
    tax_deduction, insurance_deduction, other_deductions, total_deductions, net_salary,
    total_working_days, total_present_days, total_overtime_hours,
    status, payment_date, pay_method, notes
"""


def _row_to_payroll(r: Dict[str, Any]) -> PayrollRecord:
    return PayrollRecord(
        payroll_id=int(r["payroll_id"]),
        employee_id=int(r["employee_id"]),
        pay_period_start=r["pay_period_start"],
        pay_period_end=r["pay_period_end"],
        basic_salary=to_decimal(r.get("basic_salary")),
        overtime_amount=to_decimal(r.get("overtime_amount")),
        bonuses=to_decimal(r.get("bonuses")),
        reimbursements=to_decimal(r.get("reimbursements")),
        gross_salary=to_decimal(r.get("gross_salary")),
        tax_deduction=to_decimal(r.get("tax_deduction")),
        insurance_deduction=to_decimal(r.get("insurance_deduction")),
        other_deductions=to_decimal(r.get("other_deductions")),
        total_deductions=to_decimal(r.get("total_deductions")),
        net_salary=to_decimal(r.get("net_salary")),
        total_working_days=int(r.get("total_working_days") or 0),
        total_present_days=to_decimal(r.get("total_present_days")),
        total_overtime_hours=to_decimal(r.get("total_overtime_hours")),
        status=PayrollStatus(r["status"]),
        payment_date=r.get("payment_date"),
        pay_method=r.get("pay_method"),
        notes=r.get("notes"),
    )


def _amounts(record: PayrollRecord) -> tuple:
    return (
        record.basic_salary,
        record.overtime_amount,
        record.bonuses,
        record.reimbursements,
        record.gross_salary,
        record.tax_deduction,
        record.insurance_deduction,
        record.other_deductions,
        record.total_deductions,
        record.net_salary,
        int(record.total_working_days),
        record.total_present_days,
        record.total_overtime_hours,
        record.pay_method,
        record.notes,
    )


class MySQLPayrollRepository(PayrollRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, payroll_id: int) -> Optional[PayrollRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM payroll_records WHERE payroll_id=%s", (int(payroll_id),))
            r = fetchone(cur)
            return _row_to_payroll(r) if r else None

    def query(
        self,
        *,
        employee_id: Optional[int] = None,
        status: Optional[PayrollStatus] = None,
        period_start: Optional[date] = None,
        period_end: Optional[date] = None,
        limit: Optional[int] = None,
    ) -> Sequence[PayrollRecord]:
        sql, params = filtered_select(
            "payroll_records",
            _COLUMNS,
            [
                ("employee_id=%s", None if employee_id is None else int(employee_id)),
                ("status=%s", status.value if status is not None else None),
                ("pay_period_start>=%s", period_start),
                ("pay_period_end<=%s", period_end),
            ],
            order_by="pay_period_end DESC, payroll_id DESC",
            limit=limit,
        )
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            return [_row_to_payroll(r) for r in fetchall(cur)]

    def insert(self, record: PayrollRecord) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO payroll_records(
                        employee_id, pay_period_start, pay_period_end,
                        basic_salary, overtime_amount, bonuses, reimbursements, gross_salary,
                        tax_deduction, insurance_deduction, other_deductions, total_deductions, net_salary,
                        total_working_days, total_present_days, total_overtime_hours,
                        pay_method, notes, status
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        int(record.employee_id),
                        record.pay_period_start,
                        record.pay_period_end,
                        *_amounts(record),
                        record.status.value,
                    ),
                )
                return int(cur.lastrowid)
        except mysql.connector.Error as exc:
            if is_duplicate_key(exc):
                raise DuplicateRecord("Payroll already exists for this period") from exc
            raise

    def update(self, record: PayrollRecord) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE payroll_records
                SET basic_salary=%s, overtime_amount=%s, bonuses=%s, reimbursements=%s, gross_salary=%s,
                    tax_deduction=%s, insurance_deduction=%s, other_deductions=%s, total_deductions=%s,
                    net_salary=%s, total_working_days=%s, total_present_days=%s, total_overtime_hours=%s,
                    pay_method=%s, notes=%s
                WHERE payroll_id=%s AND status<>'paid'
                """,
                (*_amounts(record), int(record.payroll_id)),
            )
            return cur.rowcount > 0

    def update_status(
        self,
        payroll_id: int,
        *,
        expected: PayrollStatus,
        status: PayrollStatus,
        payment_date: Optional[date] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE payroll_records
                SET status=%s, payment_date=COALESCE(%s, payment_date)
                WHERE payroll_id=%s AND status=%s
                """,
                (status.value, payment_date, int(payroll_id), expected.value),
            )
            return cur.rowcount > 0

    def update_payment_date(self, payroll_id: int, payment_date: Optional[date]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE payroll_records SET payment_date=%s WHERE payroll_id=%s",
                (payment_date, int(payroll_id)),
            )
            return cur.rowcount > 0

    def delete(self, payroll_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM payroll_records WHERE payroll_id=%s AND status<>'paid'", (int(payroll_id),))
            return cur.rowcount > 0
