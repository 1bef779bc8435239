from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import List, Optional

from ..common.numbers import ZERO
from ..core.enums import PayrollStatus


@dataclass(frozen=True)
class PayrollRecord:
    """Payroll of one employee for one pay period.

    ``gross_salary``, ``total_deductions`` and ``net_salary`` are always the
    output of ``finalize``; they are never edited directly.
    """

    employee_id: int
    pay_period_start: date
    pay_period_end: date
    basic_salary: Decimal = ZERO
    overtime_amount: Decimal = ZERO
    bonuses: Decimal = ZERO
    reimbursements: Decimal = ZERO
    gross_salary: Decimal = ZERO
    tax_deduction: Decimal = ZERO
    insurance_deduction: Decimal = ZERO
    other_deductions: Decimal = ZERO
    total_deductions: Decimal = ZERO
    net_salary: Decimal = ZERO
    total_working_days: int = 0
    total_present_days: Decimal = ZERO
    total_overtime_hours: Decimal = ZERO
    status: PayrollStatus = PayrollStatus.DRAFT
    payment_date: Optional[date] = None
    pay_method: Optional[str] = None
    notes: Optional[str] = None
    payroll_id: Optional[int] = None

    @property
    def needs_review(self) -> bool:
        return self.net_salary < 0


@dataclass(frozen=True)
class PayrollCalculation:
    """Attendance-derived part of a payroll."""

    basic_salary: Decimal
    overtime_amount: Decimal
    total_working_days: int
    total_present_days: Decimal
    total_overtime_hours: Decimal


@dataclass(frozen=True)
class PayrollSummary:
    total_payrolls: int = 0
    draft_payrolls: int = 0
    approved_payrolls: int = 0
    paid_payrolls: int = 0
    total_gross_salary: Decimal = ZERO
    total_net_salary: Decimal = ZERO
    total_deductions: Decimal = ZERO
    avg_net_salary: Decimal = ZERO


@dataclass(frozen=True)
class BulkError:
    employee_id: int
    error: str
    message: str


@dataclass(frozen=True)
class BulkResult:
    created: List[PayrollRecord] = field(default_factory=list)
    errors: List[BulkError] = field(default_factory=list)
