from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from ...common.numbers import round2, to_decimal
from ...common.validators import require_non_negative

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PayrollTotals:
    basic_salary: Decimal
    overtime_amount: Decimal
    bonuses: Decimal
    reimbursements: Decimal
    gross_salary: Decimal
    tax_deduction: Decimal
    insurance_deduction: Decimal
    other_deductions: Decimal
    total_deductions: Decimal
    net_salary: Decimal

    @property
    def needs_review(self) -> bool:
        return self.net_salary < 0


def _amount(value: Any, name: str) -> Decimal:
    return round2(require_non_negative(to_decimal(value), name))


def finalize(
    basic_salary: Any,
    overtime_amount: Any,
    bonuses: Any = 0,
    reimbursements: Any = 0,
    tax_deduction: Any = 0,
    insurance_deduction: Any = 0,
    other_deductions: Any = 0,
) -> PayrollTotals:
    """gross = basic + overtime + bonuses + reimbursements; net = gross - deductions.

    A negative net is kept (deductions larger than pay) and flagged through
    ``needs_review``.
    """

    basic = _amount(basic_salary, "basic_salary")
    overtime = _amount(overtime_amount, "overtime_amount")
    bonus = _amount(bonuses, "bonuses")
    reimb = _amount(reimbursements, "reimbursements")
    tax = _amount(tax_deduction, "tax_deduction")
    insurance = _amount(insurance_deduction, "insurance_deduction")
    other = _amount(other_deductions, "other_deductions")

    gross = basic + overtime + bonus + reimb
    deductions = tax + insurance + other
    totals = PayrollTotals(
        basic_salary=basic,
        overtime_amount=overtime,
        bonuses=bonus,
        reimbursements=reimb,
        gross_salary=gross,
        tax_deduction=tax,
        insurance_deduction=insurance,
        other_deductions=other,
        total_deductions=deductions,
        net_salary=gross - deductions,
    )
    if totals.needs_review:
        logger.warning("Negative net salary %s (gross=%s, deductions=%s)", totals.net_salary, gross, deductions)
    return totals
