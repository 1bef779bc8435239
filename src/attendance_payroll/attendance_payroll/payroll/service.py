from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence

from ..attendance.aggregator import summarize
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import count_working_days
from ..common.numbers import ZERO, round2, to_decimal
from ..common.validators import require_date_range, require_non_negative
from ..core.constants import DEFAULT_LIST_LIMIT, MAX_LIST_LIMIT
from ..core.enums import PayrollStatus
from ..core.exceptions import DomainError, ImmutableRecord, InvalidStatusTransition, RecordNotFound, ValidationError
from ..core.policy import PayrollPolicy
from ..employees.repository import EmployeeRepository
from ..rules.service import RuleService
from ..schedules.service import ScheduleService
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .calculator.totals import finalize
from .model import BulkError, BulkResult, PayrollCalculation, PayrollRecord, PayrollSummary
from .repository import PayrollRepository
from .workflow import ensure_transition

logger = logging.getLogger(__name__)

_AMOUNT_FIELDS = (
    "basic_salary",
    "overtime_amount",
    "bonuses",
    "reimbursements",
    "tax_deduction",
    "insurance_deduction",
    "other_deductions",
)
_EDITABLE_FIELDS = frozenset(
    _AMOUNT_FIELDS
    + ("total_working_days", "total_present_days", "total_overtime_hours", "pay_method", "notes", "payment_date")
)


def summarize_payrolls(records: Iterable[PayrollRecord]) -> PayrollSummary:
    """Counts per status; money totals and average cover paid records only."""

    counts = {status: 0 for status in PayrollStatus}
    gross = net = deductions = ZERO
    for r in records:
        counts[r.status] += 1
        if r.status == PayrollStatus.PAID:
            gross += r.gross_salary
            net += r.net_salary
            deductions += r.total_deductions

    paid = counts[PayrollStatus.PAID]
    return PayrollSummary(
        total_payrolls=sum(counts.values()),
        draft_payrolls=counts[PayrollStatus.DRAFT],
        approved_payrolls=counts[PayrollStatus.APPROVED],
        paid_payrolls=paid,
        total_gross_salary=round2(gross),
        total_net_salary=round2(net),
        total_deductions=round2(deductions),
        avg_net_salary=round2(net / paid) if paid else ZERO,
    )


class PayrollService:
    def __init__(
        self,
        payrolls: PayrollRepository,
        employees: EmployeeRepository,
        attendance: AttendanceRepository,
        schedules: ScheduleService,
        rules: RuleService,
        *,
        calculator: Optional[PayrollCalculator] = None,
        policy: Optional[PayrollPolicy] = None,
        today: Callable[[], date] = date.today,
    ):
        self._payrolls = payrolls
        self._employees = employees
        self._attendance = attendance
        self._schedules = schedules
        self._rules = rules
        self._policy = policy or PayrollPolicy()
        self._calculator = calculator or StandardPayrollCalculator(
            standard_daily_hours=self._policy.standard_daily_hours,
            standard_monthly_hours=self._policy.standard_monthly_hours,
        )
        self._today = today

    def _require_employee(self, employee_id: int):
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise RecordNotFound("Employee not found")
        return employee

    def get(self, payroll_id: int) -> PayrollRecord:
        record = self._payrolls.get_by_id(int(payroll_id))
        if not record:
            raise RecordNotFound("Payroll record not found")
        return record

    def calculate(self, employee_id: int, pay_period_start: date, pay_period_end: date) -> PayrollCalculation:
        require_date_range(pay_period_start, pay_period_end, start_name="pay_period_start", end_name="pay_period_end")
        employee = self._require_employee(employee_id)

        records = self._attendance.query_records(
            employee_id=employee.employee_id, date_from=pay_period_start, date_to=pay_period_end
        )
        stats = summarize(records)
        working_days = count_working_days(
            pay_period_start,
            pay_period_end,
            weekdays=self._schedules.working_weekdays(employee.employee_id),
            holidays=self._policy.public_holidays,
        )
        multiplier = self._rules.effective().overtime_multiplier

        return PayrollCalculation(
            basic_salary=self._calculator.basic_salary(employee, stats, working_days),
            overtime_amount=self._calculator.overtime_amount(employee, stats, multiplier),
            total_working_days=working_days,
            total_present_days=stats.payable_days,
            total_overtime_hours=stats.total_overtime_hours,
        )

    def create(
        self,
        *,
        employee_id: int,
        pay_period_start: date,
        pay_period_end: date,
        bonuses: Decimal = ZERO,
        reimbursements: Decimal = ZERO,
        tax_deduction: Decimal = ZERO,
        insurance_deduction: Decimal = ZERO,
        other_deductions: Decimal = ZERO,
        pay_method: Optional[str] = None,
        notes: Optional[str] = None,
        auto_calculate: bool = True,
        basic_salary: Optional[Decimal] = None,
        overtime_amount: Optional[Decimal] = None,
        total_working_days: Optional[int] = None,
        total_present_days: Optional[Decimal] = None,
        total_overtime_hours: Optional[Decimal] = None,
    ) -> PayrollRecord:
        """Create a draft payroll.

        With ``auto_calculate`` the attendance-derived figures come from
        ``calculate``; otherwise the given ones are used as entered.
        """

        if auto_calculate:
            calc = self.calculate(employee_id, pay_period_start, pay_period_end)
        else:
            require_date_range(
                pay_period_start, pay_period_end, start_name="pay_period_start", end_name="pay_period_end"
            )
            self._require_employee(employee_id)
            calc = PayrollCalculation(
                basic_salary=to_decimal(basic_salary),
                overtime_amount=to_decimal(overtime_amount),
                total_working_days=int(total_working_days or 0),
                total_present_days=require_non_negative(to_decimal(total_present_days), "total_present_days"),
                total_overtime_hours=require_non_negative(to_decimal(total_overtime_hours), "total_overtime_hours"),
            )

        totals = finalize(
            calc.basic_salary,
            calc.overtime_amount,
            bonuses,
            reimbursements,
            tax_deduction,
            insurance_deduction,
            other_deductions,
        )
        record = PayrollRecord(
            employee_id=int(employee_id),
            pay_period_start=pay_period_start,
            pay_period_end=pay_period_end,
            basic_salary=totals.basic_salary,
            overtime_amount=totals.overtime_amount,
            bonuses=totals.bonuses,
            reimbursements=totals.reimbursements,
            gross_salary=totals.gross_salary,
            tax_deduction=totals.tax_deduction,
            insurance_deduction=totals.insurance_deduction,
            other_deductions=totals.other_deductions,
            total_deductions=totals.total_deductions,
            net_salary=totals.net_salary,
            total_working_days=calc.total_working_days,
            total_present_days=calc.total_present_days,
            total_overtime_hours=calc.total_overtime_hours,
            status=PayrollStatus.DRAFT,
            pay_method=pay_method,
            notes=notes,
        )
        payroll_id = self._payrolls.insert(record)
        logger.info(
            "Payroll %s created employee=%s period=%s..%s net=%s",
            payroll_id,
            employee_id,
            pay_period_start,
            pay_period_end,
            totals.net_salary,
        )
        return self.get(payroll_id)

    def update(self, payroll_id: int, changes: Mapping[str, Any]) -> PayrollRecord:
        unknown = set(changes) - _EDITABLE_FIELDS
        if unknown:
            raise ValidationError(f"Fields cannot be changed: {', '.join(sorted(unknown))}")

        current = self.get(payroll_id)
        if current.status == PayrollStatus.PAID:
            if set(changes) - {"payment_date"}:
                raise ImmutableRecord("Paid payroll records only accept a payment date change")
            if "payment_date" in changes:
                self._payrolls.update_payment_date(current.payroll_id, changes["payment_date"])
                logger.info("Payroll %s payment date set to %s", payroll_id, changes["payment_date"])
            return self.get(payroll_id)

        if "payment_date" in changes:
            raise ValidationError("payment_date can only be set on paid payroll records")

        merged = replace(current, **dict(changes))
        totals = finalize(*(getattr(merged, name) for name in _AMOUNT_FIELDS))
        record = replace(
            merged,
            basic_salary=totals.basic_salary,
            overtime_amount=totals.overtime_amount,
            bonuses=totals.bonuses,
            reimbursements=totals.reimbursements,
            gross_salary=totals.gross_salary,
            tax_deduction=totals.tax_deduction,
            insurance_deduction=totals.insurance_deduction,
            other_deductions=totals.other_deductions,
            total_deductions=totals.total_deductions,
            net_salary=totals.net_salary,
            total_working_days=int(merged.total_working_days),
            total_present_days=require_non_negative(to_decimal(merged.total_present_days), "total_present_days"),
            total_overtime_hours=require_non_negative(to_decimal(merged.total_overtime_hours), "total_overtime_hours"),
        )
        if not self._payrolls.update(record):
            raise ImmutableRecord("Payroll record was paid in the meantime")
        logger.info("Payroll %s updated (%s)", payroll_id, ", ".join(sorted(changes)))
        return self.get(payroll_id)

    def change_status(
        self,
        payroll_id: int,
        status: PayrollStatus,
        *,
        payment_date: Optional[date] = None,
    ) -> PayrollRecord:
        current = self.get(payroll_id)
        ensure_transition(current.status, status)

        if status == PayrollStatus.PAID:
            payment_date = payment_date or self._today()
        elif payment_date is not None:
            raise ValidationError("payment_date is only accepted when marking a payroll as paid")

        moved = self._payrolls.update_status(
            current.payroll_id,
            expected=current.status,
            status=status,
            payment_date=payment_date,
        )
        if not moved:
            raise InvalidStatusTransition("Payroll status was changed by another request")
        logger.info("Payroll %s status %s -> %s", payroll_id, current.status.value, status.value)
        return self.get(payroll_id)

    def delete(self, payroll_id: int) -> None:
        current = self.get(payroll_id)
        if current.status == PayrollStatus.PAID or not self._payrolls.delete(current.payroll_id):
            raise ImmutableRecord("Paid payroll records cannot be deleted")
        logger.info("Payroll %s deleted", payroll_id)

    def list(
        self,
        *,
        employee_id: Optional[int] = None,
        status: Optional[PayrollStatus] = None,
        period_start: Optional[date] = None,
        period_end: Optional[date] = None,
        limit: int = DEFAULT_LIST_LIMIT,
    ) -> Sequence[PayrollRecord]:
        if period_start and period_end:
            require_date_range(period_start, period_end, start_name="pay_period_start", end_name="pay_period_end")
        return self._payrolls.query(
            employee_id=employee_id,
            status=status,
            period_start=period_start,
            period_end=period_end,
            limit=max(1, min(int(limit), MAX_LIST_LIMIT)),
        )

    def bulk_create(
        self,
        employee_ids: Iterable[int],
        pay_period_start: date,
        pay_period_end: date,
        *,
        auto_calculate: bool = True,
    ) -> BulkResult:
        """Create draft payrolls one employee at a time; failures are collected, not raised."""

        require_date_range(pay_period_start, pay_period_end, start_name="pay_period_start", end_name="pay_period_end")
        created = []
        errors = []
        for employee_id in employee_ids:
            try:
                created.append(
                    self.create(
                        employee_id=employee_id,
                        pay_period_start=pay_period_start,
                        pay_period_end=pay_period_end,
                        auto_calculate=auto_calculate,
                    )
                )
            except DomainError as exc:
                logger.info("Bulk payroll skipped employee=%s: %s", employee_id, exc)
                errors.append(BulkError(employee_id=int(employee_id), error=exc.code, message=str(exc)))

        logger.info("Bulk payroll %s..%s: %d created, %d failed", pay_period_start, pay_period_end, len(created), len(errors))
        return BulkResult(created=created, errors=errors)

    def summary(self, *, period_start: Optional[date] = None, period_end: Optional[date] = None) -> PayrollSummary:
        if period_start and period_end:
            require_date_range(period_start, period_end, start_name="pay_period_start", end_name="pay_period_end")
        records = self._payrolls.query(period_start=period_start, period_end=period_end)
        return summarize_payrolls(records)
