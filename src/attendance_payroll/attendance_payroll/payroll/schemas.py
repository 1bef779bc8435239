from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import List

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..core.constants import DEFAULT_LIST_LIMIT, MAX_LIST_LIMIT
from ..core.enums import PayrollStatus


class _Period(BaseModel):
    model_config = ConfigDict(extra="forbid")

    pay_period_start: date
    pay_period_end: date

    @model_validator(mode="after")
    def _check_period(self):
        if self.pay_period_end < self.pay_period_start:
            raise ValueError("pay_period_end must not be before pay_period_start")
        return self


class CalculateRequest(_Period):
    employee_id: int = Field(ge=1)


class PayrollCreateRequest(_Period):
    employee_id: int = Field(ge=1)
    bonuses: Decimal = Field(default=Decimal("0"), ge=0)
    reimbursements: Decimal = Field(default=Decimal("0"), ge=0)
    tax_deduction: Decimal = Field(default=Decimal("0"), ge=0)
    insurance_deduction: Decimal = Field(default=Decimal("0"), ge=0)
    other_deductions: Decimal = Field(default=Decimal("0"), ge=0)
    pay_method: str | None = Field(default=None, max_length=50)
    notes: str | None = Field(default=None, max_length=1000)
    auto_calculate: bool = True
    # Only used when auto_calculate is false.
    basic_salary: Decimal | None = Field(default=None, ge=0)
    overtime_amount: Decimal | None = Field(default=None, ge=0)
    total_working_days: int | None = Field(default=None, ge=0)
    total_present_days: Decimal | None = Field(default=None, ge=0)
    total_overtime_hours: Decimal | None = Field(default=None, ge=0)


class PayrollUpdateRequest(BaseModel):
    """Editable payroll fields. Totals are always recomputed."""

    model_config = ConfigDict(extra="forbid")

    basic_salary: Decimal | None = Field(default=None, ge=0)
    overtime_amount: Decimal | None = Field(default=None, ge=0)
    bonuses: Decimal | None = Field(default=None, ge=0)
    reimbursements: Decimal | None = Field(default=None, ge=0)
    tax_deduction: Decimal | None = Field(default=None, ge=0)
    insurance_deduction: Decimal | None = Field(default=None, ge=0)
    other_deductions: Decimal | None = Field(default=None, ge=0)
    total_working_days: int | None = Field(default=None, ge=0)
    total_present_days: Decimal | None = Field(default=None, ge=0)
    total_overtime_hours: Decimal | None = Field(default=None, ge=0)
    pay_method: str | None = Field(default=None, max_length=50)
    notes: str | None = Field(default=None, max_length=1000)
    payment_date: date | None = None

    @model_validator(mode="after")
    def _numbers_not_null(self):
        for name in self.model_fields_set:
            if name not in ("pay_method", "notes", "payment_date") and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class StatusChangeRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    status: PayrollStatus
    payment_date: date | None = None


class BulkCreateRequest(_Period):
    employee_ids: List[int] = Field(min_length=1)
    auto_calculate: bool = True


class PayrollListQuery(BaseModel):
    model_config = ConfigDict(extra="forbid")

    employee_id: int | None = Field(default=None, ge=1)
    status: PayrollStatus | None = None
    pay_period_start: date | None = None
    pay_period_end: date | None = None
    limit: int = Field(default=DEFAULT_LIST_LIMIT, ge=1, le=MAX_LIST_LIMIT)


class SummaryQuery(BaseModel):
    model_config = ConfigDict(extra="forbid")

    pay_period_start: date | None = None
    pay_period_end: date | None = None


class CalculationRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    basic_salary: Decimal
    overtime_amount: Decimal
    total_working_days: int
    total_present_days: Decimal
    total_overtime_hours: Decimal


class PayrollRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    payroll_id: int | None
    employee_id: int
    pay_period_start: date
    pay_period_end: date
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
    total_working_days: int
    total_present_days: Decimal
    total_overtime_hours: Decimal
    status: PayrollStatus
    payment_date: date | None
    pay_method: str | None
    notes: str | None
    needs_review: bool


class BulkErrorRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    employee_id: int
    error: str
    message: str


class BulkResultRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    created: List[PayrollRead]
    errors: List[BulkErrorRead]


class SummaryRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_payrolls: int
    draft_payrolls: int
    approved_payrolls: int
    paid_payrolls: int
    total_gross_salary: Decimal
    total_net_salary: Decimal
    total_deductions: Decimal
    avg_net_salary: Decimal
