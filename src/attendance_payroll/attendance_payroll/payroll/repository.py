from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import PayrollStatus
from .model import PayrollRecord


class PayrollRepository(Protocol):
    """Payroll store; ``(employee_id, pay_period_start, pay_period_end)`` is unique."""

    def get_by_id(self, payroll_id: int) -> Optional[PayrollRecord]:
        raise NotImplementedError

    def query(
        self,
        *,
        employee_id: Optional[int] = None,
        status: Optional[PayrollStatus] = None,
        period_start: Optional[date] = None,
        period_end: Optional[date] = None,
        limit: Optional[int] = None,
    ) -> Sequence[PayrollRecord]:
        """Records whose pay period lies within [period_start, period_end]."""

        raise NotImplementedError

    def insert(self, record: PayrollRecord) -> int:
        """Raises DuplicateRecord when the employee already has this period."""

        raise NotImplementedError

    def update(self, record: PayrollRecord) -> bool:
        """Rewrite amounts and details of a record that is not paid."""

        raise NotImplementedError

    def update_status(
        self,
        payroll_id: int,
        *,
        expected: PayrollStatus,
        status: PayrollStatus,
        payment_date: Optional[date] = None,
    ) -> bool:
        """Compare-and-set on status. False if the status was not ``expected``."""

        raise NotImplementedError

    def update_payment_date(self, payroll_id: int, payment_date: Optional[date]) -> bool:
        raise NotImplementedError

    def delete(self, payroll_id: int) -> bool:
        """Delete a record that is not paid."""

        raise NotImplementedError
