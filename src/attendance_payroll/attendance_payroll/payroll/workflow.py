from __future__ import annotations

from ..core.enums import PayrollStatus
from ..core.exceptions import ImmutableRecord, InvalidStatusTransition

# draft -> approved -> paid, nothing else.
_NEXT = {
    PayrollStatus.DRAFT: PayrollStatus.APPROVED,
    PayrollStatus.APPROVED: PayrollStatus.PAID,
}


def can_transition(current: PayrollStatus, target: PayrollStatus) -> bool:
    return _NEXT.get(current) == target


def ensure_transition(current: PayrollStatus, target: PayrollStatus) -> None:
    if current == PayrollStatus.PAID:
        raise ImmutableRecord("Paid payroll records cannot change status")
    if not can_transition(current, target):
        raise InvalidStatusTransition(f"Cannot move payroll from {current.value} to {target.value}")
