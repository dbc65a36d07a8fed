"""Status enums and transition tables for workflow entities.

Every transition is validated against a table of legal successors; anything
not listed is rejected with :class:`InvalidStateTransitionError`.
"""

from enum import StrEnum
from typing import Mapping, TypeVar

from workforce_api.exceptions import InvalidStateTransitionError

S = TypeVar("S", bound=StrEnum)


class PeriodStatus(StrEnum):
    """Attendance period status."""

    OPEN = "OPEN"
    SUBMITTED = "SUBMITTED"
    APPROVED = "APPROVED"
    LOCKED = "LOCKED"


class AttendanceType(StrEnum):
    NORMAL = "NORMAL"
    OVERTIME = "OVERTIME"
    NIGHT_SHIFT = "NIGHT_SHIFT"
    HOLIDAY = "HOLIDAY"
    HALF_DAY = "HALF_DAY"
    ABSENT = "ABSENT"
    ON_LEAVE = "ON_LEAVE"
    REST_DAY = "REST_DAY"


class PayrollRunStatus(StrEnum):
    """Payroll run status."""

    DRAFT = "DRAFT"
    CALCULATED = "CALCULATED"
    APPROVED = "APPROVED"
    PAID = "PAID"
    LOCKED = "LOCKED"
    CANCELLED = "CANCELLED"


class LeaveStatus(StrEnum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    CANCELLED = "CANCELLED"


class TransferStatus(StrEnum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class ProgressPaymentStatus(StrEnum):
    """Progress payment (hakkediş) status."""

    DRAFT = "DRAFT"
    SUBMITTED = "SUBMITTED"
    APPROVED = "APPROVED"


PERIOD_TRANSITIONS: Mapping[PeriodStatus, frozenset[PeriodStatus]] = {
    PeriodStatus.OPEN: frozenset({PeriodStatus.SUBMITTED}),
    PeriodStatus.SUBMITTED: frozenset({PeriodStatus.APPROVED}),
    PeriodStatus.APPROVED: frozenset({PeriodStatus.LOCKED}),
    PeriodStatus.LOCKED: frozenset(),
}

PAYROLL_TRANSITIONS: Mapping[PayrollRunStatus, frozenset[PayrollRunStatus]] = {
    PayrollRunStatus.DRAFT: frozenset({PayrollRunStatus.CALCULATED, PayrollRunStatus.CANCELLED}),
    PayrollRunStatus.CALCULATED: frozenset(
        {
            PayrollRunStatus.CALCULATED,  # recompute
            PayrollRunStatus.APPROVED,
            PayrollRunStatus.DRAFT,
            PayrollRunStatus.CANCELLED,
        }
    ),
    PayrollRunStatus.APPROVED: frozenset({PayrollRunStatus.PAID, PayrollRunStatus.LOCKED}),
    PayrollRunStatus.PAID: frozenset({PayrollRunStatus.LOCKED}),
    PayrollRunStatus.LOCKED: frozenset(),
    PayrollRunStatus.CANCELLED: frozenset(),
}

# Statuses in which a run's figures may be (re)computed or adjusted
PAYROLL_CALCULATION_ALLOWED = frozenset({PayrollRunStatus.DRAFT, PayrollRunStatus.CALCULATED})

LEAVE_TRANSITIONS: Mapping[LeaveStatus, frozenset[LeaveStatus]] = {
    LeaveStatus.PENDING: frozenset(
        {LeaveStatus.APPROVED, LeaveStatus.REJECTED, LeaveStatus.CANCELLED}
    ),
    LeaveStatus.APPROVED: frozenset({LeaveStatus.CANCELLED}),
    LeaveStatus.REJECTED: frozenset(),
    LeaveStatus.CANCELLED: frozenset(),
}

TRANSFER_TRANSITIONS: Mapping[TransferStatus, frozenset[TransferStatus]] = {
    TransferStatus.PENDING: frozenset(
        {TransferStatus.APPROVED, TransferStatus.REJECTED, TransferStatus.CANCELLED}
    ),
    TransferStatus.APPROVED: frozenset({TransferStatus.COMPLETED, TransferStatus.CANCELLED}),
    TransferStatus.REJECTED: frozenset(),
    TransferStatus.COMPLETED: frozenset(),
    TransferStatus.CANCELLED: frozenset(),
}

PROGRESS_PAYMENT_TRANSITIONS: Mapping[ProgressPaymentStatus, frozenset[ProgressPaymentStatus]] = {
    ProgressPaymentStatus.DRAFT: frozenset({ProgressPaymentStatus.SUBMITTED}),
    ProgressPaymentStatus.SUBMITTED: frozenset(
        {ProgressPaymentStatus.APPROVED, ProgressPaymentStatus.DRAFT}
    ),
    ProgressPaymentStatus.APPROVED: frozenset(),
}


def ensure_transition(
    entity: str,
    transitions: Mapping[S, frozenset[S]],
    current: S | str,
    target: S,
) -> S:
    """Validate a status change against a transition table.

    Args:
        entity: Entity name used in the error message
        transitions: Legal successors per status
        current: Current status (enum member or its stored string value)
        target: Requested status

    Returns:
        The target status

    Raises:
        InvalidStateTransitionError: If target is not a legal successor
    """
    enum_type = type(target)
    try:
        current_status = enum_type(current)
    except ValueError as e:
        raise InvalidStateTransitionError(entity, str(current), target.value) from e
    if target not in transitions.get(current_status, frozenset()):
        raise InvalidStateTransitionError(entity, current_status.value, target.value)
    return target
