"""Status transition table tests."""

import pytest

from workforce_api.exceptions import InvalidStateTransitionError, ValidationError
from workforce_api.models.domain.workflow import (
    LEAVE_TRANSITIONS,
    PAYROLL_TRANSITIONS,
    PERIOD_TRANSITIONS,
    TRANSFER_TRANSITIONS,
    LeaveStatus,
    PayrollRunStatus,
    PeriodStatus,
    TransferStatus,
    ensure_transition,
)


class TestPeriodTransitions:
    """OPEN -> SUBMITTED -> APPROVED -> LOCKED, one step at a time."""

    @pytest.mark.parametrize(
        "current,target",
        [
            (PeriodStatus.OPEN, PeriodStatus.SUBMITTED),
            (PeriodStatus.SUBMITTED, PeriodStatus.APPROVED),
            (PeriodStatus.APPROVED, PeriodStatus.LOCKED),
        ],
    )
    def test_forward_steps_allowed(self, current: PeriodStatus, target: PeriodStatus) -> None:
        assert ensure_transition("Attendance period", PERIOD_TRANSITIONS, current, target) == target

    @pytest.mark.parametrize(
        "current,target",
        [
            (PeriodStatus.OPEN, PeriodStatus.APPROVED),
            (PeriodStatus.OPEN, PeriodStatus.LOCKED),
            (PeriodStatus.SUBMITTED, PeriodStatus.OPEN),
            (PeriodStatus.LOCKED, PeriodStatus.OPEN),
            (PeriodStatus.LOCKED, PeriodStatus.LOCKED),
        ],
    )
    def test_skips_and_reversals_rejected(self, current: PeriodStatus, target: PeriodStatus) -> None:
        with pytest.raises(InvalidStateTransitionError) as exc_info:
            ensure_transition("Attendance period", PERIOD_TRANSITIONS, current, target)
        assert exc_info.value.current == current.value
        assert exc_info.value.target == target.value

    def test_stored_string_accepted(self) -> None:
        assert ensure_transition("Attendance period", PERIOD_TRANSITIONS, "OPEN", PeriodStatus.SUBMITTED)

    def test_unknown_stored_status_rejected(self) -> None:
        with pytest.raises(InvalidStateTransitionError):
            ensure_transition("Attendance period", PERIOD_TRANSITIONS, "BOGUS", PeriodStatus.SUBMITTED)

    def test_transition_error_is_a_validation_error(self) -> None:
        assert issubclass(InvalidStateTransitionError, ValidationError)


class TestPayrollTransitions:
    """Payroll run lifecycle."""

    def test_recalculation_allowed(self) -> None:
        ensure_transition(
            "Payroll run", PAYROLL_TRANSITIONS, PayrollRunStatus.CALCULATED, PayrollRunStatus.CALCULATED
        )

    def test_reopen_to_draft(self) -> None:
        ensure_transition("Payroll run", PAYROLL_TRANSITIONS, PayrollRunStatus.CALCULATED, PayrollRunStatus.DRAFT)

    @pytest.mark.parametrize(
        "current",
        [PayrollRunStatus.APPROVED, PayrollRunStatus.PAID, PayrollRunStatus.LOCKED, PayrollRunStatus.CANCELLED],
    )
    def test_frozen_runs_cannot_recalculate(self, current: PayrollRunStatus) -> None:
        with pytest.raises(InvalidStateTransitionError):
            ensure_transition("Payroll run", PAYROLL_TRANSITIONS, current, PayrollRunStatus.CALCULATED)

    def test_draft_cannot_be_approved(self) -> None:
        with pytest.raises(InvalidStateTransitionError):
            ensure_transition("Payroll run", PAYROLL_TRANSITIONS, PayrollRunStatus.DRAFT, PayrollRunStatus.APPROVED)

    def test_approved_may_lock_without_payment(self) -> None:
        ensure_transition("Payroll run", PAYROLL_TRANSITIONS, PayrollRunStatus.APPROVED, PayrollRunStatus.LOCKED)


class TestLeaveAndTransferTransitions:
    """Leave and transfer lifecycles."""

    def test_approved_leave_can_be_cancelled(self) -> None:
        ensure_transition("Leave request", LEAVE_TRANSITIONS, LeaveStatus.APPROVED, LeaveStatus.CANCELLED)

    def test_rejected_leave_is_final(self) -> None:
        with pytest.raises(InvalidStateTransitionError):
            ensure_transition("Leave request", LEAVE_TRANSITIONS, LeaveStatus.REJECTED, LeaveStatus.APPROVED)

    def test_transfer_completes_only_after_approval(self) -> None:
        with pytest.raises(InvalidStateTransitionError):
            ensure_transition("Transfer", TRANSFER_TRANSITIONS, TransferStatus.PENDING, TransferStatus.COMPLETED)
        ensure_transition("Transfer", TRANSFER_TRANSITIONS, TransferStatus.APPROVED, TransferStatus.COMPLETED)
