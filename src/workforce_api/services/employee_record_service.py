"""Employee record service for patent payments, contacts and the financial summary."""

import logging
from collections import defaultdict
from decimal import ROUND_HALF_UP, Decimal
from uuid import UUID

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from workforce_api.exceptions import NotFoundError
from workforce_api.models.domain.user import CurrentUser
from workforce_api.models.domain.workflow import PayrollRunStatus, ProgressPaymentStatus
from workforce_api.models.dto.employee import (
    ContactCreate,
    ContactResponse,
    FinancialMonth,
    FinancialSummary,
    PatentPaymentInput,
    PatentPaymentResponse,
)
from workforce_api.repositories.employee_record_repository import (
    EmployeeContactRepository,
    PatentPaymentRepository,
)
from workforce_api.repositories.employee_repository import EmployeeRepository
from workforce_api.repositories.payroll_repository import PayrollItemRepository
from workforce_api.repositories.progress_payment_repository import ProgressPaymentItemRepository
from workforce_api.services.audit_service import AuditAction, AuditService, EntityType, snapshot

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
ZERO = Decimal("0")

# Payroll runs whose net pay counts as paid out
PAID_RUN_STATUSES = frozenset({PayrollRunStatus.PAID.value, PayrollRunStatus.LOCKED.value})


def _money(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


class EmployeeRecordService:
    """Service for per-employee records kept beside the 1:1 sections."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize service with database session."""
        self.session = session
        self.employee_repo = EmployeeRepository(session)
        self.patent_repo = PatentPaymentRepository(session)
        self.contact_repo = EmployeeContactRepository(session)
        self.payroll_item_repo = PayrollItemRepository(session)
        self.progress_item_repo = ProgressPaymentItemRepository(session)
        self.audit_service = AuditService(session)

    async def _ensure_employee(self, employee_id: UUID) -> None:
        employee = await self.employee_repo.get(employee_id)
        if employee is None or employee.deleted_at is not None:
            raise NotFoundError("Employee", employee_id)

    # =========================================================================
    # Patent payments
    # =========================================================================

    async def list_patent_payments(
        self, employee_id: UUID, year: int | None = None
    ) -> list[PatentPaymentResponse]:
        await self._ensure_employee(employee_id)
        payments = await self.patent_repo.get_for_employee(employee_id, year)
        return [PatentPaymentResponse.model_validate(p) for p in payments]

    async def upsert_patent_payment(
        self,
        employee_id: UUID,
        data: PatentPaymentInput,
        current_user: CurrentUser,
        http_request: Request | None = None,
    ) -> tuple[PatentPaymentResponse, bool]:
        """Record the patent payment of one month, replacing an existing one.

        Args:
            employee_id: Employee UUID
            data: Year, month and payment details
            current_user: Acting user
            http_request: Request for audit metadata

        Returns:
            Tuple of (payment, created) where created is False for an update
        """
        await self._ensure_employee(employee_id)
        values = data.model_dump(exclude={"year", "month"})

        payment = await self.patent_repo.get_month(employee_id, data.year, data.month)
        created = payment is None
        before = None if created else snapshot(payment, fields=list(values))
        if created:
            payment = await self.patent_repo.create(
                employee_id=employee_id, year=data.year, month=data.month, **values
            )
        else:
            payment = await self.patent_repo.update(payment.id, **values)

        await self.audit_service.log(
            action=AuditAction.CREATE if created else AuditAction.UPDATE,
            entity=EntityType.PATENT_PAYMENT,
            entity_id=payment.id,
            actor_id=current_user.id,
            old_values=before,
            new_values={"year": data.year, "month": data.month, **snapshot(payment, fields=list(values))},
            request=http_request,
        )
        await self.session.commit()
        return PatentPaymentResponse.model_validate(payment), created

    # =========================================================================
    # Contacts
    # =========================================================================

    async def list_contacts(self, employee_id: UUID) -> list[ContactResponse]:
        await self._ensure_employee(employee_id)
        contacts = await self.contact_repo.get_for_employee(employee_id)
        return [ContactResponse.model_validate(c) for c in contacts]

    async def create_contact(
        self,
        employee_id: UUID,
        data: ContactCreate,
        current_user: CurrentUser,
        http_request: Request | None = None,
    ) -> ContactResponse:
        await self._ensure_employee(employee_id)
        contact = await self.contact_repo.create(employee_id=employee_id, **data.model_dump())

        await self.audit_service.log(
            action=AuditAction.CREATE,
            entity=EntityType.EMPLOYEE_CONTACT,
            entity_id=contact.id,
            actor_id=current_user.id,
            new_values={"employee_id": employee_id, **data.model_dump()},
            request=http_request,
        )
        await self.session.commit()
        return ContactResponse.model_validate(contact)

    # =========================================================================
    # Financial summary
    # =========================================================================

    async def get_financial_summary(self, employee_id: UUID) -> FinancialSummary:
        """Month-by-month earnings, payments and running balance of an employee.

        Payroll contributes the net pay of every non-cancelled run, counted as
        paid once the run is PAID or LOCKED. Progress payment items credited
        to the employee contribute their distribution amount (or the item
        total when none is set), counted as paid once the progress payment is
        APPROVED. Items of a progress payment without a period fall into the
        month of their work date.
        """
        await self._ensure_employee(employee_id)

        payroll: dict[str, Decimal] = defaultdict(lambda: ZERO)
        progress: dict[str, Decimal] = defaultdict(lambda: ZERO)
        paid: dict[str, Decimal] = defaultdict(lambda: ZERO)

        for item in await self.payroll_item_repo.get_for_employee(employee_id):
            period = item.run.period
            payroll[period] += item.net_amount
            if item.run.status in PAID_RUN_STATUSES:
                paid[period] += item.net_amount

        for item in await self.progress_item_repo.get_for_employee(employee_id):
            header = item.progress_payment
            period = header.period or item.work_date.strftime("%Y-%m")
            amount = item.distribution_amount or item.total_amount
            progress[period] += amount
            if header.status == ProgressPaymentStatus.APPROVED.value:
                paid[period] += amount

        months: list[FinancialMonth] = []
        cumulative = ZERO
        for period in sorted(set(payroll) | set(progress)):
            income = payroll[period] + progress[period]
            balance = income - paid[period]
            cumulative += balance
            months.append(
                FinancialMonth(
                    period=period,
                    payroll=_money(payroll[period]),
                    progress_payments=_money(progress[period]),
                    total_income=_money(income),
                    paid=_money(paid[period]),
                    balance=_money(balance),
                    cumulative=_money(cumulative),
                )
            )

        total_payroll = _money(sum(payroll.values(), ZERO))
        total_progress = _money(sum(progress.values(), ZERO))
        total_paid = _money(sum(paid.values(), ZERO))
        return FinancialSummary(
            employee_id=employee_id,
            total_payroll=total_payroll,
            total_progress_payments=total_progress,
            total_paid=total_paid,
            current_balance=total_payroll + total_progress - total_paid,
            months=months,
        )
