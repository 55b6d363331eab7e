"""Payment services for the customer and staff portals."""

import logging
from collections.abc import Sequence
from typing import Annotated
from uuid import UUID

from fastapi import Depends
from sqlalchemy.orm import selectinload

from payportal.abstract import Service
from payportal.abstract import utcnow
from payportal.exceptions import ConflictException
from payportal.exceptions import NotFoundException
from payportal.utilities.enums import CustomerPaymentStatus
from payportal.utilities.enums import PaymentStatus
from payportal.utilities.enums import ProcessAction

from .entities import Payment
from .repositories import PaymentRepository
from .schemas import PaymentCreateRequest
from .schemas import PaymentStatsDTO
from .schemas import StatusBreakdownDTO


logger = logging.getLogger(__name__)

PAYMENT_NOT_FOUND = "Payment not found"
ALREADY_PROCESSED = "Payment has already been processed"


class PaymentService(Service):
    """Payment workflows.

    Customers only ever see their own payments: a payment owned by someone
    else is reported exactly like a missing one. Staff decisions are final,
    so neither the customer nor another employee can change a payment once
    it has been approved or denied.
    """

    def __init__(self, payment_repo: Annotated[PaymentRepository, Depends()]) -> None:
        self._payment_repo = payment_repo

    # ─── Customer portal ──────────────────────────────────────────────────

    async def list_for_customer(self, customer_id: UUID) -> Sequence[Payment]:
        return await self._payment_repo.list_for_customer(customer_id)

    async def get_owned(self, payment_id: UUID, customer_id: UUID) -> Payment:
        """Fetch a payment owned by ``customer_id``.

        Raises:
            NotFoundException: If the payment is missing or owned by someone else.
        """
        payment = await self._payment_repo.get_owned(payment_id, customer_id)
        if payment is None:
            raise NotFoundException(PAYMENT_NOT_FOUND)
        return payment

    async def create(self, data: PaymentCreateRequest, customer_id: UUID) -> Payment:
        payment = await self._payment_repo.create(
            customer_id=customer_id,
            amount=data.amount,
            currency=data.currency,
            payment_method=data.payment_method,
            description=data.description,
            details=dict(data.metadata),
            status=PaymentStatus.PENDING,
        )
        logger.info("Payment %s created by customer %s", payment.transaction_id, customer_id)
        return payment

    async def update_status(
        self,
        payment_id: UUID,
        customer_id: UUID,
        new_status: CustomerPaymentStatus,
    ) -> Payment:
        """Set the status of a customer's own payment.

        Raises:
            NotFoundException: If the payment is missing or owned by someone else.
            ConflictException: If staff already approved or denied the payment.
        """
        updated = await self._payment_repo.update_by_filters(
            {"status": PaymentStatus(new_status), "updated_at": utcnow()},
            Payment.pk == payment_id,
            Payment.customer_id == customer_id,
            Payment.status.not_in(PaymentStatus.reviewed()),
        )
        if not updated:
            await self.get_owned(payment_id, customer_id)
            raise ConflictException(ALREADY_PROCESSED)

        return await self._payment_repo.get_by_id(payment_id, populate_existing=True)

    async def delete(self, payment_id: UUID, customer_id: UUID) -> Payment:
        """Delete a customer's own payment and return it as it was."""
        payment = await self.get_owned(payment_id, customer_id)
        await self._payment_repo.delete(payment)
        logger.info("Payment %s deleted by customer %s", payment.transaction_id, customer_id)
        return payment

    async def stats(self, customer_id: UUID) -> PaymentStatsDTO:
        breakdown = await self._payment_repo.status_breakdown(customer_id)
        return PaymentStatsDTO(
            total_payments=sum(count for _, count, _ in breakdown),
            status_breakdown=[
                StatusBreakdownDTO(status=status, count=count, total_amount=total)
                for status, count, total in breakdown
            ],
        )

    # ─── Staff portal ─────────────────────────────────────────────────────

    async def list_pending(self) -> Sequence[Payment]:
        return await self._payment_repo.list_pending()

    async def list_history(self) -> Sequence[Payment]:
        return await self._payment_repo.list_reviewed()

    async def process(self, payment_id: UUID, action: ProcessAction, employee_id: UUID) -> Payment:
        """Approve or deny a pending payment.

        The transition is a single conditional update on ``status == pending``,
        so of two concurrent reviews exactly one succeeds.

        Raises:
            NotFoundException: If the payment does not exist.
            ConflictException: If the payment is no longer pending.
        """
        now = utcnow()
        updated = await self._payment_repo.update_by_filters(
            {
                "status": action.resulting_status,
                "processed_by": employee_id,
                "processed_at": now,
                "updated_at": now,
            },
            Payment.pk == payment_id,
            Payment.status == PaymentStatus.PENDING,
        )
        if not updated:
            if not await self._payment_repo.exists(Payment.pk == payment_id):
                raise NotFoundException(PAYMENT_NOT_FOUND)
            raise ConflictException(ALREADY_PROCESSED)

        logger.info("Payment %s %s by employee %s", payment_id, action.past_tense, employee_id)
        return await self._payment_repo.get_by_id(
            payment_id,
            options=[selectinload(Payment.customer)],
            populate_existing=True,
        )
