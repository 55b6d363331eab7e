"""Payment data access."""

from collections.abc import Sequence
from decimal import Decimal
from uuid import UUID

from sqlalchemy import func
from sqlalchemy import select
from sqlalchemy.orm import selectinload

from payportal.abstract import Repository
from payportal.utilities.enums import PaymentStatus

from .entities import Payment


class PaymentRepository(Repository[Payment]):
    """Repository for payments."""

    async def list_for_customer(self, customer_id: UUID) -> Sequence[Payment]:
        return await self.select_all(
            Payment.customer_id == customer_id,
            order_by=[Payment.created_at.desc()],
        )

    async def get_owned(self, payment_id: UUID, customer_id: UUID) -> Payment | None:
        """Payment by id, only if owned by ``customer_id``."""
        return await self.select_one(Payment.pk == payment_id, Payment.customer_id == customer_id)

    async def list_pending(self) -> Sequence[Payment]:
        return await self.select_all(
            Payment.status == PaymentStatus.PENDING,
            order_by=[Payment.created_at.desc()],
            options=[selectinload(Payment.customer)],
        )

    async def list_reviewed(self) -> Sequence[Payment]:
        return await self.select_all(
            Payment.status.in_(PaymentStatus.reviewed()),
            order_by=[Payment.processed_at.desc()],
            options=[selectinload(Payment.customer), selectinload(Payment.processor)],
        )

    async def status_breakdown(self, customer_id: UUID) -> list[tuple[PaymentStatus, int, Decimal]]:
        """Count and total amount per status for one customer."""
        stmt = (
            select(Payment.status, func.count(), func.coalesce(func.sum(Payment.amount), 0))
            .where(Payment.customer_id == customer_id)
            .group_by(Payment.status)
            .order_by(Payment.status)
        )
        result = await self.session.execute(stmt)
        return [(status, count, Decimal(str(total))) for status, count, total in result.all()]
