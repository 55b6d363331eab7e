"""Payment domain entities."""

import secrets
import uuid
from datetime import UTC
from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import JSON
from sqlalchemy import DateTime
from sqlalchemy import Enum
from sqlalchemy import ForeignKey
from sqlalchemy import Numeric
from sqlalchemy import String
from sqlalchemy.orm import Mapped
from sqlalchemy.orm import mapped_column
from sqlalchemy.orm import relationship

from payportal.abstract import Entity
from payportal.abstract import TimeStampMixin
from payportal.domains.customers.entities import Customer
from payportal.domains.staff.entities import Employee
from payportal.utilities.enums import PaymentMethod
from payportal.utilities.enums import PaymentStatus


def _enum_values(enum_cls) -> list[str]:
    return [member.value for member in enum_cls]


def generate_transaction_id() -> str:
    """Unique reference of the form ``TXN-<epoch ms>-<16 hex digits>``."""
    millis = int(datetime.now(UTC).timestamp() * 1000)
    return f"TXN-{millis}-{secrets.token_hex(8).upper()}"


class Payment(TimeStampMixin, Entity):
    """Payment submitted by a customer.

    Attributes:
        pk: UUID primary key.
        customer_id: Owning customer.
        amount: Positive amount with two decimals.
        currency: ISO 4217 code, upper-case.
        payment_method: How the customer pays.
        status: Lifecycle state, ``pending`` on creation.
        processed_by: Employee who approved or denied the payment.
        processed_at: When the payment was approved or denied.
        transaction_id: Unique human-readable reference.
        description: Free text, at most 500 characters.
        details: String map stored in the ``metadata`` column.
    """

    customer_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("customers.id", ondelete="CASCADE"),
        index=True,
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2))
    currency: Mapped[str] = mapped_column(String(3), default="USD")
    payment_method: Mapped[PaymentMethod] = mapped_column(
        Enum(PaymentMethod, native_enum=False, length=20, values_callable=_enum_values),
    )
    status: Mapped[PaymentStatus] = mapped_column(
        Enum(PaymentStatus, native_enum=False, length=20, values_callable=_enum_values),
        default=PaymentStatus.PENDING,
        index=True,
    )
    processed_by: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("employees.id", ondelete="SET NULL"),
        nullable=True,
        default=None,
    )
    processed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True, default=None)
    transaction_id: Mapped[str] = mapped_column(String(64), unique=True, default=generate_transaction_id)
    description: Mapped[str] = mapped_column(String(500), default="")
    details: Mapped[dict[str, str]] = mapped_column("metadata", JSON, default=dict)

    customer: Mapped[Customer] = relationship(lazy="raise")
    processor: Mapped[Optional[Employee]] = relationship(lazy="raise")
