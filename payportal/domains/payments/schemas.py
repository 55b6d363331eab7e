"""Payment request and response schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Annotated
from uuid import UUID

from pydantic import AliasChoices
from pydantic import Field
from pydantic import PlainSerializer
from pydantic import field_validator

from payportal.abstract import BaseDTO
from payportal.abstract import EntityDTO
from payportal.abstract import EnvelopeDTO
from payportal.domains.customers.schemas import CustomerDTO
from payportal.domains.staff.schemas import EmployeeSummaryDTO
from payportal.utilities.enums import CustomerPaymentStatus
from payportal.utilities.enums import PaymentMethod
from payportal.utilities.enums import PaymentStatus
from payportal.utilities.enums import ProcessAction


# Amounts travel as JSON numbers
Amount = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


# ─── Requests ─────────────────────────────────────────────────────────────────


class PaymentCreateRequest(BaseDTO):
    """New payment submitted by a customer."""

    amount: Decimal = Field(gt=0, max_digits=12, decimal_places=2)
    currency: str = "USD"
    payment_method: PaymentMethod
    description: str = ""
    metadata: dict[str, str] = Field(default_factory=dict)

    @field_validator("currency")
    @classmethod
    def validate_currency(cls, value: str) -> str:
        value = value.strip()
        if len(value) != 3:
            raise ValueError("Currency must be a 3-letter code")
        if not value.isascii() or not value.isalpha():
            raise ValueError("Currency must contain only letters")
        return value.upper()

    @field_validator("description")
    @classmethod
    def validate_description(cls, value: str) -> str:
        value = value.strip()
        if len(value) > 500:
            raise ValueError("Description must not exceed 500 characters")
        return value


class PaymentStatusUpdateRequest(BaseDTO):
    status: CustomerPaymentStatus


class ProcessPaymentRequest(BaseDTO):
    action: ProcessAction


# ─── Responses ────────────────────────────────────────────────────────────────


class PaymentDTO(EntityDTO):
    """Payment as returned to its owner."""

    customer_id: UUID
    amount: Amount
    currency: str
    payment_method: PaymentMethod
    status: PaymentStatus
    processed_by: UUID | None = None
    processed_at: datetime | None = None
    transaction_id: str
    description: str
    details: dict[str, str] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("details", "metadata"),
        serialization_alias="metadata",
    )
    created_at: datetime
    updated_at: datetime


class PendingPaymentDTO(PaymentDTO):
    """Payment in the staff review queue, with the paying customer."""

    customer: CustomerDTO


class ReviewedPaymentDTO(PendingPaymentDTO):
    """Reviewed payment, with the employee who processed it."""

    processed_by: EmployeeSummaryDTO | None = Field(
        default=None,
        validation_alias=AliasChoices("processor", "processedBy"),
    )


class StatusBreakdownDTO(BaseDTO):
    status: PaymentStatus
    count: int
    total_amount: Amount


class PaymentStatsDTO(BaseDTO):
    total_payments: int
    status_breakdown: list[StatusBreakdownDTO]


class PaymentResponse(EnvelopeDTO):
    data: PaymentDTO


class PaymentListResponse(EnvelopeDTO):
    count: int
    data: list[PaymentDTO]


class PaymentStatsResponse(EnvelopeDTO):
    data: PaymentStatsDTO


class StaffPaymentListResponse(EnvelopeDTO):
    count: int
    payments: list[PendingPaymentDTO]


class PaymentHistoryResponse(EnvelopeDTO):
    count: int
    payments: list[ReviewedPaymentDTO]


class ProcessPaymentResponse(EnvelopeDTO):
    payment: PaymentDTO
