"""Customer payment API routes.

Every route is owner-scoped: a payment belonging to another customer is
reported as not found.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter
from fastapi import Depends
from fastapi import status

from payportal.domains.payments.schemas import PaymentCreateRequest
from payportal.domains.payments.schemas import PaymentDTO
from payportal.domains.payments.schemas import PaymentListResponse
from payportal.domains.payments.schemas import PaymentResponse
from payportal.domains.payments.schemas import PaymentStatsResponse
from payportal.domains.payments.schemas import PaymentStatusUpdateRequest
from payportal.domains.payments.services import PaymentService
from payportal.security import CustomerClaims
from payportal.security.rate_limit import payment_limiter


router = APIRouter(
    prefix="/payments",
    tags=["Payments"],
    dependencies=[Depends(payment_limiter)],
    responses={
        401: {"description": "Missing or invalidated token"},
        403: {"description": "Invalid, expired or staff token"},
        429: {"description": "Too many payment requests"},
    },
)


@router.get("", summary="List own payments")
async def list_payments(
        claims: CustomerClaims,
        payment_service: Annotated[PaymentService, Depends()],
) -> PaymentListResponse:
    payments = await payment_service.list_for_customer(claims.sub)
    return PaymentListResponse(
        count=len(payments),
        data=[PaymentDTO.model_validate(payment) for payment in payments],
    )


@router.get("/stats", summary="Payment statistics by status")
async def payment_stats(
        claims: CustomerClaims,
        payment_service: Annotated[PaymentService, Depends()],
) -> PaymentStatsResponse:
    return PaymentStatsResponse(data=await payment_service.stats(claims.sub))


@router.get(
    "/{payment_id}",
    summary="Get one payment",
    responses={404: {"description": "Payment not found"}},
)
async def get_payment(
        payment_id: UUID,
        claims: CustomerClaims,
        payment_service: Annotated[PaymentService, Depends()],
) -> PaymentResponse:
    payment = await payment_service.get_owned(payment_id, claims.sub)
    return PaymentResponse(data=PaymentDTO.model_validate(payment))


@router.post("", status_code=status.HTTP_201_CREATED, summary="Create a payment")
async def create_payment(
        data: PaymentCreateRequest,
        claims: CustomerClaims,
        payment_service: Annotated[PaymentService, Depends()],
) -> PaymentResponse:
    """Submit a new payment; it starts out ``pending`` until staff review it."""
    payment = await payment_service.create(data, claims.sub)
    return PaymentResponse(message="Payment created successfully", data=PaymentDTO.model_validate(payment))


@router.put(
    "/{payment_id}/status",
    summary="Update payment status",
    responses={
        400: {"description": "Invalid status, or payment already approved or denied"},
        404: {"description": "Payment not found"},
    },
)
async def update_payment_status(
        payment_id: UUID,
        data: PaymentStatusUpdateRequest,
        claims: CustomerClaims,
        payment_service: Annotated[PaymentService, Depends()],
) -> PaymentResponse:
    payment = await payment_service.update_status(payment_id, claims.sub, data.status)
    return PaymentResponse(message="Payment status updated successfully", data=PaymentDTO.model_validate(payment))


@router.delete(
    "/{payment_id}",
    summary="Delete a payment",
    responses={404: {"description": "Payment not found"}},
)
async def delete_payment(
        payment_id: UUID,
        claims: CustomerClaims,
        payment_service: Annotated[PaymentService, Depends()],
) -> PaymentResponse:
    payment = await payment_service.delete(payment_id, claims.sub)
    return PaymentResponse(message="Payment deleted successfully", data=PaymentDTO.model_validate(payment))
