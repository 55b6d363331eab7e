"""Employee portal API routes: staff sessions and payment review."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter
from fastapi import Depends

from payportal.abstract import EnvelopeDTO
from payportal.domains.payments.schemas import PaymentDTO
from payportal.domains.payments.schemas import PaymentHistoryResponse
from payportal.domains.payments.schemas import PendingPaymentDTO
from payportal.domains.payments.schemas import ProcessPaymentRequest
from payportal.domains.payments.schemas import ProcessPaymentResponse
from payportal.domains.payments.schemas import ReviewedPaymentDTO
from payportal.domains.payments.schemas import StaffPaymentListResponse
from payportal.domains.payments.services import PaymentService
from payportal.domains.staff.schemas import StaffAuthResponse
from payportal.domains.staff.schemas import StaffLoginRequest
from payportal.domains.staff.schemas import StaffSessionDTO
from payportal.domains.staff.services import StaffAuthService
from payportal.security import EmployeeClaims
from payportal.security import StaffClaims
from payportal.security.rate_limit import api_limiter
from payportal.security.rate_limit import login_limiter
from payportal.security.rate_limit import payment_limiter


router = APIRouter(prefix="/employee", tags=["Employee Portal"])


# ─── Authentication ───────────────────────────────────────────────────────────


@router.post(
    "/auth/login",
    dependencies=[Depends(login_limiter)],
    summary="Employee login",
    responses={
        401: {"description": "Invalid credentials"},
        429: {"description": "Too many login attempts"},
    },
)
async def employee_login(
        data: StaffLoginRequest,
        auth_service: Annotated[StaffAuthService, Depends()],
) -> StaffAuthResponse:
    employee, token = await auth_service.login(data)
    return StaffAuthResponse(
        message="Login successful",
        token=token,
        employee=StaffSessionDTO.model_validate(employee),
    )


@router.post("/auth/logout", summary="Employee logout")
async def employee_logout(
        claims: StaffClaims,
        auth_service: Annotated[StaffAuthService, Depends()],
) -> EnvelopeDTO:
    await auth_service.logout(claims)
    return EnvelopeDTO(message="Logout successful")


# ─── Payment review ───────────────────────────────────────────────────────────


@router.get(
    "/payments/pending",
    dependencies=[Depends(api_limiter)],
    summary="Payments awaiting review",
)
async def pending_payments(
        _: EmployeeClaims,
        payment_service: Annotated[PaymentService, Depends()],
) -> StaffPaymentListResponse:
    payments = await payment_service.list_pending()
    return StaffPaymentListResponse(
        count=len(payments),
        payments=[PendingPaymentDTO.model_validate(payment) for payment in payments],
    )


@router.put(
    "/payments/{payment_id}/process",
    dependencies=[Depends(payment_limiter)],
    summary="Approve or deny a pending payment",
    responses={
        400: {"description": "Invalid action, or payment already processed"},
        404: {"description": "Payment not found"},
    },
)
async def process_payment(
        payment_id: UUID,
        data: ProcessPaymentRequest,
        claims: EmployeeClaims,
        payment_service: Annotated[PaymentService, Depends()],
) -> ProcessPaymentResponse:
    """Apply a final staff decision to a pending payment.

    Only one decision is ever recorded: a payment that is no longer pending
    is rejected with 400, including when two reviewers race.
    """
    payment = await payment_service.process(payment_id, data.action, claims.sub)
    return ProcessPaymentResponse(
        message=f"Payment {data.action.past_tense} successfully",
        payment=PaymentDTO.model_validate(payment),
    )


@router.get(
    "/payments/history",
    dependencies=[Depends(api_limiter)],
    summary="Reviewed payments, most recent decision first",
)
async def payment_history(
        _: EmployeeClaims,
        payment_service: Annotated[PaymentService, Depends()],
) -> PaymentHistoryResponse:
    payments = await payment_service.list_history()
    return PaymentHistoryResponse(
        count=len(payments),
        payments=[ReviewedPaymentDTO.model_validate(payment) for payment in payments],
    )
