"""Customer authentication API routes."""

from typing import Annotated

from fastapi import APIRouter
from fastapi import Depends
from fastapi import status

from payportal.abstract import EnvelopeDTO
from payportal.domains.customers.schemas import CustomerAuthResponse
from payportal.domains.customers.schemas import CustomerDTO
from payportal.domains.customers.schemas import LoginRequest
from payportal.domains.customers.schemas import RegisterRequest
from payportal.domains.customers.services import CustomerAuthService
from payportal.security import CustomerClaims
from payportal.security.rate_limit import login_limiter
from payportal.security.rate_limit import register_limiter


router = APIRouter(prefix="/auth", tags=["Customer Authentication"])


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(register_limiter)],
    summary="Register a customer",
    responses={
        201: {"description": "Account created and session opened"},
        400: {"description": "Validation error or account number already registered"},
        429: {"description": "Too many registration attempts"},
    },
)
async def register(
        data: RegisterRequest,
        auth_service: Annotated[CustomerAuthService, Depends()],
) -> CustomerAuthResponse:
    customer, token = await auth_service.register(data)
    return CustomerAuthResponse(
        message="User registered successfully",
        token=token,
        user=CustomerDTO.model_validate(customer),
    )


@router.post(
    "/login",
    dependencies=[Depends(login_limiter)],
    summary="Customer login",
    responses={
        401: {"description": "Invalid credentials"},
        429: {"description": "Too many login attempts"},
    },
)
async def login(
        data: LoginRequest,
        auth_service: Annotated[CustomerAuthService, Depends()],
) -> CustomerAuthResponse:
    """Authenticate with full name, account number and password.

    All credential mismatches return the same 401 response.
    """
    customer, token = await auth_service.login(data)
    return CustomerAuthResponse(
        message="Login successful",
        token=token,
        user=CustomerDTO.model_validate(customer),
    )


@router.post(
    "/logout",
    summary="Customer logout",
    responses={401: {"description": "Missing or already invalidated token"}},
)
async def logout(
        claims: CustomerClaims,
        auth_service: Annotated[CustomerAuthService, Depends()],
) -> EnvelopeDTO:
    """Invalidate the bearer token for all later requests."""
    await auth_service.logout(claims)
    return EnvelopeDTO(message="Logged out successfully")
