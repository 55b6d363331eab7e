"""Security dependencies for FastAPI endpoints.

Provides the customer and staff authentication dependencies. Each one reads
the bearer token, rejects revoked tokens, verifies signature and expiry with
its own portal key, and injects the decoded claims.
"""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials
from fastapi.security import HTTPBearer

from payportal.exceptions import MissingTokenException

from .jwt import JWTService
from .jwt import TokenPayload


# Bearer token security scheme for OpenAPI docs; missing tokens are reported as 401 below
bearer_scheme = HTTPBearer(auto_error=False)


def _require_token(credentials: HTTPAuthorizationCredentials | None) -> str:
    if credentials is None or not credentials.credentials:
        raise MissingTokenException()
    return credentials.credentials


async def get_customer_token(
    jwt_service: Annotated[JWTService, Depends()],
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> TokenPayload:
    """Authenticate a customer request."""
    return await jwt_service.verify_customer_token(_require_token(credentials))


async def get_staff_token(
    jwt_service: Annotated[JWTService, Depends()],
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> TokenPayload:
    """Authenticate an employee or admin request."""
    return await jwt_service.verify_staff_token(_require_token(credentials))


# Type aliases for cleaner endpoint signatures
CustomerClaims = Annotated[TokenPayload, Depends(get_customer_token)]
StaffClaims = Annotated[TokenPayload, Depends(get_staff_token)]
