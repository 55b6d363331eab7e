"""Security module for authentication and authorization.

This package provides cross-cutting security concerns:
- JWT token management (issuing, verification, revocation)
- Password hashing
- FastAPI dependencies for protected endpoints (CustomerClaims, StaffClaims)
- Role policy (EmployeeClaims, AdminClaims)
- Rate limiters
"""

from .dependencies import CustomerClaims
from .dependencies import StaffClaims
from .jwt import JWTService
from .jwt import TokenPayload
from .passwords import check_password_bytes
from .passwords import hash_password
from .passwords import verify_password
from .policy import AdminClaims
from .policy import EmployeeClaims
from .policy import require_role


__all__ = [
    "AdminClaims",
    "CustomerClaims",
    "EmployeeClaims",
    "JWTService",
    "StaffClaims",
    "TokenPayload",
    "check_password_bytes",
    "hash_password",
    "require_role",
    "verify_password",
]
