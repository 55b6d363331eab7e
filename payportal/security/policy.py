"""Staff authorization policy.

Role checks are resolved here once, against the ordered ``StaffRole``
enumeration, instead of listing allowed roles at every route.
"""

from typing import Annotated

from fastapi import Depends

from payportal.exceptions import AuthorizationException
from payportal.utilities.enums import StaffRole

from .dependencies import StaffClaims
from .jwt import TokenPayload


ROLE_DENIED_MESSAGES = {
    StaffRole.EMPLOYEE: "Access denied. Employee privileges required.",
    StaffRole.ADMIN: "Access denied. Admin privileges required.",
}


def has_role(claims: TokenPayload, minimum: StaffRole) -> bool:
    """Check whether authenticated staff claims rank at least ``minimum``."""
    return claims.role is not None and claims.role.satisfies(minimum)


def require_role(minimum: StaffRole):
    """Build a dependency that admits staff ranking at least ``minimum``.

    Example:
        @router.get("/reports", dependencies=[Depends(require_role(StaffRole.ADMIN))])
    """

    async def role_gate(claims: StaffClaims) -> TokenPayload:
        if not has_role(claims, minimum):
            raise AuthorizationException(ROLE_DENIED_MESSAGES[minimum])
        return claims

    return role_gate


EmployeeClaims = Annotated[TokenPayload, Depends(require_role(StaffRole.EMPLOYEE))]
AdminClaims = Annotated[TokenPayload, Depends(require_role(StaffRole.ADMIN))]
