"""Tests for the ordered staff roles and the role gate."""

from uuid import uuid4

import pytest

from payportal.exceptions import AuthorizationException
from payportal.security import TokenPayload
from payportal.security import require_role
from payportal.utilities.enums import StaffRole


def staff_claims(role: StaffRole | None) -> TokenPayload:
    return TokenPayload(sub=uuid4(), name="clerk_1", jti=uuid4(), exp=4102444800, iat=1700000000, type="employee", role=role)


def test_roles_are_ordered():
    assert StaffRole.ADMIN.satisfies(StaffRole.EMPLOYEE)
    assert StaffRole.ADMIN.satisfies(StaffRole.ADMIN)
    assert StaffRole.EMPLOYEE.satisfies(StaffRole.EMPLOYEE)
    assert not StaffRole.EMPLOYEE.satisfies(StaffRole.ADMIN)


async def test_gate_admits_sufficient_role():
    claims = staff_claims(StaffRole.ADMIN)

    assert await require_role(StaffRole.EMPLOYEE)(claims) is claims


@pytest.mark.parametrize(
    ("role", "minimum", "message"),
    [
        (StaffRole.EMPLOYEE, StaffRole.ADMIN, "Access denied. Admin privileges required."),
        (None, StaffRole.EMPLOYEE, "Access denied. Employee privileges required."),
    ],
)
async def test_gate_rejects_insufficient_role(role, minimum, message):
    with pytest.raises(AuthorizationException) as exc_info:
        await require_role(minimum)(staff_claims(role))

    assert exc_info.value.message == message
