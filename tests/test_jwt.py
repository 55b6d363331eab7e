"""Tests for session token issuing, verification and revocation."""

from datetime import timedelta
from uuid import uuid4

import pytest
from jose import jwt

from payportal.core import settings
from payportal.exceptions import ExpiredTokenException
from payportal.exceptions import InvalidTokenException
from payportal.exceptions import RevokedTokenException
from payportal.exceptions import TokenTypeException
from payportal.utilities.enums import StaffRole
from payportal.utilities.enums import TokenAudience


async def test_customer_token_round_trip(jwt_service):
    customer_id = uuid4()
    token = jwt_service.issue_customer_token(customer_id, "Jane Doe")

    payload = await jwt_service.verify_customer_token(token)

    assert payload.sub == customer_id
    assert payload.name == "Jane Doe"
    assert payload.type is None
    assert payload.role is None
    assert payload.audience == TokenAudience.CUSTOMER
    assert payload.exp - payload.iat == int(settings.jwt.customer_expiration.total_seconds())


async def test_staff_token_carries_type_and_role(jwt_service):
    employee_id = uuid4()
    token = jwt_service.issue_staff_token(employee_id, "clerk_1", StaffRole.ADMIN)

    payload = await jwt_service.verify_staff_token(token)

    assert payload.sub == employee_id
    assert payload.type == "employee"
    assert payload.role == StaffRole.ADMIN
    assert payload.audience == TokenAudience.STAFF


async def test_every_token_gets_a_unique_jti(jwt_service):
    customer_id = uuid4()
    first = await jwt_service.verify_customer_token(jwt_service.issue_customer_token(customer_id, "Jane Doe"))
    second = await jwt_service.verify_customer_token(jwt_service.issue_customer_token(customer_id, "Jane Doe"))

    assert first.jti != second.jti


async def test_customer_token_rejected_by_staff_verification(jwt_service):
    token = jwt_service.issue_customer_token(uuid4(), "Jane Doe")

    with pytest.raises(InvalidTokenException):
        await jwt_service.verify_staff_token(token)


async def test_staff_token_rejected_by_customer_verification(jwt_service):
    token = jwt_service.issue_staff_token(uuid4(), "clerk_1", StaffRole.EMPLOYEE)

    with pytest.raises(InvalidTokenException):
        await jwt_service.verify_customer_token(token)


async def test_staff_key_without_employee_type_is_rejected(jwt_service):
    claims = {"sub": str(uuid4()), "name": "clerk_1", "jti": str(uuid4()), "exp": 4102444800, "iat": 1700000000}
    token = jwt.encode(claims, settings.jwt.staff_secret_key.get_secret_value(), algorithm=settings.jwt.algorithm)

    with pytest.raises(TokenTypeException):
        await jwt_service.verify_staff_token(token)


async def test_customer_key_with_employee_type_is_rejected(jwt_service):
    claims = {
        "sub": str(uuid4()),
        "name": "Jane Doe",
        "jti": str(uuid4()),
        "exp": 4102444800,
        "iat": 1700000000,
        "type": "employee",
    }
    token = jwt.encode(claims, settings.jwt.customer_secret_key.get_secret_value(), algorithm=settings.jwt.algorithm)

    with pytest.raises(TokenTypeException):
        await jwt_service.verify_customer_token(token)


async def test_expired_token_is_rejected(jwt_service):
    jwt_service._lifetimes[TokenAudience.CUSTOMER] = timedelta(seconds=-30)
    token = jwt_service.issue_customer_token(uuid4(), "Jane Doe")

    with pytest.raises(ExpiredTokenException):
        await jwt_service.verify_customer_token(token)


async def test_malformed_token_is_rejected(jwt_service):
    with pytest.raises(InvalidTokenException):
        await jwt_service.verify_customer_token("not-a-jwt")


async def test_revoked_token_is_rejected(jwt_service, fake_redis):
    token = jwt_service.issue_customer_token(uuid4(), "Jane Doe")
    payload = await jwt_service.verify_customer_token(token)

    await jwt_service.revoke(payload)

    with pytest.raises(RevokedTokenException):
        await jwt_service.verify_customer_token(token)

    ttl = await fake_redis.ttl(f"jwt:revoked:customer:{payload.jti}")
    assert 0 < ttl <= int(settings.jwt.customer_expiration.total_seconds())


async def test_revocation_is_scoped_to_the_portal(jwt_service):
    token = jwt_service.issue_staff_token(uuid4(), "clerk_1", StaffRole.EMPLOYEE)
    payload = await jwt_service.verify_staff_token(token)

    await jwt_service.revoke(payload)

    assert await jwt_service.is_revoked(TokenAudience.STAFF, payload.jti)
    assert not await jwt_service.is_revoked(TokenAudience.CUSTOMER, payload.jti)
