"""JWT token generation and verification service.

Issues session tokens for the two portals and tracks logouts in Redis.

Customer and staff tokens are signed with different keys, and staff tokens
carry ``type="employee"``. A token therefore only verifies on the portal it
was issued for. Revocations are stored per portal under the token's ``jti``
and expire together with the token, so they survive restarts and are shared
by every instance.
"""

import logging
from datetime import UTC
from datetime import datetime
from datetime import timedelta
from typing import Annotated
from typing import Any
from uuid import UUID
from uuid import uuid4

import redis.asyncio as aioredis
from fastapi import Depends
from jose import ExpiredSignatureError
from jose import JWTError
from jose import jwt
from pydantic import BaseModel
from pydantic import Field

from payportal.core import settings
from payportal.core.redis import get_redis
from payportal.exceptions import ExpiredTokenException
from payportal.exceptions import InvalidTokenException
from payportal.exceptions import RevokedTokenException
from payportal.exceptions import TokenTypeException
from payportal.utilities.enums import StaffRole
from payportal.utilities.enums import TokenAudience


logger = logging.getLogger(__name__)

STAFF_TOKEN_TYPE = "employee"


class TokenPayload(BaseModel):
    """Decoded token payload with validated fields."""

    sub: UUID = Field(description="Customer or employee ID")
    name: str = Field(description="Customer full name or employee username")
    jti: UUID = Field(description="Token unique ID, used for revocation")
    exp: int = Field(description="Expiration timestamp")
    iat: int = Field(description="Issued at timestamp")
    type: str | None = Field(default=None, description="'employee' on staff tokens, absent otherwise")
    role: StaffRole | None = Field(default=None, description="Staff role (staff only)")

    @property
    def audience(self) -> TokenAudience:
        """Portal the token belongs to."""
        return TokenAudience.STAFF if self.type == STAFF_TOKEN_TYPE else TokenAudience.CUSTOMER

    @property
    def remaining_seconds(self) -> int:
        """Seconds until the token expires (zero once expired)."""
        return max(self.exp - int(datetime.now(UTC).timestamp()), 0)


class JWTService:
    """JWT token generation, verification and revocation.

    Usage with FastAPI (automatic dependency injection):
        ```python
        @router.post("/login")
        async def login(jwt_service: Annotated[JWTService, Depends()]):
            token = jwt_service.issue_customer_token(customer.pk, customer.full_name)
        ```

    Token operations:
        ```python
        payload = await jwt_service.verify_customer_token(token)
        payload = await jwt_service.verify_staff_token(token)
        await jwt_service.revoke(payload)
        ```
    """

    # Redis key prefix, followed by "<audience>:<jti>"
    _REVOKED_PREFIX = "jwt:revoked:"

    def __init__(self, redis: Annotated[aioredis.Redis, Depends(get_redis)]) -> None:
        """Initialize JWT service with Redis client.

        Args:
            redis: Redis client holding revocations.
        """
        self._redis = redis
        self._algorithm = settings.jwt.algorithm
        self._keys = {
            TokenAudience.CUSTOMER: settings.jwt.customer_secret_key.get_secret_value(),
            TokenAudience.STAFF: settings.jwt.staff_secret_key.get_secret_value(),
        }
        self._lifetimes = {
            TokenAudience.CUSTOMER: settings.jwt.customer_expiration,
            TokenAudience.STAFF: settings.jwt.staff_expiration,
        }

    # =========================================================================
    # TOKEN CREATION
    # =========================================================================

    def _encode(self, audience: TokenAudience, claims: dict[str, Any]) -> str:
        now = datetime.now(UTC)
        exp = now + self._lifetimes[audience]

        payload = {
            **claims,
            "jti": str(uuid4()),
            "exp": int(exp.timestamp()),
            "iat": int(now.timestamp()),
        }
        return jwt.encode(payload, self._keys[audience], algorithm=self._algorithm)

    def issue_customer_token(self, customer_id: UUID, full_name: str) -> str:
        """Create a customer session token.

        Args:
            customer_id: Customer UUID.
            full_name: Customer display name.

        Returns:
            Encoded JWT valid for the customer token lifetime.
        """
        return self._encode(
            TokenAudience.CUSTOMER,
            {"sub": str(customer_id), "name": full_name},
        )

    def issue_staff_token(self, employee_id: UUID, username: str, role: StaffRole) -> str:
        """Create a staff session token.

        Args:
            employee_id: Employee UUID.
            username: Employee username.
            role: Employee role at login time.

        Returns:
            Encoded JWT valid for the staff token lifetime.
        """
        return self._encode(
            TokenAudience.STAFF,
            {
                "sub": str(employee_id),
                "name": username,
                "role": role.value,
                "type": STAFF_TOKEN_TYPE,
            },
        )

    # =========================================================================
    # TOKEN VERIFICATION
    # =========================================================================

    def _decode_token(self, token: str, audience: TokenAudience) -> dict:
        """Decode and verify JWT token signature and expiration.

        Raises:
            InvalidTokenException: If token is malformed or invalid signature.
            ExpiredTokenException: If token has expired.
        """
        try:
            return jwt.decode(token, self._keys[audience], algorithms=[self._algorithm])
        except ExpiredSignatureError:
            raise ExpiredTokenException() from None
        except JWTError:
            raise InvalidTokenException() from None

    @staticmethod
    def _peek_jti(token: str) -> str | None:
        """Read ``jti`` without verifying the signature."""
        try:
            jti = jwt.get_unverified_claims(token).get("jti")
        except JWTError:
            return None
        return jti if isinstance(jti, str) else None

    async def _verify(self, token: str, audience: TokenAudience) -> TokenPayload:
        jti = self._peek_jti(token)
        if jti is not None and await self.is_revoked(audience, jti):
            raise RevokedTokenException()

        claims = self._decode_token(token, audience)

        expected_type = STAFF_TOKEN_TYPE if audience is TokenAudience.STAFF else None
        if claims.get("type") != expected_type:
            raise TokenTypeException()

        try:
            return TokenPayload(**claims)
        except ValueError:
            raise InvalidTokenException() from None

    async def verify_customer_token(self, token: str) -> TokenPayload:
        """Verify a customer token and return its payload.

        Raises:
            RevokedTokenException: If the token was logged out.
            InvalidTokenException: If signature or claims are invalid.
            ExpiredTokenException: If token has expired.
            TokenTypeException: If the token is a staff token.
        """
        return await self._verify(token, TokenAudience.CUSTOMER)

    async def verify_staff_token(self, token: str) -> TokenPayload:
        """Verify a staff token and return its payload.

        Raises:
            RevokedTokenException: If the token was logged out.
            InvalidTokenException: If signature or claims are invalid.
            ExpiredTokenException: If token has expired.
            TokenTypeException: If ``type`` is not ``"employee"``.
        """
        return await self._verify(token, TokenAudience.STAFF)

    # =========================================================================
    # TOKEN REVOCATION
    # =========================================================================

    def _revoked_key(self, audience: TokenAudience, jti: str | UUID) -> str:
        return f"{self._REVOKED_PREFIX}{audience}:{jti}"

    async def revoke(self, payload: TokenPayload) -> None:
        """Revoke a verified token until it would have expired anyway.

        Args:
            payload: Payload of the token being logged out.
        """
        ttl = timedelta(seconds=max(payload.remaining_seconds, 1))
        await self._redis.setex(self._revoked_key(payload.audience, payload.jti), ttl, str(payload.sub))
        logger.info("Revoked %s token %s for %s", payload.audience, payload.jti, payload.sub)

    async def is_revoked(self, audience: TokenAudience, jti: str | UUID) -> bool:
        """Check whether a token id was revoked for the given portal."""
        return await self._redis.exists(self._revoked_key(audience, jti)) > 0
