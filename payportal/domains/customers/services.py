"""Customer authentication services."""

import logging
from typing import Annotated

from fastapi import Depends
from sqlalchemy.exc import IntegrityError

from payportal.abstract import Service
from payportal.exceptions import AuthenticationException
from payportal.exceptions import ConflictException
from payportal.security import JWTService
from payportal.security import TokenPayload
from payportal.security import hash_password
from payportal.security import verify_password

from .entities import Customer
from .repositories import CustomerRepository
from .schemas import LoginRequest
from .schemas import RegisterRequest


logger = logging.getLogger(__name__)


class CustomerAuthService(Service):
    """Registration, login and logout for customers.

    Login failures never reveal whether the account exists: unknown account,
    wrong name and wrong password all raise the same ``AuthenticationException``.
    """

    def __init__(
        self,
        customer_repo: Annotated[CustomerRepository, Depends()],
        jwt_service: Annotated[JWTService, Depends()],
    ) -> None:
        self._customer_repo = customer_repo
        self._jwt_service = jwt_service

    async def register(self, data: RegisterRequest) -> tuple[Customer, str]:
        """Create a customer account and open a session.

        Returns:
            The new customer and its session token.

        Raises:
            ConflictException: If the account number is already registered.
        """
        if await self._customer_repo.exists(Customer.account_number == data.account_number):
            raise ConflictException("Account number already registered")

        password_hash = await hash_password(data.password)
        try:
            customer = await self._customer_repo.create(
                full_name=data.full_name,
                account_number=data.account_number,
                password_hash=password_hash,
                email=data.email,
            )
        except IntegrityError:
            # Lost a race with a concurrent registration of the same account
            raise ConflictException("Account number already registered") from None
        logger.info("Registered customer %s", customer.pk)

        return customer, self._jwt_service.issue_customer_token(customer.pk, customer.full_name)

    async def login(self, data: LoginRequest) -> tuple[Customer, str]:
        """Check credentials and open a session.

        Raises:
            AuthenticationException: On any credential mismatch.
        """
        customer = await self._customer_repo.get_by_account_number(data.account_number)

        if (
            customer is None
            or customer.full_name != data.full_name
            or not await verify_password(data.password, customer.password_hash)
        ):
            logger.warning("Failed customer login for account ending %s", data.account_number[-4:])
            raise AuthenticationException()

        return customer, self._jwt_service.issue_customer_token(customer.pk, customer.full_name)

    async def logout(self, payload: TokenPayload) -> None:
        """Revoke the session token the request was authenticated with."""
        await self._jwt_service.revoke(payload)
