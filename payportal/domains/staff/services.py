"""Staff authentication and account management services."""

import logging
from collections.abc import Sequence
from typing import Annotated
from uuid import UUID

from fastapi import Depends

from payportal.abstract import Service
from payportal.exceptions import AuthenticationException
from payportal.exceptions import AuthorizationException
from payportal.exceptions import ConflictException
from payportal.exceptions import NotFoundException
from payportal.exceptions import ValidationException
from payportal.security import JWTService
from payportal.security import TokenPayload
from payportal.security import hash_password
from payportal.security import verify_password
from payportal.utilities.enums import StaffRole

from .entities import Employee
from .repositories import EmployeeRepository
from .schemas import CreateEmployeeRequest
from .schemas import StaffLoginRequest


logger = logging.getLogger(__name__)


class StaffAuthService(Service):
    """Login and logout for employees and admins."""

    def __init__(
        self,
        employee_repo: Annotated[EmployeeRepository, Depends()],
        jwt_service: Annotated[JWTService, Depends()],
    ) -> None:
        self._employee_repo = employee_repo
        self._jwt_service = jwt_service

    async def login(self, data: StaffLoginRequest) -> tuple[Employee, str]:
        """Check credentials and issue a staff token carrying the current role.

        Raises:
            AuthenticationException: On unknown username or wrong password.
        """
        employee = await self._employee_repo.get_by_username(data.username)

        if employee is None or not await verify_password(data.password, employee.password_hash):
            logger.warning("Failed staff login for %r", data.username)
            raise AuthenticationException()

        token = self._jwt_service.issue_staff_token(employee.pk, employee.username, employee.role)
        logger.info("Staff login: %s (%s)", employee.username, employee.role)
        return employee, token

    async def logout(self, payload: TokenPayload) -> None:
        await self._jwt_service.revoke(payload)


class EmployeeService(Service):
    """Employee account management.

    Rules:
    - Only the super admin (the admin without a creator) may create or delete
      other admins.
    - Nobody may delete their own account.
    - The super admin can never be deleted, and there is only ever one.
    """

    def __init__(self, employee_repo: Annotated[EmployeeRepository, Depends()]) -> None:
        self._employee_repo = employee_repo

    async def list_employees(self) -> Sequence[Employee]:
        return await self._employee_repo.list_with_creator()

    async def _is_super_admin(self, employee_id: UUID) -> bool:
        actor = await self._employee_repo.select_one(Employee.pk == employee_id)
        return actor is not None and actor.is_super_admin

    async def create_employee(self, data: CreateEmployeeRequest, actor_id: UUID) -> Employee:
        """Create an employee or admin account on behalf of ``actor_id``.

        Raises:
            AuthorizationException: If an admin is requested by anyone but the super admin.
            ConflictException: If the username is taken.
        """
        if data.role == StaffRole.ADMIN and not await self._is_super_admin(actor_id):
            raise AuthorizationException("Only super admin can create admin accounts")

        if await self._employee_repo.exists(Employee.username == data.username):
            raise ConflictException("Username already exists")

        employee = await self._employee_repo.create(
            username=data.username,
            password_hash=await hash_password(data.password),
            role=data.role,
            created_by=actor_id,
        )
        logger.info("Employee %s (%s) created by %s", employee.username, employee.role, actor_id)
        return employee

    async def delete_employee(self, employee_id: UUID, actor_id: UUID) -> None:
        """Delete an employee account on behalf of ``actor_id``.

        Raises:
            ValidationException: If the actor targets their own account.
            NotFoundException: If the employee does not exist.
            AuthorizationException: If the target is the super admin, or another
                admin and the actor is not the super admin.
        """
        if employee_id == actor_id:
            raise ValidationException("Cannot delete your own account")

        employee = await self._employee_repo.select_one(Employee.pk == employee_id)
        if employee is None:
            raise NotFoundException("Employee not found")

        if employee.is_super_admin:
            raise AuthorizationException("Cannot delete super admin account")

        if employee.role == StaffRole.ADMIN and not await self._is_super_admin(actor_id):
            raise AuthorizationException("Only super admin can delete admin accounts")

        await self._employee_repo.delete(employee)
        logger.info("Employee %s deleted by %s", employee.username, actor_id)

    async def create_super_admin(self, username: str, password: str) -> Employee:
        """Create the single super admin account.

        Raises:
            ConflictException: If a super admin already exists or the username is taken.
        """
        if await self._employee_repo.get_super_admin() is not None:
            raise ConflictException("Super admin already exists")

        if await self._employee_repo.exists(Employee.username == username):
            raise ConflictException("Username already exists")

        employee = await self._employee_repo.create(
            username=username,
            password_hash=await hash_password(password),
            role=StaffRole.ADMIN,
            created_by=None,
        )
        logger.info("Super admin %s created", employee.username)
        return employee

    async def ensure_super_admin(self, username: str, password: str) -> Employee:
        """Return the super admin, creating it when the store has none."""
        existing = await self._employee_repo.get_super_admin()
        if existing is not None:
            return existing
        return await self.create_super_admin(username, password)
