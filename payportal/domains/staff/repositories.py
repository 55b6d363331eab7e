"""Employee data access."""

from collections.abc import Sequence

from sqlalchemy.orm import selectinload

from payportal.abstract import Repository
from payportal.utilities.enums import StaffRole

from .entities import Employee


class EmployeeRepository(Repository[Employee]):
    """Repository for employee accounts."""

    async def get_by_username(self, username: str) -> Employee | None:
        return await self.select_one(Employee.username == username)

    async def get_super_admin(self) -> Employee | None:
        return await self.select_one(Employee.role == StaffRole.ADMIN, Employee.created_by.is_(None))

    async def list_with_creator(self) -> Sequence[Employee]:
        """All employees, newest first, with their creator loaded."""
        return await self.select_all(
            order_by=[Employee.created_at.desc()],
            options=[selectinload(Employee.creator)],
        )
