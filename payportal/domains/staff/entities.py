"""Staff domain entities."""

import uuid
from typing import Optional

from sqlalchemy import Enum
from sqlalchemy import Index
from sqlalchemy import String
from sqlalchemy import Uuid
from sqlalchemy import text
from sqlalchemy.orm import Mapped
from sqlalchemy.orm import mapped_column
from sqlalchemy.orm import relationship

from payportal.abstract import CreatedAtMixin
from payportal.abstract import Entity
from payportal.utilities.enums import StaffRole


class Employee(CreatedAtMixin, Entity):
    """Employee or admin account for the staff portal.

    ``created_by`` is a plain reference to the creating employee, kept as is
    when the creator is later deleted. The one employee without a creator is
    the super admin; the partial unique index allows a single such row.

    Attributes:
        pk: UUID primary key.
        username: Unique login name.
        password_hash: bcrypt hash of the password.
        role: ``employee`` or ``admin``.
        created_by: ID of the employee who created this account, None for the super admin.
        created_at: Creation timestamp.
    """

    __table_args__ = (
        Index(
            "uq_employees_super_admin",
            "role",
            unique=True,
            postgresql_where=text("created_by IS NULL"),
            sqlite_where=text("created_by IS NULL"),
        ),
    )

    username: Mapped[str] = mapped_column(String(50), unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(128))
    role: Mapped[StaffRole] = mapped_column(
        Enum(StaffRole, native_enum=False, length=20, values_callable=lambda roles: [r.value for r in roles]),
        default=StaffRole.EMPLOYEE,
    )
    created_by: Mapped[uuid.UUID | None] = mapped_column(Uuid(as_uuid=True), nullable=True, default=None)

    creator: Mapped[Optional["Employee"]] = relationship(
        primaryjoin="foreign(Employee.created_by) == remote(Employee.pk)",
        viewonly=True,
        lazy="raise",
    )

    @property
    def is_super_admin(self) -> bool:
        """The super admin is the admin nobody created."""
        return self.role == StaffRole.ADMIN and self.created_by is None
