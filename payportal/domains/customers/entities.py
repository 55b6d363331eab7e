"""Customer domain entities."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped
from sqlalchemy.orm import mapped_column

from payportal.abstract import CreatedAtMixin
from payportal.abstract import Entity


class Customer(CreatedAtMixin, Entity):
    """Customer entity for the customer portal.

    Attributes:
        pk: UUID primary key.
        full_name: Display name, also required at login.
        account_number: Unique 10-digit bank account number (identifier).
        password_hash: bcrypt hash of the password.
        email: Optional contact address, stored lower-case.
        created_at: Timestamp when the customer registered.
    """

    full_name: Mapped[str] = mapped_column(String(100))
    account_number: Mapped[str] = mapped_column(String(10), unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(128))
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
