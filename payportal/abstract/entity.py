"""Declarative base and shared column mixins for all entities."""

import re
import uuid
from datetime import UTC
from datetime import datetime

from sqlalchemy import DateTime
from sqlalchemy import Uuid
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.orm import Mapped
from sqlalchemy.orm import declared_attr
from sqlalchemy.orm import mapped_column
from sqlalchemy.sql import func


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(UTC)


def _pluralize(name: str) -> str:
    snake = re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()
    return f"{snake}s"


class Base(DeclarativeBase):
    """Registry and metadata shared by every entity."""


class Entity(Base):
    """Base class for every persisted entity.

    Tables are named after the class (``Payment`` -> ``payments``) and keyed by
    a UUID primary key exposed as ``pk`` and stored in the ``id`` column.
    """

    __abstract__ = True

    @declared_attr.directive
    def __tablename__(cls) -> str:
        return _pluralize(cls.__name__)

    pk: Mapped[uuid.UUID] = mapped_column(
        "id",
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.pk}>"


class CreatedAtMixin:
    """Adds a timezone-aware creation timestamp."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
    )


class TimeStampMixin(CreatedAtMixin):
    """Adds creation and last-update timestamps."""

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        onupdate=utcnow,
    )
