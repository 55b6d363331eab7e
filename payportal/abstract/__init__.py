"""Base classes for entities, repositories, services and schemas."""

from .entity import CreatedAtMixin
from .entity import Entity
from .entity import TimeStampMixin
from .entity import utcnow
from .repository import Repository
from .schema import BaseDTO
from .schema import EntityDTO
from .schema import EnvelopeDTO
from .service import Service


__all__ = [
    "BaseDTO",
    "CreatedAtMixin",
    "Entity",
    "EntityDTO",
    "EnvelopeDTO",
    "Repository",
    "Service",
    "TimeStampMixin",
    "utcnow",
]
