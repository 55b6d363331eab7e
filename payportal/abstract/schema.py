"""Base schemas for request and response bodies.

Field names are snake_case in Python and camelCase on the wire.
"""

from uuid import UUID

from pydantic import AliasChoices
from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic.alias_generators import to_camel


class BaseDTO(BaseModel):
    """Base for every API schema (camelCase aliases, populated by name too)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class EntityDTO(BaseDTO):
    """Response schema for a persisted entity (entities expose their key as ``pk``)."""

    id: UUID = Field(validation_alias=AliasChoices("pk", "id"))


class EnvelopeDTO(BaseDTO):
    """Common response envelope."""

    success: bool = True
    message: str | None = None
