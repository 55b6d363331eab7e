"""Staff request and response schemas."""

import re
from datetime import datetime

from pydantic import AliasChoices
from pydantic import Field
from pydantic import field_validator

from payportal.abstract import BaseDTO
from payportal.abstract import EntityDTO
from payportal.abstract import EnvelopeDTO
from payportal.security.passwords import check_password_bytes
from payportal.utilities.enums import StaffRole


USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_]+$")
STRONG_PASSWORD_PATTERN = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)")


def _check_username(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("Username is required")
    if not 3 <= len(value) <= 50:
        raise ValueError("Username must be between 3 and 50 characters")
    if not USERNAME_PATTERN.fullmatch(value):
        raise ValueError("Username can only contain letters, numbers, and underscores")
    return value


def _check_password_length(value: str) -> str:
    if not value:
        raise ValueError("Password is required")
    if len(value) < 6:
        raise ValueError("Password must be at least 6 characters long")
    return check_password_bytes(value)


class StaffLoginRequest(BaseDTO):
    """Employee login form."""

    username: str
    password: str

    validate_username = field_validator("username")(_check_username)
    validate_password = field_validator("password")(_check_password_length)


class CreateEmployeeRequest(BaseDTO):
    """Admin form for a new employee account."""

    username: str
    password: str
    role: StaffRole = StaffRole.EMPLOYEE

    validate_username = field_validator("username")(_check_username)

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str) -> str:
        _check_password_length(value)
        if not STRONG_PASSWORD_PATTERN.match(value):
            raise ValueError(
                "Password must contain at least one uppercase letter, one lowercase letter, and one number"
            )
        return value


class EmployeeSummaryDTO(EntityDTO):
    """Employee identity as embedded in other resources."""

    username: str


class StaffSessionDTO(EmployeeSummaryDTO):
    role: StaffRole


class EmployeeDTO(StaffSessionDTO):
    created_at: datetime


class EmployeeDetailDTO(EmployeeDTO):
    """Employee as listed to admins, with the creating account."""

    created_by: EmployeeSummaryDTO | None = Field(
        default=None,
        validation_alias=AliasChoices("creator", "createdBy"),
    )


class StaffAuthResponse(EnvelopeDTO):
    token: str
    employee: StaffSessionDTO


class EmployeeListResponse(EnvelopeDTO):
    count: int
    employees: list[EmployeeDetailDTO]


class EmployeeResponse(EnvelopeDTO):
    employee: EmployeeDTO
