"""Customer request and response schemas."""

import re
from typing import Self

from pydantic import Field
from pydantic import field_validator
from pydantic import model_validator

from payportal.abstract import BaseDTO
from payportal.abstract import EntityDTO
from payportal.abstract import EnvelopeDTO
from payportal.security.passwords import check_password_bytes


FULL_NAME_PATTERN = re.compile(r"^[A-Za-z\s]+$")
ACCOUNT_NUMBER_PATTERN = re.compile(r"^\d{10}$")


def _check_account_number(value: str) -> str:
    value = value.strip()
    if not ACCOUNT_NUMBER_PATTERN.fullmatch(value):
        raise ValueError("Account number must be exactly 10 digits")
    return value


class RegisterRequest(BaseDTO):
    """Customer registration form."""

    full_name: str
    account_number: str
    password: str
    confirm_password: str | None = None
    email: str | None = Field(default=None, max_length=255)

    @field_validator("full_name")
    @classmethod
    def validate_full_name(cls, value: str) -> str:
        value = value.strip()
        if not 3 <= len(value) <= 100:
            raise ValueError("Full name must be between 3 and 100 characters")
        if not FULL_NAME_PATTERN.fullmatch(value):
            raise ValueError("Full name can only contain letters and spaces")
        return value

    @field_validator("account_number")
    @classmethod
    def validate_account_number(cls, value: str) -> str:
        return _check_account_number(value)

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str) -> str:
        if len(value) < 6:
            raise ValueError("Password must be at least 6 characters long")
        return check_password_bytes(value)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip().lower() or None

    @model_validator(mode="after")
    def passwords_match(self) -> Self:
        if self.confirm_password is not None and self.confirm_password != self.password:
            raise ValueError("Passwords do not match")
        return self


class LoginRequest(BaseDTO):
    """Customer login form."""

    full_name: str
    account_number: str
    password: str

    @field_validator("full_name")
    @classmethod
    def validate_full_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Full name is required")
        return value

    @field_validator("account_number")
    @classmethod
    def validate_account_number(cls, value: str) -> str:
        return _check_account_number(value)

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str) -> str:
        if not value:
            raise ValueError("Password is required")
        return check_password_bytes(value)


class CustomerDTO(EntityDTO):
    """Public view of a customer."""

    full_name: str
    account_number: str


class CustomerAuthResponse(EnvelopeDTO):
    """Response for register and login."""

    token: str
    user: CustomerDTO
