"""Shared enumeration module.

This module contains enumeration classes used across the application.
"""

from enum import StrEnum


class Environment(StrEnum):
    """Application environment enumeration.

    Defines the allowed runtime environments for the application.
    Used to control environment-specific behavior like debug mode.

    If an invalid or missing value is provided, defaults to DEVELOPMENT.
    """

    DEVELOPMENT = "development"
    TESTING = "testing"
    STAGING = "staging"
    PRODUCTION = "production"

    @classmethod
    def _missing_(cls, value: object) -> "Environment":
        """Return default environment when value is invalid or missing."""
        return cls.DEVELOPMENT


class StaffRole(StrEnum):
    """Staff roles, ordered from least to most privileged.

    Ordering is structural: ``StaffRole.ADMIN.rank > StaffRole.EMPLOYEE.rank``,
    so an admin satisfies any check that an employee satisfies.

    Attributes:
        EMPLOYEE: Processes pending payments.
        ADMIN: Everything an employee can do, plus account management.
    """

    EMPLOYEE = "employee"
    ADMIN = "admin"

    @property
    def rank(self) -> int:
        """Position of the role in the privilege order."""
        return list(StaffRole).index(self)

    def satisfies(self, minimum: "StaffRole") -> bool:
        """Check whether this role is at least as privileged as ``minimum``.

        Example:
            StaffRole.ADMIN.satisfies(StaffRole.EMPLOYEE)  # True
            StaffRole.EMPLOYEE.satisfies(StaffRole.ADMIN)  # False
        """
        return self.rank >= minimum.rank


class TokenAudience(StrEnum):
    """Portal a session token was issued for."""

    CUSTOMER = "customer"
    STAFF = "staff"


class PaymentStatus(StrEnum):
    """Payment lifecycle states.

    Staff review moves ``PENDING`` to ``APPROVED`` or ``DENIED``. The owning
    customer may set ``PENDING``, ``COMPLETED``, ``FAILED`` or ``REFUNDED``.
    """

    PENDING = "pending"
    APPROVED = "approved"
    DENIED = "denied"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"

    @classmethod
    def reviewed(cls) -> tuple["PaymentStatus", ...]:
        """Statuses set by the staff approval workflow."""
        return cls.APPROVED, cls.DENIED


class CustomerPaymentStatus(StrEnum):
    """Statuses a customer may assign to their own payment."""

    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"


class PaymentMethod(StrEnum):
    """Supported payment methods."""

    CREDIT_CARD = "credit_card"
    DEBIT_CARD = "debit_card"
    BANK_TRANSFER = "bank_transfer"
    PAYPAL = "paypal"
    MOBILE_WALLET = "mobile_wallet"


class ProcessAction(StrEnum):
    """Staff decision on a pending payment."""

    APPROVE = "approve"
    DENY = "deny"

    @property
    def resulting_status(self) -> PaymentStatus:
        """Status a payment moves to when this action is applied."""
        return PaymentStatus.APPROVED if self is ProcessAction.APPROVE else PaymentStatus.DENIED

    @property
    def past_tense(self) -> str:
        return "approved" if self is ProcessAction.APPROVE else "denied"
