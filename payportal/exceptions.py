"""Application exception hierarchy.

Every error the API reports on purpose derives from ``BaseAppException`` and
carries its HTTP status code. A single exception handler in ``payportal.main``
renders them as ``{"success": false, "message": ...}``.
"""


class BaseAppException(Exception):
    """Base class for all application exceptions.

    Attributes:
        status_code: HTTP status code returned to the client.
        message: Human readable message returned to the client.
        headers: Extra response headers (e.g. ``Retry-After``).
    """

    status_code: int = 500
    default_message: str = "Something went wrong!"

    def __init__(self, message: str | None = None, *, headers: dict[str, str] | None = None) -> None:
        self.message = message or self.default_message
        self.headers = headers
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


# ─── 400 ──────────────────────────────────────────────────────────────────────


class ValidationException(BaseAppException):
    """Input failed validation outside of request schema parsing."""

    status_code = 400
    default_message = "Validation error"


class ConflictException(BaseAppException):
    """Request conflicts with current state (duplicates, already processed)."""

    status_code = 400
    default_message = "Resource already exists"


# ─── 401 ──────────────────────────────────────────────────────────────────────


class AuthenticationException(BaseAppException):
    """Credentials were rejected."""

    status_code = 401
    default_message = "Invalid credentials"


class MissingTokenException(AuthenticationException):
    """No bearer token on a protected route."""

    default_message = "No token provided"


class RevokedTokenException(AuthenticationException):
    """Token was logged out."""

    default_message = "Token has been invalidated"


# ─── 403 ──────────────────────────────────────────────────────────────────────


class AuthorizationException(BaseAppException):
    """Authenticated principal lacks the required privileges."""

    status_code = 403
    default_message = "Access denied"


class InvalidTokenException(AuthorizationException):
    """Token signature or structure is invalid."""

    default_message = "Invalid or expired token"


class ExpiredTokenException(InvalidTokenException):
    """Token is past its expiry."""


class TokenTypeException(AuthorizationException):
    """Token was issued for the other portal."""

    default_message = "Invalid token type"


# ─── 404 / 429 ────────────────────────────────────────────────────────────────


class NotFoundException(BaseAppException):
    """Entity missing, or not visible to the caller."""

    status_code = 404
    default_message = "Resource not found"

    def __init__(self, message: str | None = None, *, entity_name: str | None = None, entity_id: str | None = None) -> None:
        if message is None and entity_name:
            message = f"{entity_name} not found"
        super().__init__(message)
        self.entity_name = entity_name
        self.entity_id = entity_id


class RateLimitException(BaseAppException):
    """Too many requests from one client within the window."""

    status_code = 429
    default_message = "Too many requests from this IP, please try again later"

    def __init__(self, message: str | None = None, *, retry_after: int) -> None:
        super().__init__(message, headers={"Retry-After": str(max(retry_after, 1))})
        self.retry_after = retry_after
