"""Application configuration module.

This module provides centralized configuration management using pydantic-settings.
Settings are loaded from environment variables and .env file.
"""

from datetime import timedelta
from functools import lru_cache

from pydantic import BaseModel
from pydantic import Field
from pydantic import RedisDsn
from pydantic import SecretStr
from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict

from payportal.utilities.enums import Environment


class JWTSettings(BaseModel):
    """Token signing configuration.

    Customer and staff tokens are signed with separate keys so a token issued
    for one portal never verifies on the other.

    Attributes:
        customer_secret_key: HMAC key for customer session tokens.
        staff_secret_key: HMAC key for employee/admin session tokens.
        algorithm: JWS algorithm used for both audiences.
        customer_expiration: Customer token lifetime.
        staff_expiration: Staff token lifetime.
    """

    customer_secret_key: SecretStr
    staff_secret_key: SecretStr
    algorithm: str = "HS256"
    customer_expiration: timedelta = timedelta(hours=1)
    staff_expiration: timedelta = timedelta(hours=8)


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Attributes:
        environment: Current runtime environment. Defaults to development.
        database_dsn: SQLAlchemy async connection URL.
        redis_dsn: Redis connection DSN for revocation and rate-limit state.
        jwt: Token signing settings (``JWT__*`` variables).
        bcrypt_rounds: Work factor for password hashing.
        csrf_protection: Enforce the double-submit CSRF check.
        force_https: Reject plain HTTP requests.
        max_body_bytes: Largest accepted request body.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    # Project Global Configuration
    environment: Environment = Environment.DEVELOPMENT

    allowed_cors_origins: str = Field(default="http://localhost:3000", alias="allowed_origins")

    # Database Configuration
    database_dsn: str = Field(alias="database_url")

    # Redis Configuration
    redis_dsn: RedisDsn = Field(alias="redis_url")

    # Security
    jwt: JWTSettings
    bcrypt_rounds: int = Field(default=12, ge=4, le=31)
    csrf_protection: bool = True
    force_https: bool = False
    max_body_bytes: int = 100 * 1024

    # Logging
    log_level: str = "INFO"
    log_request_body: bool = False

    # Super admin bootstrap (optional)
    superadmin_username: str | None = None
    superadmin_password: SecretStr | None = None

    @property
    def debug(self) -> bool:
        """Check if application is running in debug mode.

        Returns:
            True only in development, where errors render with tracebacks.
        """
        return self.environment == Environment.DEVELOPMENT

    @property
    def allowed_origins_list(self) -> list[str]:
        """Get CORS allowed origins as a list.

        Returns:
            List of allowed origin URLs.
        """
        return [origin.strip() for origin in self.allowed_cors_origins.split(",") if origin.strip()]

    @property
    def database_url(self) -> str:
        """Get database URL as string for SQLAlchemy."""
        return self.database_dsn

    @property
    def redis_url(self) -> str:
        """Get Redis URL as string."""
        return self.redis_dsn.unicode_string()


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings instance.

    Uses lru_cache to ensure settings are loaded only once.

    Returns:
        Singleton Settings instance.
    """
    return Settings()
