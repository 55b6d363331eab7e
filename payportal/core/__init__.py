"""Core infrastructure module"""

from .config import get_settings
from .middleware import CSRFMiddleware
from .middleware import RequestLoggingMiddleware
from .middleware import SecurityHeadersMiddleware


settings = get_settings()

__all__ = [
    "settings",
    "get_settings",
    "CSRFMiddleware",
    "RequestLoggingMiddleware",
    "SecurityHeadersMiddleware",
]
