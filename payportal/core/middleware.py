"""Request middleware module.

Provides request correlation/logging, response hardening and the
double-submit CSRF check.
"""

import json
import logging
import secrets
import time
from typing import Any
from uuid import uuid4

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.responses import Response

from .config import get_settings


logger = logging.getLogger(__name__)

# Keys masked when request bodies are logged
SENSITIVE_KEYS = frozenset({"password", "confirmpassword", "token", "authorization", "auth", "secret"})
MAX_LOGGED_BODY = 2048

SAFE_METHODS = frozenset({"GET", "HEAD", "OPTIONS"})
CSRF_COOKIE = "XSRF-TOKEN"
CSRF_HEADERS = ("X-CSRF-Token", "X-XSRF-Token")
CSRF_EXEMPT_PATHS = frozenset({"/api/v1/csrf-token"})


def sanitize(value: Any) -> Any:
    """Recursively mask sensitive fields in a decoded JSON value."""
    if isinstance(value, list):
        return [sanitize(item) for item in value]
    if isinstance(value, dict):
        return {key: "***" if key.lower() in SENSITIVE_KEYS else sanitize(item) for key, item in value.items()}
    return value


def new_csrf_token() -> str:
    return secrets.token_hex(32)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Attach a request id and log every request/response pair.

    The id is exposed as ``request.state.request_id`` and echoed in the
    ``X-Request-ID`` response header. With ``LOG_REQUEST_BODY`` enabled, JSON
    bodies are logged with sensitive keys masked and truncated to 2 KiB.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = str(uuid4())
        request.state.request_id = request_id
        client = request.client.host if request.client else "-"

        body_for_log = ""
        if get_settings().log_request_body and request.headers.get("content-type", "").startswith("application/json"):
            body_for_log = await self._loggable_body(request)

        logger.info(
            "[REQ] id=%s method=%s url=%s ip=%s%s",
            request_id,
            request.method,
            request.url.path,
            client,
            f" body={body_for_log}" if body_for_log else "",
        )

        started = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - started) * 1000

        response.headers["X-Request-ID"] = request_id
        logger.info(
            "[RES] id=%s status=%s method=%s url=%s duration=%.1fms",
            request_id,
            response.status_code,
            request.method,
            request.url.path,
            duration_ms,
        )
        return response

    @staticmethod
    async def _loggable_body(request: Request) -> str:
        raw = await request.body()
        if not raw:
            return ""
        try:
            rendered = json.dumps(sanitize(json.loads(raw)))
        except ValueError:
            return "<unparseable>"
        if len(rendered) > MAX_LOGGED_BODY:
            return rendered[:MAX_LOGGED_BODY] + "...(truncated)"
        return rendered


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Reject oversized or insecure requests and harden every response.

    - Bodies above ``MAX_BODY_BYTES`` get 413. The declared ``Content-Length``
      is checked first; chunked bodies without one are read and measured.
    - With ``FORCE_HTTPS`` on, plain HTTP gets 426 (GET/HEAD) or 400.
    - Responses carry anti-sniffing, framing and CSP headers.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        settings = get_settings()

        if await self._body_too_large(request, settings.max_body_bytes):
            return JSONResponse(
                status_code=413,
                content={"success": False, "message": "Request entity too large"},
            )

        if settings.force_https and not self._is_secure(request):
            if request.method in ("GET", "HEAD"):
                return JSONResponse(
                    status_code=426,
                    content={"error": "HTTPS required", "message": "Please repeat the request over HTTPS."},
                )
            return JSONResponse(status_code=400, content={"error": "Please use HTTPS"})

        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "no-referrer"
        response.headers["Content-Security-Policy"] = "default-src 'self'; frame-ancestors 'none'"
        return response

    @staticmethod
    async def _body_too_large(request: Request, limit: int) -> bool:
        content_length = request.headers.get("content-length")
        if content_length and content_length.isdigit():
            return int(content_length) > limit
        if request.method in SAFE_METHODS:
            return False
        # No declared length (chunked transfer): the body is cached for the endpoint
        return len(await request.body()) > limit

    @staticmethod
    def _is_secure(request: Request) -> bool:
        return request.url.scheme == "https" or request.headers.get("X-Forwarded-Proto") == "https"


class CSRFMiddleware(BaseHTTPMiddleware):
    """Double-submit cookie CSRF protection.

    Mutating requests must send one of ``X-CSRF-Token`` / ``X-XSRF-Token``
    with the same value as the ``XSRF-TOKEN`` cookie. The cookie is issued
    by ``GET /api/v1/csrf-token``. Disabled when ``CSRF_PROTECTION`` is off.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        if (
            not get_settings().csrf_protection
            or request.method in SAFE_METHODS
            or request.url.path in CSRF_EXEMPT_PATHS
        ):
            return await call_next(request)

        cookie_token = request.cookies.get(CSRF_COOKIE)
        header_token = next((request.headers[name] for name in CSRF_HEADERS if name in request.headers), None)

        if not cookie_token or not header_token or not secrets.compare_digest(cookie_token, header_token):
            logger.warning("CSRF validation failed for %s %s", request.method, request.url.path)
            return JSONResponse(
                status_code=403,
                content={"error": "Invalid CSRF token", "message": "CSRF token validation failed"},
            )

        return await call_next(request)
