"""Main FastAPI application entry point."""

import logging

from fastapi import APIRouter
from fastapi import FastAPI
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from payportal.core import CSRFMiddleware
from payportal.core import RequestLoggingMiddleware
from payportal.core import SecurityHeadersMiddleware
from payportal.core import settings
from payportal.core.events import lifespan
from payportal.core.middleware import CSRF_COOKIE
from payportal.core.middleware import new_csrf_token
from payportal.exceptions import BaseAppException
from payportal.routers.admin import router as admin_router
from payportal.routers.auth import router as auth_router
from payportal.routers.payments import router as payments_router
from payportal.routers.staff import router as staff_router
from payportal.utilities.enums import Environment


logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"
API_PREFIX = "/api/v1"

# Create main FastAPI application with lifespan
app = FastAPI(
    title="PayPortal",
    description="International payments portal API for customers and staff",
    version=API_VERSION,
    lifespan=lifespan,
    debug=settings.debug,
    docs_url="/docs" if settings.environment != Environment.PRODUCTION else None,
    redoc_url=None,
    openapi_url="/openapi.json" if settings.environment != Environment.PRODUCTION else None,
)

# ─── Middleware ────────────────────────────────────────────────────────
# Note: Middleware execution order is bottom-to-top (last added runs first)

# CSRF double-submit check (innermost, runs after size and HTTPS checks)
app.add_middleware(CSRFMiddleware)

# Body size cap, HTTPS enforcement and response hardening headers
app.add_middleware(SecurityHeadersMiddleware)

# Request id and request/response logging
app.add_middleware(RequestLoggingMiddleware)

# CORS middleware (must be outermost to handle preflight requests)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-CSRF-Token", "X-XSRF-Token"],
)


# ─── Exception Handlers ────────────────────────────────────────────────
def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "-")


@app.exception_handler(BaseAppException)
async def app_exception_handler(_: Request, exc: BaseAppException) -> JSONResponse:
    """Handle all application exceptions with their status code and message."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": exc.message},
        headers=exc.headers,
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    """Report request validation failures as 400 with one entry per field."""
    errors = []
    for error in exc.errors():
        location = [str(part) for part in error["loc"] if part not in ("body", "query", "path", "header")]
        errors.append({
            "field": ".".join(location) or "body",
            "message": error["msg"].removeprefix("Value error, "),
        })
    return JSONResponse(
        status_code=400,
        content={"success": False, "message": "Validation error", "errors": errors},
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 404:
        return JSONResponse(status_code=404, content={"error": "Route not found"})
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": exc.detail},
        headers=exc.headers,
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log unexpected errors and answer without internal details."""
    logger.exception("Unhandled error on %s %s (request id %s)", request.method, request.url.path, _request_id(request))
    return JSONResponse(status_code=500, content={"error": "Something went wrong!"})


# ─── Main Routers ──────────────────────────────────────────────────────
@app.get("/health", include_in_schema=False)
async def health_check() -> dict[str, str]:
    """Health check endpoint for container orchestration."""
    return {
        "status": "healthy",
        "environment": settings.environment,
    }


api_router = APIRouter(prefix=API_PREFIX)


@api_router.get("", include_in_schema=False)
async def api_root() -> dict[str, str]:
    return {"message": "PayPortal API", "version": API_VERSION}


@api_router.get("/csrf-token", tags=["Security"], summary="Issue a CSRF token")
async def csrf_token() -> JSONResponse:
    """Issue a token and set it as the ``XSRF-TOKEN`` cookie.

    Clients echo the value in ``X-CSRF-Token`` on every mutating request.
    """
    token = new_csrf_token()
    response = JSONResponse(content={"csrfToken": token})
    response.set_cookie(
        CSRF_COOKIE,
        token,
        httponly=False,
        secure=settings.environment == Environment.PRODUCTION,
        samesite="strict",
    )
    return response


api_router.include_router(auth_router)
api_router.include_router(payments_router)
api_router.include_router(staff_router)
api_router.include_router(admin_router)

app.include_router(api_router)
