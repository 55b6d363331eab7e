"""Application lifespan events module.

This module provides lifespan management for startup and shutdown events.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from .config import get_settings
from .database import close_database
from .database import get_session_context
from .database import init_database
from .logs import configure_logging
from .redis import close_redis
from .redis import init_redis


logger = logging.getLogger(__name__)


async def _bootstrap_super_admin() -> None:
    """Create the super admin from settings if none exists yet."""
    from payportal.domains.staff.repositories import EmployeeRepository
    from payportal.domains.staff.services import EmployeeService

    settings = get_settings()
    if not settings.superadmin_username or settings.superadmin_password is None:
        return

    async with get_session_context() as session:
        service = EmployeeService(EmployeeRepository(session))
        await service.ensure_super_admin(
            settings.superadmin_username,
            settings.superadmin_password.get_secret_value(),
        )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifespan events.

    Handles startup and shutdown tasks:
    - Startup: Configure logging, initialize database and Redis, seed the super admin
    - Shutdown: Close database and Redis connections

    Args:
        app: FastAPI application instance.

    Yields:
        None after startup tasks complete.
    """
    configure_logging()
    logger.info("Starting up application...")

    # Initialize database
    try:
        await init_database()
        logger.info("Database connection initialized")
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
        raise

    # Initialize Redis
    try:
        await init_redis()
        logger.info("Redis connection initialized")
    except Exception as e:
        logger.error(f"Failed to initialize Redis: {e}")
        raise

    await _bootstrap_super_admin()

    logger.info("Application startup complete")

    yield

    # Shutdown
    logger.info("Shutting down application...")

    try:
        await close_database()
        logger.info("Database connection closed")
    except Exception as e:
        logger.error(f"Error closing database: {e}")

    try:
        await close_redis()
        logger.info("Redis connection closed")
    except Exception as e:
        logger.error(f"Error closing Redis: {e}")

    logger.info("Application shutdown complete")
