"""Logging configuration."""

import logging.config

from .config import get_settings


def configure_logging() -> None:
    """Install the process-wide logging configuration.

    Application loggers (``payportal.*``) and uvicorn share one stream
    handler; the level comes from ``LOG_LEVEL``.
    """
    level = get_settings().log_level.upper()

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": "%(asctime)s %(levelname)-8s %(name)s: %(message)s",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                },
            },
            "loggers": {
                "payportal": {"handlers": ["console"], "level": level, "propagate": False},
                "uvicorn": {"handlers": ["console"], "level": level, "propagate": False},
            },
        }
    )
