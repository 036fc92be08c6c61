"""
Logging configuration for MarketPulse.

Routes structlog through the standard library so that embedding
applications keep control of handlers, while callers get key/value
events everywhere via ``structlog.get_logger(__name__)``.
"""

import logging
import sys
from typing import Optional

import structlog

from marketpulse.core.config import settings


def configure_logging(
    level: Optional[str] = None,
    json_format: Optional[bool] = None,
) -> None:
    """
    Configure structured logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
            Defaults to LOG_LEVEL.
        json_format: Render JSON lines instead of the console renderer.
            Defaults to LOG_JSON.
    """
    level = (level or settings.LOG_LEVEL).upper()
    if json_format is None:
        json_format = settings.LOG_JSON

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level),
        force=True,
    )

    if json_format:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
