"""Structured logging configuration using structlog.

Routes the stdlib root logger and structlog through the same level so
library output (uvicorn, sqlalchemy) and application events share one stream.
"""

import logging
import sys

import structlog

from metanoia.core.config import settings


def configure_logging() -> None:
    """Configure structlog and the stdlib root logger.

    Development gets the colored console renderer; set LOG_JSON=true to emit
    one JSON object per line for log shippers.
    """
    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=level,
        force=True,
    )

    renderer: structlog.types.Processor
    if settings.log_json:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="ISO"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
