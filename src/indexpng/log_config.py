"""structlog setup for applications embedding the encoder.

The library itself only calls ``structlog.get_logger()``; nothing is
configured on import.  Call :func:`configure_logging` once at startup to
get console output in development and JSON lines everywhere else.
"""

from __future__ import annotations

import logging

import structlog

from indexpng.config import settings


def configure_logging(env: str | None = None, level: str | None = None) -> None:
    """Install the structlog processor chain.

    *env* and *level* default to ``settings.APP_ENV`` and
    ``settings.LOG_LEVEL``.
    """
    env = env or settings.APP_ENV
    level = level or settings.LOG_LEVEL
    min_level = getattr(logging, level.upper(), logging.INFO)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            (
                structlog.dev.ConsoleRenderer()
                if env == "development"
                else structlog.processors.JSONRenderer()
            ),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(min_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
