"""
YachtBot — Structured Logging Utility
structlog for our own events; the stdlib loggers of uvicorn and SQLAlchemy
share the same stream and level.
"""
import structlog
import logging
import sys
from typing import Optional

from yachtbot.config.settings import AppSettings, get_settings

# per-request access lines and SQL statements drown out lookup events
ACCESS_LOGGER = "uvicorn.access"
SQL_LOGGER = "sqlalchemy.engine"


def setup_logging(settings: Optional[AppSettings] = None) -> None:
    """Configure structured logging for the entire application."""
    settings = settings or get_settings()
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer() if settings.debug else structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
    structlog.contextvars.bind_contextvars(app=settings.app_name, version=settings.version)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )
    if not settings.debug:
        logging.getLogger(ACCESS_LOGGER).setLevel(logging.WARNING)
    # DB_ECHO_SQL turns statement logging back on through the engine's echo flag
    if not settings.database.echo_sql:
        logging.getLogger(SQL_LOGGER).setLevel(logging.WARNING)


def get_logger(name: str = None) -> structlog.BoundLogger:
    """Get a named structured logger."""
    return structlog.get_logger(name or "yachtbot")
