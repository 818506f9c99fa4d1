"""
core/logging.py
---------------
Structured logging using structlog.
DEBUG=true  → human-readable console output
DEBUG=false → JSON lines for the log shipper

Context binding:
    with operation_context("approve_pesantren", tenant_id=...):
        logger.info("...")    # every event carries operation + tenant_id
The facade binds the operation name around each call, so service-level
events can be traced back to the operation that produced them.
"""

import logging
import sys
from contextlib import contextmanager
from typing import Iterator, Optional

import structlog

from pesantren_hub.core.config import Settings, settings as default_settings

# Third-party loggers that are only useful while debugging.
_NOISY_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "passlib", "aiosqlite")


def configure_logging(settings: Optional[Settings] = None) -> None:
    settings = settings or default_settings
    log_level = logging.getLevelName(settings.LOG_LEVEL.upper())
    if settings.DEBUG:
        log_level = logging.DEBUG

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level)
    if not settings.DEBUG:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    renderer = (
        structlog.dev.ConsoleRenderer()
        if settings.DEBUG
        else structlog.processors.JSONRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


@contextmanager
def operation_context(operation: str, **fields) -> Iterator[None]:
    """Bind operation (and extra fields) to every log event in the block."""
    with structlog.contextvars.bound_contextvars(operation=operation, **fields):
        yield


def get_logger(name: str = __name__):
    return structlog.get_logger(name)
