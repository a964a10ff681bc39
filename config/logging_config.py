"""Structured JSON logging for the analytics engine and API, built on structlog."""

import logging
import sys

import structlog

_configured_level: int | None = None


def _setup(level: int):
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=False,
    )


def configure_logging(component: str, level: str | None = None) -> structlog.BoundLogger:
    """Return a logger bound to ``component``.

    structlog is reconfigured only when the requested level changes. Without
    a level the current configuration is kept (INFO if nothing is set yet).
    """
    global _configured_level
    if level is None:
        numeric = _configured_level if _configured_level is not None else logging.INFO
    else:
        numeric = getattr(logging, level.upper(), logging.INFO)
    if _configured_level != numeric:
        _setup(numeric)
        _configured_level = numeric
    return structlog.get_logger(component=component)
