"""Structured logging for the land journey engine.

structlog renders JSON in production and a colored console in debug mode.
Records from uvicorn, SQLAlchemy and httpx go through the same processor
chain via ProcessorFormatter, and every entry is stamped with the service
name and the request's correlation id.
"""

import logging.config

import structlog
from asgi_correlation_id.context import correlation_id

SERVICE_NAME = "land-journey-engine"

# Chatty third-party loggers and the level they are capped at
_QUIET_LOGGERS = {
    "uvicorn.access": "WARNING",
    "httpx": "WARNING",
    "httpcore": "WARNING",
    "sqlalchemy.engine": "WARNING",
}


def add_correlation_id(logger, method, event_dict):
    """Stamp the asgi-correlation-id of the current request, if any."""
    cid = correlation_id.get(None)
    if cid:
        event_dict["correlation_id"] = cid
    return event_dict


def add_service_name(logger, method, event_dict):
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def _enrichers() -> list:
    """Processors run for both structlog and stdlib records."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        add_correlation_id,
        add_service_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]


def _stdlib_config(renderer, enrichers: list, log_level: str) -> dict:
    formatter = {
        "()": structlog.stdlib.ProcessorFormatter,
        "foreign_pre_chain": enrichers,
        "processors": [structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
    }
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"land_journey": formatter},
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "stream": "ext://sys.stdout",
                "formatter": "land_journey",
            },
        },
        "root": {"level": log_level, "handlers": ["console"]},
        "loggers": {name: {"level": cap} for name, cap in _QUIET_LOGGERS.items()},
    }


def configure_structlog(log_level: str = "INFO", json_logs: bool = True) -> None:
    """Configure structlog and route stdlib logging through it.

    Call before the application modules are imported: structlog freezes a
    logger's processor chain the first time it is used.

    Args:
        log_level: Root log level ("DEBUG", "INFO", "WARNING", "ERROR")
        json_logs: JSON lines when True, ConsoleRenderer when False
    """
    enrichers = _enrichers()
    if json_logs:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    logging.config.dictConfig(_stdlib_config(renderer, enrichers, log_level.upper()))

    structlog.configure(
        processors=[*enrichers, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
