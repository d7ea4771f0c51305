"""Logging configuration utilities."""

from __future__ import annotations

import logging
from typing import Any

import structlog

SERVICE_NAME = "resource-cache"


def add_service_name(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Stamp every record with the emitting service."""

    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def bind_resource(resource: str) -> None:
    structlog.contextvars.bind_contextvars(resource=resource)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


def configure_logging(level: str) -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO))

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            add_service_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
