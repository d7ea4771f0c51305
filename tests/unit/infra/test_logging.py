"""Unit tests for logging helpers."""

import structlog

from resource_cache.infra.logging import (
    SERVICE_NAME,
    add_service_name,
    bind_resource,
    clear_context,
)


def test_add_service_name_does_not_override():
    assert add_service_name(None, "info", {})["service"] == SERVICE_NAME
    assert add_service_name(None, "info", {"service": "x"})["service"] == "x"


def test_bind_resource_populates_context():
    clear_context()
    bind_resource("routes")
    try:
        assert structlog.contextvars.get_contextvars() == {"resource": "routes"}
    finally:
        clear_context()
    assert structlog.contextvars.get_contextvars() == {}
