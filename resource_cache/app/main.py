"""Application factory for resource-cache."""

from __future__ import annotations

from fastapi import FastAPI, Request

from .. import __version__
from ..infra.config import get_settings
from ..infra.logging import clear_context, configure_logging
from ..infra.telemetry import setup_metrics
from . import deps
from .errors import register_exception_handlers
from .routers import admin, health, resources, tool, users


def create_app() -> FastAPI:
    """Build the HTTP app; stores are initialized by the startup hook."""

    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="resource-cache",
        version=__version__,
    )

    setup_metrics(app)
    register_exception_handlers(app)

    @app.middleware("http")
    async def reset_log_context(request: Request, call_next):
        clear_context()
        return await call_next(request)

    app.include_router(health.router)
    app.include_router(admin.router, prefix="/admin")
    app.include_router(tool.router, prefix="/v1")
    app.include_router(users.router, prefix="/v1")
    app.include_router(resources.router, prefix="/v1")

    deps.register_lifecycle(app)

    return app
