"""FastAPI dependencies resolving the shared ServiceContainer."""

from __future__ import annotations

import structlog
from fastapi import Depends

from ..infra.config import Settings, get_settings
from ..services.registry import StoreHub
from ..services.reinit import ReinitRegistry
from .container import ServiceContainer

logger = structlog.get_logger(__name__)

# Module-level singleton; replaced wholesale by set_container in tests
_container: ServiceContainer | None = None


def get_container() -> ServiceContainer:
    global _container
    if _container is None:
        _container = ServiceContainer(get_settings())
    return _container


def set_container(container: ServiceContainer | None) -> None:
    global _container
    _container = container


def get_settings_dep() -> Settings:
    return get_container().settings


def get_container_dep() -> ServiceContainer:
    return get_container()


def get_hub_dep(container: ServiceContainer = Depends(get_container_dep)) -> StoreHub:
    return container.hub


def get_reinit_registry_dep(
    container: ServiceContainer = Depends(get_container_dep),
) -> ReinitRegistry:
    return container.reinit_registry


def register_lifecycle(app) -> None:
    """Attach startup/shutdown hooks for the shared container."""

    @app.on_event("startup")
    async def startup_event() -> None:
        await get_container().start()

    @app.on_event("shutdown")
    async def shutdown_event() -> None:
        logger.info("shutting down resource-cache resources")
        if _container is None:
            return
        try:
            await _container.shutdown()
        except Exception as exc:
            logger.warning(
                "error shutting down container",
                error=str(exc),
                error_type=type(exc).__name__,
            )
