"""Composition Root: wires the backing store, stores and recovery sweeper.

Usage:
    container = ServiceContainer(settings)
    await container.start()
    store = container.hub.get(HubKey.ROUTE)
"""

from __future__ import annotations

from typing import Optional

import structlog

from ..gateway.memory_store import MemoryBackingStore
from ..infra.config import Settings
from ..port.backing_store import BackingStorePort
from ..services.generic_store import Clock, unix_now
from ..services.registry import StoreHub
from ..services.reinit import ReinitRegistry, ReinitSweeper
from ..services.resources import default_store_options

logger = structlog.get_logger(__name__)


class ServiceContainer:
    """Owns every shared object for the lifetime of the application."""

    def __init__(
        self,
        settings: Settings,
        backing: Optional[BackingStorePort] = None,
        clock: Clock = unix_now,
    ) -> None:
        self.settings = settings
        self.backing: BackingStorePort = backing or MemoryBackingStore(
            history_revisions=settings.watch_history_revisions
        )
        self.reinit_registry = ReinitRegistry()
        self.hub = StoreHub(
            self.backing,
            self.reinit_registry,
            load_timeout=settings.load_timeout_seconds,
            clock=clock,
        )
        for option in default_store_options(settings.key_prefix):
            self.hub.register(option)
        self.sweeper: ReinitSweeper | None = None
        if settings.reinit_sweeper_enabled:
            self.sweeper = ReinitSweeper(
                self.reinit_registry, interval_seconds=settings.reinit_interval_seconds
            )

    async def start(self) -> None:
        await self.hub.init_all()
        if self.sweeper is not None:
            await self.sweeper.start()
        logger.info("resource-cache started", key_prefix=self.settings.key_prefix)

    async def shutdown(self) -> None:
        if self.sweeper is not None:
            await self.sweeper.stop()
        await self.hub.close_all()
        logger.info("resource-cache stopped")
