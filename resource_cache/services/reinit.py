"""Recovery of stores whose watch stream ended unexpectedly."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from .generic_store import GenericStore

logger = structlog.get_logger(__name__)


class ReinitRegistry:
    """Queue of stores waiting to be reinitialized.

    Watch tasks report failures with ``report_failure``; a single driver
    (the sweeper or an admin request) drains the queue with ``reinit``.
    """

    def __init__(self) -> None:
        self._queue: asyncio.Queue[GenericStore] = asyncio.Queue()

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def report_failure(self, store: "GenericStore") -> None:
        self._queue.put_nowait(store)
        logger.info("store queued for reinit", resource=store.type().value, pending=self.pending)

    def _drain(self) -> list["GenericStore"]:
        stores: list[GenericStore] = []
        seen: set[int] = set()
        while not self._queue.empty():
            store = self._queue.get_nowait()
            if id(store) in seen:
                continue
            seen.add(id(store))
            stores.append(store)
        return stores

    async def reinit(self) -> int:
        """Reinitialize every queued store, in report order.

        A store that fails goes to the back of the queue and the pass moves
        on, so one broken store cannot starve the others. The first error is
        raised once every store has been tried.
        """
        stores = self._drain()
        done = 0
        first_error: Exception | None = None
        for store in stores:
            if store.closed:
                continue
            try:
                await store.init()
            except Exception as exc:
                self._queue.put_nowait(store)
                logger.error(
                    "store reinit failed",
                    resource=store.type().value,
                    error=str(exc),
                    exc_info=True,
                )
                if first_error is None:
                    first_error = exc
                continue
            done += 1
            logger.info("store reinitialized", resource=store.type().value)
        if first_error is not None:
            raise first_error
        return done


class ReinitSweeper:
    """Background task that drains the reinit registry periodically."""

    def __init__(self, registry: ReinitRegistry, interval_seconds: float = 10.0) -> None:
        self.registry = registry
        self.interval_seconds = interval_seconds
        self._task: asyncio.Task | None = None
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    async def start(self) -> None:
        if self._running:
            logger.warning("reinit sweeper already running")
            return

        self._running = True
        self._task = asyncio.create_task(self._run_loop())
        logger.info("reinit sweeper started", interval_seconds=self.interval_seconds)

    async def stop(self) -> None:
        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        logger.info("reinit sweeper stopped")

    async def _run_loop(self) -> None:
        while self._running:
            try:
                await asyncio.sleep(self.interval_seconds)
            except asyncio.CancelledError:
                break

            if not self._running:
                break

            try:
                await self.sweep()
            except asyncio.CancelledError:
                break
            except Exception as exc:
                logger.error(
                    "reinit sweep failed",
                    error=str(exc),
                    error_type=type(exc).__name__,
                )

    async def sweep(self) -> int:
        if self.registry.pending == 0:
            return 0
        return await self.registry.reinit()
