"""Unit tests for ServiceContainer wiring."""

from __future__ import annotations

import pytest

from resource_cache.app.container import ServiceContainer
from resource_cache.domain.models import HubKey, StoreState
from resource_cache.gateway.memory_store import MemoryBackingStore
from resource_cache.infra.config import Settings


@pytest.mark.asyncio
async def test_start_and_shutdown(clock):
    settings = Settings(_env_file=None, reinit_interval_seconds=0.05)
    container = ServiceContainer(settings, clock=clock)

    await container.start()
    try:
        assert container.sweeper is not None and container.sweeper.running
        assert container.hub.get(HubKey.ROUTE).state is StoreState.WATCHING
        assert container.hub.get(HubKey.USER).base_path == "/apisix/users"
    finally:
        await container.shutdown()

    assert not container.sweeper.running
    assert all(store.closed for store in container.hub)


@pytest.mark.asyncio
async def test_uses_given_backing_store_and_prefix(clock):
    backing = MemoryBackingStore()
    await backing.create("/gw/routes/r1", b'{"id": "r1", "uri": "/a"}')
    settings = Settings(_env_file=None, key_prefix="/gw", reinit_sweeper_enabled=False)
    container = ServiceContainer(settings, backing=backing, clock=clock)

    await container.start()
    try:
        assert container.sweeper is None
        assert container.hub.get(HubKey.ROUTE).get("r1").uri == "/a"
    finally:
        await container.shutdown()


@pytest.mark.asyncio
async def test_default_backing_store_uses_history_setting(clock):
    settings = Settings(
        _env_file=None, watch_history_revisions=2, reinit_sweeper_enabled=False
    )
    container = ServiceContainer(settings, clock=clock)
    for index in range(4):
        await container.backing.create(f"/apisix/routes/r{index}", b"{}")

    assert container.backing.compacted_revision == 2
