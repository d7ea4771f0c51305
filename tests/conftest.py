"""Shared test fixtures for resource-cache tests."""

from __future__ import annotations

import asyncio
from typing import Any, AsyncIterator, Callable, Optional

import pytest
import pytest_asyncio

from resource_cache.domain.entities import Route
from resource_cache.domain.events import ListResult, WatchResponse
from resource_cache.domain.models import HubKey
from resource_cache.gateway.memory_store import MemoryBackingStore
from resource_cache.services.checks import key_by_id
from resource_cache.services.generic_store import GenericStore, GenericStoreOption
from resource_cache.services.reinit import ReinitRegistry
from resource_cache.services.validation import ModelValidator


class FakeClock:
    """Deterministic unix-seconds clock."""

    def __init__(self, now: int = 1_700_000_000) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int = 1) -> None:
        self.now += seconds


class ScriptedBackingStore(MemoryBackingStore):
    """Memory store whose watch streams are fed by the test."""

    def __init__(self) -> None:
        super().__init__()
        self.streams: list[asyncio.Queue[Optional[WatchResponse]]] = []
        self.list_error: Optional[BaseException] = None
        self.list_delay: float = 0.0
        self.list_calls = 0

    async def list(self, prefix: str) -> ListResult:
        self.list_calls += 1
        if self.list_delay:
            await asyncio.sleep(self.list_delay)
        if self.list_error is not None:
            raise self.list_error
        return await super().list(prefix)

    async def watch(
        self, prefix: str, *, start_revision: Optional[int] = None
    ) -> AsyncIterator[WatchResponse]:
        queue: asyncio.Queue[Optional[WatchResponse]] = asyncio.Queue()
        self.streams.append(queue)
        while True:
            response = await queue.get()
            if response is None:
                return
            yield response

    def push(self, response: Optional[WatchResponse], stream: int = -1) -> None:
        self.streams[stream].put_nowait(response)


async def eventually(predicate: Callable[[], bool], timeout: float = 1.0) -> None:
    """Yield to the event loop until ``predicate`` holds."""
    deadline = asyncio.get_running_loop().time() + timeout
    while not predicate():
        if asyncio.get_running_loop().time() > deadline:
            raise AssertionError("condition not reached before timeout")
        await asyncio.sleep(0.001)


def route_option(**overrides: Any) -> GenericStoreOption:
    values: dict[str, Any] = {
        "base_path": "/apisix/routes",
        "obj_type": Route,
        "key_func": key_by_id,
        "hub_key": HubKey.ROUTE,
        "validator": ModelValidator(),
    }
    values.update(overrides)
    return GenericStoreOption(**values)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def backing() -> MemoryBackingStore:
    return MemoryBackingStore()


@pytest.fixture
def scripted_backing() -> ScriptedBackingStore:
    return ScriptedBackingStore()


@pytest.fixture
def reinit_registry() -> ReinitRegistry:
    return ReinitRegistry()


@pytest_asyncio.fixture
async def route_store(backing, reinit_registry, clock) -> AsyncIterator[GenericStore]:
    store = GenericStore(
        route_option(), backing, reinit_registry=reinit_registry, clock=clock
    )
    await store.init()
    yield store
    await store.close()


def stored_route(route_id: str, **fields: Any) -> bytes:
    return Route(id=route_id, **fields).model_dump_json(exclude_none=True).encode()
