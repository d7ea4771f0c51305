"""Registry mapping resource identifiers to their stores."""

from __future__ import annotations

from typing import Iterator, Optional

import structlog

from ..domain.errors import ConfigurationError
from ..domain.models import HubKey
from ..port.backing_store import BackingStorePort
from .generic_store import (
    DEFAULT_LOAD_TIMEOUT_SECONDS,
    Clock,
    GenericStore,
    GenericStoreOption,
    unix_now,
)
from .reinit import ReinitRegistry

logger = structlog.get_logger(__name__)


class StoreHub:
    """Owns one GenericStore per hub key, all sharing a backing store."""

    def __init__(
        self,
        backing: BackingStorePort,
        reinit_registry: Optional[ReinitRegistry] = None,
        *,
        load_timeout: float = DEFAULT_LOAD_TIMEOUT_SECONDS,
        clock: Clock = unix_now,
    ) -> None:
        self._backing = backing
        self._reinit_registry = reinit_registry
        self._load_timeout = load_timeout
        self._clock = clock
        self._stores: dict[HubKey, GenericStore] = {}

    def __iter__(self) -> Iterator[GenericStore]:
        return iter(list(self._stores.values()))

    def __len__(self) -> int:
        return len(self._stores)

    def register(self, option: GenericStoreOption) -> GenericStore:
        if option.hub_key in self._stores:
            raise ConfigurationError(f"store already registered: {option.hub_key.value}")
        store = GenericStore(
            option,
            self._backing,
            reinit_registry=self._reinit_registry,
            load_timeout=self._load_timeout,
            clock=self._clock,
        )
        self._stores[option.hub_key] = store
        return store

    def get(self, hub_key: HubKey | str) -> GenericStore:
        try:
            return self._stores[HubKey(hub_key)]
        except (KeyError, ValueError) as exc:
            raise ConfigurationError(f"no store registered for {hub_key!r}") from exc

    async def init_all(self) -> None:
        for store in self._stores.values():
            await store.init()
        logger.info("all stores initialized", stores=len(self._stores))

    async def close_all(self) -> None:
        for store in self._stores.values():
            await store.close()
