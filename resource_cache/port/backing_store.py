"""Backing store port: Protocol for a watchable key-value store."""

from __future__ import annotations

from typing import AsyncIterator, Optional, Protocol, runtime_checkable

from ..domain.events import ListResult, WatchResponse


@runtime_checkable
class BackingStorePort(Protocol):
    """Port for the authoritative store behind every cache.

    Keys are full storage paths. Values are raw JSON documents.
    """

    async def list(self, prefix: str) -> ListResult:
        """Return every record whose key starts with ``prefix``."""
        ...

    def watch(
        self, prefix: str, *, start_revision: Optional[int] = None
    ) -> AsyncIterator[WatchResponse]:
        """Stream change-batches for ``prefix``, replaying from ``start_revision``."""
        ...

    async def create(self, key: str, value: bytes) -> None:
        """Write a new record; raises ConflictError when the key exists."""
        ...

    async def update(self, key: str, value: bytes) -> None:
        """Overwrite a record."""
        ...

    async def batch_delete(self, keys: list[str]) -> None:
        """Delete all keys at once, or none of them."""
        ...
