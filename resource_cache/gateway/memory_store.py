"""In-process backing store with revisions and resumable watches.

Every write bumps a single global revision, the way etcd does. Watchers may
start from a past revision and receive the retained history first, so a
cache that listed at revision N and watches from N + 1 sees every change
exactly once. Only the most recent ``history_revisions`` revisions are
retained; older ones are compacted away as new writes arrive.
"""

from __future__ import annotations

import asyncio
from collections import deque
from typing import AsyncIterator, Optional

import structlog

from ..domain.errors import ConflictError, NotFoundError
from ..domain.events import (
    EventType,
    KeyValue,
    ListResult,
    WatchEvent,
    WatchResponse,
)

logger = structlog.get_logger(__name__)

DEFAULT_HISTORY_REVISIONS = 10_000


class _Watcher:
    __slots__ = ("prefix", "queue")

    def __init__(self, prefix: str) -> None:
        self.prefix = prefix
        self.queue: asyncio.Queue[WatchResponse] = asyncio.Queue()

    def offer(self, events: list[WatchEvent]) -> None:
        matched = [event for event in events if event.key.startswith(self.prefix)]
        if matched:
            self.queue.put_nowait(WatchResponse(events=matched))


class MemoryBackingStore:
    """Revisioned key-value store living in the current event loop."""

    def __init__(self, history_revisions: int = DEFAULT_HISTORY_REVISIONS) -> None:
        if history_revisions < 1:
            raise ValueError("history_revisions must be at least 1")
        self._history_revisions = history_revisions
        self._data: dict[str, KeyValue] = {}
        self._revision = 0
        self._compacted = 0
        self._history: deque[WatchEvent] = deque()
        self._watchers: set[_Watcher] = set()

    @property
    def revision(self) -> int:
        return self._revision

    @property
    def compacted_revision(self) -> int:
        return self._compacted

    @property
    def watcher_count(self) -> int:
        return len(self._watchers)

    async def list(self, prefix: str) -> ListResult:
        items = [kv for key, kv in sorted(self._data.items()) if key.startswith(prefix)]
        return ListResult(items=items, revision=self._revision)

    async def watch(
        self, prefix: str, *, start_revision: Optional[int] = None
    ) -> AsyncIterator[WatchResponse]:
        if start_revision is not None and start_revision <= self._compacted:
            yield WatchResponse(
                canceled=True,
                error=(
                    f"required revision {start_revision} has been compacted "
                    f"(compacted at {self._compacted})"
                ),
            )
            return

        watcher = _Watcher(prefix)
        if start_revision is not None:
            watcher.offer([event for event in self._history if event.revision >= start_revision])
        self._watchers.add(watcher)
        logger.debug("watch opened", prefix=prefix, start_revision=start_revision)
        try:
            while True:
                response = await watcher.queue.get()
                yield response
                if response.canceled:
                    return
        finally:
            self._watchers.discard(watcher)
            logger.debug("watch closed", prefix=prefix)

    async def create(self, key: str, value: bytes) -> None:
        if key in self._data:
            raise ConflictError(f"key: {key} already exists")
        self._commit([WatchEvent(type=EventType.PUT, key=key, value=value)])

    async def update(self, key: str, value: bytes) -> None:
        self._commit([WatchEvent(type=EventType.PUT, key=key, value=value)])

    async def batch_delete(self, keys: list[str]) -> None:
        keys = list(dict.fromkeys(keys))
        for key in keys:
            if key not in self._data:
                raise NotFoundError(key)
        self._commit([WatchEvent(type=EventType.DELETE, key=key) for key in keys])

    def compact(self, revision: int) -> None:
        """Forget history up to and including ``revision``."""
        self._compacted = min(max(self._compacted, revision), self._revision)
        while self._history and self._history[0].revision <= self._compacted:
            self._history.popleft()

    def break_watches(self, error: str = "watch stream broken") -> None:
        """Terminate every open watch with a canceled response."""
        for watcher in list(self._watchers):
            watcher.queue.put_nowait(WatchResponse(canceled=True, error=error))

    def _commit(self, events: list[WatchEvent]) -> None:
        self._revision += 1
        stamped: list[WatchEvent] = []
        for event in events:
            stamped_event = WatchEvent(
                type=event.type, key=event.key, value=event.value, revision=self._revision
            )
            if event.type is EventType.PUT:
                self._data[event.key] = KeyValue(
                    key=event.key, value=event.value, mod_revision=self._revision
                )
            else:
                self._data.pop(event.key, None)
            stamped.append(stamped_event)
        self._history.extend(stamped)
        if self._revision - self._compacted > self._history_revisions:
            self.compact(self._revision - self._history_revisions)
        for watcher in list(self._watchers):
            watcher.offer(stamped)
