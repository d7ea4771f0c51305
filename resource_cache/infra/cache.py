"""Thread-safe mapping backing each store's cache."""

from __future__ import annotations

from threading import Lock
from typing import Callable, Generic, Hashable, Mapping, TypeVar


K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class ConcurrentMap(Generic[K, V]):
    """Unbounded mapping with short per-operation locking.

    Iteration always runs over a snapshot, so visitors may call back into
    the map (or take as long as they like) without blocking writers.
    """

    def __init__(self) -> None:
        self._store: dict[K, V] = {}
        self._lock = Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._store

    def get(self, key: K) -> V | None:
        with self._lock:
            return self._store.get(key)

    def set(self, key: K, value: V) -> None:
        with self._lock:
            self._store[key] = value

    def delete(self, key: K) -> V | None:
        with self._lock:
            return self._store.pop(key, None)

    def replace_all(self, entries: Mapping[K, V]) -> None:
        """Swap in a full snapshot, dropping keys absent from ``entries``."""
        with self._lock:
            self._store = dict(entries)

    def items(self) -> list[tuple[K, V]]:
        with self._lock:
            return list(self._store.items())

    def range(self, visitor: Callable[[K, V], bool]) -> None:
        for key, value in self.items():
            if not visitor(key, value):
                return
