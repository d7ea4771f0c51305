"""Records exchanged with the backing store."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class EventType(str, Enum):
    PUT = "put"
    DELETE = "delete"


@dataclass(frozen=True, slots=True)
class KeyValue:
    """A single stored record as returned by a list call."""

    key: str
    value: bytes
    mod_revision: int = 0


@dataclass(frozen=True, slots=True)
class ListResult:
    """Records under a prefix plus the store revision they were read at."""

    items: list[KeyValue]
    revision: int


@dataclass(frozen=True, slots=True)
class WatchEvent:
    type: EventType
    key: str
    value: bytes = b""
    revision: int = 0


@dataclass(frozen=True, slots=True)
class WatchResponse:
    """One change-batch delivered by a watch stream.

    ``canceled`` marks the end of the stream; ``error`` says why.
    """

    events: list[WatchEvent] = field(default_factory=list)
    canceled: bool = False
    error: str | None = None
