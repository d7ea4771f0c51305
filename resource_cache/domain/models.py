"""Domain models for resource-cache."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

from pydantic import BaseModel, ConfigDict, Field


class HubKey(str, Enum):
    """Resource identifiers a store is registered under."""

    ROUTE = "route"
    UPSTREAM = "upstream"
    SERVICE = "service"
    CONSUMER = "consumer"
    PLUGIN_CONFIG = "plugin_config"
    GLOBAL_RULE = "global_rule"
    USER = "user"


class StoreState(str, Enum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    WATCHING = "watching"
    REINITIALIZING = "reinitializing"
    CLOSED = "closed"


Predicate = Callable[[Any], bool]
Formatter = Callable[[Any], Any]
Less = Callable[[Any, Any], bool]


@dataclass(slots=True)
class ListInput:
    """Options for ``GenericStore.list``.

    Omitted fields fall back to: accept every object, identity projection,
    no pagination, and ordering by (create_time, update_time, key).
    ``page_number`` starts from 1.
    """

    predicate: Optional[Predicate] = None
    format: Optional[Formatter] = None
    page_size: int = 0
    page_number: int = 0
    less: Optional[Less] = None


class ListOutput(BaseModel):
    """Listing result; ``rows`` is always a list so it serializes as ``[]``."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    rows: list[Any] = Field(default_factory=list)
    total_size: int = 0


class HealthResponse(BaseModel):
    status: str
    stores: dict[str, str]


class VersionResponse(BaseModel):
    commit_hash: str
    version: str


class ReinitResponse(BaseModel):
    reinitialized: int
    pending: int
