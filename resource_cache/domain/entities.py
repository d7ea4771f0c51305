"""Resource schemas stored under the backing store prefix.

Schemas that carry creation metadata inherit from ``BaseInfo`` and thereby
implement the ``HasBaseInfo`` capability. The store engine checks for the
capability once per call instead of probing individual attributes.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol, Union, runtime_checkable
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, model_validator


def generate_id() -> str:
    return uuid4().hex


class BaseInfo(BaseModel):
    """Identity and timestamps shared by every managed resource."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: Optional[Union[str, int]] = Field(default=None)
    create_time: int = Field(default=0, ge=0)
    update_time: int = Field(default=0, ge=0)

    def get_base_info(self) -> "BaseInfo":
        return self

    def creating(self, now: int) -> None:
        if self.id is None or self.id == "":
            self.id = generate_id()
        else:
            self.id = str(self.id)
        self.create_time = now
        self.update_time = now

    def updating(self, stored: "BaseInfo", now: int) -> None:
        self.id = stored.id
        self.create_time = stored.create_time
        self.update_time = max(now, stored.update_time)

    def key_compat(self, key: str) -> None:
        """Fall back to the storage key when a stored document has no id."""
        if self.id is None and key:
            self.id = key


@runtime_checkable
class HasBaseInfo(Protocol):
    def get_base_info(self) -> BaseInfo:
        ...


def base_info_of(obj: Any) -> Optional[BaseInfo]:
    if isinstance(obj, HasBaseInfo):
        return obj.get_base_info()
    return None


class UpstreamNode(BaseModel):
    host: str = Field(..., min_length=1)
    port: int = Field(..., ge=1, le=65535)
    weight: int = Field(default=1, ge=0)


class Upstream(BaseInfo):
    name: Optional[str] = Field(default=None, max_length=100)
    desc: Optional[str] = Field(default=None, max_length=256)
    type: str = Field(default="roundrobin")
    nodes: list[UpstreamNode] = Field(default_factory=list)
    labels: Optional[dict[str, str]] = None


class Route(BaseInfo):
    name: Optional[str] = Field(default=None, max_length=100)
    desc: Optional[str] = Field(default=None, max_length=256)
    uri: Optional[str] = None
    uris: Optional[list[str]] = None
    methods: Optional[list[str]] = None
    host: Optional[str] = None
    hosts: Optional[list[str]] = None
    priority: int = 0
    plugins: Optional[dict[str, Any]] = None
    upstream: Optional[Upstream] = None
    upstream_id: Optional[Union[str, int]] = None
    service_id: Optional[Union[str, int]] = None
    plugin_config_id: Optional[Union[str, int]] = None
    labels: Optional[dict[str, str]] = None
    status: int = Field(default=1, ge=0, le=1)

    @model_validator(mode="after")
    def _check_uri(self) -> "Route":
        if self.uri and self.uris:
            raise ValueError("only one of uri or uris may be set")
        if self.host and self.hosts:
            raise ValueError("only one of host or hosts may be set")
        return self

    def get_plugins(self) -> dict[str, Any]:
        return self.plugins or {}


class Service(BaseInfo):
    name: Optional[str] = Field(default=None, max_length=100)
    desc: Optional[str] = Field(default=None, max_length=256)
    upstream: Optional[Upstream] = None
    upstream_id: Optional[Union[str, int]] = None
    plugins: Optional[dict[str, Any]] = None
    labels: Optional[dict[str, str]] = None
    enable_websocket: Optional[bool] = None
    hosts: Optional[list[str]] = None

    def get_plugins(self) -> dict[str, Any]:
        return self.plugins or {}


class Consumer(BaseInfo):
    username: str = Field(..., min_length=1, max_length=100, pattern=r"^[a-zA-Z0-9_]+$")
    desc: Optional[str] = Field(default=None, max_length=256)
    plugins: Optional[dict[str, Any]] = None
    labels: Optional[dict[str, str]] = None

    def get_plugins(self) -> dict[str, Any]:
        return self.plugins or {}


class PluginConfig(BaseInfo):
    desc: Optional[str] = Field(default=None, max_length=256)
    plugins: dict[str, Any] = Field(default_factory=dict)
    labels: Optional[dict[str, str]] = None

    def get_plugins(self) -> dict[str, Any]:
        return self.plugins


class GlobalPlugins(BaseInfo):
    plugins: dict[str, Any] = Field(default_factory=dict)

    def get_plugins(self) -> dict[str, Any]:
        return self.plugins


class User(BaseInfo):
    name: str = Field(..., min_length=1, max_length=100)
    email: Optional[str] = None
    teams_id: Optional[list[str]] = None
    role_id: Optional[str] = None
