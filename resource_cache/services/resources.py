"""Built-in resource stores and how they are keyed and checked."""

from __future__ import annotations

from ..domain.entities import (
    Consumer,
    GlobalPlugins,
    PluginConfig,
    Route,
    Service,
    Upstream,
    User,
)
from ..domain.models import HubKey
from .checks import key_by_id, unique_field, unique_plugin_credential
from .generic_store import GenericStoreOption
from .validation import ModelValidator


def consumer_key(obj: Consumer) -> str:
    return obj.username


def default_store_options(prefix: str) -> list[GenericStoreOption]:
    prefix = prefix.rstrip("/")
    validator = ModelValidator()
    return [
        GenericStoreOption(
            base_path=f"{prefix}/routes",
            obj_type=Route,
            key_func=key_by_id,
            hub_key=HubKey.ROUTE,
            validator=validator,
        ),
        GenericStoreOption(
            base_path=f"{prefix}/upstreams",
            obj_type=Upstream,
            key_func=key_by_id,
            hub_key=HubKey.UPSTREAM,
            validator=validator,
        ),
        GenericStoreOption(
            base_path=f"{prefix}/services",
            obj_type=Service,
            key_func=key_by_id,
            hub_key=HubKey.SERVICE,
            validator=validator,
        ),
        GenericStoreOption(
            base_path=f"{prefix}/consumers",
            obj_type=Consumer,
            key_func=consumer_key,
            hub_key=HubKey.CONSUMER,
            validator=validator,
            stock_check=unique_plugin_credential("key-auth"),
        ),
        GenericStoreOption(
            base_path=f"{prefix}/plugin_configs",
            obj_type=PluginConfig,
            key_func=key_by_id,
            hub_key=HubKey.PLUGIN_CONFIG,
            validator=validator,
        ),
        GenericStoreOption(
            base_path=f"{prefix}/global_rules",
            obj_type=GlobalPlugins,
            key_func=key_by_id,
            hub_key=HubKey.GLOBAL_RULE,
            validator=validator,
        ),
        GenericStoreOption(
            base_path=f"{prefix}/users",
            obj_type=User,
            key_func=key_by_id,
            hub_key=HubKey.USER,
            validator=validator,
            stock_check=unique_field("name", label="user name"),
        ),
    ]
