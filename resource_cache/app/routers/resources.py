"""Generic CRUD endpoints for every registered resource store."""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status

from ...domain.entities import base_info_of
from ...domain.models import HubKey, ListInput
from ...infra.logging import bind_resource
from ...services.generic_store import GenericStore
from ...services.registry import StoreHub
from ..deps import get_hub_dep
from ..serialization import dump_object, parse_object


router = APIRouter(tags=["resources"])

RESOURCE_PATHS: dict[str, HubKey] = {
    "routes": HubKey.ROUTE,
    "upstreams": HubKey.UPSTREAM,
    "services": HubKey.SERVICE,
    "consumers": HubKey.CONSUMER,
    "plugin_configs": HubKey.PLUGIN_CONFIG,
    "global_rules": HubKey.GLOBAL_RULE,
    "users": HubKey.USER,
}


def _store_for(hub: StoreHub, resource: str) -> GenericStore:
    hub_key = RESOURCE_PATHS.get(resource)
    if hub_key is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="resource not found")
    bind_resource(resource)
    return hub.get(hub_key)


def _name_filter(name: Optional[str]):
    if not name:
        return None

    def predicate(obj: Any) -> bool:
        value = getattr(obj, "name", None) or getattr(obj, "username", None) or ""
        return name in value

    return predicate


@router.get("/{resource}")
async def list_objects(
    resource: str,
    page: int = Query(0, ge=0),
    page_size: int = Query(0, ge=0),
    name: Optional[str] = Query(None),
    hub: StoreHub = Depends(get_hub_dep),
) -> dict[str, Any]:
    store = _store_for(hub, resource)
    output = store.list(
        ListInput(
            predicate=_name_filter(name),
            format=dump_object,
            page_size=page_size,
            page_number=page,
        )
    )
    return {"rows": output.rows, "total_size": output.total_size}


@router.get("/{resource}/{key}")
async def get_object(resource: str, key: str, hub: StoreHub = Depends(get_hub_dep)) -> Any:
    store = _store_for(hub, resource)
    return dump_object(store.get(key))


@router.post("/{resource}")
async def create_object(
    resource: str,
    payload: dict[str, Any] = Body(...),
    hub: StoreHub = Depends(get_hub_dep),
) -> Any:
    store = _store_for(hub, resource)
    obj = parse_object(store, payload)
    return dump_object(await store.create(obj))


@router.put("/{resource}/{key}")
async def update_object(
    resource: str,
    key: str,
    payload: dict[str, Any] = Body(...),
    hub: StoreHub = Depends(get_hub_dep),
) -> Any:
    store = _store_for(hub, resource)
    obj = parse_object(store, payload)
    info = base_info_of(obj)
    if info is not None and info.id is None:
        info.id = key
    if store.key_of(obj) != key:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="key in path does not match the object",
        )
    return dump_object(await store.update(obj, create_if_missing=True))


@router.delete("/{resource}/{keys}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_objects(resource: str, keys: str, hub: StoreHub = Depends(get_hub_dep)) -> None:
    store = _store_for(hub, resource)
    await store.batch_delete([key for key in keys.split(",") if key])
