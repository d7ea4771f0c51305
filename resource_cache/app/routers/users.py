"""User endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends

from ...domain.models import HubKey
from ...services.checks import name_exist_check
from ...services.registry import StoreHub
from ..deps import get_hub_dep
from ..serialization import dump_object, parse_object


router = APIRouter(prefix="/users", tags=["users"])


@router.get("/{user_id}")
async def get_user(user_id: str, hub: StoreHub = Depends(get_hub_dep)) -> Any:
    return dump_object(hub.get(HubKey.USER).get(user_id))


@router.post("")
async def create_user(
    payload: dict[str, Any] = Body(...),
    hub: StoreHub = Depends(get_hub_dep),
) -> Any:
    store = hub.get(HubKey.USER)
    user = parse_object(store, payload)
    name_exist_check(store, user.name, label="user")
    return dump_object(await store.create(user))
