"""Health check endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from ...domain.models import HealthResponse, StoreState
from ...services.registry import StoreHub
from ..deps import get_hub_dep


router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health(hub: StoreHub = Depends(get_hub_dep)) -> HealthResponse:
    stores = {store.type().value: store.state.value for store in hub}
    healthy = all(state == StoreState.WATCHING.value for state in stores.values())
    return HealthResponse(status="ok" if healthy else "degraded", stores=stores)
