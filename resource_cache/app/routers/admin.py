"""Administrative endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from ...domain.models import ReinitResponse
from ...services.reinit import ReinitRegistry
from ..deps import get_reinit_registry_dep


router = APIRouter(tags=["admin"])


@router.post("/reinit", response_model=ReinitResponse)
async def reinit(registry: ReinitRegistry = Depends(get_reinit_registry_dep)) -> ReinitResponse:
    """Reinitialize every store whose watch stream broke."""
    count = await registry.reinit()
    return ReinitResponse(reinitialized=count, pending=registry.pending)
