"""Tooling endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from ...domain.models import VersionResponse
from ...infra.config import Settings
from ..deps import get_settings_dep


router = APIRouter(prefix="/tool", tags=["tool"])


@router.get("/version", response_model=VersionResponse)
async def version(settings: Settings = Depends(get_settings_dep)) -> VersionResponse:
    return VersionResponse(commit_hash=settings.commit_hash, version=settings.version)
