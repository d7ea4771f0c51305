"""Request/response helpers shared by resource routers."""

from __future__ import annotations

from typing import Any

from fastapi import HTTPException, status
from pydantic import BaseModel, ValidationError

from ..services.generic_store import GenericStore


def parse_object(store: GenericStore, payload: dict[str, Any]) -> BaseModel:
    try:
        return store.obj_type.model_validate(payload)
    except ValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=exc.errors(include_url=False, include_context=False),
        ) from exc


def dump_object(obj: Any) -> Any:
    if isinstance(obj, BaseModel):
        return obj.model_dump(mode="json", exclude_none=True)
    return obj
