"""Encode and decode stored objects."""

from __future__ import annotations

from typing import Generic, TypeVar

import orjson
import structlog
from pydantic import BaseModel, ValidationError

from ..domain.entities import base_info_of
from ..domain.errors import SerializationError
from ..infra import json as jsonutil

logger = structlog.get_logger(__name__)

T = TypeVar("T", bound=BaseModel)


class ObjectCodec(Generic[T]):
    """JSON codec for one schema type."""

    def __init__(self, obj_type: type[T]) -> None:
        self.obj_type = obj_type

    def encode(self, obj: T, key: str = "") -> bytes:
        try:
            return jsonutil.encode_document(obj.model_dump(mode="json", exclude_none=True))
        except (TypeError, ValueError, orjson.JSONEncodeError) as exc:
            logger.error("json marshal failed", key=key, error=str(exc))
            raise SerializationError(key, str(exc)) from exc

    def decode(self, raw: bytes | str, key: str) -> T:
        """Build an object from a stored value; ``key`` is its storage key."""
        try:
            obj = self.obj_type.model_validate(jsonutil.decode_document(raw))
        except (orjson.JSONDecodeError, ValidationError) as exc:
            logger.error("json unmarshal failed", key=key, error=str(exc))
            raise SerializationError(key, str(exc)) from exc

        info = base_info_of(obj)
        if info is not None:
            info.key_compat(key)
        return obj
