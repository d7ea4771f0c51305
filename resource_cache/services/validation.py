"""Validation pipeline run before every create and update."""

from __future__ import annotations

from typing import Any, Optional

import structlog
from pydantic import BaseModel, ValidationError

from ..domain.errors import ConflictError, StoreError, ValidationFailedError
from ..infra.cache import ConcurrentMap
from ..port.validator import StockCheck, ValidatorPort

logger = structlog.get_logger(__name__)


class ModelValidator:
    """Re-runs pydantic validation on a candidate built or mutated in code."""

    def validate(self, obj: Any) -> None:
        if not isinstance(obj, BaseModel):
            raise ValidationFailedError(f"expected a pydantic model, got {type(obj).__name__}")
        try:
            type(obj).model_validate(obj.model_dump())
        except ValidationError as exc:
            raise ValidationFailedError(str(exc)) from exc


class ValidationPipeline:
    """Structural validation followed by the stock check over cached objects.

    The stock check scans a live mapping, so a conflicting write arriving via
    the watch stream during the scan is not caught. The backing store stays
    the final authority.
    """

    def __init__(
        self,
        cache: ConcurrentMap[str, Any],
        validator: Optional[ValidatorPort] = None,
        stock_check: Optional[StockCheck] = None,
    ) -> None:
        self._cache = cache
        self._validator = validator
        self._stock_check = stock_check

    def run(self, obj: Any) -> None:
        if self._validator is not None:
            try:
                self._validator.validate(obj)
            except StoreError:
                logger.error("data validate failed", obj=repr(obj))
                raise
            except Exception as exc:
                logger.error("data validate failed", error=str(exc), obj=repr(obj))
                raise ValidationFailedError(str(exc)) from exc

        if self._stock_check is None:
            return

        for _, stock_obj in self._cache.items():
            try:
                self._stock_check(obj, stock_obj)
            except StoreError:
                raise
            except Exception as exc:
                raise ConflictError(str(exc)) from exc
