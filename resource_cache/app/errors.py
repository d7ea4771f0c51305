"""Translate store errors into HTTP responses."""

from __future__ import annotations

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from ..domain.errors import (
    BackingStoreUnavailableError,
    ConfigurationError,
    ConflictError,
    NotFoundError,
    SerializationError,
    StoreClosedError,
    StoreError,
    ValidationFailedError,
)

_STATUS_BY_ERROR: list[tuple[type[StoreError], int]] = [
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
    (ValidationFailedError, status.HTTP_400_BAD_REQUEST),
    (SerializationError, status.HTTP_400_BAD_REQUEST),
    (BackingStoreUnavailableError, status.HTTP_503_SERVICE_UNAVAILABLE),
    (StoreClosedError, status.HTTP_503_SERVICE_UNAVAILABLE),
    (ConfigurationError, status.HTTP_500_INTERNAL_SERVER_ERROR),
]


def status_for(exc: StoreError) -> int:
    for error_type, code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(StoreError)
    async def store_error_handler(_: Request, exc: StoreError) -> JSONResponse:
        code = status_for(exc)
        return JSONResponse(status_code=code, content={"code": code, "message": str(exc)})
