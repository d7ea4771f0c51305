"""Unit tests for the store exception hierarchy."""

import pytest

from resource_cache.domain.errors import (
    BackingStoreUnavailableError,
    ConfigurationError,
    ConflictError,
    NotFoundError,
    SerializationError,
    StoreClosedError,
    StoreError,
    ValidationFailedError,
)


@pytest.mark.parametrize(
    "error_type",
    [
        BackingStoreUnavailableError,
        ConfigurationError,
        ConflictError,
        StoreClosedError,
        ValidationFailedError,
    ],
)
def test_errors_share_base(error_type):
    assert issubclass(error_type, StoreError)


def test_not_found_carries_key():
    error = NotFoundError("r1")
    assert error.key == "r1"
    assert str(error) == "data not found by key: r1"


def test_serialization_error_carries_detail():
    error = SerializationError("r1", "bad json")
    assert isinstance(error, StoreError)
    assert error.key == "r1"
    assert error.detail == "bad json"
    assert "bad json" in str(error)
