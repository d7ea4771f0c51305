"""Domain exception hierarchy for resource-cache.

Every public store operation either returns a value or raises one of these.
The HTTP layer maps each class onto a status code.
"""


class StoreError(Exception):
    """Base exception for all store errors."""


class NotFoundError(StoreError):
    """No cached object exists for the requested key."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"data not found by key: {key}")


class ConflictError(StoreError):
    """Duplicate key on create, or a stock check rejected the candidate."""


class ValidationFailedError(StoreError):
    """The structural validator rejected the candidate object."""


class SerializationError(StoreError):
    """An object could not be encoded or a stored value could not be decoded."""

    def __init__(self, key: str, detail: str) -> None:
        self.key = key
        self.detail = detail
        super().__init__(f"json conversion failed for key {key!r}: {detail}")


class BackingStoreUnavailableError(StoreError):
    """A list, watch or write round-trip to the backing store failed."""


class ConfigurationError(StoreError):
    """A store was constructed or looked up with invalid configuration."""


class StoreClosedError(StoreError):
    """The store has been closed and cannot be initialized again."""
