"""Validator port: Protocol for structural validation of candidate objects."""

from __future__ import annotations

from typing import Any, Callable, Protocol, runtime_checkable


@runtime_checkable
class ValidatorPort(Protocol):
    def validate(self, obj: Any) -> None:
        """Raise when ``obj`` violates the schema; return None otherwise."""
        ...


# Called once per cached object; raises to reject the candidate.
StockCheck = Callable[[Any, Any], None]
