"""Failure reporter port: where broken watches go to get reinitialized."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class FailureReporterPort(Protocol):
    def report_failure(self, store: Any) -> None:
        """Queue ``store`` for reinitialization. Must not block."""
        ...
