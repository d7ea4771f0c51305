"""Prometheus metrics for the stores and the HTTP surface."""

from __future__ import annotations

from fastapi import FastAPI
from prometheus_client import Counter, Gauge, Histogram
from prometheus_fastapi_instrumentator import Instrumentator

METRICS_PATH = "/metrics"

# One instrumentator per process; its collectors live in the default registry
_instrumentator: Instrumentator | None = None


def get_instrumentator() -> Instrumentator:
    global _instrumentator
    if _instrumentator is None:
        _instrumentator = Instrumentator(
            should_group_status_codes=True,
            excluded_handlers=[METRICS_PATH, "/health"],
        )
    return _instrumentator


def setup_metrics(app: FastAPI) -> None:
    """Record request metrics for ``app`` and serve them on ``METRICS_PATH``."""

    instrumentator = get_instrumentator()
    instrumentator.instrument(app)
    instrumentator.expose(app, endpoint=METRICS_PATH, include_in_schema=False)


STORE_LOAD_SECONDS = Histogram(
    "resource_cache_store_load_seconds",
    "Duration of the initial list and decode for a store",
    ["resource"],
    buckets=(0.005, 0.01, 0.05, 0.1, 0.25, 0.5, 1, 2, 5),
)

WATCH_EVENTS_APPLIED = Counter(
    "resource_cache_watch_events_applied_total",
    "Watch events applied to a store cache",
    ["resource", "type"],
)

WATCH_DECODE_FAILURES = Counter(
    "resource_cache_watch_decode_failures_total",
    "Watch puts skipped because the value could not be decoded",
    ["resource"],
)

WATCH_FAILURES = Counter(
    "resource_cache_watch_failures_total",
    "Watch streams that ended without an explicit close",
    ["resource"],
)

CACHED_OBJECTS = Gauge(
    "resource_cache_cached_objects",
    "Number of objects currently cached per store",
    ["resource"],
)
