"""resource-cache: in-memory materialized views over a watchable key-value store."""

__version__ = "0.1.0"
