"""orjson helpers for documents kept in the backing store."""

from __future__ import annotations

from typing import Any

import orjson


def encode_document(value: Any) -> bytes:
    """Serialize a JSON-ready value; keys are sorted so equal objects store equal bytes."""

    return orjson.dumps(value, option=orjson.OPT_SORT_KEYS)


def decode_document(raw: bytes | str) -> Any:
    return orjson.loads(raw)
