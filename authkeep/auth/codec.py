"""
BufferJSON — JSON text encoding that keeps binary payloads intact.

Every bytes-like value is written as a tagged object:

    b"\x01\x02"  ->  {"type": "Buffer", "data": [1, 2]}

and turned back into bytes on decode. This is the on-disk format of
every stored document, so it must stay stable across versions.

Decoding also accepts two older shapes still found in stored records:

    {"type": "Buffer", "data": "<base64>"}
    {"buffer": true, "value": "<base64>"}
"""

from __future__ import annotations

import base64
import binascii
import json
from typing import Any

from pydantic import BaseModel

from authkeep.core.errors import SerializationError

BUFFER_TAG = "Buffer"


def _replacer(value: Any) -> Any:
    """json `default` hook: called for anything json can't encode natively."""
    if isinstance(value, (bytes, bytearray, memoryview)):
        return {"type": BUFFER_TAG, "data": list(bytes(value))}
    if isinstance(value, BaseModel):
        return value.model_dump(by_alias=True, exclude_none=True)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _reviver(obj: dict[str, Any]) -> Any:
    """json `object_hook`: rebuild bytes from tagged objects."""
    if obj.get("type") == BUFFER_TAG and "data" in obj:
        raw = obj["data"]
    elif obj.get("buffer") is True and "value" in obj:
        raw = obj["value"]
    else:
        return obj

    if isinstance(raw, str):
        try:
            return base64.b64decode(raw, validate=True)
        except binascii.Error as e:
            raise SerializationError(f"Invalid base64 buffer payload: {e}") from e
    if isinstance(raw, list):
        try:
            return bytes(raw)
        except (TypeError, ValueError) as e:
            raise SerializationError(f"Invalid byte array in buffer payload: {e}") from e
    if raw is None:
        return b""
    raise SerializationError(f"Unsupported buffer payload of type {type(raw).__name__}")


class BufferJSON:
    """
    Encode/decode values for the document store.

    Usage:
        text = BufferJSON.encode({"key": b"\x00\xff"})
        BufferJSON.decode(text)  # {"key": b"\x00\xff"}
    """

    @staticmethod
    def encode(value: Any) -> str:
        try:
            return json.dumps(value, default=_replacer, separators=(",", ":"))
        except (TypeError, ValueError) as e:
            raise SerializationError(f"Failed to encode value: {e}") from e

    @staticmethod
    def decode(text: str) -> Any:
        try:
            return json.loads(text, object_hook=_reviver)
        except json.JSONDecodeError as e:
            raise SerializationError(
                f"Stored payload is not valid JSON: {e}",
                details={"position": e.pos},
            ) from e
