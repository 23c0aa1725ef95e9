"""Tests for BufferJSON encoding."""

import base64
import json

import pytest

from authkeep.auth.codec import BufferJSON
from authkeep.auth.types import AppStateSyncKeyData
from authkeep.core.errors import SerializationError


def test_round_trip_nested_binary():
    value = {
        "keyPair": {"public": bytes(range(32)), "private": b"\x00\xff" * 16},
        "chain": [{"index": 0, "key": b""}, {"index": 1, "key": b"\x7f"}],
        "name": "alice",
        "count": 3,
        "flag": True,
        "missing": None,
    }
    assert BufferJSON.decode(BufferJSON.encode(value)) == value


def test_round_trip_keeps_exact_bytes():
    payload = bytes(range(256))
    decoded = BufferJSON.decode(BufferJSON.encode({"blob": payload}))
    assert isinstance(decoded["blob"], bytes)
    assert decoded["blob"] == payload


def test_binary_is_tagged_with_byte_array():
    """The stored format is {"type": "Buffer", "data": [ints]}."""
    text = BufferJSON.encode({"k": b"\x01\x02\xff"})
    assert json.loads(text) == {"k": {"type": "Buffer", "data": [1, 2, 255]}}


def test_bytearray_and_memoryview_encode_as_bytes():
    decoded = BufferJSON.decode(
        BufferJSON.encode({"a": bytearray(b"ab"), "m": memoryview(b"cd")})
    )
    assert decoded == {"a": b"ab", "m": b"cd"}


def test_encode_is_deterministic():
    value = {"x": b"\x01", "y": [1, 2, 3]}
    assert BufferJSON.encode(value) == BufferJSON.encode(value)


def test_decode_base64_buffer():
    """Records written with base64 buffer data are still readable."""
    text = json.dumps({"k": {"type": "Buffer", "data": base64.b64encode(b"hi").decode()}})
    assert BufferJSON.decode(text) == {"k": b"hi"}


def test_decode_legacy_buffer_flag():
    text = json.dumps({"k": {"buffer": True, "value": base64.b64encode(b"\x00\x01").decode()}})
    assert BufferJSON.decode(text) == {"k": b"\x00\x01"}


def test_plain_objects_with_type_field_untouched():
    text = json.dumps({"type": "session", "data": {"a": 1}})
    assert BufferJSON.decode(text) == {"type": "session", "data": {"a": 1}}


def test_decode_invalid_json():
    with pytest.raises(SerializationError):
        BufferJSON.decode("{not json")


def test_decode_invalid_byte_values():
    with pytest.raises(SerializationError):
        BufferJSON.decode('{"type": "Buffer", "data": [1, 300]}')


def test_decode_invalid_base64():
    with pytest.raises(SerializationError):
        BufferJSON.decode('{"type": "Buffer", "data": "***"}')


def test_encode_unsupported_type():
    with pytest.raises(SerializationError):
        BufferJSON.encode({"obj": object()})


def test_encode_pydantic_model_by_alias():
    key = AppStateSyncKeyData(keyData=b"\x09" * 4, timestamp=10)
    decoded = BufferJSON.decode(BufferJSON.encode(key))
    assert decoded["keyData"] == b"\x09" * 4
    assert decoded["timestamp"] == 10
    assert "fingerprint" not in decoded


def test_encode_set_is_rejected():
    """Sets have no tagged form, so they can't come back as sets."""
    with pytest.raises(SerializationError):
        BufferJSON.encode({"ids": {3, 1, 2}})
    with pytest.raises(SerializationError):
        BufferJSON.encode({"ids": frozenset({"a", 1})})
