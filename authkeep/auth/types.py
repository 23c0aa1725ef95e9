"""
Auth state types — key categories and typed key payloads.

Credentials and most keyed records are plain JSON-like dicts. The one
exception is app-state-sync-key, whose values are rebuilt into
AppStateSyncKeyData after decoding.
"""

from __future__ import annotations

import base64
from enum import Enum
from typing import Any, TypedDict

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from authkeep.core.errors import SerializationError

# Long-term identity state. Opaque to the adapter.
AuthenticationCreds = dict[str, Any]


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Enums
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


class KeyCategory(str, Enum):
    """Kinds of keyed records the protocol engine stores."""

    PRE_KEY = "pre-key"
    SESSION = "session"
    SENDER_KEY = "sender-key"
    SENDER_KEY_MEMORY = "sender-key-memory"
    APP_STATE_SYNC_KEY = "app-state-sync-key"
    APP_STATE_SYNC_VERSION = "app-state-sync-version"
    LID_MAPPING = "lid-mapping"
    DEVICE_LIST = "device-list"


def category_name(category: KeyCategory | str) -> str:
    """Plain string form of a category, whether given as enum or str."""
    if isinstance(category, KeyCategory):
        return category.value
    return str(category)


def record_id(category: KeyCategory | str, key_id: str) -> str:
    """Document id of a keyed record: "<category>-<id>"."""
    return f"{category_name(category)}-{key_id}"


def split_record_id(doc_id: str) -> tuple[KeyCategory, str] | None:
    """
    Inverse of record_id() for known categories.

    Longest category wins, so "sender-key-memory-g1" is never read as a
    sender-key record with id "memory-g1".
    """
    for category in sorted(KeyCategory, key=lambda c: len(c.value), reverse=True):
        prefix = f"{category.value}-"
        if doc_id.startswith(prefix):
            return category, doc_id[len(prefix):]
    return None


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Key Payloads
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


class KeyPair(TypedDict):
    public: bytes
    private: bytes


class SignedKeyPair(TypedDict):
    keyPair: KeyPair
    signature: bytes
    keyId: int


def _to_int(value: Any) -> Any:
    # int64 fields may arrive as decimal strings or {"low", "high"} longs
    if isinstance(value, str):
        return int(value)
    if isinstance(value, dict) and "low" in value and "high" in value:
        low = value["low"] & 0xFFFFFFFF
        high = value["high"] & 0xFFFFFFFF
        combined = (high << 32) | low
        if not value.get("unsigned") and combined >= 1 << 63:
            combined -= 1 << 64
        return combined
    return value


class AppStateSyncKeyFingerprint(BaseModel):
    """Fingerprint of an app state sync key."""

    model_config = ConfigDict(populate_by_name=True)

    raw_id: int | None = Field(default=None, alias="rawId")
    current_index: int | None = Field(default=None, alias="currentIndex")
    device_indexes: list[int] = Field(default_factory=list, alias="deviceIndexes")


class AppStateSyncKeyData(BaseModel):
    """
    Typed app state sync key, as the protocol engine expects it.

    Decoded records are plain dicts; from_object() rebuilds the typed
    form, accepting the loose shapes a JSON round trip produces.
    """

    model_config = ConfigDict(populate_by_name=True)

    key_data: bytes | None = Field(default=None, alias="keyData")
    fingerprint: AppStateSyncKeyFingerprint | None = None
    timestamp: int | None = None

    @field_validator("key_data", mode="before")
    @classmethod
    def _coerce_key_data(cls, value: Any) -> Any:
        if isinstance(value, str):
            return base64.b64decode(value, validate=True)
        if isinstance(value, list):
            return bytes(value)
        return value

    @field_validator("timestamp", mode="before")
    @classmethod
    def _coerce_timestamp(cls, value: Any) -> Any:
        return _to_int(value)

    @classmethod
    def from_object(cls, value: Any) -> AppStateSyncKeyData:
        if isinstance(value, cls):
            return value
        try:
            return cls.model_validate(value)
        except ValidationError as e:
            raise SerializationError(
                f"Invalid app state sync key payload: {e}",
                details={"error_count": e.error_count()},
            ) from e
