"""
Diagnostics events — emitted before every document store access.

A diagnostics sink is any callable accepting an Event. The adapter
never depends on what the sink does with it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable
import time
import uuid


class EventType:
    """
    Event type constants.

    Hierarchical naming: "category:action"
    """

    # Raw document access
    STORE_READ = "store:read"
    STORE_WRITE = "store:write"
    STORE_DELETE = "store:delete"

    # Keyed records
    KEYS_GET = "keys:get"
    KEYS_SET = "keys:set"

    # Credentials
    CREDS_SAVE = "creds:save"
    CREDS_REMOVE = "creds:remove"


@dataclass(slots=True)
class Event:
    """
    A single diagnostics event.

    `data` carries the operation's identifier(s):
        {"id": "pre-key-1"}
        {"category": "session", "ids": ["a", "b"]}
    """

    type: str
    data: dict[str, Any] = field(default_factory=dict)
    id: str = field(default_factory=lambda: uuid.uuid4().hex[:16])
    timestamp: float = field(default_factory=time.time)


DiagnosticsSink = Callable[[Event], None]


def null_sink(event: Event) -> None:
    """Default sink. Discards every event."""
    return None
