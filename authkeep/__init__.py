"""
authkeep — persist messaging-client auth state in a document store.

Public API:
    from authkeep import use_document_auth_state, SQLiteDocumentStore
"""

__version__ = "0.1.0"

# Core
from authkeep.core.config import AuthKeepConfig
from authkeep.core.errors import AuthKeepError, ConfigError, SerializationError, StorageError
from authkeep.core.events import Event, EventType

# Stores
from authkeep.store import DocumentStore, InMemoryDocumentStore, SQLiteDocumentStore, open_store

# Auth state
from authkeep.auth import (
    AppStateSyncKeyData,
    AuthState,
    AuthStateHandle,
    BufferJSON,
    KeyCategory,
    init_auth_creds,
    use_document_auth_state,
)

__all__ = [
    # Core
    "AuthKeepConfig",
    "AuthKeepError",
    "ConfigError",
    "SerializationError",
    "StorageError",
    "Event",
    "EventType",
    # Stores
    "DocumentStore",
    "InMemoryDocumentStore",
    "SQLiteDocumentStore",
    "open_store",
    # Auth state
    "AppStateSyncKeyData",
    "AuthState",
    "AuthStateHandle",
    "BufferJSON",
    "KeyCategory",
    "init_auth_creds",
    "use_document_auth_state",
]
