"""
Build a document store from configuration.
"""

from __future__ import annotations

from authkeep.core.config import AuthKeepConfig
from authkeep.core.errors import ConfigError
from authkeep.store.base import DocumentStore
from authkeep.store.memory import InMemoryDocumentStore
from authkeep.store.sqlite import SQLiteDocumentStore


async def open_store(config: AuthKeepConfig) -> DocumentStore:
    """Create and initialize the backend named by config.store.backend."""
    backend = config.store.backend.lower()

    if backend == "memory":
        return InMemoryDocumentStore()

    if backend == "sqlite":
        store = SQLiteDocumentStore(config.store.resolved_path(), table=config.store.table)
        await store.initialize()
        return store

    raise ConfigError(
        f"Unknown store backend: {config.store.backend!r}",
        details={"supported": ["sqlite", "memory"]},
    )
