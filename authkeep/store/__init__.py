from authkeep.store.base import DocumentStore
from authkeep.store.memory import InMemoryDocumentStore
from authkeep.store.sqlite import SQLiteDocumentStore
from authkeep.store.factory import open_store

__all__ = [
    "DocumentStore",
    "InMemoryDocumentStore",
    "SQLiteDocumentStore",
    "open_store",
]
