"""
Document store interface.

Flat collection of text documents addressed by a unique string id.
The auth state adapter only needs find_one / upsert / delete.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class DocumentStore(ABC):
    """
    Abstract base class for document store backends.

    Ids are unique strings: "creds", "pre-key-12", "session-alice.0"
    Data is text (serialization is the caller's responsibility).

    Implementations must tolerate many concurrent in-flight operations.

    Implementations:
        SQLiteDocumentStore — file-based, default
        InMemoryDocumentStore — for testing
    """

    @abstractmethod
    async def find_one(self, doc_id: str) -> str | None:
        """Get a document's data by id. Returns None if not found."""
        ...

    @abstractmethod
    async def upsert(self, doc_id: str, data: str) -> None:
        """Insert or replace a document."""
        ...

    @abstractmethod
    async def delete(self, doc_id: str) -> bool:
        """Delete a document. Returns True if it existed."""
        ...

    @abstractmethod
    async def list_ids(self, prefix: str = "") -> list[str]:
        """List all document ids matching a prefix."""
        ...

    @abstractmethod
    async def exists(self, doc_id: str) -> bool:
        """Check if a document exists."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Close the store."""
        ...
