"""
In-memory document store — for testing and throwaway sessions.

Data lost when process exits.
"""

from __future__ import annotations

from authkeep.store.base import DocumentStore


class InMemoryDocumentStore(DocumentStore):
    """
    Dict-backed document store.

    Usage:
        store = InMemoryDocumentStore()
        await store.upsert("creds", '{"registered": false}')
        assert await store.find_one("creds") == '{"registered": false}'
    """

    def __init__(self) -> None:
        self._docs: dict[str, str] = {}

    async def find_one(self, doc_id: str) -> str | None:
        return self._docs.get(doc_id)

    async def upsert(self, doc_id: str, data: str) -> None:
        self._docs[doc_id] = data

    async def delete(self, doc_id: str) -> bool:
        return self._docs.pop(doc_id, None) is not None

    async def list_ids(self, prefix: str = "") -> list[str]:
        return sorted(k for k in self._docs if k.startswith(prefix))

    async def exists(self, doc_id: str) -> bool:
        return doc_id in self._docs

    async def close(self) -> None:
        self._docs.clear()
