"""
Document-store backed authentication state.

Maps the protocol engine's credentials and keyed records onto a flat
document store:

    creds                -> "creds"
    (category, id)       -> "<category>-<id>"

Every document is BufferJSON text. Credentials are loaded once and kept
in memory; keyed records are never cached and every get/set goes to the
store. Batch members run concurrently; the first failure fails the
batch and members that already finished stay applied.

Usage:
    state, save_creds, remove_creds = await use_document_auth_state(store)

    sessions = await state.keys.get("session", ["alice.0", "bob.0"])
    await state.keys.set({"pre-key": {"1": key_pair, "2": None}})

    state.creds["registered"] = True
    await save_creds()
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any

from authkeep.auth.codec import BufferJSON
from authkeep.auth.creds import init_auth_creds
from authkeep.auth.types import (
    AppStateSyncKeyData,
    AuthenticationCreds,
    KeyCategory,
    category_name,
    record_id,
)
from authkeep.core.events import DiagnosticsSink, Event, EventType, null_sink
from authkeep.store.base import DocumentStore

logger = logging.getLogger(__name__)

CREDS_ID = "creds"

CredsGenerator = Callable[[], AuthenticationCreds]


class _Documents:
    """Encoded read/write/delete against the store, with diagnostics."""

    def __init__(
        self,
        store: DocumentStore,
        sink: DiagnosticsSink,
        max_concurrency: int = 0,
    ) -> None:
        self._store = store
        self._sink = sink
        self._limit = asyncio.Semaphore(max_concurrency) if max_concurrency > 0 else None

    def emit(self, event_type: str, data: dict[str, Any]) -> None:
        self._sink(Event(type=event_type, data=data))

    async def read(self, doc_id: str) -> Any | None:
        self.emit(EventType.STORE_READ, {"id": doc_id})
        logger.debug(f"reading data: id={doc_id}")
        text = await self._run(self._store.find_one(doc_id))
        return BufferJSON.decode(text) if text is not None else None

    async def write(self, doc_id: str, value: Any) -> None:
        text = BufferJSON.encode(value)
        self.emit(EventType.STORE_WRITE, {"id": doc_id})
        logger.debug(f"writing data: id={doc_id}")
        await self._run(self._store.upsert(doc_id, text))

    async def remove(self, doc_id: str) -> None:
        self.emit(EventType.STORE_DELETE, {"id": doc_id})
        logger.debug(f"removing data: id={doc_id}")
        await self._run(self._store.delete(doc_id))

    async def _run(self, op: Awaitable[Any]) -> Any:
        if self._limit is None:
            return await op
        async with self._limit:
            return await op


class DocumentKeyStore:
    """Keyed-record access. Implements the engine's signal key store."""

    def __init__(self, docs: _Documents) -> None:
        self._docs = docs

    async def get(
        self, category: KeyCategory | str, ids: Iterable[str]
    ) -> dict[str, Any]:
        """
        Fetch records for every id concurrently.

        Returns one entry per requested id; missing records map to None.
        """
        name = category_name(category)
        ids = list(ids)
        self._docs.emit(EventType.KEYS_GET, {"category": name, "ids": ids})
        logger.debug(f"getting data: category={name} ids={ids}")

        data: dict[str, Any] = {}

        async def fetch(key_id: str) -> None:
            value = await self._docs.read(record_id(name, key_id))
            if name == KeyCategory.APP_STATE_SYNC_KEY.value and value:
                value = AppStateSyncKeyData.from_object(value)
            data[key_id] = value

        await asyncio.gather(*(fetch(key_id) for key_id in ids))
        return data

    async def set(self, data: Mapping[str, Mapping[str, Any | None]]) -> None:
        """
        Write or delete every (category, id) pair concurrently.

        Falsy values delete the record. No rollback on failure.
        """
        touched = {
            category_name(category): list(records) for category, records in data.items()
        }
        self._docs.emit(EventType.KEYS_SET, {"ids": touched})
        logger.debug(f"setting data: {touched}")

        tasks: list[Awaitable[None]] = []
        for category, records in data.items():
            for key_id, value in records.items():
                doc_id = record_id(category, key_id)
                tasks.append(
                    self._docs.write(doc_id, value) if value else self._docs.remove(doc_id)
                )
        await asyncio.gather(*tasks)


@dataclass(slots=True)
class AuthState:
    """What the protocol engine holds: live credentials plus key access."""

    creds: AuthenticationCreds
    keys: DocumentKeyStore


class AuthStateHandle:
    """
    Result of use_document_auth_state().

    Unpacks as (state, save_creds, remove_creds).
    """

    def __init__(self, state: AuthState, docs: _Documents) -> None:
        self.state = state
        self._docs = docs

    async def save_creds(self) -> None:
        """Persist the in-memory creds under "creds". Last writer wins."""
        self._docs.emit(EventType.CREDS_SAVE, {"id": CREDS_ID})
        logger.debug("saving creds")
        await self._docs.write(CREDS_ID, self.state.creds)

    async def remove_creds(self) -> None:
        """
        Delete the stored creds record.

        The in-memory creds are left as they are, so a later save_creds()
        writes them back.
        """
        self._docs.emit(EventType.CREDS_REMOVE, {"id": CREDS_ID})
        logger.debug("removing creds")
        await self._docs.remove(CREDS_ID)

    def __iter__(self) -> Iterator[Any]:
        return iter((self.state, self.save_creds, self.remove_creds))


async def use_document_auth_state(
    store: DocumentStore,
    *,
    generator: CredsGenerator = init_auth_creds,
    sink: DiagnosticsSink | None = None,
    max_concurrency: int = 0,
) -> AuthStateHandle:
    """
    Load (or create) auth state backed by `store`.

    Args:
        store: Document store holding the records
        generator: Builds fresh creds when none are stored
        sink: Optional diagnostics observer, called before each store access
        max_concurrency: Cap on in-flight store operations (0 = unbounded)
    """
    docs = _Documents(store, sink or null_sink, max_concurrency)

    creds = await docs.read(CREDS_ID)
    if not creds:
        logger.info("no stored creds, generating new ones")
        creds = generator()

    return AuthStateHandle(AuthState(creds=creds, keys=DocumentKeyStore(docs)), docs)
