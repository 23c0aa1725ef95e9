"""
SQLite document store.

Uses aiosqlite for async SQLite access.
WAL mode enabled for concurrent read support.

Table:
    id          TEXT  PK
    data        TEXT  (encoded payload)
    updated_at  REAL
"""

from __future__ import annotations

import asyncio
import logging
import re
import time
from pathlib import Path

import aiosqlite

from authkeep.core.errors import StorageError
from authkeep.store.base import DocumentStore

logger = logging.getLogger(__name__)

_TABLE_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class SQLiteDocumentStore(DocumentStore):
    """
    SQLite-backed document store.

    Usage:
        store = SQLiteDocumentStore("~/.authkeep/auth.db")
        await store.initialize()

        await store.upsert("creds", payload)
        payload = await store.find_one("creds")
    """

    def __init__(self, db_path: str | Path, table: str = "auth_documents") -> None:
        if not _TABLE_NAME.match(table):
            raise StorageError(f"Invalid table name: {table!r}")
        self._db_path = Path(db_path).expanduser()
        self._table = table
        self._db: aiosqlite.Connection | None = None
        self._init_lock = asyncio.Lock()

    @property
    def path(self) -> Path:
        return self._db_path

    async def initialize(self) -> None:
        """Open the database and create the documents table."""
        self._db_path.parent.mkdir(parents=True, exist_ok=True)

        try:
            db = await aiosqlite.connect(str(self._db_path))

            await db.execute("PRAGMA journal_mode=WAL")
            await db.execute("PRAGMA synchronous=NORMAL")

            await db.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {self._table} (
                    id TEXT PRIMARY KEY,
                    data TEXT NOT NULL,
                    updated_at REAL NOT NULL
                )
                """
            )
            await db.commit()
            self._db = db
            logger.debug(f"SQLite document store initialized at {self._db_path}")

        except Exception as e:
            raise StorageError(
                f"Failed to initialize SQLite at {self._db_path}: {e}"
            ) from e

    async def _ensure_db(self) -> aiosqlite.Connection:
        """Ensure database is initialized. Safe under concurrent first use."""
        if self._db is None:
            async with self._init_lock:
                if self._db is None:
                    await self.initialize()
        return self._db  # type: ignore[return-value]

    async def find_one(self, doc_id: str) -> str | None:
        db = await self._ensure_db()
        try:
            async with db.execute(
                f"SELECT data FROM {self._table} WHERE id = ?", (doc_id,)
            ) as cursor:
                row = await cursor.fetchone()
                return row[0] if row else None
        except Exception as e:
            raise StorageError(f"Failed to read '{doc_id}': {e}", doc_id=doc_id) from e

    async def upsert(self, doc_id: str, data: str) -> None:
        db = await self._ensure_db()
        try:
            await db.execute(
                f"""
                INSERT INTO {self._table} (id, data, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    data = excluded.data, updated_at = excluded.updated_at
                """,
                (doc_id, data, time.time()),
            )
            await db.commit()
        except Exception as e:
            raise StorageError(f"Failed to write '{doc_id}': {e}", doc_id=doc_id) from e

    async def delete(self, doc_id: str) -> bool:
        db = await self._ensure_db()
        try:
            cursor = await db.execute(
                f"DELETE FROM {self._table} WHERE id = ?", (doc_id,)
            )
            await db.commit()
            return cursor.rowcount > 0
        except Exception as e:
            raise StorageError(f"Failed to delete '{doc_id}': {e}", doc_id=doc_id) from e

    async def list_ids(self, prefix: str = "") -> list[str]:
        db = await self._ensure_db()
        try:
            # literal prefix match; ids may contain LIKE wildcards
            async with db.execute(
                f"SELECT id FROM {self._table} "
                "WHERE substr(id, 1, ?) = ? ORDER BY id",
                (len(prefix), prefix),
            ) as cursor:
                rows = await cursor.fetchall()
            return [row[0] for row in rows]
        except Exception as e:
            raise StorageError(f"Failed to list ids with prefix '{prefix}': {e}") from e

    async def exists(self, doc_id: str) -> bool:
        db = await self._ensure_db()
        try:
            async with db.execute(
                f"SELECT 1 FROM {self._table} WHERE id = ?", (doc_id,)
            ) as cursor:
                return await cursor.fetchone() is not None
        except Exception as e:
            raise StorageError(f"Failed to check '{doc_id}': {e}", doc_id=doc_id) from e

    async def close(self) -> None:
        if self._db:
            await self._db.close()
            self._db = None
