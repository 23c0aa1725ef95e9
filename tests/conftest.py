"""Shared test fixtures for authkeep."""

import pytest
import pytest_asyncio

from authkeep.store.memory import InMemoryDocumentStore
from authkeep.store.sqlite import SQLiteDocumentStore


def fixed_creds() -> dict:
    """Small deterministic creds object with binary fields."""
    return {
        "noiseKey": {"public": b"\x01" * 32, "private": b"\x02" * 32},
        "signedIdentityKey": {"public": b"\x03" * 32, "private": b"\x04" * 32},
        "registrationId": 4242,
        "advSecretKey": "c2VjcmV0",
        "processedHistoryMessages": [],
        "nextPreKeyId": 1,
        "registered": False,
    }


@pytest.fixture
def memory_store():
    """Create a fresh in-memory document store."""
    return InMemoryDocumentStore()


@pytest_asyncio.fixture
async def sqlite_store(tmp_path):
    """Create an initialized SQLite document store in a temp dir."""
    store = SQLiteDocumentStore(tmp_path / "auth.db")
    await store.initialize()
    yield store
    await store.close()


@pytest.fixture
def creds_generator():
    """Generator that always returns the same small creds object."""
    return fixed_creds
