"""
Tests for record stores.
"""

from __future__ import annotations

import asyncio

import pytest

from secure_tx import (
    InMemoryRecordStore,
    PostgresRecordStore,
    StorageError,
    TxSecureRecord,
    decrypt,
    encrypt,
)

from .conftest import SAMPLE_PAYLOAD, ZERO_KEY


async def test_memory_put_and_get(memory_store: InMemoryRecordStore, record: TxSecureRecord) -> None:
    await memory_store.put(record)
    assert await memory_store.get(record.id) is record
    assert len(memory_store) == 1


async def test_memory_get_missing(memory_store: InMemoryRecordStore) -> None:
    assert await memory_store.get("00" * 16) is None


async def test_memory_duplicate_id(memory_store: InMemoryRecordStore, record: TxSecureRecord) -> None:
    await memory_store.put(record)
    with pytest.raises(StorageError):
        await memory_store.put(record)


async def test_memory_concurrent_puts(memory_store: InMemoryRecordStore) -> None:
    records = [encrypt(f"party_{i}", {"seq": i}, ZERO_KEY) for i in range(20)]
    await asyncio.gather(*(memory_store.put(r) for r in records))
    assert len(memory_store) == 20
    for r in records:
        assert await memory_store.get(r.id) is r


# =============================================================================
# PostgreSQL (skipped unless DATABASE_URL is set)
# =============================================================================


async def test_postgres_put_and_get(postgres_store: PostgresRecordStore, record: TxSecureRecord) -> None:
    await postgres_store.put(record)
    loaded = await postgres_store.get(record.id)
    assert loaded == record
    assert decrypt(loaded, ZERO_KEY).payload == SAMPLE_PAYLOAD


async def test_postgres_get_missing(postgres_store: PostgresRecordStore) -> None:
    assert await postgres_store.get("00" * 16) is None


async def test_postgres_duplicate_id(postgres_store: PostgresRecordStore, record: TxSecureRecord) -> None:
    await postgres_store.put(record)
    with pytest.raises(StorageError):
        await postgres_store.put(record)
