"""
Pytest configuration and fixtures for secure transaction tests.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import AsyncGenerator

import asyncpg
import pytest
from dotenv import load_dotenv

from secure_tx import (
    EnvelopeCodec,
    InMemoryRecordStore,
    PostgresRecordStore,
    TxSecureRecord,
    TxService,
    encrypt,
)

ZERO_KEY = bytes(32)
ONES_KEY = bytes([1]) * 32
SAMPLE_PARTY = "party_123"
SAMPLE_PAYLOAD = {"amount": 100, "currency": "AED"}


@pytest.fixture
def master_key() -> bytes:
    """The all-zero 32-byte master key."""
    return ZERO_KEY


@pytest.fixture
def codec() -> EnvelopeCodec:
    return EnvelopeCodec()


@pytest.fixture
def record(master_key: bytes) -> TxSecureRecord:
    """A valid record for the sample party and payload."""
    return encrypt(SAMPLE_PARTY, SAMPLE_PAYLOAD, master_key)


@pytest.fixture
def memory_store() -> InMemoryRecordStore:
    """Create an in-memory store instance for testing."""
    return InMemoryRecordStore()


@pytest.fixture
def service(memory_store: InMemoryRecordStore, master_key: bytes) -> TxService:
    return TxService(memory_store, master_key)


@pytest.fixture
async def pg_pool() -> AsyncGenerator[asyncpg.Pool, None]:
    """Create a PostgreSQL connection pool for testing."""
    # Load environment from project root
    env_path = Path(__file__).parent.parent / ".env"
    load_dotenv(env_path)

    database_url = os.environ.get("DATABASE_URL")
    if not database_url:
        pytest.skip("DATABASE_URL not set, skipping PostgreSQL tests")

    pool = await asyncpg.create_pool(database_url)
    if pool is None:
        pytest.skip("Failed to create PostgreSQL connection pool")

    yield pool

    await pool.close()


@pytest.fixture
async def postgres_store(pg_pool: asyncpg.Pool) -> PostgresRecordStore:
    """Create a PostgreSQL store with a clean tx_records table."""
    store = PostgresRecordStore(pg_pool)
    await store.ensure_schema()
    await pg_pool.execute("TRUNCATE TABLE tx_records")
    return store
