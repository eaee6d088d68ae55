"""
PostgreSQL-backed record storage.

This module provides:
- PostgresRecordStore: asyncpg implementation of RecordStore

Records are stored exactly as produced by the envelope codec: hex strings in
TEXT columns, so a lookup returns the record unchanged. Key material never
reaches the database.
"""

from __future__ import annotations

import logging
from typing import Optional

import asyncpg

from .errors import StorageError
from .record import TxSecureRecord
from .storage import RecordStore

logger = logging.getLogger(__name__)

SCHEMA = """
    CREATE TABLE IF NOT EXISTS tx_records (
        id             TEXT PRIMARY KEY,
        party_id       TEXT NOT NULL,
        created_at     TIMESTAMPTZ NOT NULL,
        payload_nonce  TEXT NOT NULL,
        payload_ct     TEXT NOT NULL,
        payload_tag    TEXT NOT NULL,
        dek_wrap_nonce TEXT NOT NULL,
        dek_wrapped    TEXT NOT NULL,
        dek_wrap_tag   TEXT NOT NULL,
        alg            TEXT NOT NULL,
        mk_version     INTEGER NOT NULL
    )
"""


class PostgresRecordStore(RecordStore):
    """PostgreSQL storage backend for encrypted records."""

    def __init__(self, pool: asyncpg.Pool) -> None:
        """
        Initialize PostgreSQL storage.

        Args:
            pool: asyncpg connection pool
        """
        self._pool = pool

    @property
    def pool(self) -> asyncpg.Pool:
        """Get the connection pool."""
        return self._pool

    async def ensure_schema(self) -> None:
        """Create the tx_records table if it does not exist."""
        try:
            await self._pool.execute(SCHEMA)
        except asyncpg.PostgresError as e:
            raise StorageError(f"Failed to create schema: {e}") from e

    async def put(self, record: TxSecureRecord) -> None:
        query = """
            INSERT INTO tx_records (
                id, party_id, created_at,
                payload_nonce, payload_ct, payload_tag,
                dek_wrap_nonce, dek_wrapped, dek_wrap_tag,
                alg, mk_version
            )
            VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11)
        """
        try:
            await self._pool.execute(
                query,
                record.id,
                record.party_id,
                record.created_at,
                record.payload_nonce,
                record.payload_ct,
                record.payload_tag,
                record.dek_wrap_nonce,
                record.dek_wrapped,
                record.dek_wrap_tag,
                record.alg,
                record.mk_version,
            )
        except asyncpg.UniqueViolationError:
            raise StorageError(f"Record {record.id} already exists") from None
        except asyncpg.PostgresError as e:
            logger.warning("Failed to store record %s: %s", record.id, e)
            raise StorageError(f"Failed to store record: {e}") from e

    async def get(self, record_id: str) -> Optional[TxSecureRecord]:
        query = """
            SELECT id, party_id, created_at,
                   payload_nonce, payload_ct, payload_tag,
                   dek_wrap_nonce, dek_wrapped, dek_wrap_tag,
                   alg, mk_version
            FROM tx_records
            WHERE id = $1
        """
        try:
            row = await self._pool.fetchrow(query, record_id)
        except asyncpg.PostgresError as e:
            raise StorageError(f"Failed to get record: {e}") from e
        if row is None:
            return None
        return self._row_to_record(row)

    @staticmethod
    def _row_to_record(row: asyncpg.Record) -> TxSecureRecord:
        return TxSecureRecord(
            id=row["id"],
            party_id=row["party_id"],
            created_at=row["created_at"],
            payload_nonce=row["payload_nonce"],
            payload_ct=row["payload_ct"],
            payload_tag=row["payload_tag"],
            dek_wrap_nonce=row["dek_wrap_nonce"],
            dek_wrapped=row["dek_wrapped"],
            dek_wrap_tag=row["dek_wrap_tag"],
            alg=row["alg"],
            mk_version=row["mk_version"],
        )
