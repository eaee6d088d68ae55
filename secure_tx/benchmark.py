"""
Secure Transaction Benchmark CLI.

Usage:
    secure-tx-benchmark [COUNT]

Or run directly:
    python -m secure_tx.benchmark 500

Configuration (environment or .env file):
    MASTER_KEY    64 hex chars; a random ephemeral key is used if unset
    DATABASE_URL  Use PostgreSQL storage; in-memory storage if unset
"""

from __future__ import annotations

import asyncio
import sys
import time
from typing import List, Optional

import asyncpg

from secure_tx.config import key_fingerprint, load_settings
from secure_tx.postgres import PostgresRecordStore
from secure_tx.service import TxService
from secure_tx.storage import InMemoryRecordStore, RecordStore

DEFAULT_COUNT = 1000


def _rate(count: int, duration: float) -> str:
    return f"{count / duration:.2f}" if duration > 0 else "inf"


async def _run_phases(service: TxService, count: int) -> None:
    # Encrypt + store
    ids: List[str] = []
    start = time.perf_counter()
    for i in range(count):
        record = await service.encrypt_and_store(
            f"party_{i % 10}", {"amount": i, "currency": "AED", "seq": i}
        )
        ids.append(record.id)
    encrypt_duration = time.perf_counter() - start
    print(f"[OK] Encrypted and stored {count} records")
    print(f"[PERF] Time: {encrypt_duration * 1000:.3f}ms | Rate: {_rate(count, encrypt_duration)} ops/sec\n")

    # Lookup
    start = time.perf_counter()
    for record_id in ids:
        await service.get_record(record_id)
    lookup_duration = time.perf_counter() - start
    print(f"[OK] Looked up {count} records")
    print(f"[PERF] Time: {lookup_duration * 1000:.3f}ms | Rate: {_rate(count, lookup_duration)} ops/sec\n")

    # Decrypt
    start = time.perf_counter()
    for i, record_id in enumerate(ids):
        result = await service.decrypt_record(record_id)
        if result.payload["seq"] != i:
            print(f"[ERROR] Payload mismatch for record {record_id}")
            sys.exit(1)
    decrypt_duration = time.perf_counter() - start
    print(f"[OK] Decrypted and verified {count} records")
    print(f"[PERF] Time: {decrypt_duration * 1000:.3f}ms | Rate: {_rate(count, decrypt_duration)} ops/sec\n")


async def run_benchmark(count: int = DEFAULT_COUNT, database_url: Optional[str] = None) -> None:
    """Run the encrypt/lookup/decrypt benchmark over ``count`` records."""
    print("=== Secure Transaction Benchmark ===\n")

    settings = load_settings(generate_if_missing=True)
    database_url = database_url or settings.database_url

    pool = None
    try:
        store: RecordStore
        if database_url:
            pool = await asyncpg.create_pool(database_url)
            if pool is None:
                print("ERROR: Failed to create connection pool")
                sys.exit(1)
            pg_store = PostgresRecordStore(pool)
            await pg_store.ensure_schema()
            store = pg_store
            print("[STARTUP] Storage: PostgreSQL")
        else:
            store = InMemoryRecordStore()
            print("[STARTUP] Storage: in-memory")

        fingerprint = key_fingerprint(settings.master_key)
        suffix = " (ephemeral)" if settings.ephemeral_key else ""
        print(f"[STARTUP] Master key: {fingerprint}{suffix}")
        print(f"Testing with {count} records\n")

        await _run_phases(TxService(store, settings.master_key), count)
    finally:
        if pool is not None:
            await pool.close()

    print("=" * 70)
    print("                    BENCHMARK COMPLETE")
    print("=" * 70 + "\n")


def main(argv: Optional[List[str]] = None) -> None:
    """CLI entry point for secure-tx-benchmark command."""
    args = sys.argv[1:] if argv is None else argv
    try:
        count = int(args[0]) if args else DEFAULT_COUNT
    except ValueError:
        print(f"ERROR: COUNT must be an integer, got {args[0]!r}")
        sys.exit(2)
    if count <= 0:
        print("ERROR: COUNT must be positive")
        sys.exit(2)
    asyncio.run(run_benchmark(count))


if __name__ == "__main__":
    main()
