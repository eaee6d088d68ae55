"""
Storage abstractions for encrypted records.

This module provides:
- RecordStore: Abstract interface for record storage backends
- InMemoryRecordStore: In-memory implementation for testing and development
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from typing import Dict, Optional

from .errors import StorageError
from .record import TxSecureRecord


class RecordStore(ABC):
    """
    Abstract storage interface for encrypted records.

    All methods are async to support both in-memory and database backends.
    Stores only ever see ciphertext; they never receive key material.
    """

    @abstractmethod
    async def put(self, record: TxSecureRecord) -> None:
        """
        Store a new record.

        Raises:
            StorageError: If a record with the same id already exists
        """
        ...

    @abstractmethod
    async def get(self, record_id: str) -> Optional[TxSecureRecord]:
        """Get a record by id, or None if absent."""
        ...


class InMemoryRecordStore(RecordStore):
    """
    In-memory record store.

    Uses asyncio.Lock for safe concurrent access. No eviction, no persistence.
    """

    def __init__(self) -> None:
        self._records: Dict[str, TxSecureRecord] = {}
        self._lock = asyncio.Lock()

    async def put(self, record: TxSecureRecord) -> None:
        async with self._lock:
            if record.id in self._records:
                raise StorageError(f"Record {record.id} already exists")
            self._records[record.id] = record

    async def get(self, record_id: str) -> Optional[TxSecureRecord]:
        async with self._lock:
            return self._records.get(record_id)

    def __len__(self) -> int:
        return len(self._records)
