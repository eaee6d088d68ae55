"""
Record service: envelope codec plus an injected record store.

Exposes the three operations an API layer needs (encrypt and store, look up,
decrypt by id) without any transport concerns.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from .crypto import KeyLike, check_key
from .envelope import EnvelopeCodec
from .errors import RecordNotFoundError
from .record import DecryptResult, TxSecureRecord
from .storage import RecordStore

logger = logging.getLogger(__name__)


class TxService:
    """Encrypts, stores and decrypts transaction records."""

    def __init__(
        self,
        store: RecordStore,
        master_key: KeyLike,
        codec: Optional[EnvelopeCodec] = None,
    ) -> None:
        """
        Initialize TxService.

        Args:
            store: RecordStore backend
            master_key: 32-byte master key used for every record
            codec: EnvelopeCodec (defaults to the JSON codec)

        Raises:
            InvalidKeyLength: If master_key is not 32 bytes
        """
        check_key(master_key, "master key")
        self._store = store
        self._master_key = master_key
        self._codec = codec if codec is not None else EnvelopeCodec()

    @property
    def store(self) -> RecordStore:
        return self._store

    async def encrypt_and_store(
        self, party_id: str, payload: Dict[str, Any]
    ) -> TxSecureRecord:
        """
        Encrypt a payload and persist the resulting record.

        Returns:
            The stored record
        """
        record = self._codec.encrypt(party_id, payload, self._master_key)
        await self._store.put(record)
        logger.info("Stored record %s for party %s", record.id, party_id)
        return record

    async def get_record(self, record_id: str) -> Optional[TxSecureRecord]:
        """Return the stored record unchanged, or None."""
        return await self._store.get(record_id)

    async def decrypt_record(self, record_id: str) -> DecryptResult:
        """
        Look up a record and decrypt it.

        Raises:
            RecordNotFoundError: If no record has this id
            EnvelopeError: Any decrypt failure from the codec
        """
        record = await self._store.get(record_id)
        if record is None:
            raise RecordNotFoundError(f"Record {record_id}")
        return self._codec.decrypt(record, self._master_key)
