"""
Envelope codec for secure transaction records.

This module provides:
- EnvelopeCodec: Encrypts payloads into TxSecureRecords and back
- encrypt / decrypt: Module-level entry points using the default JSON codec

Layering:
- Payload -> DEK (fresh 32-byte key per record, never stored in the clear)
- DEK -> Master Key (wrapped with its own nonce and tag)

The codec is stateless; the master key is passed in on every call and the
DEK is wiped before the call returns.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .crypto import AES_256_KEY_SIZE, AesGcmCipher, KeyLike, SecureKey, check_key
from .errors import (
    AuthenticationFailure,
    DekUnwrapFailure,
    InternalInconsistency,
    InvalidInput,
    PayloadDecryptFailure,
)
from .record import DecryptResult, TxSecureRecord, generate_record_id
from .serialization import JsonPayloadCodec, PayloadCodec
from .validate import ALG_AES_256_GCM, MK_VERSION, validate_header, validate_record

logger = logging.getLogger(__name__)


class EnvelopeCodec:
    """
    Two-layer AES-256-GCM envelope encryption for JSON object payloads.

    Safe to share between threads: no state beyond the payload codec.
    """

    def __init__(self, payload_codec: Optional[PayloadCodec] = None) -> None:
        """
        Initialize EnvelopeCodec.

        Args:
            payload_codec: Payload serializer (defaults to canonical JSON)
        """
        self._payload_codec = payload_codec if payload_codec is not None else JsonPayloadCodec()

    def encrypt(
        self,
        party_id: str,
        payload: Dict[str, Any],
        master_key: KeyLike,
    ) -> TxSecureRecord:
        """
        Encrypt a payload into a new record.

        Args:
            party_id: Non-empty party/tenant tag, echoed back on decrypt
            payload: JSON object to protect
            master_key: 32-byte master key that wraps the DEK

        Returns:
            New TxSecureRecord

        Raises:
            InvalidKeyLength: If master_key is not 32 bytes
            InvalidInput: If party_id is empty or payload is not a JSON object
        """
        mk = check_key(master_key, "master key")

        if not isinstance(party_id, str) or not party_id:
            raise InvalidInput("partyId must be a non-empty string")
        if not isinstance(payload, dict):
            raise InvalidInput(
                f"payload must be a JSON object, got {type(payload).__name__}"
            )

        plaintext = self._payload_codec.encode(payload)

        with SecureKey.generate() as dek:
            sealed_payload = AesGcmCipher.seal(dek, plaintext)
            wrapped_dek = AesGcmCipher.seal(mk, dek.as_bytes())

        record = TxSecureRecord(
            id=generate_record_id(),
            party_id=party_id,
            created_at=datetime.now(timezone.utc),
            payload_nonce=sealed_payload.nonce.hex(),
            payload_ct=sealed_payload.ciphertext.hex(),
            payload_tag=sealed_payload.tag.hex(),
            dek_wrap_nonce=wrapped_dek.nonce.hex(),
            dek_wrapped=wrapped_dek.ciphertext.hex(),
            dek_wrap_tag=wrapped_dek.tag.hex(),
            alg=ALG_AES_256_GCM,
            mk_version=MK_VERSION,
        )
        logger.debug("Encrypted record %s for party %s", record.id, party_id)
        return record

    def decrypt(self, record: TxSecureRecord, master_key: KeyLike) -> DecryptResult:
        """
        Decrypt a record back to its payload.

        The record is validated before any key material is used and is never
        modified.

        Args:
            record: Record produced by encrypt
            master_key: The master key used at encrypt time

        Returns:
            DecryptResult with id, party id and payload

        Raises:
            InvalidKeyLength: If master_key is not 32 bytes
            MalformedRecord: If a binary field fails hex/length validation
            UnsupportedRecordFormat: If alg or mk_version is unknown
            DekUnwrapFailure: If the wrapped DEK fails authentication
            PayloadDecryptFailure: If the payload fails authentication
            InternalInconsistency: If authenticated data cannot be interpreted
        """
        mk = check_key(master_key, "master key")

        validate_record(record)
        validate_header(record)

        try:
            dek_bytes = AesGcmCipher.open(
                mk,
                bytes.fromhex(record.dek_wrap_nonce),
                bytes.fromhex(record.dek_wrapped),
                bytes.fromhex(record.dek_wrap_tag),
            )
        except AuthenticationFailure:
            logger.warning("DEK unwrap failed for record %s", record.id)
            raise DekUnwrapFailure() from None

        with SecureKey(dek_bytes) as dek:
            del dek_bytes
            if len(dek) != AES_256_KEY_SIZE:
                raise InternalInconsistency(
                    f"unwrapped DEK has {len(dek)} bytes, expected {AES_256_KEY_SIZE}"
                )
            try:
                plaintext = AesGcmCipher.open(
                    dek,
                    bytes.fromhex(record.payload_nonce),
                    bytes.fromhex(record.payload_ct),
                    bytes.fromhex(record.payload_tag),
                )
            except AuthenticationFailure:
                logger.warning("Payload decryption failed for record %s", record.id)
                raise PayloadDecryptFailure() from None

        payload = self._payload_codec.decode(plaintext)
        logger.debug("Decrypted record %s for party %s", record.id, record.party_id)
        return DecryptResult(id=record.id, party_id=record.party_id, payload=payload)


_default_codec = EnvelopeCodec()


def encrypt(party_id: str, payload: Dict[str, Any], master_key: KeyLike) -> TxSecureRecord:
    """Encrypt a payload with the default JSON codec. See EnvelopeCodec.encrypt."""
    return _default_codec.encrypt(party_id, payload, master_key)


def decrypt(record: TxSecureRecord, master_key: KeyLike) -> DecryptResult:
    """Decrypt a record with the default JSON codec. See EnvelopeCodec.decrypt."""
    return _default_codec.decrypt(record, master_key)
