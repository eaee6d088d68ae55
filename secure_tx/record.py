"""
Secure transaction record types.

This module provides:
- TxSecureRecord: The persisted/transmitted encrypted record
- DecryptResult: Result of a successful decryption
- Wire (de)serialization to the flat 11-field JSON object
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Mapping

from .crypto import generate_random_bytes
from .errors import MalformedRecord
from .validate import ALG_AES_256_GCM, MK_VERSION

RECORD_ID_BYTES = 16  # 128-bit ids, 32 hex chars

_STRING_FIELDS = (
    "payload_nonce",
    "payload_ct",
    "payload_tag",
    "dek_wrap_nonce",
    "dek_wrapped",
    "dek_wrap_tag",
    "alg",
)


def generate_record_id() -> str:
    """Generate a fresh 128-bit record id as lowercase hex."""
    return generate_random_bytes(RECORD_ID_BYTES).hex()


def format_timestamp(value: datetime) -> str:
    """Format a datetime as UTC ISO-8601 with milliseconds, e.g. ``2024-05-01T12:00:00.000Z``."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp (``Z`` suffix accepted) into an aware datetime."""
    if value.endswith(("Z", "z")):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass(frozen=True)
class TxSecureRecord:
    """
    Encrypted transaction record.

    Binary values are stored as hex strings. Records are immutable; the
    record store owns them after creation.
    """

    id: str
    party_id: str
    created_at: datetime

    # Encrypted payload (12-byte nonce, ciphertext, 16-byte tag)
    payload_nonce: str
    payload_ct: str
    payload_tag: str

    # Wrapped DEK (12-byte nonce, ciphertext, 16-byte tag)
    dek_wrap_nonce: str
    dek_wrapped: str
    dek_wrap_tag: str

    alg: str = ALG_AES_256_GCM
    mk_version: int = MK_VERSION

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the flat wire object (JSON-ready, camelCase ids)."""
        return {
            "id": self.id,
            "partyId": self.party_id,
            "createdAt": format_timestamp(self.created_at),
            "payload_nonce": self.payload_nonce,
            "payload_ct": self.payload_ct,
            "payload_tag": self.payload_tag,
            "dek_wrap_nonce": self.dek_wrap_nonce,
            "dek_wrapped": self.dek_wrapped,
            "dek_wrap_tag": self.dek_wrap_tag,
            "alg": self.alg,
            "mk_version": self.mk_version,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TxSecureRecord:
        """
        Parse a wire object into a record.

        Only field presence and JSON types are checked here; hex content is
        left to the validation gate so decrypt reports it uniformly.

        Raises:
            MalformedRecord: If a field is missing or has the wrong type
        """
        if not isinstance(data, Mapping):
            raise MalformedRecord("record", "expected a JSON object")

        for name in ("id", "partyId", "createdAt") + _STRING_FIELDS:
            if name not in data:
                raise MalformedRecord(name, "missing field")
            if not isinstance(data[name], str):
                raise MalformedRecord(name, "expected a string")

        if "mk_version" not in data:
            raise MalformedRecord("mk_version", "missing field")
        mk_version = data["mk_version"]
        if type(mk_version) is not int:
            raise MalformedRecord("mk_version", "expected an integer")

        try:
            created_at = parse_timestamp(data["createdAt"])
        except ValueError:
            raise MalformedRecord("createdAt", "invalid timestamp") from None

        return cls(
            id=data["id"],
            party_id=data["partyId"],
            created_at=created_at,
            payload_nonce=data["payload_nonce"],
            payload_ct=data["payload_ct"],
            payload_tag=data["payload_tag"],
            dek_wrap_nonce=data["dek_wrap_nonce"],
            dek_wrapped=data["dek_wrapped"],
            dek_wrap_tag=data["dek_wrap_tag"],
            alg=data["alg"],
            mk_version=mk_version,
        )


@dataclass(frozen=True)
class DecryptResult:
    """Result of a successful decryption."""

    id: str
    party_id: str
    payload: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "partyId": self.party_id, "payload": self.payload}
