"""
Validation gate for stored records.

Runs purely on the record's string fields, before any key material is
touched, so forged or corrupted records are rejected without handing
attacker-controlled lengths to the AEAD primitive.
"""

from __future__ import annotations

import re
from typing import Any

from .crypto import NONCE_SIZE, TAG_SIZE
from .errors import MalformedRecord, UnsupportedRecordFormat

ALG_AES_256_GCM = "AES-256-GCM"
MK_VERSION = 1

_HEX_RE = re.compile(r"[0-9a-fA-F]*")

# Gate order: (field, required byte length or None for ciphertext)
RECORD_BINARY_FIELDS = (
    ("payload_nonce", NONCE_SIZE),
    ("payload_ct", None),
    ("payload_tag", TAG_SIZE),
    ("dek_wrap_nonce", NONCE_SIZE),
    ("dek_wrapped", None),
    ("dek_wrap_tag", TAG_SIZE),
)


def is_valid_hex(value: Any) -> bool:
    """Check that value is an even-length hex string (empty allowed)."""
    return (
        isinstance(value, str)
        and len(value) % 2 == 0
        and _HEX_RE.fullmatch(value) is not None
    )


def validate_hex(value: Any, label: str) -> None:
    """Raise MalformedRecord unless value is well-formed hex."""
    if not isinstance(value, str):
        raise MalformedRecord(label, "expected a hex string")
    if not is_valid_hex(value):
        raise MalformedRecord(label, "invalid hex encoding")


def validate_hex_length(value: Any, byte_len: int, label: str) -> None:
    """Validate that a hex string represents exactly ``byte_len`` bytes."""
    validate_hex(value, label)
    actual = len(value) // 2
    if actual != byte_len:
        raise MalformedRecord(label, f"expected {byte_len} bytes, got {actual}")


def validate_nonce(value: Any, label: str) -> None:
    """Validate nonce is exactly 12 bytes (24 hex chars)."""
    validate_hex_length(value, NONCE_SIZE, label)


def validate_tag(value: Any, label: str) -> None:
    """Validate auth tag is exactly 16 bytes (32 hex chars)."""
    validate_hex_length(value, TAG_SIZE, label)


def validate_record(record: Any) -> None:
    """
    Validate all binary fields of a record.

    Args:
        record: Anything exposing the six binary fields as attributes

    Raises:
        MalformedRecord: Naming the first offending field
    """
    for name, byte_len in RECORD_BINARY_FIELDS:
        value = getattr(record, name, None)
        if byte_len is None:
            validate_hex(value, name)
        else:
            validate_hex_length(value, byte_len, name)


def validate_header(record: Any) -> None:
    """
    Reject algorithm tags and key versions other than the supported pair.

    Raises:
        UnsupportedRecordFormat: Naming ``alg`` or ``mk_version``
    """
    alg = getattr(record, "alg", None)
    if alg != ALG_AES_256_GCM:
        raise UnsupportedRecordFormat("alg", f"unsupported algorithm {alg!r}")

    mk_version = getattr(record, "mk_version", None)
    # bool is an int subclass; True must not pass for version 1
    if type(mk_version) is not int or mk_version != MK_VERSION:
        raise UnsupportedRecordFormat(
            "mk_version", f"unsupported master key version {mk_version!r}"
        )
