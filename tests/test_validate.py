"""
Tests for the record validation gate.
"""

from __future__ import annotations

from dataclasses import replace

import pytest

from secure_tx import (
    MalformedRecord,
    TxSecureRecord,
    UnsupportedRecordFormat,
    is_valid_hex,
    validate_nonce,
    validate_record,
    validate_tag,
)
from secure_tx.validate import validate_header

BINARY_FIELDS = [
    "payload_nonce",
    "payload_ct",
    "payload_tag",
    "dek_wrap_nonce",
    "dek_wrapped",
    "dek_wrap_tag",
]


def test_is_valid_hex() -> None:
    assert is_valid_hex("abcdef0123456789")
    assert is_valid_hex("ABCDEF")
    assert is_valid_hex("")
    assert not is_valid_hex("xyz123")
    assert not is_valid_hex("abc")
    assert not is_valid_hex("aa bb")
    assert not is_valid_hex("0x00")
    assert not is_valid_hex(None)


def test_valid_record_passes(record: TxSecureRecord) -> None:
    validate_record(record)
    validate_header(record)


def test_mixed_case_hex_passes(record: TxSecureRecord) -> None:
    validate_record(replace(record, payload_ct=record.payload_ct.upper()))


def test_empty_ciphertext_passes_gate(record: TxSecureRecord) -> None:
    validate_record(replace(record, payload_ct=""))


@pytest.mark.parametrize("field", ["payload_nonce", "dek_wrap_nonce"])
@pytest.mark.parametrize("hex_len", [22, 26])
def test_nonce_length(record: TxSecureRecord, field: str, hex_len: int) -> None:
    bad = replace(record, **{field: "ab" * (hex_len // 2)})
    with pytest.raises(MalformedRecord) as exc_info:
        validate_record(bad)
    assert exc_info.value.field == field


@pytest.mark.parametrize("field", ["payload_tag", "dek_wrap_tag"])
@pytest.mark.parametrize("byte_len", [15, 17])
def test_tag_length(record: TxSecureRecord, field: str, byte_len: int) -> None:
    bad = replace(record, **{field: "cd" * byte_len})
    with pytest.raises(MalformedRecord) as exc_info:
        validate_record(bad)
    assert exc_info.value.field == field
    assert f"got {byte_len}" in str(exc_info.value)


@pytest.mark.parametrize("field", BINARY_FIELDS)
def test_non_hex_prefix(record: TxSecureRecord, field: str) -> None:
    bad = replace(record, **{field: "gg" + getattr(record, field)})
    with pytest.raises(MalformedRecord, match="invalid hex") as exc_info:
        validate_record(bad)
    assert exc_info.value.field == field


@pytest.mark.parametrize("field", BINARY_FIELDS)
def test_odd_length(record: TxSecureRecord, field: str) -> None:
    bad = replace(record, **{field: getattr(record, field) + "a"})
    with pytest.raises(MalformedRecord) as exc_info:
        validate_record(bad)
    assert exc_info.value.field == field


@pytest.mark.parametrize("field", BINARY_FIELDS)
def test_non_string_field(record: TxSecureRecord, field: str) -> None:
    bad = replace(record, **{field: None})
    with pytest.raises(MalformedRecord) as exc_info:
        validate_record(bad)
    assert exc_info.value.field == field


def test_first_offending_field_is_reported(record: TxSecureRecord) -> None:
    bad = replace(record, payload_tag="zz", dek_wrap_nonce="zz")
    with pytest.raises(MalformedRecord) as exc_info:
        validate_record(bad)
    assert exc_info.value.field == "payload_tag"


def test_validation_is_idempotent(record: TxSecureRecord) -> None:
    validate_record(record)
    validate_record(record)

    bad = replace(record, dek_wrapped="not hex!")
    outcomes = []
    for _ in range(2):
        with pytest.raises(MalformedRecord) as exc_info:
            validate_record(bad)
        outcomes.append(str(exc_info.value))
    assert outcomes[0] == outcomes[1]


def test_validate_nonce_and_tag_helpers() -> None:
    validate_nonce("00" * 12, "n")
    validate_tag("00" * 16, "t")
    with pytest.raises(MalformedRecord):
        validate_nonce("aabb", "test_nonce")
    with pytest.raises(MalformedRecord):
        validate_tag("aabb", "test_tag")


def test_header_rejects_unknown_alg(record: TxSecureRecord) -> None:
    with pytest.raises(UnsupportedRecordFormat) as exc_info:
        validate_header(replace(record, alg="AES-128-CBC"))
    assert exc_info.value.field == "alg"


@pytest.mark.parametrize("version", [0, 2, True, "1"])
def test_header_rejects_unknown_mk_version(record: TxSecureRecord, version: object) -> None:
    with pytest.raises(UnsupportedRecordFormat) as exc_info:
        validate_header(replace(record, mk_version=version))
    assert exc_info.value.field == "mk_version"
