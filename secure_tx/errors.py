"""
Exception classes for secure transaction record operations.

Every failure raised by the package derives from EnvelopeError so callers can
catch the whole family at their boundary and map it to their own responses.
"""

from __future__ import annotations

from typing import Optional


class EnvelopeError(Exception):
    """Base exception for all envelope encryption operations."""

    pass


class InvalidKeyLength(EnvelopeError):
    """Key is not exactly 32 bytes (caller precondition violation)."""

    pass


class InvalidInput(EnvelopeError):
    """Party id or payload rejected before encryption."""

    pass


class MalformedRecord(EnvelopeError):
    """Record failed structural validation before any cryptographic work."""

    def __init__(self, field: str, reason: str) -> None:
        super().__init__(f"{field}: {reason}")
        self.field = field
        self.reason = reason


class UnsupportedRecordFormat(MalformedRecord):
    """Record carries an algorithm tag or key version this build cannot read."""

    pass


class CryptoError(EnvelopeError):
    """Cryptographic operation failed (encryption, decryption, key generation)."""

    pass


class AuthenticationFailure(CryptoError):
    """AEAD tag did not verify."""

    pass


class DecryptionFailed(EnvelopeError):
    """
    Record could not be decrypted.

    Subclasses record which layer failed in ``layer`` for diagnosis, but all of
    them render the same message so the text carries no tampering oracle.
    """

    layer: Optional[str] = None

    def __init__(self, message: str = "Decryption failed") -> None:
        super().__init__(message)


class DekUnwrapFailure(DecryptionFailed):
    """Wrapped DEK failed authentication (wrong master key or corrupted wrap)."""

    layer = "dek_wrap"


class PayloadDecryptFailure(DecryptionFailed):
    """Payload failed authentication (tampering or corruption)."""

    layer = "payload"


class InternalInconsistency(EnvelopeError):
    """Authenticated data could not be interpreted; encrypt/decrypt are mismatched."""

    pass


class RecordNotFoundError(EnvelopeError):
    """Record not found in storage."""

    pass


class StorageError(EnvelopeError):
    """Storage backend error (database, in-memory, etc.)."""

    pass


class ConfigError(EnvelopeError):
    """Configuration error."""

    pass
