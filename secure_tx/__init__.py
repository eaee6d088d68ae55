"""
Secure Transaction Records

Envelope encryption for JSON records: each record is encrypted under a fresh
per-record DEK, and the DEK is wrapped under a long-lived master key.

Quick Start
-----------
```python
from secure_tx import TxSecureRecord, decrypt, encrypt, load_settings

settings = load_settings()  # MASTER_KEY from environment or .env

record = encrypt("party_123", {"amount": 100, "currency": "AED"}, settings.master_key)
wire = record.to_dict()  # flat JSON object, binary fields as hex

result = decrypt(TxSecureRecord.from_dict(wire), settings.master_key)
assert result.payload == {"amount": 100, "currency": "AED"}
```

Key Features
------------
- **AES-256-GCM**: Authenticated encryption for both payload and DEK wrap
- **One DEK per record**: Never reused, never stored in the clear
- **Validation gate**: Malformed records rejected before any crypto runs
- **Pluggable storage**: In-memory or PostgreSQL record stores
- **Memory Security**: Best-effort DEK zeroization after each call
"""

__version__ = "0.1.0"

# =============================================================================
# Crypto Exports
# =============================================================================

from .crypto import (
    AES_256_KEY_SIZE,
    NONCE_SIZE,
    TAG_SIZE,
    AesGcmCipher,
    SealedBox,
    SecureKey,
    generate_random_bytes,
)

# =============================================================================
# Error Exports
# =============================================================================

from .errors import (
    AuthenticationFailure,
    ConfigError,
    CryptoError,
    DecryptionFailed,
    DekUnwrapFailure,
    EnvelopeError,
    InternalInconsistency,
    InvalidInput,
    InvalidKeyLength,
    MalformedRecord,
    PayloadDecryptFailure,
    RecordNotFoundError,
    StorageError,
    UnsupportedRecordFormat,
)

# =============================================================================
# Record / Codec Exports (Primary API)
# =============================================================================

from .record import DecryptResult, TxSecureRecord
from .serialization import JsonPayloadCodec, PayloadCodec
from .validate import (
    ALG_AES_256_GCM,
    MK_VERSION,
    is_valid_hex,
    validate_nonce,
    validate_record,
    validate_tag,
)
from .envelope import EnvelopeCodec, decrypt, encrypt

# =============================================================================
# Storage / Service / Config Exports
# =============================================================================

from .storage import InMemoryRecordStore, RecordStore
from .postgres import PostgresRecordStore
from .service import TxService
from .config import Settings, key_fingerprint, load_settings, parse_master_key

# =============================================================================
# Public API
# =============================================================================

__all__ = [
    # Version
    "__version__",
    # Crypto
    "AES_256_KEY_SIZE",
    "NONCE_SIZE",
    "TAG_SIZE",
    "AesGcmCipher",
    "SealedBox",
    "SecureKey",
    "generate_random_bytes",
    # Errors
    "EnvelopeError",
    "InvalidKeyLength",
    "InvalidInput",
    "MalformedRecord",
    "UnsupportedRecordFormat",
    "CryptoError",
    "AuthenticationFailure",
    "DecryptionFailed",
    "DekUnwrapFailure",
    "PayloadDecryptFailure",
    "InternalInconsistency",
    "RecordNotFoundError",
    "StorageError",
    "ConfigError",
    # Records / codec (Primary API)
    "TxSecureRecord",
    "DecryptResult",
    "PayloadCodec",
    "JsonPayloadCodec",
    "ALG_AES_256_GCM",
    "MK_VERSION",
    "is_valid_hex",
    "validate_nonce",
    "validate_tag",
    "validate_record",
    "EnvelopeCodec",
    "encrypt",
    "decrypt",
    # Storage / service / config
    "RecordStore",
    "InMemoryRecordStore",
    "PostgresRecordStore",
    "TxService",
    "Settings",
    "load_settings",
    "parse_master_key",
    "key_fingerprint",
]
