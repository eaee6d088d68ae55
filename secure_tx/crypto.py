"""
Cryptographic primitives for AES-256-GCM envelope encryption.

This module provides:
- SecureKey: Secure key wrapper with best-effort zeroization
- SealedBox: AEAD output split into ciphertext, nonce and tag
- AesGcmCipher: AES-256-GCM seal/open operations
"""

from __future__ import annotations

import secrets
from dataclasses import dataclass
from typing import Union

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from .errors import AuthenticationFailure, CryptoError, InvalidKeyLength

# Cryptographic constants
AES_256_KEY_SIZE: int = 32  # 256 bits
NONCE_SIZE: int = 12  # 96 bits (standard for AES-GCM)
TAG_SIZE: int = 16  # 128 bits (authentication tag)


class SecureKey:
    """
    Secure key wrapper with memory cleanup on wipe or deletion.

    Uses bytearray internally for mutable zeroing.
    Note: Python's garbage collector doesn't guarantee immediate cleanup,
    and every ``as_bytes()`` call makes an immutable copy, so this is
    best-effort zeroization.
    """

    __slots__ = ("_bytes",)

    def __init__(self, key_bytes: Union[bytes, bytearray]) -> None:
        """
        Create a SecureKey from raw bytes.

        Args:
            key_bytes: Raw key material (should be 32 bytes for AES-256)
        """
        if not isinstance(key_bytes, (bytes, bytearray)):
            raise CryptoError("Key must be bytes or bytearray")
        self._bytes = bytearray(key_bytes)

    @classmethod
    def generate(cls) -> SecureKey:
        """Generate a cryptographically secure random 32-byte key."""
        return cls(generate_random_bytes(AES_256_KEY_SIZE))

    def as_bytes(self) -> bytes:
        """Return key as immutable bytes."""
        return bytes(self._bytes)

    def wipe(self) -> None:
        """Overwrite the key material with zeros."""
        for i in range(len(self._bytes)):
            self._bytes[i] = 0

    def __len__(self) -> int:
        return len(self._bytes)

    def __repr__(self) -> str:
        """Redacted representation to prevent accidental key disclosure."""
        return "SecureKey([REDACTED])"

    def __enter__(self) -> SecureKey:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.wipe()

    def __del__(self) -> None:
        if hasattr(self, "_bytes"):
            self.wipe()


KeyLike = Union[SecureKey, bytes, bytearray]


@dataclass(frozen=True)
class SealedBox:
    """AES-GCM output with the authentication tag kept apart from the ciphertext."""

    ciphertext: bytes  # same length as the plaintext
    nonce: bytes  # 12 bytes
    tag: bytes  # 16 bytes


def check_key(key: KeyLike, label: str = "key") -> bytes:
    """
    Return raw key bytes after enforcing the AES-256 key size.

    Raises:
        InvalidKeyLength: If the key is not 32 bytes or not key material at all
    """
    if isinstance(key, SecureKey):
        raw = key.as_bytes()
    elif isinstance(key, (bytes, bytearray)):
        raw = bytes(key)
    else:
        raise InvalidKeyLength(f"{label} must be bytes, got {type(key).__name__}")

    if len(raw) != AES_256_KEY_SIZE:
        raise InvalidKeyLength(
            f"{label} must be exactly {AES_256_KEY_SIZE} bytes, got {len(raw)}"
        )
    return raw


class AesGcmCipher:
    """
    AES-256-GCM authenticated encryption.

    Both directions use empty associated data. Every seal draws a fresh
    random nonce; nonces are never derived from the input.
    """

    @staticmethod
    def seal(key: KeyLike, plaintext: bytes) -> SealedBox:
        """
        Encrypt plaintext with AES-256-GCM.

        Args:
            key: 32-byte encryption key
            plaintext: Data to encrypt

        Returns:
            SealedBox with ciphertext, nonce and tag

        Raises:
            InvalidKeyLength: If the key is not 32 bytes
        """
        aesgcm = AESGCM(check_key(key))
        nonce = generate_random_bytes(NONCE_SIZE)
        sealed = aesgcm.encrypt(nonce, plaintext, None)
        return SealedBox(
            ciphertext=sealed[:-TAG_SIZE],
            nonce=nonce,
            tag=sealed[-TAG_SIZE:],
        )

    @staticmethod
    def open(key: KeyLike, nonce: bytes, ciphertext: bytes, tag: bytes) -> bytes:
        """
        Decrypt and authenticate AES-256-GCM ciphertext.

        Args:
            key: 32-byte decryption key
            nonce: 12-byte nonce used at seal time
            ciphertext: Ciphertext without the tag
            tag: 16-byte authentication tag

        Returns:
            Decrypted plaintext bytes

        Raises:
            InvalidKeyLength: If the key is not 32 bytes
            CryptoError: If nonce or tag size is invalid
            AuthenticationFailure: If the tag does not verify
        """
        aesgcm = AESGCM(check_key(key))

        if len(nonce) != NONCE_SIZE:
            raise CryptoError(
                f"Invalid nonce size: expected {NONCE_SIZE}, got {len(nonce)}"
            )
        if len(tag) != TAG_SIZE:
            raise CryptoError(f"Invalid tag size: expected {TAG_SIZE}, got {len(tag)}")

        try:
            return aesgcm.decrypt(nonce, ciphertext + tag, None)
        except InvalidTag:
            # Generic error to prevent oracle attacks
            raise AuthenticationFailure("Authentication failed") from None


def generate_random_bytes(length: int) -> bytes:
    """
    Generate cryptographically secure random bytes.

    Args:
        length: Number of bytes to generate

    Returns:
        Random bytes of specified length
    """
    return secrets.token_bytes(length)
