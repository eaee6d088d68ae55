"""
Configuration loading.

The master key is read from the environment (or a ``.env`` file) into a
Settings value that callers pass explicitly to the codec or service. Nothing
here is module-level state.
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Union

from cryptography.hazmat.primitives import hashes
from dotenv import load_dotenv

from .crypto import AES_256_KEY_SIZE, KeyLike, SecureKey, check_key
from .errors import ConfigError, InvalidKeyLength

logger = logging.getLogger(__name__)

MASTER_KEY_ENV = "MASTER_KEY"
DATABASE_URL_ENV = "DATABASE_URL"

_HEX_KEY_RE = re.compile(r"[0-9a-fA-F]{%d}" % (AES_256_KEY_SIZE * 2))


@dataclass
class Settings:
    """Runtime settings."""

    master_key: SecureKey
    database_url: Optional[str] = None
    ephemeral_key: bool = False  # True when the key was generated at startup


def parse_master_key(value: str) -> SecureKey:
    """
    Parse a 64-character hex master key.

    Raises:
        ConfigError: If the value is not 32 bytes of hex
    """
    value = value.strip()
    if not _HEX_KEY_RE.fullmatch(value):
        raise ConfigError(
            f"{MASTER_KEY_ENV} must be {AES_256_KEY_SIZE * 2} hex characters"
        )
    return SecureKey(bytes.fromhex(value))


def key_fingerprint(key: KeyLike) -> str:
    """Short SHA-256 fingerprint of a key, safe to log."""
    try:
        raw = check_key(key)
    except InvalidKeyLength as e:
        raise ConfigError(str(e)) from e
    digest = hashes.Hash(hashes.SHA256())
    digest.update(raw)
    return digest.finalize().hex()[:16]


def load_settings(
    env_file: Optional[Union[str, Path]] = None,
    *,
    environ: Optional[Mapping[str, str]] = None,
    generate_if_missing: bool = False,
) -> Settings:
    """
    Load settings from the environment.

    Args:
        env_file: Optional .env path (default: search from the working directory)
        environ: Mapping to read instead of os.environ (skips .env loading)
        generate_if_missing: Generate a random master key if none is configured.
            Records encrypted under it become unreadable after restart.

    Returns:
        Settings

    Raises:
        ConfigError: If the master key is missing or malformed
    """
    if environ is None:
        load_dotenv(env_file)
        environ = os.environ

    database_url = environ.get(DATABASE_URL_ENV) or None
    raw_key = environ.get(MASTER_KEY_ENV)

    if raw_key:
        master_key = parse_master_key(raw_key)
        ephemeral = False
    elif generate_if_missing:
        master_key = SecureKey.generate()
        ephemeral = True
        logger.warning(
            "%s not set; generated ephemeral master key %s",
            MASTER_KEY_ENV,
            key_fingerprint(master_key),
        )
    else:
        raise ConfigError(f"{MASTER_KEY_ENV} must be set in environment or .env file")

    logger.info("Loaded master key %s", key_fingerprint(master_key))
    return Settings(master_key=master_key, database_url=database_url, ephemeral_key=ephemeral)
