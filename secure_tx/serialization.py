"""
Payload serialization boundary.

The envelope codec only needs an encode/decode pair that round-trips any
JSON-representable object; the exact byte layout is not part of the record
contract because decrypt always re-parses.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Protocol

from .errors import InternalInconsistency, InvalidInput


class PayloadCodec(Protocol):
    """Converts payload objects to plaintext bytes and back."""

    def encode(self, payload: Dict[str, Any]) -> bytes:
        """
        Raises:
            InvalidInput: If the payload is not JSON-representable
        """
        ...

    def decode(self, data: bytes) -> Dict[str, Any]:
        """
        Raises:
            InternalInconsistency: If the bytes are not an encoded object
        """
        ...


class JsonPayloadCodec:
    """Canonical JSON: ASCII-escaped, sorted keys, compact separators, no NaN/Infinity."""

    def encode(self, payload: Dict[str, Any]) -> bytes:
        try:
            text = json.dumps(
                payload,
                sort_keys=True,
                separators=(",", ":"),
                allow_nan=False,
            )
        except (TypeError, ValueError) as e:
            raise InvalidInput(f"payload is not JSON-representable: {e}") from e
        return text.encode("utf-8")

    def decode(self, data: bytes) -> Dict[str, Any]:
        try:
            payload = json.loads(data.decode("utf-8"))
        except (UnicodeDecodeError, ValueError) as e:
            raise InternalInconsistency(f"decrypted payload is not valid JSON: {e}") from e
        if not isinstance(payload, dict):
            raise InternalInconsistency(
                f"decrypted payload is not a JSON object (got {type(payload).__name__})"
            )
        return payload
