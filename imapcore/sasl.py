"""Base64 framing of SASL challenges and responses."""

from __future__ import annotations

import base64


def encode_sasl(data: bytes) -> str:
    """Encode a SASL payload; an empty payload is sent as "="."""
    if not data:
        return "="
    return base64.b64encode(data).decode("ascii")


def decode_sasl(text: str) -> bytes:
    """Decode a SASL payload; "=" stands for an empty one.

    Raises ValueError on malformed base64.
    """
    if text == "=":
        return b""
    return base64.b64decode(text, validate=True)