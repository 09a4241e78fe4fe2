"""Modified UTF-7 for IMAP mailbox names (RFC 3501 section 5.1.3)."""

from __future__ import annotations

import base64
import binascii
import itertools
import struct

_MIN = 0x20
_MAX = 0x7E
_ALPHABET = frozenset("ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+,")
_ALTCHARS = b"+,"


class InvalidUTF7Error(ValueError):
    """Raised when input is not valid modified UTF-7."""

    def __init__(self, message: str = "utf7: invalid UTF-7") -> None:
        super().__init__(message)


def _is_printable(ch: str) -> bool:
    return _MIN <= ord(ch) <= _MAX


def _from_lenient_utf8(data: bytes) -> str:
    # Every byte that is not part of a valid sequence becomes U+FFFD.
    text = data.decode("utf-8", "surrogateescape")
    return "".join("\ufffd" if "\udc80" <= c <= "\udcff" else c for c in text)


def _encode_segment(chunk: str) -> str:
    raw = chunk.encode("utf-16-be", "surrogatepass")
    b64 = base64.b64encode(raw, altchars=_ALTCHARS).rstrip(b"=").decode("ascii")
    return f"&{b64}-"


def encode(text: str | bytes) -> str:
    """Encode a mailbox name. Bytes are read as UTF-8; bad bytes become U+FFFD."""
    if isinstance(text, (bytes, bytearray)):
        text = _from_lenient_utf8(bytes(text))
    parts = []
    for printable, run in itertools.groupby(text, _is_printable):
        chunk = "".join(run)
        parts.append(chunk.replace("&", "&-") if printable else _encode_segment(chunk))
    return "".join(parts)


def _decode_segment(segment: str) -> str:
    if not set(segment) <= _ALPHABET or len(segment) % 4 == 1:
        raise InvalidUTF7Error()
    padded = segment + "=" * (-len(segment) % 4)
    try:
        raw = base64.b64decode(padded, altchars=_ALTCHARS, validate=True)
    except binascii.Error as exc:
        raise InvalidUTF7Error() from exc
    if len(raw) % 2:
        raise InvalidUTF7Error()
    units = iter(struct.unpack(f">{len(raw) // 2}H", raw))
    chars = []
    for unit in units:
        if 0xD800 <= unit <= 0xDFFF:
            low = next(units, None)
            if low is None or unit > 0xDBFF or not 0xDC00 <= low <= 0xDFFF:
                raise InvalidUTF7Error()
            code = 0x10000 + ((unit - 0xD800) << 10) + (low - 0xDC00)
        elif _MIN <= unit <= _MAX:
            raise InvalidUTF7Error()
        else:
            code = unit
        chars.append(chr(code))
    return "".join(chars)


def decode(text: str | bytes) -> str:
    """Decode a modified UTF-7 mailbox name."""
    if isinstance(text, (bytes, bytearray)):
        try:
            text = bytes(text).decode("ascii")
        except UnicodeDecodeError as exc:
            raise InvalidUTF7Error() from exc
    out = []
    after_ascii = True
    pos = 0
    while pos < len(text):
        ch = text[pos]
        if not _is_printable(ch):
            raise InvalidUTF7Error()
        if ch != "&":
            out.append(ch)
            after_ascii = True
            pos += 1
            continue
        end = text.find("-", pos + 1)
        if end < 0:
            raise InvalidUTF7Error()
        segment = text[pos + 1:end]
        if not segment:
            out.append("&")
            after_ascii = True
        else:
            if not after_ascii:
                raise InvalidUTF7Error()
            out.append(_decode_segment(segment))
            after_ascii = False
        pos = end + 1
    return "".join(out)