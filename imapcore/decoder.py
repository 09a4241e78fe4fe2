"""Reading IMAP data from a byte stream."""

from __future__ import annotations

import io
import unicodedata
from typing import BinaryIO, Callable, Optional, Union

from . import utf7
from .imapnum import parse_set
from .numset import NumSet, SeqSet, UIDSet, search_res
from .wire import ConnSide, NumKind

# Limits list nesting so that hostile input cannot exhaust the stack.
_MAX_LIST_DEPTH = 1000
_CHUNK = 4096
_NOT_ATOM = frozenset(b'(){ %*"\\]')
_MAX_UINT32 = 0xFFFFFFFF
_MAX_INT64 = 0x7FFFFFFFFFFFFFFF
_MAX_UINT64 = 0xFFFFFFFFFFFFFFFF


def is_atom_char(ch: Union[int, str]) -> bool:
    """Whether a byte is an ATOM-CHAR."""
    value = ord(ch) if isinstance(ch, str) else ch
    if value in _NOT_ATOM:
        return False
    return unicodedata.category(chr(value)) != "Cc"


def _is_num_set_char(ch: int) -> bool:
    return ch == ord("*") or is_atom_char(ch)


def _to_byte(ch: Union[int, str]) -> int:
    if isinstance(ch, str):
        if len(ch) != 1:
            raise ValueError("imapwire: a special must be a single character")
        return ord(ch)
    return ch


def _to_str(data: Union[bytes, bytearray]) -> str:
    return bytes(data).decode("utf-8", "surrogateescape")


def _quote_byte(b: int) -> str:
    escapes = {0x22: '\\"', 0x5C: "\\\\", 0x0A: "\\n", 0x0D: "\\r", 0x09: "\\t"}
    if b in escapes:
        return escapes[b]
    if 0x20 <= b < 0x7F:
        return chr(b)
    return f"\\x{b:02x}"


class DecoderExpectError(ValueError):
    """Raised when the input does not hold the expected element."""

    def __init__(self, message: str) -> None:
        super().__init__(f"imapwire: {message}")
        self.message = message


class LiteralReader:
    """Reads the body of a literal.

    While a literal read from a decoder is open, the decoder refuses to
    decode anything else; reading the whole body closes it.
    """

    def __init__(
        self,
        size: int,
        source: Callable[[int], bytes],
        decoder: Optional[Decoder] = None,
    ) -> None:
        self._size = size
        self._remaining = size
        self._source = source
        self._dec = decoder

    @classmethod
    def _from_bytes(cls, data: bytes) -> LiteralReader:
        return cls(len(data), io.BytesIO(data).read)

    @property
    def size(self) -> int:
        """The announced size of the literal in bytes."""
        return self._size

    def read(self, size: int = -1) -> bytes:
        """Read up to size bytes of the body, or all that is left."""
        if size is None or size < 0 or size > self._remaining:
            size = self._remaining
        data = self._source(size) if size else b""
        self._remaining -= len(data)
        if len(data) < size:
            self._cancel()
            raise EOFError("imapwire: unexpected EOF in literal")
        if self._remaining == 0:
            self._cancel()
        return data

    def _cancel(self) -> None:
        if self._dec is None:
            return
        self._dec._literal = False
        self._dec = None


class Decoder:
    """Reads IMAP data.

    Methods named after grammar elements return the element, or None (False
    for punctuation) when the input holds something else. The expect_*
    methods raise DecoderExpectError instead. Unexpected end of input raises
    EOFError.
    """

    def __init__(
        self,
        stream: BinaryIO,
        side: ConnSide,
        *,
        check_buffered_literal: Optional[Callable[[int, bool], object]] = None,
    ) -> None:
        self._stream = stream
        self.side = side
        # Called with (size, non_sync) before a literal is read into memory;
        # it may raise to refuse the literal.
        self.check_buffered_literal = check_buffered_literal
        self._buf = b""
        self._pos = 0
        self._literal = False
        self._crlf = False
        self._list_depth = 0

    # Byte-level input

    def _fill(self) -> bool:
        if self._pos < len(self._buf):
            return True
        read1 = getattr(self._stream, "read1", None)
        chunk = read1(_CHUNK) if read1 is not None else self._stream.read(1)
        if not chunk:
            return False
        self._buf = bytes(chunk)
        self._pos = 0
        return True

    def _read_byte(self) -> int:
        self._crlf = False
        if self._literal:
            raise RuntimeError("imapwire: cannot decode while a literal is open")
        if not self._fill():
            raise EOFError("imapwire: unexpected EOF")
        b = self._buf[self._pos]
        self._pos += 1
        return b

    def _unread(self) -> None:
        self._pos -= 1

    def _accept(self, want: int) -> bool:
        if self._read_byte() != want:
            self._unread()
            return False
        return True

    def _read_raw(self, n: int) -> bytes:
        out = bytearray(self._buf[self._pos:self._pos + n])
        self._pos += len(out)
        while len(out) < n:
            chunk = self._stream.read(n - len(out))
            if not chunk:
                break
            out += chunk
        return bytes(out)

    def _expect_error(self, name: str) -> DecoderExpectError:
        msg = f"expected {name}"
        if self._pos < len(self._buf):
            msg += f', got "{_quote_byte(self._buf[self._pos])}"'
        return DecoderExpectError(msg)

    # Grammar elements

    def eof(self) -> bool:
        """Whether the end of input is reached."""
        return not self._fill()

    def expect(self, ok: bool, name: str) -> None:
        """Raise DecoderExpectError naming the expected element if ok is false."""
        if not ok:
            raise self._expect_error(name)

    def sp(self) -> bool:
        """Accept a space; it may be left out before a parenthesized list."""
        if self._accept(ord(" ")):
            return True
        b = self._read_byte()
        self._unread()
        return b == ord("(")

    def expect_sp(self) -> None:
        self.expect(self.sp(), "SP")

    def crlf(self) -> bool:
        """Accept a line ending; a lone LF and a trailing space are tolerated."""
        self._accept(ord(" "))
        self._accept(ord("\r"))
        if not self._accept(ord("\n")):
            return False
        self._crlf = True
        return True

    def expect_crlf(self) -> None:
        self.expect(self.crlf(), "CRLF")

    def func(self, valid: Callable[[int], bool]) -> Optional[str]:
        """Read the longest run of bytes for which valid holds."""
        out = bytearray()
        while True:
            b = self._read_byte()
            if not valid(b):
                self._unread()
                break
            out.append(b)
        return _to_str(out) if out else None

    def atom(self) -> Optional[str]:
        return self.func(is_atom_char)

    def expect_atom(self) -> str:
        s = self.atom()
        if s is None:
            raise self._expect_error("atom")
        return s

    def expect_nil(self) -> None:
        self.expect(self.expect_atom() == "NIL", "NIL")

    def special(self, ch: Union[int, str]) -> bool:
        return self._accept(_to_byte(ch))

    def expect_special(self, ch: Union[int, str]) -> None:
        b = _to_byte(ch)
        self.expect(self.special(b), f"'{chr(b)}'")

    def text(self) -> Optional[str]:
        """Read up to the end of the line."""
        out = bytearray()
        while True:
            b = self._read_byte()
            if b in (0x0D, 0x0A):
                self._unread()
                break
            out.append(b)
        return _to_str(out) if out else None

    def expect_text(self) -> str:
        s = self.text()
        if s is None:
            raise self._expect_error("text")
        return s

    def discard_until_byte(self, ch: Union[int, str]) -> None:
        """Skip input up to, but not including, the byte ch."""
        want = _to_byte(ch)
        while self._read_byte() != want:
            pass
        self._unread()

    def discard_line(self) -> None:
        """Skip the rest of the current line, unless a line just ended."""
        if self._crlf:
            return
        self.text()
        self.crlf()

    def discard_value(self) -> bool:
        """Skip one string, list or atom."""
        if self.string() is not None:
            return True
        if self.list(self.discard_value):
            return True
        if self.atom() is not None:
            return True
        raise self._expect_error("value")

    def _number_str(self) -> Optional[str]:
        out = bytearray()
        while True:
            b = self._read_byte()
            if not 0x30 <= b <= 0x39:
                self._unread()
                break
            out.append(b)
        return out.decode("ascii") if out else None

    def _bounded_number(self, limit: int) -> Optional[int]:
        s = self._number_str()
        if s is None:
            return None
        value = int(s)
        return value if value <= limit else None

    def number(self) -> Optional[int]:
        """Read a 32-bit unsigned number; None if absent or too large."""
        return self._bounded_number(_MAX_UINT32)

    def expect_number(self) -> int:
        value = self.number()
        if value is None:
            raise self._expect_error("number")
        return value

    def expect_body_fld_octets(self) -> int:
        """Read a body size, reading the "-1" some servers send as 0."""
        if self._accept(ord("-")):
            self.expect(self._accept(ord("1")), "-1 (body-fld-octets workaround)")
            return 0
        return self.expect_number()

    def number64(self) -> Optional[int]:
        """Read a 63-bit number; None if absent or too large."""
        return self._bounded_number(_MAX_INT64)

    def expect_number64(self) -> int:
        value = self.number64()
        if value is None:
            raise self._expect_error("number64")
        return value

    def mod_seq(self) -> Optional[int]:
        """Read a 64-bit unsigned mod-sequence value."""
        return self._bounded_number(_MAX_UINT64)

    def expect_mod_seq(self) -> int:
        value = self.mod_seq()
        if value is None:
            raise self._expect_error("mod-sequence-value")
        return value

    def quoted(self) -> Optional[str]:
        """Read a quoted string."""
        if not self.special('"'):
            return None
        out = bytearray()
        while True:
            ch = self._read_byte()
            if ch == 0x22:
                break
            if ch == 0x5C:
                ch = self._read_byte()
            out.append(ch)
        return _to_str(out)

    def expect_astring(self) -> str:
        s = self.quoted()
        if s is not None:
            return s
        s = self.literal()
        if s is not None:
            return s
        return self.expect_atom()

    def string(self) -> Optional[str]:
        """Read a quoted string or a literal."""
        s = self.quoted()
        if s is not None:
            return s
        return self.literal()

    def expect_string(self) -> str:
        s = self.string()
        if s is None:
            raise self._expect_error("string")
        return s

    def expect_nstring(self) -> Optional[str]:
        """Read a string or NIL; NIL gives None."""
        s = self.atom()
        if s is not None:
            self.expect(s == "NIL", "nstring")
            return None
        return self.expect_string()

    def expect_nstring_reader(self) -> tuple[Optional[LiteralReader], bool]:
        """Read a string or NIL as a reader; returns (reader, non_sync)."""
        s = self.atom()
        if s is not None:
            self.expect(s == "NIL", "nstring")
            return None, True
        s = self.quoted()
        if s is not None:
            return LiteralReader._from_bytes(s.encode("utf-8", "surrogateescape")), True
        result = self.literal_reader()
        if result is None:
            raise self._expect_error("nstring")
        return result

    def list(self, f: Callable[[], object]) -> bool:
        """Read a parenthesized list, calling f for each item."""
        if not self.special("("):
            return False
        if self.special(")"):
            return True
        self._list_depth += 1
        try:
            if self._list_depth >= _MAX_LIST_DEPTH:
                raise ValueError("imapwire: exceeded max depth")
            while True:
                f()
                if self.special(")"):
                    return True
                self.expect_sp()
        except RecursionError:
            raise ValueError("imapwire: exceeded max depth") from None
        finally:
            self._list_depth -= 1

    def expect_list(self, f: Callable[[], object]) -> None:
        self.expect(self.list(f), "(")

    def expect_nlist(self, f: Callable[[], object]) -> None:
        """Read a parenthesized list or NIL."""
        s = self.atom()
        if s is not None:
            self.expect(s == "NIL", "NIL")
            return
        self.expect_list(f)

    def expect_mailbox(self) -> str:
        """Read a mailbox name, decoding modified UTF-7."""
        name = self.expect_astring()
        if name.casefold() == "inbox":
            return "INBOX"
        return utf7.decode(name)

    def expect_uid(self) -> int:
        return self.expect_number()

    def expect_num_set(self, kind: NumKind) -> NumSet:
        """Read a sequence-set, or "$" for the last SEARCH result."""
        if self.special("$"):
            return search_res()
        s = self.func(_is_num_set_char)
        if s is None:
            raise self._expect_error("sequence-set")
        parsed = parse_set(s)
        if kind == NumKind.SEQ:
            return SeqSet(parsed)
        if kind == NumKind.UID:
            return UIDSet(parsed)
        raise ValueError(f"imapwire: invalid number kind {kind!r}")

    def expect_uid_set(self) -> UIDSet:
        result = self.expect_num_set(NumKind.UID)
        assert isinstance(result, UIDSet)
        return result

    def literal(self) -> Optional[str]:
        """Read a whole literal into memory."""
        result = self.literal_reader()
        if result is None:
            return None
        lit, non_sync = result
        if self.check_buffered_literal is not None:
            try:
                self.check_buffered_literal(lit.size, non_sync)
            except BaseException:
                lit._cancel()
                raise
        return _to_str(lit.read())

    def literal_reader(self) -> Optional[tuple[LiteralReader, bool]]:
        """Read a literal header; returns (reader, non_sync) or None."""
        if not self.special("{"):
            return None
        size = self.expect_number64()
        non_sync = False
        if self.side == ConnSide.SERVER:
            non_sync = self._accept(ord("+"))
        self.expect_special("}")
        self.expect_crlf()
        self._literal = True
        return LiteralReader(size, self._read_raw, self), non_sync

    def expect_literal_reader(self) -> tuple[LiteralReader, bool]:
        result = self.literal_reader()
        if result is None:
            raise self._expect_error("literal")
        return result