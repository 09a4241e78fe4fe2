"""Writing IMAP data to a byte stream."""

from __future__ import annotations

import unicodedata
from typing import BinaryIO, Callable, Optional, Union

from . import utf7
from .numset import NumSet
from .wire import ConnSide, ContinuationRequest

_MAX_QUOTED = 4096
_NOT_ATOM = frozenset(b'(){ %*"\\]')


class EncoderError(Exception):
    """Raised for data that cannot be encoded."""


def _is_atom_byte(ch: int) -> bool:
    if ch in _NOT_ATOM:
        return False
    return unicodedata.category(chr(ch)) != "Cc"


def _is_valid_flag(s: str) -> bool:
    data = s.encode("utf-8")
    for i, ch in enumerate(data):
        if ch == ord("\\"):
            if i != 0:
                return False
        elif not _is_atom_byte(ch):
            return False
    return len(data) > 0


class LiteralWriter:
    """Writes the body of a literal; exactly the announced size must be written."""

    def __init__(self, encoder: Encoder, size: int) -> None:
        self._enc = encoder
        self._remaining = size

    def write(self, data: bytes) -> int:
        """Write part of the literal body."""
        if self._remaining - len(data) < 0:
            raise EncoderError("wrote too many bytes in literal")
        self._enc._stream.write(data)
        self._remaining -= len(data)
        return len(data)

    def close(self) -> None:
        """Finish the literal; raises if too few bytes were written."""
        self._enc._literal = False
        if self._remaining != 0:
            raise EncoderError(
                f"wrote too few bytes in literal ({self._remaining} remaining)"
            )

    def __enter__(self) -> LiteralWriter:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.close()
        else:
            self._enc._literal = False


class ListEncoder:
    """Writes the items of a parenthesized list."""

    def __init__(self, encoder: Encoder) -> None:
        self._enc: Optional[Encoder] = encoder
        self._count = 0

    def item(self) -> Encoder:
        """Start the next item and return the encoder to write it with."""
        if self._enc is None:
            raise EncoderError("imapwire: list already ended")
        if self._count > 0:
            self._enc.sp()
        self._count += 1
        return self._enc

    def end(self) -> None:
        """Close the list."""
        if self._enc is None:
            raise EncoderError("imapwire: list already ended")
        self._enc.special(")")
        self._enc = None

    def __enter__(self) -> ListEncoder:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.end()


class Encoder:
    """Writes IMAP data.

    Most methods return the encoder for chaining and keep the first error
    until crlf() is called, which raises it.
    """

    def __init__(
        self,
        stream: BinaryIO,
        side: ConnSide,
        *,
        quoted_utf8: bool = False,
        literal_minus: bool = False,
        literal_plus: bool = False,
        new_continuation_request: Optional[
            Callable[[], Optional[ContinuationRequest]]
        ] = None,
    ) -> None:
        self._stream = stream
        self.side = side
        self.quoted_utf8 = quoted_utf8
        self.literal_minus = literal_minus
        self.literal_plus = literal_plus
        self.new_continuation_request = new_continuation_request
        self._err: Optional[BaseException] = None
        self._literal = False

    @property
    def error(self) -> Optional[BaseException]:
        """The first error recorded, if any."""
        return self._err

    def _set_err(self, err: BaseException) -> None:
        if self._err is None:
            self._err = err

    def _write(self, s: Union[str, bytes]) -> Encoder:
        if self._err is not None:
            return self
        if self._literal:
            self._err = EncoderError("imapwire: cannot encode while a literal is open")
            return self
        data = s.encode("utf-8") if isinstance(s, str) else s
        try:
            self._stream.write(data)
        except OSError as exc:
            self._err = exc
        return self

    def crlf(self) -> None:
        """Write CRLF and flush; raise the first error recorded."""
        self._write("\r\n")
        if self._err is not None:
            raise self._err
        flush = getattr(self._stream, "flush", None)
        if flush is not None:
            flush()

    def atom(self, s: str) -> Encoder:
        return self._write(s)

    def sp(self) -> Encoder:
        return self._write(" ")

    def special(self, ch: Union[str, int]) -> Encoder:
        return self._write(chr(ch) if isinstance(ch, int) else ch)

    def quoted(self, s: str) -> Encoder:
        escaped = s.replace("\\", "\\\\").replace('"', '\\"')
        return self._write(f'"{escaped}"')

    def string(self, s: str) -> Encoder:
        """Write s as a quoted string if possible, otherwise as a literal."""
        data = s.encode("utf-8")
        if not self._valid_quoted(data):
            self._string_literal(data)
            return self
        return self.quoted(s)

    def _valid_quoted(self, data: bytes) -> bool:
        if len(data) > _MAX_QUOTED:
            return False
        for ch in data:
            if ch in (0, 0x0D, 0x0A):
                return False
            if not self.quoted_utf8 and ch > 0x7F:
                return False
        return True

    def _string_literal(self, data: bytes) -> None:
        sync: Optional[ContinuationRequest] = None
        if (
            self.side == ConnSide.CLIENT
            and (not self.literal_minus or len(data) > _MAX_QUOTED)
            and not self.literal_plus
        ):
            if self.new_continuation_request is not None:
                sync = self.new_continuation_request()
            if sync is None:
                self._set_err(EncoderError("imapwire: cannot send synchronizing literal"))
                return
        try:
            writer = self.literal(len(data), sync)
        except Exception as exc:  # the error is kept until crlf()
            self._set_err(exc)
            return
        try:
            writer.write(data)
        except EncoderError as exc:
            self._set_err(exc)
        try:
            writer.close()
        except EncoderError as exc:
            self._set_err(exc)

    def mailbox(self, name: str) -> Encoder:
        """Write a mailbox name, in modified UTF-7 unless it is INBOX."""
        if name.casefold() == "inbox":
            return self.atom("INBOX")
        return self.string(utf7.encode(name))

    def num_set(self, num_set: NumSet) -> Encoder:
        s = str(num_set)
        if not s:
            self._set_err(EncoderError("imapwire: cannot encode empty sequence set"))
            return self
        return self._write(s)

    def flag(self, flag: str) -> Encoder:
        if flag != "\\*" and not _is_valid_flag(flag):
            self._set_err(EncoderError(f'imapwire: invalid flag "{flag}"'))
            return self
        return self._write(flag)

    def mailbox_attr(self, attr: str) -> Encoder:
        if not attr.startswith("\\") or not _is_valid_flag(attr):
            self._set_err(EncoderError(f'imapwire: invalid mailbox attribute "{attr}"'))
            return self
        return self._write(attr)

    def number(self, value: int) -> Encoder:
        if not 0 <= value <= 0xFFFFFFFF:
            raise ValueError(f"imapwire: number {value} out of range")
        return self._write(str(value))

    def number64(self, value: int) -> Encoder:
        return self._write(str(value))

    def mod_seq(self, value: int) -> Encoder:
        return self._write(str(value))

    def list(self, n: int, f: Callable[[int], object]) -> Encoder:
        """Write a parenthesized list of n items, each written by f(i)."""
        self.special("(")
        for i in range(n):
            if i > 0:
                self.sp()
            f(i)
        self.special(")")
        return self

    def begin_list(self) -> ListEncoder:
        self.special("(")
        return ListEncoder(self)

    def nil(self) -> Encoder:
        return self.atom("NIL")

    def text(self, s: str) -> Encoder:
        return self._write(s)

    def uid(self, uid: int) -> Encoder:
        return self.number(uid)

    def literal(
        self, size: int, sync: Optional[ContinuationRequest] = None
    ) -> LiteralWriter:
        """Start a literal of size bytes and return a writer for its body.

        With sync, the literal is synchronizing: the header is flushed and
        the body is only written once the continuation request is done.
        """
        if sync is not None and self.side == ConnSide.SERVER:
            raise ValueError("imapwire: sync must be None on a server-side Encoder.literal")

        self._write("{")
        self.number64(size)
        if sync is None and self.side == ConnSide.CLIENT:
            self._write("+")
        self._write("}")

        if sync is None:
            self._write("\r\n")
        else:
            self.crlf()
            try:
                sync.wait()
            except Exception as exc:
                self._set_err(exc)
                raise

        self._literal = True
        return LiteralWriter(self, size)