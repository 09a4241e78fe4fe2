"""Connection sides, continuation requests and number-set kinds of the IMAP wire protocol."""

from __future__ import annotations

import threading
from enum import IntEnum
from typing import Optional

from .imapnum import parse_set
from .numset import NumSet, SeqSet, UIDSet


class ConnSide(IntEnum):
    """The side of a connection."""

    CLIENT = 1
    SERVER = 2


class NumKind(IntEnum):
    """Whether a number set holds sequence numbers or UIDs."""

    SEQ = 1
    UID = 2


class ContinuationRequest:
    """A continuation request.

    The sender calls either done() or cancel() once; the receiver calls wait().
    """

    def __init__(self) -> None:
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._error: Optional[BaseException] = None
        self._text = ""

    def _complete(self) -> None:
        with self._lock:
            if self._event.is_set():
                raise RuntimeError("imapwire: continuation request already completed")
            self._event.set()

    def cancel(self, error: Optional[BaseException] = None) -> None:
        """Cancel the request; wait() then raises error."""
        if error is None:
            error = RuntimeError("imapwire: continuation request cancelled")
        with self._lock:
            if self._event.is_set():
                raise RuntimeError("imapwire: continuation request already completed")
            self._error = error
            self._event.set()

    def done(self, text: str) -> None:
        """Complete the request with the server's continuation text."""
        with self._lock:
            if self._event.is_set():
                raise RuntimeError("imapwire: continuation request already completed")
            self._text = text
            self._event.set()

    def wait(self) -> str:
        """Block until completed; return the text or raise the cancellation error."""
        self._event.wait()
        if self._error is not None:
            raise self._error
        return self._text


def num_set_kind(num_set: NumSet) -> NumKind:
    """Return the kind of a number set."""
    if isinstance(num_set, SeqSet):
        return NumKind.SEQ
    if isinstance(num_set, UIDSet):
        return NumKind.UID
    raise TypeError("imap: invalid NumSet type")


def parse_seq_set(text: str) -> SeqSet:
    """Parse a sequence-set string into a SeqSet; raises BadNumSetError."""
    return SeqSet(parse_set(text))