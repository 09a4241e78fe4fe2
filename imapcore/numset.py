"""Typed sets of message sequence numbers and UIDs."""

from __future__ import annotations

from typing import Union

from .imapnum import Set

_SEARCH_RES_IMMUTABLE = "imap: the SEARCHRES marker cannot be modified"


class _TypedSet(Set):
    """A number set that is only equal to sets of the same kind."""

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Set):
            return NotImplemented
        return type(self) is type(other) and self.ranges == other.ranges

    __hash__ = None  # type: ignore[assignment]


class SeqSet(_TypedSet):
    """A set of message sequence numbers."""

    def add_num(self, *args: int) -> None:
        """Insert sequence numbers; 0 stands for "*"."""
        super().add_num(*args)

    def add_range(self, start: int, stop: int) -> None:
        """Insert a range of sequence numbers."""
        super().add_range(start, stop)

    def add_set(self, other: Set) -> None:
        """Insert every sequence number of another set."""
        super().add_set(other)

    def contains(self, num: int) -> bool:
        """Whether the non-zero sequence number is in the set."""
        return super().contains(num)

    def nums(self) -> list[int]:
        """All sequence numbers; raises ValueError for a dynamic set."""
        return super().nums()

    def dynamic(self) -> bool:
        """Whether the set holds "*" or "n:*"."""
        return super().dynamic()


class UIDSet(_TypedSet):
    """A set of message UIDs."""

    def add_num(self, *args: int) -> None:
        """Insert UIDs; 0 stands for "*"."""
        if is_search_res(self):
            raise ValueError(_SEARCH_RES_IMMUTABLE)
        super().add_num(*args)

    def add_range(self, start: int, stop: int) -> None:
        """Insert a range of UIDs."""
        if is_search_res(self):
            raise ValueError(_SEARCH_RES_IMMUTABLE)
        super().add_range(start, stop)

    def add_set(self, other: Set) -> None:
        """Insert every UID of another set."""
        if is_search_res(self):
            raise ValueError(_SEARCH_RES_IMMUTABLE)
        super().add_set(other)

    def contains(self, uid: int) -> bool:
        """Whether the non-zero UID is in the set."""
        return super().contains(uid)

    def nums(self) -> list[int]:
        """All UIDs; raises ValueError for a dynamic set."""
        return super().nums()

    def dynamic(self) -> bool:
        """Whether the set holds "*", "n:*" or is the SEARCHRES marker."""
        return super().dynamic() or is_search_res(self)


class _SearchResult(UIDSet):
    """Marker referencing the result of the last SEARCH, sent as "$"."""

    def __str__(self) -> str:
        return "$"

    def __repr__(self) -> str:
        return "search_res()"


NumSet = Union[SeqSet, UIDSet]

_SEARCH_RES = _SearchResult()


def seq_set_num(*args: int) -> SeqSet:
    """Return a new SeqSet holding the given sequence numbers."""
    result = SeqSet()
    result.add_num(*args)
    return result


def uid_set_num(*args: int) -> UIDSet:
    """Return a new UIDSet holding the given UIDs."""
    result = UIDSet()
    result.add_num(*args)
    return result


def search_res() -> UIDSet:
    """Return the marker for the last SEARCH result (requires IMAP4rev2 or SEARCHRES)."""
    return _SEARCH_RES


def is_search_res(num_set: object) -> bool:
    """Whether a number set is the marker returned by search_res()."""
    return num_set is _SEARCH_RES