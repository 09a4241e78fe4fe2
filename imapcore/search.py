"""Options, criteria and results of the SEARCH command."""

from __future__ import annotations

import datetime
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

from .numset import NumSet, SeqSet, UIDSet

_Date = Union[datetime.date, datetime.datetime]


@dataclass
class SearchOptions:
    """RETURN options (ESEARCH / SEARCHRES or IMAP4rev2)."""

    return_min: bool = False
    return_max: bool = False
    return_all: bool = False
    return_count: bool = False
    return_save: bool = False


@dataclass
class SearchCriteriaHeaderField:
    key: str
    value: str


class SearchCriteriaMetadataType(str, Enum):
    ALL = "all"
    PRIVATE = "priv"
    SHARED = "shared"

    def __str__(self) -> str:
        return self.value


@dataclass
class SearchCriteriaModSeq:
    """MODSEQ search key (requires CONDSTORE)."""

    mod_seq: int
    metadata_name: str = ""
    metadata_type: Optional[SearchCriteriaMetadataType] = None


def _later(a: Optional[_Date], b: Optional[_Date]) -> Optional[_Date]:
    if a is None:
        return b
    if b is None:
        return a
    return a if a > b else b


def _earlier(a: Optional[_Date], b: Optional[_Date]) -> Optional[_Date]:
    if a is None:
        return b
    if b is None:
        return a
    return a if a < b else b


@dataclass
class SearchCriteria:
    """Search criteria; populated fields are intersected.

    Only the date part of the date fields is used.
    """

    seq_num: list[SeqSet] = field(default_factory=list)
    uid: list[UIDSet] = field(default_factory=list)

    since: Optional[_Date] = None
    before: Optional[_Date] = None
    sent_since: Optional[_Date] = None
    sent_before: Optional[_Date] = None

    header: list[SearchCriteriaHeaderField] = field(default_factory=list)
    body: list[str] = field(default_factory=list)
    text: list[str] = field(default_factory=list)

    flag: list[str] = field(default_factory=list)
    not_flag: list[str] = field(default_factory=list)

    larger: int = 0
    smaller: int = 0

    not_: list[SearchCriteria] = field(default_factory=list)
    or_: list[tuple[SearchCriteria, SearchCriteria]] = field(default_factory=list)

    mod_seq: Optional[SearchCriteriaModSeq] = None

    def and_(self, other: SearchCriteria) -> None:
        """Narrow these criteria to the intersection with other, in place."""
        self.seq_num.extend(other.seq_num)
        self.uid.extend(other.uid)

        self.since = _later(self.since, other.since)
        self.before = _earlier(self.before, other.before)
        self.sent_since = _later(self.sent_since, other.sent_since)
        self.sent_before = _earlier(self.sent_before, other.sent_before)

        self.header.extend(other.header)
        self.body.extend(other.body)
        self.text.extend(other.text)

        self.flag.extend(other.flag)
        self.not_flag.extend(other.not_flag)

        if self.larger == 0 or other.larger > self.larger:
            self.larger = other.larger
        if self.smaller == 0 or other.smaller < self.smaller:
            self.smaller = other.smaller

        self.not_.extend(other.not_)
        self.or_.extend(other.or_)


@dataclass
class SearchData:
    """Result of a SEARCH command."""

    all: Optional[NumSet] = None
    uid: bool = False
    min: int = 0
    max: int = 0
    count: int = 0
    mod_seq: int = 0

    def all_seq_nums(self) -> Optional[list[int]]:
        """The result as sequence numbers, or None if it holds UIDs."""
        if not isinstance(self.all, SeqSet):
            return None
        return self._static_nums(self.all)

    def all_uids(self) -> Optional[list[int]]:
        """The result as UIDs, or None if it holds sequence numbers."""
        if not isinstance(self.all, UIDSet):
            return None
        return self._static_nums(self.all)

    @staticmethod
    def _static_nums(num_set: NumSet) -> list[int]:
        try:
            return num_set.nums()
        except ValueError:
            raise ValueError("imap: SearchData.All is a dynamic number set") from None