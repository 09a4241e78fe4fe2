"""Sets of message sequence numbers or UIDs (the IMAP sequence-set rule).

The number 0 stands for "*", the largest number in use in a mailbox.
"""

from __future__ import annotations

import bisect
import re
from dataclasses import dataclass
from typing import Iterable, Iterator

_MAX = 0xFFFFFFFF
_DIGITS = re.compile(r"[0-9]+")


class BadNumSetError(ValueError):
    """Raised when a number set string is malformed."""

    def __init__(self, value: str) -> None:
        super().__init__(f'imap: bad number set value "{value}"')
        self.value = value


@dataclass(frozen=True)
class Range:
    """A seq-number or seq-range.

    A single number has start == stop. Zero stands for "*". start <= stop
    always holds, except for "n:*", which is start=n, stop=0.
    """

    start: int
    stop: int

    def __post_init__(self) -> None:
        for value in (self.start, self.stop):
            if not 0 <= value <= _MAX:
                raise ValueError(f"imap: number {value} out of range")

    def contains(self, q: int) -> bool:
        """Whether number q (0 for "*") lies in this range."""
        if q == 0:
            return self.stop == 0
        return self.start != 0 and self.start <= q and (q <= self.stop or self.stop == 0)

    def less(self, q: int) -> bool:
        """Whether this range precedes and does not contain q."""
        return (self.stop < q or q == 0) and self.stop != 0

    def merge(self, other: Range) -> Range | None:
        """Return the union of two ranges, or None if they cannot be joined."""
        s, t = self, other
        if s == t:
            return s
        if s.start != 0 and t.start != 0:
            if s.start > t.start:
                s, t = t, s
            if (s.stop >= t.stop and t.stop != 0) or s.stop == 0:
                return s
            if s.stop + 1 >= t.start or s.stop == _MAX:
                return Range(s.start, t.stop)
            return None
        if s.start == 0:
            if t.stop == 0:
                return t
        elif s.stop == 0:
            return s
        return None

    def _numbers(self) -> range:
        if self.start == 0 or self.stop == 0:
            raise ValueError("imap: dynamic number set")
        return range(self.start, self.stop + 1)

    def __str__(self) -> str:
        if self.start == self.stop:
            return "*" if self.start == 0 else str(self.start)
        stop = "*" if self.stop == 0 else str(self.stop)
        return f"{self.start}:{stop}"


class Set:
    """A sorted, merged set of number ranges. An empty set is the default."""

    def __init__(self, ranges: Iterable[Range] = ()) -> None:
        self._ranges: list[Range] = []
        for r in ranges:
            self._insert(r)

    @property
    def ranges(self) -> tuple[Range, ...]:
        return tuple(self._ranges)

    def __iter__(self) -> Iterator[Range]:
        return iter(self._ranges)

    def __len__(self) -> int:
        return len(self._ranges)

    def __bool__(self) -> bool:
        return bool(self._ranges)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Set):
            return NotImplemented
        return self._ranges == other._ranges

    def __contains__(self, q: object) -> bool:
        return isinstance(q, int) and self.contains(q)

    def __str__(self) -> str:
        return ",".join(str(r) for r in self._ranges)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self)!r})"

    def add_num(self, *args: int) -> None:
        """Insert numbers; 0 stands for "*"."""
        for value in args:
            self._insert(Range(value, value))

    def add_range(self, start: int, stop: int) -> None:
        """Insert a range, in either order."""
        if (stop < start and stop != 0) or start == 0:
            self._insert(Range(stop, start))
        else:
            self._insert(Range(start, stop))

    def add_set(self, other: Iterable[Range]) -> None:
        """Insert every range of another set."""
        for r in list(other):
            self._insert(r)

    def dynamic(self) -> bool:
        """Whether the set holds "*" or "n:*"."""
        return bool(self._ranges) and self._ranges[-1].stop == 0

    def contains(self, q: int) -> bool:
        """Whether the non-zero number q is in the set ("n:*" holds all q >= n)."""
        _, found = self._search(q)
        return found and q != 0

    def nums(self) -> list[int]:
        """All numbers in the set; raises ValueError for a dynamic set."""
        return [n for r in self._ranges for n in r._numbers()]

    def _search(self, q: int) -> tuple[int, bool]:
        ranges = self._ranges
        i = bisect.bisect_left(ranges, True, key=lambda r: not r.less(q))
        if i == len(ranges):
            return i, False
        return i, ranges[i].contains(q)

    def _insert(self, v: Range) -> None:
        ranges = self._ranges
        i, _ = self._search(v.start)
        merged = False
        if i > 0:
            union = ranges[i - 1].merge(v)
            if union is not None:
                ranges[i - 1] = union
                merged = True
        if i == len(ranges):
            if not merged:
                ranges.append(v)
            return
        if merged:
            i -= 1
        else:
            union = ranges[i].merge(v)
            if union is None:
                ranges.insert(i, v)
                return
            ranges[i] = union
        for j in range(i + 1, len(ranges)):
            union = ranges[i].merge(ranges[j])
            if union is None:
                del ranges[i + 1:j]
                return
            ranges[i] = union
        del ranges[i + 1:]


def _parse_num(value: str) -> int:
    if _DIGITS.fullmatch(value) and value[0] != "0":
        n = int(value)
        if n <= _MAX:
            return n
    elif value == "*":
        return 0
    raise BadNumSetError(value)


def parse_num_range(value: str) -> Range:
    """Parse "n" or "n:m", where either side may be "*"."""
    if ":" not in value:
        n = _parse_num(value)
        return Range(n, n)
    head, _, tail = value.partition(":")
    try:
        start = _parse_num(head)
        stop = _parse_num(tail)
    except BadNumSetError:
        raise BadNumSetError(value) from None
    if (stop < start and stop != 0) or start == 0:
        start, stop = stop, start
    return Range(start, stop)


def parse_set(value: str) -> Set:
    """Parse a comma-separated sequence-set string."""
    result = Set()
    for part in value.split(","):
        r = parse_num_range(part)
        result.add_range(r.start, r.stop)
    return result