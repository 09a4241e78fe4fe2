"""Decoding of dates, flags and mailbox attributes."""

from __future__ import annotations

import datetime
import re
from typing import Optional

from .decoder import Decoder, DecoderExpectError

FLAG_RECENT = "\\Recent"  # removed in IMAP4rev2

_FLAG_WILDCARD = "\\*"

_CANONICAL_FLAGS = (
    "\\Seen",
    "\\Answered",
    "\\Flagged",
    "\\Deleted",
    "\\Draft",
    "$Forwarded",
    "$MDNSent",
    "$Junk",
    "$NotJunk",
    "$Phishing",
    "$Important",
)

_CANONICAL_MAILBOX_ATTRS = (
    "\\NonExistent",
    "\\Noinferiors",
    "\\Noselect",
    "\\HasChildren",
    "\\HasNoChildren",
    "\\Marked",
    "\\Unmarked",
    "\\Subscribed",
    "\\Remote",
    "\\All",
    "\\Archive",
    "\\Drafts",
    "\\Flagged",
    "\\Junk",
    "\\Sent",
    "\\Trash",
    "\\Important",
)

_FLAG_BY_LOWER = {flag.lower(): flag for flag in _CANONICAL_FLAGS}
_ATTR_BY_LOWER = {attr.lower(): attr for attr in _CANONICAL_MAILBOX_ATTRS}

_MONTHS = {
    name: number
    for number, name in enumerate(
        ("jan", "feb", "mar", "apr", "may", "jun",
         "jul", "aug", "sep", "oct", "nov", "dec"),
        start=1,
    )
}

_DATE_TIME_RE = re.compile(
    r"( ?[0-9]{1,2})-([A-Za-z]{3})-([0-9]{4}) "
    r"([0-9]{1,2}):([0-9]{2}):([0-9]{2}) ([+-])([0-9]{2})([0-9]{2})"
)
_DATE_RE = re.compile(r"([0-9]{1,2})-([A-Za-z]{3})-([0-9]{4})")


def _month(name: str) -> int:
    try:
        return _MONTHS[name.lower()]
    except KeyError:
        raise ValueError(f"unknown month {name!r}") from None


def _parse_date_time(s: str) -> datetime.datetime:
    match = _DATE_TIME_RE.fullmatch(s)
    if match is None:
        raise ValueError(f"cannot parse {s!r}")
    day, mon, year, hour, minute, second, sign, off_h, off_m = match.groups()
    offset = datetime.timedelta(hours=int(off_h), minutes=int(off_m))
    if sign == "-":
        offset = -offset
    return datetime.datetime(
        int(year), _month(mon), int(day), int(hour), int(minute), int(second),
        tzinfo=datetime.timezone(offset),
    )


def _parse_date(s: str) -> datetime.date:
    match = _DATE_RE.fullmatch(s)
    if match is None:
        raise ValueError(f"cannot parse {s!r}")
    day, mon, year = match.groups()
    return datetime.date(int(year), _month(mon), int(day))


def decode_date_time(dec: Decoder) -> Optional[datetime.datetime]:
    """Read a quoted date-time; None if the input holds no quoted string."""
    s = dec.quoted()
    if s is None:
        return None
    try:
        return _parse_date_time(s)
    except ValueError as exc:
        raise ValueError(f"in date-time: {exc}") from None


def expect_date_time(dec: Decoder) -> datetime.datetime:
    """Read a quoted date-time, raising if it is missing."""
    value = decode_date_time(dec)
    if value is None:
        dec.expect(False, "date-time")
    assert value is not None
    return value


def expect_date(dec: Decoder) -> datetime.date:
    """Read a date such as 1-Feb-1994."""
    s = dec.expect_astring()
    try:
        return _parse_date(s)
    except ValueError as exc:
        raise ValueError(f"in date: {exc}") from None


def _canonical_flag(name: str) -> str:
    return _FLAG_BY_LOWER.get(name.lower(), name)


def _canonical_mailbox_attr(name: str) -> str:
    return _ATTR_BY_LOWER.get(name.lower(), name)


def expect_flag(dec: Decoder) -> str:
    """Read a flag, in its canonical spelling where one is known."""
    is_system = dec.special("\\")
    if is_system and dec.special("*"):
        return _FLAG_WILDCARD
    try:
        name = dec.expect_atom()
    except DecoderExpectError as exc:
        raise DecoderExpectError(f"in flag: {exc.message}") from exc
    if is_system:
        name = "\\" + name
    return _canonical_flag(name)


def expect_flag_list(dec: Decoder) -> list[str]:
    """Read a parenthesized list of flags."""
    flags: list[str] = []
    dec.expect_list(lambda: flags.append(expect_flag(dec)))
    return flags


def expect_mailbox_attr(dec: Decoder) -> str:
    """Read a mailbox attribute, in its canonical spelling where one is known."""
    return _canonical_mailbox_attr(expect_flag(dec))


def expect_mailbox_attr_list(dec: Decoder) -> list[str]:
    """Read a parenthesized list of mailbox attributes."""
    attrs: list[str] = []
    dec.expect_list(lambda: attrs.append(expect_mailbox_attr(dec)))
    return attrs