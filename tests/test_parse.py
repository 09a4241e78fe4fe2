import datetime
import io

import pytest

from imapcore.decoder import Decoder, DecoderExpectError
from imapcore.parse import (
    FLAG_RECENT,
    decode_date_time,
    expect_date,
    expect_date_time,
    expect_flag,
    expect_flag_list,
    expect_mailbox_attr,
    expect_mailbox_attr_list,
)
from imapcore.wire import ConnSide


def make(data):
    return Decoder(io.BytesIO(data), ConnSide.CLIENT)


def test_decode_date_time():
    value = decode_date_time(make(b'"17-Jul-1996 02:44:25 -0700"'))
    tz = datetime.timezone(-datetime.timedelta(hours=7))
    assert value == datetime.datetime(1996, 7, 17, 2, 44, 25, tzinfo=tz)
    assert value.utcoffset() == -datetime.timedelta(hours=7)


def test_decode_date_time_space_padded_day():
    value = decode_date_time(make(b'" 7-jul-1996 02:44:25 +0000"'))
    assert value == datetime.datetime(1996, 7, 7, 2, 44, 25, tzinfo=datetime.timezone.utc)


def test_decode_date_time_absent():
    assert decode_date_time(make(b"NIL ")) is None
    with pytest.raises(DecoderExpectError):
        expect_date_time(make(b"NIL "))


def test_decode_date_time_invalid():
    with pytest.raises(ValueError, match="in date-time"):
        decode_date_time(make(b'"17-Jul-1996"'))
    with pytest.raises(ValueError, match="in date-time"):
        decode_date_time(make(b'"31-Feb-1996 02:44:25 +0000"'))


def test_expect_date_time_value():
    value = expect_date_time(make(b'"01-Jan-2000 00:00:00 +0100"'))
    assert (value.year, value.month, value.day) == (2000, 1, 1)


def test_expect_date():
    assert expect_date(make(b"1-Feb-1994 ")) == datetime.date(1994, 2, 1)
    assert expect_date(make(b'"12-Dec-2020"')) == datetime.date(2020, 12, 12)
    with pytest.raises(ValueError, match="in date"):
        expect_date(make(b"31-Feb-1994 "))
    with pytest.raises(ValueError, match="in date"):
        expect_date(make(b"1-Foo-1994 "))


def test_expect_flag_canonical():
    assert expect_flag(make(b"\\SEEN ")) == "\\Seen"
    assert expect_flag(make(b"\\seen ")) == expect_flag(make(b"\\Seen "))
    upper = expect_flag(make(b"$JUNK "))
    assert upper.lower() == "$junk"
    assert upper == expect_flag(make(b"$junk "))


def test_expect_flag_other():
    assert expect_flag(make(b"\\*)")) == "\\*"
    assert expect_flag(make(b"FooBar ")) == "FooBar"
    assert expect_flag(make(b"\\Recent ")) == FLAG_RECENT


def test_expect_flag_error():
    with pytest.raises(DecoderExpectError, match="in flag"):
        expect_flag(make(b"("))


def test_expect_flag_list():
    assert expect_flag_list(make(b"(\\Seen \\Answered foo)\r\n")) == ["\\Seen", "\\Answered", "foo"]
    assert expect_flag_list(make(b"()")) == []
    with pytest.raises(DecoderExpectError):
        expect_flag_list(make(b"foo "))


def test_expect_mailbox_attr():
    assert expect_mailbox_attr(make(b"\\haschildren ")) == "\\HasChildren"
    attrs = expect_mailbox_attr_list(make(b"(\\HasNoChildren \\marked)"))
    assert attrs[0] == "\\HasNoChildren"
    assert attrs[1].lower() == "\\marked"
    assert attrs[1] == expect_mailbox_attr(make(b"\\MARKED "))
    assert expect_mailbox_attr_list(make(b"()")) == []