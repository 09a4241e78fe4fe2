import io

import pytest

from imapcore.decoder import Decoder, DecoderExpectError, LiteralReader, is_atom_char
from imapcore.imapnum import BadNumSetError
from imapcore.numset import SeqSet, UIDSet, is_search_res
from imapcore.utf7 import InvalidUTF7Error
from imapcore.wire import ConnSide, NumKind


def make(data, side=ConnSide.CLIENT, **kwargs):
    return Decoder(io.BytesIO(data), side, **kwargs)


def test_is_atom_char():
    assert is_atom_char(ord("a"))
    assert is_atom_char("1")
    assert not is_atom_char(ord("("))
    assert not is_atom_char(ord("*"))
    assert not is_atom_char(0x7F)
    assert not is_atom_char(0x00)


def test_atoms_and_sp():
    d = make(b"FOO BAR\r\n")
    assert d.atom() == "FOO"
    assert d.sp() is True
    assert d.expect_atom() == "BAR"
    assert d.crlf() is True
    assert d.eof() is True


def test_expect_atom_error_message():
    d = make(b"(")
    with pytest.raises(DecoderExpectError) as info:
        d.expect_atom()
    assert str(info.value) == 'imapwire: expected atom, got "("'


def test_atom_at_end_of_input():
    with pytest.raises(EOFError):
        make(b"abc").atom()


def test_eof():
    assert make(b"").eof() is True
    d = make(b"x ")
    assert d.eof() is False
    assert d.atom() == "x"


def test_sp_optional_before_list():
    d = make(b"(a)\r\n")
    assert d.sp() is True
    items = []
    assert d.list(lambda: items.append(d.expect_atom())) is True
    assert items == ["a"]


def test_crlf_variants():
    assert make(b"\r\n").crlf() is True
    assert make(b"\n").crlf() is True
    assert make(b" \r\n").crlf() is True
    assert make(b"x\r\n").crlf() is False
    with pytest.raises(DecoderExpectError):
        make(b"x\r\n").expect_crlf()


def test_text_and_discard_line():
    d = make(b"hello world\r\nnext\r\n")
    assert d.expect_text() == "hello world"
    d.expect_crlf()
    d.discard_line()
    assert d.atom() == "next"
    d.discard_line()
    assert d.eof() is True


def test_discard_until_byte():
    d = make(b"abc]def ")
    d.discard_until_byte("]")
    assert d.special("]") is True
    assert d.atom() == "def"


def test_numbers():
    assert make(b"42 ").number() == 42
    assert make(b"4294967295 ").expect_number() == 4294967295
    assert make(b"4294967296 ").number() is None
    with pytest.raises(DecoderExpectError):
        make(b"x ").expect_number()


def test_number64_and_mod_seq():
    assert make(b"18446744073709551615 ").expect_mod_seq() == 18446744073709551615
    assert make(b"18446744073709551615 ").number64() is None
    assert make(b"9223372036854775807 ").expect_number64() == 9223372036854775807


def test_body_fld_octets_workaround():
    assert make(b"-1 ").expect_body_fld_octets() == 0
    assert make(b"12 ").expect_body_fld_octets() == 12
    with pytest.raises(DecoderExpectError):
        make(b"-2 ").expect_body_fld_octets()


def test_special():
    d = make(b"[x")
    assert d.special("(") is False
    d.expect_special("[")
    with pytest.raises(DecoderExpectError, match="expected '\\('"):
        d.expect_special("(")


def test_quoted_with_escapes():
    assert make(b'"a\\"b\\\\c"').quoted() == 'a"b\\c'
    assert make(b'""').quoted() == ""
    assert make(b"abc ").quoted() is None


def test_literal():
    d = make(b"{5}\r\nhello ")
    assert d.literal() == "hello"
    assert d.sp() is True


def test_literal_non_sync_on_server():
    d = make(b"{3+}\r\nabc ", ConnSide.SERVER)
    lit, non_sync = d.expect_literal_reader()
    assert non_sync is True
    assert lit.size == 3
    assert lit.read() == b"abc"


def test_literal_non_sync_rejected_on_client():
    with pytest.raises(DecoderExpectError):
        make(b"{3+}\r\nabc ").literal_reader()


def test_literal_blocks_decoding_until_read():
    d = make(b"{5}\r\nhello rest\r\n")
    lit, non_sync = d.literal_reader()
    assert non_sync is False
    with pytest.raises(RuntimeError):
        d.atom()
    assert lit.read(2) == b"he"
    assert lit.read() == b"llo"
    assert d.sp() is True
    assert d.atom() == "rest"


def test_literal_short_input():
    d = make(b"{5}\r\nhi")
    lit, _ = d.literal_reader()
    with pytest.raises(EOFError):
        lit.read()


def test_check_buffered_literal_called():
    seen = []
    d = make(b"{3+}\r\nabc ", ConnSide.SERVER,
             check_buffered_literal=lambda size, non_sync: seen.append((size, non_sync)))
    assert d.expect_astring() == "abc"
    assert seen == [(3, True)]


def test_check_buffered_literal_refusal():
    def refuse(size, non_sync):
        raise OverflowError("too big")

    d = make(b"{3}\r\nabc ", check_buffered_literal=refuse)
    with pytest.raises(OverflowError):
        d.literal()


def test_astring_forms():
    assert make(b'"x y"').expect_astring() == "x y"
    assert make(b"{1}\r\nz").expect_astring() == "z"
    assert make(b"atom ").expect_astring() == "atom"


def test_nstring():
    assert make(b"NIL ").expect_nstring() is None
    assert make(b'"x"').expect_nstring() == "x"
    with pytest.raises(DecoderExpectError):
        make(b"FOO ").expect_nstring()
    with pytest.raises(DecoderExpectError):
        make(b"(").expect_string()


def test_nstring_reader():
    lit, non_sync = make(b"NIL ").expect_nstring_reader()
    assert lit is None and non_sync is True
    lit, non_sync = make(b'"xy"').expect_nstring_reader()
    assert isinstance(lit, LiteralReader)
    assert lit.size == 2
    assert lit.read() == b"xy"
    lit, _ = make(b"{2}\r\nab").expect_nstring_reader()
    assert lit.read() == b"ab"
    with pytest.raises(DecoderExpectError):
        make(b"(").expect_nstring_reader()


def test_list():
    d = make(b"(a b c)\r\n")
    items = []
    assert d.list(lambda: items.append(d.expect_atom())) is True
    assert items == ["a", "b", "c"]
    assert make(b"()").list(lambda: pytest.fail("no items")) is True
    assert make(b"a ").list(lambda: None) is False
    with pytest.raises(DecoderExpectError):
        make(b"a ").expect_list(lambda: None)


def test_nlist():
    assert make(b"NIL ").expect_nlist(lambda: pytest.fail("no items")) is None
    items = []
    d = make(b"(x)")
    d.expect_nlist(lambda: items.append(d.expect_atom()))
    assert items == ["x"]
    with pytest.raises(DecoderExpectError):
        make(b"FOO ").expect_nlist(lambda: None)


def test_discard_value():
    d = make(b'(a (b "c") {1}\r\nx) rest\r\n')
    assert d.discard_value() is True
    assert d.sp() is True
    assert d.atom() == "rest"
    d2 = make(b"((a))\r\n")
    assert d2.discard_value() is True
    assert d2.crlf() is True
    with pytest.raises(DecoderExpectError):
        make(b")").discard_value()


def test_list_max_depth():
    depth = 2000
    d = make(b"(" * depth + b"x" + b")" * depth + b"\r\n")
    with pytest.raises(ValueError, match="max depth"):
        d.discard_value()


def test_expect_mailbox():
    assert make(b"inbox ").expect_mailbox() == "INBOX"
    assert make(b"&ZeVnLIqe- ").expect_mailbox() == "\u65E5\u672C\u8A9E"
    with pytest.raises(InvalidUTF7Error):
        make(b"&Jjo ").expect_mailbox()


def test_expect_num_set():
    seq = make(b"1:3,5 ").expect_num_set(NumKind.SEQ)
    assert isinstance(seq, SeqSet)
    assert str(seq) == "1:3,5"
    uids = make(b"4,2:3 ").expect_uid_set()
    assert isinstance(uids, UIDSet)
    assert uids.nums() == [2, 3, 4]
    assert is_search_res(make(b"$ ").expect_num_set(NumKind.UID))
    with pytest.raises(BadNumSetError):
        make(b"0 ").expect_num_set(NumKind.SEQ)
    with pytest.raises(DecoderExpectError):
        make(b"(").expect_num_set(NumKind.SEQ)


def test_expect_uid_and_nil():
    assert make(b"7 ").expect_uid() == 7
    make(b"NIL ").expect_nil()
    with pytest.raises(DecoderExpectError):
        make(b"NOPE ").expect_nil()