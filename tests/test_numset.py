import pytest

from imapcore.imapnum import parse_set
from imapcore.numset import (
    SeqSet,
    UIDSet,
    is_search_res,
    search_res,
    seq_set_num,
    uid_set_num,
)


def test_seq_set_num_round_trips_through_parser():
    s = seq_set_num(7, 1, 2, 3, 9)
    assert SeqSet(parse_set(str(s))) == s


def test_seq_set_contains_given_numbers():
    s = seq_set_num(4, 10)
    assert s.contains(4)
    assert s.contains(10)
    assert not s.contains(5)


def test_seq_set_nums_sorted():
    s = seq_set_num(5, 3, 4)
    assert s.nums() == [3, 4, 5]


def test_zero_is_star_and_dynamic():
    s = seq_set_num(0)
    assert str(s) == "*"
    assert s.dynamic()
    with pytest.raises(ValueError):
        s.nums()


def test_add_range_reversed_equals_forward():
    a = SeqSet()
    a.add_range(8, 2)
    b = SeqSet()
    b.add_range(2, 8)
    assert a == b
    assert a.nums() == list(range(2, 9))


def test_add_set_union():
    a = seq_set_num(1, 2)
    a.add_set(seq_set_num(3, 10))
    assert a.nums() == [1, 2, 3, 10]


def test_uid_set_num_and_contains():
    s = uid_set_num(100, 200)
    assert s.contains(100)
    assert not s.contains(150)
    assert s.nums() == [100, 200]
    assert not s.dynamic()


def test_uid_add_range_dynamic():
    s = UIDSet()
    s.add_range(5, 0)
    assert s.dynamic()
    assert s.contains(5)
    assert s.contains(0xFFFFFFFF)


def test_seq_and_uid_sets_not_equal():
    assert seq_set_num(1) != uid_set_num(1)
    assert uid_set_num(1) == uid_set_num(1)


def test_search_res_marker():
    marker = search_res()
    assert str(marker) == "$"
    assert marker.dynamic()
    assert is_search_res(marker)
    assert isinstance(marker, UIDSet)
    assert marker.nums() == []


def test_empty_uid_set_is_not_search_res():
    assert not is_search_res(UIDSet())
    assert not is_search_res(seq_set_num(1))


def test_search_res_cannot_be_modified():
    with pytest.raises(ValueError):
        search_res().add_num(1)
    assert str(search_res()) == "$"