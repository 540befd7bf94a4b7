import hashlib
import struct

import pytest

from nekostd.digest import Md5, make_md5, make_sha1, md5
from nekostd.values import Int32, NekoError, NekoObject, field_id


@pytest.mark.parametrize(
    "data",
    [b"", b"abc", b"a" * 55, b"a" * 56, b"a" * 64, b"x" * 1000, bytes(range(256))],
)
def test_md5_matches_reference(data):
    assert md5(data) == hashlib.md5(data).digest()


def test_incremental_equals_one_shot():
    data = bytes(range(200)) * 3
    h = Md5()
    for start in range(0, len(data), 37):
        h.update(data[start:start + 37])
    assert h.digest() == md5(data)


def test_digest_can_be_repeated():
    h = Md5(b"hello")
    first = h.digest()
    assert h.digest() == first
    h.update(b" world")
    assert h.digest() == md5(b"hello world")


def test_make_md5_of_string_is_plain_md5():
    assert make_md5(b"abc") == hashlib.md5(b"abc").digest()
    assert make_md5("abc") == hashlib.md5(b"abc").digest()


def test_make_md5_null_collides_with_zero_bytes():
    assert make_md5(None) == md5(b"\x00\x00\x00\x00")


def test_make_md5_bools():
    assert make_md5(True) == md5(struct.pack("<I", 8))
    assert make_md5(False) == md5(struct.pack("<I", 16))


def test_make_md5_int_uses_tagged_form():
    assert make_md5(0) == md5(struct.pack("<I", 1))
    assert make_md5(5) == md5(struct.pack("<I", 11))


def test_make_md5_int32_and_float():
    assert make_md5(Int32(-1)) == md5(struct.pack("<I", 0xFFFFFFFF))
    assert make_md5(1.5) == md5(struct.pack("<d", 1.5))


def test_make_md5_array_walks_backwards():
    expected = md5(struct.pack("<I", (2 << 3) | 6) + b"yx")
    assert make_md5([b"x", b"y"]) == expected


def test_make_md5_cycle_terminates():
    arr = []
    arr.append(arr)
    assert make_md5(arr) == md5(struct.pack("<II", (1 << 3) | 6, 2))


def test_make_md5_object():
    o = NekoObject({"a": None})
    assert make_md5(o) == md5(struct.pack("<II", field_id("a"), 0))


def test_make_md5_equal_structures_agree():
    a = [1, [2.5, b"s"], NekoObject({"k": True})]
    b = [1, [2.5, b"s"], NekoObject({"k": True})]
    assert make_md5(a) == make_md5(b)


def test_make_sha1_substring():
    assert make_sha1(b"hello world", 6, 5) == hashlib.sha1(b"world").digest()


@pytest.mark.parametrize("pos,length", [(-1, 2), (0, -1), (3, 20)])
def test_make_sha1_bad_range(pos, length):
    with pytest.raises(NekoError):
        make_sha1(b"hello", pos, length)