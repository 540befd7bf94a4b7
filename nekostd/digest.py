"""MD5 and SHA-1 digests, including MD5 digests of arbitrary runtime values."""

from __future__ import annotations

import hashlib
import math
import struct
from typing import Any

from .values import Int32, NekoError, NekoObject, need_32_bits, wrap_int32

_MASK32 = 0xFFFFFFFF
_MASK64 = 0xFFFFFFFFFFFFFFFF
_VAR_ARGS = -1
_CO_VARARGS = 0x04

_INIT_STATE = (0x67452301, 0xEFCDAB89, 0x98BADCFE, 0x10325476)
_SHIFTS = (
    (7, 12, 17, 22) * 4
    + (5, 9, 14, 20) * 4
    + (4, 11, 16, 23) * 4
    + (6, 10, 15, 21) * 4
)
_CONSTANTS = tuple(int(abs(math.sin(i + 1)) * 2**32) & _MASK32 for i in range(64))


def _rotl(x: int, n: int) -> int:
    x &= _MASK32
    return ((x << n) | (x >> (32 - n))) & _MASK32


def _message_index(i: int) -> int:
    if i < 16:
        return i
    if i < 32:
        return (5 * i + 1) % 16
    if i < 48:
        return (3 * i + 5) % 16
    return (7 * i) % 16


def _mix(i: int, b: int, c: int, d: int) -> int:
    if i < 16:
        return d ^ (b & (c ^ d))
    if i < 32:
        return c ^ (d & (b ^ c))
    if i < 48:
        return b ^ c ^ d
    return c ^ (b | (~d & _MASK32))


class Md5:
    """Incremental MD5 digest."""

    def __init__(self, data: bytes | bytearray | memoryview = b"") -> None:
        self._state = list(_INIT_STATE)
        self._buffer = bytearray()
        self._length = 0
        self.update(data)

    def _process(self, block: bytes | bytearray) -> None:
        words = struct.unpack("<16I", block)
        a, b, c, d = self._state
        for i in range(64):
            f = (a + _mix(i, b, c, d) + words[_message_index(i)] + _CONSTANTS[i]) & _MASK32
            a, d, c = d, c, b
            b = (b + _rotl(f, _SHIFTS[i])) & _MASK32
        self._state = [(s + v) & _MASK32 for s, v in zip(self._state, (a, b, c, d))]

    def update(self, data: bytes | bytearray | memoryview) -> None:
        """Feed more bytes into the digest."""
        data = bytes(data)
        self._length += len(data)
        self._buffer.extend(data)
        full = len(self._buffer) - len(self._buffer) % 64
        for start in range(0, full, 64):
            self._process(self._buffer[start:start + 64])
        del self._buffer[:full]

    def digest(self) -> bytes:
        """Return the 16-byte digest of everything fed so far."""
        clone = Md5()
        clone._state = list(self._state)
        clone._buffer = bytearray(self._buffer)
        clone._length = self._length
        bit_length = (self._length * 8) & _MASK64
        last = self._length & 0x3F
        padn = 56 - last if last < 56 else 120 - last
        clone.update(b"\x80" + b"\x00" * (padn - 1))
        clone.update(struct.pack("<Q", bit_length))
        return struct.pack("<4I", *clone._state)

    def hexdigest(self) -> str:
        return self.digest().hex()


def md5(data: bytes | bytearray | memoryview) -> bytes:
    """Return the MD5 digest of a byte string."""
    return Md5(data).digest()


def _fun_nargs(f: Any) -> int:
    """Number of positional parameters of a callable, or -1 when variadic or unknown."""
    target = f
    bound = 0
    if getattr(target, "__code__", None) is None:
        if getattr(target, "__func__", None) is None:
            target = getattr(type(f), "__call__", None)
            bound = 1
        else:
            target = target.__func__
            bound = 1
    code = getattr(target, "__code__", None)
    if code is None:
        return _VAR_ARGS
    if code.co_flags & _CO_VARARGS:
        return _VAR_ARGS
    return max(code.co_argcount - bound, 0)


class _ValueHasher:
    def __init__(self) -> None:
        self.md5 = Md5()
        self._stack: list[Any] = []

    def uint(self, n: int) -> None:
        self.md5.update(struct.pack("<I", n & _MASK32))

    def feed(self, v: Any) -> None:
        if v is None:
            self.uint(0)
        elif isinstance(v, bool):
            self.uint(8 if v else 16)
        elif isinstance(v, Int32):
            self.uint(v.value)
        elif isinstance(v, int):
            if need_32_bits(v):
                self.uint(wrap_int32(v))
            else:
                self.uint((v << 1) | 1)
        elif isinstance(v, float):
            self.md5.update(struct.pack("<d", v))
        elif isinstance(v, str):
            self.md5.update(v.encode("utf-8"))
        elif isinstance(v, (bytes, bytearray, memoryview)):
            self.md5.update(v)
        elif isinstance(v, (NekoObject, list, tuple)):
            self._feed_container(v)
        elif callable(v):
            self.uint((_fun_nargs(v) << 3) | 4)
        else:
            self.uint(24)

    def _feed_container(self, v: Any) -> None:
        for pos in range(len(self._stack) - 1, -1, -1):
            if self._stack[pos] is v:
                self.uint((pos << 3) | 2)
                return
        self._stack.append(v)
        try:
            if isinstance(v, NekoObject):
                for fid, fval in v.items():
                    self.uint(fid)
                    self.feed(fval)
                if v.proto is not None:
                    self.feed(v.proto)
            else:
                self.uint((len(v) << 3) | 6)
                for item in reversed(v):
                    self.feed(item)
        finally:
            self._stack.pop()


def make_md5(value: Any) -> bytes:
    """Build a 16-byte MD5 digest from any runtime value."""
    hasher = _ValueHasher()
    hasher.feed(value)
    return hasher.md5.digest()


def make_sha1(s: bytes | bytearray | str, pos: int, length: int) -> bytes:
    """Return the SHA-1 digest of s[pos:pos+length]."""
    if isinstance(s, str):
        s = s.encode("utf-8")
    if not isinstance(s, (bytes, bytearray)):
        raise NekoError("Invalid argument")
    for n in (pos, length):
        if isinstance(n, bool) or not isinstance(n, int):
            raise NekoError("Invalid argument")
    if pos < 0 or length < 0 or pos + length > len(s):
        raise NekoError("Invalid range")
    return hashlib.sha1(bytes(s[pos:pos + length])).digest()