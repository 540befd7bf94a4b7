"""Float byte encodings and a stable in-place merge sort."""

from __future__ import annotations

import math
import struct
from typing import Any, Callable

from .values import Int32, NekoError


def _number(v: Any) -> float:
    if isinstance(v, Int32):
        return float(v.value)
    if isinstance(v, (int, float)) and not isinstance(v, bool):
        return float(v)
    raise NekoError("Invalid argument")


def _byte_order(big_endian: Any) -> str:
    if not isinstance(big_endian, bool):
        raise NekoError("Invalid argument")
    return ">" if big_endian else "<"


def _check_bytes(s: Any, size: int) -> bytes:
    if not isinstance(s, (bytes, bytearray)):
        raise NekoError("Invalid argument")
    if len(s) != size:
        raise NekoError("Invalid length")
    return bytes(s)


def float_bytes(n: Any, big_endian: Any) -> bytes:
    """Return the 4-byte IEEE single representation of a number."""
    x = _number(n)
    order = _byte_order(big_endian)
    try:
        return struct.pack(order + "f", x)
    except OverflowError:
        return struct.pack(order + "f", math.copysign(math.inf, x))


def double_bytes(n: Any, big_endian: Any) -> bytes:
    """Return the 8-byte IEEE double representation of a number."""
    x = _number(n)
    return struct.pack(_byte_order(big_endian) + "d", x)


def float_of_bytes(s: Any, big_endian: Any) -> float:
    """Decode a 4-byte IEEE single."""
    data = _check_bytes(s, 4)
    return struct.unpack(_byte_order(big_endian) + "f", data)[0]


def double_of_bytes(s: Any, big_endian: Any) -> float:
    """Decode an 8-byte IEEE double."""
    data = _check_bytes(s, 8)
    return struct.unpack(_byte_order(big_endian) + "d", data)[0]


class _MergeSorter:
    def __init__(self, arr: list, cmp: Callable[[Any, Any], Any]) -> None:
        self.arr = arr
        self.cmp = cmp

    def compare(self, a: int, b: int) -> int:
        v = self.cmp(self.arr[a], self.arr[b])
        if isinstance(v, bool) or not isinstance(v, int):
            return -1
        return v

    def swap(self, a: int, b: int) -> None:
        self.arr[a], self.arr[b] = self.arr[b], self.arr[a]

    def lower(self, lo: int, hi: int, val: int) -> int:
        length = hi - lo
        while length > 0:
            half = length >> 1
            mid = lo + half
            if self.compare(mid, val) < 0:
                lo = mid + 1
                length -= half + 1
            else:
                length = half
        return lo

    def upper(self, lo: int, hi: int, val: int) -> int:
        length = hi - lo
        while length > 0:
            half = length >> 1
            mid = lo + half
            if self.compare(val, mid) < 0:
                length = half
            else:
                lo = mid + 1
                length -= half + 1
        return lo

    def rotate(self, lo: int, mid: int, hi: int) -> None:
        if lo == mid or mid == hi:
            return
        arr = self.arr
        n = math.gcd(hi - lo, mid - lo)
        shift = mid - lo
        while n:
            n -= 1
            saved = arr[lo + n]
            p1 = lo + n
            p2 = lo + n + shift
            while p2 != lo + n:
                arr[p1] = arr[p2]
                p1 = p2
                if hi - p2 > shift:
                    p2 += shift
                else:
                    p2 = lo + (shift - (hi - p2))
            arr[p1] = saved

    def merge(self, lo: int, pivot: int, hi: int, len1: int, len2: int) -> None:
        if len1 == 0 or len2 == 0:
            return
        if len1 + len2 == 2:
            if self.compare(pivot, lo) < 0:
                self.swap(pivot, lo)
            return
        if len1 > len2:
            len11 = len1 >> 1
            first_cut = lo + len11
            second_cut = self.lower(pivot, hi, first_cut)
            len22 = second_cut - pivot
        else:
            len22 = len2 >> 1
            second_cut = pivot + len22
            first_cut = self.upper(lo, pivot, second_cut)
            len11 = first_cut - lo
        self.rotate(first_cut, pivot, second_cut)
        new_mid = first_cut + len22
        self.merge(lo, first_cut, new_mid, len11, len22)
        self.merge(new_mid, second_cut, hi, len1 - len11, len2 - len22)

    def sort(self, lo: int, hi: int) -> None:
        if hi - lo < 12:
            if hi <= lo:
                return
            for i in range(lo + 1, hi):
                j = i
                while j > lo and self.compare(j, j - 1) < 0:
                    self.swap(j - 1, j)
                    j -= 1
            return
        middle = (lo + hi) >> 1
        self.sort(lo, middle)
        self.sort(middle, hi)
        self.merge(lo, middle, hi, middle - lo, hi - middle)


def merge_sort(arr: list, length: int, cmp: Callable[[Any, Any], Any]) -> None:
    """Sort the first `length` items of arr in place, stably, using cmp."""
    if not isinstance(arr, list):
        raise NekoError("Invalid argument")
    if isinstance(length, bool) or not isinstance(length, int):
        raise NekoError("Invalid argument")
    if not callable(cmp):
        raise NekoError("Invalid argument")
    if length > len(arr):
        raise NekoError("Length out of range")
    _MergeSorter(arr, cmp).sort(0, length)