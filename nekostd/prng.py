"""Seeded pseudo-random generator (TT800 variant)."""

from __future__ import annotations

import os
import time
from typing import Any

from .values import NekoError, any_int

_NSEEDS = 25
_MAX = 7
_MASK32 = 0xFFFFFFFF
_MAG01 = (0x0, 0x8EBFD028)
_INIT_SEEDS = (
    0x95F24DAB, 0x0B685215, 0xE76CCAE7, 0xAF3EC239, 0x715FAD23,
    0x24A590AD, 0x69E4B5EF, 0xBF456141, 0x96BC1B7B, 0xA7BDF825,
    0xC1DE75B7, 0x8858A9C9, 0x2DA87693, 0xB657F9DD, 0xFFDC8A9F,
    0x8121DA71, 0x8B823ECB, 0x885D05F5, 0x4E20CD47, 0x5A9AD5D9,
    0x512C0C03, 0xEA857CCD, 0x4CC1D30F, 0x8891A8A1, 0xA6B7AADB,
)


class Random:
    """A pseudo-random generator; unseeded instances mix the clock and the pid."""

    def __init__(self, seed: Any = None) -> None:
        self._seeds: list[int] = []
        self._cur = 0
        if seed is None:
            pid = os.getpid()
            now = (time.time_ns() // 1000) & _MASK32
            self.set_seed(now ^ (pid | (pid << 16)))
        else:
            self.set_seed(seed)

    def set_seed(self, seed: Any) -> None:
        """Reset the generator state from a seed."""
        s = (any_int(seed) if not isinstance(seed, int) or isinstance(seed, bool) else seed) & _MASK32
        self._cur = 0
        self._seeds = [v ^ s for v in _INIT_SEEDS]

    def _regenerate(self) -> None:
        seeds = self._seeds
        for kk in range(_NSEEDS):
            partner = seeds[(kk + _MAX) % _NSEEDS]
            seeds[kk] = partner ^ (seeds[kk] >> 1) ^ _MAG01[seeds[kk] & 1]

    def next_uint(self) -> int:
        """Return the next unsigned 32-bit output."""
        pos = self._cur
        self._cur += 1
        if pos >= _NSEEDS:
            self._regenerate()
            self._cur = 1
            pos = 0
        y = self._seeds[pos]
        y ^= (y << 7) & 0x2B5B2500
        y ^= (y << 15) & 0xDB8B0000
        y &= _MASK32
        y ^= y >> 16
        return y

    def rand_int(self, maximum: Any) -> int:
        """Return a random integer in [0, maximum), or 0 when maximum <= 0."""
        if isinstance(maximum, bool) or not isinstance(maximum, int):
            raise NekoError("Invalid argument")
        if maximum <= 0:
            return 0
        return (self.next_uint() & 0x3FFFFFFF) % maximum

    def rand_float(self) -> float:
        """Return a random float in [0, 1)."""
        big = 4294967296.0
        a = self.next_uint()
        b = self.next_uint()
        c = self.next_uint()
        return ((a / big + b) / big + c) / big