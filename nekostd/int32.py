"""Signed 32-bit integer arithmetic."""

from __future__ import annotations

from typing import Any

from .values import Int32, NekoError, any_int, best_int, need_32_bits, truncate_to_int32


def _number(v: Any) -> float | int:
    if isinstance(v, Int32):
        return v.value
    if isinstance(v, (int, float)) and not isinstance(v, bool):
        return v
    raise NekoError("Invalid argument")


def int32_new(v: Any) -> Int32:
    """Build an Int32 from any number, truncating floats."""
    n = _number(v)
    if isinstance(n, float):
        n = truncate_to_int32(n)
    return Int32(n)


def int32_to_int(v: Any) -> int:
    """Return the value as a plain int if it fits in 31 bits."""
    i = any_int(v)
    if need_32_bits(i):
        raise NekoError("Overflow")
    return i


def int32_to_float(v: Any) -> float:
    """Return the float value of the integer."""
    return float(any_int(v))


def int32_compare(a: Any, b: Any) -> int:
    """Compare two integers, giving -1, 0 or 1."""
    i1, i2 = any_int(a), any_int(b)
    return (i1 > i2) - (i1 < i2)


def _trunc_div(a: int, b: int) -> int:
    q = abs(a) // abs(b)
    return -q if (a < 0) != (b < 0) else q


def int32_add(a: Any, b: Any) -> int | Int32:
    return best_int(any_int(a) + any_int(b))


def int32_sub(a: Any, b: Any) -> int | Int32:
    return best_int(any_int(a) - any_int(b))


def int32_mul(a: Any, b: Any) -> int | Int32:
    return best_int(any_int(a) * any_int(b))


def int32_div(a: Any, b: Any) -> int | Int32:
    """Divide, truncating toward zero. Division by zero raises."""
    x, d = any_int(a), any_int(b)
    if d == 0:
        raise NekoError("Division by zero")
    return best_int(_trunc_div(x, d))


def int32_mod(a: Any, b: Any) -> int | Int32:
    """Remainder with the sign of the dividend. Modulo by zero raises."""
    x, d = any_int(a), any_int(b)
    if d == 0:
        raise NekoError("Division by zero")
    r = abs(x) % abs(d)
    return best_int(-r if x < 0 else r)


def int32_shl(a: Any, b: Any) -> int | Int32:
    return best_int(any_int(a) << (any_int(b) & 31))


def int32_shr(a: Any, b: Any) -> int | Int32:
    return best_int(any_int(a) >> (any_int(b) & 31))


def int32_ushr(a: Any, b: Any) -> int | Int32:
    """Unsigned right shift."""
    return best_int((any_int(a) & 0xFFFFFFFF) >> (any_int(b) & 31))


def int32_neg(v: Any) -> int | Int32:
    return best_int(-any_int(v))


def int32_complement(v: Any) -> int | Int32:
    return best_int(~any_int(v))


def int32_or(a: Any, b: Any) -> int | Int32:
    return best_int(any_int(a) | any_int(b))


def int32_and(a: Any, b: Any) -> int | Int32:
    return best_int(any_int(a) & any_int(b))


def int32_xor(a: Any, b: Any) -> int | Int32:
    return best_int(any_int(a) ^ any_int(b))