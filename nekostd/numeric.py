"""Mathematical functions on runtime numbers."""

from __future__ import annotations

import math
from typing import Any, Callable

from .values import Int32, NekoError, best_int, truncate_to_int32


def _number(v: Any) -> float:
    if isinstance(v, Int32):
        return float(v.value)
    if isinstance(v, (int, float)) and not isinstance(v, bool):
        return float(v)
    raise NekoError("Invalid argument")


def _is_int(v: Any) -> bool:
    return isinstance(v, Int32) or (isinstance(v, int) and not isinstance(v, bool))


def _checked_float(v: Any) -> float:
    if isinstance(v, float):
        return v
    raise NekoError("Invalid argument")


def _float_call(fn: Callable[[float], float], x: float) -> float:
    try:
        return fn(x)
    except OverflowError:
        return math.inf
    except ValueError:
        return math.nan


def _is_odd_integer(x: float) -> bool:
    return math.isfinite(x) and x == int(x) and int(x) % 2 == 1


def math_pi() -> float:
    """Return the value of pi."""
    return math.pi


def math_atan2(a: Any, b: Any) -> float:
    return math.atan2(_number(a), _number(b))


def math_pow(a: Any, b: Any) -> int | Int32 | float:
    """Raise a to b; integral results that fit in 32 bits come back as integers."""
    x, y = _number(a), _number(b)
    try:
        r = math.pow(x, y)
    except OverflowError:
        r = -math.inf if x < 0 and _is_odd_integer(y) else math.inf
    except ValueError:
        if x == 0:
            negative = math.copysign(1.0, x) < 0 and _is_odd_integer(y)
            r = -math.inf if negative else math.inf
        else:
            r = math.nan
    if math.isfinite(r) and r == int(r) and abs(r) < 2**31:
        return best_int(int(r))
    return r


def math_abs(n: Any) -> int | Int32 | float:
    if isinstance(n, Int32):
        return Int32(abs(n.value))
    if _is_int(n):
        return abs(n)
    return abs(_checked_float(n))


def _round_with(n: Any, fn: Callable[[float], float]) -> int | Int32:
    if _is_int(n):
        return n
    return best_int(truncate_to_int32(fn(_checked_float(n))))


def _fround_with(n: Any, fn: Callable[[float], float]) -> int | Int32 | float:
    if _is_int(n):
        return n
    v = _checked_float(n)
    return fn(v) if math.isfinite(v) else v


def _floor(v: float) -> float:
    return float(math.floor(v)) if math.isfinite(v) else v


def _ceil(v: float) -> float:
    return float(math.ceil(v)) if math.isfinite(v) else v


def math_ceil(n: Any) -> int | Int32:
    """Round up to an integer."""
    return _round_with(n, _ceil)


def math_floor(n: Any) -> int | Int32:
    """Round down to an integer."""
    return _round_with(n, _floor)


def math_round(n: Any) -> int | Int32:
    """Round to the nearest integer, halves going up."""
    return _round_with(n, lambda v: _floor(v + 0.5))


def math_fceil(n: Any) -> int | Int32 | float:
    """Round up, keeping a float."""
    return _fround_with(n, _ceil)


def math_ffloor(n: Any) -> int | Int32 | float:
    """Round down, keeping a float."""
    return _fround_with(n, _floor)


def math_fround(n: Any) -> int | Int32 | float:
    """Round to nearest, keeping a float."""
    return _fround_with(n, lambda v: _floor(v + 0.5))


def math_int(n: Any) -> int | Int32:
    """Round toward zero."""
    return _round_with(n, lambda v: _ceil(v) if v < 0 else _floor(v))


def math_sqrt(n: Any) -> float:
    return _float_call(math.sqrt, _number(n))


def math_atan(n: Any) -> float:
    return math.atan(_number(n))


def math_cos(n: Any) -> float:
    return _float_call(math.cos, _number(n))


def math_sin(n: Any) -> float:
    return _float_call(math.sin, _number(n))


def math_tan(n: Any) -> float:
    return _float_call(math.tan, _number(n))


def math_log(n: Any) -> float:
    x = _number(n)
    if x == 0:
        return -math.inf
    return _float_call(math.log, x)


def math_exp(n: Any) -> float:
    return _float_call(math.exp, _number(n))


def math_acos(n: Any) -> float:
    return _float_call(math.acos, _number(n))


def math_asin(n: Any) -> float:
    return _float_call(math.asin, _number(n))