import math

import pytest

from nekostd.numeric import (
    math_abs,
    math_acos,
    math_asin,
    math_atan,
    math_atan2,
    math_ceil,
    math_cos,
    math_exp,
    math_fceil,
    math_ffloor,
    math_floor,
    math_fround,
    math_int,
    math_log,
    math_pi,
    math_pow,
    math_round,
    math_sin,
    math_sqrt,
    math_tan,
)
from nekostd.values import Int32, NekoError

FLOATS = [0.0, 0.5, 1.25, 2.5, -0.5, -1.25, -2.5, 1000.999, -1000.001]


def test_pi():
    assert math_pi() == math.pi


@pytest.mark.parametrize("x", FLOATS)
def test_floor_ceil_bounds(x):
    f = math_floor(x)
    c = math_ceil(x)
    assert f <= x < f + 1
    assert c - 1 < x <= c


@pytest.mark.parametrize("x", FLOATS)
def test_round_is_floor_of_half_up(x):
    assert math_round(x) == math_floor(x + 0.5)
    assert math_fround(x) == float(math_round(x))


@pytest.mark.parametrize("x", FLOATS)
def test_int_truncates_toward_zero(x):
    expected = math_ceil(x) if x < 0 else math_floor(x)
    assert math_int(x) == expected
    assert abs(math_int(x)) <= abs(x)


@pytest.mark.parametrize("x", FLOATS)
def test_float_variants_match_int_variants(x):
    assert math_ffloor(x) == float(math_floor(x))
    assert math_fceil(x) == float(math_ceil(x))
    assert isinstance(math_ffloor(x), float)


@pytest.mark.parametrize("fn", [math_ceil, math_floor, math_round, math_int, math_fceil, math_ffloor, math_fround])
def test_integer_inputs_pass_through(fn):
    assert fn(42) == 42
    assert fn(Int32(2**31 - 1)) == Int32(2**31 - 1)


def test_ffloor_keeps_large_values():
    assert math_ffloor(1e20) == 1e20


def test_abs():
    assert math_abs(-3) == 3
    assert math_abs(Int32(-(2**30) - 10)) == Int32(2**30 + 10)
    assert math_abs(-2.5) == 2.5


@pytest.mark.parametrize("fn", [math_abs, math_floor, math_ceil, math_round, math_int, math_sqrt])
def test_non_numbers_rejected(fn):
    with pytest.raises(NekoError):
        fn("3")
    with pytest.raises(NekoError):
        fn(None)


def test_pow_integral_results_are_ints():
    r = math_pow(2, 10)
    assert r == 2**10
    assert isinstance(r, int)


def test_pow_fractional_is_float():
    r = math_pow(2, 0.5)
    assert isinstance(r, float)
    assert r * r == pytest.approx(2.0)


def test_pow_zero_negative_is_infinite():
    assert math_pow(0, -1) == math.inf


def test_sqrt_and_log_domain():
    assert math.isnan(math_sqrt(-1))
    assert math_log(0) == -math.inf
    assert math.isnan(math_log(-1))
    assert math.isnan(math_acos(2))


@pytest.mark.parametrize("x", [0.1, 0.5, 1.0, 2.0, 3.0])
def test_exp_log_round_trip(x):
    assert math_log(math_exp(x)) == pytest.approx(x)


@pytest.mark.parametrize("x", [-0.9, -0.3, 0.0, 0.4, 0.8])
def test_trig_identities(x):
    assert math_sin(x) ** 2 + math_cos(x) ** 2 == pytest.approx(1.0)
    assert math_tan(x) == pytest.approx(math_sin(x) / math_cos(x))
    assert math_sin(math_asin(x)) == pytest.approx(x)
    assert math_cos(math_acos(x)) == pytest.approx(x)
    assert math_atan2(x, 1) == pytest.approx(math_atan(x))


def test_exp_overflow_is_infinite():
    assert math_exp(1e6) == math.inf