import pytest

from nekostd.int32 import (
    int32_add,
    int32_and,
    int32_compare,
    int32_complement,
    int32_div,
    int32_mod,
    int32_mul,
    int32_neg,
    int32_new,
    int32_or,
    int32_shl,
    int32_shr,
    int32_sub,
    int32_to_float,
    int32_to_int,
    int32_ushr,
    int32_xor,
)
from nekostd.values import Int32, NekoError, best_int

SAMPLES = [0, 1, -1, 7, -7, 12345, -99999, 2**30, -(2**30) - 5, 2**31 - 1, -(2**31)]


def test_new_from_int_and_int32():
    assert int32_new(7) == Int32(7)
    assert int32_new(Int32(2**31 - 1)) == Int32(2**31 - 1)


def test_new_truncates_toward_zero():
    assert int32_new(-2.5) == int32_neg(int32_new(2.5)) or int32_new(-2.5).value == -int32_new(2.5).value
    assert int32_new(3.99).value == int32_new(3).value


def test_new_rejects_non_number():
    with pytest.raises(NekoError):
        int32_new("1")


def test_to_int():
    assert int32_to_int(Int32(5)) == 5
    with pytest.raises(NekoError):
        int32_to_int(Int32(2**30))


def test_to_float():
    assert int32_to_float(Int32(-12)) == -12.0


@pytest.mark.parametrize("a, b, expected", [(1, 2, -1), (2, 1, 1), (3, 3, 0), (Int32(-(2**31)), 0, -1)])
def test_compare(a, b, expected):
    assert int32_compare(a, b) == expected


@pytest.mark.parametrize("a", SAMPLES)
@pytest.mark.parametrize("b", [1, -3, 2**30, -(2**31)])
def test_add_sub_round_trip(a, b):
    assert int32_sub(int32_add(a, b), b) == best_int(a)


def test_add_overflow_wraps():
    assert int32_add(Int32(2**31 - 1), 1) == Int32(-(2**31))


def test_div_truncates_and_mod_follows_dividend():
    assert int32_div(-7, 2) == -3
    assert int32_mod(-7, 2) == -1


@pytest.mark.parametrize("a", [7, -7, 100, -100, 12345, -(2**30)])
@pytest.mark.parametrize("b", [2, -2, 3, -5, 7])
def test_div_mod_identity(a, b):
    q = int32_div(a, b)
    r = int32_mod(a, b)
    assert int32_add(int32_mul(q, b), r) == best_int(a)
    assert abs(int(r) if isinstance(r, int) else r.value) < abs(b)


def test_division_by_zero():
    with pytest.raises(NekoError):
        int32_div(1, 0)
    with pytest.raises(NekoError):
        int32_mod(1, Int32(0))


@pytest.mark.parametrize("x", [1, 3, -5, 1000])
@pytest.mark.parametrize("n", [0, 1, 4, 10])
def test_shl_is_multiplication(x, n):
    assert int32_shl(x, n) == int32_mul(x, 2**n)


@pytest.mark.parametrize("x", [0, 1, 99, 2**30, 2**31 - 1])
@pytest.mark.parametrize("n", [1, 5, 30])
def test_shr_equals_ushr_for_non_negative(x, n):
    assert int32_shr(x, n) == int32_ushr(x, n)


@pytest.mark.parametrize("x", [-1, -100, -(2**31)])
def test_ushr_of_negative_is_non_negative(x):
    result = int32_ushr(x, 1)
    value = result.value if isinstance(result, Int32) else result
    assert value > 0
    assert int32_shr(x, 1) != result


@pytest.mark.parametrize("x", SAMPLES)
def test_complement_and_neg(x):
    assert int32_complement(x) == int32_sub(int32_neg(x), 1)
    assert int32_neg(int32_neg(x)) == best_int(x)


@pytest.mark.parametrize("a", SAMPLES)
@pytest.mark.parametrize("b", [0, -1, 0x0F0F0F0F])
def test_bitwise_identities(a, b):
    assert int32_xor(int32_xor(a, b), b) == best_int(a)
    assert int32_or(a, b) == int32_xor(int32_xor(a, b), int32_and(a, b))
    assert int32_and(a, -1) == best_int(a)


def test_bad_operand():
    with pytest.raises(NekoError):
        int32_add(1.5, 1)