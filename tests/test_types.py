import math

import pytest

from empi.types import IndexRange, ceil_to_int, floor_to_int, round_to_int


@pytest.mark.parametrize("x", [-7.25, -0.5, 0.0, 0.4, 1.5, 2.5, 123.999])
def test_ceil_and_floor_bracket_value(x):
    c = ceil_to_int(x)
    f = floor_to_int(x)
    assert isinstance(c, int) and isinstance(f, int)
    assert f <= x <= c
    assert c - f <= 1
    assert (c == f) == (x == int(x))


@pytest.mark.parametrize("x", [-3.7, -1.2, 0.2, 4.49, 4.51, 10.0])
def test_round_is_nearest(x):
    r = round_to_int(x)
    assert abs(r - x) <= 0.5


def test_round_ties_to_even():
    assert round_to_int(2.5) == 2
    assert round_to_int(3.5) == 4
    assert round_to_int(-0.5) == 0


@pytest.mark.parametrize("func", [round_to_int, ceil_to_int, floor_to_int])
@pytest.mark.parametrize("x", [math.nan, math.inf, -math.inf, 1e19, -1e19])
def test_overflow_detected(func, x):
    with pytest.raises(OverflowError):
        func(x)


def test_overlap_of_intersecting_ranges():
    assert IndexRange(0, 10).overlap(IndexRange(5, 20)) == IndexRange(5, 10)
    assert IndexRange(5, 20).overlap(IndexRange(0, 10)) == IndexRange(5, 10)


def test_overlap_of_disjoint_ranges_is_empty():
    result = IndexRange(0, 5).overlap(IndexRange(5, 9))
    assert result == IndexRange()
    assert not result


def test_includes_is_half_open():
    r = IndexRange(-3, 4)
    assert r.includes(-3)
    assert r.includes(3)
    assert not r.includes(4)
    assert not r.includes(-4)


def test_truthiness():
    assert IndexRange(1, 2)
    assert not IndexRange(2, 2)
    assert not IndexRange(5, 1)
    assert not IndexRange()