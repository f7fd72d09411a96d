import math

import numpy as np
import pytest

from empi.family import GaussianFamily, TriangularFamily, get_family
from empi.types import IndexRange

NAMES = ["gauss", "triangular"]


def _grid(family, points=40001):
    t = np.linspace(family.min_arg() - 0.5, family.max_arg() + 0.5, points)
    dt = t[1] - t[0]
    f = np.array([family.value(v) for v in t])
    return t, f, dt


@pytest.mark.parametrize("name", NAMES)
def test_l2_normalized(name):
    family = GaussianFamily(5.0) if name == "gauss" else TriangularFamily()
    t = np.linspace(family.min_arg() - 0.5, family.max_arg() + 0.5, 40001)
    f = np.array([family.value(v) for v in t])
    assert float(np.sum(f * f) * (t[1] - t[0])) == pytest.approx(1.0, abs=1e-4)


@pytest.mark.parametrize("name", NAMES)
def test_second_moment(name):
    family = GaussianFamily(5.0) if name == "gauss" else TriangularFamily()
    t = np.linspace(family.min_arg() - 0.5, family.max_arg() + 0.5, 40001)
    f = np.array([family.value(v) for v in t])
    moment = float(np.sum(t * t * f * f) * (t[1] - t[0]))
    assert moment == pytest.approx(1 / (4 * math.pi), abs=1e-4)


@pytest.mark.parametrize("name", NAMES)
def test_time_integral_matches_numeric(name):
    family = GaussianFamily(5.0) if name == "gauss" else TriangularFamily()
    x = 0.3
    t, _, dt = _grid(family)
    a = np.array([family.value(v + x / 2) for v in t])
    b = np.array([family.value(v - x / 2) for v in t])
    assert float(np.sum(a * b) * dt) == pytest.approx(family.time_integral(x), abs=1e-4)


@pytest.mark.parametrize("name", NAMES)
def test_integrals_at_zero_are_one(name):
    family = GaussianFamily(5.0) if name == "gauss" else TriangularFamily()
    assert family.scale_integral(0.0) == pytest.approx(1.0)
    assert family.freq_integral(0.0) == pytest.approx(1.0)
    assert family.time_integral(0.0) == pytest.approx(1.0)
    assert family.skew_integral(0.4) == 0.0


@pytest.mark.parametrize("name", NAMES)
@pytest.mark.parametrize("x", [0.1, 0.25, 0.4])
def test_inverse_integrals_round_trip(name, x):
    family = GaussianFamily(5.0) if name == "gauss" else TriangularFamily()
    assert family.inv_freq_integral(family.freq_integral(x)) == pytest.approx(x, abs=1e-8)
    assert family.inv_time_integral(family.time_integral(x)) == pytest.approx(x, abs=1e-8)
    assert family.inv_scale_integral(family.scale_integral(3 * x)) == pytest.approx(3 * x, abs=1e-8)


@pytest.mark.parametrize("name", NAMES)
@pytest.mark.parametrize("value", [0.0, 1.0, -0.2, 1.5])
def test_solve_integral_rejects_out_of_range(name, value):
    family = GaussianFamily(5.0) if name == "gauss" else TriangularFamily()
    with pytest.raises(ValueError):
        family.solve_integral(family.time_integral, value)


@pytest.mark.parametrize("name", NAMES)
def test_size_for_values_matches_range(name):
    family = GaussianFamily(5.0) if name == "gauss" else TriangularFamily()
    center, scale = 17.3, 6.2
    rng = family.compute_range(center, scale)
    count, offset = family.size_for_values(center, scale)
    assert offset == rng.first_index
    assert count == rng.end_index - rng.first_index
    assert rng.first_index >= center + scale * family.min_arg()
    assert rng.end_index - 1 <= center + scale * family.max_arg()


def test_compute_range_integer_bounds():
    family = GaussianFamily(2.0)
    assert family.compute_range(10.0, 1.0) == IndexRange(8, 13)


@pytest.mark.parametrize("name", NAMES)
def test_generate_values(name):
    family = GaussianFamily(5.0) if name == "gauss" else TriangularFamily()
    center, scale = 20.4, 8.0
    raw = family.generate_values(center, scale, False)
    norm = family.generate_values(center, scale, True)
    count, offset = family.size_for_values(center, scale)
    assert len(raw.values) == count
    assert raw.offset == norm.offset == offset
    assert raw.values[3] == pytest.approx(family.value((offset + 3 - center) / scale))
    assert float(np.sum(norm.values ** 2)) == pytest.approx(1.0)
    assert raw.norm == pytest.approx(norm.norm)
    np.testing.assert_allclose(raw.values * raw.norm, norm.values)


def test_triangular_zero_outside_support():
    family = TriangularFamily()
    assert family.value(family.max_arg() + 0.01) == 0.0
    assert family.value(family.min_arg() - 0.01) == 0.0
    assert family.time_integral(2.5 * family.max_arg()) == 0.0


@pytest.mark.parametrize("name", NAMES)
def test_optimality_factors(name):
    family = GaussianFamily(5.0) if name == "gauss" else TriangularFamily()
    assert family.optimality_factor_e2(0.0) == 1.0
    assert family.optimality_factor_e2(0.1) < 1.0
    assert family.optimality_factor_sf(1.0) < family.optimality_factor_sf(2.0) < 1.0


def test_gaussian_requires_positive_width():
    with pytest.raises(ValueError):
        GaussianFamily(0.0)


def test_get_family():
    assert get_family("gauss").name == "gauss"
    assert get_family("triangular").name == "triangular"
    assert get_family("gauss") is get_family("gauss")
    with pytest.raises(ValueError):
        get_family("box")