"""Envelope function families used to build time-frequency dictionaries."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import Callable, NamedTuple

import numpy as np

from .types import IndexRange, ceil_to_int, floor_to_int

__all__ = [
    "EnvelopeValues",
    "Family",
    "GaussianFamily",
    "SampleSpan",
    "TriangularFamily",
    "get_family",
]

# Number of midpoint-rule nodes on the positive half-axis for the skew integral.
_SKEW_QUADRATURE_POINTS = 256


class SampleSpan(NamedTuple):
    """Number of samples of an envelope realization and index of its first sample."""

    count: int
    offset: int


class EnvelopeValues(NamedTuple):
    """Sampled envelope realization with its first sample index and L² normalization factor."""

    values: np.ndarray
    offset: int
    norm: float


class Family(ABC):
    """Base class for envelope families.

    Each family is L²-normalized (∫ f(t)² dt = 1, ∫ t² f(t)² dt = 1/4π) and
    provides the integrals needed for optimal dictionary construction.
    """

    name: str = ""

    def compute_range(self, center_position: float, scale: float) -> IndexRange:
        """Range of sample indices covered by the envelope at given position and scale."""
        return IndexRange(
            ceil_to_int(center_position + scale * self.min_arg()),
            floor_to_int(center_position + scale * self.max_arg()) + 1,
        )

    def size_for_values(self, center_position: float, scale: float) -> SampleSpan:
        """Number of samples needed for the realization, and the first sample's index."""
        rng = self.compute_range(center_position, scale)
        return SampleSpan(max(0, rng.end_index - rng.first_index), rng.first_index)

    def generate_values(self, center_position: float, scale: float, normalize: bool) -> EnvelopeValues:
        """Sample the envelope; values[i] = value((offset + i - center_position) / scale).

        The returned norm is the L² normalization factor, applied only if normalize is true.
        """
        count, offset = self.size_for_values(center_position, scale)
        values = np.fromiter(
            (self.value((offset + i - center_position) / scale) for i in range(count)),
            dtype=float,
            count=count,
        )
        sum2 = float(np.dot(values, values))
        norm = 1.0 / math.sqrt(sum2) if sum2 > 0 else math.inf
        if normalize and count:
            values = values * norm
        return EnvelopeValues(values, offset, norm)

    def solve_integral(self, integral: Callable[[float], float], value: float) -> float:
        """Find x >= 0 with integral(x) = value by bisection, for a decreasing integral."""
        if value <= 0 or value >= 1:
            raise ValueError("cannot solve outside valid range")
        x_left = 0.0
        x_right = -math.log(value)
        while integral(x_right) > value:
            x_right *= 2.0
        while True:
            x = 0.5 * (x_right + x_left)
            if integral(x) > value:
                x_left = x
            else:
                x_right = x
            if x_right - x_left <= 1.0e-10:
                return x

    def _skew_by_symmetry(self, x: float) -> float:
        """S(x) folded onto t >= 0: ∫ (f(t)² − f(−t)²) sin(2πxt) dt, by the midpoint rule.

        Only the odd part of f² contributes, so for an even envelope every term
        vanishes and the result is exactly zero.
        """
        half_width = max(self.max_arg(), -self.min_arg())
        step = half_width / _SKEW_QUADRATURE_POINTS
        total = 0.0
        for k in range(_SKEW_QUADRATURE_POINTS):
            t = (k + 0.5) * step
            asymmetry = self.value(t) ** 2 - self.value(-t) ** 2
            if asymmetry:
                total += asymmetry * math.sin(2.0 * math.pi * x * t)
        return total * step

    @abstractmethod
    def max_arg(self) -> float:
        """Largest t for which value(t) is non-negligible."""

    @abstractmethod
    def min_arg(self) -> float:
        """Smallest t for which value(t) is non-negligible."""

    @abstractmethod
    def value(self, t: float) -> float:
        """Value of the envelope function at t."""

    @abstractmethod
    def scale_integral(self, log_scale: float) -> float:
        """A(Δλ) = ∫ f(t e^(Δλ/2)) f(t e^(−Δλ/2)) dt."""

    @abstractmethod
    def inv_scale_integral(self, value: float) -> float:
        """Inverse of scale_integral."""

    @abstractmethod
    def freq_integral(self, x: float) -> float:
        """B(x) = ∫ f(t)² cos(2πxt) dt."""

    @abstractmethod
    def inv_freq_integral(self, value: float) -> float:
        """Inverse of freq_integral."""

    @abstractmethod
    def skew_integral(self, x: float) -> float:
        """S(x) = ∫ f(t)² sin(2πxt) dt."""

    @abstractmethod
    def time_integral(self, x: float) -> float:
        """C(x) = ∫ f(t+x/2) f(t−x/2) dt."""

    @abstractmethod
    def inv_time_integral(self, value: float) -> float:
        """Inverse of time_integral."""

    @abstractmethod
    def optimality_factor_e2(self, epsilon2: float) -> float:
        """Squared optimality factor depending on the energy error ε²."""

    @abstractmethod
    def optimality_factor_sf(self, scale_frequency: float) -> float:
        """Squared optimality factor depending on scale × frequency."""


_GAUSS_NORM = math.sqrt(math.sqrt(2.0))
# Half-width (in scale units) beyond which the Gaussian envelope is treated as zero.
_GAUSS_DEFAULT_HALF_WIDTH = 3.0


class GaussianFamily(Family):
    """Gaussian envelope f(t) = 2^(1/4) exp(−πt²)."""

    name = "gauss"

    def __init__(self, min_max: float = _GAUSS_DEFAULT_HALF_WIDTH) -> None:
        if not min_max > 0:
            raise ValueError("min_max must be positive")
        self.min_max = min_max

    def max_arg(self) -> float:
        return self.min_max

    def min_arg(self) -> float:
        return -self.min_max

    def value(self, t: float) -> float:
        return _GAUSS_NORM * math.exp(-math.pi * t * t)

    def scale_integral(self, log_scale: float) -> float:
        return 1.0 / math.sqrt(math.cosh(log_scale))

    def inv_scale_integral(self, value: float) -> float:
        return math.acosh(1.0 / (value * value))

    def freq_integral(self, x: float) -> float:
        return math.exp(-math.pi / 2 * x * x)

    def inv_freq_integral(self, value: float) -> float:
        return math.sqrt(-2.0 / math.pi * math.log(value))

    def skew_integral(self, x: float) -> float:
        return self._skew_by_symmetry(x)

    def time_integral(self, x: float) -> float:
        return math.exp(-math.pi / 2 * x * x)

    def inv_time_integral(self, value: float) -> float:
        return math.sqrt(-2.0 / math.pi * math.log(value))

    def optimality_factor_e2(self, epsilon2: float) -> float:
        return 1 - 1.5 * epsilon2

    def optimality_factor_sf(self, scale_frequency: float) -> float:
        return 1 - math.exp(-1.59 * scale_frequency - 2.11)


_TRI_MIN_MAX = math.sqrt(2.5 / math.pi)
_TRI_NORM = (0.9 * math.pi) ** 0.25


class TriangularFamily(Family):
    """Triangular envelope supported on ±sqrt(2.5/π)."""

    name = "triangular"

    def max_arg(self) -> float:
        return _TRI_MIN_MAX

    def min_arg(self) -> float:
        return -_TRI_MIN_MAX

    def value(self, t: float) -> float:
        abs_t = abs(t)
        return _TRI_NORM * (1.0 - abs_t / _TRI_MIN_MAX) if abs_t < _TRI_MIN_MAX else 0.0

    def scale_integral(self, log_scale: float) -> float:
        e = math.exp(-0.5 * log_scale)
        return (3.0 - e * e) * e / 2

    def inv_scale_integral(self, value: float) -> float:
        return self.solve_integral(self.scale_integral, value)

    def freq_integral(self, x: float) -> float:
        if abs(x) < 0.001:
            # series approximation avoids cancellation near zero
            return 1.0 - math.pi / 2 * x * x
        x_rel = math.sqrt(10 * math.pi) * x
        return 6 / (x_rel * x_rel) * (1 - math.sin(x_rel) / x_rel)

    def inv_freq_integral(self, value: float) -> float:
        return self.solve_integral(self.freq_integral, value)

    def skew_integral(self, x: float) -> float:
        return self._skew_by_symmetry(x)

    def time_integral(self, x: float) -> float:
        x_rel = abs(x) / _TRI_MIN_MAX
        if x_rel <= 1.0:
            return 1 + 0.75 * x_rel * x_rel * (x_rel - 2.0)
        if x_rel <= 2.0:
            t = 1.0 - 0.5 * x_rel
            return 2 * t * t * t
        return 0.0

    def inv_time_integral(self, value: float) -> float:
        return self.solve_integral(self.time_integral, value)

    def optimality_factor_e2(self, epsilon2: float) -> float:
        return 1 - 1.52 * epsilon2

    def optimality_factor_sf(self, scale_frequency: float) -> float:
        return 1 - math.exp(-0.9 * scale_frequency - 1.97)


_FAMILIES: dict[str, Family] = {
    "gauss": GaussianFamily(),
    "triangular": TriangularFamily(),
}


def get_family(name: str) -> Family:
    """Return the shared family instance registered under the given name."""
    try:
        return _FAMILIES[name]
    except KeyError:
        raise ValueError(f"unknown envelope family: {name}") from None