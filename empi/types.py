"""Integer rounding helpers and half-open index ranges."""

from __future__ import annotations

import math
from dataclasses import dataclass

__all__ = ["IndexRange", "ceil_to_int", "floor_to_int", "round_to_int"]

_INDEX_LOWEST = float(-(2**63))
_INDEX_MAX = float(2**63 - 1)


def _check_range(x: float) -> None:
    if not (_INDEX_LOWEST < x < _INDEX_MAX):
        raise OverflowError("rounding overflow detected")


def round_to_int(x: float) -> int:
    """Round to the nearest integer, ties to even; raise OverflowError if out of range."""
    _check_range(x)
    return round(x)


def ceil_to_int(x: float) -> int:
    """Round towards +infinity; raise OverflowError if out of range."""
    _check_range(x)
    return math.ceil(x)


def floor_to_int(x: float) -> int:
    """Round towards -infinity; raise OverflowError if out of range."""
    _check_range(x)
    return math.floor(x)


@dataclass(frozen=True)
class IndexRange:
    """Half-open range of sample indices [first_index, end_index)."""

    first_index: int = 0
    end_index: int = 0

    def overlap(self, other: IndexRange) -> IndexRange:
        """Return the common part of both ranges, or an empty range."""
        first = max(self.first_index, other.first_index)
        end = min(self.end_index, other.end_index)
        if first < end:
            return IndexRange(first, end)
        return IndexRange()

    def includes(self, index: int) -> bool:
        return self.first_index <= index < self.end_index

    def __bool__(self) -> bool:
        return self.first_index < self.end_index