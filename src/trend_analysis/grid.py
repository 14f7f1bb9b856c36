"""
Quantization grids for price and relative-strength values.

Two variants share one container:
- Piecewise-linear price grid: fixed step per price tier, wider steps
  for higher prices.
- Geometric ratio grid: constant multiplicative spacing around 1.0.

Grid values are rounded, deduplicated and sorted; a level's index is its
rank in the sorted grid. Grids are immutable and safe to share between
any number of concurrent alignment calls.
"""

import math
from functools import lru_cache
from typing import Iterator, List, Literal, Sequence, Tuple

import numpy as np

from .constants import (
    GRID_PRECISION,
    PRICE_GRID_TIERS,
    RATIO_GRID_MAX,
    RATIO_GRID_MIN,
    RATIO_GROWTH_FACTOR,
)
from .types import GridLevel

GridKind = Literal["price", "ratio"]


class QuantizationGrid:
    """
    Ordered, deduplicated set of grid levels.

    Attributes:
        kind: "price" or "ratio".
        levels: Grid levels, strictly increasing in value and index.
    """

    def __init__(self, values: Sequence[float], kind: GridKind):
        unique = np.unique(np.round(np.asarray(values, dtype=np.float64), GRID_PRECISION))
        if unique.size == 0:
            raise ValueError("Grid must contain at least one value")
        self.kind = kind
        self._values: Tuple[float, ...] = tuple(float(v) for v in unique)
        self.levels: Tuple[GridLevel, ...] = tuple(
            GridLevel(value=v, index=i) for i, v in enumerate(self._values)
        )

    @property
    def values(self) -> Tuple[float, ...]:
        """Sorted grid values, parallel to levels."""
        return self._values

    @property
    def min_value(self) -> float:
        return self._values[0]

    @property
    def max_value(self) -> float:
        return self._values[-1]

    def level(self, index: int) -> GridLevel:
        return self.levels[index]

    def __len__(self) -> int:
        return len(self.levels)

    def __iter__(self) -> Iterator[GridLevel]:
        return iter(self.levels)

    def __repr__(self) -> str:
        return (
            f"QuantizationGrid(kind={self.kind!r}, size={len(self)}, "
            f"range=[{self.min_value}, {self.max_value}])"
        )


def generate_price_values(tiers=PRICE_GRID_TIERS) -> List[float]:
    """
    Generate raw values for the piecewise-linear price grid.

    Args:
        tiers: Sequence of (lower, upper, step, upper_inclusive) tuples.

    Returns:
        Values in generation order (ascending for contiguous tiers).
    """
    values: List[float] = []
    for lower, upper, step, upper_inclusive in tiers:
        count = int(math.floor((upper - lower) / step))
        if upper_inclusive:
            count += 1
        tier = lower + step * np.arange(count, dtype=np.float64)
        if upper_inclusive:
            tier = tier[tier <= upper]
        else:
            tier = tier[tier < upper]
        values.extend(tier.tolist())
    return values


def generate_ratio_values(
    growth_factor: float = RATIO_GROWTH_FACTOR,
    min_value: float = RATIO_GRID_MIN,
    max_value: float = RATIO_GRID_MAX,
) -> List[float]:
    """
    Generate raw values for the geometric ratio grid.

    Starts at 1.0, multiplies by growth_factor until past max_value and
    divides by it until below min_value. Only values inside
    [min_value, max_value] are kept.
    """
    if growth_factor <= 1.0:
        raise ValueError(f"growth_factor must be > 1, got {growth_factor}")
    if not 0 < min_value <= 1.0 <= max_value:
        raise ValueError(
            f"Ratio domain must bracket 1.0, got [{min_value}, {max_value}]"
        )

    values = [1.0]

    current = 1.0
    while current < max_value:
        current *= growth_factor
        if min_value <= current <= max_value:
            values.append(current)

    current = 1.0
    while current >= min_value:
        current /= growth_factor
        if current >= min_value:
            values.append(current)

    return values


def build_price_grid(tiers=PRICE_GRID_TIERS) -> QuantizationGrid:
    """Build the absolute-price grid."""
    return QuantizationGrid(generate_price_values(tiers), kind="price")


def build_ratio_grid(
    growth_factor: float = RATIO_GROWTH_FACTOR,
    min_value: float = RATIO_GRID_MIN,
    max_value: float = RATIO_GRID_MAX,
) -> QuantizationGrid:
    """Build the relative-strength grid."""
    return QuantizationGrid(
        generate_ratio_values(growth_factor, min_value, max_value),
        kind="ratio",
    )


@lru_cache(maxsize=None)
def price_grid() -> QuantizationGrid:
    """Shared default price grid, built on first use."""
    return build_price_grid()


@lru_cache(maxsize=None)
def ratio_grid() -> QuantizationGrid:
    """Shared default ratio grid, built on first use."""
    return build_ratio_grid()


def grid_for_kind(kind: GridKind) -> QuantizationGrid:
    if kind == "price":
        return price_grid()
    if kind == "ratio":
        return ratio_grid()
    raise ValueError(f"Invalid grid kind: {kind}. Must be 'price' or 'ratio'.")
