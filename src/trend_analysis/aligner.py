"""
Floor alignment of raw values onto a quantization grid.

A value aligns to the greatest grid level not exceeding it. Values below
the grid minimum have no aligned level; callers exclude those records
instead of substituting a default.
"""

import bisect
import math
from typing import Iterable, List, Optional

from .errors import NonFiniteValueError
from .grid import QuantizationGrid
from .types import GridLevel


def align_value(grid: QuantizationGrid, value: float) -> Optional[GridLevel]:
    """
    Find the grid level with the greatest value <= the input.

    Args:
        grid: Grid to search.
        value: Raw value.

    Returns:
        The floor level, or None if value is below the grid minimum.

    Raises:
        NonFiniteValueError: If value is NaN or infinite.
    """
    value = float(value)
    if not math.isfinite(value):
        raise NonFiniteValueError(f"Cannot align non-finite value: {value}")

    # bisect_right lands after an exact match, so the -1 picks it up
    position = bisect.bisect_right(grid.values, value) - 1
    if position < 0:
        return None
    return grid.levels[position]


def align_values(grid: QuantizationGrid, values: Iterable[float]) -> List[Optional[GridLevel]]:
    """Align each value; positions of unalignable values hold None."""
    return [align_value(grid, v) for v in values]
