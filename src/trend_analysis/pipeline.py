"""
End-to-end segmentation: raw records -> aligned series -> trend segments.

One engine, instantiated over either the price grid (high/low/close
aligned independently) or the ratio grid (a single relative-strength
scalar).
"""

from typing import Iterable, List, Optional

from .grid import QuantizationGrid, price_grid, ratio_grid
from .preprocessor import PRICE_FIELDS, RATIO_FIELDS, preprocess_series
from .state_machine import segment_series
from .trend_config import TrendConfig
from .types import PriceRecord, RatioRecord, TrendSegment


def segment_prices(
    records: Iterable[PriceRecord],
    grid: Optional[QuantizationGrid] = None,
    config: Optional[TrendConfig] = None,
) -> List[TrendSegment]:
    """Segment an absolute price series (defaults to the shared price grid)."""
    observations = preprocess_series(records, grid or price_grid(), PRICE_FIELDS)
    return segment_series(observations, config)


def segment_ratios(
    records: Iterable[RatioRecord],
    grid: Optional[QuantizationGrid] = None,
    config: Optional[TrendConfig] = None,
) -> List[TrendSegment]:
    """Segment a relative-strength series (defaults to the shared ratio grid)."""
    observations = preprocess_series(records, grid or ratio_grid(), RATIO_FIELDS)
    return segment_series(observations, config)
