"""
Relative Strength Ranking

Applies the trend segmentation engine to the ratio of two instruments'
closes to decide which one is stronger, and reduces candidate sets by
pairwise elimination.
"""

from .ratio_builder import (
    ComparisonResult,
    RatioSeriesBuilder,
    build_ratio_series,
    compare_instruments,
    compute_scale_factor,
)
from .tournament import (
    filter_candidates,
    pair_candidates,
    tournament_elimination,
)

__all__ = [
    "ComparisonResult",
    "RatioSeriesBuilder",
    "build_ratio_series",
    "compare_instruments",
    "compute_scale_factor",
    "filter_candidates",
    "pair_candidates",
    "tournament_elimination",
]
