"""
Relative-strength comparison of two instruments.

The closes of instrument A and instrument B are merged by date, divided,
and scaled by mean(B) / mean(A) so the ratio hovers around 1.0 regardless
of the instruments' price levels. The ratio series then runs through the
same alignment and hysteresis engine as a price series, using the
geometric ratio grid. The direction of the final segment is the verdict:
Upward favours A, Downward favours B.
"""

import logging
from dataclasses import dataclass, field
from statistics import fmean
from typing import List, Optional, Sequence

from ..trend_analysis.constants import GRID_PRECISION
from ..trend_analysis.errors import DegenerateSeriesError
from ..trend_analysis.grid import QuantizationGrid, ratio_grid
from ..trend_analysis.preprocessor import preprocess_ratios
from ..trend_analysis.state_machine import segment_series
from ..trend_analysis.trend_config import TrendConfig
from ..trend_analysis.types import CloseRecord, RatioRecord, TrendSegment, TrendType

logger = logging.getLogger(__name__)


@dataclass
class ComparisonResult:
    """
    Outcome of comparing two instruments.

    Attributes:
        winner: Identifier of the favoured instrument.
        code_a: First instrument identifier.
        code_b: Second instrument identifier.
        verdict: Trend of the final ratio segment, None when the ratio
            series was empty and the longer history decided.
        segments: Ratio-series segments (empty in the fallback case).
        ratio_count: Number of date-matched ratio records.
    """
    winner: str
    code_a: str
    code_b: str
    verdict: Optional[TrendType] = None
    segments: List[TrendSegment] = field(default_factory=list)
    ratio_count: int = 0


def compute_scale_factor(series_a: Sequence[CloseRecord], series_b: Sequence[CloseRecord]) -> float:
    """
    Scale factor mean(B) / mean(A) over each series' full range.

    Raises:
        DegenerateSeriesError: If either series is empty or mean(A) is zero.
    """
    if not series_a or not series_b:
        raise DegenerateSeriesError(
            f"Cannot scale ratio with empty series (len A={len(series_a)}, len B={len(series_b)})"
        )
    mean_a = fmean(r.close for r in series_a)
    mean_b = fmean(r.close for r in series_b)
    if mean_a == 0:
        raise DegenerateSeriesError("Cannot scale ratio: mean close of series A is zero")
    return mean_b / mean_a


def build_ratio_series(
    series_a: Sequence[CloseRecord],
    series_b: Sequence[CloseRecord],
) -> List[RatioRecord]:
    """
    Merge two close series by date into a scaled ratio series.

    Both series are walked in ascending date order; only dates present in
    both produce a ratio, the rest are skipped.

    Raises:
        DegenerateSeriesError: If scaling is impossible or B closes at zero
            on a matched date.
    """
    scale = compute_scale_factor(series_a, series_b)
    ordered_a = sorted(series_a, key=lambda r: r.date)
    ordered_b = sorted(series_b, key=lambda r: r.date)

    ratios: List[RatioRecord] = []
    i = j = 0
    while i < len(ordered_a) and j < len(ordered_b):
        record_a = ordered_a[i]
        record_b = ordered_b[j]
        if record_a.date == record_b.date:
            if record_b.close == 0:
                raise DegenerateSeriesError(
                    f"Cannot form ratio on {record_b.date}: close of series B is zero"
                )
            ratio = round(record_a.close / record_b.close * scale, GRID_PRECISION)
            ratios.append(RatioRecord(date=record_a.date, ratio=ratio))
            i += 1
            j += 1
        elif record_a.date < record_b.date:
            i += 1
        else:
            j += 1

    return ratios


class RatioSeriesBuilder:
    """
    Comparative ranking of instrument pairs by relative-strength trend.

    Holds only immutable collaborators (grid, config), so one builder can
    serve any number of concurrent comparisons.
    """

    def __init__(
        self,
        grid: Optional[QuantizationGrid] = None,
        config: Optional[TrendConfig] = None,
    ):
        self.grid = grid or ratio_grid()
        self.config = config or TrendConfig.default()

    def build(
        self,
        series_a: Sequence[CloseRecord],
        series_b: Sequence[CloseRecord],
    ) -> List[RatioRecord]:
        return build_ratio_series(series_a, series_b)

    def segments(
        self,
        series_a: Sequence[CloseRecord],
        series_b: Sequence[CloseRecord],
    ) -> List[TrendSegment]:
        """Segment the A/B ratio series."""
        ratios = self.build(series_a, series_b)
        observations = preprocess_ratios(ratios, self.grid)
        return segment_series(observations, self.config)

    def compare(
        self,
        code_a: str,
        series_a: Sequence[CloseRecord],
        code_b: str,
        series_b: Sequence[CloseRecord],
    ) -> ComparisonResult:
        """
        Decide which of two instruments is favoured.

        Returns:
            ComparisonResult whose winner is code_a or code_b.

        Raises:
            DegenerateSeriesError: If the ratio cannot be formed.
            NoTrendSeedError: If the ratio series never trends.
        """
        ratios = self.build(series_a, series_b)

        if not ratios:
            winner = code_a if len(series_a) > len(series_b) else code_b
            logger.info(
                f"No overlapping dates for {code_a}/{code_b}; "
                f"{winner} wins on longer history"
            )
            return ComparisonResult(winner=winner, code_a=code_a, code_b=code_b)

        observations = preprocess_ratios(ratios, self.grid)
        segments = segment_series(observations, self.config)
        verdict = segments[-1].trend_type
        winner = code_a if verdict is TrendType.UPWARD else code_b

        logger.debug(
            f"{code_a}/{code_b}: {len(ratios)} ratios, {len(segments)} segments, "
            f"final {verdict.value} -> {winner}"
        )
        return ComparisonResult(
            winner=winner,
            code_a=code_a,
            code_b=code_b,
            verdict=verdict,
            segments=segments,
            ratio_count=len(ratios),
        )

    def match_winner(
        self,
        code_a: str,
        series_a: Sequence[CloseRecord],
        code_b: str,
        series_b: Sequence[CloseRecord],
    ) -> str:
        """
        Winner of a tournament match.

        An instrument with no history cannot form a ratio; the longer
        history wins (ties to B) instead of failing the whole round.
        """
        if not series_a or not series_b:
            winner = code_a if len(series_a) > len(series_b) else code_b
            logger.warning(
                f"{code_a}/{code_b}: empty history (len A={len(series_a)}, "
                f"len B={len(series_b)}); {winner} wins on longer history"
            )
            return winner
        return self.compare(code_a, series_a, code_b, series_b).winner


def compare_instruments(
    code_a: str,
    series_a: Sequence[CloseRecord],
    code_b: str,
    series_b: Sequence[CloseRecord],
    builder: Optional[RatioSeriesBuilder] = None,
) -> str:
    """Return the identifier of the favoured instrument."""
    builder = builder or RatioSeriesBuilder()
    return builder.compare(code_a, series_a, code_b, series_b).winner
