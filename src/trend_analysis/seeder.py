"""
Initial trend seeding.

Day-zero is the first observation. The first later observation whose
high index clears day-zero's high by ``seed_min_steps`` seeds an Upward
trend. The low is checked only when the high did not rise above
day-zero's high: then a low index undercutting day-zero's low by the
same margin seeds a Downward trend. A day whose high rises by less than
the margin is skipped even if its low has fallen far enough, and a day
meeting both conditions seeds Upward.
"""

from typing import Optional, Sequence

from .errors import EmptyInputError
from .trend_config import TrendConfig
from .types import Observation, TrendSeed, TrendType


def find_initial_trend(
    observations: Sequence[Observation],
    config: Optional[TrendConfig] = None,
) -> Optional[TrendSeed]:
    """
    Establish the initial trend direction from day-zero.

    Args:
        observations: Preprocessed observations in chronological order.
        config: Trend parameters (uses default if not provided).

    Returns:
        TrendSeed starting at day-zero's date and close index, or None if
        no observation moves far enough from day-zero.

    Raises:
        EmptyInputError: If observations is empty.
    """
    if not observations:
        raise EmptyInputError("Cannot seed a trend from an empty series")

    config = config or TrendConfig.default()
    day_zero = observations[0]
    min_steps = config.seed_min_steps

    for observation in observations[1:]:
        # The low is only examined on days whose high did not rise at all
        if observation.high_index > day_zero.high_index:
            if observation.high_index - day_zero.high_index < min_steps:
                continue
            trend_type = TrendType.UPWARD
        elif observation.low_index < day_zero.low_index:
            if day_zero.low_index - observation.low_index < min_steps:
                continue
            trend_type = TrendType.DOWNWARD
        else:
            continue
        return TrendSeed(
            start_date=day_zero.date,
            start_price=float(day_zero.close_index),
            trend_type=trend_type,
        )

    return None
