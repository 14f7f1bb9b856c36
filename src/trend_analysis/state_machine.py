"""
Hysteresis trend state machine.

Converts an aligned series plus its seed into an ordered list of
alternating Upward/Downward segments in a single forward pass.

While Upward, a new high index extends the session extreme and drags the
conversion threshold up behind it (extreme - threshold). A low index at or
below the conversion threshold closes the segment and opens a Downward
one. Downward mirrors this on lows and highs.

Each machine owns its SessionState; nothing is shared between runs, so
independent series can be segmented concurrently.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .errors import NoTrendSeedError
from .seeder import find_initial_trend
from .trend_config import TrendConfig
from .types import Observation, TrendSeed, TrendSegment, TrendType

logger = logging.getLogger(__name__)


@dataclass
class SessionState:
    """
    Mutable working state of one segmentation pass.

    Attributes:
        current_trend: Direction of the open segment.
        session_extreme: Running high index while Upward, running low
            index while Downward.
        conversion_threshold: Index whose crossing ends the current trend.
        continuation_count: Extensions of the session extreme since the
            current segment began.
    """
    current_trend: TrendType
    session_extreme: float
    conversion_threshold: float
    continuation_count: int = 0

    @classmethod
    def from_seed(cls, seed: TrendSeed, config: TrendConfig) -> "SessionState":
        """Derive the first segment's state from the seed's start index."""
        start = seed.start_price
        if seed.trend_type is TrendType.UPWARD:
            return cls(
                current_trend=TrendType.UPWARD,
                session_extreme=start + config.initial_extreme_offset,
                conversion_threshold=start - config.initial_threshold_offset,
            )
        return cls(
            current_trend=TrendType.DOWNWARD,
            session_extreme=start - config.initial_extreme_offset,
            conversion_threshold=start + config.initial_threshold_offset,
        )


class TrendStateMachine:
    """
    One-pass segmentation of an aligned series.

    Usage:
        machine = TrendStateMachine(seed)
        for observation in observations[1:]:
            machine.process(observation)
        segments = machine.segments
    """

    def __init__(self, seed: TrendSeed, config: Optional[TrendConfig] = None):
        self.config = config or TrendConfig.default()
        self.state = SessionState.from_seed(seed, self.config)
        self.segments: List[TrendSegment] = [
            TrendSegment(
                start_date=seed.start_date,
                start_price=seed.start_price,
                trend_type=seed.trend_type,
            )
        ]

    @property
    def current_segment(self) -> TrendSegment:
        return self.segments[-1]

    def process(self, observation: Observation) -> Optional[TrendSegment]:
        """
        Advance the machine by one observation.

        Returns:
            The newly opened segment if the trend flipped, else None.
        """
        trend = self.state.current_trend
        if trend is TrendType.UPWARD:
            return self._process_upward(observation)
        if trend is TrendType.DOWNWARD:
            return self._process_downward(observation)
        raise RuntimeError(f"Unreachable trend state: {trend!r}")

    def _process_upward(self, observation: Observation) -> Optional[TrendSegment]:
        state = self.state
        high = float(observation.high_index)
        low = float(observation.low_index)

        if high > state.session_extreme:
            state.session_extreme = high
            state.conversion_threshold = high - self.config.threshold
            state.continuation_count += 1
            return None

        if low > state.conversion_threshold:
            return None

        if state.continuation_count == 0:
            end_price = state.conversion_threshold + self.config.threshold
            start_price = state.conversion_threshold + (self.config.threshold - 1)
        else:
            end_price = state.session_extreme
            start_price = state.session_extreme - 1

        return self._flip(
            observation,
            end_price=end_price,
            start_price=start_price,
            new_trend=TrendType.DOWNWARD,
        )

    def _process_downward(self, observation: Observation) -> Optional[TrendSegment]:
        state = self.state
        high = float(observation.high_index)
        low = float(observation.low_index)

        if low < state.session_extreme:
            state.session_extreme = low
            state.conversion_threshold = low + self.config.threshold
            state.continuation_count += 1
            return None

        if high < state.conversion_threshold:
            return None

        if state.continuation_count == 0:
            end_price = state.conversion_threshold - self.config.threshold
            start_price = state.conversion_threshold - (self.config.threshold - 1)
        else:
            end_price = state.session_extreme
            start_price = state.session_extreme + 1

        return self._flip(
            observation,
            end_price=end_price,
            start_price=start_price,
            new_trend=TrendType.UPWARD,
        )

    def _flip(
        self,
        observation: Observation,
        end_price: float,
        start_price: float,
        new_trend: TrendType,
    ) -> TrendSegment:
        """Close the open segment and start the opposite one at this observation."""
        state = self.state
        self.current_segment.close(observation.previous_date, end_price)

        segment = TrendSegment(
            start_date=observation.date,
            start_price=start_price,
            trend_type=new_trend,
        )
        self.segments.append(segment)

        logger.debug(
            f"{observation.date}: {state.current_trend.value} -> {new_trend.value} "
            f"(extreme={state.session_extreme}, threshold={state.conversion_threshold}, "
            f"continuations={state.continuation_count})"
        )

        # The crossed threshold becomes the new session extreme and the old
        # extreme becomes the level that would reverse the new trend.
        state.session_extreme, state.conversion_threshold = (
            state.conversion_threshold,
            state.session_extreme,
        )
        state.current_trend = new_trend
        state.continuation_count = 0
        return segment


def segment_series(
    observations: Sequence[Observation],
    config: Optional[TrendConfig] = None,
) -> List[TrendSegment]:
    """
    Segment an aligned series into alternating trend segments.

    Args:
        observations: Preprocessed observations in chronological order.
        config: Trend parameters (uses default if not provided).

    Returns:
        Segments oldest first; the last one may be open.

    Raises:
        EmptyInputError: If observations is empty.
        NoTrendSeedError: If the series never moves far enough to seed.
    """
    config = config or TrendConfig.default()
    seed = find_initial_trend(observations, config)
    if seed is None:
        raise NoTrendSeedError(
            f"No trend seed in {len(observations)} observation(s) starting "
            f"{observations[0].date}: series never moved {config.seed_min_steps} "
            f"grid steps from day-zero"
        )

    machine = TrendStateMachine(seed, config)
    for observation in observations[1:]:
        machine.process(observation)
    return machine.segments
