"""
Trend Segmentation Configuration

Centralized configuration for the seeding and hysteresis parameters.
All values are in grid-index units.
"""

from dataclasses import dataclass, replace
from typing import Any

from .constants import DEFAULT_SEED_MIN_STEPS, DEFAULT_THRESHOLD


@dataclass(frozen=True)
class TrendConfig:
    """
    Parameters for the initial trend seeder and the hysteresis machine.

    Attributes:
        threshold: Hysteresis margin. While a trend extends, the conversion
            threshold trails the session extreme by this many steps.
            Default 3.
        seed_min_steps: Steps day-zero's high (or low) must be exceeded by
            before a trend is seeded. Default 2.
        initial_extreme_offset: Offset from the seed's start index to the
            first segment's session extreme. Default 2.
        initial_threshold_offset: Offset from the seed's start index to the
            first segment's conversion threshold, against the trend.
            Default 1.

    Example:
        >>> config = TrendConfig.default()
        >>> config.threshold
        3
    """
    threshold: int = DEFAULT_THRESHOLD
    seed_min_steps: int = DEFAULT_SEED_MIN_STEPS
    initial_extreme_offset: int = 2
    initial_threshold_offset: int = 1

    def __post_init__(self) -> None:
        if self.threshold < 1:
            raise ValueError(f"threshold must be >= 1, got {self.threshold}")
        if self.seed_min_steps < 1:
            raise ValueError(f"seed_min_steps must be >= 1, got {self.seed_min_steps}")

    @classmethod
    def default(cls) -> "TrendConfig":
        """Create a config with default values."""
        return cls()

    def with_overrides(self, **kwargs: Any) -> "TrendConfig":
        """
        Create a new config with some parameters replaced.

        Since TrendConfig is frozen, this creates a new instance.
        """
        return replace(self, **kwargs)
