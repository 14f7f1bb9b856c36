"""
Shared test fixtures and helpers for trend segmentation tests.
"""

from typing import List, Optional, Sequence, Tuple

import pytest

from src.trend_analysis.types import AlignedField, CloseRecord, Observation, PriceRecord


def _field(index: int) -> AlignedField:
    return AlignedField(raw=float(index), value=float(index), index=index)


def make_observation(
    date: str,
    high_index: int,
    low_index: int,
    close_index: int,
    previous_date: Optional[str] = None,
    sequence_number: int = 0,
) -> Observation:
    """Helper to create an Observation directly in grid-index units.

    Raw and aligned values are set equal to the index; the engine reads
    indices only.
    """
    return Observation(
        date=date,
        high=_field(high_index),
        low=_field(low_index),
        close=_field(close_index),
        previous_date=previous_date,
        sequence_number=sequence_number,
    )


def make_series(rows: Sequence[Tuple[int, int, int]], start_day: int = 1) -> List[Observation]:
    """Build back-linked observations from (high, low, close) index triples.

    Dates are d01, d02, ... so they sort lexicographically.
    """
    observations = []
    previous_date = None
    for offset, (high, low, close) in enumerate(rows):
        date = f"d{start_day + offset:02d}"
        observations.append(make_observation(
            date, high, low, close,
            previous_date=previous_date,
            sequence_number=offset,
        ))
        previous_date = date
    return observations


def make_price_record(date: str, high: float, low: float = None, close: float = None) -> PriceRecord:
    """Helper to create a PriceRecord; low and close default to high."""
    return PriceRecord(
        date=date,
        high=high,
        low=high if low is None else low,
        close=high if close is None else close,
    )


def make_close_series(closes: Sequence[float], prefix: str = "2024-01-") -> List[CloseRecord]:
    """Close records on consecutive dates 2024-01-01, 2024-01-02, ..."""
    return [
        CloseRecord(date=f"{prefix}{day:02d}", close=float(close))
        for day, close in enumerate(closes, start=1)
    ]


@pytest.fixture
def rising_then_falling_prices() -> List[PriceRecord]:
    """20.0 -> 23.0 -> 18.5: one Upward segment, then an open Downward one."""
    return [
        make_price_record("2024-01-01", 20.0),
        make_price_record("2024-01-02", 23.0),
        make_price_record("2024-01-03", 18.5),
    ]
