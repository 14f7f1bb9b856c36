"""Core data types for trend segmentation."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class TrendType(str, Enum):
    """Direction of a trend segment."""
    UPWARD = "Upward"
    DOWNWARD = "Downward"

    @property
    def opposite(self) -> "TrendType":
        if self is TrendType.UPWARD:
            return TrendType.DOWNWARD
        return TrendType.UPWARD


@dataclass(frozen=True)
class GridLevel:
    """One quantization level: its value and its rank in the grid."""
    value: float
    index: int


@dataclass(frozen=True)
class PriceRecord:
    """Raw daily/weekly price record as parsed from a source."""
    date: str
    high: float
    low: float
    close: float


@dataclass(frozen=True)
class CloseRecord:
    """Raw close-only record used for relative-strength comparison."""
    date: str
    close: float


@dataclass(frozen=True)
class RatioRecord:
    """Date-aligned, mean-scaled ratio of two instruments' closes."""
    date: str
    ratio: float


@dataclass(frozen=True)
class AlignedField:
    """A raw scalar together with its floor-aligned grid level."""
    raw: float
    value: float
    index: int


@dataclass(frozen=True)
class Observation:
    """
    One preprocessed time-series record.

    The engine reads high/low/close indices only. In ratio mode all three
    fields carry the same aligned ratio.

    Attributes:
        date: Chronological sort key.
        high: Aligned high (or ratio).
        low: Aligned low (or ratio).
        close: Aligned close (or ratio).
        previous_date: Date of the preceding observation, None for the first.
        sequence_number: 0-based position after sorting.
    """
    date: str
    high: AlignedField
    low: AlignedField
    close: AlignedField
    previous_date: Optional[str] = None
    sequence_number: int = 0

    @property
    def high_index(self) -> int:
        return self.high.index

    @property
    def low_index(self) -> int:
        return self.low.index

    @property
    def close_index(self) -> int:
        return self.close.index


@dataclass(frozen=True)
class TrendSeed:
    """Initial trend direction and the first segment's start boundary."""
    start_date: str
    start_price: float
    trend_type: TrendType


@dataclass
class TrendSegment:
    """
    A date range classified as one direction.

    Prices are grid-index denominated. The last segment of a run may be
    open, in which case end_date and end_price are None.
    """
    start_date: str
    start_price: float
    trend_type: TrendType
    end_date: Optional[str] = None
    end_price: Optional[float] = None

    @property
    def is_open(self) -> bool:
        return self.end_date is None

    def close(self, end_date: Optional[str], end_price: float) -> None:
        self.end_date = end_date
        self.end_price = end_price

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary for JSON storage."""
        return {
            "start_date": self.start_date,
            "end_date": self.end_date,
            "start_price": self.start_price,
            "end_price": self.end_price,
            "trend_type": self.trend_type.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TrendSegment":
        """Deserialize from dictionary."""
        end_price = data.get("end_price")
        return cls(
            start_date=data["start_date"],
            start_price=float(data["start_price"]),
            trend_type=TrendType(data["trend_type"]),
            end_date=data.get("end_date"),
            end_price=float(end_price) if end_price is not None else None,
        )
