"""
Trend Segment Log Schema

Self-describing container for a segmentation run: the segments plus the
grid and threshold that produced them, so stored runs stay comparable.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from ..trend_analysis.constants import GRID_VERSION
from ..trend_analysis.types import TrendSegment

# v1.0: Initial schema
SCHEMA_VERSION = "1.0"


@dataclass
class TrendLogMeta:
    """
    Log metadata for provenance and reproducibility.
    """
    instrument: str                 # e.g., "600519.SH" or "600519.SH/000001.SZ"
    grid_kind: str                  # "price" or "ratio"
    threshold: int                  # hysteresis margin used
    date_range_start: Optional[str]
    date_range_end: Optional[str]
    grid_version: str = GRID_VERSION
    created_at: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
    schema_version: str = SCHEMA_VERSION

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary for JSON storage."""
        return {
            "instrument": self.instrument,
            "grid_kind": self.grid_kind,
            "threshold": self.threshold,
            "date_range_start": self.date_range_start,
            "date_range_end": self.date_range_end,
            "grid_version": self.grid_version,
            "created_at": self.created_at,
            "schema_version": self.schema_version,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TrendLogMeta":
        """Deserialize from dictionary."""
        return cls(
            instrument=data["instrument"],
            grid_kind=data["grid_kind"],
            threshold=data["threshold"],
            date_range_start=data.get("date_range_start"),
            date_range_end=data.get("date_range_end"),
            grid_version=data.get("grid_version", GRID_VERSION),
            created_at=data["created_at"],
            schema_version=data.get("schema_version", SCHEMA_VERSION),
        )


@dataclass
class TrendLog:
    """Segments of one run with their metadata."""
    meta: TrendLogMeta
    segments: List[TrendSegment] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "meta": self.meta.to_dict(),
            "segments": [s.to_dict() for s in self.segments],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TrendLog":
        return cls(
            meta=TrendLogMeta.from_dict(data["meta"]),
            segments=[TrendSegment.from_dict(s) for s in data.get("segments", [])],
        )


def validate_segments(segments: List[TrendSegment]) -> List[str]:
    """
    Validate a segment sequence for structural correctness.

    Checks:
    - Only the last segment may be open
    - Each segment ends no earlier than it starts
    - Segments are chronological and non-overlapping
    - Directions alternate

    Returns:
        List of validation error messages (empty if valid)
    """
    errors: List[str] = []

    for i, segment in enumerate(segments):
        if segment.is_open:
            if i != len(segments) - 1:
                errors.append(f"Segment {i} is open but is not the last segment")
            continue
        if segment.end_price is None:
            errors.append(f"Segment {i} has end_date but no end_price")
        if segment.end_date < segment.start_date:
            errors.append(
                f"Segment {i} ends before it starts: {segment.end_date} < {segment.start_date}"
            )

    for i in range(1, len(segments)):
        previous, current = segments[i - 1], segments[i]
        if previous.end_date is not None and current.start_date <= previous.end_date:
            errors.append(
                f"Segment {i} overlaps segment {i-1}: starts {current.start_date} "
                f"<= previous end {previous.end_date}"
            )
        if current.trend_type == previous.trend_type:
            errors.append(
                f"Segments {i-1} and {i} share direction {current.trend_type.value}"
            )

    return errors


def validate_log(log: TrendLog) -> List[str]:
    """Validate metadata and segments of a log."""
    errors: List[str] = []
    if log.meta.grid_kind not in ("price", "ratio"):
        errors.append(f"Invalid grid_kind: {log.meta.grid_kind}")
    if log.meta.threshold < 1:
        errors.append(f"Invalid threshold: {log.meta.threshold}")
    errors.extend(validate_segments(log.segments))
    return errors
