"""
Pydantic models for the trend segmentation API.
"""
from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from ..trend_analysis.types import TrendSegment


class PriceRecordModel(BaseModel):
    """A single high/low/close record."""
    date: str
    high: float
    low: float
    close: float


class CloseRecordModel(BaseModel):
    """A single close record."""
    date: str
    close: float


class SegmentResponse(BaseModel):
    """One trend segment. Prices are grid indices."""
    start_date: str
    end_date: Optional[str] = None
    start_price: float
    end_price: Optional[float] = None
    trend_type: Literal["Upward", "Downward"]

    @classmethod
    def from_segment(cls, segment: TrendSegment) -> "SegmentResponse":
        return cls(**segment.to_dict())


class SegmentRequest(BaseModel):
    """Price series to segment."""
    instrument: Optional[str] = None
    records: List[PriceRecordModel] = Field(default_factory=list)
    threshold: Optional[int] = Field(default=None, ge=1)


class SegmentsResponse(BaseModel):
    instrument: Optional[str] = None
    grid_kind: str
    threshold: int
    segment_count: int
    segments: List[SegmentResponse]


class CompareRequest(BaseModel):
    """Two close series to rank against each other."""
    code_a: str
    series_a: List[CloseRecordModel]
    code_b: str
    series_b: List[CloseRecordModel]


class CompareResponse(BaseModel):
    winner: str
    code_a: str
    code_b: str
    verdict: Optional[Literal["Upward", "Downward"]] = None
    ratio_count: int
    segments: List[SegmentResponse]


class InstrumentsResponse(BaseModel):
    instruments: List[str]
    count: int
