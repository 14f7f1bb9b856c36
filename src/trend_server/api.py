"""
FastAPI backend for trend segmentation.

Minimal server for:
- Segmenting a posted price series
- Comparing two posted close series
- Comparing instruments stored in a weekly-bar database
"""

import logging
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware

from .schemas import (
    CompareRequest,
    CompareResponse,
    InstrumentsResponse,
    SegmentRequest,
    SegmentResponse,
    SegmentsResponse,
)
from ..data.sqlite_source import WeeklyBarStore
from ..relative_strength.ratio_builder import ComparisonResult, RatioSeriesBuilder
from ..trend_analysis.errors import TrendAnalysisError
from ..trend_analysis.pipeline import segment_prices
from ..trend_analysis.trend_config import TrendConfig
from ..trend_analysis.types import CloseRecord, PriceRecord

logger = logging.getLogger(__name__)

API_VERSION = "0.1.0"

# Weekly-bar store, configured by main() or tests
store: Optional[WeeklyBarStore] = None

app = FastAPI(
    title="Trend Segmentation Server",
    description="Grid-aligned hysteresis trend segmentation and relative-strength ranking",
    version=API_VERSION,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def set_store(db_path: Optional[str]) -> None:
    """Configure (or clear) the weekly-bar database."""
    global store
    store = WeeklyBarStore(Path(db_path)) if db_path else None
    if store is not None:
        logger.info(f"Using weekly bar database: {store.db_path}")


def get_store() -> WeeklyBarStore:
    if store is None:
        raise HTTPException(
            status_code=503,
            detail="No database configured. Start server with --db flag."
        )
    return store


def _comparison_response(result: ComparisonResult) -> CompareResponse:
    return CompareResponse(
        winner=result.winner,
        code_a=result.code_a,
        code_b=result.code_b,
        verdict=result.verdict.value if result.verdict else None,
        ratio_count=result.ratio_count,
        segments=[SegmentResponse.from_segment(s) for s in result.segments],
    )


@app.get("/api/health")
async def health():
    """Health check endpoint."""
    return {
        "status": "ok",
        "database": str(store.db_path) if store else None,
        "version": API_VERSION,
    }


@app.post("/api/segments", response_model=SegmentsResponse)
async def create_segments(request: SegmentRequest):
    """
    Segment a price series on the absolute-price grid.

    Returns 422 for empty or trendless series.
    """
    config = TrendConfig.default()
    if request.threshold is not None:
        config = config.with_overrides(threshold=request.threshold)

    records = [
        PriceRecord(date=r.date, high=r.high, low=r.low, close=r.close)
        for r in request.records
    ]
    try:
        segments = segment_prices(records, config=config)
    except TrendAnalysisError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return SegmentsResponse(
        instrument=request.instrument,
        grid_kind="price",
        threshold=config.threshold,
        segment_count=len(segments),
        segments=[SegmentResponse.from_segment(s) for s in segments],
    )


@app.post("/api/compare", response_model=CompareResponse)
async def compare_series(request: CompareRequest):
    """Rank two posted close series by relative-strength trend."""
    series_a = [CloseRecord(date=r.date, close=r.close) for r in request.series_a]
    series_b = [CloseRecord(date=r.date, close=r.close) for r in request.series_b]
    try:
        result = RatioSeriesBuilder().compare(request.code_a, series_a, request.code_b, series_b)
    except TrendAnalysisError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return _comparison_response(result)


@app.get("/api/instruments", response_model=InstrumentsResponse)
async def list_instruments():
    """List instrument codes available in the database."""
    codes = get_store().fetch_distinct_codes()
    return InstrumentsResponse(instruments=codes, count=len(codes))


@app.get("/api/instruments/{code_a}/vs/{code_b}", response_model=CompareResponse)
async def compare_instruments(
    code_a: str,
    code_b: str,
    end_date: Optional[str] = Query(None, description="Inclusive last trade date"),
):
    """Rank two stored instruments by relative-strength trend."""
    weekly = get_store()
    series_a = weekly.fetch_close_series(code_a, end_date)
    series_b = weekly.fetch_close_series(code_b, end_date)
    for code, series in ((code_a, series_a), (code_b, series_b)):
        if not series:
            raise HTTPException(status_code=404, detail=f"No weekly bars for {code}")

    try:
        result = RatioSeriesBuilder().compare(code_a, series_a, code_b, series_b)
    except TrendAnalysisError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return _comparison_response(result)
