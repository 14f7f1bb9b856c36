"""
Trend Segment I/O

JSON persistence for segments. Two layouts:
- Bare array of segment records, the format the renderer consumes.
- Full log with metadata (see schema.TrendLog).
"""

import json
import logging
from pathlib import Path
from typing import List

from .schema import TrendLog, validate_log, validate_segments
from ..trend_analysis.constants import GRID_VERSION
from ..trend_analysis.types import TrendSegment

logger = logging.getLogger(__name__)


def write_segments(segments: List[TrendSegment], path: Path) -> None:
    """
    Write segments to a JSON array.

    Args:
        segments: Segments in chronological order
        path: Destination file path
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        json.dump([s.to_dict() for s in segments], f, indent=2, ensure_ascii=False)


def read_segments(path: Path, validate: bool = True) -> List[TrendSegment]:
    """
    Read segments from a JSON array.

    Raises:
        FileNotFoundError: If file doesn't exist
        json.JSONDecodeError: If file is not valid JSON
        ValueError: If the payload is not an array, or validation fails
    """
    path = Path(path)

    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    if not isinstance(data, list):
        raise ValueError(f"Expected a JSON array of segments in {path}")

    segments = [TrendSegment.from_dict(item) for item in data]

    if validate:
        errors = validate_segments(segments)
        if errors:
            raise ValueError(f"Validation failed: {errors}")

    return segments


def write_log(log: TrendLog, path: Path) -> None:
    """Write a full trend log (metadata + segments) to JSON."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        json.dump(log.to_dict(), f, indent=2, ensure_ascii=False)


def read_log(path: Path, validate: bool = True) -> TrendLog:
    """
    Read a full trend log from JSON.

    Raises:
        FileNotFoundError: If file doesn't exist
        json.JSONDecodeError: If file is not valid JSON
        ValueError: If validation fails (when validate=True)
    """
    path = Path(path)

    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    log = TrendLog.from_dict(data)

    if log.meta.grid_version != GRID_VERSION:
        logger.warning(
            f"Log was produced with grid {log.meta.grid_version}, current grid is "
            f"{GRID_VERSION}. Segment prices may not be comparable."
        )

    if validate:
        errors = validate_log(log)
        if errors:
            raise ValueError(f"Validation failed: {errors}")

    return log
