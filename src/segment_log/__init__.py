"""
Trend Segment Log

Schema and JSON persistence for segmentation output.
"""

from .schema import (
    SCHEMA_VERSION,
    TrendLog,
    TrendLogMeta,
    validate_log,
    validate_segments,
)
from .io import (
    read_log,
    read_segments,
    write_log,
    write_segments,
)

__all__ = [
    "SCHEMA_VERSION",
    "TrendLog",
    "TrendLogMeta",
    "validate_log",
    "validate_segments",
    "read_log",
    "read_segments",
    "write_log",
    "write_segments",
]
