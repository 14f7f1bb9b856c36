import logging
import os
from typing import List, Sequence

import pandas as pd

from ..trend_analysis.errors import MalformedRecordError
from ..trend_analysis.types import CloseRecord, PriceRecord

logger = logging.getLogger(__name__)

# Accepted date column names, in order of preference
DATE_COLUMNS = ("trade_date", "date", "datetime")


def detect_date_column(columns: Sequence[str]) -> str:
    """
    Pick the date column from normalized (lowercase) column names.

    Raises:
        ValueError: If no known date column is present.
    """
    for name in DATE_COLUMNS:
        if name in columns:
            return name
    raise ValueError(
        f"Missing date column. Expected one of {list(DATE_COLUMNS)}, found: {list(columns)}"
    )


def load_series_frame(filepath: str, value_columns: Sequence[str]) -> pd.DataFrame:
    """
    Load a dated numeric series from a headered CSV file.

    Dates are kept as strings and used as the sort key. Numeric columns
    must parse completely: a single bad or empty cell fails the whole
    file, since a partial series would silently change the trend.

    Args:
        filepath: Path to the CSV file.
        value_columns: Numeric columns to keep (case-insensitive).

    Returns:
        DataFrame with columns ['date', *value_columns], sorted by date,
        one row per date (last occurrence wins).

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If the file is empty or columns are missing.
        MalformedRecordError: If a numeric cell fails to parse.
    """
    if not os.path.exists(filepath):
        raise FileNotFoundError(f"File not found: {filepath}")

    if os.path.getsize(filepath) == 0:
        raise ValueError("File is empty")

    try:
        df = pd.read_csv(filepath, sep=',', dtype=str, skipinitialspace=True, engine='c')
    except pd.errors.ParserError as e:
        raise ValueError(f"Error parsing file: {e}")

    # Normalize column names to lowercase
    df.columns = df.columns.str.strip().str.lower()

    date_column = detect_date_column(df.columns)
    missing = [c for c in value_columns if c not in df.columns]
    if missing:
        raise ValueError(f"Missing required columns {missing}. Found: {df.columns.tolist()}")

    df = df[[date_column, *value_columns]].rename(columns={date_column: 'date'}).copy()
    df['date'] = df['date'].str.strip()

    for column in value_columns:
        try:
            df[column] = pd.to_numeric(df[column], errors='raise').astype('float64')
        except (ValueError, TypeError) as e:
            raise MalformedRecordError(f"Malformed {column!r} value in {filepath}: {e}")
        if df[column].isna().any():
            row = int(df[column].isna().to_numpy().argmax())
            raise MalformedRecordError(
                f"Missing {column!r} value in {filepath} at data row {row + 1}"
            )

    if df['date'].isna().any():
        raise MalformedRecordError(f"Missing date value in {filepath}")

    df = df.sort_values('date', kind='stable')

    # Remove duplicate dates - keep last occurrence
    duplicates = df['date'].duplicated(keep='last')
    if duplicates.any():
        logger.debug(
            f"Duplicate dates in {os.path.basename(filepath)}: "
            f"{int(duplicates.sum())} removed (kept last occurrence)"
        )
        df = df[~duplicates]

    return df.reset_index(drop=True)


def load_price_series(filepath: str) -> List[PriceRecord]:
    """Load high/low/close records for absolute-price segmentation."""
    df = load_series_frame(filepath, ['high', 'low', 'close'])
    return [
        PriceRecord(date=row.date, high=row.high, low=row.low, close=row.close)
        for row in df.itertuples(index=False)
    ]


def load_close_series(filepath: str) -> List[CloseRecord]:
    """Load close-only records for relative-strength comparison."""
    df = load_series_frame(filepath, ['close'])
    return [
        CloseRecord(date=row.date, close=row.close)
        for row in df.itertuples(index=False)
    ]
