"""
SQLite source for weekly close series.

Reads from a ``weekly`` table with at least the columns
``ts_code``, ``trade_date`` and ``close``. One connection per call;
the store itself holds no open handles, so it can be shared between
threads running independent comparisons.
"""

import logging
import sqlite3
from pathlib import Path
from typing import List, Optional, Sequence

from ..trend_analysis.errors import MalformedRecordError
from ..trend_analysis.types import CloseRecord
from ..relative_strength.tournament import DEFAULT_EXCLUDED_SUFFIXES

logger = logging.getLogger(__name__)

SCHEMA = """
    CREATE TABLE IF NOT EXISTS weekly (
        ts_code TEXT NOT NULL,
        trade_date TEXT NOT NULL,
        open REAL,
        high REAL,
        low REAL,
        close REAL,
        PRIMARY KEY (ts_code, trade_date)
    );
"""


class WeeklyBarStore:
    """Read access to weekly bars keyed by instrument code."""

    def __init__(self, db_path: Path):
        self.db_path = Path(db_path)

    def connect(self) -> sqlite3.Connection:
        if not self.db_path.exists():
            raise FileNotFoundError(f"Database not found: {self.db_path}")
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def init_schema(self) -> None:
        """Create the weekly table if missing. Safe to call multiple times."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(self.db_path)
        try:
            conn.executescript(SCHEMA)
            conn.commit()
        finally:
            conn.close()

    def fetch_distinct_codes(
        self,
        excluded_suffixes: Sequence[str] = DEFAULT_EXCLUDED_SUFFIXES,
    ) -> List[str]:
        """Distinct instrument codes, minus those with an excluded suffix."""
        conn = self.connect()
        try:
            rows = conn.execute("SELECT DISTINCT ts_code FROM weekly ORDER BY ts_code").fetchall()
        finally:
            conn.close()
        return [
            row["ts_code"] for row in rows
            if not row["ts_code"].endswith(tuple(excluded_suffixes))
        ]

    def fetch_close_series(self, ts_code: str, end_date: Optional[str] = None) -> List[CloseRecord]:
        """
        Close series for one instrument, oldest first.

        Args:
            ts_code: Instrument code.
            end_date: Optional inclusive upper bound on trade_date.

        Raises:
            MalformedRecordError: If a stored close is NULL or not numeric.
        """
        query = "SELECT trade_date, close FROM weekly WHERE ts_code = ?"
        params: list = [ts_code]
        if end_date is not None:
            query += " AND trade_date <= ?"
            params.append(end_date)
        query += " ORDER BY trade_date ASC"

        conn = self.connect()
        try:
            rows = conn.execute(query, params).fetchall()
        finally:
            conn.close()

        records = []
        for row in rows:
            try:
                close = float(row["close"])
            except (TypeError, ValueError):
                raise MalformedRecordError(
                    f"Malformed close for {ts_code} on {row['trade_date']}: {row['close']!r}"
                )
            records.append(CloseRecord(date=str(row["trade_date"]), close=close))

        logger.debug(f"Fetched {len(records)} weekly bars for {ts_code}")
        return records
