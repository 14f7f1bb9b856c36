"""
Tests for the SQLite weekly-bar store.
"""

import sqlite3

import pytest

from src.data.sqlite_source import WeeklyBarStore
from src.trend_analysis.errors import MalformedRecordError


@pytest.fixture
def store(tmp_path):
    """Weekly-bar database with three instruments, one on the BJ exchange."""
    weekly = WeeklyBarStore(tmp_path / "stock.db")
    weekly.init_schema()
    rows = [
        ("600519.SH", "20240112", 1712.0),
        ("600519.SH", "20240105", 1695.5),
        ("600519.SH", "20240119", 1730.0),
        ("000001.SZ", "20240105", 9.1),
        ("000001.SZ", "20240112", 9.3),
        ("430047.BJ", "20240105", 12.0),
    ]
    conn = sqlite3.connect(weekly.db_path)
    conn.executemany(
        "INSERT INTO weekly (ts_code, trade_date, close) VALUES (?, ?, ?)", rows
    )
    conn.commit()
    conn.close()
    return weekly


class TestWeeklyBarStore:
    """Reading codes and close series."""

    def test_distinct_codes_exclude_bj(self, store):
        assert store.fetch_distinct_codes() == ["000001.SZ", "600519.SH"]

    def test_distinct_codes_custom_exclusion(self, store):
        assert store.fetch_distinct_codes(excluded_suffixes=()) == [
            "000001.SZ", "430047.BJ", "600519.SH",
        ]

    def test_close_series_ordered(self, store):
        records = store.fetch_close_series("600519.SH")
        assert [r.date for r in records] == ["20240105", "20240112", "20240119"]
        assert records[0].close == 1695.5

    def test_close_series_end_date_inclusive(self, store):
        records = store.fetch_close_series("600519.SH", end_date="20240112")
        assert [r.date for r in records] == ["20240105", "20240112"]

    def test_unknown_code_is_empty(self, store):
        assert store.fetch_close_series("999999.SH") == []

    def test_code_is_parameterized(self, store):
        assert store.fetch_close_series("' OR '1'='1") == []

    def test_null_close_is_malformed(self, store):
        conn = sqlite3.connect(store.db_path)
        conn.execute("INSERT INTO weekly (ts_code, trade_date, close) VALUES ('000002.SZ', '20240105', NULL)")
        conn.commit()
        conn.close()
        with pytest.raises(MalformedRecordError):
            store.fetch_close_series("000002.SZ")

    def test_missing_database(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            WeeklyBarStore(tmp_path / "missing.db").fetch_distinct_codes()

    def test_init_schema_idempotent(self, store):
        store.init_schema()
        assert store.fetch_distinct_codes() == ["000001.SZ", "600519.SH"]
