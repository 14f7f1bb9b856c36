"""
Tests for the command line interface.
"""

import json
import sqlite3

import pytest

from src.cli.main import create_parser, main
from src.data.sqlite_source import WeeklyBarStore


@pytest.fixture
def price_csv(tmp_path):
    p = tmp_path / "TEST.csv"
    p.write_text(
        "trade_date,high,low,close\n"
        "20240103,18.5,18.5,18.5\n"
        "20240101,20.0,20.0,20.0\n"
        "20240102,23.0,23.0,23.0\n"
    )
    return p


@pytest.fixture
def close_csvs(tmp_path):
    a = tmp_path / "AAA.csv"
    b = tmp_path / "BBB.csv"
    a.write_text("date,close\n" + "".join(f"2024-01-{d:02d},{10 + d}\n" for d in range(1, 21)))
    b.write_text("date,close\n" + "".join(f"2024-01-{d:02d},50\n" for d in range(1, 21)))
    return a, b


class TestParser:

    def test_no_command_shows_help(self, capsys):
        assert main([]) == 1
        assert "usage" in capsys.readouterr().out

    def test_segment_defaults(self):
        args = create_parser().parse_args(["segment", "--data", "x.csv", "--output", "y.json"])
        assert args.threshold == 3
        assert args.with_meta is False


class TestSegmentCommand:

    def test_writes_segments(self, price_csv, tmp_path, capsys):
        output = tmp_path / "segments.json"
        assert main(["segment", "--data", str(price_csv), "--output", str(output)]) == 0

        data = json.loads(output.read_text())
        assert [s["trend_type"] for s in data] == ["Upward", "Downward"]
        assert data[0]["start_date"] == "20240101"
        assert "Wrote 2 segments" in capsys.readouterr().out

    def test_with_meta_and_plot(self, price_csv, tmp_path):
        output = tmp_path / "log.json"
        plot = tmp_path / "segments.png"
        code = main([
            "segment", "--data", str(price_csv), "--output", str(output),
            "--with-meta", "--instrument", "600519.SH", "--plot", str(plot),
        ])
        assert code == 0

        data = json.loads(output.read_text())
        assert data["meta"]["instrument"] == "600519.SH"
        assert data["meta"]["date_range_start"] == "20240101"
        assert data["meta"]["date_range_end"] == "20240103"
        assert len(data["segments"]) == 2
        assert plot.exists()

    def test_invalid_threshold(self, price_csv, tmp_path, capsys):
        code = main([
            "segment", "--data", str(price_csv), "--output", str(tmp_path / "o.json"),
            "--threshold", "0",
        ])
        assert code == 1
        assert "Error segmenting" in capsys.readouterr().out

    def test_missing_file(self, tmp_path, capsys):
        code = main(["segment", "--data", str(tmp_path / "nope.csv"), "--output", str(tmp_path / "o.json")])
        assert code == 1
        assert "Error segmenting" in capsys.readouterr().out


class TestCompareCommand:

    def test_compare(self, close_csvs, tmp_path, capsys):
        a, b = close_csvs
        output = tmp_path / "ratio.json"
        assert main(["compare", "--a", str(a), "--b", str(b), "--output", str(output)]) == 0
        assert capsys.readouterr().out.startswith("AAA")
        assert json.loads(output.read_text())[-1]["trend_type"] == "Upward"

    def test_compare_explicit_codes(self, close_csvs, capsys):
        a, b = close_csvs
        main(["compare", "--a", str(b), "--b", str(a), "--code-a", "flat", "--code-b", "rising"])
        assert capsys.readouterr().out.startswith("rising")


class TestTournamentCommand:

    def test_tournament(self, tmp_path, capsys):
        store = WeeklyBarStore(tmp_path / "stock.db")
        store.init_schema()
        rows = []
        for slope, code in enumerate(["000001.SZ", "000002.SZ", "600000.SH", "600519.SH"], start=1):
            rows += [(code, f"202401{d:02d}", 10.0 + slope * d) for d in range(1, 21)]
        conn = sqlite3.connect(store.db_path)
        conn.executemany("INSERT INTO weekly (ts_code, trade_date, close) VALUES (?, ?, ?)", rows)
        conn.commit()
        conn.close()

        code = main([
            "tournament", "--db", str(store.db_path),
            "--exit-condition", "1", "--seed", "7",
        ])
        assert code == 0
        assert capsys.readouterr().out.strip() == "600519.SH"

    def test_code_without_bars_before_end_date(self, tmp_path, capsys):
        """A listed code with no bars up to --end-date loses its match."""
        store = WeeklyBarStore(tmp_path / "stock.db")
        store.init_schema()
        rows = [("000001.SZ", f"202401{d:02d}", 10.0 + d) for d in range(1, 21)]
        rows += [("600519.SH", f"202401{d:02d}", 10.0 + 4 * d) for d in range(1, 21)]
        rows += [("CCC.SH", f"202501{d:02d}", 20.0 + d) for d in range(1, 13)]
        conn = sqlite3.connect(store.db_path)
        conn.executemany("INSERT INTO weekly (ts_code, trade_date, close) VALUES (?, ?, ?)", rows)
        conn.commit()
        conn.close()

        code = main([
            "tournament", "--db", str(store.db_path),
            "--exit-condition", "1", "--seed", "7", "--end-date", "20241231",
        ])
        assert code == 0
        assert capsys.readouterr().out.strip() == "600519.SH"

    def test_missing_database(self, tmp_path, capsys):
        assert main(["tournament", "--db", str(tmp_path / "none.db")]) == 1
        assert "Error loading candidates" in capsys.readouterr().out


class TestPlotCommand:

    def test_plot(self, tmp_path):
        segments = tmp_path / "segments.json"
        segments.write_text(json.dumps([
            {"start_date": "d1", "end_date": "d2", "start_price": 50, "end_price": 53, "trend_type": "Upward"},
            {"start_date": "d3", "end_date": None, "start_price": 52, "end_price": None, "trend_type": "Downward"},
        ]))
        output = tmp_path / "segments.png"
        assert main(["plot", "--segments", str(segments), "--output", str(output)]) == 0
        assert output.exists()
