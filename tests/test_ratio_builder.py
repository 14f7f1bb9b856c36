"""
Tests for relative-strength ratio building and pairwise verdicts.
"""

import pytest

from src.relative_strength.ratio_builder import (
    RatioSeriesBuilder,
    build_ratio_series,
    compare_instruments,
    compute_scale_factor,
)
from src.trend_analysis.errors import DegenerateSeriesError, NoTrendSeedError
from src.trend_analysis.types import CloseRecord, TrendType

from conftest import make_close_series


class TestScaleFactor:
    """mean(B) / mean(A) normalization."""

    def test_scale(self):
        a = make_close_series([10, 20])
        b = make_close_series([30, 30])
        assert compute_scale_factor(a, b) == 2.0

    def test_ratio_uses_scale(self):
        a = make_close_series([10, 20])
        b = make_close_series([30, 30])
        ratios = build_ratio_series(a, b)
        assert ratios[0].date == "2024-01-01"
        assert ratios[0].ratio == 0.6667
        assert ratios[1].ratio == 1.3333

    def test_scale_uses_full_series(self):
        """Unmatched dates still count toward each mean."""
        a = [CloseRecord("2024-01-01", 10.0), CloseRecord("2024-01-02", 30.0)]
        b = [CloseRecord("2024-01-01", 40.0)]
        assert compute_scale_factor(a, b) == 2.0


class TestMerge:
    """Two-pointer date merge."""

    def test_unmatched_dates_dropped(self):
        a = [
            CloseRecord("2024-01-01", 10.0),
            CloseRecord("2024-01-02", 11.0),
            CloseRecord("2024-01-04", 12.0),
        ]
        b = [
            CloseRecord("2024-01-02", 20.0),
            CloseRecord("2024-01-03", 21.0),
            CloseRecord("2024-01-04", 22.0),
        ]
        ratios = build_ratio_series(a, b)
        assert [r.date for r in ratios] == ["2024-01-02", "2024-01-04"]

    def test_unsorted_input(self):
        a = [CloseRecord("2024-01-02", 20.0), CloseRecord("2024-01-01", 10.0)]
        b = [CloseRecord("2024-01-01", 30.0), CloseRecord("2024-01-02", 30.0)]
        ratios = build_ratio_series(a, b)
        assert [r.date for r in ratios] == ["2024-01-01", "2024-01-02"]


class TestDegenerate:
    """Ratios that cannot be formed."""

    def test_empty_series(self):
        with pytest.raises(DegenerateSeriesError):
            build_ratio_series([], make_close_series([1.0]))
        with pytest.raises(DegenerateSeriesError):
            build_ratio_series(make_close_series([1.0]), [])

    def test_zero_mean_a(self):
        with pytest.raises(DegenerateSeriesError, match="mean close"):
            build_ratio_series(make_close_series([0, 0]), make_close_series([5, 5]))

    def test_zero_close_b_on_matched_date(self):
        with pytest.raises(DegenerateSeriesError, match="close of series B is zero"):
            build_ratio_series(make_close_series([1, 1]), make_close_series([0, 10]))


class TestCompare:
    """Pairwise verdict from the final ratio segment."""

    def setup_method(self):
        self.rising = make_close_series([10 + i for i in range(21)])
        self.flat = make_close_series([50.0] * 21)

    def test_rising_a_wins(self):
        result = RatioSeriesBuilder().compare("AAA", self.rising, "BBB", self.flat)
        assert result.winner == "AAA"
        assert result.verdict is TrendType.UPWARD
        assert result.ratio_count == 21
        assert result.segments[-1].trend_type is TrendType.UPWARD

    def test_argument_order_does_not_change_winner(self):
        result = RatioSeriesBuilder().compare("BBB", self.flat, "AAA", self.rising)
        assert result.winner == "AAA"
        assert result.verdict is TrendType.DOWNWARD

    def test_compare_instruments_returns_code(self):
        assert compare_instruments("AAA", self.rising, "BBB", self.flat) == "AAA"

    def test_deterministic(self):
        builder = RatioSeriesBuilder()
        first = builder.compare("AAA", self.rising, "BBB", self.flat)
        second = builder.compare("AAA", self.rising, "BBB", self.flat)
        assert first.winner == second.winner
        assert [s.to_dict() for s in first.segments] == [s.to_dict() for s in second.segments]

    def test_no_overlap_longer_history_wins(self):
        a = make_close_series([10, 11, 12], prefix="2024-01-")
        b = make_close_series([20, 21], prefix="2023-01-")
        result = RatioSeriesBuilder().compare("AAA", a, "BBB", b)
        assert result.winner == "AAA"
        assert result.verdict is None
        assert result.segments == []

    def test_no_overlap_tie_goes_to_b(self):
        a = make_close_series([10, 11], prefix="2024-01-")
        b = make_close_series([20, 21], prefix="2023-01-")
        assert RatioSeriesBuilder().compare("AAA", a, "BBB", b).winner == "BBB"

    def test_constant_ratio_has_no_seed(self):
        with pytest.raises(NoTrendSeedError):
            RatioSeriesBuilder().compare("AAA", self.flat, "BBB", self.flat)


class TestMatchWinner:
    """Tournament matches tolerate instruments without history."""

    def setup_method(self):
        self.rising = make_close_series([10 + i for i in range(21)])
        self.flat = make_close_series([50.0] * 21)

    def test_empty_a_loses(self, caplog):
        assert RatioSeriesBuilder().match_winner("AAA", [], "BBB", self.flat) == "BBB"
        assert "empty history" in caplog.text

    def test_empty_b_loses(self):
        assert RatioSeriesBuilder().match_winner("AAA", self.flat, "BBB", []) == "AAA"

    def test_both_empty_goes_to_b(self):
        assert RatioSeriesBuilder().match_winner("AAA", [], "BBB", []) == "BBB"

    def test_delegates_to_compare(self):
        assert RatioSeriesBuilder().match_winner("BBB", self.flat, "AAA", self.rising) == "AAA"

    def test_compare_still_raises_on_empty(self):
        with pytest.raises(DegenerateSeriesError):
            RatioSeriesBuilder().compare("AAA", [], "BBB", self.flat)
