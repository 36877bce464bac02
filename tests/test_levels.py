"""Tests for support/resistance detection, ATR and Fibonacci retracement."""

import pytest

from pricelens.analysis.levels import (
    MAX_LEVELS,
    calculate_atr,
    calculate_fibonacci_retracement,
    find_support_resistance_levels,
    recent_range,
)
from pricelens.market.models import OHLCV


def _make_candle(close: float, ts: int = 0, spread: float = 1.0) -> OHLCV:
    return OHLCV(ts, close, close + spread, close - spread, close, 10.0)


def _series(closes) -> list[OHLCV]:
    return [_make_candle(c, ts=i) for i, c in enumerate(closes)]


def _fixture() -> list[OHLCV]:
    return [
        OHLCV(1000, 100, 105, 95, 102, 1000),
        OHLCV(2000, 102, 108, 100, 106, 1200),
        OHLCV(3000, 106, 110, 104, 108, 800),
        OHLCV(4000, 108, 112, 105, 107, 900),
        OHLCV(5000, 107, 109, 103, 105, 1100),
    ]


class TestATR:
    def test_averages_true_ranges(self):
        # true ranges: 8, 6, 7, 6
        assert calculate_atr(_fixture()) == pytest.approx(6.75)

    def test_uses_last_period_ranges(self):
        assert calculate_atr(_fixture(), period=3) == pytest.approx(19 / 3)

    def test_gap_counts_toward_true_range(self):
        data = [OHLCV(0, 10, 11, 9, 10, 1), OHLCV(1, 20, 21, 19, 20, 1)]
        assert calculate_atr(data) == 11

    def test_single_candle(self):
        assert calculate_atr([OHLCV(0, 10, 12, 9, 11, 1)]) == 3

    def test_empty(self):
        assert calculate_atr([]) == 0


class TestSupportResistance:
    def test_swing_points(self):
        levels = find_support_resistance_levels(
            _series([10, 8, 6, 8, 10, 12, 10, 8, 10]), lookback=2
        )
        assert levels.support == [5]
        assert levels.resistance == [13]

    def test_too_short(self):
        levels = find_support_resistance_levels(_series([1, 2]))
        assert levels.support == []
        assert levels.resistance == []

    def test_flat_series_has_no_levels(self):
        levels = find_support_resistance_levels(_series([50] * 30))
        assert levels.support == []
        assert levels.resistance == []

    def test_ordering_and_cap(self):
        # a zig-zag with rising troughs and peaks every 4 candles
        closes = []
        for k in range(10):
            closes += [100 + k, 102 + k, 104 + k, 102 + k]
        levels = find_support_resistance_levels(_series(closes), lookback=1)
        assert len(levels.support) <= MAX_LEVELS
        assert len(levels.resistance) <= MAX_LEVELS
        assert levels.support == sorted(levels.support, reverse=True)
        assert levels.resistance == sorted(levels.resistance)

    def test_deterministic(self):
        data = _series([10, 8, 6, 8, 10, 12, 10, 8, 10])
        assert find_support_resistance_levels(data, 2) == find_support_resistance_levels(data, 2)


class TestFibonacciRetracement:
    def test_levels(self):
        levels = calculate_fibonacci_retracement(200, 100)
        assert levels["0%"] == 100
        assert levels["50%"] == 150
        assert levels["61.8%"] == pytest.approx(161.8)
        assert levels["100%"] == 200
        assert list(levels) == ["0%", "23.6%", "38.2%", "50%", "61.8%", "100%"]

    def test_argument_order_irrelevant(self):
        assert calculate_fibonacci_retracement(100, 200) == calculate_fibonacci_retracement(200, 100)


class TestRecentRange:
    def test_window(self):
        data = _series([500] + [100] * 20)
        assert recent_range(data) == (101, 99)

    def test_short_series(self):
        assert recent_range(_fixture()) == (112, 95)
