"""Tests for the analysis orchestrator — price analysis and indicator snapshot."""

import logging
import math
from concurrent.futures import ThreadPoolExecutor

import pytest

from pricelens.analysis import orchestrator
from pricelens.analysis.models import AnalysisErrorKind, AnalysisOutcome
from pricelens.analysis.orchestrator import (
    analyze_indicators,
    analyze_price_points,
    calculate_confidence,
)
from pricelens.market.models import OHLCV
from pricelens.market.time_intervals import TimeInterval


def _fixture() -> list[OHLCV]:
    return [
        OHLCV(1000, 100, 105, 95, 102, 1000),
        OHLCV(2000, 102, 108, 100, 106, 1200),
        OHLCV(3000, 106, 110, 104, 108, 800),
        OHLCV(4000, 108, 112, 105, 107, 900),
        OHLCV(5000, 107, 109, 103, 105, 1100),
    ]


def _curve(n: int, start: float, sign: float) -> list[OHLCV]:
    """Closes moving ever faster away from *start*."""
    candles = []
    for i in range(n):
        close = start + sign * 0.1 * i * i
        candles.append(OHLCV(i * 60_000, close, close + 0.5, close - 0.5, close, 100.0))
    return candles


# ── Price analysis ───────────────────────────────────────────────────────


class TestAnalyzePricePoints:
    def test_reference_fixture(self):
        outcome = analyze_price_points(_fixture(), 105, "1h")
        assert outcome.ok
        assert outcome.error is None
        analysis = outcome.analysis

        assert analysis.entry_points.conservative == 105
        assert analysis.entry_points.moderate == 98.25
        assert analysis.entry_points.aggressive == 98.25
        assert analysis.stop_loss.price == 84.75
        assert analysis.stop_loss.method == "atr"
        assert analysis.profit_targets.target1 == 125.25  # 98.25 + 2 × 13.5
        assert analysis.profit_targets.risk_reward_ratio == 2.0
        assert analysis.time_horizon is TimeInterval.H1
        assert analysis.risk_assessment.startswith("Medium")
        assert analysis.confidence == 0.6

    def test_plan_is_ordered(self):
        analysis = analyze_price_points(_fixture(), 105, "1h").analysis
        targets = analysis.profit_targets
        assert analysis.stop_loss.price < analysis.entry_points.moderate
        assert targets.target1 < targets.target2 < targets.target3
        assert analysis.entry_points.conservative >= analysis.entry_points.moderate
        assert analysis.entry_points.aggressive <= analysis.entry_points.moderate
        assert 0 <= analysis.confidence <= 1

    @pytest.mark.parametrize(
        "horizon, confidence, risk",
        [("5m", 0.5, "High"), ("4h", 0.6, "Medium"), ("1d", 0.6, "Low to Medium")],
    )
    def test_horizon_category(self, horizon, confidence, risk):
        analysis = analyze_price_points(_fixture(), 105, horizon).analysis
        assert analysis.confidence == confidence
        assert analysis.risk_assessment.startswith(risk)

    def test_insufficient_data(self):
        outcome = analyze_price_points(_fixture()[:4], 105, "1h")
        assert not outcome.ok
        assert outcome.error.kind is AnalysisErrorKind.INSUFFICIENT_DATA
        assert outcome.error.message == "Insufficient data for analysis"

    def test_min_candles_override(self):
        assert analyze_price_points(_fixture()[:3], 105, "1h", min_candles=3).ok

    @pytest.mark.parametrize("price", [0, -1, float("nan"), float("inf")])
    def test_invalid_price(self, price):
        outcome = analyze_price_points(_fixture(), price, "1h")
        assert outcome.error.kind is AnalysisErrorKind.INVALID_PRICE
        assert outcome.error.message == "Invalid current price"

    def test_invalid_horizon(self):
        outcome = analyze_price_points(_fixture(), 105, "2h")
        assert outcome.error.kind is AnalysisErrorKind.INVALID_TIME_HORIZON

    def test_disabled(self):
        outcome = analyze_price_points(_fixture(), 105, "1h", enabled=False)
        assert outcome == AnalysisOutcome()
        assert not outcome.ok

    def test_computation_failure_reported(self, monkeypatch, caplog):
        def _boom(*args, **kwargs):
            raise ZeroDivisionError("boom")

        monkeypatch.setattr(orchestrator, "calculate_entry_points", _boom)
        with caplog.at_level(logging.ERROR, logger="pricelens.analysis"):
            outcome = analyze_price_points(_fixture(), 105, "1h")
        assert outcome.error.kind is AnalysisErrorKind.ANALYSIS_FAILED
        assert "Price analysis failed" in caplog.text

    def test_entry_rounding_to_zero_still_analysed(self):
        # price equal to the ATR (6.75) puts the moderate entry at 0
        outcome = analyze_price_points(_fixture(), 6.75, "1h")
        assert outcome.ok
        analysis = outcome.analysis
        assert analysis.entry_points.moderate == 0
        assert analysis.stop_loss.price == -13.5
        assert math.isnan(analysis.stop_loss.percentage)
        assert analysis.profit_targets.risk_reward_ratio == 2.0

    def test_concurrent_calls_agree(self):
        data = _fixture()
        with ThreadPoolExecutor(max_workers=4) as pool:
            results = list(pool.map(lambda _: analyze_price_points(data, 105, "1h"), range(8)))
        assert all(r == results[0] for r in results)


class TestConfidence:
    def test_bounds(self):
        assert calculate_confidence(1000, 1000, TimeInterval.D1) == 0.9
        assert calculate_confidence(0, 0, TimeInterval.M5) == 0.4

    def test_levels_add_confidence(self):
        assert calculate_confidence(50, 4, TimeInterval.H1) == 0.9


# ── Indicator snapshot ───────────────────────────────────────────────────


class TestAnalyzeIndicators:
    def test_empty_snapshot(self):
        snapshot = analyze_indicators([])
        assert snapshot.rsi == 50
        assert snapshot.ema12 is None
        assert snapshot.macd is None
        assert snapshot.signals.overall == "neutral"
        assert snapshot.signals.bollinger == "normal"

    def test_short_series(self):
        snapshot = analyze_indicators(_fixture())
        assert snapshot.rsi == 0
        assert snapshot.ema12 is None
        assert snapshot.macd is None
        assert snapshot.signals.macd == "neutral"
        assert snapshot.volume_profile.total_volume == 5000

    def test_accelerating_rally(self):
        snapshot = analyze_indicators(_curve(60, 100.0, 1.0))
        assert snapshot.rsi == 100
        assert snapshot.ema12 > snapshot.ema26
        assert snapshot.signals.rsi == "overbought"
        assert snapshot.signals.macd == "bullish"
        assert snapshot.signals.stoch_rsi == "neutral"
        assert snapshot.signals.bollinger == "expansion"
        # overbought RSI votes bearish, cancelling the MACD
        assert snapshot.signals.overall == "neutral"

    def test_accelerating_selloff(self):
        snapshot = analyze_indicators(_curve(60, 1000.0, -1.0))
        assert snapshot.signals.rsi == "oversold"
        assert snapshot.signals.macd == "bearish"
        assert snapshot.signals.overall == "bearish"

    def test_flat_market_squeeze(self):
        data = [OHLCV(i, 100, 100.5, 99.5, 100, 10) for i in range(40)]
        snapshot = analyze_indicators(data)
        assert snapshot.signals.bollinger == "squeeze"
        assert math.isclose(snapshot.ema12, 100)

    def test_volume_bins(self):
        snapshot = analyze_indicators(_fixture(), volume_bins=5)
        assert len(snapshot.volume_profile.levels) == 5
