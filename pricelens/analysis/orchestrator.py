"""Analysis orchestration — composes levels, planner and indicators into reports.

Both entry points are stateless single-pass pipelines:

- ``analyze_price_points`` → entry points, stop-loss, targets, confidence.
- ``analyze_indicators``   → RSI/EMA/MACD/Bollinger/StochRSI/Volume Profile
  snapshot with a majority-vote overall signal.

``analyze_price_points`` never raises for bad input; guard failures come
back as a typed ``AnalysisError`` on the outcome.
"""

import logging
import math
from typing import Sequence, Union

from pricelens.analysis.levels import find_support_resistance_levels
from pricelens.analysis.models import (
    AnalysisError,
    AnalysisErrorKind,
    AnalysisInputError,
    AnalysisOutcome,
    PriceAnalysis,
)
from pricelens.analysis.planner import (
    calculate_entry_points,
    calculate_profit_targets,
    calculate_stop_loss,
)
from pricelens.indicators.advanced import (
    calculate_bollinger_bands,
    calculate_stochastic_rsi,
    calculate_volume_profile,
)
from pricelens.indicators.core import calculate_ema, calculate_macd, calculate_rsi
from pricelens.indicators.models import (
    BollingerBands,
    IndicatorSignals,
    IndicatorSnapshot,
    StochasticRSI,
    VolumeProfile,
)
from pricelens.market.models import OHLCV
from pricelens.market.time_intervals import (
    LONG_TERM,
    MEDIUM_TERM,
    SHORT_TERM,
    TimeInterval,
    get_time_interval_config,
    parse_time_interval,
)

logger = logging.getLogger("pricelens.analysis")

MIN_ANALYSIS_CANDLES = 5

RISK_ASSESSMENTS = {
    SHORT_TERM: "High - Short timeframe with increased volatility and noise",
    MEDIUM_TERM: "Medium - Balanced timeframe suitable for swing trading",
    LONG_TERM: "Low to Medium - Longer timeframe with reduced noise",
}


# ── Guards ───────────────────────────────────────────────────────────────


def check_analysis_inputs(
    data: Sequence[OHLCV],
    current_price: float,
    time_horizon: Union[str, TimeInterval],
    min_candles: int = MIN_ANALYSIS_CANDLES,
) -> TimeInterval:
    """Validate inputs before any computation.

    Returns the parsed ``TimeInterval``.

    Raises:
        AnalysisInputError: For too few candles, a non-positive or
            non-finite price, or an unknown horizon token.
    """
    if not data or len(data) < min_candles:
        raise AnalysisInputError(
            AnalysisErrorKind.INSUFFICIENT_DATA, "Insufficient data for analysis"
        )
    if not current_price or not math.isfinite(current_price) or current_price <= 0:
        raise AnalysisInputError(
            AnalysisErrorKind.INVALID_PRICE, "Invalid current price"
        )
    try:
        return parse_time_interval(time_horizon)
    except ValueError as exc:
        raise AnalysisInputError(AnalysisErrorKind.INVALID_TIME_HORIZON, str(exc)) from exc


def calculate_confidence(
    data_length: int, level_count: int, time_horizon: TimeInterval
) -> float:
    """Confidence in [0, 1] from data depth, level clarity and horizon."""
    confidence = 0.5
    confidence += min(data_length / 50, 0.2)
    confidence += min(level_count / 20, 0.2)
    if get_time_interval_config(time_horizon).category == SHORT_TERM:
        confidence -= 0.1
    return round(max(0.0, min(1.0, confidence)), 2)


# ── Price analysis ───────────────────────────────────────────────────────


def analyze_price_points(
    data: Sequence[OHLCV],
    current_price: float,
    time_horizon: Union[str, TimeInterval],
    enabled: bool = True,
    min_candles: int = MIN_ANALYSIS_CANDLES,
) -> AnalysisOutcome:
    """Run the full price-level analysis for one request.

    The moderate entry anchors the ATR stop-loss and the profit targets.

    Args:
        data: Candles sorted ascending by timestamp.
        current_price: Latest traded price.
        time_horizon: Horizon token such as ``"1h"``.
        enabled: When False nothing is computed and an empty outcome is
            returned.
        min_candles: Minimum series length accepted.

    Returns:
        ``AnalysisOutcome`` holding either the ``PriceAnalysis`` or an
        ``AnalysisError``.
    """
    if not enabled:
        return AnalysisOutcome()

    try:
        horizon = check_analysis_inputs(data, current_price, time_horizon, min_candles)
    except AnalysisInputError as exc:
        logger.info("Price analysis skipped: %s", exc)
        return AnalysisOutcome(error=AnalysisError(kind=exc.kind, message=str(exc)))

    try:
        entry_points = calculate_entry_points(data, current_price)
        stop_loss = calculate_stop_loss(data, entry_points.moderate, "atr")
        profit_targets = calculate_profit_targets(
            data, entry_points.moderate, stop_loss.price
        )
        levels = find_support_resistance_levels(data)
    except (ValueError, ArithmeticError):
        logger.exception("Price analysis failed for %d candles", len(data))
        return AnalysisOutcome(
            error=AnalysisError(
                kind=AnalysisErrorKind.ANALYSIS_FAILED, message="Analysis failed"
            )
        )

    confidence = calculate_confidence(
        len(data), len(levels.support) + len(levels.resistance), horizon
    )
    category = get_time_interval_config(horizon).category

    logger.debug(
        "Analysed %d candles @ %.2f (%s): entry=%.2f sl=%.2f conf=%.2f",
        len(data), current_price, horizon.value,
        entry_points.moderate, stop_loss.price, confidence,
    )

    return AnalysisOutcome(
        analysis=PriceAnalysis(
            entry_points=entry_points,
            stop_loss=stop_loss,
            profit_targets=profit_targets,
            time_horizon=horizon,
            risk_assessment=RISK_ASSESSMENTS[category],
            confidence=confidence,
        )
    )


# ── Indicator snapshot ───────────────────────────────────────────────────


def _rsi_signal(rsi: float) -> str:
    if rsi > 70:
        return "overbought"
    if rsi < 30:
        return "oversold"
    return "neutral"


def _bollinger_signal(bandwidth: float) -> str:
    if bandwidth < 0.1:
        return "squeeze"
    if bandwidth > 0.2:
        return "expansion"
    return "normal"


def _overall_signal(votes: list[str]) -> str:
    """Majority vote over non-neutral indicator signals.

    ``bullish`` counts for the bulls; ``bearish`` and ``overbought``
    count for the bears.
    """
    active = [v for v in votes if v != "neutral"]
    bullish = sum(1 for v in active if v == "bullish")
    bearish = sum(1 for v in active if v in ("bearish", "overbought"))
    if bullish > bearish:
        return "bullish"
    if bearish > bullish:
        return "bearish"
    return "neutral"


def analyze_indicators(data: Sequence[OHLCV], volume_bins: int = 20) -> IndicatorSnapshot:
    """Compute the indicator snapshot for a candle window.

    Empty input returns a neutral snapshot (RSI 50, no EMA/MACD).
    """
    if not data:
        return IndicatorSnapshot(
            rsi=50.0,
            ema12=None,
            ema26=None,
            macd=None,
            bollinger_bands=BollingerBands(),
            stochastic_rsi=StochasticRSI(),
            volume_profile=VolumeProfile(),
            signals=IndicatorSignals(),
        )

    prices = [c.close for c in data]
    rsi = calculate_rsi(prices)
    ema12_series = calculate_ema(prices, 12)
    ema26_series = calculate_ema(prices, 26)
    macd = calculate_macd(prices)

    bollinger = calculate_bollinger_bands(data)
    stoch_rsi = calculate_stochastic_rsi(data)
    profile = calculate_volume_profile(data, bins=volume_bins)

    macd_signal = "neutral"
    if macd is not None and macd.macd and macd.signal:
        macd_signal = "bullish" if macd.macd > macd.signal else "bearish"

    rsi_signal = _rsi_signal(rsi)
    signals = IndicatorSignals(
        rsi=rsi_signal,
        macd=macd_signal,
        bollinger=_bollinger_signal(bollinger.bandwidth),
        stoch_rsi=stoch_rsi.signal,
        overall=_overall_signal([rsi_signal, macd_signal, stoch_rsi.signal]),
    )

    return IndicatorSnapshot(
        rsi=rsi,
        ema12=ema12_series[-1] if ema12_series else None,
        ema26=ema26_series[-1] if ema26_series else None,
        macd=macd,
        bollinger_bands=bollinger,
        stochastic_rsi=stoch_rsi,
        volume_profile=profile,
        signals=signals,
    )
