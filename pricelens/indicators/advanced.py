"""Advanced indicators — Bollinger Bands, Stochastic RSI, Volume Profile, Fibonacci extensions.

Pure functions over OHLCV candles, no I/O.  Empty or short input returns
the neutral default documented on each function instead of raising.
"""

from typing import Sequence

import numpy as np

from pricelens.indicators.models import (
    BollingerBands,
    FibonacciExtensions,
    FibonacciTarget,
    StochasticRSI,
    VolumeLevel,
    VolumeProfile,
)
from pricelens.market.models import OHLCV

VALUE_AREA_SHARE = 0.70

_EXTENSION_RATIOS = (0.618, 1.0, 1.618, 2.618)
_EXTENSION_LABELS = ("61.8%", "100%", "161.8%", "261.8%")
_EXTENSION_SIGNIFICANCE = ("target", "target", "strong_resistance", "extreme_extension")


# ── Bollinger Bands ──────────────────────────────────────────────────────


def calculate_bollinger_bands(
    data: Sequence[OHLCV],
    period: int = 20,
    std_dev_multiplier: float = 2.0,
) -> BollingerBands:
    """Calculate Bollinger Bands for the most recent window.

    Middle = SMA of the last ``min(period, len(data))`` closes
    Upper  = middle + *std_dev_multiplier* × σ (population σ)
    Lower  = middle − *std_dev_multiplier* × σ

    ``bandwidth`` is ``(upper - lower) / middle``; ``percent_b`` places the
    latest close inside the band, clamped to [0, 1] (0.5 for a flat band).

    Returns an all-zero ``BollingerBands`` for empty input.
    """
    if not data:
        return BollingerBands()

    closes = np.array([c.close for c in data], dtype=float)
    window = closes[-min(period, len(closes)):]

    sma = float(window.mean())
    sigma = float(window.std())
    upper = sma + sigma * std_dev_multiplier
    lower = sma - sigma * std_dev_multiplier

    bandwidth = (upper - lower) / sma if sma != 0 else 0.0
    if upper == lower:
        percent_b = 0.5
    else:
        percent_b = (closes[-1] - lower) / (upper - lower)

    return BollingerBands(
        upper=round(upper, 2),
        middle=round(sma, 2),
        lower=round(lower, 2),
        bandwidth=round(bandwidth, 4),
        percent_b=max(0.0, min(1.0, float(percent_b))),
    )


# ── Stochastic RSI ───────────────────────────────────────────────────────


def _window_rsi(window: Sequence[float], period: int) -> float:
    """Simple-average RSI over one window of ``period + 1`` prices."""
    gains = 0.0
    losses = 0.0
    for j in range(1, len(window)):
        change = window[j] - window[j - 1]
        if change > 0:
            gains += change
        else:
            losses += abs(change)
    avg_gain = gains / period
    avg_loss = losses / period
    rs = 100.0 if avg_loss == 0 else avg_gain / avg_loss
    return 100.0 - 100.0 / (1.0 + rs)


def calculate_stochastic_rsi(
    data: Sequence[OHLCV],
    rsi_period: int = 14,
    stoch_period: int = 14,
    k_period: int = 3,
    d_period: int = 3,
) -> StochasticRSI:
    """Stochastic oscillator applied to a rolling RSI.

    1. RSI for every window of *rsi_period* price changes.
    2. %K = position of the latest RSI inside the min/max of the last
       *stoch_period* RSI values, scaled to 0–100 (50 when flat).
    3. %D = %K.  *k_period* and *d_period* are accepted for call
       compatibility; no smoothing is applied.

    Returns neutral 50/50 when ``len(data) < rsi_period + stoch_period``.
    """
    if len(data) < rsi_period + stoch_period:
        return StochasticRSI()

    prices = [c.close for c in data]
    rsi_values = [
        _window_rsi(prices[i - rsi_period : i + 1], rsi_period)
        for i in range(rsi_period, len(prices))
    ]
    if not rsi_values:
        return StochasticRSI()

    recent = rsi_values[-stoch_period:]
    lowest, highest = min(recent), max(recent)
    if highest == lowest:
        stoch = 50.0
    else:
        stoch = (recent[-1] - lowest) / (highest - lowest) * 100

    k = stoch
    d = k

    signal = "neutral"
    if k > d and k < 20:
        signal = "bullish"
    elif k < d and k > 80:
        signal = "bearish"

    return StochasticRSI(
        k=round(k, 2),
        d=round(d, 2),
        signal=signal,
        overbought=k > 80 and d > 80,
        oversold=k < 20 and d < 20,
    )


# ── Volume Profile ───────────────────────────────────────────────────────


def calculate_volume_profile(data: Sequence[OHLCV], bins: int = 20) -> VolumeProfile:
    """Distribute traded volume over equal-width price buckets.

    Each candle's whole volume lands in the bucket holding its typical
    price ``(high + low + close) / 3``.  The Point of Control is the
    first bucket with the most volume; the Value Area is built from the
    heaviest buckets until it holds 70% of total volume.  Level prices
    are the raw bucket midpoints; only the POC and the Value Area bounds
    are rounded to 2 decimal places.

    Returns an all-zero profile for empty input.
    """
    if not data or bins <= 0:
        return VolumeProfile()

    highs = np.array([c.high for c in data], dtype=float)
    lows = np.array([c.low for c in data], dtype=float)
    closes = np.array([c.close for c in data], dtype=float)
    volumes = np.array([c.volume for c in data], dtype=float)

    min_price = float(lows.min())
    max_price = float(highs.max())
    bin_size = (max_price - min_price) / bins

    typical = (highs + lows + closes) / 3
    if bin_size > 0:
        index = np.floor((typical - min_price) / bin_size).astype(int)
        index = np.clip(index, 0, bins - 1)
    else:
        index = np.zeros(len(data), dtype=int)

    bucket_volume = np.bincount(index, weights=volumes, minlength=bins)
    bucket_price = min_price + np.arange(bins) * bin_size + bin_size / 2
    total_volume = float(volumes.sum())

    levels = [
        VolumeLevel(
            price=float(p),
            volume=float(v),
            percentage=float(v) / total_volume * 100 if total_volume > 0 else 0.0,
        )
        for p, v in zip(bucket_price, bucket_volume)
    ]

    poc_level = levels[int(np.argmax(bucket_volume))]

    target = total_volume * VALUE_AREA_SHARE
    cumulative = 0.0
    value_area: list[VolumeLevel] = []
    for level in sorted(levels, key=lambda lv: -lv.volume):
        if cumulative >= target:
            break
        value_area.append(level)
        cumulative += level.volume

    area_prices = [lv.price for lv in value_area] or [poc_level.price]

    return VolumeProfile(
        levels=levels,
        poc=round(poc_level.price, 2),
        value_area_high=round(max(area_prices), 2),
        value_area_low=round(min(area_prices), 2),
        total_volume=total_volume,
    )


# ── Fibonacci extensions ─────────────────────────────────────────────────


def calculate_fibonacci_extensions(
    swing1_start: float,
    swing1_end: float,
    swing2_end: float,
) -> FibonacciExtensions:
    """Project Fibonacci extension targets from a two-swing structure.

    The first swing's magnitude is projected 61.8/100/161.8/261.8% from
    *swing2_end*: upward for an uptrend continuation, downward otherwise.
    Targets are sorted in the direction of travel.
    """
    swing1_range = abs(swing1_end - swing1_start)
    is_uptrend = swing2_end > min(swing1_start, swing1_end)

    if is_uptrend and swing1_end > swing1_start:
        projection = "uptrend_continuation"
    elif not is_uptrend and swing1_end < swing1_start:
        projection = "downtrend_continuation"
    else:
        projection = "reversal"

    direction = 1.0 if projection == "uptrend_continuation" else -1.0

    levels: dict[str, float] = {}
    targets: list[FibonacciTarget] = []
    for ratio, label, significance in zip(
        _EXTENSION_RATIOS, _EXTENSION_LABELS, _EXTENSION_SIGNIFICANCE
    ):
        price = round(swing2_end + direction * swing1_range * ratio, 2)
        levels[label] = price
        targets.append(FibonacciTarget(level=label, price=price, significance=significance))

    targets.sort(key=lambda t: t.price, reverse=projection != "uptrend_continuation")
    return FibonacciExtensions(levels=levels, targets=targets, projection=projection)
