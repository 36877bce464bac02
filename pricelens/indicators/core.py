"""Core indicators — RSI, EMA, MACD. Pure functions over a price list, no I/O.

Short inputs never raise: each function documents its empty/neutral result.
"""

from typing import Optional, Sequence

from pricelens.indicators.models import MACDResult


# ── EMA ──────────────────────────────────────────────────────────────────


def calculate_ema(prices: Sequence[float], period: int = 12) -> list[float]:
    """Calculate an Exponential Moving Average series.

    Uses the standard EMA formula:
        ``EMA_today = price × k + EMA_yesterday × (1 - k)``
    where ``k = 2 / (period + 1)``.

    The first value is seeded with the SMA of the first *period* prices,
    so the result holds ``len(prices) - period + 1`` values — the
    current EMA is the last element.  Returns ``[]`` if fewer than
    *period* prices are given.
    """
    if period <= 0 or len(prices) < period:
        return []

    k = 2.0 / (period + 1)
    ema = [sum(prices[:period]) / period]
    for price in prices[period:]:
        ema.append(price * k + ema[-1] * (1 - k))
    return ema


# ── RSI ──────────────────────────────────────────────────────────────────


def _rsi_from_avgs(avg_gain: float, avg_loss: float) -> float:
    if avg_loss == 0:
        return 100.0
    rs = avg_gain / avg_loss
    return 100.0 - 100.0 / (1.0 + rs)


def calculate_rsi_series(prices: Sequence[float], period: int = 14) -> list[float]:
    """Calculate Wilder's Relative Strength Index series.

    Algorithm (Wilder-smoothed):
        1. delta = price[i] - price[i-1]
        2. Separate gains (positive) and losses (|negative|).
        3. Seed average gain/loss = SMA of first *period* deltas.
        4. Subsequent: avg = (prev_avg × (period-1) + current) / period
        5. RSI = 100 - 100 / (1 + avg_gain / avg_loss)

    Returns one value per price from index *period* onward, or ``[]``
    when fewer than ``period + 1`` prices are given.
    """
    if period <= 0 or len(prices) < period + 1:
        return []

    deltas = [prices[i] - prices[i - 1] for i in range(1, len(prices))]
    gains = [max(d, 0.0) for d in deltas]
    losses = [abs(min(d, 0.0)) for d in deltas]

    avg_gain = sum(gains[:period]) / period
    avg_loss = sum(losses[:period]) / period
    rsi = [_rsi_from_avgs(avg_gain, avg_loss)]

    for i in range(period, len(deltas)):
        avg_gain = (avg_gain * (period - 1) + gains[i]) / period
        avg_loss = (avg_loss * (period - 1) + losses[i]) / period
        rsi.append(_rsi_from_avgs(avg_gain, avg_loss))

    return rsi


def calculate_rsi(prices: Sequence[float], period: int = 14) -> float:
    """Latest RSI value, or ``0`` when the series is too short."""
    series = calculate_rsi_series(prices, period)
    return series[-1] if series else 0.0


# ── MACD ─────────────────────────────────────────────────────────────────


def calculate_macd(
    prices: Sequence[float],
    fast_period: int = 12,
    slow_period: int = 26,
    signal_period: int = 9,
) -> Optional[MACDResult]:
    """Calculate the latest MACD / signal / histogram triple.

    MACD line = EMA(fast) − EMA(slow), aligned on the slow series.
    Signal    = EMA(signal_period) of the MACD line.
    Histogram = MACD − signal.

    Returns ``None`` if fewer than *slow_period* prices are given.
    """
    slow = calculate_ema(prices, slow_period)
    if not slow:
        return None
    fast = calculate_ema(prices, fast_period)

    # fast[j] is the EMA at price index j + fast_period - 1; skip ahead to
    # the first index the slow EMA covers.
    offset = slow_period - fast_period
    macd_line = [fast[i + offset] - slow[i] for i in range(len(slow))]

    signal_line = calculate_ema(macd_line, signal_period)
    if not signal_line:
        return MACDResult(macd=macd_line[-1])

    return MACDResult(
        macd=macd_line[-1],
        signal=signal_line[-1],
        histogram=macd_line[-1] - signal_line[-1],
    )
