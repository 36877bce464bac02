"""Support/resistance detection, ATR and Fibonacci retracement — pure functions."""

from typing import Sequence

from pricelens.analysis.models import SupportResistance
from pricelens.market.models import OHLCV

MAX_LEVELS = 5

FIB_RETRACEMENT_RATIOS = {
    "23.6%": 0.236,
    "38.2%": 0.382,
    "50%": 0.5,
    "61.8%": 0.618,
}


def calculate_atr(data: Sequence[OHLCV], period: int = 14) -> float:
    """Calculate the Average True Range.

    Uses the standard True Range definition:
        TR = max(high - low, |high - prev_close|, |low - prev_close|)

    Averages the last ``min(period, available)`` true ranges, so short
    series still produce a value.  A single candle returns its
    ``high - low``; empty input returns 0.
    """
    if not data:
        return 0.0
    if len(data) == 1:
        return data[0].high - data[0].low

    true_ranges: list[float] = []
    for i in range(1, len(data)):
        high = data[i].high
        low = data[i].low
        prev_close = data[i - 1].close
        true_ranges.append(
            max(high - low, abs(high - prev_close), abs(low - prev_close))
        )

    recent = true_ranges[-min(period, len(true_ranges)):]
    return sum(recent) / len(recent)


def _is_swing_low(data: Sequence[OHLCV], i: int, lookback: int) -> bool:
    low = data[i].low
    for j in range(i - lookback, i + lookback + 1):
        if j != i and data[j].low <= low:
            return False
    return True


def _is_swing_high(data: Sequence[OHLCV], i: int, lookback: int) -> bool:
    high = data[i].high
    for j in range(i - lookback, i + lookback + 1):
        if j != i and data[j].high >= high:
            return False
    return True


def find_support_resistance_levels(
    data: Sequence[OHLCV], lookback: int = 5
) -> SupportResistance:
    """Find support and resistance levels from local extremes.

    A support is a low strictly lower than every other low within
    ``±lookback`` candles; a resistance is the mirror for highs.  Levels
    are de-duplicated, sorted nearest-first from a rising market's point
    of view (support descending, resistance ascending) and capped at 5.

    Fewer than 3 candles yields empty lists.
    """
    if len(data) < 3:
        return SupportResistance(support=[], resistance=[])

    support: set[float] = set()
    resistance: set[float] = set()
    for i in range(lookback, len(data) - lookback):
        if _is_swing_low(data, i, lookback):
            support.add(data[i].low)
        if _is_swing_high(data, i, lookback):
            resistance.add(data[i].high)

    return SupportResistance(
        support=sorted(support, reverse=True)[:MAX_LEVELS],
        resistance=sorted(resistance)[:MAX_LEVELS],
    )


def calculate_fibonacci_retracement(price_a: float, price_b: float) -> dict[str, float]:
    """Fibonacci retracement levels between two prices.

    The lower price is always 0% and the higher 100%, whatever the
    argument order.
    """
    high = max(price_a, price_b)
    low = min(price_a, price_b)
    span = high - low

    levels = {"0%": low}
    for label, ratio in FIB_RETRACEMENT_RATIOS.items():
        levels[label] = low + span * ratio
    levels["100%"] = high
    return levels


def recent_range(data: Sequence[OHLCV], window: int = 20) -> tuple[float, float]:
    """``(high, low)`` of the last *window* candles."""
    recent = data[-window:]
    return max(c.high for c in recent), min(c.low for c in recent)
