"""Entry, stop-loss and profit-target planning — pure math, no I/O.

Entry points:
    Conservative waits for the nearest support (+2% buffer), moderate
    takes the deeper of a 61.8% retracement or one ATR below price,
    aggressive buys a 2% dip (never above moderate).

Stop-loss:
    Percentage, 2 × ATR (with a price-tier floor on ATR), or just below
    the nearest support.

Profit targets:
    1:2 and 1:3 multiples of the (floored) risk, plus a third target
    lifted to resistance or a Fibonacci extension when those sit higher.
"""

import math
from typing import Optional, Sequence

from pricelens.analysis.levels import (
    calculate_atr,
    calculate_fibonacci_retracement,
    find_support_resistance_levels,
    recent_range,
)
from pricelens.analysis.models import (
    EntryMethods,
    EntryPoints,
    ProfitTargets,
    StopLoss,
    TargetMethods,
)
from pricelens.market.models import OHLCV

STOP_LOSS_METHODS = ("percentage", "atr", "support")

DEFAULT_STOP_PCT = 5.0
MIN_RISK_PCT = 0.01
MIN_TARGET1_GAIN_PCT = 0.02


def _nearest_support_below(support: list[float], price: float) -> Optional[float]:
    """First support under *price* (supports are sorted descending)."""
    return next((s for s in support if s < price), None)


# ── Entry points ─────────────────────────────────────────────────────────


def calculate_entry_points(data: Sequence[OHLCV], current_price: float) -> EntryPoints:
    """Calculate conservative / moderate / aggressive entry prices.

    - **Conservative**: nearest support below *current_price* × 1.02.
      Falls back to the strongest support when none lies below, and to
      *current_price* when no support was found at all.
    - **Moderate**: ``min(61.8% retracement of the last 20 candles,
      current_price - ATR)``.
    - **Aggressive**: ``min(current_price × 0.98, moderate)``.

    Prices are rounded to 2 decimal places.
    """
    levels = find_support_resistance_levels(data)
    atr = calculate_atr(data)

    conservative = current_price
    anchor: Optional[float] = None
    if levels.support:
        anchor = _nearest_support_below(levels.support, current_price)
        if anchor is None:
            anchor = levels.support[0]
        conservative = anchor * 1.02

    moderate = current_price - atr
    if data:
        recent_high, recent_low = recent_range(data)
        fib = calculate_fibonacci_retracement(recent_high, recent_low)
        moderate = min(fib["61.8%"], moderate)

    aggressive = min(current_price * 0.98, moderate)

    anchor_str = f"{anchor:.2f}" if anchor is not None else "N/A"
    return EntryPoints(
        conservative=round(conservative, 2),
        moderate=round(moderate, 2),
        aggressive=round(aggressive, 2),
        methods=EntryMethods(
            conservative=f"Support level ({anchor_str}) + 2% buffer",
            moderate="Fibonacci 61.8% retracement or current price - 1 ATR",
            aggressive="Current price with 2% discount",
        ),
    )


# ── Stop-loss ────────────────────────────────────────────────────────────


def _distance_pct(entry_price: float, stop_price: float) -> float:
    """Stop distance as a percentage of entry; NaN for a zero entry."""
    if entry_price == 0:
        return float("nan")
    return (entry_price - stop_price) / entry_price * 100


def _atr_floor(entry_price: float) -> float:
    """Minimum ATR used for stops, by price tier.

    Thin or low-precision data can produce a near-zero ATR; the floor
    keeps the stop at a realistic distance.
    """
    if entry_price > 50_000:
        return entry_price * 0.015
    if entry_price > 1_000:
        return entry_price * 0.02
    return entry_price * 0.03


def calculate_stop_loss(
    data: Sequence[OHLCV],
    entry_price: float,
    method: str = "atr",
    custom_percentage: Optional[float] = None,
) -> StopLoss:
    """Calculate a stop-loss below *entry_price*.

    Args:
        data: Candle history (used by the ``atr`` and ``support`` methods).
        entry_price: Planned entry.
        method: ``"percentage"``, ``"atr"`` or ``"support"``.
        custom_percentage: Distance for the ``percentage`` method
            (default 5%; 0 or None also means the default).

    Returns:
        ``StopLoss`` with price and percentage rounded to 2 decimal places.
        The percentage is NaN when *entry_price* is 0.

    Raises:
        ValueError: If *method* is not one of the supported methods.
    """
    if method == "percentage":
        pct = custom_percentage or DEFAULT_STOP_PCT
        price = entry_price * (1 - pct / 100)
        percentage = pct
        explanation = f"{pct:g}% below entry price"
    elif method == "atr":
        raw_atr = calculate_atr(data)
        atr = max(raw_atr, _atr_floor(entry_price))
        price = entry_price - atr * 2
        percentage = _distance_pct(entry_price, price)
        if atr > raw_atr:
            explanation = f"2x ATR ({atr:.2f}, price-tier minimum) below entry price"
        else:
            explanation = f"2x ATR ({atr:.2f}) below entry price"
    elif method == "support":
        levels = find_support_resistance_levels(data)
        support = _nearest_support_below(levels.support, entry_price)
        if support is not None:
            price = support * 0.98
            explanation = f"2% below nearest support level ({support:.2f})"
        else:
            price = entry_price * (1 - DEFAULT_STOP_PCT / 100)
            explanation = "5% below entry price (no support found)"
        percentage = _distance_pct(entry_price, price)
    else:
        raise ValueError(
            f"method must be one of {', '.join(STOP_LOSS_METHODS)}, got '{method}'"
        )

    return StopLoss(
        price=round(price, 2),
        percentage=round(percentage, 2),
        method=method,
        explanation=explanation,
    )


# ── Profit targets ───────────────────────────────────────────────────────


def calculate_profit_targets(
    data: Sequence[OHLCV],
    entry_price: float,
    stop_loss_price: float,
) -> ProfitTargets:
    """Calculate three ascending profit targets for a long entry.

    Strategy:
        1. ``effective_risk = max(entry - stop, 1% of entry)``.
        2. target1 / target2 = entry + 2R / 3R.  If target1 still gains
           less than 2%, use flat 5% / 10% targets instead.
        3. target3 starts at entry + 4R (15% on the flat fallback), then
           in this order:
           a. raised to the first resistance above target2;
           b. raised to the 127.2% extension of the last-20 swing if higher;
           c. raised to the 161.8% extension if higher, but only when it
              stays within 1.5 × the current target3.
        4. ``risk_reward_ratio = (target1 - entry) / (entry - stop)``,
           NaN when that risk is not a positive finite number.
    """
    risk = entry_price - stop_loss_price
    effective_risk = max(risk, entry_price * MIN_RISK_PCT)

    target1 = entry_price + effective_risk * 2
    target2 = entry_price + effective_risk * 3
    target3 = entry_price + effective_risk * 4
    methods = TargetMethods(
        target1=f"1:2 risk-reward ratio (Risk: ${effective_risk:.2f})",
        target2="1:3 risk-reward ratio",
        target3="1:4 risk-reward ratio",
    )

    if target1 - entry_price < entry_price * MIN_TARGET1_GAIN_PCT:
        target1 = entry_price * 1.05
        target2 = entry_price * 1.10
        target3 = entry_price * 1.15
        methods = TargetMethods(
            target1="5% above entry (risk too small for R:R targets)",
            target2="10% above entry",
            target3="15% above entry",
        )

    levels = find_support_resistance_levels(data)
    next_resistance = next((r for r in levels.resistance if r > target2), None)
    if next_resistance is not None and next_resistance > target3:
        target3 = next_resistance
        methods = TargetMethods(
            methods.target1, methods.target2,
            f"Resistance level ({next_resistance:.2f})",
        )

    if data:
        recent_high, recent_low = recent_range(data)
        swing = recent_high - recent_low
        ext_127 = recent_high + swing * 0.272
        ext_161 = recent_high + swing * 0.618
        if ext_127 > target3:
            target3 = ext_127
            methods = TargetMethods(
                methods.target1, methods.target2, "Fibonacci 127.2% extension"
            )
        if ext_161 > target3 and ext_161 <= target3 * 1.5:
            target3 = ext_161
            methods = TargetMethods(
                methods.target1, methods.target2, "Fibonacci 161.8% extension"
            )

    if risk > 0 and math.isfinite(risk):
        risk_reward_ratio = round((target1 - entry_price) / risk, 1)
    else:
        risk_reward_ratio = float("nan")

    return ProfitTargets(
        target1=round(target1, 2),
        target2=round(target2, 2),
        target3=round(target3, 2),
        risk_reward_ratio=risk_reward_ratio,
        methods=methods,
    )
