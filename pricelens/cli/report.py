"""CLI report — prints analysis results to the console."""

import math
from typing import Optional

from pricelens.analysis.models import AnalysisOutcome
from pricelens.indicators.models import IndicatorSnapshot


def _num(value: Optional[float], fmt: str = ",.2f", prefix: str = "") -> str:
    """Format a number, or ``N/A`` when it is missing or not finite."""
    if value is None or not math.isfinite(value):
        return "N/A"
    return f"{prefix}{value:{fmt}}"


def format_price_analysis(outcome: AnalysisOutcome) -> str:
    """Format and print a price analysis outcome.

    Returns:
        The formatted string (also printed to stdout).
    """
    if outcome.analysis is None:
        message = outcome.error.message if outcome.error else "Analysis disabled"
        output = f"Price analysis unavailable: {message}"
        print(output)
        return output

    a = outcome.analysis
    ep, sl, pt = a.entry_points, a.stop_loss, a.profit_targets
    rr = pt.risk_reward_ratio
    rr_str = f"1:{rr:.1f}" if math.isfinite(rr) else "N/A"

    lines = [
        "──────────────── PriceLens Analysis ───────────────",
        f"  Horizon:         {a.time_horizon.value}",
        f"  Confidence:      {a.confidence:.0%}",
        f"  Risk:            {a.risk_assessment}",
        "  Entry points",
        f"    Conservative:  {_num(ep.conservative, prefix='$')}  ({ep.methods.conservative})",
        f"    Moderate:      {_num(ep.moderate, prefix='$')}  ({ep.methods.moderate})",
        f"    Aggressive:    {_num(ep.aggressive, prefix='$')}  ({ep.methods.aggressive})",
        f"  Stop-loss:       {_num(sl.price, prefix='$')} (-{_num(sl.percentage)}%, {sl.method})",
        f"                   {sl.explanation}",
        "  Profit targets",
        f"    Target 1:      {_num(pt.target1, prefix='$')}  ({pt.methods.target1})",
        f"    Target 2:      {_num(pt.target2, prefix='$')}  ({pt.methods.target2})",
        f"    Target 3:      {_num(pt.target3, prefix='$')}  ({pt.methods.target3})",
        f"  Risk:Reward:     {rr_str}",
        "──────────────────────────────────────────────────",
    ]
    output = "\n".join(lines)
    print(output)
    return output


def format_indicator_snapshot(snapshot: IndicatorSnapshot) -> str:
    """Format and print an indicator snapshot.

    Returns:
        The formatted string (also printed to stdout).
    """
    bb = snapshot.bollinger_bands
    st = snapshot.stochastic_rsi
    vp = snapshot.volume_profile
    macd = snapshot.macd
    sig = snapshot.signals

    if macd is None:
        macd_str = "N/A"
    else:
        macd_str = (
            f"{_num(macd.macd, '.4f')} / signal {_num(macd.signal, '.4f')}"
            f" / hist {_num(macd.histogram, '.4f')}"
        )

    lines = [
        "─────────────── PriceLens Indicators ──────────────",
        f"  RSI(14):         {_num(snapshot.rsi)}  [{sig.rsi}]",
        f"  EMA12 / EMA26:   {_num(snapshot.ema12)} / {_num(snapshot.ema26)}",
        f"  MACD:            {macd_str}  [{sig.macd}]",
        f"  Bollinger:       {_num(bb.lower)} < {_num(bb.middle)} < {_num(bb.upper)}"
        f"  (bw {_num(bb.bandwidth, '.4f')}, %B {_num(bb.percent_b)})  [{sig.bollinger}]",
        f"  Stoch RSI:       K {_num(st.k)} / D {_num(st.d)}  [{sig.stoch_rsi}]",
        f"  Volume POC:      {_num(vp.poc)}  (VA {_num(vp.value_area_low)}–{_num(vp.value_area_high)})",
        f"  Overall:         {sig.overall}",
        "──────────────────────────────────────────────────",
    ]
    output = "\n".join(lines)
    print(output)
    return output
