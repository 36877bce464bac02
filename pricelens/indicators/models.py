"""Indicator data models — typed results for the indicator libraries."""

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class MACDResult:
    """Latest MACD reading.

    ``signal`` and ``histogram`` stay ``None`` until enough MACD values
    exist to seed the signal EMA.
    """

    macd: float
    signal: Optional[float] = None
    histogram: Optional[float] = None


@dataclass(frozen=True)
class BollingerBands:
    upper: float = 0.0
    middle: float = 0.0  # SMA
    lower: float = 0.0
    bandwidth: float = 0.0
    percent_b: float = 0.0


@dataclass(frozen=True)
class StochasticRSI:
    k: float = 50.0
    d: float = 50.0
    signal: str = "neutral"  # "bullish", "bearish" or "neutral"
    overbought: bool = False
    oversold: bool = False


@dataclass(frozen=True)
class VolumeLevel:
    """One price bucket of a volume profile."""

    price: float
    volume: float
    percentage: float


@dataclass(frozen=True)
class VolumeProfile:
    levels: list[VolumeLevel] = field(default_factory=list)
    poc: float = 0.0  # Point of Control
    value_area_high: float = 0.0
    value_area_low: float = 0.0
    total_volume: float = 0.0


@dataclass(frozen=True)
class FibonacciTarget:
    level: str  # e.g. "161.8%"
    price: float
    significance: str  # "target", "strong_resistance" or "extreme_extension"


@dataclass(frozen=True)
class FibonacciExtensions:
    levels: dict[str, float]
    targets: list[FibonacciTarget]
    projection: str  # "uptrend_continuation", "downtrend_continuation" or "reversal"


@dataclass(frozen=True)
class IndicatorSignals:
    rsi: str = "neutral"  # "overbought", "oversold" or "neutral"
    macd: str = "neutral"
    bollinger: str = "normal"  # "squeeze", "expansion" or "normal"
    stoch_rsi: str = "neutral"
    overall: str = "neutral"


@dataclass(frozen=True)
class IndicatorSnapshot:
    """Everything ``analyze_indicators`` derives from one candle window."""

    rsi: float
    ema12: Optional[float]
    ema26: Optional[float]
    macd: Optional[MACDResult]
    bollinger_bands: BollingerBands
    stochastic_rsi: StochasticRSI
    volume_profile: VolumeProfile
    signals: IndicatorSignals
