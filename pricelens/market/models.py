"""Market data models — canonical candles and the raw tuple variants they come from."""

from dataclasses import dataclass
from typing import Sequence, Union


@dataclass(frozen=True)
class OHLCV:
    """A single candlestick bar. ``timestamp`` is milliseconds since epoch."""

    timestamp: int
    open: float
    high: float
    low: float
    close: float
    volume: float

    @property
    def typical_price(self) -> float:
        return (self.high + self.low + self.close) / 3

    def is_consistent(self) -> bool:
        """True when high/low bracket both open and close."""
        return (
            self.high >= max(self.open, self.close)
            and self.low <= min(self.open, self.close)
        )


# ── Raw candle variants ──────────────────────────────────────────────────


@dataclass(frozen=True)
class FullCandle:
    """Exchange candle ``[ts, open, high, low, close, volume]``."""

    timestamp: int
    open: float
    high: float
    low: float
    close: float
    volume: float

    def to_ohlcv(self) -> OHLCV:
        return OHLCV(
            timestamp=self.timestamp,
            open=self.open,
            high=self.high,
            low=self.low,
            close=self.close,
            volume=self.volume,
        )


@dataclass(frozen=True)
class PricePoint:
    """Price-only sample ``[ts, price]`` with an optional third volume element."""

    timestamp: int
    price: float
    volume: float = 0.0

    def to_ohlcv(self) -> OHLCV:
        p = self.price
        return OHLCV(self.timestamp, p, p, p, p, self.volume)


@dataclass(frozen=True)
class MalformedCandle:
    """A tuple too short to carry both a timestamp and a price."""

    timestamp: int
    price: float

    def to_ohlcv(self) -> OHLCV:
        p = self.price
        return OHLCV(self.timestamp, p, p, p, p, 0.0)


RawCandle = Union[FullCandle, PricePoint, MalformedCandle]


def parse_raw_candle(values: Sequence[float]) -> RawCandle:
    """Resolve a raw numeric tuple into its ``RawCandle`` variant.

    This is the only place that looks at tuple length:

    - 6 or more elements → ``FullCandle``
    - 2 to 5 elements    → ``PricePoint`` (third element, if non-zero, is volume)
    - 0 or 1 element     → ``MalformedCandle`` (the lone value doubles as
      timestamp and price; an empty tuple yields zeros)
    """
    n = len(values)
    if n >= 6:
        return FullCandle(
            timestamp=int(values[0]),
            open=float(values[1]),
            high=float(values[2]),
            low=float(values[3]),
            close=float(values[4]),
            volume=float(values[5]),
        )
    if n >= 2:
        volume = float(values[2]) if n > 2 and values[2] else 0.0
        return PricePoint(timestamp=int(values[0]), price=float(values[1]), volume=volume)
    if n == 1 and values[0]:
        return MalformedCandle(timestamp=int(values[0]), price=float(values[0]))
    return MalformedCandle(timestamp=0, price=0.0)
