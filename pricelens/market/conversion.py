"""Series conversion and validation — raw exchange tuples to canonical OHLCV.

Pure functions, no I/O.  Validation here is advisory: the converter never
rejects a candle, it only normalises shape and order.
"""

from typing import Iterable, Optional, Sequence

from pricelens.market.models import OHLCV, parse_raw_candle


def convert_candles_to_ohlcv(
    raw_candles: Optional[Iterable[Sequence[float]]],
) -> list[OHLCV]:
    """Convert raw candle tuples into an OHLCV list sorted by timestamp.

    Accepts the mixed shapes returned by price APIs (full 6-tuples,
    ``[ts, price]`` pairs, short/malformed tuples).  Empty or ``None``
    input yields an empty list.  The sort is stable, so candles sharing a
    timestamp keep their input order.
    """
    if not raw_candles:
        return []
    candles = [parse_raw_candle(values).to_ohlcv() for values in raw_candles]
    return sorted(candles, key=lambda c: c.timestamp)


def _is_chronological(data: Sequence[OHLCV]) -> bool:
    return all(
        data[i].timestamp >= data[i - 1].timestamp for i in range(1, len(data))
    )


def validate_ohlcv_data(data: Sequence[OHLCV]) -> bool:
    """Return True if *data* is non-empty, internally consistent and ordered."""
    if not data:
        return False
    if not all(c.is_consistent() for c in data):
        return False
    return _is_chronological(data)


def get_data_quality_score(data: Sequence[OHLCV]) -> float:
    """Score a candle series from 0 to 100.

    - length:      up to 30 points (full marks at 50 candles)
    - consistency: 30 points when every candle brackets open/close
    - volume:      20 points when any candle carries volume
    - ordering:    20 points when timestamps never go backwards
    """
    if not data:
        return 0.0

    score = min(len(data) / 50 * 30, 30.0)
    if all(c.is_consistent() for c in data):
        score += 30
    if any(c.volume > 0 for c in data):
        score += 20
    if _is_chronological(data):
        score += 20
    return min(score, 100.0)
