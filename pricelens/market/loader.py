"""Candle files on disk → raw candle tuples for the converter.

Supports the shapes the dashboard saves from price APIs:

- ``.csv`` with ``timestamp,open,high,low,close,volume`` columns, or a
  price-only ``timestamp,price`` file.
- ``.json`` holding either a list of tuples or a market-chart object
  ``{"prices": [[ts, price], ...]}``.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pandas as pd

logger = logging.getLogger("pricelens.market.loader")

OHLCV_COLUMNS = ["timestamp", "open", "high", "low", "close", "volume"]
PRICE_COLUMNS = ["timestamp", "price"]


def _frame_to_tuples(df: pd.DataFrame) -> list[list[float]]:
    """Pick the known column layout out of *df* and return row tuples."""
    df = df.rename(columns=lambda c: str(c).strip().lower())
    if set(OHLCV_COLUMNS).issubset(df.columns):
        cols = OHLCV_COLUMNS
    elif set(PRICE_COLUMNS).issubset(df.columns):
        cols = PRICE_COLUMNS
    else:
        raise ValueError(
            f"Unrecognised candle columns: {', '.join(map(str, df.columns))}"
        )

    df = df[cols].dropna().copy()
    if not pd.api.types.is_numeric_dtype(df["timestamp"]):
        # ISO timestamps → ms epoch
        ts = pd.to_datetime(df["timestamp"], utc=True)
        epoch = pd.Timestamp("1970-01-01", tz="UTC")
        df["timestamp"] = (ts - epoch) // pd.Timedelta(milliseconds=1)
    return df.astype(float).values.tolist()


def load_raw_candles(path: str | Path) -> list[list[float]]:
    """Read a candle file into a list of numeric tuples.

    Raises ``ValueError`` for unsupported file types or column layouts.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".csv":
        rows = _frame_to_tuples(pd.read_csv(path))
    elif suffix == ".json":
        payload = json.loads(path.read_text(encoding="utf-8"))
        if isinstance(payload, dict):
            # Market-chart response: {"prices": [[ts, price], ...], ...}
            payload = payload.get("prices", [])
        if not isinstance(payload, list):
            raise ValueError(f"Expected a list of candles in {path.name}")
        rows = [[float(v) for v in row] for row in payload]
    else:
        raise ValueError(f"Unsupported candle file type: '{suffix or path.name}'")

    logger.debug("Loaded %d raw candles from %s", len(rows), path)
    return rows
