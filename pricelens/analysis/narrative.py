"""Template market commentary built from an indicator snapshot."""

from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel, Field

from pricelens.indicators.models import IndicatorSnapshot


class MACDData(BaseModel):
    macd: float
    signal: float
    histogram: float


class ArticleData(BaseModel):
    """Validated inputs for ``generate_article``."""

    price: Optional[float] = Field(default=None, gt=0)
    rsi: Optional[float] = Field(default=None, ge=0, le=100)
    ema12: Optional[float] = Field(default=None, gt=0)
    ema26: Optional[float] = Field(default=None, gt=0)
    macd: Optional[MACDData] = None
    crypto_name: Optional[str] = None


@dataclass(frozen=True)
class ArticleResult:
    text: str
    confidence: int  # 0..100


def article_data_from_snapshot(
    snapshot: IndicatorSnapshot,
    price: Optional[float],
    crypto_name: Optional[str] = None,
) -> ArticleData:
    macd = None
    if snapshot.macd is not None and snapshot.macd.signal is not None:
        macd = MACDData(
            macd=snapshot.macd.macd,
            signal=snapshot.macd.signal,
            histogram=snapshot.macd.histogram,
        )
    return ArticleData(
        price=price,
        rsi=snapshot.rsi,
        ema12=snapshot.ema12,
        ema26=snapshot.ema26,
        macd=macd,
        crypto_name=crypto_name,
    )


def generate_article(data: ArticleData) -> ArticleResult:
    """Write a short commentary and a 0–100 confidence score.

    Starts at 50; an extreme RSI adds 10, EMA alignment and MACD
    histogram sign move it by 15 each way.
    """
    if not data.price:
        return ArticleResult(text="Data unavailable. Please try again later.", confidence=0)

    name = data.crypto_name or "Bitcoin"
    parts = [f"{name} is currently trading at ${data.price:,.2f}."]
    confidence = 50

    if data.rsi:
        if data.rsi > 70:
            parts.append(
                "The RSI indicates overbought conditions, suggesting a potential sell signal."
            )
            confidence += 10
        elif data.rsi < 30:
            parts.append(
                "The RSI indicates oversold conditions, suggesting a potential buy signal."
            )
            confidence += 10
        else:
            parts.append("The RSI is in a neutral range.")

    if data.ema12 and data.ema26:
        if data.ema12 > data.ema26:
            parts.append(
                "The short-term EMA is above the long-term EMA, indicating bullish momentum."
            )
            confidence += 15
        else:
            parts.append(
                "The short-term EMA is below the long-term EMA, indicating bearish momentum."
            )
            confidence -= 15

    if data.macd is not None:
        if data.macd.histogram > 0:
            parts.append("The MACD histogram is positive, supporting upward momentum.")
            confidence += 15
        else:
            parts.append("The MACD histogram is negative, suggesting downward pressure.")
            confidence -= 15

    parts.append(
        "Consider stop loss at 5% below current price for risk management. "
        "Bid and sell based on market conditions."
    )

    return ArticleResult(text=" ".join(parts), confidence=max(0, min(100, confidence)))
