"""Tests for pricelens.analysis.narrative — template commentary."""

import pytest
from pydantic import ValidationError

from pricelens.analysis.narrative import (
    ArticleData,
    MACDData,
    article_data_from_snapshot,
    generate_article,
)
from pricelens.analysis.orchestrator import analyze_indicators
from pricelens.market.models import OHLCV


class TestGenerateArticle:
    def test_missing_price(self):
        result = generate_article(ArticleData(rsi=55))
        assert result.text == "Data unavailable. Please try again later."
        assert result.confidence == 0

    def test_price_only(self):
        result = generate_article(ArticleData(price=64250.5))
        assert result.text.startswith("Bitcoin is currently trading at $64,250.50.")
        assert result.confidence == 50

    def test_bullish_alignment(self):
        data = ArticleData(
            price=100,
            rsi=75,
            ema12=101,
            ema26=99,
            macd=MACDData(macd=1.2, signal=0.8, histogram=0.4),
            crypto_name="Ethereum",
        )
        result = generate_article(data)
        assert result.text.startswith("Ethereum is currently trading at $100.00.")
        assert "overbought" in result.text
        assert "bullish momentum" in result.text
        assert result.confidence == 90  # 50 + 10 + 15 + 15

    def test_bearish_alignment(self):
        data = ArticleData(
            price=100,
            rsi=50,
            ema12=98,
            ema26=99,
            macd=MACDData(macd=-1.0, signal=-0.5, histogram=-0.5),
        )
        result = generate_article(data)
        assert "neutral range" in result.text
        assert result.confidence == 20  # 50 - 15 - 15

    def test_confidence_bounded(self):
        data = ArticleData(price=1, rsi=20, ema12=2, ema26=1,
                           macd=MACDData(macd=1, signal=0, histogram=1))
        assert 0 <= generate_article(data).confidence <= 100

    @pytest.mark.parametrize(
        "field, value",
        [("price", -1), ("rsi", 150), ("ema12", 0)],
    )
    def test_validation(self, field, value):
        with pytest.raises(ValidationError):
            ArticleData(**{field: value})


class TestArticleFromSnapshot:
    def test_short_series_has_no_macd(self):
        data = [OHLCV(i, 10, 11, 9, 10, 1) for i in range(20)]
        article = article_data_from_snapshot(analyze_indicators(data), 10.0)
        assert article.macd is None
        assert article.ema26 is None
        assert article.ema12 == pytest.approx(10)

    def test_full_series(self):
        data = [OHLCV(i, 100 + i, 101 + i, 99 + i, 100 + i, 1) for i in range(60)]
        article = article_data_from_snapshot(analyze_indicators(data), 159.0, "Solana")
        assert article.macd is not None
        assert article.crypto_name == "Solana"
        assert generate_article(article).text.startswith("Solana is currently trading at $159.00.")
