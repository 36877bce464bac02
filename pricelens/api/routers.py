"""Internal API routers — /intervals and /analysis/* endpoints.

No business logic. Converts request bodies to candles, delegates to the
analysis orchestrator and renders results as JSON.  Non-finite floats
(e.g. an undefined risk:reward ratio) are rendered as ``null`` so the
dashboard can show its fallback label.
"""

import dataclasses
import logging
import math
from enum import Enum
from typing import Any, Optional

from fastapi import APIRouter
from pydantic import BaseModel, Field

from pricelens.analysis.narrative import ArticleData, generate_article
from pricelens.analysis.orchestrator import (
    MIN_ANALYSIS_CANDLES,
    analyze_indicators,
    analyze_price_points,
)
from pricelens.config import Config
from pricelens.market.conversion import (
    convert_candles_to_ohlcv,
    get_data_quality_score,
    validate_ohlcv_data,
)
from pricelens.market.time_intervals import (
    TIME_INTERVALS,
    TimeInterval,
    get_intervals_by_category,
)

logger = logging.getLogger("pricelens.api")
router = APIRouter()

# ── Shared state (set during app startup) ────────────────────────────────

_config: Optional[Config] = None  # Set via configure_routers()


def configure_routers(config: Optional[Config] = None) -> None:
    """Inject the application config (``None`` restores built-in defaults)."""
    global _config  # noqa: PLW0603
    _config = config


def _default_horizon() -> TimeInterval:
    return _config.default_time_horizon if _config else TimeInterval.H1


def _min_candles() -> int:
    return _config.min_analysis_candles if _config else MIN_ANALYSIS_CANDLES


def _volume_bins() -> int:
    return _config.volume_profile_bins if _config else 20


# ── Serialisation ────────────────────────────────────────────────────────


def to_payload(value: Any) -> Any:
    """Convert dataclasses/enums into JSON-safe data; NaN and ±inf become None."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_payload(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {k: to_payload(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_payload(v) for v in value]
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value


# ── Request bodies ───────────────────────────────────────────────────────


class PriceAnalysisRequest(BaseModel):
    candles: list[list[float]] = Field(default_factory=list)
    current_price: float
    time_horizon: Optional[str] = None
    enabled: bool = True


class IndicatorRequest(BaseModel):
    candles: list[list[float]] = Field(default_factory=list)


# ── Endpoints ────────────────────────────────────────────────────────────


@router.get("/intervals")
async def get_intervals():
    """Return supported time horizons with labels and categories."""
    intervals = [
        {
            "interval": interval.value,
            "label": cfg.label,
            "seconds": cfg.seconds,
            "category": cfg.category,
            "use_case": cfg.use_case,
        }
        for interval, cfg in TIME_INTERVALS.items()
    ]
    categories = {
        category: [i.value for i in members]
        for category, members in get_intervals_by_category().items()
    }
    return {
        "intervals": intervals,
        "categories": categories,
        "default": _default_horizon().value,
    }


@router.post("/analysis/price")
async def post_price_analysis(body: PriceAnalysisRequest):
    """Entry points, stop-loss and profit targets for a candle series.

    Guard failures (too few candles, bad price, unknown horizon) return
    ``analysis: null`` with a typed ``error``.
    """
    data = convert_candles_to_ohlcv(body.candles)
    outcome = analyze_price_points(
        data,
        body.current_price,
        body.time_horizon or _default_horizon(),
        enabled=body.enabled,
        min_candles=_min_candles(),
    )
    if outcome.error is not None:
        logger.info("Price analysis rejected: %s", outcome.error.message)
    return {
        "analysis": to_payload(outcome.analysis),
        "error": to_payload(outcome.error),
        "data_quality": get_data_quality_score(data),
    }


@router.post("/analysis/indicators")
async def post_indicator_analysis(body: IndicatorRequest):
    """Indicator snapshot plus advisory data-quality figures."""
    data = convert_candles_to_ohlcv(body.candles)
    snapshot = analyze_indicators(data, volume_bins=_volume_bins())
    return {
        "indicators": to_payload(snapshot),
        "valid": validate_ohlcv_data(data),
        "data_quality": get_data_quality_score(data),
    }


@router.post("/analysis/article")
async def post_article(body: ArticleData):
    """Template commentary for the supplied indicator readings."""
    return to_payload(generate_article(body))
