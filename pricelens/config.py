"""PriceLens — application configuration.

Loads .env variables into a typed config object.
Validates values on startup.
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from pricelens.market.time_intervals import TimeInterval, parse_time_interval


@dataclass(frozen=True)
class Config:
    """Typed configuration loaded from environment variables."""

    log_level: str
    api_host: str
    api_port: int
    default_time_horizon: TimeInterval
    min_analysis_candles: int
    volume_profile_bins: int


def _int_var(name: str, default: str, minimum: int) -> int:
    raw = os.environ.get(name, default)
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got '{raw}'") from None
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}, got {value}")
    return value


def load_config(env_path: str | None = None) -> Config:
    """Load configuration from environment variables.

    Raises ``ValueError`` with a message naming the offending variable
    when a value cannot be used.
    """
    load_dotenv(dotenv_path=env_path)

    horizon = os.environ.get("DEFAULT_TIME_HORIZON", "1h")
    try:
        default_time_horizon = parse_time_interval(horizon)
    except ValueError:
        raise ValueError(
            f"DEFAULT_TIME_HORIZON must be one of "
            f"{', '.join(i.value for i in TimeInterval)}, got '{horizon}'"
        ) from None

    return Config(
        log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        api_host=os.environ.get("API_HOST", "127.0.0.1"),
        api_port=_int_var("API_PORT", "8080", 1),
        default_time_horizon=default_time_horizon,
        min_analysis_candles=_int_var("MIN_ANALYSIS_CANDLES", "5", 1),
        volume_profile_bins=_int_var("VOLUME_PROFILE_BINS", "20", 1),
    )
