"""Time-horizon tokens and their display metadata."""

from dataclasses import dataclass
from enum import Enum
from typing import Union


class TimeInterval(str, Enum):
    """Supported chart/analysis horizons."""

    M5 = "5m"
    M15 = "15m"
    M30 = "30m"
    H1 = "1h"
    H4 = "4h"
    D1 = "1d"
    W1 = "1w"


SHORT_TERM = "Short-term"
MEDIUM_TERM = "Medium-term"
LONG_TERM = "Long-term"


@dataclass(frozen=True)
class TimeIntervalConfig:
    """Display label, candle granularity and bucket for one horizon."""

    label: str
    seconds: int
    category: str  # SHORT_TERM, MEDIUM_TERM or LONG_TERM
    use_case: str


TIME_INTERVALS: dict[TimeInterval, TimeIntervalConfig] = {
    TimeInterval.M5: TimeIntervalConfig(
        "5 Minutes", 300, SHORT_TERM, "Scalping, ultra-short-term"
    ),
    TimeInterval.M15: TimeIntervalConfig(
        "15 Minutes", 900, SHORT_TERM, "Scalping, short-term trades"
    ),
    TimeInterval.M30: TimeIntervalConfig(
        "30 Minutes", 1800, MEDIUM_TERM, "Swing trading, intraday"
    ),
    TimeInterval.H1: TimeIntervalConfig(
        "1 Hour", 3600, MEDIUM_TERM, "Swing trading, intraday"
    ),
    TimeInterval.H4: TimeIntervalConfig(
        "4 Hours", 14400, MEDIUM_TERM, "Swing trading, daily analysis"
    ),
    TimeInterval.D1: TimeIntervalConfig(
        "1 Day", 86400, LONG_TERM, "Position trading, investing"
    ),
    TimeInterval.W1: TimeIntervalConfig(
        "1 Week", 604800, LONG_TERM, "Position trading, long-term investing"
    ),
}


def parse_time_interval(value: Union[str, TimeInterval]) -> TimeInterval:
    """Coerce a token such as ``"1h"`` into a ``TimeInterval``.

    Raises ``ValueError`` for unknown tokens.
    """
    try:
        return TimeInterval(value)
    except ValueError:
        raise ValueError(f"Unsupported time interval: {value}") from None


def get_time_interval_config(interval: Union[str, TimeInterval]) -> TimeIntervalConfig:
    return TIME_INTERVALS[parse_time_interval(interval)]


def format_time_interval(interval: Union[str, TimeInterval]) -> str:
    return get_time_interval_config(interval).label


def get_granularity_from_interval(interval: Union[str, TimeInterval]) -> int:
    """Candle granularity in seconds."""
    return get_time_interval_config(interval).seconds


def get_intervals_by_category() -> dict[str, list[TimeInterval]]:
    """Group the horizons by category, preserving declaration order."""
    categories: dict[str, list[TimeInterval]] = {
        SHORT_TERM: [],
        MEDIUM_TERM: [],
        LONG_TERM: [],
    }
    for interval, config in TIME_INTERVALS.items():
        categories[config.category].append(interval)
    return categories
