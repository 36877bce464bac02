"""Analysis data models — trading levels, the combined report and its outcome."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from pricelens.market.time_intervals import TimeInterval


@dataclass(frozen=True)
class SupportResistance:
    """Support (descending) and resistance (ascending), at most 5 each."""

    support: list[float]
    resistance: list[float]


@dataclass(frozen=True)
class EntryMethods:
    conservative: str
    moderate: str
    aggressive: str


@dataclass(frozen=True)
class EntryPoints:
    """Three candidate entry prices, from most to least patient."""

    conservative: float
    moderate: float
    aggressive: float
    methods: EntryMethods


@dataclass(frozen=True)
class StopLoss:
    price: float
    percentage: float  # distance below entry, in percent
    method: str  # "percentage", "atr" or "support"
    explanation: str


@dataclass(frozen=True)
class TargetMethods:
    target1: str
    target2: str
    target3: str


@dataclass(frozen=True)
class ProfitTargets:
    """Ascending profit targets.  ``risk_reward_ratio`` may be NaN."""

    target1: float
    target2: float
    target3: float
    risk_reward_ratio: float
    methods: TargetMethods


@dataclass(frozen=True)
class PriceAnalysis:
    entry_points: EntryPoints
    stop_loss: StopLoss
    profit_targets: ProfitTargets
    time_horizon: TimeInterval
    risk_assessment: str
    confidence: float  # 0..1


# ── Outcome / errors ─────────────────────────────────────────────────────


class AnalysisErrorKind(str, Enum):
    INSUFFICIENT_DATA = "insufficient_data"
    INVALID_PRICE = "invalid_price"
    INVALID_TIME_HORIZON = "invalid_time_horizon"
    ANALYSIS_FAILED = "analysis_failed"


class AnalysisInputError(ValueError):
    """Raised by the input guards; carries the error kind for the caller."""

    def __init__(self, kind: AnalysisErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind


@dataclass(frozen=True)
class AnalysisError:
    kind: AnalysisErrorKind
    message: str


@dataclass(frozen=True)
class AnalysisOutcome:
    """Result of one ``analyze_price_points`` call.

    Exactly one of ``analysis`` / ``error`` is set, except when analysis
    was disabled — then both are ``None``.
    """

    analysis: Optional[PriceAnalysis] = None
    error: Optional[AnalysisError] = None

    @property
    def ok(self) -> bool:
        return self.analysis is not None
