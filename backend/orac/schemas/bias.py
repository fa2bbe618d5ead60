"""
CONTRACT 2: Bias Engine

Input: SeriesData per timeframe
Output: AggregatedBias

Indicator bundles, per-timeframe scores and the multi-timeframe verdict.
Pure Python/NumPy - all math is deterministic.
"""

from enum import Enum
from typing import Annotated, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field

from orac.schemas.market import Timeframe, resolve_timeframe


# =============================================================================
# ENUMS
# =============================================================================


class Bias(str, Enum):
    BULLISH = "Bullish"
    BEARISH = "Bearish"
    NEUTRAL = "Neutral"


class OmissionReason(str, Enum):
    INSUFFICIENT_DATA = "insufficient_data"
    PROVIDER_FAILURE = "provider_failure"
    COMPUTATION_ERROR = "computation_error"


# =============================================================================
# CONFIGURATION
# =============================================================================


class IndicatorPeriods(BaseModel):
    """Lookback periods feeding the indicator bundle."""

    ema: int = Field(default=50, ge=1)
    rsi: int = Field(default=14, ge=1)
    atr: int = Field(default=14, ge=1)
    supertrend_period: int = Field(default=10, ge=1)
    supertrend_multiplier: float = Field(default=3.0, gt=0)
    adx: int = Field(default=14, ge=1)
    min_bars: int = Field(default=50, ge=2, description="Shortest usable series")
    adx_default: float = Field(
        default=25.0, ge=0, le=100, description="Used when ADX cannot be computed"
    )


class ScoreWeights(BaseModel):
    """Sub-score weights of the timeframe scorer."""

    ema: float = 0.30
    rsi: float = 0.20
    oscillator: float = 0.25
    supertrend: float = 0.25

    # RSI sub-score split
    rsi_level: float = 0.7
    rsi_momentum: float = 0.3
    rsi_momentum_scale: float = 10.0


DEFAULT_GRADES: list[tuple[float, str]] = [
    (80, "A+"),
    (70, "A"),
    (60, "B+"),
    (50, "B"),
    (40, "C+"),
    (30, "C"),
    (20, "D"),
]


class BiasThresholds(BaseModel):
    """Cut-offs turning numbers into categories."""

    bias: float = Field(default=20.0, ge=0, le=100)
    confidence_adx: float = Field(
        default=25.0, gt=0, description="ADX level where confidence starts rising"
    )
    grades: list[tuple[float, str]] = Field(
        default_factory=lambda: list(DEFAULT_GRADES),
        description="(minimum |score|, grade), highest first",
    )
    fallback_grade: str = "F"


class TimeframeWeights(BaseModel):
    """Horizon weights for aggregation."""

    weights: dict[Timeframe, float] = Field(
        default_factory=lambda: {
            Timeframe.M15: 0.5,
            Timeframe.H1: 1.0,
            Timeframe.H4: 1.5,
            Timeframe.D1: 2.0,
            Timeframe.W1: 2.5,
        }
    )
    default: float = 1.0

    def weight_for(self, label: str) -> float:
        """Weight for a timeframe label; aliases resolve, unknown labels get the default."""
        timeframe = resolve_timeframe(label)
        if timeframe is None:
            return self.default
        return self.weights.get(timeframe, self.default)


class BiasConfig(BaseModel):
    """Complete configuration of the bias pipeline."""

    periods: IndicatorPeriods = Field(default_factory=IndicatorPeriods)
    score_weights: ScoreWeights = Field(default_factory=ScoreWeights)
    thresholds: BiasThresholds = Field(default_factory=BiasThresholds)
    timeframe_weights: TimeframeWeights = Field(default_factory=TimeframeWeights)


# =============================================================================
# INDICATOR BUNDLE
# =============================================================================


class IndicatorBundle(BaseModel):
    """Latest indicator readings for one timeframe."""

    model_config = ConfigDict(frozen=True)

    ema: float
    ema_slope: float = Field(..., description="EMA first difference / ATR")
    rsi: float = Field(..., ge=0, le=100)
    rsi_momentum: float = Field(..., description="RSI first difference (raw)")
    macd: float = 0.0
    macd_signal: float = 0.0
    macd_hist: float
    macd_hist_slope: float = Field(..., description="Histogram first difference / ATR")
    supertrend: float
    supertrend_direction: Literal[1, -1]
    adx: float = Field(..., ge=0, le=100)
    atr: float = Field(..., ge=0)


class MACDInput(BaseModel):
    """Externally supplied MACD readings replacing the EMA-distance proxy."""

    macd: float
    signal: float
    histogram: float
    previous_histogram: Optional[float] = None


# =============================================================================
# SCORES
# =============================================================================


class TimeframeScore(BaseModel):
    """Score for a single timeframe."""

    model_config = ConfigDict(frozen=True)

    timeframe: str
    score: float = Field(..., ge=-100, le=100)
    confidence: float = Field(..., ge=0, le=1)
    indicators: IndicatorBundle
    bias: Bias


class ScoredTimeframe(BaseModel):
    """Timeframe that produced a score."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["scored"] = "scored"
    score: TimeframeScore

    @property
    def timeframe(self) -> str:
        return self.score.timeframe


class OmittedTimeframe(BaseModel):
    """Timeframe left out of the aggregate."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["omitted"] = "omitted"
    timeframe: str
    reason: OmissionReason
    detail: str = ""


TimeframeOutcome = Annotated[
    Union[ScoredTimeframe, OmittedTimeframe], Field(discriminator="kind")
]


class AggregatedBias(BaseModel):
    """Multi-timeframe verdict."""

    model_config = ConfigDict(frozen=True)

    symbol: Optional[str] = None
    overall_score: int = Field(..., ge=-100, le=100)
    grade: str
    bias: Bias
    confidence: float = Field(..., ge=0, le=1)
    timeframes: list[TimeframeScore] = Field(default_factory=list)
    omitted: list[OmittedTimeframe] = Field(default_factory=list)


# =============================================================================
# REQUEST
# =============================================================================


class AnalysisRequest(BaseModel):
    """
    Request for a multi-timeframe analysis.
    Sent by: API
    Received by: Bias Service
    """

    symbol: str = Field(..., min_length=1, max_length=32)
    timeframes: Optional[list[str]] = Field(
        default=None,
        description="Timeframe labels in output order (default: settings.default_timeframes)",
    )
