"""
ORAC Schema Contracts

This module defines all JSON contracts between system components.
These are the authoritative interfaces - all modules must conform to these schemas.
"""

from orac.schemas.market import (
    Timeframe,
    OHLCV,
    SeriesData,
    SeriesRequest,
    SymbolMatch,
    resolve_timeframe,
)
from orac.schemas.bias import (
    AggregatedBias,
    AnalysisRequest,
    Bias,
    BiasConfig,
    IndicatorBundle,
    IndicatorPeriods,
    MACDInput,
    OmissionReason,
    OmittedTimeframe,
    ScoredTimeframe,
    ScoreWeights,
    TimeframeOutcome,
    TimeframeScore,
    TimeframeWeights,
)

__all__ = [
    # Market
    "Timeframe",
    "OHLCV",
    "SeriesData",
    "SeriesRequest",
    "SymbolMatch",
    "resolve_timeframe",
    # Bias
    "AggregatedBias",
    "AnalysisRequest",
    "Bias",
    "BiasConfig",
    "IndicatorBundle",
    "IndicatorPeriods",
    "MACDInput",
    "OmissionReason",
    "OmittedTimeframe",
    "ScoredTimeframe",
    "ScoreWeights",
    "TimeframeOutcome",
    "TimeframeScore",
    "TimeframeWeights",
]
