"""
Indicator Engine Service

CONTRACT:
    Input:  SeriesData (OHLCV for one timeframe)
    Output: IndicatorBundle

RESPONSIBILITIES:
    - EMA, RSI, ATR, Supertrend, ADX
    - ATR-normalized slopes of EMA and the oscillator histogram
    - Refuse series shorter than the configured minimum

Uses NumPy for calculations.
All math is deterministic and reproducible.
"""

from orac.services.indicators.interface import IndicatorServiceInterface
from orac.services.indicators.service import (
    IndicatorService,
    build_indicator_bundle,
    get_indicator_service,
)

__all__ = [
    "IndicatorServiceInterface",
    "IndicatorService",
    "build_indicator_bundle",
    "get_indicator_service",
]
