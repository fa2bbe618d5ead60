"""
Indicator Engine Service Implementation

Builds the per-timeframe indicator bundle from OHLCV data.
Pure Python/NumPy calculations.
"""

import logging
import math
from typing import Optional

import numpy as np

from orac.schemas.market import SeriesData
from orac.schemas.bias import IndicatorBundle, IndicatorPeriods, MACDInput
from orac.services.base import InsufficientDataError
from orac.services.indicators.interface import IndicatorServiceInterface
from orac.services.indicators.calculations import (
    adx,
    atr,
    ema,
    ema_distance,
    ema_distance_oscillator,
    last_or,
    normalize_with_atr,
    rsi,
    slope,
    supertrend,
)

logger = logging.getLogger(__name__)


def _ohlc_to_arrays(series: SeriesData) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Convert candles to high/low/close numpy arrays."""
    highs = np.array([c.high for c in series.candles], dtype=float)
    lows = np.array([c.low for c in series.candles], dtype=float)
    closes = np.array([c.close for c in series.candles], dtype=float)
    return highs, lows, closes


def build_indicator_bundle(
    highs: np.ndarray,
    lows: np.ndarray,
    closes: np.ndarray,
    periods: Optional[IndicatorPeriods] = None,
    macd: Optional[MACDInput] = None,
) -> Optional[IndicatorBundle]:
    """
    Compute every indicator and keep the reading at the last bar.

    Returns None when there are fewer than `periods.min_bars` bars or when
    any required indicator has no value yet. ADX alone falls back to
    `periods.adx_default`.

    Raises:
        ValueError: if a computed reading is not finite
    """
    periods = periods or IndicatorPeriods()
    if len(closes) < periods.min_bars:
        return None

    ema_arr = ema(closes, periods.ema)
    rsi_arr = rsi(closes, periods.rsi)
    atr_arr = atr(highs, lows, closes, periods.atr)
    st_levels, st_directions = supertrend(
        highs, lows, closes, periods.supertrend_period, periods.supertrend_multiplier
    )
    adx_arr = adx(highs, lows, closes, periods.adx)

    if not (len(ema_arr) and len(rsi_arr) and len(atr_arr) and len(st_levels)):
        return None

    atr_value = float(atr_arr[-1])
    ema_slope = slope(ema_arr, len(ema_arr) - 1)
    rsi_momentum = slope(rsi_arr, len(rsi_arr) - 1)

    if macd is not None:
        macd_value, macd_signal = macd.macd, macd.signal
        histogram = macd.histogram
        hist_slope = (
            histogram - macd.previous_histogram
            if macd.previous_histogram is not None
            else 0.0
        )
    else:
        # slope of EMA - close, in the same units as ATR
        distance = ema_distance(ema_arr, closes)
        macd_value, macd_signal = 0.0, 0.0
        histogram = float(ema_distance_oscillator(ema_arr, closes)[-1])
        hist_slope = slope(distance, len(distance) - 1)

    readings = {
        "ema": float(ema_arr[-1]),
        "ema_slope": normalize_with_atr(ema_slope, atr_value),
        "rsi": float(rsi_arr[-1]),
        "rsi_momentum": rsi_momentum,
        "macd": macd_value,
        "macd_signal": macd_signal,
        "macd_hist": histogram,
        "macd_hist_slope": normalize_with_atr(hist_slope, atr_value),
        "supertrend": float(st_levels[-1]),
        "adx": last_or(adx_arr, periods.adx_default),
        "atr": atr_value,
    }

    bad = [key for key, value in readings.items() if not math.isfinite(value)]
    if bad:
        raise ValueError(f"Non-finite indicator values: {', '.join(bad)}")

    return IndicatorBundle(
        supertrend_direction=int(st_directions[-1]),
        **readings,
    )


class IndicatorService(IndicatorServiceInterface):
    """
    Indicator Engine Service.

    Builds indicator bundles for scoring.
    All calculations are deterministic and reproducible.
    """

    def __init__(self, periods: Optional[IndicatorPeriods] = None):
        self.periods = periods or IndicatorPeriods()

    @property
    def name(self) -> str:
        return "IndicatorService"

    async def execute(self, input_data: SeriesData) -> IndicatorBundle:
        """
        Build the indicator bundle for a series.

        Raises:
            InsufficientDataError: if the series is too short
        """
        bundle = self.build_bundle(input_data)
        if bundle is None:
            raise InsufficientDataError(
                self.name, self.periods.min_bars, len(input_data.candles)
            )
        return bundle

    def build_bundle(
        self,
        series: SeriesData,
        macd: Optional[MACDInput] = None,
    ) -> Optional[IndicatorBundle]:
        """Build the indicator bundle synchronously."""
        highs, lows, closes = _ohlc_to_arrays(series)
        bundle = build_indicator_bundle(highs, lows, closes, self.periods, macd)
        if bundle is None:
            logger.info(
                f"Not enough history for {series.symbol} {series.timeframe.value}: "
                f"{len(closes)} bars (need {self.periods.min_bars})"
            )
        return bundle

    async def health_check(self) -> bool:
        """Indicator service is always healthy (pure computation)."""
        return True


# Singleton instance
_service_instance: Optional[IndicatorService] = None


def get_indicator_service() -> IndicatorService:
    """Get or create indicator service instance."""
    global _service_instance
    if _service_instance is None:
        _service_instance = IndicatorService()
    return _service_instance
