"""
Indicator Engine Service Interface

Defines the contract for the indicator calculation layer.
"""

from abc import abstractmethod
from typing import Optional

from orac.services.base import BaseService
from orac.schemas.market import SeriesData
from orac.schemas.bias import IndicatorBundle, MACDInput


class IndicatorServiceInterface(BaseService[SeriesData, IndicatorBundle]):
    """
    Indicator Engine Service Contract.

    INPUT: SeriesData
        - candles: chronologically ordered OHLCV for one timeframe

    OUTPUT: IndicatorBundle
        - Readings at the last bar

    execute raises InsufficientDataError for a series too short for the
    full indicator set; build_bundle returns None instead.
    """

    @property
    def name(self) -> str:
        return "IndicatorService"

    @abstractmethod
    async def execute(self, input_data: SeriesData) -> IndicatorBundle:
        """Build the indicator bundle for a series."""
        pass

    @abstractmethod
    def build_bundle(
        self,
        series: SeriesData,
        macd: Optional[MACDInput] = None,
    ) -> Optional[IndicatorBundle]:
        """
        Build the indicator bundle synchronously.

        Args:
            series: OHLCV series for one timeframe
            macd: Real MACD readings; the EMA-distance proxy is used when absent

        Returns:
            IndicatorBundle, or None if the series is too short
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Indicator service is always healthy (pure computation)."""
        pass
