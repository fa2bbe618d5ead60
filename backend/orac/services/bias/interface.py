"""
Bias Service Interface

Defines the contract for the multi-timeframe bias layer.
"""

from abc import abstractmethod
from typing import Optional

from orac.services.base import BaseService
from orac.schemas.market import SeriesData
from orac.schemas.bias import AggregatedBias, AnalysisRequest, MACDInput, TimeframeScore


class BiasServiceInterface(BaseService[AnalysisRequest, AggregatedBias]):
    """
    Bias Service Contract.

    INPUT: AnalysisRequest
        - symbol: Symbol to analyze
        - timeframes: Ordered timeframe labels

    OUTPUT: AggregatedBias
        - overall_score, grade, bias, confidence
        - timeframes: per-timeframe scores in request order

    Never fails because of a single timeframe; failed timeframes are
    reported under `omitted`.
    """

    @property
    def name(self) -> str:
        return "BiasService"

    @abstractmethod
    async def execute(self, input_data: AnalysisRequest) -> AggregatedBias:
        """Run the analysis described by the request."""
        pass

    @abstractmethod
    async def analyze(self, symbol: str, timeframes: list[str]) -> AggregatedBias:
        """Score each timeframe and aggregate the results."""
        pass

    @abstractmethod
    def score_one(
        self,
        series: SeriesData,
        timeframe: Optional[str] = None,
        macd: Optional[MACDInput] = None,
    ) -> Optional[TimeframeScore]:
        """
        Score a single series.

        Returns:
            TimeframeScore, or None when the series is too short
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        pass
