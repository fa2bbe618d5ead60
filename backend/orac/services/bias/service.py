"""
Bias Service Implementation

Multi-timeframe analysis: fetch each timeframe's series concurrently,
build indicator bundles, score them, and aggregate the scores.
"""

import asyncio
import logging
from typing import Optional

from orac.core.config import settings
from orac.schemas.market import SeriesData
from orac.schemas.bias import (
    AggregatedBias,
    AnalysisRequest,
    BiasConfig,
    MACDInput,
    OmissionReason,
    OmittedTimeframe,
    ScoredTimeframe,
    TimeframeOutcome,
    TimeframeScore,
)
from orac.services.base import ProviderError, ValidationError
from orac.services.bias.interface import BiasServiceInterface
from orac.services.bias.scoring import aggregate, score_bundle
from orac.services.data_ingestion.interface import DataIngestionServiceInterface
from orac.services.data_ingestion.service import get_data_ingestion_service
from orac.services.indicators.service import IndicatorService

logger = logging.getLogger(__name__)


class BiasService(BiasServiceInterface):
    """
    Bias Service.

    Timeframes are evaluated independently; a timeframe that cannot be
    fetched or scored is omitted from the aggregate instead of failing
    the request.
    """

    def __init__(
        self,
        data_service: Optional[DataIngestionServiceInterface] = None,
        config: Optional[BiasConfig] = None,
        max_concurrency: Optional[int] = None,
    ):
        self.config = config or BiasConfig()
        self.data_service = data_service or get_data_ingestion_service()
        self.indicator_service = IndicatorService(self.config.periods)
        self.max_concurrency = max_concurrency or settings.max_concurrent_fetches

    @property
    def name(self) -> str:
        return "BiasService"

    async def execute(self, input_data: AnalysisRequest) -> AggregatedBias:
        """
        Run the analysis described by the request.

        Raises:
            ValidationError: if the symbol is blank
        """
        symbol = input_data.symbol.upper().strip()
        if not symbol:
            raise ValidationError(self.name, "Symbol is required")
        timeframes = input_data.timeframes or list(settings.default_timeframes)
        return await self.analyze(symbol, timeframes)

    async def analyze(self, symbol: str, timeframes: list[str]) -> AggregatedBias:
        """Score each timeframe and aggregate the results in request order."""
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def bounded(timeframe: str) -> TimeframeOutcome:
            async with semaphore:
                return await self.evaluate_timeframe(symbol, timeframe)

        outcomes = await asyncio.gather(*(bounded(tf) for tf in timeframes))
        result = aggregate(outcomes, self.config, symbol)

        logger.info(
            f"Analysis for {symbol}: score={result.overall_score} grade={result.grade} "
            f"bias={result.bias.value} ({len(result.timeframes)}/{len(timeframes)} timeframes)"
        )
        return result

    async def evaluate_timeframe(self, symbol: str, timeframe: str) -> TimeframeOutcome:
        """Fetch and score one timeframe, tagging the outcome."""
        try:
            series = await self.data_service.fetch_series(symbol, timeframe)
        except Exception as e:
            error = e if isinstance(e, ProviderError) else ProviderError(
                self.name, f"Fetch failed: {e!r}"
            )
            logger.warning(f"Skipping {symbol} {timeframe}: {error}")
            return OmittedTimeframe(
                timeframe=timeframe,
                reason=OmissionReason.PROVIDER_FAILURE,
                detail=str(error),
            )

        try:
            score = self.score_one(series, timeframe)
        except Exception as e:
            logger.error(f"Error scoring {symbol} {timeframe}: {e}")
            return OmittedTimeframe(
                timeframe=timeframe,
                reason=OmissionReason.COMPUTATION_ERROR,
                detail=str(e),
            )

        if score is None:
            return OmittedTimeframe(
                timeframe=timeframe,
                reason=OmissionReason.INSUFFICIENT_DATA,
                detail=f"{len(series.candles)} bars, need {self.config.periods.min_bars}",
            )
        return ScoredTimeframe(score=score)

    def score_one(
        self,
        series: SeriesData,
        timeframe: Optional[str] = None,
        macd: Optional[MACDInput] = None,
    ) -> Optional[TimeframeScore]:
        """Score a single series; None when the series is too short."""
        bundle = self.indicator_service.build_bundle(series, macd)
        if bundle is None:
            return None
        return score_bundle(bundle, timeframe or series.timeframe.value, self.config)

    async def health_check(self) -> bool:
        return await self.data_service.health_check()


# Singleton instance
_service_instance: Optional[BiasService] = None


def get_bias_service() -> BiasService:
    """Get or create bias service instance."""
    global _service_instance
    if _service_instance is None:
        _service_instance = BiasService()
    return _service_instance
