"""
Data Ingestion Service Implementation

Fetches raw OHLCV series for the bias engine.
Primary: configured provider (Twelve Data or Yahoo Finance)
Fallback: Mock data (only if enabled and the provider fails)
"""

import logging
from typing import Optional

from orac.core.config import settings
from orac.schemas.market import OHLCV, SeriesData, SeriesRequest, resolve_timeframe
from orac.services.base import ProviderError
from orac.services.cache.redis_client import SeriesCache, get_series_cache
from orac.services.data_ingestion.interface import (
    DataIngestionServiceInterface,
    SeriesProviderInterface,
)
from orac.services.data_ingestion.mock_data import MockDataProvider
from orac.services.data_ingestion.twelve_data_adapter import TwelveDataAdapter
from orac.services.data_ingestion.yahoo_adapter import YahooAdapter

logger = logging.getLogger(__name__)


def create_provider(name: str) -> SeriesProviderInterface:
    """Build the provider named in settings."""
    providers = {
        "twelve_data": TwelveDataAdapter,
        "yahoo": YahooAdapter,
        "mock": MockDataProvider,
    }
    if name not in providers:
        raise ValueError(f"Unknown data provider: {name}")
    return providers[name]()


class DataIngestionService(DataIngestionServiceInterface):
    """
    Data Ingestion Service.

    Serves series from the cache when fresh, otherwise from the provider.
    Falls back to mock data only if configured and the provider fails.
    """

    def __init__(
        self,
        provider: Optional[SeriesProviderInterface] = None,
        cache: Optional[SeriesCache] = None,
        fallback: Optional[SeriesProviderInterface] = None,
        use_mock_fallback: Optional[bool] = None,
    ):
        self.provider = provider or create_provider(settings.data_provider)
        self.cache = cache if cache is not None else get_series_cache()
        if use_mock_fallback is None:
            use_mock_fallback = settings.enable_mock_fallback
        if fallback is None and use_mock_fallback and self.provider.name != "mock":
            fallback = MockDataProvider()
        self.fallback = fallback

    @property
    def name(self) -> str:
        return "DataIngestionService"

    async def execute(self, input_data: SeriesRequest) -> SeriesData:
        """Fetch a series."""
        return await self.fetch_series(input_data.symbol, input_data.timeframe)

    async def fetch_series(self, symbol: str, timeframe: str) -> SeriesData:
        """
        Fetch a series by symbol and timeframe label.

        Raises:
            ProviderError: unsupported timeframe, or provider (and fallback) failed
        """
        resolved = resolve_timeframe(timeframe)
        if resolved is None:
            raise ProviderError(self.name, f"Unsupported timeframe: {timeframe}")
        symbol = symbol.upper().strip()

        cached = await self.cache.get_series(self.provider.name, symbol, resolved.value)
        if cached is not None:
            logger.debug(f"Cache hit for {symbol} {resolved.value}")
            return cached

        try:
            series = await self.provider.fetch_series(symbol, resolved)
        except Exception as e:
            # timeouts and client errors can escape a provider unwrapped
            if self.fallback is None:
                raise
            logger.warning(f"{e!r}. Using {self.fallback.name} data for {symbol} {resolved.value}")
            return await self.fallback.fetch_series(symbol, resolved)

        await self.cache.set_series(self.provider.name, series)
        logger.info(f"Got {len(series.candles)} candles for {symbol} {resolved.value} from {series.source}")
        return series

    async def get_chart_data(
        self, symbol: str, timeframe: str, limit: Optional[int] = None
    ) -> list[OHLCV]:
        """Most recent candles for charting."""
        limit = limit or settings.chart_candles
        series = await self.fetch_series(symbol, timeframe)
        return series.candles[-limit:]

    async def health_check(self) -> bool:
        """Check connectivity to the data provider."""
        return await self.provider.health_check()


# Singleton instance
_service_instance: Optional[DataIngestionService] = None


def get_data_ingestion_service() -> DataIngestionService:
    """Get or create data ingestion service instance."""
    global _service_instance
    if _service_instance is None:
        _service_instance = DataIngestionService()
    return _service_instance
