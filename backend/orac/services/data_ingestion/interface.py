"""
Data Ingestion Service Interface

Defines the contract for the data ingestion layer.
"""

from abc import ABC, abstractmethod

from orac.services.base import BaseService
from orac.schemas.market import OHLCV, SeriesData, SeriesRequest, Timeframe


class SeriesProviderInterface(ABC):
    """
    Market data provider contract.

    fetch_series returns candles in chronological order or raises
    ProviderError. It never returns an empty series.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name for cache keys and logging."""
        pass

    @abstractmethod
    async def fetch_series(self, symbol: str, timeframe: Timeframe) -> SeriesData:
        """Fetch the OHLCV series for a symbol and timeframe."""
        pass

    async def health_check(self) -> bool:
        return True


class DataIngestionServiceInterface(BaseService[SeriesRequest, SeriesData]):
    """
    Data Ingestion Service Contract.

    INPUT: SeriesRequest
        - symbol: Symbol to fetch
        - timeframe: Timeframe label (canonical or alias)

    OUTPUT: SeriesData
        - Chronologically ordered candles

    Raises ProviderError when no usable series can be obtained.
    """

    @property
    def name(self) -> str:
        return "DataIngestionService"

    @abstractmethod
    async def execute(self, input_data: SeriesRequest) -> SeriesData:
        """Fetch a series."""
        pass

    @abstractmethod
    async def fetch_series(self, symbol: str, timeframe: str) -> SeriesData:
        """Fetch a series by symbol and timeframe label."""
        pass

    @abstractmethod
    async def get_chart_data(
        self, symbol: str, timeframe: str, limit: int
    ) -> list[OHLCV]:
        """Most recent candles for charting."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check connectivity to the data provider."""
        pass
