"""Pytest configuration and fixtures."""
import asyncio
from datetime import datetime, timedelta
from typing import Optional, Union

import numpy as np
import pytest

from orac.schemas.market import OHLCV, SeriesData, Timeframe
from orac.services.base import ProviderError
from orac.services.cache.redis_client import SeriesCache
from orac.services.data_ingestion.interface import SeriesProviderInterface
from orac.services.data_ingestion.service import DataIngestionService


def make_series(
    closes,
    highs=None,
    lows=None,
    timeframe: Timeframe = Timeframe.D1,
    symbol: str = "TEST",
    spread: float = 0.5,
) -> SeriesData:
    """Build a SeriesData from closes; highs/lows default to close +/- spread."""
    closes = [float(c) for c in closes]
    highs = [c + spread for c in closes] if highs is None else list(highs)
    lows = [c - spread for c in closes] if lows is None else list(lows)
    start = datetime(2024, 1, 1)
    candles = [
        OHLCV(
            timestamp=start + timedelta(days=i),
            open=c,
            high=h,
            low=l,
            close=c,
            volume=1_000,
        )
        for i, (c, h, l) in enumerate(zip(closes, highs, lows))
    ]
    return SeriesData(symbol=symbol, timeframe=timeframe, candles=candles, source="test")


def random_walk(n: int, seed: int = 7, start: float = 100.0):
    """Random OHLC arrays with high >= close >= low."""
    rng = np.random.default_rng(seed)
    closes = start + np.cumsum(rng.normal(0, 1.0, n))
    closes = np.maximum(closes, 5.0)
    highs = closes + rng.uniform(0.1, 1.5, n)
    lows = closes - rng.uniform(0.1, 1.5, n)
    return highs, lows, closes


class FakeProvider(SeriesProviderInterface):
    """Provider serving canned series (or raising canned errors) per timeframe."""

    def __init__(
        self,
        responses: dict[Timeframe, Union[SeriesData, Exception]],
        delays: Optional[dict[Timeframe, float]] = None,
    ):
        self.responses = responses
        self.delays = delays or {}
        self.calls: list[tuple[str, Timeframe]] = []

    @property
    def name(self) -> str:
        return "fake"

    async def fetch_series(self, symbol: str, timeframe: Timeframe) -> SeriesData:
        self.calls.append((symbol, timeframe))
        if timeframe in self.delays:
            await asyncio.sleep(self.delays[timeframe])
        response = self.responses.get(timeframe)
        if response is None:
            raise ProviderError("fake", f"No data for {timeframe.value}")
        if isinstance(response, Exception):
            raise response
        return response.model_copy(update={"symbol": symbol, "timeframe": timeframe})


def make_data_service(provider: SeriesProviderInterface, ttl_seconds: int = 0) -> DataIngestionService:
    return DataIngestionService(
        provider=provider,
        cache=SeriesCache(ttl_seconds=ttl_seconds),
        use_mock_fallback=False,
    )


@pytest.fixture
def rising_series():
    """60 bars rising by 1.0 per bar with a tight symmetric range."""
    return make_series(100 + np.arange(60))


@pytest.fixture
def falling_series():
    """60 bars falling by 1.0 per bar with a tight symmetric range."""
    return make_series(200 - np.arange(60))


@pytest.fixture
def short_series():
    """Fewer bars than the indicator bundle needs."""
    return make_series(100 + np.arange(30))


@pytest.fixture
def ohlc_walk():
    return random_walk(300)
