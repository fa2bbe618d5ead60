"""
Mock Data Generator

Generates synthetic market data for development and as a provider fallback.
Series are seeded from symbol and timeframe, so repeated calls agree.
"""

import random
import zlib
from datetime import datetime, timedelta
from typing import Optional

from orac.schemas.market import OHLCV, SeriesData, Timeframe
from orac.services.data_ingestion.interface import SeriesProviderInterface

PROVIDER_NAME = "mock"

# Base prices for common symbols
SYMBOL_BASE_PRICES = {
    "IBM": 185.0,
    "AAPL": 190.0,
    "GOOGL": 140.0,
    "MSFT": 410.0,
    "TSLA": 240.0,
    "AMZN": 175.0,
    "META": 480.0,
    "NVDA": 880.0,
}

TIMEFRAME_DELTA = {
    Timeframe.M15: timedelta(minutes=15),
    Timeframe.H1: timedelta(hours=1),
    Timeframe.H4: timedelta(hours=4),
    Timeframe.D1: timedelta(days=1),
    Timeframe.W1: timedelta(weeks=1),
}


def _seed(symbol: str, timeframe: Timeframe) -> int:
    return zlib.crc32(f"{symbol.upper()}:{timeframe.value}".encode())


def get_base_price(symbol: str, rng: random.Random) -> float:
    """Get base price for a symbol."""
    return SYMBOL_BASE_PRICES.get(symbol.upper(), 100.0 + rng.random() * 400)


def generate_mock_ohlcv(
    symbol: str,
    timeframe: Timeframe,
    lookback: int = 300,
    end_time: Optional[datetime] = None,
    seed: Optional[int] = None,
) -> list[OHLCV]:
    """Generate a random-walk candle series ending at `end_time`."""
    rng = random.Random(_seed(symbol, timeframe) if seed is None else seed)
    if end_time is None:
        end_time = datetime.now().replace(second=0, microsecond=0)

    step = TIMEFRAME_DELTA[timeframe]
    price = get_base_price(symbol, rng)
    volatility = price * 0.01

    candles = []
    timestamp = end_time - step * lookback
    for _ in range(lookback):
        timestamp += step
        change = (rng.random() - 0.5) * volatility
        open_price = price
        # Never let the walk reach zero
        close_price = max(open_price + change, price * 0.5)
        high_price = max(open_price, close_price) + rng.random() * volatility * 0.5
        low_price = min(open_price, close_price) - rng.random() * volatility * 0.5

        candles.append(
            OHLCV(
                timestamp=timestamp,
                open=round(open_price, 2),
                high=round(high_price, 2),
                low=round(max(low_price, 0.01), 2),
                close=round(close_price, 2),
                volume=rng.randint(100_000, 5_000_000),
            )
        )
        price = close_price

    return candles


def generate_mock_series(
    symbol: str,
    timeframe: Timeframe,
    lookback: int = 300,
    end_time: Optional[datetime] = None,
) -> SeriesData:
    return SeriesData(
        symbol=symbol.upper(),
        timeframe=timeframe,
        candles=generate_mock_ohlcv(symbol, timeframe, lookback, end_time),
        source="Mock",
    )


class MockDataProvider(SeriesProviderInterface):
    """Synthetic series provider."""

    def __init__(self, lookback: int = 300):
        self.lookback = lookback

    @property
    def name(self) -> str:
        return PROVIDER_NAME

    async def fetch_series(self, symbol: str, timeframe: Timeframe) -> SeriesData:
        return generate_mock_series(symbol, timeframe, self.lookback)
