"""
Yahoo Finance Data Adapter

Fetches market data from Yahoo Finance through yfinance.
yfinance is blocking, so downloads run in a worker thread.
"""

import asyncio
import logging

import yfinance as yf

from orac.schemas.market import OHLCV, SeriesData, Timeframe
from orac.services.base import ProviderError
from orac.services.data_ingestion.interface import SeriesProviderInterface

logger = logging.getLogger(__name__)

PROVIDER_NAME = "yahoo"

# Timeframe mapping for yfinance (4-hour bars are resampled from 1-hour)
TIMEFRAME_MAP = {
    Timeframe.M15: "15m",
    Timeframe.H1: "1h",
    Timeframe.H4: "1h",
    Timeframe.D1: "1d",
    Timeframe.W1: "1wk",
}

# Longest history Yahoo serves for each interval
PERIOD_MAP = {
    Timeframe.M15: "60d",
    Timeframe.H1: "2y",
    Timeframe.H4: "2y",
    Timeframe.D1: "5y",
    Timeframe.W1: "max",
}


def _download(symbol: str, timeframe: Timeframe):
    ticker = yf.Ticker(symbol)
    hist = ticker.history(period=PERIOD_MAP[timeframe], interval=TIMEFRAME_MAP[timeframe])
    if timeframe == Timeframe.H4 and not hist.empty:
        hist = (
            hist.resample("4h")
            .agg({"Open": "first", "High": "max", "Low": "min", "Close": "last", "Volume": "sum"})
            .dropna()
        )
    return hist


class YahooAdapter(SeriesProviderInterface):
    """Yahoo Finance history client."""

    @property
    def name(self) -> str:
        return PROVIDER_NAME

    async def fetch_series(self, symbol: str, timeframe: Timeframe) -> SeriesData:
        """Fetch the OHLCV series for a symbol and timeframe."""
        symbol = symbol.upper().strip()
        logger.info(f"Fetching {symbol} ({timeframe.value}) from Yahoo Finance...")

        try:
            hist = await asyncio.to_thread(_download, symbol, timeframe)
        except Exception as e:
            raise ProviderError(PROVIDER_NAME, f"Download failed for {symbol}: {e}") from e

        if hist.empty:
            raise ProviderError(PROVIDER_NAME, f"No data returned for {symbol}")

        try:
            candles = [
                OHLCV(
                    timestamp=idx.to_pydatetime(),
                    open=float(row["Open"]),
                    high=float(row["High"]),
                    low=float(row["Low"]),
                    close=float(row["Close"]),
                    volume=float(row["Volume"]),
                )
                for idx, row in hist.iterrows()
            ]
            return SeriesData(
                symbol=symbol,
                timeframe=timeframe,
                candles=candles,
                source="Yahoo Finance",
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ProviderError(
                PROVIDER_NAME, f"Unusable history for {symbol}: {e}"
            ) from e
