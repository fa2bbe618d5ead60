"""
Twelve Data Adapter

Fetches OHLCV time series from the Twelve Data REST API.
"""

import asyncio
import logging
from datetime import datetime
from typing import Any, Optional

import aiohttp

from orac.core.config import settings
from orac.schemas.market import OHLCV, SeriesData, Timeframe
from orac.services.base import ProviderError, RateLimitError
from orac.services.data_ingestion.interface import SeriesProviderInterface

logger = logging.getLogger(__name__)

PROVIDER_NAME = "twelve_data"

# Timeframe mapping for the time_series endpoint
INTERVAL_MAP = {
    Timeframe.M15: "15min",
    Timeframe.H1: "1h",
    Timeframe.H4: "4h",
    Timeframe.D1: "1day",
    Timeframe.W1: "1week",
}


def parse_time_series(
    payload: dict[str, Any], symbol: str, timeframe: Timeframe
) -> SeriesData:
    """
    Convert a time_series response into SeriesData.

    Twelve Data lists values newest first; candles are returned oldest first.

    Raises:
        RateLimitError: provider reported code 429
        ProviderError: error payload or no usable values
    """
    if payload.get("status") == "error":
        message = payload.get("message", "unknown error")
        if payload.get("code") == 429:
            raise RateLimitError(PROVIDER_NAME, message, {"symbol": symbol})
        raise ProviderError(PROVIDER_NAME, message, {"symbol": symbol, "code": payload.get("code")})

    values = payload.get("values") or []
    if not values:
        raise ProviderError(
            PROVIDER_NAME,
            f"No values returned for {symbol} ({timeframe.value})",
            {"symbol": symbol},
        )

    try:
        candles = [
            OHLCV(
                timestamp=datetime.fromisoformat(v["datetime"]),
                open=float(v["open"]),
                high=float(v["high"]),
                low=float(v["low"]),
                close=float(v["close"]),
                volume=float(v.get("volume") or 0),
            )
            for v in reversed(values)
        ]
        return SeriesData(
            symbol=symbol.upper(),
            timeframe=timeframe,
            candles=candles,
            source="Twelve Data",
        )
    except (KeyError, TypeError, ValueError) as e:
        raise ProviderError(
            PROVIDER_NAME, f"Malformed time series for {symbol}: {e}", {"symbol": symbol}
        ) from e


class TwelveDataAdapter(SeriesProviderInterface):
    """Twelve Data time_series client."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        output_size: Optional[int] = None,
        timeout_seconds: Optional[float] = None,
    ):
        self.api_key = api_key or settings.twelve_data_api_key
        self.base_url = (base_url or settings.twelve_data_base_url).rstrip("/")
        self.output_size = output_size or settings.twelve_data_output_size
        self.timeout = aiohttp.ClientTimeout(
            total=timeout_seconds or settings.twelve_data_timeout_seconds
        )

    @property
    def name(self) -> str:
        return PROVIDER_NAME

    async def fetch_series(self, symbol: str, timeframe: Timeframe) -> SeriesData:
        """Fetch the OHLCV series for a symbol and timeframe."""
        params = {
            "symbol": symbol.upper(),
            "interval": INTERVAL_MAP[timeframe],
            "apikey": self.api_key,
            "outputsize": self.output_size,
            "format": "JSON",
        }
        logger.info(f"Calling Twelve Data time_series for {symbol} ({params['interval']})")

        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                async with session.get(f"{self.base_url}/time_series", params=params) as resp:
                    if resp.status == 429:
                        raise RateLimitError(PROVIDER_NAME, "HTTP 429", {"symbol": symbol})
                    if resp.status != 200:
                        error = await resp.text()
                        raise ProviderError(
                            PROVIDER_NAME,
                            f"HTTP {resp.status}: {error[:200]}",
                            {"symbol": symbol},
                        )
                    payload = await resp.json()
        except aiohttp.ClientError as e:
            raise ProviderError(PROVIDER_NAME, f"Request failed: {e}", {"symbol": symbol}) from e
        except asyncio.TimeoutError as e:
            raise ProviderError(
                PROVIDER_NAME, f"Timed out after {self.timeout.total}s", {"symbol": symbol}
            ) from e

        return parse_time_series(payload, symbol, timeframe)

    async def health_check(self) -> bool:
        """Twelve Data is reachable when a configured key exists."""
        return bool(self.api_key)
