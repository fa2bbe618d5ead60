"""
CONTRACT 1: Market Data Layer

Input: symbol + timeframe label
Output: SeriesData

Raw OHLCV series as handed to the indicator layer by the data providers
(Twelve Data, Yahoo Finance, mock generator).
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field, field_validator


# =============================================================================
# ENUMS
# =============================================================================


class Timeframe(str, Enum):
    M15 = "15min"
    H1 = "1hour"
    H4 = "4hour"
    D1 = "1day"
    W1 = "1week"


# Alternative spellings accepted from callers
TIMEFRAME_ALIASES: dict[str, Timeframe] = {
    "15m": Timeframe.M15,
    "1h": Timeframe.H1,
    "60min": Timeframe.H1,
    "4h": Timeframe.H4,
    "1D": Timeframe.D1,
    "1d": Timeframe.D1,
    "daily": Timeframe.D1,
    "1W": Timeframe.W1,
    "1w": Timeframe.W1,
    "weekly": Timeframe.W1,
}


def resolve_timeframe(label: str) -> Optional[Timeframe]:
    """Map a caller-supplied label (canonical or alias) to a Timeframe."""
    if isinstance(label, Timeframe):
        return label
    try:
        return Timeframe(label)
    except ValueError:
        return TIMEFRAME_ALIASES.get(label)


# =============================================================================
# INPUT: SeriesRequest
# =============================================================================


class SeriesRequest(BaseModel):
    """
    Request for one OHLCV series.
    Sent by: Bias Service / API
    Received by: Data Ingestion Service
    """

    symbol: str = Field(..., min_length=1, max_length=32)
    timeframe: str = Field(
        default=Timeframe.M15.value,
        description="Timeframe label, canonical or alias (e.g. '15min', '1h', 'daily')",
    )


# =============================================================================
# OHLCV
# =============================================================================


class OHLCV(BaseModel):
    """Single candlestick data point."""

    timestamp: datetime
    open: float = Field(..., gt=0)
    high: float = Field(..., gt=0)
    low: float = Field(..., gt=0)
    close: float = Field(..., gt=0)
    volume: float = Field(default=0, ge=0)


class SeriesData(BaseModel):
    """Chronologically ordered candles for one symbol and timeframe."""

    symbol: str
    timeframe: Timeframe
    candles: list[OHLCV]
    source: str = "unknown"

    @field_validator("candles")
    @classmethod
    def _strictly_increasing(cls, candles: list[OHLCV]) -> list[OHLCV]:
        for prev, cur in zip(candles, candles[1:]):
            if cur.timestamp <= prev.timestamp:
                raise ValueError(
                    f"Candles must be strictly increasing by timestamp "
                    f"({cur.timestamp} after {prev.timestamp})"
                )
        return candles

    @property
    def closes(self) -> list[float]:
        return [c.close for c in self.candles]

    @property
    def highs(self) -> list[float]:
        return [c.high for c in self.candles]

    @property
    def lows(self) -> list[float]:
        return [c.low for c in self.candles]


# =============================================================================
# SEARCH
# =============================================================================


class SymbolMatch(BaseModel):
    """Symbol search result for autocomplete."""

    symbol: str
    name: str
