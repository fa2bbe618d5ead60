"""
Market Data API Endpoints

Chart candles and symbol search.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from orac.core.config import settings
from orac.schemas.market import OHLCV, SymbolMatch
from orac.services.base import ProviderError
from orac.services.data_ingestion import DataIngestionService, get_data_ingestion_service
from orac.services.data_ingestion.stock_list import search_symbols

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/chart/{symbol}", response_model=list[OHLCV])
async def get_chart_data(
    symbol: str,
    interval: str = Query(default="15min", description="Timeframe label"),
    limit: int = Query(default=settings.chart_candles, ge=1, le=1000),
    service: DataIngestionService = Depends(get_data_ingestion_service),
):
    """Most recent candles for a symbol."""
    try:
        candles = await service.get_chart_data(symbol.upper(), interval, limit)
    except ProviderError as e:
        logger.error(f"Chart data failed for {symbol}: {e}")
        raise HTTPException(status_code=502, detail=f"Failed to get chart data: {e.message}")

    logger.info(f"Chart data fetched for {symbol}: {len(candles)} points")
    return candles


@router.get("/symbols/search", response_model=list[SymbolMatch])
async def search_symbols_endpoint(
    query: str = Query(default="", description="Search query"),
    limit: int = Query(default=10, ge=1, le=50),
):
    """
    Search symbols by symbol or name.

    Returns matching symbols for autocomplete.
    """
    return search_symbols(query, limit)
