"""
Data Ingestion Service

CONTRACT:
    Input:  SeriesRequest
    Output: SeriesData

RESPONSIBILITIES:
    - Fetch OHLCV series from Twelve Data or Yahoo Finance
    - Normalize provider payloads to chronological SeriesData
    - Cache raw series in Redis
    - Fall back to synthetic series when configured

Pure data fetching and transformation.
"""

from orac.services.data_ingestion.interface import (
    DataIngestionServiceInterface,
    SeriesProviderInterface,
)
from orac.services.data_ingestion.service import (
    DataIngestionService,
    create_provider,
    get_data_ingestion_service,
)

__all__ = [
    "DataIngestionServiceInterface",
    "SeriesProviderInterface",
    "DataIngestionService",
    "create_provider",
    "get_data_ingestion_service",
]
