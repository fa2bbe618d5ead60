"""
Cache module for ORAC.

Provides Redis caching for raw provider series.
"""

from orac.services.cache.redis_client import (
    SeriesCache,
    get_series_cache,
    init_redis,
    close_redis,
)

__all__ = [
    "SeriesCache",
    "get_series_cache",
    "init_redis",
    "close_redis",
]
