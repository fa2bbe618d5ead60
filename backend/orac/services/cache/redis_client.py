"""
Redis cache client for raw OHLCV series.

Provider responses are cached per symbol/timeframe for a short TTL so that
repeated analyses of the same symbol do not hit the provider's rate limits.
Falls back to an in-process cache when Redis is unavailable.
"""

import logging
import time
from typing import Optional

import redis.asyncio as redis

from orac.core.config import settings
from orac.schemas.market import SeriesData

logger = logging.getLogger(__name__)

# Global Redis connection pool
_redis_pool: Optional[redis.Redis] = None


async def init_redis() -> Optional[redis.Redis]:
    """
    Initialize Redis connection pool.
    Called on application startup.
    """
    global _redis_pool

    if _redis_pool is not None:
        return _redis_pool

    if not settings.redis_url:
        logger.info("Redis disabled. Using in-memory series cache.")
        return None

    try:
        _redis_pool = redis.from_url(
            settings.redis_url,
            encoding="utf-8",
            decode_responses=True,
        )
        # Test connection
        await _redis_pool.ping()
        logger.info(f"Redis connected: {settings.redis_url}")
        return _redis_pool
    except Exception as e:
        logger.warning(f"Redis connection failed: {e}. Using in-memory fallback.")
        _redis_pool = None
        return None


async def close_redis() -> None:
    """Close Redis connection pool."""
    global _redis_pool
    if _redis_pool:
        await _redis_pool.close()
        _redis_pool = None
        logger.info("Redis connection closed")


def get_redis() -> Optional[redis.Redis]:
    """Get the Redis connection pool."""
    return _redis_pool


class SeriesCache:
    """
    Cache for raw provider series.

    Keys:
    - series:{provider}:{SYMBOL}:{timeframe} → SeriesData JSON
    """

    def __init__(
        self,
        redis_client: Optional[redis.Redis] = None,
        ttl_seconds: Optional[int] = None,
    ):
        self._redis = redis_client
        self.ttl_seconds = ttl_seconds if ttl_seconds is not None else settings.series_cache_ttl_seconds
        # In-memory fallback: key -> (expires_at, json)
        self._memory_cache: dict[str, tuple[float, str]] = {}

    @property
    def redis(self) -> Optional[redis.Redis]:
        return self._redis or get_redis()

    @staticmethod
    def key(provider: str, symbol: str, timeframe: str) -> str:
        return f"series:{provider}:{symbol.upper()}:{timeframe}"

    def _memory_get(self, key: str) -> Optional[str]:
        entry = self._memory_cache.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if time.monotonic() >= expires_at:
            del self._memory_cache[key]
            return None
        return value

    def _memory_set(self, key: str, value: str) -> None:
        self._memory_cache[key] = (time.monotonic() + self.ttl_seconds, value)

    async def get_series(
        self, provider: str, symbol: str, timeframe: str
    ) -> Optional[SeriesData]:
        """Cached series, or None on a miss."""
        key = self.key(provider, symbol, timeframe)
        value = None

        if self.redis:
            try:
                value = await self.redis.get(key)
            except Exception as e:
                logger.debug(f"Redis get_series failed: {e}")
                value = self._memory_get(key)
        else:
            value = self._memory_get(key)

        if not value:
            return None
        return SeriesData.model_validate_json(value)

    async def set_series(self, provider: str, series: SeriesData) -> bool:
        """Store a series under the provider's key."""
        if self.ttl_seconds <= 0:
            return False

        key = self.key(provider, series.symbol, series.timeframe.value)
        value = series.model_dump_json()

        if self.redis:
            try:
                await self.redis.set(key, value, ex=self.ttl_seconds)
                return True
            except Exception as e:
                logger.debug(f"Redis set_series failed: {e}")

        self._memory_set(key, value)
        return True

    async def clear(self) -> None:
        """Drop in-memory entries (Redis entries expire on their own)."""
        self._memory_cache.clear()


# Singleton instance
_series_cache: Optional[SeriesCache] = None


def get_series_cache() -> SeriesCache:
    """Get the series cache singleton."""
    global _series_cache
    if _series_cache is None:
        _series_cache = SeriesCache()
    return _series_cache
