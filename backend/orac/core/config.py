"""
Application Configuration

All settings loaded from environment variables.
"""

from functools import lru_cache
from typing import Optional
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings from environment variables."""

    # Application
    app_name: str = "ORAC Bias Engine"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # CORS (Frontend URL)
    frontend_url: str = "http://localhost:3000"
    allowed_origins: list[str] = ["http://localhost:3000"]

    # Market data provider: twelve_data, yahoo, mock
    data_provider: str = "twelve_data"
    enable_mock_fallback: bool = True  # Synthetic series when the provider fails

    # Twelve Data API
    twelve_data_api_key: str = "demo"
    twelve_data_base_url: str = "https://api.twelvedata.com"
    twelve_data_output_size: int = 5000
    twelve_data_timeout_seconds: float = 15.0

    # Redis (raw series cache)
    redis_url: Optional[str] = "redis://localhost:6379"
    series_cache_ttl_seconds: int = 300

    # Analysis defaults
    default_timeframes: list[str] = ["15min", "1hour", "4hour", "1day", "1week"]
    max_concurrent_fetches: int = 5
    chart_candles: int = 100

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
