"""
Tests for market data ingestion: provider payloads, caching and fallback.
"""
import asyncio
from datetime import datetime

import numpy as np
import pytest

from conftest import FakeProvider, make_data_service, make_series
from orac.schemas.market import SeriesData, SeriesRequest, Timeframe, resolve_timeframe
from orac.services.base import ProviderError, RateLimitError
from orac.services.cache.redis_client import SeriesCache
from orac.services.data_ingestion import DataIngestionService, create_provider
from orac.services.data_ingestion import twelve_data_adapter, yahoo_adapter
from orac.services.data_ingestion.mock_data import MockDataProvider, generate_mock_ohlcv
from orac.services.data_ingestion.stock_list import search_symbols
from orac.services.data_ingestion.twelve_data_adapter import parse_time_series


def twelve_data_payload():
    # newest first, as the API returns them
    return {
        "meta": {"symbol": "IBM", "interval": "1day"},
        "status": "ok",
        "values": [
            {"datetime": "2024-01-03", "open": "12", "high": "13", "low": "11", "close": "12.5", "volume": "300"},
            {"datetime": "2024-01-02", "open": "11", "high": "12", "low": "10", "close": "11.5", "volume": "200"},
            {"datetime": "2024-01-01", "open": "10", "high": "11", "low": "9", "close": "10.5"},
        ],
    }


class TestTimeframes:

    @pytest.mark.parametrize(
        "label, expected",
        [
            ("15min", Timeframe.M15), ("15m", Timeframe.M15),
            ("1hour", Timeframe.H1), ("1h", Timeframe.H1), ("60min", Timeframe.H1),
            ("4hour", Timeframe.H4), ("4h", Timeframe.H4),
            ("1day", Timeframe.D1), ("1D", Timeframe.D1), ("daily", Timeframe.D1),
            ("1week", Timeframe.W1), ("1W", Timeframe.W1), ("weekly", Timeframe.W1),
        ],
    )
    def test_aliases(self, label, expected):
        assert resolve_timeframe(label) == expected

    def test_unknown_label(self):
        assert resolve_timeframe("3month") is None


class TestSeriesData:

    def test_timestamps_must_increase(self):
        series = make_series([10.0, 11.0, 12.0])
        candles = list(reversed(series.candles))
        with pytest.raises(ValueError):
            SeriesData(symbol="TEST", timeframe=Timeframe.D1, candles=candles, source="test")

    def test_price_arrays(self):
        series = make_series([10.0, 11.0], spread=1.0)
        assert series.closes == [10.0, 11.0]
        assert series.highs == [11.0, 12.0]
        assert series.lows == [9.0, 10.0]


class TestTwelveDataParsing:

    def test_values_are_reversed_to_chronological(self):
        series = parse_time_series(twelve_data_payload(), "ibm", Timeframe.D1)

        assert series.symbol == "IBM"
        assert series.source == "Twelve Data"
        assert [c.timestamp for c in series.candles] == [
            datetime(2024, 1, 1), datetime(2024, 1, 2), datetime(2024, 1, 3)
        ]
        assert [c.close for c in series.candles] == [10.5, 11.5, 12.5]
        assert series.candles[0].volume == 0

    def test_error_status(self):
        payload = {"status": "error", "code": 400, "message": "symbol not found"}
        with pytest.raises(ProviderError, match="symbol not found"):
            parse_time_series(payload, "XXXX", Timeframe.D1)

    def test_rate_limit(self):
        payload = {"status": "error", "code": 429, "message": "API credits exhausted"}
        with pytest.raises(RateLimitError):
            parse_time_series(payload, "IBM", Timeframe.D1)

    def test_empty_values(self):
        with pytest.raises(ProviderError):
            parse_time_series({"status": "ok", "values": []}, "IBM", Timeframe.D1)

    @pytest.mark.asyncio
    async def test_timeout_becomes_provider_error(self, monkeypatch):
        class TimedOutSession:
            def __init__(self, *args, **kwargs):
                pass

            async def __aenter__(self):
                raise asyncio.TimeoutError()

            async def __aexit__(self, *exc):
                return False

        monkeypatch.setattr(twelve_data_adapter.aiohttp, "ClientSession", TimedOutSession)
        adapter = twelve_data_adapter.TwelveDataAdapter(api_key="demo", timeout_seconds=1.0)
        with pytest.raises(ProviderError, match="Timed out"):
            await adapter.fetch_series("IBM", Timeframe.D1)

    def test_malformed_values(self):
        payload = twelve_data_payload()
        del payload["values"][1]["close"]
        with pytest.raises(ProviderError, match="Malformed"):
            parse_time_series(payload, "IBM", Timeframe.D1)


class TestYahooAdapter:

    @pytest.mark.asyncio
    async def test_download_failure(self, monkeypatch):
        def fail(symbol, timeframe):
            raise ConnectionError("offline")

        monkeypatch.setattr(yahoo_adapter, "_download", fail)
        with pytest.raises(ProviderError, match="offline"):
            await yahoo_adapter.YahooAdapter().fetch_series("IBM", Timeframe.D1)

    @pytest.mark.asyncio
    async def test_unusable_rows(self, monkeypatch):
        class Stamp:
            def __init__(self, day):
                self.day = day

            def to_pydatetime(self):
                return datetime(2024, 1, self.day)

        class History:
            empty = False

            def iterrows(self):
                row = {"Open": 10.0, "High": 11.0, "Low": 9.0, "Close": 10.5, "Volume": 100.0}
                yield Stamp(1), row
                yield Stamp(2), dict(row, Close=float("nan"))

        monkeypatch.setattr(yahoo_adapter, "_download", lambda symbol, timeframe: History())
        with pytest.raises(ProviderError, match="Unusable history"):
            await yahoo_adapter.YahooAdapter().fetch_series("IBM", Timeframe.D1)

    @pytest.mark.asyncio
    async def test_empty_history(self, monkeypatch):
        class EmptyHistory:
            empty = True

        monkeypatch.setattr(yahoo_adapter, "_download", lambda symbol, timeframe: EmptyHistory())
        with pytest.raises(ProviderError, match="No data"):
            await yahoo_adapter.YahooAdapter().fetch_series("IBM", Timeframe.D1)


class TestMockData:

    def test_deterministic(self):
        end = datetime(2024, 6, 1)
        first = generate_mock_ohlcv("IBM", Timeframe.D1, 100, end)
        second = generate_mock_ohlcv("IBM", Timeframe.D1, 100, end)
        assert first == second
        assert len(first) == 100
        assert first[-1].timestamp == end

    def test_candles_are_consistent(self):
        for candle in generate_mock_ohlcv("NVDA", Timeframe.H1, 300, datetime(2024, 6, 1)):
            assert candle.low <= min(candle.open, candle.close)
            assert candle.high >= max(candle.open, candle.close)
            assert candle.low > 0

    @pytest.mark.asyncio
    async def test_provider(self):
        series = await MockDataProvider(lookback=120).fetch_series("aapl", Timeframe.H4)
        assert series.symbol == "AAPL"
        assert series.timeframe == Timeframe.H4
        assert len(series.candles) == 120


class TestSymbolSearch:

    def test_exact_match_first(self):
        results = search_symbols("meta")
        assert results[0]["symbol"] == "META"

    def test_name_match(self):
        assert [s["symbol"] for s in search_symbols("micro")] == ["MSFT"]

    def test_empty_query_lists_all(self):
        assert len(search_symbols("")) == 8
        assert len(search_symbols("", limit=3)) == 3

    def test_no_match(self):
        assert search_symbols("zzzz") == []


class TestDataIngestionService:

    @pytest.mark.asyncio
    async def test_fetch_resolves_alias(self, rising_series):
        provider = FakeProvider({Timeframe.D1: rising_series})
        series = await make_data_service(provider).fetch_series(" ibm ", "daily")

        assert provider.calls == [("IBM", Timeframe.D1)]
        assert series.symbol == "IBM"
        assert series.timeframe == Timeframe.D1

    @pytest.mark.asyncio
    async def test_unsupported_timeframe(self, rising_series):
        provider = FakeProvider({Timeframe.D1: rising_series})
        with pytest.raises(ProviderError, match="Unsupported timeframe"):
            await make_data_service(provider).fetch_series("IBM", "3month")
        assert provider.calls == []

    @pytest.mark.asyncio
    async def test_cache_hit_skips_provider(self, rising_series):
        provider = FakeProvider({Timeframe.D1: rising_series})
        service = make_data_service(provider, ttl_seconds=300)

        first = await service.fetch_series("IBM", "1day")
        second = await service.fetch_series("IBM", "1d")

        assert len(provider.calls) == 1
        assert second == first

    @pytest.mark.asyncio
    async def test_cleared_cache_refetches(self, rising_series):
        provider = FakeProvider({Timeframe.D1: rising_series})
        service = make_data_service(provider, ttl_seconds=300)

        await service.execute(SeriesRequest(symbol="IBM", timeframe="1day"))
        await service.cache.clear()
        await service.execute(SeriesRequest(symbol="IBM", timeframe="1day"))
        assert len(provider.calls) == 2

    @pytest.mark.asyncio
    async def test_zero_ttl_disables_cache(self, rising_series):
        provider = FakeProvider({Timeframe.D1: rising_series})
        service = make_data_service(provider, ttl_seconds=0)

        await service.fetch_series("IBM", "1day")
        await service.fetch_series("IBM", "1day")
        assert len(provider.calls) == 2

    @pytest.mark.asyncio
    async def test_failure_without_fallback_raises(self):
        with pytest.raises(ProviderError):
            await make_data_service(FakeProvider({})).fetch_series("IBM", "1day")

    @pytest.mark.asyncio
    async def test_failure_uses_mock_fallback(self):
        service = DataIngestionService(
            provider=FakeProvider({}),
            cache=SeriesCache(ttl_seconds=0),
            use_mock_fallback=True,
        )
        series = await service.fetch_series("IBM", "1hour")
        assert series.source == "Mock"
        assert series.timeframe == Timeframe.H1

    @pytest.mark.asyncio
    async def test_timeout_uses_fallback(self):
        service = DataIngestionService(
            provider=FakeProvider({Timeframe.D1: asyncio.TimeoutError()}),
            cache=SeriesCache(ttl_seconds=0),
            fallback=MockDataProvider(),
        )
        series = await service.fetch_series("IBM", "1day")
        assert series.source == "Mock"
        assert len(series.candles) == 300

    @pytest.mark.asyncio
    async def test_timeout_without_fallback_propagates(self):
        provider = FakeProvider({Timeframe.D1: asyncio.TimeoutError()})
        with pytest.raises(asyncio.TimeoutError):
            await make_data_service(provider).fetch_series("IBM", "1day")

    @pytest.mark.asyncio
    async def test_chart_data_returns_latest_candles(self):
        series = make_series(100 + np.arange(150))
        service = make_data_service(FakeProvider({Timeframe.D1: series}))

        candles = await service.get_chart_data("IBM", "1day", limit=20)
        assert len(candles) == 20
        assert candles[-1].close == 249.0

        default = await service.get_chart_data("IBM", "1day")
        assert len(default) == 100

    @pytest.mark.asyncio
    async def test_health_check_delegates_to_provider(self):
        assert await make_data_service(FakeProvider({})).health_check() is True


def test_create_provider():
    assert create_provider("mock").name == "mock"
    assert create_provider("yahoo").name == "yahoo"
    assert create_provider("twelve_data").name == "twelve_data"
    with pytest.raises(ValueError):
        create_provider("bloomberg")
