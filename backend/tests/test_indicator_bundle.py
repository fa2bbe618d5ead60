"""
Tests for the indicator bundle builder.
"""
import numpy as np
import pytest

from conftest import make_series, random_walk
from orac.schemas.bias import IndicatorPeriods, MACDInput
from orac.services.base import InsufficientDataError
from orac.services.bias.scoring import score_bundle
from orac.services.indicators.calculations import ema
from orac.services.indicators import (
    IndicatorService,
    build_indicator_bundle,
    get_indicator_service,
)


class TestBuildBundle:

    def test_rising_series(self, rising_series):
        bundle = IndicatorService().build_bundle(rising_series)

        assert bundle is not None
        # EMA climbs one point per bar; ATR is 1.5
        assert bundle.ema_slope == pytest.approx(1 / 1.5)
        assert bundle.atr == pytest.approx(1.5)
        assert bundle.rsi == 100.0
        assert bundle.rsi_momentum == 0.0
        assert bundle.supertrend_direction == 1
        assert bundle.adx == pytest.approx(100.0)
        assert bundle.macd == 0.0
        assert bundle.macd_signal == 0.0

    def test_oscillator_proxy(self, rising_series):
        bundle = IndicatorService().build_bundle(rising_series)
        last_close = rising_series.candles[-1].close
        assert bundle.macd_hist == pytest.approx((bundle.ema - last_close) / last_close * 10)
        # EMA lags a rising close by a constant amount
        assert bundle.macd_hist < 0
        assert bundle.macd_hist_slope == pytest.approx(0.0, abs=1e-9)

    def test_oscillator_slope_tracks_ema_distance(self):
        closes = np.concatenate([np.full(55, 100.0), [102.0, 105.0]])
        bundle = build_indicator_bundle(closes + 0.5, closes - 0.5, closes)

        ema_values = ema(closes, 50)
        distance = ema_values - closes[-len(ema_values):]
        assert bundle.macd_hist_slope == pytest.approx((distance[-1] - distance[-2]) / bundle.atr)
        assert bundle.macd_hist_slope < 0

    def test_readings_ignore_price_scale(self):
        highs, lows, closes = random_walk(200, seed=11)
        base = make_series(closes, highs, lows)
        scaled = make_series(closes * 100, highs * 100, lows * 100)

        service = IndicatorService()
        small, large = service.build_bundle(base), service.build_bundle(scaled)

        for field in ("ema_slope", "rsi", "rsi_momentum", "macd_hist", "macd_hist_slope", "adx"):
            assert getattr(large, field) == pytest.approx(getattr(small, field), rel=1e-6, abs=1e-9)
        assert large.supertrend_direction == small.supertrend_direction
        assert score_bundle(large, "1day").score == pytest.approx(score_bundle(small, "1day").score)

    def test_falling_series(self, falling_series):
        bundle = IndicatorService().build_bundle(falling_series)
        assert bundle.ema_slope == pytest.approx(-1 / 1.5)
        assert bundle.rsi == pytest.approx(0.0)
        assert bundle.supertrend_direction == -1

    def test_short_series_yields_none(self, short_series):
        assert IndicatorService().build_bundle(short_series) is None

    def test_exactly_minimum_bars(self):
        series = make_series(100 + np.arange(50))
        bundle = IndicatorService().build_bundle(series)
        assert bundle is not None

    def test_zero_atr_degrades_to_zero(self):
        closes = np.full(60, 50.0)
        series = make_series(closes, spread=0.0)
        bundle = IndicatorService().build_bundle(series)

        assert bundle.atr == 0.0
        assert bundle.ema_slope == 0.0
        assert bundle.macd_hist_slope == 0.0
        assert bundle.adx == 0.0

    def test_adx_default_when_unavailable(self):
        closes = 100 + np.arange(50.0)
        periods = IndicatorPeriods(adx=30)
        bundle = build_indicator_bundle(closes + 0.5, closes - 0.5, closes, periods)
        assert bundle.adx == 25.0

    def test_unavailable_core_indicator_yields_none(self):
        closes = 100 + np.arange(60.0)
        periods = IndicatorPeriods(ema=80)
        assert build_indicator_bundle(closes + 0.5, closes - 0.5, closes, periods) is None


class TestMACDSubstitution:

    def test_real_macd_replaces_proxy(self, rising_series):
        macd = MACDInput(macd=1.2, signal=0.9, histogram=0.3, previous_histogram=0.15)
        bundle = IndicatorService().build_bundle(rising_series, macd=macd)

        assert bundle.macd == 1.2
        assert bundle.macd_signal == 0.9
        assert bundle.macd_hist == 0.3
        assert bundle.macd_hist_slope == pytest.approx(0.15 / 1.5)

    def test_real_macd_without_history_has_flat_slope(self, rising_series):
        macd = MACDInput(macd=1.2, signal=0.9, histogram=0.3)
        bundle = IndicatorService().build_bundle(rising_series, macd=macd)
        assert bundle.macd_hist_slope == 0.0


@pytest.mark.asyncio
async def test_execute_matches_build_bundle(rising_series):
    service = IndicatorService()
    assert await service.execute(rising_series) == service.build_bundle(rising_series)
    assert await service.health_check() is True


@pytest.mark.asyncio
async def test_execute_rejects_short_series(short_series):
    with pytest.raises(InsufficientDataError) as exc_info:
        await IndicatorService().execute(short_series)
    assert exc_info.value.required == 50
    assert exc_info.value.available == 30


def test_service_singleton():
    assert get_indicator_service() is get_indicator_service()
