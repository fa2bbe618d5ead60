"""
Technical Indicator Calculations

Pure Python/NumPy implementations of technical indicators.
All math is deterministic.

Every indicator returns a compact array holding only the bars it could
actually compute: element 0 is the first value after the warm-up period,
the last element lines up with the last input bar. Too little input yields
an empty array, never a padded or approximated one.
"""

from itertools import accumulate
from typing import Sequence, Union

import numpy as np

ArrayLike = Union[np.ndarray, Sequence[float]]


def _as_array(data: ArrayLike) -> np.ndarray:
    return np.asarray(data, dtype=float)


# =============================================================================
# SERIES MATH
# =============================================================================


def slope(series: ArrayLike, index: int, lag: int = 1) -> float:
    """Difference between series[index] and series[index - lag], 0 if index < lag."""
    if index < lag:
        return 0.0
    return float(series[index] - series[index - lag])


def normalize_with_atr(value: float, atr_value: float) -> float:
    """Express a value in ATR units; 0 when ATR is 0."""
    return value / atr_value if atr_value != 0 else 0.0


def clamp(x: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, x))


def wilder_smooth(data: ArrayLike, period: int) -> np.ndarray:
    """
    Wilder's smoothing.

    Seed is the simple average of the first `period` values, then
    result[i] = (result[i-1] * (period - 1) + data[i]) / period.
    """
    data = _as_array(data)
    if period < 1 or len(data) < period:
        return np.array([])

    seed = float(np.mean(data[:period]))
    smoothed = accumulate(
        data[period:],
        lambda prev, x: (prev * (period - 1) + x) / period,
        initial=seed,
    )
    return np.fromiter(smoothed, dtype=float, count=len(data) - period + 1)


def true_range(highs: ArrayLike, lows: ArrayLike, closes: ArrayLike) -> np.ndarray:
    """True range for bars 1..n-1 (the first bar has no previous close)."""
    highs, lows, closes = _as_array(highs), _as_array(lows), _as_array(closes)
    if len(closes) < 2:
        return np.array([])

    prev_close = closes[:-1]
    return np.maximum.reduce(
        [
            highs[1:] - lows[1:],
            np.abs(highs[1:] - prev_close),
            np.abs(lows[1:] - prev_close),
        ]
    )


# =============================================================================
# MOVING AVERAGES
# =============================================================================


def ema(data: ArrayLike, period: int) -> np.ndarray:
    """
    Exponential Moving Average.

    Seeded with the SMA of the first `period` values; output has
    len(data) - period + 1 elements.
    """
    data = _as_array(data)
    if period < 1 or len(data) < period:
        return np.array([])

    multiplier = 2 / (period + 1)
    seed = float(np.mean(data[:period]))
    values = accumulate(
        data[period:],
        lambda prev, x: x * multiplier + prev * (1 - multiplier),
        initial=seed,
    )
    return np.fromiter(values, dtype=float, count=len(data) - period + 1)


# =============================================================================
# MOMENTUM INDICATORS
# =============================================================================


def _rsi_from_averages(avg_gain: float, avg_loss: float) -> float:
    # No losses in the window: RSI saturates at 100
    if avg_loss == 0:
        return 100.0
    rs = avg_gain / avg_loss
    return 100 - (100 / (1 + rs))


def rsi(closes: ArrayLike, period: int = 14) -> np.ndarray:
    """Relative Strength Index with Wilder-smoothed gains/losses."""
    closes = _as_array(closes)
    if len(closes) < period + 1:
        return np.array([])

    deltas = np.diff(closes)
    gains = np.where(deltas > 0, deltas, 0.0)
    losses = np.where(deltas < 0, -deltas, 0.0)

    avg_gains = wilder_smooth(gains, period)
    avg_losses = wilder_smooth(losses, period)

    return np.array(
        [_rsi_from_averages(g, l) for g, l in zip(avg_gains, avg_losses)]
    )


# =============================================================================
# VOLATILITY INDICATORS
# =============================================================================


def atr(
    highs: ArrayLike, lows: ArrayLike, closes: ArrayLike, period: int = 14
) -> np.ndarray:
    """
    Average True Range.

    Element k lines up with bar k + period.
    """
    return wilder_smooth(true_range(highs, lows, closes), period)


# =============================================================================
# TREND INDICATORS
# =============================================================================


def supertrend(
    highs: ArrayLike,
    lows: ArrayLike,
    closes: ArrayLike,
    period: int = 10,
    multiplier: float = 3.0,
) -> tuple[np.ndarray, np.ndarray]:
    """
    Supertrend.

    Bands sit `multiplier` ATRs around the bar midpoint. While the trend is
    up the emitted lower band can only rise, while down the upper band can
    only fall; the trend flips when the close crosses the emitted band.

    Returns: (levels, directions) for bars period..n-1, direction 1 / -1
    """
    highs, lows, closes = _as_array(highs), _as_array(lows), _as_array(closes)
    atr_values = atr(highs, lows, closes, period)
    if len(atr_values) == 0:
        return np.array([]), np.array([], dtype=int)

    mid = (highs[period:] + lows[period:]) / 2
    upper = mid + multiplier * atr_values
    lower = mid - multiplier * atr_values
    bar_closes = closes[period:]

    first_up = bar_closes[0] > mid[0]
    initial = (float(lower[0]), 1) if first_up else (float(upper[0]), -1)

    def step(state: tuple[float, int], bar: tuple[float, float, float]):
        prev_level, trend = state
        close, upper_band, lower_band = bar
        if trend == 1:
            candidate = max(lower_band, prev_level)
            if close <= candidate:
                return float(upper_band), -1
            return float(candidate), 1
        candidate = min(upper_band, prev_level)
        if close >= candidate:
            return float(lower_band), 1
        return float(candidate), -1

    states = list(
        accumulate(
            zip(bar_closes[1:], upper[1:], lower[1:]), step, initial=initial
        )
    )
    levels = np.array([level for level, _ in states])
    directions = np.array([trend for _, trend in states], dtype=int)
    return levels, directions


def directional_movement(
    highs: ArrayLike, lows: ArrayLike
) -> tuple[np.ndarray, np.ndarray]:
    """+DM and -DM for bars 1..n-1."""
    highs, lows = _as_array(highs), _as_array(lows)
    up_move = np.diff(highs)
    down_move = lows[:-1] - lows[1:]

    plus_dm = np.where((up_move > down_move) & (up_move > 0), up_move, 0.0)
    minus_dm = np.where((down_move > up_move) & (down_move > 0), down_move, 0.0)
    return plus_dm, minus_dm


def directional_indicators(
    highs: ArrayLike, lows: ArrayLike, closes: ArrayLike, period: int = 14
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Directional indicators.

    Returns: (plus_di, minus_di, dx), each aligned with bars period..n-1
    """
    if len(closes) < period + 1:
        empty = np.array([])
        return empty, empty, empty

    plus_dm, minus_dm = directional_movement(highs, lows)
    tr = true_range(highs, lows, closes)

    smoothed_plus = wilder_smooth(plus_dm, period)
    smoothed_minus = wilder_smooth(minus_dm, period)
    smoothed_tr = wilder_smooth(tr, period)

    safe_tr = np.where(smoothed_tr == 0, 1.0, smoothed_tr)
    plus_di = np.where(smoothed_tr == 0, 0.0, 100 * smoothed_plus / safe_tr)
    minus_di = np.where(smoothed_tr == 0, 0.0, 100 * smoothed_minus / safe_tr)

    di_sum = plus_di + minus_di
    safe_sum = np.where(di_sum == 0, 1.0, di_sum)
    dx = np.where(di_sum == 0, 0.0, 100 * np.abs(plus_di - minus_di) / safe_sum)

    return plus_di, minus_di, dx


def adx(
    highs: ArrayLike, lows: ArrayLike, closes: ArrayLike, period: int = 14
) -> np.ndarray:
    """Average Directional Index: Wilder smoothing of DX, bounded in [0, 100]."""
    _, _, dx = directional_indicators(highs, lows, closes, period)
    return wilder_smooth(dx, period)


# =============================================================================
# OSCILLATOR PROXY
# =============================================================================


def ema_distance(ema_values: ArrayLike, closes: ArrayLike) -> np.ndarray:
    """
    EMA - close in price units.

    `ema_values` must end on the same bar as `closes`.
    """
    ema_values, closes = _as_array(ema_values), _as_array(closes)
    if len(ema_values) == 0:
        return np.array([])
    return ema_values - closes[-len(ema_values):]


def ema_distance_oscillator(ema_values: ArrayLike, closes: ArrayLike) -> np.ndarray:
    """MACD-histogram stand-in: (EMA - close) / close * 10."""
    distance = ema_distance(ema_values, closes)
    if len(distance) == 0:
        return distance
    return distance / _as_array(closes)[-len(distance):] * 10


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def last_or(arr: np.ndarray, default: float) -> float:
    """Last element of an indicator array, or `default` when it is empty."""
    return float(arr[-1]) if len(arr) > 0 else default
