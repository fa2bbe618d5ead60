"""
Bias Scoring

Turns indicator bundles into per-timeframe scores and combines those into
the multi-timeframe verdict. Pure functions, no I/O.
"""

from typing import Iterable, Optional

from orac.schemas.bias import (
    AggregatedBias,
    Bias,
    BiasConfig,
    BiasThresholds,
    IndicatorBundle,
    OmittedTimeframe,
    ScoredTimeframe,
    ScoreWeights,
    TimeframeOutcome,
    TimeframeScore,
)
from orac.services.indicators.calculations import clamp


# =============================================================================
# BUILDING BLOCKS
# =============================================================================


def calculate_confidence(adx_value: float, threshold: float = 25.0) -> float:
    """0 below the ADX threshold, rising to 1 at twice the threshold."""
    return clamp((adx_value - threshold) / threshold, 0.0, 1.0)


def weighted_score(
    ema_score: float,
    rsi_score: float,
    oscillator_score: float,
    supertrend_score: float,
    weights: Optional[ScoreWeights] = None,
) -> float:
    weights = weights or ScoreWeights()
    return (
        ema_score * weights.ema
        + rsi_score * weights.rsi
        + oscillator_score * weights.oscillator
        + supertrend_score * weights.supertrend
    )


def map_score_to_range(score: float) -> float:
    """Scale a [-1, 1] score to [-100, 100]."""
    return clamp(score * 100, -100.0, 100.0)


def determine_bias(score: float, threshold: float = 20.0) -> Bias:
    if score >= threshold:
        return Bias.BULLISH
    if score <= -threshold:
        return Bias.BEARISH
    return Bias.NEUTRAL


def calculate_grade(score: float, thresholds: Optional[BiasThresholds] = None) -> str:
    """Letter grade for the magnitude of a score."""
    thresholds = thresholds or BiasThresholds()
    magnitude = abs(score)
    for minimum, grade in sorted(thresholds.grades, key=lambda g: g[0], reverse=True):
        if magnitude >= minimum:
            return grade
    return thresholds.fallback_grade


# =============================================================================
# TIMEFRAME SCORER
# =============================================================================


def rsi_subscore(rsi_value: float, rsi_momentum: float, weights: ScoreWeights) -> float:
    """Blend of RSI distance from 50 and clamped RSI momentum."""
    level = (rsi_value - 50) / 50
    momentum = clamp(rsi_momentum / weights.rsi_momentum_scale, -1.0, 1.0)
    return level * weights.rsi_level + momentum * weights.rsi_momentum


def score_bundle(
    bundle: IndicatorBundle,
    timeframe: str,
    config: Optional[BiasConfig] = None,
) -> TimeframeScore:
    """
    Score one timeframe.

    Four sub-scores in [-1, 1] (EMA slope, RSI, oscillator slope,
    Supertrend direction) are weighted, damped by ADX confidence and
    mapped to [-100, 100].
    """
    config = config or BiasConfig()
    weights = config.score_weights

    raw = weighted_score(
        clamp(bundle.ema_slope, -1.0, 1.0),
        rsi_subscore(bundle.rsi, bundle.rsi_momentum, weights),
        clamp(bundle.macd_hist_slope, -1.0, 1.0),
        float(bundle.supertrend_direction),
        weights,
    )
    confidence = calculate_confidence(bundle.adx, config.thresholds.confidence_adx)
    score = map_score_to_range(raw * (0.5 + 0.5 * confidence))

    return TimeframeScore(
        timeframe=timeframe,
        score=score,
        confidence=confidence,
        indicators=bundle,
        bias=determine_bias(score, config.thresholds.bias),
    )


# =============================================================================
# MULTI-TIMEFRAME AGGREGATOR
# =============================================================================


def aggregate(
    outcomes: Iterable[TimeframeOutcome],
    config: Optional[BiasConfig] = None,
    symbol: Optional[str] = None,
) -> AggregatedBias:
    """
    Combine per-timeframe outcomes into the overall verdict.

    Only scored timeframes contribute. The score is the horizon-weighted
    mean, the confidence the plain mean; both are 0 when nothing scored.
    """
    config = config or BiasConfig()
    scored: list[TimeframeScore] = []
    omitted: list[OmittedTimeframe] = []
    for outcome in outcomes:
        if isinstance(outcome, ScoredTimeframe):
            scored.append(outcome.score)
        else:
            omitted.append(outcome)

    total_weight = 0.0
    weighted_total = 0.0
    for ts in scored:
        weight = config.timeframe_weights.weight_for(ts.timeframe)
        weighted_total += ts.score * weight
        total_weight += weight

    overall = weighted_total / total_weight if total_weight > 0 else 0.0
    confidence = sum(ts.confidence for ts in scored) / len(scored) if scored else 0.0

    return AggregatedBias(
        symbol=symbol,
        overall_score=int(round(clamp(overall, -100.0, 100.0))),
        grade=calculate_grade(overall, config.thresholds),
        bias=determine_bias(overall, config.thresholds.bias),
        confidence=clamp(confidence, 0.0, 1.0),
        timeframes=scored,
        omitted=omitted,
    )
