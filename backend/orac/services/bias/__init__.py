"""
Bias Service

CONTRACT:
    Input:  AnalysisRequest (symbol + ordered timeframes)
    Output: AggregatedBias

RESPONSIBILITIES:
    - Fetch one series per timeframe (concurrently)
    - Score each timeframe from its indicator bundle
    - Weight timeframes by horizon and grade the overall score
    - Omit failed timeframes without failing the request
"""

from orac.services.bias.interface import BiasServiceInterface
from orac.services.bias.service import BiasService, get_bias_service
from orac.services.bias.scoring import (
    aggregate,
    calculate_confidence,
    calculate_grade,
    determine_bias,
    map_score_to_range,
    score_bundle,
)

__all__ = [
    "BiasServiceInterface",
    "BiasService",
    "get_bias_service",
    "aggregate",
    "calculate_confidence",
    "calculate_grade",
    "determine_bias",
    "map_score_to_range",
    "score_bundle",
]
