"""
Analysis API Endpoints

Multi-timeframe bias analysis.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from orac.schemas.bias import AggregatedBias, AnalysisRequest
from orac.services.base import ValidationError
from orac.services.bias import BiasService, get_bias_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=AggregatedBias)
async def get_analysis(
    request: AnalysisRequest,
    service: BiasService = Depends(get_bias_service),
):
    """
    Multi-timeframe bias for a symbol.

    Timeframes default to 15min, 1hour, 4hour, 1day and 1week. Timeframes
    that cannot be fetched or lack history are listed under `omitted`
    and do not contribute to the overall score.
    """
    logger.info(f"Fetching analysis for {request.symbol.upper()} with timeframes: {request.timeframes}")
    try:
        return await service.execute(request)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
