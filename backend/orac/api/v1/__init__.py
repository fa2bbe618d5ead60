"""
API v1 Router

All API endpoints for the frontend.
"""

from fastapi import APIRouter

from orac.api.v1.endpoints import analysis, market

router = APIRouter()

# Include all endpoint routers
router.include_router(analysis.router, prefix="/analysis", tags=["Analysis"])
router.include_router(market.router, prefix="/market", tags=["Market Data"])
