"""Insights, analytics and theme API endpoints."""
from fastapi import APIRouter, Depends, HTTPException
from typing import List, Optional
from feedback_intel.api.dependencies import get_aggregator
from feedback_intel.api.models.responses import AnalyticsResponse, InsightsResponse, ThemeResponse
from feedback_intel.insights import InsightsAggregator
from feedback_intel.utils import setup_logger

router = APIRouter()
logger = setup_logger(__name__)


@router.get("/insights", response_model=InsightsResponse)
async def get_insights(category: Optional[str] = None, aggregator: InsightsAggregator = Depends(get_aggregator)):
    """Totals, themes, severity leaderboard and a prose summary."""
    try:
        return await aggregator.build_insights(category)
    except Exception as e:
        logger.error(f"Error building insights: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to load insights")


@router.get("/analytics", response_model=AnalyticsResponse)
async def get_analytics(category: Optional[str] = None, aggregator: InsightsAggregator = Depends(get_aggregator)):
    """Dashboard counts and the last week's daily submissions."""
    try:
        return aggregator.build_analytics(category)
    except Exception as e:
        logger.error(f"Error building analytics: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to load analytics")


@router.get("/themes", response_model=List[ThemeResponse])
async def get_themes(category: Optional[str] = None, aggregator: InsightsAggregator = Depends(get_aggregator)):
    """Deterministic theme clustering of all stored topics."""
    try:
        return aggregator.build_themes(category)
    except Exception as e:
        logger.error(f"Theme clustering failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Theme analysis failed")
