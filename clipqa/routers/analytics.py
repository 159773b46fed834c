"""
Analytics Router
Read-only usage reports
"""

from fastapi import APIRouter, Depends, Query

from ..services.analytics import AnalyticsService
from ..services.database import Database, get_database
from .deps import get_current_user_id

router = APIRouter(prefix="/api/analytics", tags=["analytics"], dependencies=[Depends(get_current_user_id)])


@router.get("/clips")
async def clip_analytics(range: str = Query("7d"), db: Database = Depends(get_database)):
    return await AnalyticsService(db).clip_analytics(range)


@router.get("/users")
async def user_engagement(range: str = Query("7d"), db: Database = Depends(get_database)):
    return await AnalyticsService(db).user_engagement(range)


@router.get("/questions")
async def question_quality(db: Database = Depends(get_database)):
    return await AnalyticsService(db).question_quality()


@router.get("/videos")
async def video_performance(db: Database = Depends(get_database)):
    return await AnalyticsService(db).video_performance()


@router.get("/hourly")
async def hourly_activity(db: Database = Depends(get_database)):
    return await AnalyticsService(db).hourly_activity()


@router.get("/popular-clips")
async def popular_clips(limit: int = Query(10, ge=1, le=100), db: Database = Depends(get_database)):
    """Non-dry clips with questions, most-asked first."""
    return await AnalyticsService(db).popular_clips(limit)
