"""Occupancy analytics KPIs for the admin dashboard."""

from zoneinfo import ZoneInfo
from datetime import timedelta
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from parking_analytics.config import settings
from parking_analytics.database import get_db
from parking_analytics.exceptions import AnalyticsUnavailable, InvalidPeriod
from parking_analytics.schemas.analytics import AnalyticsOut
from parking_analytics.services.analytics_service import AnalyticsEngine
from parking_analytics.services.session_store import SqlSessionStore, SqlSlotRegistry, SystemClock
from parking_analytics.utils.logger import get_logger

router = APIRouter()
logger = get_logger(__name__)


def get_analytics_engine(db: Session = Depends(get_db)) -> AnalyticsEngine:
    """FastAPI dependency — engine bound to this request's DB session."""
    tz = ZoneInfo(settings.TIMEZONE)
    return AnalyticsEngine(
        store=SqlSessionStore(db, tz),
        registry=SqlSlotRegistry(db),
        clock=SystemClock(tz),
        bucket=timedelta(minutes=settings.BUCKET_MINUTES),
        top_peak_hours=settings.TOP_PEAK_HOURS,
        top_longest_sessions=settings.TOP_LONGEST_SESSIONS,
    )


@router.get("/analytics/{period}", response_model=AnalyticsOut, summary="Occupancy KPIs for day | week | month")
async def get_analytics(period: str, engine: AnalyticsEngine = Depends(get_analytics_engine)):
    """
    Vehicle count, average stay, current occupancy, peak hour and hourly
    timeline for the period, with trends against the preceding period.
    """
    try:
        result = await engine.compute_analytics(period)
    except InvalidPeriod as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except AnalyticsUnavailable as e:
        logger.warning(f"Analytics unavailable for period={period}: {e}")
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Analytics temporarily unavailable")
    return AnalyticsOut.model_validate(result)
