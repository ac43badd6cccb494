"""
System health check endpoint.
Returns status of backend + DB.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy import text
from datetime import datetime, timezone
from parking_analytics.database import get_db
from parking_analytics.models.parking_slot import ParkingSlot

router = APIRouter()


@router.get("/health", summary="System health check")
def health_check(db: Session = Depends(get_db)):
    """
    Returns:
    - Backend status
    - Database connectivity
    - Number of registered slots (the analytics capacity)
    """
    result = {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "backend": "ok",
        "database": "unknown",
        "registered_slots": None,
    }

    try:
        db.execute(text("SELECT 1"))
        result["database"] = "ok"
        result["registered_slots"] = db.query(ParkingSlot).count()
    except Exception as e:
        result["database"] = f"error: {str(e)}"
        result["status"] = "degraded"

    if result["registered_slots"] == 0:
        result["status"] = "degraded"   # analytics cannot run without capacity

    return result
