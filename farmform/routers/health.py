# farmform/routers/health.py
import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy import text
from sqlalchemy.orm import Session

from farmform.database.database import get_db
from farmform.database.models import utcnow

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health")
def health():
    """Liveness probe."""
    return {"ok": True}


@router.get("/api/test")
def connectivity_test(request: Request, db: Session = Depends(get_db)):
    """
    Connectivity report for the frontend.
    Never returns credentials; only whether they are present.
    """
    settings = request.app.state.settings
    try:
        db.execute(text("SELECT 1"))
        database_status = "Connected"
    except Exception as e:
        logger.warning("Database check failed: %s", e)
        database_status = "Unavailable"

    return {
        "message": "Backend connected successfully",
        "timestamp": utcnow().isoformat(),
        "razorpayKeyId": "Configured" if settings.razorpay_key_id else "Missing",
        "database": database_status,
    }
