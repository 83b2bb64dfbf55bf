"""
Health check endpoint for deployment monitoring.
"""
import logging
from fastapi import APIRouter, Request
from datetime import datetime
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["Health"])


@router.get("")
def health_check(request: Request):
    """
    Health check endpoint for deployment monitoring.

    Returns 200 with status "degraded" when the database is not reachable.
    """
    status = "healthy"

    # Check database connectivity
    try:
        with request.app.state.engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        db_status = "connected"
    except SQLAlchemyError as e:
        logger.warning(f"Health check database error: {e}")
        db_status = "error"
        status = "degraded"

    return {
        "status": status,
        "timestamp": datetime.utcnow().isoformat(),
        "database": db_status,
        "version": "1.0.0",
    }
