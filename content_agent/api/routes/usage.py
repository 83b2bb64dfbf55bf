"""
Usage tracking endpoints.

Provides usage statistics and quota information for authenticated users.
"""
import logging
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from content_agent.core.auth_dependency import get_db, get_current_user
from content_agent.db.models.user import User
from content_agent.schemas.usage import (
    UsageResponse,
    UsageLogRequest,
    UsageLogResponse,
    CheckLimitRequest,
    CheckLimitResponse,
    UsageHistoryResponse,
    UsageAnalyticsResponse,
)
from content_agent.services import usage_service
from content_agent.services.project_service import get_owned_project

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/usage", tags=["Usage"])


@router.get("/current", response_model=UsageResponse)
def get_current_usage(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """
    Get current month usage statistics for the authenticated user.

    Returns:
    - plan: Effective plan (free, pro, enterprise)
    - month_key: Current month in YYYY-MM format
    - resources: words, images, video_minutes
        Each resource has: limit, used, remaining, unlimited
    """
    usage_data = usage_service.get_usage_for_response(db, current_user)
    logger.debug(f"Usage summary requested: user_id={current_user.id}, plan={usage_data['plan']}")
    return usage_data


@router.post("/log", status_code=status.HTTP_201_CREATED, response_model=UsageLogResponse)
def log_usage(
    payload: UsageLogRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Record consumption of a resource.

    Logging never enforces the limit; use /usage/check-limit before a paid operation.
    """
    if payload.project_id:
        get_owned_project(db, current_user, payload.project_id)
    return usage_service.log_usage(
        db, current_user.id, payload.resource_type, payload.amount, project_id=payload.project_id
    )


@router.post("/check-limit", response_model=CheckLimitResponse)
def check_limit(
    payload: CheckLimitRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return usage_service.check_limit(db, current_user, payload.resource_type, payload.amount)


@router.get("/history", response_model=UsageHistoryResponse)
def get_usage_history(
    period: str = Query("30d", pattern="^(1d|7d|30d)$"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Daily totals per resource for the last 1, 7 or 30 days."""
    return {"period": period, "days": usage_service.usage_history(db, current_user.id, period)}


@router.get("/analytics", response_model=UsageAnalyticsResponse)
def get_usage_analytics(
    months: int = Query(6, ge=1, le=usage_service.MAX_ANALYTICS_MONTHS),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return usage_service.usage_analytics(db, current_user, months)
