"""
Usage service for metering, quota checks and usage reporting.

Usage is an append-only log. Every total is recomputed from the log with
SUM(); no counter is ever read, modified and written back, so concurrent
log_usage() calls for the same user cannot lose updates.

The usage period is the UTC calendar month (month_key "YYYY-MM").
"""
import logging
from collections import defaultdict
from datetime import datetime, timedelta
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func, and_
from sqlalchemy.orm import Session

from content_agent.core.exceptions import ValidationError
from content_agent.core.plan_limits import SUPPORTED_RESOURCES, get_plan_limit
from content_agent.db.models.generated_content import GeneratedContent
from content_agent.db.models.project import Project
from content_agent.db.models.usage import UsageLog
from content_agent.db.models.user import User
from content_agent.db.models.workspace import Workspace

logger = logging.getLogger(__name__)

HISTORY_PERIODS: Dict[str, int] = {"1d": 1, "7d": 7, "30d": 30}
MAX_ANALYTICS_MONTHS = 24


def get_plan_for_user(user: User) -> str:
    """Effective plan used for quota decisions (free when the subscription lapsed)."""
    return user.effective_plan()


def month_bounds(month_key: str) -> Tuple[datetime, datetime]:
    """Return [start, end) of a YYYY-MM month."""
    start = datetime.strptime(month_key, "%Y-%m")
    if start.month == 12:
        end = start.replace(year=start.year + 1, month=1)
    else:
        end = start.replace(month=start.month + 1)
    return start, end


def previous_month_keys(count: int, now: Optional[datetime] = None) -> List[str]:
    """The last `count` month keys, oldest first, ending with the current month."""
    now = now or datetime.utcnow()
    year, month = now.year, now.month
    keys = []
    for _ in range(count):
        keys.append(f"{year:04d}-{month:02d}")
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return list(reversed(keys))


def get_month_usage(db: Session, user_id: str, month_key: str) -> Dict[str, int]:
    """
    Get per-resource usage totals for a user in a given month.

    Args:
        db: Database session
        user_id: User ID
        month_key: Month key in "YYYY-MM" format

    Returns:
        Dictionary mapping every supported resource to its total (0 if unused)
    """
    rows = db.query(
        UsageLog.resource_type,
        func.sum(UsageLog.amount).label('total')
    ).filter(
        and_(
            UsageLog.user_id == user_id,
            UsageLog.month_key == month_key
        )
    ).group_by(UsageLog.resource_type).all()

    totals = {resource: 0 for resource in SUPPORTED_RESOURCES}
    for resource_type, total in rows:
        totals[resource_type] = int(total or 0)
    return totals


def log_usage(
    db: Session,
    user_id: str,
    resource_type: str,
    amount: int,
    project_id: Optional[str] = None,
    commit: bool = True,
) -> UsageLog:
    """
    Append one usage entry.

    Never checks limits: callers that perform a paid operation must call
    check_limit() first.

    Raises:
        ValidationError: Unknown resource type or non-positive amount
    """
    if resource_type not in SUPPORTED_RESOURCES:
        raise ValidationError(f"Invalid resource type: {resource_type}")
    if amount is None or amount <= 0:
        raise ValidationError("Amount must be a positive integer")

    now = datetime.utcnow()
    entry = UsageLog(
        user_id=user_id,
        resource_type=resource_type,
        amount=amount,
        project_id=project_id,
        month_key=UsageLog.get_month_key(now),
        created_at=now,
    )
    db.add(entry)
    if commit:
        db.commit()
        db.refresh(entry)
    else:
        db.flush()

    logger.info(
        f"Usage logged: user_id={user_id}, resource={resource_type}, amount={amount}, "
        f"project_id={project_id}, month={entry.month_key}"
    )
    return entry


def current_usage(db: Session, user: User) -> Dict[str, int]:
    """Per-resource totals for the current calendar month."""
    return get_month_usage(db, user.id, UsageLog.get_month_key())


def check_limit(db: Session, user: User, resource_type: str, amount_needed: int = 1) -> Dict:
    """
    Check whether amount_needed more units fit in this month's quota.

    Read-only. remaining is limit - used clamped at 0; for unlimited plans
    limit and remaining are None and the request is always allowed.

    Returns:
        Dict with resource_type, plan, allowed, used, limit, remaining
    """
    if resource_type not in SUPPORTED_RESOURCES:
        raise ValidationError(f"Invalid resource type: {resource_type}")
    if amount_needed is None or amount_needed < 0:
        raise ValidationError("Amount must not be negative")

    plan_type = get_plan_for_user(user)
    used = current_usage(db, user)[resource_type]
    limit = get_plan_limit(plan_type, resource_type)

    if limit is None:
        return {
            "resource_type": resource_type,
            "plan": plan_type,
            "allowed": True,
            "used": used,
            "limit": None,
            "remaining": None,
        }

    return {
        "resource_type": resource_type,
        "plan": plan_type,
        "allowed": used + amount_needed <= limit,
        "used": used,
        "limit": limit,
        "remaining": max(0, limit - used),
    }


def get_usage_for_response(db: Session, user: User) -> Dict:
    """
    Get usage data formatted for GET /usage/current.

    Returns:
        Dictionary with plan, month_key, period bounds and per-resource details
    """
    plan_type = get_plan_for_user(user)
    month_key = UsageLog.get_month_key()
    period_start, period_end = month_bounds(month_key)
    usage_dict = get_month_usage(db, user.id, month_key)

    resources = {}
    for resource in SUPPORTED_RESOURCES:
        limit = get_plan_limit(plan_type, resource)
        used = usage_dict.get(resource, 0)
        resources[resource] = {
            "limit": limit,
            "used": used,
            "remaining": None if limit is None else max(0, limit - used),
            "unlimited": limit is None,
        }

    return {
        "plan": plan_type,
        "month_key": month_key,
        "period_start": period_start,
        "period_end": period_end,
        "resources": resources,
    }


def usage_history(db: Session, user_id: str, period: str = "30d", now: Optional[datetime] = None) -> List[Dict]:
    """
    Daily per-resource totals over the last 1, 7 or 30 days (UTC), zero-filled.

    Raises:
        ValidationError: Unknown period
    """
    if period not in HISTORY_PERIODS:
        raise ValidationError(f"Invalid period: {period}. Use one of {', '.join(HISTORY_PERIODS)}")

    now = now or datetime.utcnow()
    days = HISTORY_PERIODS[period]
    first_day = (now - timedelta(days=days - 1)).replace(hour=0, minute=0, second=0, microsecond=0)

    rows = db.query(UsageLog.resource_type, UsageLog.amount, UsageLog.created_at).filter(
        and_(
            UsageLog.user_id == user_id,
            UsageLog.created_at >= first_day
        )
    ).all()

    buckets: Dict[str, Dict[str, int]] = defaultdict(lambda: {r: 0 for r in SUPPORTED_RESOURCES})
    for resource_type, amount, created_at in rows:
        buckets[created_at.strftime("%Y-%m-%d")][resource_type] += amount

    history = []
    for offset in range(days):
        day = (first_day + timedelta(days=offset)).strftime("%Y-%m-%d")
        history.append({"date": day, **buckets[day]})
    return history


def usage_analytics(db: Session, user: User, months: int = 6) -> Dict:
    """
    Monthly totals per resource, content-type breakdown of the user's
    projects and generation counts.
    """
    if months < 1 or months > MAX_ANALYTICS_MONTHS:
        raise ValidationError(f"months must be between 1 and {MAX_ANALYTICS_MONTHS}")

    month_keys = previous_month_keys(months)
    rows = db.query(
        UsageLog.month_key,
        UsageLog.resource_type,
        func.sum(UsageLog.amount).label('total')
    ).filter(
        and_(
            UsageLog.user_id == user.id,
            UsageLog.month_key.in_(month_keys)
        )
    ).group_by(UsageLog.month_key, UsageLog.resource_type).all()

    monthly = {key: {r: 0 for r in SUPPORTED_RESOURCES} for key in month_keys}
    for month_key, resource_type, total in rows:
        monthly[month_key][resource_type] = int(total or 0)

    type_rows = db.query(
        Project.content_type,
        func.count(Project.id),
        func.coalesce(func.sum(Project.word_count), 0)
    ).join(Workspace, Project.workspace_id == Workspace.id).filter(
        Workspace.owner_id == user.id
    ).group_by(Project.content_type).all()

    content_types = {}
    for content_type, count, total_words in type_rows:
        total_words = int(total_words or 0)
        content_types[content_type] = {
            "count": count,
            "total_words": total_words,
            "avg_words": round(total_words / count) if count else 0,
        }

    generation_rows = db.query(
        GeneratedContent.kind,
        func.count(GeneratedContent.id)
    ).filter(GeneratedContent.user_id == user.id).group_by(GeneratedContent.kind).all()

    return {
        "plan": get_plan_for_user(user),
        "months": [{"month_key": key, **monthly[key]} for key in month_keys],
        "content_types": content_types,
        "generations": {kind: count for kind, count in generation_rows},
    }
