"""
Quota enforcement for paid operations.

Callers run require_quota() before calling the generation provider; it
never records usage itself.
"""
import logging
from sqlalchemy.orm import Session

from content_agent.core.exceptions import QuotaExceeded
from content_agent.db.models.user import User
from content_agent.services.usage_service import check_limit

logger = logging.getLogger(__name__)


def require_quota(db: Session, user: User, resource_type: str, amount: int = 1) -> dict:
    """
    Ensure `amount` more units of resource_type fit in the user's monthly quota.

    Returns:
        The check_limit() result when allowed

    Raises:
        QuotaExceeded: 429 with structured details (resource, plan, limit, used, remaining)
    """
    result = check_limit(db, user, resource_type, amount)

    if not result["allowed"]:
        logger.warning(
            f"Quota exceeded: user_id={user.id}, resource={resource_type}, "
            f"plan={result['plan']}, limit={result['limit']}, used={result['used']}"
        )
        raise QuotaExceeded(
            f"You have reached your monthly {resource_type} limit of {result['limit']}. "
            f"Upgrade your plan for more quota.",
            details={
                "resource_type": resource_type,
                "plan": result["plan"],
                "limit": result["limit"],
                "used": result["used"],
                "remaining": result["remaining"],
            },
        )

    logger.debug(
        f"Quota check passed: user_id={user.id}, resource={resource_type}, amount={amount}, "
        f"remaining={result['remaining'] if result['limit'] is not None else 'unlimited'}"
    )
    return result
