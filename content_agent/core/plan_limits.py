"""
Plan-based usage limits configuration.

Single source of truth for monthly quota limits per plan.
None means unlimited quota for that resource.
"""
from typing import Dict, Optional, List

SUPPORTED_PLANS: List[str] = ["free", "pro", "enterprise"]

# Metered resources
SUPPORTED_RESOURCES: List[str] = [
    "words",
    "images",
    "video_minutes",
]

# Plan limits (per calendar month)
PLAN_LIMITS: Dict[str, Dict[str, Optional[int]]] = {
    "free": {
        "words": 10000,
        "images": 50,
        "video_minutes": 10,
    },
    "pro": {
        "words": 50000,
        "images": 500,
        "video_minutes": 100,
    },
    "enterprise": {
        "words": None,  # Unlimited
        "images": None,
        "video_minutes": None,
    },
}

# Maximum number of workspaces a user may own
WORKSPACE_LIMITS: Dict[str, Optional[int]] = {
    "free": 3,
    "pro": 10,
    "enterprise": None,
}


def normalize_plan(plan_type: Optional[str]) -> str:
    plan_type = plan_type.lower() if plan_type else "free"
    return plan_type if plan_type in PLAN_LIMITS else "free"


def get_plan_limit(plan_type: str, resource: str) -> Optional[int]:
    """
    Get the monthly limit for a resource in a given plan.

    Args:
        plan_type: Plan type (free, pro, enterprise)
        resource: Resource name (words, images, video_minutes)

    Returns:
        Monthly limit (int) or None for unlimited
    """
    return PLAN_LIMITS[normalize_plan(plan_type)].get(resource)


def has_unlimited_quota(plan_type: str, resource: str) -> bool:
    """Check if the plan has unlimited quota for a resource."""
    return get_plan_limit(plan_type, resource) is None


def get_workspace_limit(plan_type: str) -> Optional[int]:
    return WORKSPACE_LIMITS[normalize_plan(plan_type)]
