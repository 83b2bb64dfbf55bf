"""
Pydantic schemas for usage endpoints.
"""
from typing import Optional, List, Dict
from datetime import datetime
from pydantic import BaseModel, Field

RESOURCE_PATTERN = "^(words|images|video_minutes)$"


class ResourceUsageDetail(BaseModel):
    """Usage details for a single metered resource."""
    limit: Optional[int] = Field(None, description="Monthly limit (None for unlimited)")
    used: int = Field(..., description="Current month usage")
    remaining: Optional[int] = Field(None, description="Remaining quota (None for unlimited)")
    unlimited: bool = Field(..., description="Whether this resource has unlimited quota")


class UsageResponse(BaseModel):
    """Response schema for GET /usage/current."""
    plan: str = Field(..., description="Effective plan (free, pro, enterprise)")
    month_key: str = Field(..., description="Current month in YYYY-MM format")
    period_start: datetime
    period_end: datetime
    resources: Dict[str, ResourceUsageDetail]

    class Config:
        json_schema_extra = {
            "example": {
                "plan": "free",
                "month_key": "2026-10",
                "period_start": "2026-10-01T00:00:00",
                "period_end": "2026-11-01T00:00:00",
                "resources": {
                    "words": {"limit": 10000, "used": 1250, "remaining": 8750, "unlimited": False},
                    "images": {"limit": 50, "used": 3, "remaining": 47, "unlimited": False},
                    "video_minutes": {"limit": 10, "used": 0, "remaining": 10, "unlimited": False}
                }
            }
        }


class UsageLogRequest(BaseModel):
    resource_type: str = Field(..., pattern=RESOURCE_PATTERN)
    amount: int = Field(..., gt=0, description="Amount consumed")
    project_id: Optional[str] = None


class UsageLogResponse(BaseModel):
    id: str
    user_id: str
    resource_type: str
    amount: int
    project_id: Optional[str] = None
    month_key: str
    created_at: datetime

    class Config:
        from_attributes = True


class CheckLimitRequest(BaseModel):
    resource_type: str = Field(..., pattern=RESOURCE_PATTERN)
    amount: int = Field(1, ge=0, description="Amount the caller is about to consume")


class CheckLimitResponse(BaseModel):
    resource_type: str
    plan: str
    allowed: bool
    used: int
    limit: Optional[int] = None
    remaining: Optional[int] = None

    class Config:
        json_schema_extra = {
            "example": {
                "resource_type": "words",
                "plan": "free",
                "allowed": False,
                "used": 9800,
                "limit": 10000,
                "remaining": 200
            }
        }


class DailyUsage(BaseModel):
    date: str = Field(..., description="UTC day in YYYY-MM-DD format")
    words: int = 0
    images: int = 0
    video_minutes: int = 0


class UsageHistoryResponse(BaseModel):
    period: str
    days: List[DailyUsage]


class MonthlyUsage(BaseModel):
    month_key: str
    words: int = 0
    images: int = 0
    video_minutes: int = 0


class ContentTypeBreakdown(BaseModel):
    count: int
    total_words: int
    avg_words: int


class UsageAnalyticsResponse(BaseModel):
    plan: str
    months: List[MonthlyUsage]
    content_types: Dict[str, ContentTypeBreakdown]
    generations: Dict[str, int] = Field(default_factory=dict, description="Generation count by kind (text, image)")
