"""
Pydantic schemas for workspace endpoints.
"""
from typing import Optional, Dict, List
from datetime import datetime
from pydantic import BaseModel, Field, field_validator

from content_agent.schemas.project import ProjectResponse

PLAN_TYPE_PATTERN = "^(personal|team|enterprise)$"


def _strip_name(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("Workspace name is required")
    return v


class WorkspaceCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=120, description="Workspace name")
    plan_type: str = Field("personal", pattern=PLAN_TYPE_PATTERN, description="Workspace plan type")

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return _strip_name(v)


class WorkspaceUpdate(BaseModel):
    """Explicit patch for a workspace: only name and plan_type are mutable."""
    name: Optional[str] = Field(None, min_length=1, max_length=120)
    plan_type: Optional[str] = Field(None, pattern=PLAN_TYPE_PATTERN)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: Optional[str]) -> Optional[str]:
        return _strip_name(v) if v is not None else v

    class Config:
        extra = "ignore"


class WorkspaceResponse(BaseModel):
    id: str
    name: str
    owner_id: str
    plan_type: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class WorkspaceSummary(WorkspaceResponse):
    """Workspace as listed: with project count and latest activity."""
    project_count: int = 0
    recent_activity: datetime


class WorkspaceDetail(WorkspaceResponse):
    project_count: int = 0
    projects: List[ProjectResponse] = Field(default_factory=list, description="Latest 10 projects")
    total_words: int = 0
    content_types: List[str] = Field(default_factory=list)


class WorkspaceStats(BaseModel):
    total_projects: int
    total_words: int
    completed_projects: int
    in_progress_projects: int
    draft_projects: int
    content_types: Dict[str, int] = Field(default_factory=dict)
    recent_activity: int = Field(..., description="Projects updated in the last 7 days")

    class Config:
        json_schema_extra = {
            "example": {
                "total_projects": 3,
                "total_words": 2150,
                "completed_projects": 1,
                "in_progress_projects": 1,
                "draft_projects": 1,
                "content_types": {"article": 2, "email": 1},
                "recent_activity": 2
            }
        }
