"""
Pydantic schemas for project endpoints.
"""
from typing import Optional, Dict, Any, List
from datetime import datetime
from pydantic import AliasChoices, BaseModel, Field, field_validator

CONTENT_TYPE_PATTERN = "^(article|social_post|video_script|email|seo_content)$"
STATUS_PATTERN = "^(draft|in_progress|completed)$"


def _strip_title(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("Title is required")
    return v


class ProjectCreate(BaseModel):
    """Schema for creating a new project."""
    title: str = Field(..., min_length=1, max_length=255, description="Project title")
    content_type: str = Field(..., pattern=CONTENT_TYPE_PATTERN, description="Content type")
    content: str = Field("", description="Project content")
    status: str = Field("draft", pattern=STATUS_PATTERN, description="Project status")
    workspace_id: Optional[str] = Field(None, description="Target workspace (defaults to the user's first workspace)")
    metadata: Dict[str, Any] = Field(default_factory=dict, description="Free-form metadata")

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        return _strip_title(v)

    class Config:
        json_schema_extra = {
            "example": {
                "title": "Blog Post: AI Trends",
                "content_type": "article",
                "content": "",
                "metadata": {"tags": ["ai"]}
            }
        }


class ProjectUpdate(BaseModel):
    """
    Explicit patch for a project.

    Only these fields are mutable; id, created_by and created_at are not, and
    word_count is always derived from content.
    """
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    content_type: Optional[str] = Field(None, pattern=CONTENT_TYPE_PATTERN)
    content: Optional[str] = None
    status: Optional[str] = Field(None, pattern=STATUS_PATTERN)
    workspace_id: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: Optional[str]) -> Optional[str]:
        return _strip_title(v) if v is not None else v

    class Config:
        extra = "ignore"


class ProjectResponse(BaseModel):
    """Schema for project response."""
    id: str
    workspace_id: str
    title: str
    content_type: str
    content: str
    word_count: int
    status: str
    metadata: Dict[str, Any] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("project_metadata", "metadata"),
    )
    created_by: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ProjectListResponse(BaseModel):
    projects: List[ProjectResponse]
    total: int
