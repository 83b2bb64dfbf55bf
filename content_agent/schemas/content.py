"""
Pydantic schemas for content generation endpoints.
"""
from typing import Optional, List, Dict, Any
from datetime import datetime
from pydantic import BaseModel, Field, field_validator

IMAGE_STYLE_PATTERN = "^(natural|photographic|digital_art|illustration|abstract)$"


def _strip_prompt(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("Prompt is required")
    return v


class TextGenerationParams(BaseModel):
    model: Optional[str] = Field(None, description="Provider model override")
    max_tokens: int = Field(1000, ge=1, le=4000)
    temperature: float = Field(0.7, ge=0.0, le=2.0)


class TextGenerationRequest(BaseModel):
    type: Optional[str] = Field(None, description="Content type; unknown types use a generic instruction")
    prompt: str = Field(..., min_length=1, max_length=8000)
    project_id: Optional[str] = None
    params: TextGenerationParams = Field(default_factory=TextGenerationParams)

    @field_validator("prompt")
    @classmethod
    def strip_prompt(cls, v: str) -> str:
        return _strip_prompt(v)

    class Config:
        json_schema_extra = {
            "example": {
                "type": "article",
                "prompt": "Write an introduction to solar power for homeowners",
                "params": {"max_tokens": 800, "temperature": 0.7}
            }
        }


class TokenUsage(BaseModel):
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class TextGenerationResponse(BaseModel):
    id: str = Field(..., description="Generated content history ID")
    content: str
    word_count: int
    tokens_used: int
    type: Optional[str] = None
    model_used: str
    project_id: Optional[str] = None
    usage: TokenUsage

    class Config:
        protected_namespaces = ()


class ImageGenerationParams(BaseModel):
    model: Optional[str] = None
    size: str = Field("1024x1024", pattern="^(256x256|512x512|1024x1024|1792x1024|1024x1792)$")
    quality: str = Field("standard", pattern="^(standard|hd)$")


class ImageGenerationRequest(BaseModel):
    prompt: str = Field(..., min_length=1, max_length=4000)
    style: str = Field("natural", pattern=IMAGE_STYLE_PATTERN)
    project_id: Optional[str] = None
    params: ImageGenerationParams = Field(default_factory=ImageGenerationParams)

    @field_validator("prompt")
    @classmethod
    def strip_prompt(cls, v: str) -> str:
        return _strip_prompt(v)


class ImageGenerationResponse(BaseModel):
    id: str
    image_url: str
    prompt: str = Field(..., description="Prompt after style enhancement")
    original_prompt: str
    style: str
    model_used: str
    size: str
    project_id: Optional[str] = None

    class Config:
        protected_namespaces = ()


class GeneratedContentResponse(BaseModel):
    id: str
    kind: str
    content_type: Optional[str] = None
    prompt: str
    content: Optional[str] = None
    image_url: Optional[str] = None
    style: Optional[str] = None
    word_count: int
    tokens_used: int
    model: Optional[str] = None
    project_id: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class GeneratedContentListResponse(BaseModel):
    items: List[GeneratedContentResponse]
    total: int
    page: int = 1
    page_size: int = 20


class ContentTemplate(BaseModel):
    id: str
    title: str
    description: str
    type: str
    prompt_template: str


class SeoAnalysisRequest(BaseModel):
    content: str = Field(..., min_length=1, max_length=20000)
    target_keywords: List[str] = Field(default_factory=list)


class SeoAnalysisResponse(BaseModel):
    seo_score: int = Field(..., ge=0, le=100)
    keyword_density: Dict[str, float] = Field(default_factory=dict)
    suggestions: List[str] = Field(default_factory=list)
    missing_elements: List[str] = Field(default_factory=list)
    analysis: Optional[str] = Field(None, description="Raw analysis text when the provider did not return JSON")
