"""
Content generation endpoints.

Text and image generation are metered against the caller's monthly quota.
"""
import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from content_agent.core.auth_dependency import get_db, get_current_user, get_llm_provider
from content_agent.core.exceptions import AppError, InternalError
from content_agent.db.models.user import User
from content_agent.llm.prompts import CONTENT_TEMPLATES
from content_agent.llm.provider import LLMProvider
from content_agent.schemas.content import (
    TextGenerationRequest,
    TextGenerationResponse,
    ImageGenerationRequest,
    ImageGenerationResponse,
    GeneratedContentResponse,
    GeneratedContentListResponse,
    ContentTemplate,
    SeoAnalysisRequest,
    SeoAnalysisResponse,
)
from content_agent.services import content_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/content", tags=["Content"])


@router.post("/generate-text", response_model=TextGenerationResponse)
def generate_text(
    request: TextGenerationRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    provider: LLMProvider = Depends(get_llm_provider)
):
    """
    Generate text for a content type.

    Checks the words quota first (429 when exhausted). When project_id is
    given the project's content is replaced and marked completed.
    """
    try:
        return content_service.generate_text(
            db,
            current_user,
            provider,
            prompt=request.prompt,
            content_type=request.type,
            project_id=request.project_id,
            model=request.params.model,
            max_tokens=request.params.max_tokens,
            temperature=request.params.temperature,
        )
    except AppError:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Text generation error: user_id={current_user.id}: {type(e).__name__}: {e}", exc_info=True)
        raise InternalError("Error generating content")


@router.post("/generate-image", response_model=ImageGenerationResponse)
def generate_image(
    request: ImageGenerationRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    provider: LLMProvider = Depends(get_llm_provider)
):
    try:
        return content_service.generate_image(
            db,
            current_user,
            provider,
            prompt=request.prompt,
            style=request.style,
            project_id=request.project_id,
            model=request.params.model,
            size=request.params.size,
            quality=request.params.quality,
        )
    except AppError:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Image generation error: user_id={current_user.id}: {type(e).__name__}: {e}", exc_info=True)
        raise InternalError("Error generating image")


@router.get("/templates", response_model=List[ContentTemplate])
def get_templates():
    """Static prompt templates. No authentication required."""
    return CONTENT_TEMPLATES


@router.post("/analyze-seo", response_model=SeoAnalysisResponse)
def analyze_seo(
    request: SeoAnalysisRequest,
    current_user: User = Depends(get_current_user),
    provider: LLMProvider = Depends(get_llm_provider)
):
    return content_service.analyze_seo(current_user, provider, request.content, request.target_keywords)


@router.get("/history", response_model=GeneratedContentListResponse)
def get_history(
    kind: Optional[str] = Query(None, pattern="^(text|image)$"),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Caller's generated content, newest first."""
    items, total = content_service.list_history(db, current_user, kind=kind, page=page, page_size=page_size)
    return {"items": items, "total": total, "page": page, "page_size": page_size}


@router.get("/{content_id}", response_model=GeneratedContentResponse)
def get_content(
    content_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return content_service.get_content(db, current_user, content_id)


@router.delete("/{content_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_content(
    content_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    content_service.delete_content(db, current_user, content_id)
    return None
