"""
Content generation service.

Paid calls follow one order: resolve and authorize the target project,
check quota, call the provider, then record usage, history and the
project update in a single commit. A rejected request never reaches the
provider and never writes a usage entry.
"""
import json
import logging
import re
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from content_agent.core.exceptions import Forbidden, NotFound, UpstreamError, ValidationError
from content_agent.core.quota_guard import require_quota
from content_agent.db.models.generated_content import GeneratedContent
from content_agent.db.models.user import User
from content_agent.llm.prompts import (
    STYLE_SUFFIXES,
    SEO_ANALYSIS_SYSTEM_PROMPT,
    build_seo_prompt,
    enhance_image_prompt,
    get_system_prompt,
)
from content_agent.llm.provider import LLMProvider, ProviderError
from content_agent.llm.router import get_image_model, get_text_model
from content_agent.services import usage_service
from content_agent.services.project_service import (
    append_generated_image,
    apply_generated_text,
    count_words,
    get_owned_project,
)

logger = logging.getLogger(__name__)

SEO_MODEL = "gpt-3.5-turbo"
SEO_FALLBACK_SCORE = 75


def generate_text(
    db: Session,
    user: User,
    provider: LLMProvider,
    prompt: str,
    content_type: Optional[str] = None,
    project_id: Optional[str] = None,
    model: Optional[str] = None,
    max_tokens: int = 1000,
    temperature: float = 0.7,
) -> Dict[str, Any]:
    """
    Generate text and meter the words produced.

    Raises:
        ValidationError: Empty prompt
        NotFound / Forbidden: project_id does not resolve to a project the caller owns
        QuotaExceeded: No word quota left
        UpstreamError: Provider call failed
    """
    prompt = (prompt or "").strip()
    if not prompt:
        raise ValidationError("Prompt is required")

    project = get_owned_project(db, user, project_id) if project_id else None
    require_quota(db, user, "words", 1)

    model_name = get_text_model(content_type, usage_service.get_plan_for_user(user), model)
    messages = [
        {"role": "system", "content": get_system_prompt(content_type)},
        {"role": "user", "content": prompt},
    ]

    try:
        response = provider.chat(
            messages=messages,
            model=model_name,
            temperature=temperature,
            max_tokens=max_tokens,
        )
    except ProviderError as e:
        logger.error(f"Text generation failed: user_id={user.id}, model={model_name}, error={e}")
        raise UpstreamError()

    content = response.content
    word_count = count_words(content)

    if word_count > 0:
        usage_service.log_usage(db, user.id, "words", word_count, project_id=project_id, commit=False)

    record = GeneratedContent(
        user_id=user.id,
        project_id=project_id,
        kind="text",
        content_type=content_type,
        prompt=prompt,
        content=content,
        word_count=word_count,
        tokens_used=response.total_tokens,
        model=response.model or model_name,
    )
    db.add(record)

    if project is not None:
        apply_generated_text(project, content)

    db.commit()
    db.refresh(record)

    logger.info(
        f"Text generated: user_id={user.id}, content_type={content_type}, model={record.model}, "
        f"words={word_count}, tokens={response.total_tokens}, project_id={project_id}"
    )

    return {
        "id": record.id,
        "content": content,
        "word_count": word_count,
        "tokens_used": response.total_tokens,
        "type": content_type,
        "model_used": record.model,
        "project_id": project_id,
        "usage": {
            "prompt_tokens": response.tokens_in,
            "completion_tokens": response.tokens_out,
            "total_tokens": response.total_tokens,
        },
    }


def generate_image(
    db: Session,
    user: User,
    provider: LLMProvider,
    prompt: str,
    style: str = "natural",
    project_id: Optional[str] = None,
    model: Optional[str] = None,
    size: str = "1024x1024",
    quality: str = "standard",
) -> Dict[str, Any]:
    """
    Generate one image and meter it against the images quota.

    Raises:
        ValidationError: Empty prompt or unknown style
        NotFound / Forbidden: project_id does not resolve to a project the caller owns
        QuotaExceeded: No image quota left
        UpstreamError: Provider call failed
    """
    prompt = (prompt or "").strip()
    if not prompt:
        raise ValidationError("Prompt is required")
    if style not in STYLE_SUFFIXES:
        raise ValidationError(f"Unknown style: {style}", details={"styles": list(STYLE_SUFFIXES)})

    project = get_owned_project(db, user, project_id) if project_id else None
    require_quota(db, user, "images", 1)

    enhanced_prompt = enhance_image_prompt(prompt, style)
    model_name = get_image_model(model)

    try:
        image = provider.generate_image(
            prompt=enhanced_prompt,
            model=model_name,
            size=size,
            quality=quality,
        )
    except ProviderError as e:
        logger.error(f"Image generation failed: user_id={user.id}, model={model_name}, error={e}")
        raise UpstreamError()

    usage_service.log_usage(db, user.id, "images", 1, project_id=project_id, commit=False)

    record = GeneratedContent(
        user_id=user.id,
        project_id=project_id,
        kind="image",
        prompt=enhanced_prompt,
        image_url=image.url,
        style=style,
        model=image.model or model_name,
    )
    db.add(record)

    if project is not None:
        append_generated_image(project, image.url)

    db.commit()
    db.refresh(record)

    logger.info(
        f"Image generated: user_id={user.id}, style={style}, model={record.model}, project_id={project_id}"
    )

    return {
        "id": record.id,
        "image_url": image.url,
        "prompt": enhanced_prompt,
        "original_prompt": prompt,
        "style": style,
        "model_used": record.model,
        "size": size,
        "project_id": project_id,
    }


def list_history(
    db: Session,
    user: User,
    kind: Optional[str] = None,
    page: int = 1,
    page_size: int = 20,
) -> Tuple[List[GeneratedContent], int]:
    """Caller's generations, newest first, paginated."""
    query = db.query(GeneratedContent).filter(GeneratedContent.user_id == user.id)
    if kind:
        query = query.filter(GeneratedContent.kind == kind)

    total = query.count()
    items = query.order_by(
        GeneratedContent.created_at.desc()
    ).offset((page - 1) * page_size).limit(page_size).all()
    return items, total


def get_content(db: Session, user: User, content_id: str) -> GeneratedContent:
    record = db.query(GeneratedContent).filter(GeneratedContent.id == content_id).first()
    if not record:
        raise NotFound("Content not found")
    if record.user_id != user.id:
        raise Forbidden("Access denied to this content")
    return record


def delete_content(db: Session, user: User, content_id: str) -> None:
    """Removes the history entry only; usage already logged stays."""
    record = get_content(db, user, content_id)
    db.delete(record)
    db.commit()
    logger.info(f"Generated content deleted: content_id={content_id}, user_id={user.id}")


def keyword_density(content: str, keywords: List[str]) -> Dict[str, float]:
    """Occurrences of each keyword per 100 words, case-insensitive."""
    total_words = count_words(content)
    if total_words == 0:
        return {keyword: 0.0 for keyword in keywords}

    lowered = content.lower()
    density = {}
    for keyword in keywords:
        keyword = keyword.strip()
        if not keyword:
            continue
        occurrences = len(re.findall(r"\b" + re.escape(keyword.lower()) + r"\b", lowered))
        density[keyword] = round(occurrences * 100 / total_words, 2)
    return density


def _coerce_score(value: Any) -> int:
    try:
        return max(0, min(100, int(value)))
    except (TypeError, ValueError):
        return SEO_FALLBACK_SCORE


def analyze_seo(user: User, provider: LLMProvider, content: str, target_keywords: List[str]) -> Dict[str, Any]:
    """
    Ask the provider for an SEO review; keyword density is computed locally.

    Falls back to the raw text when the provider does not answer with JSON.
    """
    content = (content or "").strip()
    if not content:
        raise ValidationError("Content is required")

    messages = [
        {"role": "system", "content": SEO_ANALYSIS_SYSTEM_PROMPT},
        {"role": "user", "content": build_seo_prompt(content, target_keywords)},
    ]
    try:
        response = provider.chat(messages=messages, model=SEO_MODEL, temperature=0.3, max_tokens=800)
    except ProviderError as e:
        logger.error(f"SEO analysis failed: user_id={user.id}, error={e}")
        raise UpstreamError()

    density = keyword_density(content, target_keywords)
    try:
        parsed = json.loads(response.content)
        if not isinstance(parsed, dict):
            raise ValueError("SEO analysis is not a JSON object")
    except ValueError:
        logger.info(f"SEO analysis returned non-JSON text: user_id={user.id}")
        return {
            "seo_score": SEO_FALLBACK_SCORE,
            "keyword_density": density,
            "suggestions": ["Review the detailed analysis provided"],
            "missing_elements": [],
            "analysis": response.content,
        }

    return {
        "seo_score": _coerce_score(parsed.get("seo_score")),
        "keyword_density": density,
        "suggestions": [str(s) for s in parsed.get("suggestions") or []],
        "missing_elements": [str(m) for m in parsed.get("missing_elements") or []],
        "analysis": None,
    }
