"""
Provider and model selection.
"""
import logging
from typing import Optional

from content_agent.core import config
from content_agent.llm.provider import LLMProvider

logger = logging.getLogger(__name__)

# Models a caller may request through params.model
ALLOWED_TEXT_MODELS = {"gpt-4o-mini", "gpt-4o", "gpt-3.5-turbo"}
ALLOWED_IMAGE_MODELS = {"dall-e-2", "dall-e-3"}

# Paid plans get the stronger model by default for long-form content
PREMIUM_TEXT_MODEL = "gpt-4o"
LONG_FORM_TYPES = {"article", "seo_content", "video_script"}


def get_text_model(content_type: Optional[str], plan: str = "free", requested: Optional[str] = None) -> str:
    """
    Pick the chat model for a request.

    Args:
        content_type: Content type of the request
        plan: User's effective plan
        requested: Model explicitly requested by the caller, if any

    Returns:
        Model identifier string
    """
    if requested:
        if requested in ALLOWED_TEXT_MODELS:
            return requested
        logger.warning(f"Ignoring unsupported text model request: {requested}")

    if plan in ("pro", "enterprise") and content_type in LONG_FORM_TYPES:
        return PREMIUM_TEXT_MODEL
    return config.OPENAI_TEXT_MODEL


def get_image_model(requested: Optional[str] = None) -> str:
    if requested in ALLOWED_IMAGE_MODELS:
        return requested
    return config.OPENAI_IMAGE_MODEL


def build_provider() -> LLMProvider:
    """Build the configured provider: OpenAI when a key is set, the mock otherwise."""
    if config.AI_MOCK_MODE:
        from content_agent.llm.mock_provider import MockProvider
        logger.info("AI mock mode enabled - generation is simulated")
        return MockProvider()

    from content_agent.llm.openai_provider import OpenAIProvider
    return OpenAIProvider()
