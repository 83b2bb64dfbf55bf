"""
Mock provider used when no API key is configured or AI_MOCK_MODE=1.

Text is synthesized deterministically from per-content-type templates; a
random delay simulates upstream latency.
"""
import logging
import random
import time
from typing import Callable, Dict, Optional
from urllib.parse import quote_plus

from content_agent.core.config import MOCK_DELAY_MIN_SECONDS, MOCK_DELAY_MAX_SECONDS
from content_agent.llm.prompts import content_type_for_system_prompt, SEO_ANALYSIS_SYSTEM_PROMPT
from content_agent.llm.provider import LLMProvider, LLMResponse, ImageResponse

logger = logging.getLogger(__name__)

MOCK_TEMPLATES: Dict[str, str] = {
    "article": (
        "# {topic}\n\n"
        "## Introduction\n\n"
        "{topic} is reshaping how teams plan, write and publish. This article walks through "
        "the essentials and what they mean for you.\n\n"
        "## Key Points\n\n"
        "First, start with a clear goal. Second, measure what matters. Third, iterate on "
        "feedback from real readers.\n\n"
        "## Conclusion\n\n"
        "With a focused plan, {topic} becomes a practical advantage rather than a buzzword."
    ),
    "social_post": (
        "Big news about {topic}! We have been digging in and the results speak for "
        "themselves. What is your take? Share below. #content #growth"
    ),
    "video_script": (
        "[SCENE 1 - HOOK]\n"
        "HOST: Ever wondered how {topic} actually works?\n\n"
        "[SCENE 2 - EXPLAINER]\n"
        "HOST: Here are the three things you need to know.\n\n"
        "[SCENE 3 - CALL TO ACTION]\n"
        "HOST: Subscribe for more on {topic}."
    ),
    "email": (
        "Subject: Everything you need to know about {topic}\n\n"
        "Hi there,\n\n"
        "We put together a short guide on {topic} to help you get started this week.\n\n"
        "Read the guide and let us know what you think.\n\n"
        "Best regards,\nThe Team"
    ),
    "seo_content": (
        "{topic}: A Complete Guide\n\n"
        "Looking for reliable information on {topic}? This guide covers the basics, "
        "common questions and proven best practices for {topic}."
    ),
}

DEFAULT_TEMPLATE = "Here is some content about {topic}. It is clear, concise and ready to edit."

MOCK_SEO_RESPONSE = (
    '{"seo_score": 72, '
    '"suggestions": ["Add the primary keyword to the first paragraph", "Use descriptive subheadings"], '
    '"missing_elements": ["meta description"]}'
)


def _estimate_tokens(text: str) -> int:
    # Roughly 4 tokens per 3 words
    return max(1, round(len(text.split()) * 4 / 3)) if text.strip() else 0


class MockProvider(LLMProvider):
    """Deterministic offline provider."""

    name = "mock"

    def __init__(
        self,
        delay_min: float = MOCK_DELAY_MIN_SECONDS,
        delay_max: float = MOCK_DELAY_MAX_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.delay_min = max(0.0, delay_min)
        self.delay_max = max(self.delay_min, delay_max)
        self._sleep = sleep
        logger.info(f"Mock provider initialized (delay {self.delay_min}-{self.delay_max}s)")

    def _simulate_latency(self) -> None:
        if self.delay_max > 0:
            self._sleep(random.uniform(self.delay_min, self.delay_max))

    def chat(
        self,
        messages: list[Dict[str, str]],
        model: str = "mock-text",
        temperature: float = 0.7,
        max_tokens: Optional[int] = None,
        **kwargs
    ) -> LLMResponse:
        self._simulate_latency()

        system_prompt = next((m["content"] for m in messages if m["role"] == "system"), "")
        user_prompt = next((m["content"] for m in reversed(messages) if m["role"] == "user"), "")

        if system_prompt == SEO_ANALYSIS_SYSTEM_PROMPT:
            content = MOCK_SEO_RESPONSE
        else:
            content_type = content_type_for_system_prompt(system_prompt)
            template = MOCK_TEMPLATES.get(content_type, DEFAULT_TEMPLATE)
            content = template.format(topic=user_prompt.strip().rstrip("."))

        prompt_text = " ".join(m["content"] for m in messages)
        return LLMResponse(
            content=content,
            tokens_in=_estimate_tokens(prompt_text),
            tokens_out=_estimate_tokens(content),
            model=model,
            metadata={"finish_reason": "stop", "mock": True},
        )

    def generate_image(
        self,
        prompt: str,
        model: str = "mock-image",
        size: str = "1024x1024",
        quality: str = "standard",
        **kwargs
    ) -> ImageResponse:
        self._simulate_latency()
        return ImageResponse(
            url=f"https://placehold.co/{size}?text={quote_plus(prompt[:60])}",
            model=model,
            revised_prompt=prompt,
            metadata={"mock": True},
        )
