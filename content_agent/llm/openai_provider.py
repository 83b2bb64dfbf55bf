"""
OpenAI provider implementation.
"""
import logging
from typing import Optional, Dict
from openai import OpenAI, APIError

from content_agent.core.config import OPENAI_API_KEY, OPENAI_TIMEOUT_SECONDS
from content_agent.llm.provider import LLMProvider, LLMResponse, ImageResponse, ProviderError

logger = logging.getLogger(__name__)

# Model pricing per 1M tokens (input/output)
MODEL_PRICING = {
    "gpt-4o-mini": {"input": 0.15, "output": 0.60},
    "gpt-4o": {"input": 2.50, "output": 10.00},
    "gpt-3.5-turbo": {"input": 0.50, "output": 1.50},
}


class OpenAIProvider(LLMProvider):
    """OpenAI provider using the official OpenAI SDK."""

    name = "openai"

    def __init__(self, api_key: Optional[str] = None, timeout: float = OPENAI_TIMEOUT_SECONDS):
        self.api_key = api_key or OPENAI_API_KEY
        if not self.api_key:
            raise ValueError("OPENAI_API_KEY not configured")
        # No retries: a failed upstream call is surfaced immediately
        self.client = OpenAI(api_key=self.api_key, timeout=timeout, max_retries=0)
        logger.info("OpenAI provider initialized")

    def chat(
        self,
        messages: list[Dict[str, str]],
        model: str = "gpt-4o-mini",
        temperature: float = 0.7,
        max_tokens: Optional[int] = None,
        **kwargs
    ) -> LLMResponse:
        """Generate a chat completion."""
        try:
            response = self.client.chat.completions.create(
                model=model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens or 1000,
                **kwargs
            )
        except APIError as e:
            logger.error(f"OpenAI API error: {type(e).__name__}: {e}", exc_info=True)
            raise ProviderError(str(e)) from e

        content = response.choices[0].message.content or ""
        tokens_in = response.usage.prompt_tokens if response.usage else 0
        tokens_out = response.usage.completion_tokens if response.usage else 0

        return LLMResponse(
            content=content,
            tokens_in=tokens_in,
            tokens_out=tokens_out,
            model=model,
            cost_estimate=self.estimate_cost(tokens_in, tokens_out, model),
            metadata={
                "finish_reason": response.choices[0].finish_reason,
            }
        )

    def generate_image(
        self,
        prompt: str,
        model: str = "dall-e-3",
        size: str = "1024x1024",
        quality: str = "standard",
        **kwargs
    ) -> ImageResponse:
        """Generate one image with the images API."""
        try:
            response = self.client.images.generate(
                model=model,
                prompt=prompt,
                size=size,
                quality=quality,
                n=1,
                **kwargs
            )
        except APIError as e:
            logger.error(f"OpenAI image API error: {type(e).__name__}: {e}", exc_info=True)
            raise ProviderError(str(e)) from e

        image = response.data[0]
        return ImageResponse(
            url=image.url,
            model=model,
            revised_prompt=getattr(image, "revised_prompt", None),
        )

    def estimate_cost(self, tokens_in: int, tokens_out: int, model: str) -> float:
        """Estimate cost in USD."""
        pricing = MODEL_PRICING.get(model, MODEL_PRICING["gpt-4o-mini"])
        cost_input = (tokens_in / 1_000_000) * pricing["input"]
        cost_output = (tokens_out / 1_000_000) * pricing["output"]
        return cost_input + cost_output
