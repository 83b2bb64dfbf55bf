"""
LLM Provider interface for abstracting text and image generation backends.
"""
from abc import ABC, abstractmethod
from typing import Optional, Dict, Any
from dataclasses import dataclass, field


@dataclass
class LLMResponse:
    """Standardized text generation response."""
    content: str
    tokens_in: int = 0
    tokens_out: int = 0
    model: str = ""
    cost_estimate: float = 0.0
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def total_tokens(self) -> int:
        return self.tokens_in + self.tokens_out


@dataclass
class ImageResponse:
    """Standardized image generation response."""
    url: str
    model: str = ""
    revised_prompt: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)


class ProviderError(Exception):
    """Raised by providers when the upstream API call fails."""


class LLMProvider(ABC):
    """Abstract base class for generation providers."""

    name = "base"

    @abstractmethod
    def chat(
        self,
        messages: list[Dict[str, str]],
        model: str,
        temperature: float = 0.7,
        max_tokens: Optional[int] = None,
        **kwargs
    ) -> LLMResponse:
        """
        Generate a chat completion.

        Args:
            messages: List of message dicts with 'role' and 'content'
            model: Model identifier
            temperature: Sampling temperature
            max_tokens: Maximum tokens to generate
            **kwargs: Additional provider-specific parameters

        Returns:
            LLMResponse with content and token counters

        Raises:
            ProviderError: If the upstream call fails
        """
        pass

    @abstractmethod
    def generate_image(
        self,
        prompt: str,
        model: str,
        size: str = "1024x1024",
        quality: str = "standard",
        **kwargs
    ) -> ImageResponse:
        """
        Generate a single image and return its URL.

        Raises:
            ProviderError: If the upstream call fails
        """
        pass

    def estimate_cost(self, tokens_in: int, tokens_out: int, model: str) -> float:
        """Estimated cost in USD; providers override with actual pricing."""
        return 0.0
