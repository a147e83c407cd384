"""
Base LLM Provider

Abstract base class for LLM providers.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional, Union


@dataclass
class LLMMessage:
    """
    Message for LLM conversation.

    content is plain text, or a list of content parts for multimodal input
    ({"type": "text"}, {"type": "image_url"}, {"type": "input_audio"}).
    """
    role: str  # "system", "user", "assistant"
    content: Union[str, List[dict]]


@dataclass
class LLMResponse:
    """Response from LLM"""
    content: str
    model: str
    tokens_used: int = 0
    finish_reason: str = "stop"

    @property
    def is_error(self) -> bool:
        return self.finish_reason in ("error", "timeout")


class BaseLLMProvider(ABC):
    """
    Abstract base class for LLM providers.

    Implementations:
    - LiteLLMProvider: OpenAI-compatible proxy (LiteLLM) in front of hosted models
    """

    @abstractmethod
    async def generate(
        self,
        messages: List[LLMMessage],
        model: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: int = 2048
    ) -> LLMResponse:
        """
        Generate a response from the LLM.

        Args:
            messages: Conversation history
            model: Model name (uses default if not specified)
            temperature: Sampling temperature
            max_tokens: Maximum tokens in response

        Returns:
            LLMResponse with generated text
        """
        pass
