"""
LiteLLM Provider

Provider for an OpenAI-compatible LLM proxy (LiteLLM) serving hosted models.
"""
import logging
import httpx
from typing import List, Optional

from .base import BaseLLMProvider, LLMMessage, LLMResponse
from ...config import Config

logger = logging.getLogger("expocrm.llm.litellm")


class LiteLLMProvider(BaseLLMProvider):
    """
    LLM provider speaking the chat-completions wire format.

    Text, image (image_url parts) and audio (input_audio parts) requests all
    go to {base_url}/v1/chat/completions.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        default_model: Optional[str] = None,
        timeout: Optional[float] = None
    ):
        """
        Initialize provider.

        Args:
            base_url: Proxy base URL
            api_key: Bearer key for the proxy
            default_model: Default model to use
            timeout: Request timeout in seconds
        """
        self.base_url = (base_url or Config.LLM_BASE_URL).rstrip("/")
        self.api_key = api_key if api_key is not None else Config.LLM_API_KEY
        self.default_model = default_model or Config.DEFAULT_MODEL
        self.timeout = timeout or Config.LLM_TIMEOUT

        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        timeout_config = httpx.Timeout(self.timeout, connect=30.0)
        self.client = httpx.AsyncClient(timeout=timeout_config, headers=headers)
        logger.info(f"LiteLLMProvider initialized: base_url={self.base_url}, model={self.default_model}")

    async def generate(
        self,
        messages: List[LLMMessage],
        model: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: int = 2048
    ) -> LLMResponse:
        """Generate response using the chat-completions endpoint"""
        model_name = model or self.default_model
        logger.info(f"Generating with model={model_name}, messages={len(messages)}, max_tokens={max_tokens}")

        formatted_messages = [
            {"role": msg.role, "content": msg.content}
            for msg in messages
        ]

        try:
            response = await self.client.post(
                f"{self.base_url}/v1/chat/completions",
                json={
                    "model": model_name,
                    "messages": formatted_messages,
                    "temperature": temperature,
                    "max_tokens": max_tokens
                }
            )

            if response.status_code == 200:
                data = response.json()
                choice = (data.get("choices") or [{}])[0]
                return LLMResponse(
                    content=choice.get("message", {}).get("content") or "",
                    model=data.get("model", model_name),
                    tokens_used=(data.get("usage") or {}).get("total_tokens", 0),
                    finish_reason=choice.get("finish_reason") or "stop"
                )

            logger.error(f"LLM request failed: {response.status_code} - {response.text}")
            return LLMResponse(
                content=f"[Error: LLM request failed with status {response.status_code}]",
                model=model_name,
                finish_reason="error"
            )

        except httpx.TimeoutException:
            logger.error(f"LLM request timed out after {self.timeout}s")
            return LLMResponse(
                content="[Error: Request timed out]",
                model=model_name,
                finish_reason="timeout"
            )
        except httpx.HTTPError as e:
            logger.error(f"LLM request error: {e}")
            return LLMResponse(
                content=f"[Error: {str(e)}]",
                model=model_name,
                finish_reason="error"
            )

    async def close(self):
        """Close HTTP client"""
        await self.client.aclose()
