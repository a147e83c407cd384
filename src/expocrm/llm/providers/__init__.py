"""LLM Providers"""
from .base import BaseLLMProvider, LLMMessage, LLMResponse
from .litellm import LiteLLMProvider

__all__ = ['BaseLLMProvider', 'LLMMessage', 'LLMResponse', 'LiteLLMProvider']
