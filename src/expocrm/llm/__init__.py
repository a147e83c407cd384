"""ExpoCRM LLM Integration"""
from .providers.base import BaseLLMProvider
from .providers.litellm import LiteLLMProvider

__all__ = ['BaseLLMProvider', 'LiteLLMProvider']
