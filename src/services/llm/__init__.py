"""LLM service module for collection sync."""

from .base_client import BaseLLMClient
from .claude_client import ClaudeClient
from .openai_client import OpenAIClient
from .llm_factory import LLMFactory, LLMProvider, get_llm_client

__all__ = [
    "BaseLLMClient",
    "ClaudeClient",
    "OpenAIClient",
    "LLMFactory",
    "LLMProvider",
    "get_llm_client",
]
