from enum import Enum
from typing import Optional

from src.core.config import Settings, settings as default_settings
from .base_client import BaseLLMClient
from .claude_client import ClaudeClient
from .openai_client import OpenAIClient


class LLMProvider(str, Enum):
    CLAUDE = "claude"
    OPENAI = "openai"


class LLMFactory:
    """Builds the configured LLM client."""

    @staticmethod
    def create(provider: str, api_key: str, model: Optional[str] = None, max_tokens: int = 16000) -> BaseLLMClient:
        try:
            resolved = LLMProvider(provider.lower())
        except ValueError:
            raise ValueError(f"Unsupported LLM provider: {provider}")

        if resolved == LLMProvider.CLAUDE:
            if model:
                return ClaudeClient(api_key=api_key, model=model, max_tokens=max_tokens)
            return ClaudeClient(api_key=api_key, max_tokens=max_tokens)

        if model:
            return OpenAIClient(api_key=api_key, model=model, max_tokens=max_tokens)
        return OpenAIClient(api_key=api_key, max_tokens=max_tokens)


def get_llm_client(settings: Optional[Settings] = None) -> BaseLLMClient:
    settings = settings or default_settings
    provider = settings.LLM_PROVIDER.lower()
    api_key = settings.OPENAI_API_KEY if provider == LLMProvider.OPENAI.value else settings.ANTHROPIC_API_KEY
    return LLMFactory.create(
        provider=provider,
        api_key=api_key,
        model=settings.LLM_MODEL or None,
        max_tokens=settings.LLM_MAX_TOKENS,
    )
