"""Anthropic Claude API client."""
from typing import Optional, Dict, Any
from anthropic import AsyncAnthropic

from src.utils.logging import get_logger
from .base_client import BaseLLMClient

logger = get_logger(__name__)

DEFAULT_CLAUDE_MODEL = "claude-sonnet-4-20250514"


class ClaudeClient(BaseLLMClient):
    """Wrapper for the Anthropic Messages API."""

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_CLAUDE_MODEL,
        max_tokens: int = 16000,
        temperature: float = 0.0,
        timeout: int = 300
    ):
        super().__init__(api_key, model, max_tokens, temperature, timeout)
        self.client = AsyncAnthropic(api_key=api_key, timeout=timeout)

    @property
    def provider_name(self) -> str:
        return "claude"

    async def generate_completion(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        **kwargs
    ) -> Dict[str, Any]:
        try:
            response = await self.client.messages.create(
                model=self.model,
                max_tokens=kwargs.get("max_tokens", self.max_tokens),
                temperature=kwargs.get("temperature", self.temperature),
                system=system_prompt or "",
                messages=[{"role": "user", "content": prompt}],
            )
        except Exception as e:
            logger.error(f"Claude API error: {e}")
            raise

        text = "".join(block.text for block in response.content if getattr(block, "type", None) == "text")
        return {
            "content": text,
            "usage": {
                "input_tokens": response.usage.input_tokens,
                "output_tokens": response.usage.output_tokens,
            },
            "model": response.model,
            "stop_reason": response.stop_reason,
        }
