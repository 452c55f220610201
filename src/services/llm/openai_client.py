"""OpenAI Chat Completions client."""
from typing import Optional, Dict, Any
from openai import AsyncOpenAI

from src.utils.logging import get_logger
from .base_client import BaseLLMClient

logger = get_logger(__name__)

DEFAULT_OPENAI_MODEL = "chatgpt-4o-latest"


class OpenAIClient(BaseLLMClient):
    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_OPENAI_MODEL,
        max_tokens: int = 16000,
        temperature: float = 0.0,
        timeout: int = 300
    ):
        super().__init__(api_key, model, max_tokens, temperature, timeout)
        self.client = AsyncOpenAI(api_key=api_key, timeout=timeout)

    @property
    def provider_name(self) -> str:
        return "openai"

    async def generate_completion(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        **kwargs
    ) -> Dict[str, Any]:
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                max_tokens=kwargs.get("max_tokens", self.max_tokens),
                temperature=kwargs.get("temperature", self.temperature),
                messages=messages,
            )
        except Exception as e:
            logger.error(f"OpenAI API error: {e}")
            raise

        choice = response.choices[0]
        usage = response.usage
        return {
            "content": choice.message.content or "",
            "usage": {
                "input_tokens": usage.prompt_tokens if usage else 0,
                "output_tokens": usage.completion_tokens if usage else 0,
            },
            "model": response.model,
            "stop_reason": choice.finish_reason,
        }
