"""Base interface for LLM clients."""
from abc import ABC, abstractmethod
from typing import Optional, Dict, Any

from src.exceptions.sync_exceptions import LLMGenerationError


class BaseLLMClient(ABC):
    """Abstract base class for LLM clients.

    The sync workflow treats the model as an opaque text generator: it only
    ever calls :meth:`generate` and validates the returned text itself.
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        max_tokens: int = 16000,
        temperature: float = 0.0,
        timeout: int = 300
    ):
        self.api_key = api_key
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.timeout = timeout

    @abstractmethod
    async def generate_completion(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        **kwargs
    ) -> Dict[str, Any]:
        """
        Generate completion from the LLM.

        Returns:
            Dict with standardized response:
            {
                "content": str,
                "usage": {"input_tokens": int, "output_tokens": int},
                "model": str,
                "stop_reason": str
            }
        """

    async def generate(self, system_prompt: str, prompt: str) -> str:
        """Return only the text of a completion.

        Raises:
            LLMGenerationError: If the provider call fails
        """
        try:
            response = await self.generate_completion(prompt=prompt, system_prompt=system_prompt)
        except Exception as e:
            raise LLMGenerationError(
                f"{self.provider_name} completion failed: {e}",
                provider=self.provider_name,
                model=self.model,
                cause=e,
            )
        return response.get("content") or ""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the provider name (e.g., 'claude', 'openai')."""
