"""
Abstract base class for LLM providers.

Every game-master and world-builder call goes through this interface, so the
engine never depends on a particular vendor SDK.
"""

from abc import ABC, abstractmethod

from mansion.storage.models import LLMResponse


class BaseLLM(ABC):
    """
    Abstract base class for all LLM providers.

    Implementations raise ``mansion.errors.ExternalFault`` when the provider
    fails or returns output that cannot be used.
    """

    provider_name: str = "base"

    def __init__(self, model: str, api_key: str, **kwargs):
        """
        Initialize the LLM provider.

        Args:
            model: Model identifier (e.g., "gemini-2.5-flash", "gpt-4o")
            api_key: API key for authentication
            **kwargs: Provider-specific configuration
        """
        self.model = model
        self.api_key = api_key
        self.config = kwargs

    @abstractmethod
    def complete(
        self,
        messages: list[dict],
        system_prompt: str,
        temperature: float = 0.7,
        max_tokens: int = 1024
    ) -> LLMResponse:
        """
        Generate a text completion.

        Args:
            messages: List of message dicts with "role" and "content" keys
            system_prompt: System-level instructions
            temperature: Sampling temperature
            max_tokens: Maximum tokens to generate

        Returns:
            LLMResponse with text, token counts and latency
        """
        pass

    @abstractmethod
    def complete_json(
        self,
        messages: list[dict],
        system_prompt: str,
        schema: dict,
        temperature: float = 0.1,
        max_tokens: int = 2048
    ) -> dict:
        """
        Generate structured JSON output matching the provided schema.

        Returns:
            Parsed JSON dict
        """
        pass

    def count_tokens(self, text: str) -> int:
        """Rough token estimate (1 token per 4 characters)."""
        return len(text) // 4
