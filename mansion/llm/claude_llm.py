"""
Anthropic Claude LLM provider implementation.

Structured output uses a forced tool call whose input schema is the
requested JSON schema.
"""

import logging
import time

from anthropic import Anthropic, AnthropicError

from mansion.errors import ExternalFault
from mansion.llm.base import BaseLLM
from mansion.storage.models import LLMResponse

logger = logging.getLogger(__name__)


class ClaudeLLM(BaseLLM):
    """Anthropic Claude LLM provider with prompt caching on the system prompt."""

    provider_name = "anthropic"

    def __init__(self, model: str, api_key: str, **kwargs):
        super().__init__(model, api_key, **kwargs)
        self.client = Anthropic(api_key=api_key)
        logger.info(f"Initialized Anthropic provider with model={model}")

    def _system(self, system_prompt: str) -> list[dict]:
        return [
            {
                "type": "text",
                "text": system_prompt,
                "cache_control": {"type": "ephemeral"}
            }
        ]

    def complete(
        self,
        messages: list[dict],
        system_prompt: str,
        temperature: float = 0.7,
        max_tokens: int = 1024
    ) -> LLMResponse:
        """Generate a text completion using the messages API."""
        start_time = time.monotonic()

        try:
            response = self.client.messages.create(
                model=self.model,
                max_tokens=max_tokens,
                temperature=temperature,
                system=self._system(system_prompt),
                messages=messages
            )
        except AnthropicError as e:
            logger.error(f"Anthropic API error: {e}")
            raise ExternalFault(f"Anthropic completion failed: {e}") from e

        latency_ms = (time.monotonic() - start_time) * 1000
        text = "".join(block.text for block in response.content if hasattr(block, "text"))
        usage = response.usage
        logger.debug(f"Anthropic completion took {latency_ms:.1f}ms")

        return LLMResponse(
            text=text,
            input_tokens=getattr(usage, "input_tokens", 0),
            output_tokens=getattr(usage, "output_tokens", 0),
            cached_tokens=getattr(usage, "cache_read_input_tokens", 0) or 0,
            latency_ms=latency_ms
        )

    def complete_json(
        self,
        messages: list[dict],
        system_prompt: str,
        schema: dict,
        temperature: float = 0.1,
        max_tokens: int = 2048
    ) -> dict:
        """
        Generate structured JSON output by forcing the "extract" tool.

        Retries up to 2 times when the response carries no tool call.
        """
        tool_definition = {
            "name": "extract",
            "description": "Record the structured answer",
            "input_schema": schema
        }

        for attempt in range(3):
            try:
                response = self.client.messages.create(
                    model=self.model,
                    max_tokens=max_tokens,
                    temperature=temperature,
                    system=self._system(system_prompt),
                    messages=messages,
                    tools=[tool_definition],
                    tool_choice={"type": "tool", "name": "extract"}
                )
            except AnthropicError as e:
                logger.error(f"Anthropic API error in JSON completion: {e}")
                raise ExternalFault(f"Anthropic JSON completion failed: {e}") from e

            for block in response.content:
                if block.type == "tool_use" and block.name == "extract":
                    return block.input

            logger.warning(f"No tool use in Anthropic response on attempt {attempt + 1}")

        raise ExternalFault("Anthropic JSON completion failed: no tool use after 3 attempts")
