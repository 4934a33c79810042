"""
OpenAI LLM provider implementation.

Supports OpenAI models and OpenAI-compatible local servers.
"""

import json
import logging
import time
from typing import Optional

from openai import OpenAI, OpenAIError

from mansion.errors import ExternalFault
from mansion.llm.base import BaseLLM
from mansion.storage.models import LLMResponse

logger = logging.getLogger(__name__)


class OpenAILLM(BaseLLM):
    """OpenAI and OpenAI-compatible LLM provider."""

    provider_name = "openai"

    def __init__(
        self,
        model: str,
        api_key: str,
        base_url: Optional[str] = None,
        **kwargs
    ):
        super().__init__(model, api_key, **kwargs)
        self.client = OpenAI(api_key=api_key, base_url=base_url)
        self.base_url = base_url
        logger.info(
            f"Initialized OpenAI provider with model={model}, "
            f"base_url={base_url or 'default'}"
        )

    def complete(
        self,
        messages: list[dict],
        system_prompt: str,
        temperature: float = 0.7,
        max_tokens: int = 1024
    ) -> LLMResponse:
        """Generate a text completion using the chat completions API."""
        start_time = time.monotonic()
        full_messages = [{"role": "system", "content": system_prompt}, *messages]

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=full_messages,
                temperature=temperature,
                max_tokens=max_tokens
            )
        except OpenAIError as e:
            logger.error(f"OpenAI API error: {e}")
            raise ExternalFault(f"OpenAI completion failed: {e}") from e

        latency_ms = (time.monotonic() - start_time) * 1000
        usage = response.usage
        logger.debug(f"OpenAI completion took {latency_ms:.1f}ms")

        return LLMResponse(
            text=response.choices[0].message.content or "",
            input_tokens=usage.prompt_tokens if usage else 0,
            output_tokens=usage.completion_tokens if usage else 0,
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
        Generate structured JSON output using JSON mode.

        The schema is appended to the system prompt. Retries up to 2 times
        on JSON parse failure, feeding the parse error back to the model.
        """
        json_system_prompt = (
            f"{system_prompt}\n\n"
            f"You must respond with valid JSON matching this schema:\n"
            f"{json.dumps(schema, indent=2)}"
        )
        conversation = list(messages)

        for attempt in range(3):
            try:
                response = self.client.chat.completions.create(
                    model=self.model,
                    messages=[{"role": "system", "content": json_system_prompt}, *conversation],
                    temperature=temperature,
                    max_tokens=max_tokens,
                    response_format={"type": "json_object"}
                )
            except OpenAIError as e:
                logger.error(f"OpenAI API error in JSON completion: {e}")
                raise ExternalFault(f"OpenAI JSON completion failed: {e}") from e

            text = response.choices[0].message.content or ""
            try:
                return json.loads(text)
            except json.JSONDecodeError as e:
                logger.warning(
                    f"JSON parse error on attempt {attempt + 1}: {e}. "
                    f"Response text: {text[:200]}"
                )
                conversation.append({"role": "assistant", "content": text})
                conversation.append({
                    "role": "user",
                    "content": (
                        f"That response was not valid JSON. Error: {e}. "
                        f"Please provide a valid JSON response matching the schema."
                    )
                })

        raise ExternalFault("OpenAI JSON completion failed: no valid JSON after 3 attempts")
