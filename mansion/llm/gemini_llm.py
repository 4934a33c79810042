"""
Google Gemini LLM provider implementation.

Structured output uses Gemini's JSON response mode with a response schema.
"""

import json
import logging
import time

from google import genai
from google.genai import errors, types

from mansion.errors import ExternalFault
from mansion.llm.base import BaseLLM
from mansion.storage.models import LLMResponse

logger = logging.getLogger(__name__)


class GeminiLLM(BaseLLM):
    """Google Gemini LLM provider."""

    provider_name = "gemini"

    def __init__(self, model: str, api_key: str, **kwargs):
        super().__init__(model, api_key, **kwargs)
        self.client = genai.Client(api_key=api_key)
        logger.info(f"Initialized Gemini provider with model={model}")

    def _contents(self, messages: list[dict]) -> list[types.Content]:
        """Convert chat messages to Gemini Content objects."""
        return [
            types.Content(
                role="user" if msg["role"] == "user" else "model",
                parts=[types.Part(text=msg["content"])]
            )
            for msg in messages
        ]

    def complete(
        self,
        messages: list[dict],
        system_prompt: str,
        temperature: float = 0.7,
        max_tokens: int = 1024
    ) -> LLMResponse:
        """Generate a text completion using generate_content."""
        start_time = time.monotonic()
        config = types.GenerateContentConfig(
            system_instruction=system_prompt,
            temperature=temperature,
            max_output_tokens=max_tokens
        )

        try:
            response = self.client.models.generate_content(
                model=self.model,
                contents=self._contents(messages),
                config=config
            )
        except errors.APIError as e:
            logger.error(f"Gemini API error: {e}")
            raise ExternalFault(f"Gemini completion failed: {e}") from e

        latency_ms = (time.monotonic() - start_time) * 1000
        usage = response.usage_metadata
        logger.debug(f"Gemini completion took {latency_ms:.1f}ms")

        return LLMResponse(
            text=response.text or "",
            input_tokens=(usage.prompt_token_count or 0) if usage else 0,
            output_tokens=(usage.candidates_token_count or 0) if usage else 0,
            cached_tokens=(usage.cached_content_token_count or 0) if usage else 0,
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
        Generate structured JSON output using a response schema.

        Retries up to 2 times on JSON parse failure.
        """
        conversation = list(messages)
        config = types.GenerateContentConfig(
            system_instruction=system_prompt,
            temperature=temperature,
            max_output_tokens=max_tokens,
            response_mime_type="application/json",
            response_json_schema=schema
        )

        for attempt in range(3):
            try:
                response = self.client.models.generate_content(
                    model=self.model,
                    contents=self._contents(conversation),
                    config=config
                )
            except errors.APIError as e:
                logger.error(f"Gemini API error in JSON completion: {e}")
                raise ExternalFault(f"Gemini JSON completion failed: {e}") from e

            text = response.text or ""
            try:
                return json.loads(text)
            except json.JSONDecodeError as e:
                logger.warning(
                    f"JSON parse error on attempt {attempt + 1}: {e}. "
                    f"Response text: {text[:200]}"
                )
                conversation.append({"role": "model", "content": text})
                conversation.append({
                    "role": "user",
                    "content": (
                        f"That response was not valid JSON. Error: {e}. "
                        f"Please provide a valid JSON response matching the schema."
                    )
                })

        raise ExternalFault("Gemini JSON completion failed: no valid JSON after 3 attempts")
