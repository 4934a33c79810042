"""
LLM abstraction layer for the Shifting Manor engine.

Provides a unified interface for multiple LLM providers (OpenAI, Anthropic,
Google) with standard completions and structured JSON output.
"""

from mansion.llm.base import BaseLLM
from mansion.llm.claude_llm import ClaudeLLM
from mansion.llm.factory import AGENT_NAMES, create_llm, load_config
from mansion.llm.gemini_llm import GeminiLLM
from mansion.llm.openai_llm import OpenAILLM
from mansion.storage.models import LLMResponse

__all__ = [
    "AGENT_NAMES",
    "BaseLLM",
    "OpenAILLM",
    "ClaudeLLM",
    "GeminiLLM",
    "LLMResponse",
    "create_llm",
    "load_config",
]
