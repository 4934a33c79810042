"""
LLM factory for creating provider instances from configuration.

Reads config.json and instantiates the provider configured for each agent
(planner, action_parser, narrator, world_builder).
"""

import json
import logging
import os

from mansion.llm.base import BaseLLM
from mansion.llm.claude_llm import ClaudeLLM
from mansion.llm.gemini_llm import GeminiLLM
from mansion.llm.openai_llm import OpenAILLM

logger = logging.getLogger(__name__)

AGENT_NAMES = ("planner", "action_parser", "narrator", "world_builder")


def load_config(config_path: str = "config.json") -> dict:
    """
    Load configuration from JSON file.

    Raises:
        FileNotFoundError: If config file doesn't exist
        json.JSONDecodeError: If config file is invalid JSON
    """
    try:
        with open(config_path, 'r') as f:
            config = json.load(f)
        logger.info(f"Loaded configuration from {config_path}")
        return config
    except FileNotFoundError:
        logger.error(f"Configuration file not found: {config_path}")
        raise
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in configuration file: {e}")
        raise


def _resolve_api_key(provider_name: str, provider_config: dict) -> str:
    if "api_key_env" in provider_config:
        api_key_env = provider_config["api_key_env"]
        api_key = os.environ.get(api_key_env)
        if not api_key:
            logger.warning(
                f"API key environment variable '{api_key_env}' not set "
                f"for provider '{provider_name}'"
            )
            return ""
        return api_key
    if "api_key" in provider_config:
        return provider_config["api_key"]
    raise ValueError(f"No API key configuration found for provider '{provider_name}'")


def create_llm(agent_name: str, config: dict) -> BaseLLM:
    """
    Create an LLM provider instance for a specific agent.

    Args:
        agent_name: Name of the agent (e.g., "planner", "world_builder")
        config: Full configuration dictionary

    Raises:
        ValueError: If the provider is unknown or the configuration is invalid
    """
    try:
        agent_config = config["agents"][agent_name]
        provider_name = agent_config["provider"]
        model = agent_config["model"]
        provider_config = config["providers"][provider_name]
    except KeyError as e:
        logger.error(f"Missing configuration key for agent '{agent_name}': {e}")
        raise ValueError(
            f"Invalid configuration for agent '{agent_name}': missing key {e}"
        ) from e

    settings = {
        "temperature": agent_config.get("temperature", 0.7),
        "max_tokens": agent_config.get("max_tokens", 1024),
    }
    api_key = _resolve_api_key(provider_name, provider_config)

    logger.info(
        f"Creating LLM for agent '{agent_name}': "
        f"provider={provider_name}, model={model}"
    )

    if provider_name == "openai":
        return OpenAILLM(
            model=model,
            api_key=api_key,
            base_url=provider_config.get("base_url"),
            **settings
        )
    elif provider_name == "anthropic":
        return ClaudeLLM(model=model, api_key=api_key, **settings)
    elif provider_name == "gemini":
        return GeminiLLM(model=model, api_key=api_key, **settings)
    elif provider_name == "local":
        # Local servers speak the OpenAI API
        provider_type = provider_config.get("provider_type", "openai")
        if provider_type != "openai":
            raise ValueError(
                f"Unsupported provider_type '{provider_type}' for local provider"
            )
        return OpenAILLM(
            model=model,
            api_key=api_key,
            base_url=provider_config.get("base_url"),
            **settings
        )
    raise ValueError(f"Unknown provider: {provider_name}")
