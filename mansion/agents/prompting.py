"""Loading of the system prompts shared by the game master and world builder."""

import logging
from pathlib import Path

logger = logging.getLogger(__name__)

PROMPT_DIR = Path(__file__).parent.parent / "prompts"

DEFAULT_PRELUDE = (
    "You are the game master for a text adventure game. Refer to items and "
    "rooms by their exact names, without articles or quotes."
)


def load_prompt(name: str, fallback: str) -> str:
    """
    Read ``prompts/<name>.txt``, or return ``fallback`` if it is missing.

    Args:
        name: Prompt file stem
        fallback: Text used when the file cannot be found
    """
    prompt_path = PROMPT_DIR / f"{name}.txt"
    try:
        return prompt_path.read_text().strip()
    except FileNotFoundError:
        logger.warning(f"Prompt not found at {prompt_path}, using built-in default")
        return fallback


def system_prompt(name: str, fallback: str) -> str:
    """The shared prelude followed by the task-specific prompt."""
    return f"{load_prompt('prelude', DEFAULT_PRELUDE)}\n\n{load_prompt(name, fallback)}"
