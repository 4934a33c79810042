"""
Game master agent for the Shifting Manor engine.

Turns a player's free-text prompt into structured actions in three LLM calls:
a one-paragraph plan of what happens, the plan parsed into Actions (with the
legal values constrained by the current game), and finally a narration of
the applied actions. Stateless: everything it needs comes from the manager.
"""

import logging

from mansion.agents.prompting import system_prompt
from mansion.errors import ExternalFault
from mansion.llm.base import BaseLLM
from mansion.managers.game_manager import GameManager
from mansion.storage.models import Action, LLMResponse, describe_action
from mansion.storage.snapshot import action_from_dict

logger = logging.getLogger(__name__)


def _string(description: str) -> dict:
    return {"type": "string", "description": description}


def _variant(type_name: str, properties: dict) -> dict:
    return {
        "type": "object",
        "properties": {
            "type": {"type": "string", "enum": [type_name]},
            **properties,
        },
        "required": ["type", *properties],
        "additionalProperties": False,
    }


def build_action_schema(manager: GameManager) -> dict:
    """
    JSON schema for the action list, restricted to what is legal right now.

    Take offers only items lying in the player's room, drop only inventory
    items, and move only rooms connected to the player's room. Inspect is
    always available; pass is offered only when nothing else is.
    """
    here = manager.get_current_player_location().room
    room_items = [location.item for location in manager.get_items_in_room(here)]
    inventory = [location.item for location in manager.get_inventory()]
    neighbours = sorted(set(manager.world.get_connected_room_names(here)))

    variants = []
    if inventory:
        variants.append(_variant("PlayerDropItem", {
            "item": {
                "type": "string",
                "enum": inventory,
                "description": "The item that the player drops",
            },
            "description_of_item_in_room": _string(
                "A concise one-sentence description of how the item is placed "
                "in the player's current room"
            ),
            "description": _string(
                "A concise one-sentence description of how the player drops the item"
            ),
        }))
    if neighbours:
        variants.append(_variant("PlayerMove", {
            "room": {
                "type": "string",
                "enum": neighbours,
                "description": "The room that the player moves to",
            },
            "description_of_player_in_room": _string(
                "A concise one-sentence description of where exactly the player "
                "is in the new room"
            ),
            "description": _string(
                "A concise one-sentence description of how the player moves to the new room"
            ),
        }))
    if room_items:
        variants.append(_variant("PlayerTakeItem", {
            "item": {
                "type": "string",
                "enum": room_items,
                "description": "The item that the player takes",
            },
            "description_of_item_in_inventory": _string(
                "A concise one-sentence description of exactly how the item is "
                "being held or otherwise stored by the player"
            ),
            "description": _string(
                "A concise one-sentence description of how the player takes the item"
            ),
        }))
    variants.append(_variant("PlayerInspect", {
        "inspect_process_description": _string(
            "A concise one-sentence description of how the player inspects an "
            "item, room, or anything else."
        ),
        "inspect_result_description": _string(
            "A concise one-sentence description of what the player observes as "
            "a result of their inspection."
        ),
    }))
    if len(variants) == 1:
        variants.append(_variant("PlayerPass", {
            "description": _string(
                "A concise one-sentence description of how the player idly does "
                "something that doesn't modify the game state."
            ),
        }))

    return {
        "type": "object",
        "properties": {
            "actions": {
                "type": "array",
                "items": variants[0] if len(variants) == 1 else {"anyOf": variants},
            }
        },
        "required": ["actions"],
    }


class GameMaster:
    """
    Plans, parses and narrates a turn.

    Each step may use its own LLM (see the ``planner``, ``action_parser`` and
    ``narrator`` agents in config.json).
    """

    def __init__(self, planner: BaseLLM, action_parser: BaseLLM, narrator: BaseLLM):
        self.planner = planner
        self.action_parser = action_parser
        self.narrator = narrator
        self._last_response: LLMResponse | None = None

        self._planner_prompt = system_prompt(
            "planner",
            "Reply with a one-paragraph description of what the player does "
            "next and what happens as an immediate consequence.",
        )
        self._action_parser_prompt = system_prompt(
            "action_parser",
            "Interpret the description as a sequence of structured actions.",
        )
        self._narrator_prompt = system_prompt(
            "narrator",
            "Rephrase the actions the player took into one narrative paragraph.",
        )

    def plan(self, manager: GameManager, prompt: str) -> str:
        """
        Describe in one paragraph what the player does and what follows.

        Raises:
            ExternalFault: If the LLM call fails or returns nothing
        """
        messages = [{
            "role": "user",
            "content": f"{manager.get_game_description()}\n\n---\n\n{prompt}",
        }]
        response = self.planner.complete(
            messages=messages,
            system_prompt=self._planner_prompt,
            temperature=self.planner.config.get("temperature", 0.7),
            max_tokens=self.planner.config.get("max_tokens", 1024),
        )
        self._last_response = response
        plan = response.text.strip()
        if not plan:
            raise ExternalFault("The planner returned an empty action plan.")
        logger.debug(f"Action plan: {plan}")
        return plan

    def generate_actions(self, manager: GameManager, plan: str) -> list[Action]:
        """
        Parse an action plan into structured actions.

        Raises:
            ExternalFault: If the output is missing or does not parse
        """
        messages = [{
            "role": "user",
            "content": f"{manager.get_game_description()}\n\n---\n\n{plan}",
        }]
        result = self.action_parser.complete_json(
            messages=messages,
            system_prompt=self._action_parser_prompt,
            schema=build_action_schema(manager),
            temperature=self.action_parser.config.get("temperature", 0.1),
            max_tokens=self.action_parser.config.get("max_tokens", 2048),
        )

        raw_actions = result.get("actions") if isinstance(result, dict) else None
        if not isinstance(raw_actions, list):
            raise ExternalFault(f"The action parser returned no action list: {result!r}")

        try:
            actions = [action_from_dict(raw) for raw in raw_actions]
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise ExternalFault(f"The action parser returned a malformed action: {e}") from e

        logger.info(f"Parsed {len(actions)} action(s): {[a.type for a in actions]}")
        return actions

    def narrate(self, manager: GameManager, prompt: str, actions: list[Action]) -> str:
        """
        Retell the turn's actions as a narrative paragraph.

        Raises:
            ExternalFault: If the LLM call fails or returns nothing
        """
        intent = "\n".join(f"> {line}" for line in prompt.split("\n"))
        taken = "\n".join(f"- {action.type}: {describe_action(action)}" for action in actions)
        messages = [{
            "role": "user",
            "content": (
                f"What I intended to do this turn:\n{intent}\n\n"
                f"Actions I actually took this turn:\n{taken or '- (none)'}"
            ),
        }]
        response = self.narrator.complete(
            messages=messages,
            system_prompt=self._narrator_prompt,
            temperature=self.narrator.config.get("temperature", 0.7),
            max_tokens=self.narrator.config.get("max_tokens", 1024),
        )
        self._last_response = response
        description = response.text.strip()
        if not description:
            raise ExternalFault("The narrator returned an empty turn description.")
        return description
