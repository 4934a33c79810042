"""
World builder agent for the Shifting Manor engine.

Generates rooms the player walks into for the first time, and the items
lying in them. The builder only proposes records; inserting them is the
orchestrator's job through the GameManager.
"""

import logging

from mansion.agents.prompting import system_prompt
from mansion.errors import ExternalFault
from mansion.llm.base import BaseLLM
from mansion.managers.game_manager import GameManager
from mansion.storage.models import Item, Room, RoomConnection

logger = logging.getLogger(__name__)

ROOM_SCHEMA = {
    "type": "object",
    "properties": {
        "room_description": {
            "type": "string",
            "description": "A one-paragraph description of the room.",
        },
        "connections": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "other_room": {
                        "type": "string",
                        "description": "The name of the new room to connect to",
                    },
                    "description": {
                        "type": "string",
                        "description": (
                            "A concise one-sentence description of the doorway, "
                            "passage, path, or other type of connection to the other room"
                        ),
                    },
                },
                "required": ["other_room", "description"],
            },
        },
    },
    "required": ["room_description", "connections"],
}

ITEMS_SCHEMA = {
    "type": "object",
    "properties": {
        "items": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "item_name": {"type": "string"},
                    "item_description": {
                        "type": "string",
                        "description": "A concise one-paragraph description of the item",
                    },
                    "item_location_description": {
                        "type": "string",
                        "description": (
                            "A concise one-sentence description of where exactly "
                            "the item is in the room."
                        ),
                    },
                },
                "required": ["item_name", "item_description", "item_location_description"],
            },
        },
    },
    "required": ["items"],
}


class WorldBuilder:
    """Generates new rooms and their items on demand."""

    def __init__(self, llm: BaseLLM):
        self.llm = llm
        self._room_prompt = system_prompt(
            "room_builder",
            "Describe the named room and give 3 connections to other new rooms.",
        )
        self._item_prompt = system_prompt(
            "item_builder",
            "List a few items found in the named room and where they lie.",
        )

    def _complete_json(self, content: str, prompt: str, schema: dict) -> dict:
        result = self.llm.complete_json(
            messages=[{"role": "user", "content": content}],
            system_prompt=prompt,
            schema=schema,
            temperature=self.llm.config.get("temperature", 0.7),
            max_tokens=self.llm.config.get("max_tokens", 2048),
        )
        if not isinstance(result, dict):
            raise ExternalFault(f"The world builder returned {type(result).__name__}, not an object")
        return result

    def generate_room(
        self, manager: GameManager, room_name: str
    ) -> tuple[Room, list[RoomConnection]]:
        """
        Generate a room and its outgoing connections.

        Every connection has the new room as ``room1``. Self-loops are dropped.

        Raises:
            ExternalFault: If the output is unusable
        """
        content = f"{manager.get_game_description()}\n\n---\n\nNew room: {room_name}"
        result = self._complete_json(content, self._room_prompt, ROOM_SCHEMA)

        try:
            room = Room(name=room_name, description=str(result["room_description"]))
            connections = []
            for raw in result.get("connections") or []:
                other = str(raw["other_room"]).strip()
                if not other or other == room_name:
                    logger.warning(f'Dropping self-connection generated for "{room_name}"')
                    continue
                connections.append(RoomConnection(
                    room1=room_name,
                    room2=other,
                    description=str(raw["description"]),
                ))
        except (KeyError, TypeError) as e:
            raise ExternalFault(f"The world builder returned a malformed room: {e}") from e

        logger.info(f'Generated room "{room_name}" with {len(connections)} connection(s)')
        return room, connections

    def generate_items_for_room(
        self, manager: GameManager, room: Room
    ) -> list[tuple[Item, str]]:
        """
        Generate the items lying in a freshly created room.

        Returns:
            (item, description of where it lies) pairs. Names that already
            exist in the game, or repeat within the answer, are skipped.

        Raises:
            ExternalFault: If the output is unusable
        """
        content = f"New room: {room.name}\n\n{room.description}"
        result = self._complete_json(content, self._item_prompt, ITEMS_SCHEMA)

        generated: list[tuple[Item, str]] = []
        seen: set[str] = set()
        try:
            for raw in result.get("items") or []:
                name = str(raw["item_name"]).strip()
                if not name or name in seen or manager.item_exists(name):
                    logger.warning(f'Skipping duplicate generated item "{name}"')
                    continue
                seen.add(name)
                generated.append((
                    Item(name=name, description=str(raw["item_description"])),
                    str(raw["item_location_description"]),
                ))
        except (KeyError, TypeError) as e:
            raise ExternalFault(f"The world builder returned a malformed item: {e}") from e

        logger.info(f'Generated {len(generated)} item(s) for "{room.name}"')
        return generated
