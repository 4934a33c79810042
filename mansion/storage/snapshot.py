"""
JSON snapshot codec for the game aggregate.

The snapshot is a plain JSON-serializable dict that mirrors the dataclasses
one-to-one, tagged unions included (their ``type`` field is written out and
used to pick the variant when reading back).
"""

import logging
from dataclasses import asdict
from typing import Any

from mansion.storage.models import (
    Action,
    Game,
    GameMetadata,
    GameState,
    Item,
    ItemLocation,
    ItemLocationInventory,
    ItemLocationRoom,
    Player,
    PlayerDropItem,
    PlayerInspect,
    PlayerLocation,
    PlayerMove,
    PlayerPass,
    PlayerTakeItem,
    Room,
    RoomConnection,
    Turn,
)

logger = logging.getLogger(__name__)


def game_to_dict(game: Game) -> dict[str, Any]:
    """Serialize a game into a JSON-ready dict."""
    return asdict(game)


def _text(data: dict, key: str) -> str:
    value = data[key]
    if not isinstance(value, str):
        raise ValueError(f"Field {key!r} must be a string, got {type(value).__name__}")
    return value


def _kind(data) -> str | None:
    if not isinstance(data, dict):
        raise ValueError(f"Expected an object, got {type(data).__name__}")
    return data.get("type")


def item_location_from_dict(data: dict) -> ItemLocation:
    """
    Build an ItemLocation variant from its dict form.

    Raises:
        ValueError: If the ``type`` discriminant is unknown or a field is
            not a string
        KeyError: If a field of the variant is missing
    """
    kind = _kind(data)
    if kind == "room":
        return ItemLocationRoom(
            item=_text(data, "item"),
            room=_text(data, "room"),
            description=_text(data, "description"),
        )
    elif kind == "inventory":
        return ItemLocationInventory(
            item=_text(data, "item"),
            description=_text(data, "description"),
        )
    raise ValueError(f"Unknown item location type: {kind!r}")


def action_from_dict(data: dict) -> Action:
    """
    Build an Action variant from its dict form.

    Raises:
        ValueError: If the ``type`` discriminant is unknown or a field is
            not a string
        KeyError: If a field of the variant is missing
    """
    kind = _kind(data)
    if kind == "PlayerTakeItem":
        return PlayerTakeItem(
            item=_text(data, "item"),
            description_of_item_in_inventory=_text(data, "description_of_item_in_inventory"),
            description=_text(data, "description"),
        )
    elif kind == "PlayerDropItem":
        return PlayerDropItem(
            item=_text(data, "item"),
            description_of_item_in_room=_text(data, "description_of_item_in_room"),
            description=_text(data, "description"),
        )
    elif kind == "PlayerMove":
        return PlayerMove(
            room=_text(data, "room"),
            description_of_player_in_room=_text(data, "description_of_player_in_room"),
            description=_text(data, "description"),
        )
    elif kind == "PlayerInspect":
        return PlayerInspect(
            inspect_process_description=_text(data, "inspect_process_description"),
            inspect_result_description=_text(data, "inspect_result_description"),
        )
    elif kind == "PlayerPass":
        return PlayerPass(description=_text(data, "description"))
    raise ValueError(f"Unknown action type: {kind!r}")


def game_from_dict(data: dict) -> Game:
    """
    Rebuild a game from a snapshot dict.

    Only the shape is checked here; world invariants are checked by
    ``mansion.managers.validation.validate_game``.

    Raises:
        ValueError: If the snapshot is malformed
    """
    try:
        state = data["state"]
        metadata = data["metadata"]
        return Game(
            metadata=GameMetadata(
                id=metadata["id"],
                name=metadata["name"],
                creation_date_time=metadata["creation_date_time"],
            ),
            state=GameState(
                setting=state["setting"],
                player=Player(**state["player"]),
                player_location=PlayerLocation(**state["player_location"]),
                rooms=[Room(**room) for room in state["rooms"]],
                items=[Item(**item) for item in state["items"]],
                item_locations=[
                    item_location_from_dict(location)
                    for location in state["item_locations"]
                ],
                room_connections=[
                    RoomConnection(**connection)
                    for connection in state["room_connections"]
                ],
            ),
            turns=[
                Turn(
                    prompt=turn["prompt"],
                    actions=[action_from_dict(action) for action in turn["actions"]],
                    description=turn["description"],
                )
                for turn in data["turns"]
            ],
        )
    except (KeyError, TypeError, AttributeError, ValueError) as e:
        logger.error(f"Malformed game snapshot: {e}")
        raise ValueError(f"Malformed game snapshot: {e}") from e
