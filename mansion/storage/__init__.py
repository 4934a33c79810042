"""
Storage layer for the Shifting Manor engine.

Provides the dataclasses of the game aggregate and the JSON snapshot codec.
"""

from mansion.storage.models import (
    Action,
    Game,
    GameMetadata,
    GameState,
    GameStatus,
    GameStatusMessage,
    Item,
    ItemLocation,
    ItemLocationInventory,
    ItemLocationRoom,
    LLMResponse,
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
from mansion.storage.snapshot import action_from_dict, game_from_dict, game_to_dict

__all__ = [
    "Action",
    "Game",
    "GameMetadata",
    "GameState",
    "GameStatus",
    "GameStatusMessage",
    "Item",
    "ItemLocation",
    "ItemLocationInventory",
    "ItemLocationRoom",
    "LLMResponse",
    "Player",
    "PlayerDropItem",
    "PlayerInspect",
    "PlayerLocation",
    "PlayerMove",
    "PlayerPass",
    "PlayerTakeItem",
    "Room",
    "RoomConnection",
    "Turn",
    "action_from_dict",
    "game_from_dict",
    "game_to_dict",
]
