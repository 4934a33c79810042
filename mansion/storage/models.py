"""
Storage models for the Shifting Manor engine.

Every record of the game aggregate is a dataclass. Rooms, items, connections
and locations are frozen: they are created once and replaced wholesale,
never patched. ItemLocation and Action are closed tagged unions keyed on
their ``type`` field.
"""

from dataclasses import dataclass, field
from typing import Literal, Union

from mansion.errors import BugFault


@dataclass
class LLMResponse:
    """Response from an LLM call with usage metrics."""
    text: str
    input_tokens: int = 0
    output_tokens: int = 0
    cached_tokens: int = 0
    latency_ms: float = 0.0


# ------------------------------------------------
# Things
# ------------------------------------------------

@dataclass(frozen=True)
class Room:
    """A named location node of the world graph."""
    name: str
    description: str


@dataclass(frozen=True)
class Item:
    """A named, movable object with exactly one current location."""
    name: str
    description: str


@dataclass(frozen=True)
class Player:
    name: str
    description: str


# ------------------------------------------------
# Relations
# ------------------------------------------------

@dataclass(frozen=True)
class RoomConnection:
    """An undirected edge between two rooms, stored once."""
    room1: str
    room2: str
    description: str

    def touches(self, room: str) -> bool:
        return self.room1 == room or self.room2 == room

    def other(self, room: str) -> str:
        """The endpoint opposite to ``room``."""
        return self.room2 if self.room1 == room else self.room1

    def same_edge(self, other: "RoomConnection") -> bool:
        return {self.room1, self.room2} == {other.room1, other.room2}


@dataclass(frozen=True)
class PlayerLocation:
    room: str
    description: str


@dataclass(frozen=True)
class ItemLocationRoom:
    """The item lies somewhere in a room."""
    item: str
    room: str
    description: str
    type: Literal["room"] = field(default="room", init=False)


@dataclass(frozen=True)
class ItemLocationInventory:
    """The item is carried by the player."""
    item: str
    description: str
    type: Literal["inventory"] = field(default="inventory", init=False)


ItemLocation = Union[ItemLocationRoom, ItemLocationInventory]


# ------------------------------------------------
# Actions
# ------------------------------------------------

@dataclass(frozen=True)
class PlayerTakeItem:
    item: str
    description_of_item_in_inventory: str
    description: str
    type: Literal["PlayerTakeItem"] = field(default="PlayerTakeItem", init=False)


@dataclass(frozen=True)
class PlayerDropItem:
    item: str
    description_of_item_in_room: str
    description: str
    type: Literal["PlayerDropItem"] = field(default="PlayerDropItem", init=False)


@dataclass(frozen=True)
class PlayerMove:
    room: str
    description_of_player_in_room: str
    description: str
    type: Literal["PlayerMove"] = field(default="PlayerMove", init=False)


@dataclass(frozen=True)
class PlayerInspect:
    inspect_process_description: str
    inspect_result_description: str
    type: Literal["PlayerInspect"] = field(default="PlayerInspect", init=False)


@dataclass(frozen=True)
class PlayerPass:
    description: str
    type: Literal["PlayerPass"] = field(default="PlayerPass", init=False)


Action = Union[PlayerTakeItem, PlayerDropItem, PlayerMove, PlayerInspect, PlayerPass]

ACTION_TYPES = (
    "PlayerTakeItem",
    "PlayerDropItem",
    "PlayerMove",
    "PlayerInspect",
    "PlayerPass",
)


def describe_action(action: Action) -> str:
    """Render an action as a single line of narration."""
    if action.type == "PlayerDropItem":
        return (
            f"{action.description} New location of the item in current room: "
            f"{action.description_of_item_in_room}"
        )
    elif action.type == "PlayerTakeItem":
        return (
            f"{action.description} New location of the item in the player's "
            f"inventory: {action.description_of_item_in_inventory}"
        )
    elif action.type == "PlayerInspect":
        return f"{action.inspect_process_description} {action.inspect_result_description}"
    elif action.type == "PlayerMove":
        return (
            f"{action.description} New location of the player: "
            f"{action.description_of_player_in_room}"
        )
    elif action.type == "PlayerPass":
        return action.description
    raise BugFault(f"Unknown action type: {action.type}")


# ------------------------------------------------
# Game
# ------------------------------------------------

@dataclass(frozen=True)
class Turn:
    """One prompt cycle. Appended to the game log and never modified."""
    prompt: str
    actions: list[Action]
    description: str


@dataclass
class GameState:
    setting: str
    player: Player
    player_location: PlayerLocation
    rooms: list[Room] = field(default_factory=list)
    items: list[Item] = field(default_factory=list)
    item_locations: list[ItemLocation] = field(default_factory=list)
    room_connections: list[RoomConnection] = field(default_factory=list)


@dataclass
class GameMetadata:
    id: str
    name: str
    creation_date_time: str


@dataclass
class Game:
    """Root aggregate. Owns the whole world by value."""
    metadata: GameMetadata
    state: GameState
    turns: list[Turn] = field(default_factory=list)


# ------------------------------------------------
# Status
# ------------------------------------------------

@dataclass
class GameStatusMessage:
    type: Literal["info", "warning", "error"]
    content: str


@dataclass
class GameStatus:
    """Running, user-visible message log. Not part of the game aggregate."""
    messages: list[GameStatusMessage] = field(default_factory=list)
