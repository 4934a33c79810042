"""
Game state manager for the Shifting Manor engine.

The only component allowed to mutate a Game. Every mutation checks all of its
preconditions before touching the state, so a rejected call leaves the game
exactly as it was.
"""

import logging

from mansion.errors import ConsistencyFault, DuplicateEntityFault, NoOpFault, NotFoundFault
from mansion.managers.world import WorldGraph
from mansion.storage.models import (
    Game,
    Item,
    ItemLocation,
    ItemLocationInventory,
    ItemLocationRoom,
    PlayerLocation,
    Room,
    RoomConnection,
    Turn,
)

logger = logging.getLogger(__name__)


class GameManager:
    """
    Owns one live Game and exposes its query and mutation API.

    The ``game`` attribute may be swapped wholesale (new game, load game,
    rollback); all queries go through a fresh WorldGraph view of it.
    """

    def __init__(self, game: Game):
        self.game = game

    @property
    def world(self) -> WorldGraph:
        return WorldGraph(self.game.state)

    # ------------------------------------------------
    # Queries
    # ------------------------------------------------

    def room_exists(self, name: str) -> bool:
        return self.world.room_exists(name)

    def item_exists(self, name: str) -> bool:
        return self.world.item_exists(name)

    def get_room(self, name: str) -> Room:
        return self.world.get_room(name)

    def get_item(self, name: str) -> Item:
        return self.world.get_item(name)

    def get_room_connections(self, name: str) -> list[RoomConnection]:
        return self.world.get_room_connections(name)

    def get_item_location(self, name: str) -> ItemLocation:
        return self.world.get_item_location(name)

    def get_items_in_room(self, name: str) -> list[ItemLocationRoom]:
        return self.world.get_items_in_room(name)

    def get_inventory(self) -> list[ItemLocationInventory]:
        return self.world.get_inventory()

    def get_current_player_location(self) -> PlayerLocation:
        return self.game.state.player_location

    def get_current_room(self) -> Room:
        return self.world.get_room(self.game.state.player_location.room)

    def get_current_room_items(self) -> list[ItemLocationRoom]:
        return self.world.get_items_in_room(self.get_current_room().name)

    def get_current_room_connections(self) -> list[RoomConnection]:
        return self.world.get_room_connections(self.game.state.player_location.room)

    # ------------------------------------------------
    # Mutations
    # ------------------------------------------------

    def create_room(self, room: Room, connections: list[RoomConnection]) -> None:
        """
        Insert a new room together with its connections.

        Connections are undirected and stored once: a connection whose
        endpoint pair already exists (in either order) is skipped. The
        reverse edge is never inserted.

        Raises:
            DuplicateEntityFault: If the room name is taken
            ConsistencyFault: If a connection would reference no existing room
        """
        if self.world.room_exists(room.name):
            raise DuplicateEntityFault(f'The room "{room.name}" already exists.')

        known = {existing.name for existing in self.game.state.rooms} | {room.name}
        for connection in connections:
            if connection.room1 not in known and connection.room2 not in known:
                raise ConsistencyFault(
                    f'The connection between "{connection.room1}" and '
                    f'"{connection.room2}" references no existing room.'
                )

        accepted: list[RoomConnection] = []
        for connection in connections:
            existing = self.game.state.room_connections + accepted
            if any(connection.same_edge(other) for other in existing):
                logger.debug(
                    f"Skipping duplicate connection {connection.room1} <-> {connection.room2}"
                )
                continue
            accepted.append(connection)

        self.game.state.rooms.append(room)
        self.game.state.room_connections.extend(accepted)
        logger.info(f'Created room "{room.name}" with {len(accepted)} new connection(s)')

    def create_item(self, item: Item, location: ItemLocation) -> None:
        """
        Insert a new item and its single location record.

        Raises:
            DuplicateEntityFault: If the item name is taken
            NotFoundFault: If the location names an unknown room
            ConsistencyFault: If the location record is for another item
        """
        if self.world.item_exists(item.name):
            raise DuplicateEntityFault(f'The item "{item.name}" already exists.')
        if location.item != item.name:
            raise ConsistencyFault(
                f'The location record of "{location.item}" was given for "{item.name}".'
            )
        if location.type == "room" and not self.world.room_exists(location.room):
            raise NotFoundFault(f'The room "{location.room}" does not exist.')

        self.game.state.items.append(item)
        self.game.state.item_locations.append(location)
        logger.info(f'Created item "{item.name}"')

    def set_player_location(self, player_location: PlayerLocation) -> None:
        """
        Replace the player location.

        Raises:
            NotFoundFault: If the room does not exist
        """
        if not self.world.room_exists(player_location.room):
            raise NotFoundFault(f'The room "{player_location.room}" does not exist.')
        self.game.state.player_location = player_location
        logger.debug(f'Player moved to "{player_location.room}"')

    def set_item_location(self, item: str, item_location: ItemLocation) -> None:
        """
        Replace the single location record of an item.

        Raises:
            NotFoundFault: If the item or the target room does not exist
            NoOpFault: If the item is already at that kind of place
        """
        current = self.world.get_item_location(item)

        if item_location.type == "inventory":
            if current.type == "inventory":
                raise NoOpFault(f'The item "{item}" is already in the player\'s inventory.')
        elif item_location.type == "room":
            if not self.world.room_exists(item_location.room):
                raise NotFoundFault(f'The room "{item_location.room}" does not exist.')
            if current.type == "room" and current.room == item_location.room:
                raise NoOpFault(
                    f'The item "{item}" is already in the room "{item_location.room}".'
                )
        else:
            raise ConsistencyFault(f"Unknown item location type: {item_location.type}")

        if item_location.item != item:
            raise ConsistencyFault(
                f'The location record of "{item_location.item}" was given for "{item}".'
            )

        locations = self.game.state.item_locations
        index = next(i for i, location in enumerate(locations) if location.item == item)
        locations[index] = item_location
        logger.debug(f'Item "{item}" moved to {item_location.type}')

    def add_turn(self, turn: Turn) -> None:
        self.game.turns.append(turn)

    # ------------------------------------------------
    # Rendering
    # ------------------------------------------------

    def get_game_description(self) -> str:
        """
        Render the current game as a prompt-ready markdown document.

        Covers setting, player, inventory, the current room, its items and
        its connections. Does not mutate anything.
        """
        state = self.game.state
        player_location = state.player_location

        inventory = "\n".join(
            f'  - "{location.item}": {location.description}\n'
            f"  - Description: {self.get_item(location.item).description}"
            for location in self.get_inventory()
        )
        room_items = "\n".join(
            f'  - "{location.item}": {location.description}\n'
            f"  - Description: {self.get_item(location.item).description}"
            for location in self.get_current_room_items()
        )
        connections = "\n".join(
            f"  - {connection.other(player_location.room)}: {connection.description}"
            for connection in self.get_current_room_connections()
        )
        current_room = self.get_current_room()

        return f"""# Game State

This document describes the current state of the game.

## Setting

{state.setting}

## Player

The player's name is "{state.player.name}". {state.player.description}

## Inventory

The player inventory contains:
{inventory or "  (nothing)"}

## Current Room

The player is currently in "{current_room.name}": {player_location.description}

{current_room.description}

The following items are in this room:
{room_items or "  (nothing)"}

## Connected Rooms

The player's current room is connected to the following rooms:
{connections}"""
