"""
World graph store for the Shifting Manor engine.

Read-only view over a GameState: rooms, items, undirected room connections,
item locations and the player location. Existence checks cross-check the
associated relation, so a room without connections or an item without a
location record surfaces as a ConsistencyFault rather than as a missing name.
"""

import logging

import networkx as nx

from mansion.errors import ConsistencyFault, NotFoundFault
from mansion.storage.models import (
    GameState,
    Item,
    ItemLocation,
    ItemLocationInventory,
    ItemLocationRoom,
    Room,
    RoomConnection,
)

logger = logging.getLogger(__name__)


class WorldGraph:
    """
    Query API over the world graph of a single game.

    Connections are stored once per undirected edge, so every lookup checks
    both endpoint fields.
    """

    def __init__(self, state: GameState):
        self.state = state

    # ------------------------------------------------
    # Existence
    # ------------------------------------------------

    def room_exists(self, name: str) -> bool:
        """
        Check whether a room exists.

        Raises:
            ConsistencyFault: If the room exists but no connection touches it
        """
        if not any(room.name == name for room in self.state.rooms):
            return False
        if not any(connection.touches(name) for connection in self.state.room_connections):
            raise ConsistencyFault(f'The room "{name}" is not in room_connections.')
        return True

    def item_exists(self, name: str) -> bool:
        """
        Check whether an item exists.

        Raises:
            ConsistencyFault: If the item exists but has no location record
        """
        if not any(item.name == name for item in self.state.items):
            return False
        if not any(location.item == name for location in self.state.item_locations):
            raise ConsistencyFault(f'The item "{name}" is not in item_locations.')
        return True

    # ------------------------------------------------
    # Records
    # ------------------------------------------------

    def get_room(self, name: str) -> Room:
        if not self.room_exists(name):
            raise NotFoundFault(f'The room "{name}" does not exist.')
        return next(room for room in self.state.rooms if room.name == name)

    def get_item(self, name: str) -> Item:
        if not self.item_exists(name):
            raise NotFoundFault(f'The item "{name}" does not exist.')
        return next(item for item in self.state.items if item.name == name)

    def get_room_connections(self, name: str) -> list[RoomConnection]:
        """All connections with ``name`` at either endpoint."""
        self.get_room(name)
        return [
            connection for connection in self.state.room_connections
            if connection.touches(name)
        ]

    def get_connected_room_names(self, name: str) -> list[str]:
        """Names on the far side of every connection of a room, generated or not."""
        return [connection.other(name) for connection in self.get_room_connections(name)]

    def is_connected(self, room1: str, room2: str) -> bool:
        probe = RoomConnection(room1=room1, room2=room2, description="")
        return any(connection.same_edge(probe) for connection in self.state.room_connections)

    def get_item_location(self, name: str) -> ItemLocation:
        if not self.item_exists(name):
            raise NotFoundFault(f'The item "{name}" does not exist.')
        return next(
            location for location in self.state.item_locations if location.item == name
        )

    def get_items_in_room(self, name: str) -> list[ItemLocationRoom]:
        return [
            location for location in self.state.item_locations
            if location.type == "room" and location.room == name
        ]

    def get_inventory(self) -> list[ItemLocationInventory]:
        return [
            location for location in self.state.item_locations
            if location.type == "inventory"
        ]

    def get_frontier_room_names(self) -> list[str]:
        """Room names referenced by connections but not generated yet."""
        known = {room.name for room in self.state.rooms}
        frontier = []
        for connection in self.state.room_connections:
            for name in (connection.room1, connection.room2):
                if name not in known and name not in frontier:
                    frontier.append(name)
        return frontier

    # ------------------------------------------------
    # Graph view
    # ------------------------------------------------

    def to_graph(self) -> nx.Graph:
        """
        Build an undirected NetworkX view of the world.

        Generated rooms carry ``generated=True``; frontier names referenced
        only by connections carry ``generated=False``.
        """
        graph = nx.Graph()
        for room in self.state.rooms:
            graph.add_node(room.name, description=room.description, generated=True)
        for connection in self.state.room_connections:
            for name in (connection.room1, connection.room2):
                if name not in graph.nodes:
                    graph.add_node(name, description="", generated=False)
            graph.add_edge(
                connection.room1,
                connection.room2,
                description=connection.description,
            )
        return graph
