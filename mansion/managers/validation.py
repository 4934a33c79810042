"""
Whole-game invariant checks.

Runs over a complete Game (after loading a snapshot, after creating a new
game, and after each turn) and reports every violation at once.
"""

import logging
from collections import Counter

import networkx as nx

from mansion.errors import ConsistencyFault
from mansion.managers.world import WorldGraph
from mansion.storage.models import Game

logger = logging.getLogger(__name__)


def find_problems(game: Game, allow_frontier: bool = True) -> list[str]:
    """
    Collect invariant violations of a game.

    Args:
        game: Game to check
        allow_frontier: Accept connections whose far endpoint has not been
            generated yet. At least one endpoint must always exist.

    Returns:
        Human-readable problem descriptions (empty when the game is valid)
    """
    state = game.state
    problems = []

    room_names = Counter(room.name for room in state.rooms)
    item_names = Counter(item.name for item in state.items)

    for name, count in room_names.items():
        if count > 1:
            problems.append(f'The room "{name}" exists {count} times.')
    for name, count in item_names.items():
        if count > 1:
            problems.append(f'The item "{name}" exists {count} times.')

    for connection in state.room_connections:
        endpoints = [connection.room1, connection.room2]
        missing = [name for name in endpoints if name not in room_names]
        if connection.room1 == connection.room2:
            problems.append(f'The connection of "{connection.room1}" loops onto itself.')
        if len(missing) == 2:
            problems.append(
                f'The connection between "{connection.room1}" and '
                f'"{connection.room2}" references no existing room.'
            )
        elif missing and not allow_frontier:
            problems.append(
                f'The connection between "{connection.room1}" and '
                f'"{connection.room2}" references the missing room "{missing[0]}".'
            )

    for name in room_names:
        if not any(connection.touches(name) for connection in state.room_connections):
            problems.append(f'The room "{name}" has no connections.')

    location_counts = Counter(location.item for location in state.item_locations)
    for name in item_names:
        if location_counts[name] != 1:
            problems.append(
                f'The item "{name}" has {location_counts[name]} location records.'
            )
    for location in state.item_locations:
        if location.item not in item_names:
            problems.append(f'The location record of "{location.item}" names no item.')
        if location.type == "room" and location.room not in room_names:
            problems.append(
                f'The item "{location.item}" is in the missing room "{location.room}".'
            )
    if len(state.item_locations) != len(state.items):
        problems.append(
            f"There are {len(state.items)} items but "
            f"{len(state.item_locations)} item locations."
        )

    if state.player_location.room not in room_names:
        problems.append(
            f'The player is in the missing room "{state.player_location.room}".'
        )

    return problems


def validate_game(game: Game, allow_frontier: bool = True) -> None:
    """
    Check every world invariant of a game.

    Unreachable rooms are reported as a warning only; keeping the world
    connected is the job of whoever adds rooms.

    Raises:
        ConsistencyFault: Listing every violated invariant
    """
    problems = find_problems(game, allow_frontier=allow_frontier)
    if problems:
        for problem in problems:
            logger.error(f"Game {game.metadata.id}: {problem}")
        raise ConsistencyFault(
            f"Game {game.metadata.id} violates {len(problems)} invariant(s): "
            + " ".join(problems),
            problems,
        )

    graph = WorldGraph(game.state).to_graph()
    reachable = nx.node_connected_component(graph, game.state.player_location.room)
    unreachable = [room.name for room in game.state.rooms if room.name not in reachable]
    if unreachable:
        logger.warning(
            f"Game {game.metadata.id}: rooms unreachable from the player: "
            f"{', '.join(unreachable)}"
        )
