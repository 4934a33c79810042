"""
Action interpreter: the state-transition function of the game.

Maps one structured Action onto at most one GameManager mutation. All
preconditions are checked against the live state before the mutation runs,
so a rejected action leaves the game unchanged.
"""

import logging

from mansion.errors import BugFault, IllegalMoveFault, NoOpFault, NotFoundFault
from mansion.managers.game_manager import GameManager
from mansion.storage.models import (
    Action,
    ItemLocationInventory,
    ItemLocationRoom,
    PlayerDropItem,
    PlayerLocation,
    PlayerMove,
    PlayerTakeItem,
)

logger = logging.getLogger(__name__)


def interpret_action(manager: GameManager, action: Action) -> None:
    """
    Apply a single action to the game.

    Inspect and pass actions are narrative only and change nothing.

    Raises:
        GameFault: If the action is not legal in the current state
        BugFault: If the action is not a known variant
    """
    if action.type == "PlayerTakeItem":
        _take_item(manager, action)
    elif action.type == "PlayerDropItem":
        _drop_item(manager, action)
    elif action.type == "PlayerMove":
        _move(manager, action)
    elif action.type in ("PlayerInspect", "PlayerPass"):
        pass
    else:
        raise BugFault(f"Unknown action type: {action.type}")
    logger.debug(f"Applied {action.type}")


def new_room_needed(manager: GameManager, action: Action) -> str | None:
    """
    Name of the room that must be generated before ``action`` can apply.

    Only a move along an existing connection to a room that has not been
    generated yet needs one; every other action returns None.
    """
    if action.type != "PlayerMove":
        return None
    if manager.room_exists(action.room):
        return None
    here = manager.get_current_player_location().room
    if not manager.world.is_connected(here, action.room):
        return None
    return action.room


def _take_item(manager: GameManager, action: PlayerTakeItem) -> None:
    here = manager.get_current_player_location().room
    current = manager.get_item_location(action.item)
    if current.type == "room" and current.room != here:
        raise NotFoundFault(f'The item "{action.item}" is not in the room "{here}".')
    manager.set_item_location(
        action.item,
        ItemLocationInventory(
            item=action.item,
            description=action.description_of_item_in_inventory,
        ),
    )


def _drop_item(manager: GameManager, action: PlayerDropItem) -> None:
    here = manager.get_current_player_location().room
    current = manager.get_item_location(action.item)
    if current.type == "room" and current.room != here:
        raise NotFoundFault(f'The item "{action.item}" is not in the player\'s inventory.')
    manager.set_item_location(
        action.item,
        ItemLocationRoom(
            item=action.item,
            room=here,
            description=action.description_of_item_in_room,
        ),
    )


def _move(manager: GameManager, action: PlayerMove) -> None:
    here = manager.get_current_player_location().room
    if action.room == here:
        raise NoOpFault(f'The player is already in the room "{here}".')
    if not manager.world.is_connected(here, action.room):
        raise IllegalMoveFault(
            f'The room "{action.room}" is not connected to the room "{here}".'
        )
    manager.set_player_location(
        PlayerLocation(
            room=action.room,
            description=action.description_of_player_in_room,
        )
    )
