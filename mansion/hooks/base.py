"""
Hook base class for the Shifting Manor engine.

Observer interface with no-op default implementations. Subclasses override
only the methods they need. The orchestrator wraps every hook call in
try/except so a broken hook never breaks a turn.
"""

import logging

logger = logging.getLogger(__name__)


class BaseHook:
    """Base class for all hooks. All methods are no-ops by default."""

    def on_game_start(self, game_id: str, name: str, loaded: bool) -> None:
        """Called when a game is created or loaded."""
        pass

    def on_turn_start(self, turn_number: int, prompt: str) -> None:
        """Called before the game master is asked to plan a turn."""
        pass

    def on_room_created(self, room_name: str, connection_count: int) -> None:
        """Called after a generated room has been inserted."""
        pass

    def on_item_created(self, item_name: str, room_name: str) -> None:
        """Called after a generated item has been inserted."""
        pass

    def on_action_applied(self, turn_number: int, action_type: str) -> None:
        """Called after each action of a turn has been applied."""
        pass

    def on_turn_end(self, turn_number: int, prompt: str, description: str) -> None:
        """Called once a turn has been committed to the game log."""
        pass

    def on_turn_rolled_back(self, turn_number: int, reasons: list[str]) -> None:
        """Called when a turn was discarded and the game restored."""
        pass
