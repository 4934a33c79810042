"""
Fault taxonomy for the Shifting Manor engine.

GameFault subclasses are player-facing and recoverable at the turn level:
the orchestrator logs them and rolls the turn back. BugFault subclasses mean
an invariant of the world graph has already been broken and must propagate.
ExternalFault wraps failures of the language-model collaborators.
"""


class GameFault(Exception):
    """A rejected transition. The game state is left unchanged."""


class NotFoundFault(GameFault):
    """A room or item name is unknown (or not where the action needs it)."""


class DuplicateEntityFault(GameFault):
    """A room or item with the same name already exists."""


class NoOpFault(GameFault):
    """The requested transition would not change anything."""


class IllegalMoveFault(GameFault):
    """The destination room is not connected to the player's room."""


class BugFault(Exception):
    """Internal error. Never caught and continued."""


class ConsistencyFault(BugFault):
    """An invariant of the world graph is violated."""

    def __init__(self, message: str, problems: list[str] | None = None):
        super().__init__(message)
        self.problems = problems or [message]


class ExternalFault(Exception):
    """A language-model call failed or returned unusable output."""
