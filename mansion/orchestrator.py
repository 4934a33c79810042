"""
Turn orchestrator for the Shifting Manor engine.

Owns one live game and plays turns against it:

Phase 1: Snapshot the game (deep copy) and play the turn on the copy
Phase 2: Game master plans the turn from the player's prompt
Phase 3: Game master parses the plan into actions
Phase 4: Apply the actions in order, generating any room the player walks
         into for the first time
Phase 5: Validate the world and narrate the turn
Phase 6: Append the turn to the game log and commit the copy

A turn is all-or-nothing: if any action is rejected, or a language-model
call fails, the working copy is dropped and the live game never sees it. Consistency faults
are never caught here.
"""

import copy
import logging
import threading
from pathlib import Path

from mansion.agents.game_master import GameMaster
from mansion.agents.world_builder import WorldBuilder
from mansion.content import starter_world
from mansion.errors import ExternalFault, GameFault
from mansion.hooks.base import BaseHook
from mansion.llm.factory import create_llm
from mansion.managers.game_manager import GameManager
from mansion.managers.interpreter import interpret_action, new_room_needed
from mansion.managers.validation import validate_game
from mansion.storage.game_store import GameStore
from mansion.storage.models import (
    Game,
    GameMetadata,
    GameStatus,
    GameStatusMessage,
    ItemLocationRoom,
    Turn,
)

logger = logging.getLogger(__name__)


class TurnRejected(Exception):
    """One or more actions of a turn were rejected."""

    def __init__(self, reasons: list[str]):
        super().__init__("; ".join(reasons))
        self.reasons = reasons


class Orchestrator:
    """
    Session handle for one live game.

    Turns, new games and loads are serialized by a lock, so the same
    orchestrator can be shared by concurrent web requests. Separate
    orchestrators are fully independent games.
    """

    def __init__(self, config: dict, store: GameStore | None = None) -> None:
        """
        Initialize the orchestrator from configuration and start a new game.

        Args:
            config: Full configuration dictionary from config.json
            store: Game store to use instead of the configured ``games_dir``
        """
        self.config = config
        self.store = store or GameStore(config.get("games_dir", "game"))

        self.game_master = GameMaster(
            planner=create_llm("planner", config),
            action_parser=create_llm("action_parser", config),
            narrator=create_llm("narrator", config),
        )
        self.world_builder = WorldBuilder(create_llm("world_builder", config))

        # Survives rollbacks and game switches
        self.status = GameStatus()

        self._hooks: list[BaseHook] = []
        self._lock = threading.Lock()

        self.manager = GameManager(self._build_new_game())
        logger.info(f"Orchestrator initialized with game {self.game.metadata.id}")

    @property
    def game(self) -> Game:
        return self.manager.game

    # ------------------------------------------------
    # Status and hooks
    # ------------------------------------------------

    def log(self, message_type: str, content: str) -> None:
        """Append to the user-visible status log and mirror it to the logger."""
        self.status.messages.append(GameStatusMessage(type=message_type, content=content))
        if message_type == "error":
            logger.error(content)
        elif message_type == "warning":
            logger.warning(content)
        else:
            logger.info(content)

    def register_hook(self, hook: BaseHook) -> None:
        self._hooks.append(hook)
        logger.info(f"Registered hook: {hook.__class__.__name__}")

    def _fire_hooks(self, method_name: str, **kwargs) -> None:
        """Call a hook method on all hooks; a failing hook is only logged."""
        for hook in self._hooks:
            try:
                method = getattr(hook, method_name, None)
                if method:
                    method(**kwargs)
            except Exception as e:
                logger.error(
                    f"Hook {hook.__class__.__name__}.{method_name} failed: {e}",
                    exc_info=True,
                )

    # ------------------------------------------------
    # Game lifecycle
    # ------------------------------------------------

    def _build_new_game(self) -> Game:
        game = starter_world.new_game()
        validate_game(game)
        return game

    def new_game(self) -> Game:
        """Replace the live game with a fresh starting world."""
        with self._lock:
            self.manager.game = self._build_new_game()
            self.log("info", f"Started new game {self.game.metadata.id}")
            self._fire_hooks(
                "on_game_start",
                game_id=self.game.metadata.id,
                name=self.game.metadata.name,
                loaded=False,
            )
            return self.game

    def load_game(self, game_id: str) -> Game:
        """
        Replace the live game with a stored one.

        Raises:
            FileNotFoundError: If no game is stored under that id
            ValueError: If the stored snapshot is malformed
            ConsistencyFault: If the stored game breaks a world invariant
        """
        with self._lock:
            game = self.store.load(game_id)
            self.manager.game = game
            self.log("info", f"Loaded game {game_id}")
            self._fire_hooks(
                "on_game_start",
                game_id=game.metadata.id,
                name=game.metadata.name,
                loaded=True,
            )
            return game

    def save_game(self) -> Path:
        with self._lock:
            path = self.store.save(self.game)
            self.log("info", f"Saved game {self.game.metadata.id}")
            return path

    def list_saved_games(self) -> list[GameMetadata]:
        return self.store.list_metadata()

    # ------------------------------------------------
    # Turns
    # ------------------------------------------------

    def prompt_game(self, prompt: str) -> Turn | None:
        """
        Play one turn from the player's free-text prompt.

        Returns:
            The committed Turn, or None if the turn was discarded. Reasons for
            a discarded turn are in the status log.

        Raises:
            BugFault: If a world invariant is found broken
        """
        with self._lock:
            turn_number = len(self.game.turns) + 1
            self._fire_hooks("on_turn_start", turn_number=turn_number, prompt=prompt)

            # Phase 1: Snapshot. The turn is played on the copy; the live
            # game only ever holds committed turns.
            working = GameManager(copy.deepcopy(self.game))

            try:
                turn = self._play_turn(working, turn_number, prompt)
            except ExternalFault as e:
                self.log("error", str(e))
                self._discard_turn(turn_number, [str(e)])
                return None
            except TurnRejected as e:
                self._discard_turn(turn_number, e.reasons)
                return None

            self.manager.game = working.game

            self._fire_hooks(
                "on_turn_end",
                turn_number=turn_number,
                prompt=prompt,
                description=turn.description,
            )
            logger.info(f"Turn {turn_number}: {len(turn.actions)} action(s) applied")
            return turn

    def _play_turn(self, working: GameManager, turn_number: int, prompt: str) -> Turn:
        # Phase 2: Plan
        plan = self.game_master.plan(working, prompt)

        # Phase 3: Actions
        actions = self.game_master.generate_actions(working, plan)

        # Phase 4: Apply in order, collecting every rejection. Once the turn
        # is rejected no more rooms are generated.
        reasons = []
        for action in actions:
            try:
                room_name = new_room_needed(working, action)
                if room_name is not None:
                    if reasons:
                        logger.debug(f'Not generating "{room_name}" for a rejected turn')
                        continue
                    self._materialize_room(working, room_name)
                interpret_action(working, action)
            except GameFault as e:
                self.log("error", str(e))
                reasons.append(str(e))
                continue
            self._fire_hooks(
                "on_action_applied",
                turn_number=turn_number,
                action_type=action.type,
            )

        if reasons:
            raise TurnRejected(reasons)

        # Phase 5: Validate and narrate
        validate_game(working.game)
        description = self.game_master.narrate(working, prompt, actions)

        # Phase 6: Commit
        turn = Turn(prompt=prompt, actions=actions, description=description)
        working.add_turn(turn)
        return turn

    def _materialize_room(self, working: GameManager, room_name: str) -> None:
        """Generate a room the player is about to enter, with its items."""
        room, connections = self.world_builder.generate_room(working, room_name)
        working.create_room(room, connections)
        self.log("info", f'Discovered a new room: "{room_name}"')
        self._fire_hooks(
            "on_room_created",
            room_name=room_name,
            connection_count=len(connections),
        )

        for item, description in self.world_builder.generate_items_for_room(working, room):
            working.create_item(
                item,
                ItemLocationRoom(item=item.name, room=room.name, description=description),
            )
            self._fire_hooks("on_item_created", item_name=item.name, room_name=room.name)

    def _discard_turn(self, turn_number: int, reasons: list[str]) -> None:
        """Drop the working copy of a failed turn; the live game is untouched."""
        logger.info(f"Turn {turn_number} discarded")
        self.log("error", "Due to the preceding errors, failed to update game")
        self._fire_hooks("on_turn_rolled_back", turn_number=turn_number, reasons=reasons)

    # ------------------------------------------------
    # Views
    # ------------------------------------------------

    def get_map(self) -> dict:
        """Nodes and edges of the world graph, for display."""
        graph = self.manager.world.to_graph()
        here = self.game.state.player_location.room
        return {
            "nodes": [
                {
                    "id": name,
                    "generated": data["generated"],
                    "current": name == here,
                }
                for name, data in graph.nodes(data=True)
            ],
            "edges": [
                {"from": a, "to": b, "description": data["description"]}
                for a, b, data in graph.edges(data=True)
            ],
        }
