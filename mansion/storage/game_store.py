"""
Flat JSON-file persistence for games.

Each game is stored as ``<games_dir>/<game id>.json``. Loading validates the
world invariants, so a loaded game is always safe to play.
"""

import json
import logging
from pathlib import Path

from mansion.managers.validation import validate_game
from mansion.storage.models import Game, GameMetadata
from mansion.storage.snapshot import game_from_dict, game_to_dict

logger = logging.getLogger(__name__)


class GameStore:
    """Reads and writes game snapshots in a directory."""

    def __init__(self, games_dir: str = "game") -> None:
        """
        Args:
            games_dir: Directory holding the snapshot files (created on first save)
        """
        self.games_dir = Path(games_dir)

    def _path(self, game_id: str) -> Path:
        if not game_id or Path(game_id).name != game_id or game_id.startswith("."):
            raise ValueError(f"Invalid game id: {game_id!r}")
        return self.games_dir / f"{game_id}.json"

    def save(self, game: Game) -> Path:
        """Write a game snapshot, replacing any previous one with the same id."""
        self.games_dir.mkdir(parents=True, exist_ok=True)
        path = self._path(game.metadata.id)
        with open(path, "w", encoding="utf8") as f:
            json.dump(game_to_dict(game), f, indent=4, ensure_ascii=False)
        logger.info(f"Saved game {game.metadata.id} to {path}")
        return path

    def load(self, game_id: str) -> Game:
        """
        Read and validate a game snapshot.

        Raises:
            FileNotFoundError: If no snapshot exists for the id
            ValueError: If the snapshot is malformed
            ConsistencyFault: If the snapshot breaks a world invariant
        """
        path = self._path(game_id)
        with open(path, "r", encoding="utf8") as f:
            data = json.load(f)
        game = game_from_dict(data)
        validate_game(game)
        logger.info(f"Loaded game {game_id} from {path}")
        return game

    def list_metadata(self) -> list[GameMetadata]:
        """Metadata of every stored game, oldest first."""
        if not self.games_dir.exists():
            return []

        metadatas = []
        for path in sorted(self.games_dir.glob("*.json")):
            try:
                with open(path, "r", encoding="utf8") as f:
                    metadata = json.load(f)["metadata"]
                metadatas.append(GameMetadata(
                    id=metadata["id"],
                    name=metadata["name"],
                    creation_date_time=metadata["creation_date_time"],
                ))
            except (OSError, KeyError, TypeError, json.JSONDecodeError) as e:
                logger.warning(f"Skipping unreadable game file {path}: {e}")
        metadatas.sort(key=lambda m: m.creation_date_time)
        return metadatas
