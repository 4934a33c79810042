"""FastAPI web server for playing Shifting Manor games."""

import logging
from dataclasses import asdict

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from mansion.errors import BugFault
from mansion.orchestrator import Orchestrator
from mansion.storage.snapshot import game_to_dict

logger = logging.getLogger(__name__)


class LoadGameRequest(BaseModel):
    id: str


class PromptGameRequest(BaseModel):
    prompt: str


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


def create_app(orchestrator: Orchestrator) -> FastAPI:
    """
    Build the web app around one orchestrator.

    Endpoints are plain functions so FastAPI runs them in its threadpool;
    the orchestrator serializes turns with its own lock.
    """
    app = FastAPI(title="Shifting Manor", version="0.1.0")
    app.state.orchestrator = orchestrator

    @app.post("/api/newGame")
    def new_game():
        """Start a fresh game, replacing the live one."""
        try:
            game = orchestrator.new_game()
            return JSONResponse({"id": game.metadata.id})
        except Exception as e:
            logger.error(f"Error creating game: {e}", exc_info=True)
            return _error(str(e), 500)

    @app.get("/api/getGame")
    def get_game():
        return JSONResponse(game_to_dict(orchestrator.game))

    @app.get("/api/getSavedGameMetadatas")
    def get_saved_game_metadatas():
        """List metadata of every stored game."""
        try:
            return JSONResponse([asdict(m) for m in orchestrator.list_saved_games()])
        except Exception as e:
            logger.error(f"Error listing saved games: {e}")
            return _error(str(e), 500)

    @app.post("/api/saveGame")
    def save_game():
        try:
            orchestrator.save_game()
            return JSONResponse({"id": orchestrator.game.metadata.id})
        except OSError as e:
            logger.error(f"Error saving game: {e}")
            return _error(str(e), 500)

    @app.post("/api/loadGame")
    def load_game(request: LoadGameRequest):
        """Replace the live game with a stored one."""
        try:
            game = orchestrator.load_game(request.id)
            return JSONResponse({"id": game.metadata.id})
        except FileNotFoundError:
            return _error(f"Game not found: {request.id}", 404)
        except ValueError as e:
            return _error(str(e), 400)
        except BugFault as e:
            logger.error(f"Stored game {request.id} is inconsistent: {e}")
            return _error(str(e), 500)

    @app.post("/api/promptGame")
    def prompt_game(request: PromptGameRequest):
        """
        Play one turn.

        A discarded turn still answers 200 with ``ok`` false; the reasons are
        in the status log.
        """
        try:
            turn = orchestrator.prompt_game(request.prompt)
        except BugFault as e:
            logger.error(f"Turn aborted by an internal error: {e}", exc_info=True)
            return _error(str(e), 500)

        return JSONResponse({
            "ok": turn is not None,
            "turn": asdict(turn) if turn is not None else None,
        })

    @app.get("/api/getGameStatus")
    def get_game_status():
        return JSONResponse(asdict(orchestrator.status))

    @app.get("/api/getMap")
    def get_map():
        """Rooms and connections of the live game, generated or not."""
        return JSONResponse(orchestrator.get_map())

    return app
