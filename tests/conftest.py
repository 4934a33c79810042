"""Shared fixtures and test doubles for the Shifting Manor tests."""

from unittest.mock import patch

import pytest

from mansion.llm.base import BaseLLM
from mansion.managers.game_manager import GameManager
from mansion.orchestrator import Orchestrator
from mansion.storage.game_store import GameStore
from mansion.storage.models import (
    Game,
    GameMetadata,
    GameState,
    Item,
    ItemLocationRoom,
    LLMResponse,
    Player,
    PlayerLocation,
    Room,
    RoomConnection,
)


class MockLLM(BaseLLM):
    """
    Scripted LLM for testing without real API calls.

    ``responses`` feed ``complete`` and ``json_responses`` feed
    ``complete_json``, in order. An exception instance in either list is
    raised instead of returned.
    """

    provider_name = "mock"

    def __init__(self, responses=None, json_responses=None, **kwargs):
        super().__init__("mock-model", "mock-key", **kwargs)
        self.responses = list(responses or [])
        self.json_responses = list(json_responses or [])
        self.calls = []

    def complete(self, messages, system_prompt, temperature=0.7, max_tokens=1024):
        self.calls.append(("complete", messages, None))
        text = self.responses.pop(0) if self.responses else "Nothing happens."
        if isinstance(text, Exception):
            raise text
        return LLMResponse(text=text, input_tokens=10, output_tokens=20, latency_ms=5.0)

    def complete_json(self, messages, system_prompt, schema, temperature=0.1, max_tokens=2048):
        self.calls.append(("complete_json", messages, schema))
        result = self.json_responses.pop(0) if self.json_responses else {}
        if isinstance(result, Exception):
            raise result
        return result


def make_game(
    rooms=("Foyer", "Library"),
    connections=(("Foyer", "Library"),),
    items=(("Note", "Foyer"),),
    player_room="Foyer",
) -> Game:
    """Build a small valid game from room names, edges and (item, room) pairs."""
    return Game(
        metadata=GameMetadata(id="test-game", name="Game test-game", creation_date_time="2024-01-01T00:00:00+00:00"),
        state=GameState(
            setting="A test mansion.",
            player=Player(name="Tester", description="A careful tester."),
            player_location=PlayerLocation(room=player_room, description="Standing about."),
            rooms=[Room(name=name, description=f"The {name}.") for name in rooms],
            items=[Item(name=name, description=f"A {name}.") for name, _ in items],
            item_locations=[
                ItemLocationRoom(item=name, room=room, description=f"The {name} lies here.")
                for name, room in items
            ],
            room_connections=[
                RoomConnection(room1=a, room2=b, description=f"A door from {a} to {b}.")
                for a, b in connections
            ],
        ),
        turns=[],
    )


@pytest.fixture
def game():
    return make_game()


@pytest.fixture
def manager(game):
    return GameManager(game)


def make_test_config():
    return {
        "games_dir": "unused",
        "agents": {
            name: {"provider": "openai", "model": "test-model"}
            for name in ("planner", "action_parser", "narrator", "world_builder")
        },
        "providers": {"openai": {"api_key": "test-key"}},
    }


def build_orchestrator(tmp_path, planner=None, parser=None, narrator=None, builder=None):
    """
    Build an Orchestrator whose agents are MockLLMs.

    Returns:
        Tuple of (orchestrator, llms) where llms maps agent name to its mock.
    """
    llms = {
        "planner": planner or MockLLM(responses=["The player does something."] * 5),
        "action_parser": parser or MockLLM(),
        "narrator": narrator or MockLLM(responses=["It happened."] * 5),
        "world_builder": builder or MockLLM(),
    }
    with patch("mansion.orchestrator.create_llm") as mock_create_llm:
        mock_create_llm.side_effect = lambda agent_name, cfg: llms[agent_name]
        orchestrator = Orchestrator(make_test_config(), store=GameStore(str(tmp_path / "games")))
    return orchestrator, llms
