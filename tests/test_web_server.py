"""
Tests for the FastAPI web server.

Each test builds its own app around an orchestrator with mocked agents.
"""

import pytest
from fastapi.testclient import TestClient

from conftest import MockLLM, build_orchestrator, make_game
from mansion.web.server import create_app


def move(room):
    return {
        "type": "PlayerMove",
        "room": room,
        "description_of_player_in_room": "By the door.",
        "description": f"Walks into the {room}.",
    }


@pytest.fixture
def parser():
    return MockLLM()


@pytest.fixture
def orchestrator(tmp_path, parser):
    orchestrator, _ = build_orchestrator(tmp_path, parser=parser)
    orchestrator.manager.game = make_game()
    return orchestrator


@pytest.fixture
def client(orchestrator):
    return TestClient(create_app(orchestrator))


class TestGameEndpoints:

    def test_get_game(self, client):
        response = client.get("/api/getGame")
        assert response.status_code == 200
        data = response.json()
        assert data["metadata"]["id"] == "test-game"
        assert data["state"]["player_location"]["room"] == "Foyer"

    def test_new_game(self, client, orchestrator):
        response = client.post("/api/newGame")
        assert response.status_code == 200
        assert response.json()["id"] == orchestrator.game.metadata.id
        assert orchestrator.game.metadata.id != "test-game"

    def test_save_list_and_load(self, client):
        assert client.post("/api/saveGame").json() == {"id": "test-game"}
        client.post("/api/newGame")

        metadatas = client.get("/api/getSavedGameMetadatas").json()
        assert [m["id"] for m in metadatas] == ["test-game"]

        response = client.post("/api/loadGame", json={"id": "test-game"})
        assert response.status_code == 200
        assert client.get("/api/getGame").json()["metadata"]["id"] == "test-game"

    def test_load_missing_game(self, client):
        response = client.post("/api/loadGame", json={"id": "missing"})
        assert response.status_code == 404
        assert "error" in response.json()

    def test_load_invalid_id(self, client):
        response = client.post("/api/loadGame", json={"id": "../secret"})
        assert response.status_code == 400

    def test_load_requires_id(self, client):
        assert client.post("/api/loadGame", json={}).status_code == 422


class TestPromptEndpoint:

    def test_successful_turn(self, client, parser):
        parser.json_responses.append({"actions": [move("Library")]})

        response = client.post("/api/promptGame", json={"prompt": "go read"})

        assert response.status_code == 200
        data = response.json()
        assert data["ok"] is True
        assert data["turn"]["actions"][0]["room"] == "Library"
        assert client.get("/api/getGame").json()["state"]["player_location"]["room"] == "Library"

    def test_rejected_turn(self, client, parser):
        parser.json_responses.append({"actions": [move("Kitchen")]})

        data = client.post("/api/promptGame", json={"prompt": "go cook"}).json()

        assert data == {"ok": False, "turn": None}
        status = client.get("/api/getGameStatus").json()
        assert status["messages"][-1] == {
            "type": "error",
            "content": "Due to the preceding errors, failed to update game",
        }

    def test_map(self, client):
        data = client.get("/api/getMap").json()
        assert {node["id"] for node in data["nodes"]} == {"Foyer", "Library"}
        assert data["edges"][0]["description"] == "A door from Foyer to Library."
