"""Tests for whole-game invariant checks."""

import pytest

from conftest import make_game
from mansion.content.starter_world import new_game_state
from mansion.errors import ConsistencyFault
from mansion.managers.validation import find_problems, validate_game
from mansion.storage.models import (
    Game,
    GameMetadata,
    Item,
    ItemLocationInventory,
    ItemLocationRoom,
    PlayerLocation,
    Room,
    RoomConnection,
)


class TestValidGames:

    def test_small_game_is_valid(self, game):
        assert find_problems(game) == []
        assert find_problems(game, allow_frontier=False) == []
        validate_game(game)

    def test_starter_world_is_valid(self):
        game = Game(
            metadata=GameMetadata(id="new", name="Game new", creation_date_time="2024-01-01"),
            state=new_game_state(),
        )
        validate_game(game)

    def test_frontier_connection_allowed_by_default(self):
        game = make_game(connections=(("Foyer", "Library"), ("Foyer", "Kitchen")))
        validate_game(game)

    def test_frontier_connection_rejected_when_strict(self):
        game = make_game(connections=(("Foyer", "Library"), ("Foyer", "Kitchen")))
        with pytest.raises(ConsistencyFault) as exc_info:
            validate_game(game, allow_frontier=False)
        assert any("Kitchen" in problem for problem in exc_info.value.problems)


class TestViolations:

    def test_attic_without_connections(self, manager):
        manager.create_room(Room(name="Attic", description="Dusty."), [])
        with pytest.raises(ConsistencyFault) as exc_info:
            validate_game(manager.game)
        assert 'The room "Attic" has no connections.' in exc_info.value.problems
        with pytest.raises(ConsistencyFault):
            manager.room_exists("Attic")

    def test_connection_between_missing_rooms(self, game):
        game.state.room_connections.append(
            RoomConnection(room1="Pantry", room2="Cellar", description="Stairs.")
        )
        assert any("no existing room" in p for p in find_problems(game))

    def test_self_loop(self, game):
        game.state.room_connections.append(
            RoomConnection(room1="Foyer", room2="Foyer", description="A mirror.")
        )
        assert any("loops onto itself" in p for p in find_problems(game))

    def test_duplicate_names(self, game):
        game.state.rooms.append(Room(name="Foyer", description="Twin."))
        game.state.items.append(Item(name="Note", description="Twin."))
        game.state.item_locations.append(
            ItemLocationInventory(item="Note", description="In hand.")
        )
        problems = find_problems(game)
        assert 'The room "Foyer" exists 2 times.' in problems
        assert 'The item "Note" exists 2 times.' in problems

    def test_item_with_two_locations(self, game):
        game.state.item_locations.append(
            ItemLocationInventory(item="Note", description="In hand.")
        )
        problems = find_problems(game)
        assert 'The item "Note" has 2 location records.' in problems
        assert any("1 items but 2 item locations" in p for p in problems)

    def test_item_in_missing_room(self, game):
        game.state.item_locations[0] = ItemLocationRoom(item="Note", room="Attic", description="x")
        assert any('missing room "Attic"' in p for p in find_problems(game))

    def test_player_in_missing_room(self, game):
        game.state.player_location = PlayerLocation(room="Attic", description="Lost.")
        assert 'The player is in the missing room "Attic".' in find_problems(game)

    def test_all_problems_reported_at_once(self, game):
        game.state.player_location = PlayerLocation(room="Attic", description="Lost.")
        game.state.item_locations.clear()
        with pytest.raises(ConsistencyFault) as exc_info:
            validate_game(game)
        assert len(exc_info.value.problems) >= 3

    def test_unreachable_room_only_warns(self, caplog):
        game = make_game(
            rooms=("Foyer", "Library", "Attic", "Loft"),
            connections=(("Foyer", "Library"), ("Attic", "Loft")),
        )
        validate_game(game)
        assert "unreachable" in caplog.text
