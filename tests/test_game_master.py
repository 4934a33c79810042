"""
Unit tests for the GameMaster agent and the action schema builder.

Uses MockLLM so no real API calls are made.
"""

from unittest.mock import MagicMock

import pytest

from conftest import MockLLM, make_game
from mansion.agents.game_master import GameMaster, build_action_schema
from mansion.errors import BugFault, ExternalFault
from mansion.managers.game_manager import GameManager
from mansion.storage.models import (
    ItemLocationInventory,
    PlayerInspect,
    PlayerMove,
    PlayerTakeItem,
    describe_action,
)


def _variants(schema):
    items = schema["properties"]["actions"]["items"]
    variants = items.get("anyOf", [items])
    return {v["properties"]["type"]["enum"][0]: v for v in variants}


def _game_master(planner=None, parser=None, narrator=None):
    return GameMaster(
        planner=planner or MockLLM(),
        action_parser=parser or MockLLM(),
        narrator=narrator or MockLLM(),
    )


class TestActionSchema:
    """Tests for build_action_schema."""

    def test_legal_values_from_state(self):
        manager = GameManager(make_game(
            connections=(("Foyer", "Library"), ("Foyer", "Kitchen")),
            items=(("Note", "Foyer"), ("Lamp", "Library")),
        ))
        variants = _variants(build_action_schema(manager))

        assert set(variants) == {"PlayerMove", "PlayerTakeItem", "PlayerInspect"}
        assert variants["PlayerMove"]["properties"]["room"]["enum"] == ["Kitchen", "Library"]
        assert variants["PlayerTakeItem"]["properties"]["item"]["enum"] == ["Note"]

    def test_drop_offered_for_inventory(self, manager):
        manager.game.state.item_locations[0] = ItemLocationInventory(item="Note", description="Held.")
        variants = _variants(build_action_schema(manager))
        assert variants["PlayerDropItem"]["properties"]["item"]["enum"] == ["Note"]
        assert "PlayerTakeItem" not in variants

    def test_pass_not_offered_alongside_other_actions(self, manager):
        assert "PlayerPass" not in _variants(build_action_schema(manager))

    def test_pass_offered_when_only_inspect_applies(self):
        manager = MagicMock()
        manager.get_current_player_location.return_value.room = "Cell"
        manager.get_items_in_room.return_value = []
        manager.get_inventory.return_value = []
        manager.world.get_connected_room_names.return_value = []

        variants = _variants(build_action_schema(manager))
        assert set(variants) == {"PlayerInspect", "PlayerPass"}

    def test_required_fields(self, manager):
        variants = _variants(build_action_schema(manager))
        move = variants["PlayerMove"]
        assert move["required"] == ["type", "room", "description_of_player_in_room", "description"]
        assert move["additionalProperties"] is False


class TestPlan:
    """Tests for GameMaster.plan."""

    def test_plan_includes_game_description_and_prompt(self, manager):
        planner = MockLLM(responses=["  Tester walks to the library.  "])
        plan = _game_master(planner=planner).plan(manager, "go to the library")

        assert plan == "Tester walks to the library."
        content = planner.calls[0][1][0]["content"]
        assert "# Game State" in content
        assert content.endswith("go to the library")

    def test_empty_plan_is_external_fault(self, manager):
        with pytest.raises(ExternalFault):
            _game_master(planner=MockLLM(responses=["   "])).plan(manager, "hm")

    def test_provider_failure_propagates(self, manager):
        planner = MockLLM(responses=[ExternalFault("API down")])
        with pytest.raises(ExternalFault, match="API down"):
            _game_master(planner=planner).plan(manager, "hm")


class TestGenerateActions:
    """Tests for GameMaster.generate_actions."""

    def test_parses_actions_in_order(self, manager):
        parser = MockLLM(json_responses=[{"actions": [
            {
                "type": "PlayerTakeItem",
                "item": "Note",
                "description_of_item_in_inventory": "Folded in a pocket.",
                "description": "Picks up the note.",
            },
            {
                "type": "PlayerMove",
                "room": "Library",
                "description_of_player_in_room": "By the shelves.",
                "description": "Walks into the library.",
            },
        ]}])
        actions = _game_master(parser=parser).generate_actions(manager, "Take the note, then leave.")

        assert actions == [
            PlayerTakeItem(
                item="Note",
                description_of_item_in_inventory="Folded in a pocket.",
                description="Picks up the note.",
            ),
            PlayerMove(
                room="Library",
                description_of_player_in_room="By the shelves.",
                description="Walks into the library.",
            ),
        ]
        schema = parser.calls[0][2]
        assert "PlayerMove" in _variants(schema)

    def test_empty_action_list(self, manager):
        parser = MockLLM(json_responses=[{"actions": []}])
        assert _game_master(parser=parser).generate_actions(manager, "Nothing.") == []

    @pytest.mark.parametrize("result", [
        {},
        {"actions": "PlayerMove"},
        {"actions": [{"type": "PlayerDance"}]},
        {"actions": [{"type": "PlayerMove", "room": "Library"}]},
        {"actions": ["PlayerMove"]},
        {"actions": [{
            "type": "PlayerMove",
            "room": ["Library"],
            "description_of_player_in_room": "By the shelves.",
            "description": "Walks into the library.",
        }]},
        {"actions": [{"type": "PlayerPass", "description": 7}]},
    ])
    def test_malformed_output_is_external_fault(self, manager, result):
        parser = MockLLM(json_responses=[result])
        with pytest.raises(ExternalFault):
            _game_master(parser=parser).generate_actions(manager, "plan")


class TestNarrate:
    """Tests for GameMaster.narrate."""

    def test_narration_prompt_lists_actions(self, manager):
        narrator = MockLLM(responses=["You look around the foyer."])
        actions = [PlayerInspect(
            inspect_process_description="Tester peers at the mirrors.",
            inspect_result_description="The reflections wink back.",
        )]
        text = _game_master(narrator=narrator).narrate(manager, "look\naround", actions)

        assert text == "You look around the foyer."
        content = narrator.calls[0][1][0]["content"]
        assert "> look\n> around" in content
        assert "- PlayerInspect: Tester peers at the mirrors. The reflections wink back." in content

    def test_narration_without_actions(self, manager):
        narrator = MockLLM(responses=["Nothing happens."])
        _game_master(narrator=narrator).narrate(manager, "wait", [])
        assert "- (none)" in narrator.calls[0][1][0]["content"]

    def test_empty_narration_is_external_fault(self, manager):
        with pytest.raises(ExternalFault):
            _game_master(narrator=MockLLM(responses=[""])).narrate(manager, "wait", [])


class TestDescribeAction:

    def test_unknown_variant_is_a_bug(self):
        with pytest.raises(BugFault):
            describe_action(MagicMock(type="PlayerDance"))
