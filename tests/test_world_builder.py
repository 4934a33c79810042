"""Unit tests for the WorldBuilder agent."""

import pytest

from conftest import MockLLM
from mansion.agents.world_builder import ITEMS_SCHEMA, ROOM_SCHEMA, WorldBuilder
from mansion.errors import ExternalFault
from mansion.storage.models import Room, RoomConnection


class TestGenerateRoom:

    def test_room_and_connections(self, manager):
        llm = MockLLM(json_responses=[{
            "room_description": "Copper pots hang from the ceiling.",
            "connections": [
                {"other_room": "Pantry", "description": "A narrow door."},
                {"other_room": "Kitchen", "description": "A mirror that is also a door."},
                {"other_room": "Garden", "description": "A window you can climb through."},
            ],
        }])
        room, connections = WorldBuilder(llm).generate_room(manager, "Kitchen")

        assert room == Room(name="Kitchen", description="Copper pots hang from the ceiling.")
        assert connections == [
            RoomConnection(room1="Kitchen", room2="Pantry", description="A narrow door."),
            RoomConnection(room1="Kitchen", room2="Garden", description="A window you can climb through."),
        ]
        _, messages, schema = llm.calls[0]
        assert schema is ROOM_SCHEMA
        assert messages[0]["content"].endswith("New room: Kitchen")

    def test_missing_description_is_external_fault(self, manager):
        llm = MockLLM(json_responses=[{"connections": []}])
        with pytest.raises(ExternalFault):
            WorldBuilder(llm).generate_room(manager, "Kitchen")

    def test_non_object_is_external_fault(self, manager):
        llm = MockLLM(json_responses=[["not", "an", "object"]])
        with pytest.raises(ExternalFault):
            WorldBuilder(llm).generate_room(manager, "Kitchen")


class TestGenerateItems:

    def test_items_with_duplicates_skipped(self, manager):
        llm = MockLLM(json_responses=[{"items": [
            {"item_name": "Ladle", "item_description": "Silver.", "item_location_description": "On a hook."},
            {"item_name": "Note", "item_description": "Another note.", "item_location_description": "On the floor."},
            {"item_name": "Ladle", "item_description": "Again.", "item_location_description": "Twice."},
            {"item_name": "Kettle", "item_description": "Whistling.", "item_location_description": "On the stove."},
        ]}])
        room = Room(name="Kitchen", description="Warm.")
        generated = WorldBuilder(llm).generate_items_for_room(manager, room)

        assert [(item.name, where) for item, where in generated] == [
            ("Ladle", "On a hook."),
            ("Kettle", "On the stove."),
        ]
        assert llm.calls[0][2] is ITEMS_SCHEMA

    def test_no_items(self, manager):
        llm = MockLLM(json_responses=[{"items": []}])
        assert WorldBuilder(llm).generate_items_for_room(manager, Room(name="Void", description=".")) == []

    def test_malformed_item_is_external_fault(self, manager):
        llm = MockLLM(json_responses=[{"items": [{"item_name": "Ladle"}]}])
        with pytest.raises(ExternalFault):
            WorldBuilder(llm).generate_items_for_room(manager, Room(name="Kitchen", description="."))
