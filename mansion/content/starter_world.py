"""
The Shifting Manor: the starting world of every new game.

Only the Main Foyer exists at first. Its four connections lead to rooms that
are generated the first time the player walks through them.
"""

import uuid
from datetime import datetime, timezone

from mansion.storage.models import (
    Game,
    GameMetadata,
    GameState,
    Item,
    ItemLocationRoom,
    Player,
    PlayerLocation,
    Room,
    RoomConnection,
)

MAIN_FOYER = "Main Foyer"
WELCOME_NOTE = "Welcome Note"

SETTING = (
    "The Shifting Manor is a building that rearranges its own blueprint "
    "according to forgotten whims and half-remembered dreams. It is not haunted "
    "by ghosts but by possibilities. Each door opened is a gamble, leading not "
    "just to another room but to another reality: a library where books breathe "
    "and exhale stories as clouds of colored dust, an observatory where stars can "
    "be plucked from the velvet sky like ripe fruit, a kitchen where pots simmer "
    "with recipes for emotions, or a simple hallway where the portraits age in "
    "reverse. The air hums with a static-like energy, a sense that the house is a "
    "puzzle box and the player is the key, the trespasser and the prize at once. "
    "The player's goal is not to escape but to understand: to navigate the "
    'illogical corridors and find the "Still Room", the one place at the heart of '
    "the chaos that is rumored to never change."
)

PLAYER = Player(
    name="Corvin",
    description=(
        "Corvin is not a treasure hunter or a ghost seeker but a cartographer of "
        "the forgotten, a man whose own memories feel as rearranged as the "
        "Manor's corridors. He arrived at its threshold pulled by a quiet, gnawing "
        "curiosity about the places where logic frays. He carries a worn "
        "leather-bound journal and treats each impossible reality as a verse in "
        "the Manor's strange poem, hoping that finding the Still Room will also "
        "piece together the echoes of his own past."
    ),
)

FOYER_ROOM = Room(
    name=MAIN_FOYER,
    description=(
        "The floor of the Main Foyer is a mosaic of polished obsidian tiles that "
        "seem to drink the light, rippling now and then into constellations no "
        "astronomer has named. The walls are hung with immense antique mirrors "
        "whose reflections are stubbornly independent. A sweeping staircase of "
        "pale, almost translucent marble dominates the space, its steps branching "
        "up into pearlescent mist and down into pools of quiet shadow."
    ),
)

NOTE_ITEM = Item(
    name=WELCOME_NOTE,
    description=(
        "A folded card in looping ink: \"Welcome to the Shifting Manor! Every "
        "door is a gamble and every room another reality. Seek the Still Room, "
        "the one place here that never changes.\""
    ),
)


def new_game_state() -> GameState:
    """Build a fresh starting state. Each call returns independent lists."""
    return GameState(
        setting=SETTING,
        player=PLAYER,
        player_location=PlayerLocation(
            room=MAIN_FOYER,
            description="Corvin is standing just inside the entrance of the foyer.",
        ),
        rooms=[FOYER_ROOM],
        items=[NOTE_ITEM],
        item_locations=[
            ItemLocationRoom(
                item=WELCOME_NOTE,
                room=MAIN_FOYER,
                description=(
                    "The welcome note lies on an old, round oak table in the "
                    "center of the foyer."
                ),
            ),
        ],
        room_connections=[
            RoomConnection(
                room1=MAIN_FOYER,
                room2="Chester's Library",
                description="A large pair of doors connects the Main Foyer to Chester's Library.",
            ),
            RoomConnection(
                room1=MAIN_FOYER,
                room2="Starlight Observatory",
                description=(
                    "A small winding passageway connects the Main Foyer and the "
                    "Starlight Observatory."
                ),
            ),
            RoomConnection(
                room1=MAIN_FOYER,
                room2="Central Kitchen",
                description="A metal doorway connects the Main Foyer and the Central Kitchen.",
            ),
            RoomConnection(
                room1=MAIN_FOYER,
                room2="Grand Hallway",
                description="The foyer opens directly onto the Grand Hallway.",
            ),
        ],
    )


def new_game() -> Game:
    """A new game in the starting world, with a fresh uuid and creation time."""
    game_id = str(uuid.uuid4())
    return Game(
        metadata=GameMetadata(
            id=game_id,
            name=f"Game {game_id}",
            creation_date_time=datetime.now(timezone.utc).isoformat(),
        ),
        state=new_game_state(),
        turns=[],
    )
