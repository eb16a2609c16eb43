from __future__ import annotations

import pytest

from logic_tracker.core.engine import LogicEngine
from logic_tracker.core.errors import RequirementCycleError, UnknownLocationError
from logic_tracker.core.models import TrackerState

FINAL = ("Ganon's Tower", "Defeat Ganondorf")

ACQUISITION_ORDER = [
    ("Deku Leaf", 1),
    ("Boomerang", 1),
    ("Hookshot", 1),
    ("Progressive Bow", 1),
    ("Progressive Sword", 1),
    ("Progressive Sword", 2),
    ("Progressive Sword", 3),
    ("Progressive Sword", 4),
    *[("Triforce Shard", count) for count in range(1, 9)],
]


def test_checked_locations_are_available_regardless_of_items(logic) -> None:
    state = TrackerState().with_location_checked(*FINAL).with_location_checked("Outset Island", "Great Fairy")
    engine = LogicEngine(state, logic)

    for general, detailed in (FINAL, ("Outset Island", "Great Fairy")):
        assert engine.is_location_available(general, detailed) is True
        assert engine.items_remaining_for_location(general, detailed) == 0


def test_items_needed_to_finish_game_from_empty_state(logic) -> None:
    engine = LogicEngine(TrackerState(), logic)
    # sword x4 + bow + hookshot + 8 shards + (deku leaf, big key, boomerang) for Kalle Demos
    assert engine.items_needed_to_finish_game() == 17
    assert engine.is_location_available(*FINAL) is False


def test_items_needed_never_increases_as_items_are_added(logic) -> None:
    state = TrackerState()
    previous = LogicEngine(state, logic).items_needed_to_finish_game()
    for item_name, count in ACQUISITION_ORDER:
        state = state.with_item(item_name, count)
        current = LogicEngine(state, logic).items_needed_to_finish_game()
        assert current <= previous, (item_name, count)
        previous = current

    assert previous == 0
    assert LogicEngine(state, logic).is_location_available(*FINAL) is True


def test_entrance_availability(logic) -> None:
    engine = LogicEngine(TrackerState(items={"Bombs": 1}), logic)
    assert engine.is_entrance_available("Dragon Roost Cavern") is True
    assert engine.is_entrance_available("Savage Labyrinth") is True
    assert engine.is_entrance_available("Forbidden Woods") is False
    assert engine.is_entrance_available("Ganon's Tower") is False


def test_unknown_names_raise_lookup_errors(logic) -> None:
    engine = LogicEngine(TrackerState(), logic)
    with pytest.raises(UnknownLocationError, match="Unknown general location 'Pawprint Isle'"):
        engine.is_location_available("Pawprint Isle", "Chuchu Cave")
    with pytest.raises(UnknownLocationError):
        engine.items_remaining_for_location("Windfall Island", "Bomb Shop")
    with pytest.raises(KeyError):
        engine.is_entrance_available("Wind Temple")


def test_cross_location_cycles_are_rejected(make_logic) -> None:
    logic = make_logic(
        {
            "Islet": {
                "North Chest": (["Misc"], 'Has Accessed Other Location "Islet/South Chest"'),
                "South Chest": (["Misc"], {"and": ["Bombs", 'Has Accessed Other Location "Islet/North Chest"']}),
            }
        }
    )
    engine = LogicEngine(TrackerState(items={"Bombs": 1}), logic)

    with pytest.raises(RequirementCycleError, match="Islet/North Chest -> Islet/South Chest -> Islet/North Chest"):
        engine.items_remaining_for_location("Islet", "North Chest")
    with pytest.raises(RequirementCycleError):
        engine.is_location_available("Islet", "South Chest")


def test_checked_location_breaks_a_cross_reference_chain(make_logic) -> None:
    logic = make_logic(
        {
            "Islet": {
                "North Chest": (["Misc"], 'Has Accessed Other Location "Islet/South Chest"'),
                "South Chest": (["Misc"], {"and": ["Bombs", 'Has Accessed Other Location "Islet/North Chest"']}),
            }
        }
    )
    state = TrackerState(checked_locations={("Islet", "North Chest")})
    engine = LogicEngine(state, logic)

    assert engine.items_remaining_for_location("Islet", "South Chest") == 1
    assert LogicEngine(state.with_item("Bombs", 1), logic).is_location_available("Islet", "South Chest") is True
