from __future__ import annotations

import pytest

from logic_tracker.core.engine import LogicEngine
from logic_tracker.core.errors import RequirementFormatError
from logic_tracker.core.expressions import ExpressionType, Item
from logic_tracker.core.formatting import (
    EvaluatedAtom,
    EvaluatedExpression,
    ItemRequirementColor,
    RequirementToken,
    create_readable_requirements,
    readable_requirements_as_text,
)
from logic_tracker.core.models import TrackerState

AVAILABLE = ItemRequirementColor.AVAILABLE_ITEM
INCONSEQUENTIAL = ItemRequirementColor.INCONSEQUENTIAL_ITEM
PLAIN = ItemRequirementColor.PLAIN_TEXT
UNAVAILABLE = ItemRequirementColor.UNAVAILABLE_ITEM


@pytest.fixture
def shore_logic(make_logic):
    return make_logic(
        {
            "Shore": {
                "Sword and Bottle": (["Misc"], {"and": ["Progressive Sword", "Empty Bottle x1"]}),
                "Any Hook": (["Misc"], {"or": ["Hookshot", "Grappling Hook"]}),
                "Nested Or": (["Misc"], {"or": [{"and": ["Bombs", "Hookshot"]}, "Deku Leaf"]}),
            }
        }
    )


def test_top_level_and_renders_one_clause_per_child(shore_logic) -> None:
    engine = LogicEngine(TrackerState(), shore_logic)

    assert engine.items_remaining_for_location("Shore", "Sword and Bottle") == 2
    assert engine.formatted_requirements_for_location("Shore", "Sword and Bottle") == [
        [RequirementToken(UNAVAILABLE, "Progressive Sword")],
        [RequirementToken(UNAVAILABLE, "Empty Bottle x1")],
    ]


def test_true_or_puts_held_item_first_and_marks_the_rest_inconsequential(shore_logic) -> None:
    engine = LogicEngine(TrackerState(items={"Grappling Hook": 1}), shore_logic)

    assert engine.is_location_available("Shore", "Any Hook") is True
    assert engine.formatted_requirements_for_location("Shore", "Any Hook") == [
        [
            RequirementToken(AVAILABLE, "Grappling Hook"),
            RequirementToken(PLAIN, "or"),
            RequirementToken(INCONSEQUENTIAL, "Hookshot"),
        ]
    ]


def test_nested_expressions_are_parenthesized(shore_logic) -> None:
    engine = LogicEngine(TrackerState(), shore_logic)
    clauses = engine.formatted_requirements_for_location("Shore", "Nested Or")

    assert readable_requirements_as_text(clauses) == ["( Bombs and Hookshot ) or Deku Leaf"]
    assert [token.color for token in clauses[0]] == [
        PLAIN,
        UNAVAILABLE,
        PLAIN,
        UNAVAILABLE,
        PLAIN,
        PLAIN,
        UNAVAILABLE,
    ]


def test_false_expression_lists_missing_items_first(shore_logic) -> None:
    engine = LogicEngine(TrackerState(items={"Hookshot": 1}), shore_logic)
    clauses = engine.formatted_requirements_for_location("Shore", "Nested Or")

    assert readable_requirements_as_text(clauses) == ["( Bombs and Hookshot ) or Deku Leaf"]
    nested = clauses[0][1:4]
    assert nested == [
        RequirementToken(UNAVAILABLE, "Bombs"),
        RequirementToken(PLAIN, "and"),
        RequirementToken(AVAILABLE, "Hookshot"),
    ]


def test_satisfied_requirements_only_use_available_and_plain_colors(logic) -> None:
    state = TrackerState(items={"Progressive Sword": 1, "Bombs": 1, "Progressive Bow": 1, "Hookshot": 1})
    engine = LogicEngine(state, logic)
    clauses = engine.formatted_requirements_for_location("Outset Island", "Savage Labyrinth - Floor 30")

    colors = {token.color for clause in clauses for token in clause}
    assert colors <= {AVAILABLE, PLAIN}
    assert readable_requirements_as_text(clauses) == ["Hero's Sword", "Bombs", "Hero's Bow or Hookshot"]


def test_satisfied_and_with_partially_held_or(logic) -> None:
    state = TrackerState(items={"Progressive Sword": 1, "Bombs": 1, "Hookshot": 1})
    engine = LogicEngine(state, logic)
    clauses = engine.formatted_requirements_for_location("Outset Island", "Savage Labyrinth - Floor 30")

    assert clauses[2] == [
        RequirementToken(AVAILABLE, "Hookshot"),
        RequirementToken(PLAIN, "or"),
        RequirementToken(INCONSEQUENTIAL, "Hero's Bow"),
    ]


def test_blocked_clause_comes_first_in_false_and(logic) -> None:
    engine = LogicEngine(TrackerState(items={"Bombs": 1}), logic)
    clauses = engine.formatted_requirements_for_location("Outset Island", "Great Fairy")

    assert clauses == [
        [RequirementToken(UNAVAILABLE, "Power Bracelets")],
        [
            RequirementToken(AVAILABLE, "Bombs"),
            RequirementToken(PLAIN, "or"),
            RequirementToken(INCONSEQUENTIAL, "Skull Hammer"),
        ],
    ]


def test_pretty_names_for_counts_and_cross_locations(logic) -> None:
    engine = LogicEngine(TrackerState(), logic)

    komali = engine.formatted_requirements_for_location("Dragon Roost Island", "Rito Aerie - Komali")
    assert komali == [[RequirementToken(UNAVAILABLE, "Dragon Roost Cavern - Gohma Heart Container")]]

    ganondorf = readable_requirements_as_text(
        engine.formatted_requirements_for_location("Ganon's Tower", "Defeat Ganondorf")
    )
    assert "Master Sword (Full Power)" in ganondorf
    assert "Triforce Shard x8" in ganondorf


def test_entrance_requirements_are_formatted(logic) -> None:
    engine = LogicEngine(TrackerState(items={"Skull Hammer": 1}), logic)
    assert engine.formatted_requirements_for_entrance("Savage Labyrinth") == [
        [
            RequirementToken(AVAILABLE, "Skull Hammer"),
            RequirementToken(PLAIN, "or"),
            RequirementToken(INCONSEQUENTIAL, "Bombs"),
        ]
    ]


def test_tokens_serialize_to_plain_dicts() -> None:
    assert RequirementToken(AVAILABLE, "Hookshot").to_dict() == {"color": "available-item", "text": "Hookshot"}


def test_malformed_trees_fail_fast() -> None:
    with pytest.raises(RequirementFormatError):
        create_readable_requirements(EvaluatedAtom(item=Item("Hookshot"), value=True), str)
    with pytest.raises(RequirementFormatError):
        create_readable_requirements(EvaluatedExpression(ExpressionType.OR, ("Hookshot",), False), str)
    with pytest.raises(RequirementFormatError):
        create_readable_requirements(
            EvaluatedExpression(ExpressionType.AND, (EvaluatedAtom(item="Hookshot", value=False),), False),
            str,
        )
    with pytest.raises(RequirementFormatError):
        create_readable_requirements(EvaluatedExpression("xor", (), False), str)
