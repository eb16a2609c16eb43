from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

import pytest

from logic_tracker.core.loader import build_requirements, load_logic
from logic_tracker.core.logic_data import LocationLogic, LogicData
from logic_tracker.core.models import DungeonDefinition, ItemDefinition
from logic_tracker.core.settings import DEFAULT_PROGRESSION_TYPES

CONTENT_DIR = Path(__file__).resolve().parents[1] / "content"

DEFAULT_ITEMS = (
    "Progressive Sword",
    "Progressive Bow",
    "Empty Bottle",
    "Hookshot",
    "Grappling Hook",
    "Deku Leaf",
    "Boomerang",
    "Bombs",
)


@pytest.fixture(scope="module")
def logic() -> LogicData:
    return load_logic(CONTENT_DIR)


@pytest.fixture
def make_logic() -> Callable[..., LogicData]:
    """Build a LogicData from ``{general: {detailed: (types, requirements)}}``."""

    def factory(
        locations: dict[str, dict[str, tuple[list[str], Any]]],
        *,
        dungeons: list[DungeonDefinition] | None = None,
        entrances: dict[str, Any] | None = None,
        final_location: tuple[str, str] | None = None,
        items: tuple[str, ...] = DEFAULT_ITEMS,
    ) -> LogicData:
        dungeons = dungeons or []
        item_names = set(items)
        for dungeon in dungeons:
            item_names.add(f"{dungeon.short_name} Small Key")
            item_names.add(f"{dungeon.short_name} Big Key")

        built = {
            general: {
                detailed: LocationLogic(
                    general=general,
                    detailed=detailed,
                    types=frozenset(types),
                    requirements=build_requirements(payload, f"{general}/{detailed}", item_names),
                )
                for detailed, (types, payload) in detailed_locations.items()
            }
            for general, detailed_locations in locations.items()
        }
        if final_location is None:
            first_general = next(iter(built))
            final_location = (first_general, next(iter(built[first_general])))

        return LogicData(
            items=[ItemDefinition(name=name) for name in items],
            dungeons=dungeons,
            locations=built,
            entrances={
                name: build_requirements(payload, name, item_names) for name, payload in (entrances or {}).items()
            },
            final_location=final_location,
            progression_types=DEFAULT_PROGRESSION_TYPES,
        )

    return factory
