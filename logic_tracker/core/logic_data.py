from __future__ import annotations

from dataclasses import dataclass, field

from .errors import UnknownLocationError
from .expressions import (
    Atom,
    BooleanExpression,
    CrossLocation,
    Impossible,
    Item,
    ItemCount,
    Nothing,
    atom_item_name,
    split_location_name,
)
from .models import DungeonDefinition, ItemDefinition

DUNGEON_LOCATION_TYPE = "Dungeon"
NON_KEY_LOCATION_TYPES: frozenset[str] = frozenset({"Boss", "Tingle Statue"})


@dataclass(frozen=True, slots=True)
class LocationLogic:
    general: str
    detailed: str
    types: frozenset[str]
    requirements: BooleanExpression


@dataclass(slots=True)
class LogicData:
    """Static game logic: requirement trees, dungeons and the location catalog."""

    items: list[ItemDefinition]
    dungeons: list[DungeonDefinition]
    locations: dict[str, dict[str, LocationLogic]]
    entrances: dict[str, BooleanExpression]
    final_location: tuple[str, str]
    progression_types: frozenset[str]
    item_by_name: dict[str, ItemDefinition] = field(init=False)
    dungeon_by_name: dict[str, DungeonDefinition] = field(init=False)

    def __post_init__(self) -> None:
        self.item_by_name = {item.name: item for item in self.items}
        self.dungeon_by_name = {dungeon.name: dungeon for dungeon in self.dungeons}

    # Requirement lookups

    def location(self, general_location: str, detailed_location: str) -> LocationLogic:
        detailed_locations = self.locations.get(general_location)
        if detailed_locations is None:
            raise UnknownLocationError("general location", general_location)
        entry = detailed_locations.get(detailed_location)
        if entry is None:
            raise UnknownLocationError("location", f"{general_location}/{detailed_location}")
        return entry

    def requirements_for_location(self, general_location: str, detailed_location: str) -> BooleanExpression:
        return self.location(general_location, detailed_location).requirements

    def requirements_for_entrance(self, entrance_name: str) -> BooleanExpression:
        requirements = self.entrances.get(entrance_name)
        if requirements is None:
            raise UnknownLocationError("entrance", entrance_name)
        return requirements

    # Dungeons and keys

    def is_main_dungeon(self, dungeon_name: str) -> bool:
        dungeon = self.dungeon_by_name.get(dungeon_name)
        return dungeon is not None and dungeon.is_main_dungeon

    def max_small_keys_for_dungeon(self, dungeon_name: str) -> int:
        return self._dungeon(dungeon_name).max_small_keys

    def small_key_name(self, dungeon_name: str) -> str:
        return f"{self._dungeon(dungeon_name).short_name} Small Key"

    def big_key_name(self, dungeon_name: str) -> str:
        return f"{self._dungeon(dungeon_name).short_name} Big Key"

    def all_key_names(self) -> list[str]:
        names: list[str] = []
        for dungeon in self.dungeons:
            names.append(self.small_key_name(dungeon.name))
            names.append(self.big_key_name(dungeon.name))
        return names

    def is_potential_key_location(self, dungeon_name: str, detailed_location: str) -> bool:
        if dungeon_name not in self.dungeon_by_name:
            return False
        entry = self.location(dungeon_name, detailed_location)
        if DUNGEON_LOCATION_TYPE not in entry.types:
            return False
        return not (entry.types & NON_KEY_LOCATION_TYPES)

    def small_keys_required_for_location(self, dungeon_name: str, detailed_location: str) -> int:
        """Small keys named along the cheapest path through the requirement tree.

        AND branches need every key count so they take the maximum; OR branches
        only need one alternative so they take the minimum.
        """
        requirements = self.requirements_for_location(dungeon_name, detailed_location)
        small_key_name = self.small_key_name(dungeon_name)

        def keys_for(item: Atom | int, is_reduced: bool) -> int:
            if is_reduced:
                return item or 0  # type: ignore[return-value]
            if atom_item_name(item) != small_key_name:  # type: ignore[arg-type]
                return 0
            if isinstance(item, ItemCount):
                return item.count
            return 1

        def or_reducer(accumulator: int | None, item: Atom | int, is_reduced: bool) -> int:
            keys = keys_for(item, is_reduced)
            return keys if accumulator is None else min(accumulator, keys)

        required = requirements.reduce(
            0,
            lambda accumulator, item, is_reduced: max(accumulator, keys_for(item, is_reduced)),
            None,
            or_reducer,
        )
        return required or 0

    def _dungeon(self, dungeon_name: str) -> DungeonDefinition:
        dungeon = self.dungeon_by_name.get(dungeon_name)
        if dungeon is None:
            raise UnknownLocationError("dungeon", dungeon_name)
        return dungeon

    # Location catalog

    def all_general_locations(self) -> list[str]:
        return list(self.locations)

    def detailed_locations_for_general_location(self, general_location: str) -> list[str]:
        detailed_locations = self.locations.get(general_location)
        if detailed_locations is None:
            raise UnknownLocationError("general location", general_location)
        return list(detailed_locations)

    def is_dungeon_location(self, general_location: str, detailed_location: str) -> bool:
        return DUNGEON_LOCATION_TYPE in self.location(general_location, detailed_location).types

    def is_progress_location(self, general_location: str, detailed_location: str) -> bool:
        types = self.location(general_location, detailed_location).types
        return all(location_type in self.progression_types for location_type in types)

    def filter_detailed_locations(
        self,
        general_location: str,
        *,
        is_dungeon: bool | None = None,
        only_progress_locations: bool = False,
    ) -> list[str]:
        filtered: list[str] = []
        for detailed_location in self.detailed_locations_for_general_location(general_location):
            if is_dungeon is not None and self.is_dungeon_location(general_location, detailed_location) != is_dungeon:
                continue
            if only_progress_locations and not self.is_progress_location(general_location, detailed_location):
                continue
            filtered.append(detailed_location)
        return filtered

    @staticmethod
    def split_location_name(location_name: str) -> tuple[str, str]:
        return split_location_name(location_name)

    # Display

    def pretty_name_for_requirement(self, atom: Atom) -> str:
        if isinstance(atom, Impossible):
            return "Impossible"
        if isinstance(atom, Nothing):
            return "Nothing"
        if isinstance(atom, CrossLocation):
            return f"{atom.general} - {atom.detailed}"

        item = self.item_by_name.get(atom.name)
        if isinstance(atom, ItemCount):
            if item is not None and atom.count in item.pretty_names:
                return item.pretty_names[atom.count]
            return f"{atom.name} x{atom.count}"
        if isinstance(atom, Item) and item is not None:
            return item.pretty_names.get(1, atom.name)
        return str(atom)
