from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

from .errors import RequirementCycleError, UnknownRequirementError
from .expressions import (
    Atom,
    BooleanExpression,
    CrossLocation,
    Impossible,
    Item,
    ItemCount,
    Nothing,
    atom_item_name,
)
from .formatting import ReadableRequirements, format_requirements
from .logic_data import LogicData
from .memo import MemoCache, memoized
from .models import TrackerState
from .settings import TrackerOptions

logger = logging.getLogger(__name__)


class LocationColor(str, Enum):
    AVAILABLE_LOCATION = "available-location"
    CHECKED_LOCATION = "checked-location"
    NON_PROGRESS_LOCATION = "non-progress-location"
    UNAVAILABLE_LOCATION = "unavailable-location"


@dataclass(frozen=True, slots=True)
class LocationCounts:
    color: LocationColor
    num_available: int
    num_remaining: int

    def to_dict(self) -> dict[str, Any]:
        return {"color": self.color.value, "numAvailable": self.num_available, "numRemaining": self.num_remaining}


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def location_counts_color(num_available: int, num_remaining: int, any_progress: bool) -> LocationColor:
    if num_remaining == 0:
        return LocationColor.CHECKED_LOCATION
    if num_available == 0:
        return LocationColor.UNAVAILABLE_LOCATION
    if any_progress:
        return LocationColor.AVAILABLE_LOCATION
    return LocationColor.NON_PROGRESS_LOCATION


class LogicEngine:
    """Requirement evaluation against one immutable tracker snapshot.

    Construct a new engine whenever held items or checked locations change.
    Construction derives the guaranteed-keys table first; only after that is
    the result cache sealed and allowed to store anything.
    """

    def __init__(self, state: TrackerState, logic: LogicData, *, key_lunacy: bool = False) -> None:
        self.state = state
        self.logic = logic
        self.key_lunacy = key_lunacy
        self.guaranteed_keys: dict[str, int] = {}
        self._memo = MemoCache()
        self._location_stack: list[tuple[str, str]] = []

        self._set_guaranteed_keys()
        self._memo.seal()

    @classmethod
    def from_options(cls, state: TrackerState, logic: LogicData, options: TrackerOptions) -> "LogicEngine":
        return cls(state, logic, key_lunacy=options.key_lunacy)

    # Availability

    @memoized
    def is_location_available(self, general_location: str, detailed_location: str) -> bool:
        if self.state.is_location_checked(general_location, detailed_location):
            return True
        requirements = self.logic.requirements_for_location(general_location, detailed_location)
        return self._are_requirements_met(requirements)

    @memoized
    def is_entrance_available(self, entrance_name: str) -> bool:
        requirements = self.logic.requirements_for_entrance(entrance_name)
        return self._are_requirements_met(requirements)

    @memoized
    def formatted_requirements_for_location(
        self, general_location: str, detailed_location: str
    ) -> ReadableRequirements:
        requirements = self.logic.requirements_for_location(general_location, detailed_location)
        return self._format_requirements(requirements)

    @memoized
    def formatted_requirements_for_entrance(self, entrance_name: str) -> ReadableRequirements:
        requirements = self.logic.requirements_for_entrance(entrance_name)
        return self._format_requirements(requirements)

    # Distances

    @memoized
    def items_remaining_for_location(self, general_location: str, detailed_location: str) -> int:
        if self.state.is_location_checked(general_location, detailed_location):
            return 0

        key = (general_location, detailed_location)
        if key in self._location_stack:
            cycle = self._location_stack[self._location_stack.index(key):] + [key]
            raise RequirementCycleError(cycle)

        requirements = self.logic.requirements_for_location(general_location, detailed_location)
        self._location_stack.append(key)
        try:
            return self.items_remaining_for_requirements(requirements)
        finally:
            self._location_stack.pop()

    def items_remaining_for_requirements(self, requirements: BooleanExpression) -> int:
        def remaining(item: Any, is_reduced: bool) -> int:
            return item if is_reduced else self._items_remaining_for_requirement(item)

        return requirements.reduce(
            0,
            lambda accumulator, item, is_reduced: accumulator + remaining(item, is_reduced),
            0,
            lambda accumulator, item, is_reduced: max(accumulator, remaining(item, is_reduced)),
        )

    @memoized
    def items_needed_to_finish_game(self) -> int:
        general_location, detailed_location = self.logic.final_location
        return self.items_remaining_for_location(general_location, detailed_location)

    # Aggregates

    @memoized
    def location_counts(
        self,
        general_location: str,
        *,
        is_dungeon: bool | None = None,
        only_progress_locations: bool = False,
        disable_logic: bool = False,
    ) -> LocationCounts:
        detailed_locations = self.logic.filter_detailed_locations(
            general_location,
            is_dungeon=is_dungeon,
            only_progress_locations=only_progress_locations,
        )

        any_progress = False
        num_available = 0
        num_remaining = 0

        for detailed_location in detailed_locations:
            if self.state.is_location_checked(general_location, detailed_location):
                continue
            if disable_logic or self.is_location_available(general_location, detailed_location):
                num_available += 1
                if self.logic.is_progress_location(general_location, detailed_location):
                    any_progress = True
            num_remaining += 1

        return LocationCounts(
            color=location_counts_color(num_available, num_remaining, any_progress),
            num_available=num_available,
            num_remaining=num_remaining,
        )

    @memoized
    def total_locations_checked(self, *, only_progress_locations: bool = False) -> int:
        return self._count_locations_by(
            lambda general, detailed: 1 if self.state.is_location_checked(general, detailed) else 0,
            only_progress_locations=only_progress_locations,
        )

    @memoized
    def total_locations_available(self, *, only_progress_locations: bool = False) -> int:
        def available(general: str, detailed: str) -> int:
            if self.state.is_location_checked(general, detailed):
                return 0
            return 1 if self.is_location_available(general, detailed) else 0

        return self._count_locations_by(available, only_progress_locations=only_progress_locations)

    @memoized
    def total_locations_remaining(self, *, only_progress_locations: bool = False) -> int:
        return self._count_locations_by(
            lambda general, detailed: 0 if self.state.is_location_checked(general, detailed) else 1,
            only_progress_locations=only_progress_locations,
        )

    @memoized
    def estimated_locations_left_to_check(self) -> int:
        locations_remaining = self.total_locations_remaining(only_progress_locations=True)

        # more items than locations only happens when the tracker is used incorrectly
        items_remaining = min(self.items_needed_to_finish_game(), locations_remaining)

        # expected position of the last needed item, drawing without replacement
        return _round_half_up(items_remaining * (locations_remaining + 1) / (items_remaining + 1))

    def _count_locations_by(self, counter: Callable[[str, str], int], *, only_progress_locations: bool) -> int:
        total = 0
        for general_location in self.logic.all_general_locations():
            detailed_locations = self.logic.filter_detailed_locations(
                general_location,
                only_progress_locations=only_progress_locations,
            )
            for detailed_location in detailed_locations:
                if (general_location, detailed_location) == self.logic.final_location:
                    continue
                total += counter(general_location, detailed_location)
        return total

    # Atom resolution

    def current_item_value(self, item_name: str) -> int:
        guaranteed = self.guaranteed_keys.get(item_name)
        if guaranteed is not None:
            return guaranteed
        return self.state.get_item_value(item_name)

    def _are_requirements_met(self, requirements: BooleanExpression) -> bool:
        return requirements.evaluate(self._is_requirement_met)

    def _is_requirement_met(self, requirement: Atom) -> bool:
        return self._items_remaining_for_requirement(requirement) == 0

    @memoized
    def _items_remaining_for_requirement(self, requirement: Atom) -> int:
        if isinstance(requirement, Impossible):
            return 1
        if isinstance(requirement, Nothing):
            return 0
        if isinstance(requirement, ItemCount):
            return max(requirement.count - self.current_item_value(requirement.name), 0)
        if isinstance(requirement, Item):
            return 0 if self.current_item_value(requirement.name) > 0 else 1
        if isinstance(requirement, CrossLocation):
            return self.items_remaining_for_location(requirement.general, requirement.detailed)
        raise UnknownRequirementError(requirement)

    def _format_requirements(self, requirements: BooleanExpression) -> ReadableRequirements:
        return format_requirements(requirements, self._is_requirement_met, self.logic.pretty_name_for_requirement)

    # Guaranteed keys

    def _set_guaranteed_keys(self) -> None:
        self.guaranteed_keys = {key_name: self.state.get_item_value(key_name) for key_name in self.logic.all_key_names()}

        if self.key_lunacy:
            logger.debug("key lunacy enabled, skipping guaranteed key inference")
            return

        for dungeon in self.logic.dungeons:
            if not self.logic.is_main_dungeon(dungeon.name):
                continue

            guaranteed_small_keys, guaranteed_big_keys = self._guaranteed_keys_for_dungeon(dungeon.name)
            small_key_name = self.logic.small_key_name(dungeon.name)
            big_key_name = self.logic.big_key_name(dungeon.name)

            if guaranteed_small_keys > self.guaranteed_keys[small_key_name]:
                self.guaranteed_keys[small_key_name] = guaranteed_small_keys
            if guaranteed_big_keys > self.guaranteed_keys[big_key_name]:
                self.guaranteed_keys[big_key_name] = guaranteed_big_keys

            logger.debug(
                "guaranteed keys for %s: small=%d big=%d",
                dungeon.name,
                self.guaranteed_keys[small_key_name],
                self.guaranteed_keys[big_key_name],
            )

    def _guaranteed_keys_for_dungeon(self, dungeon_name: str) -> tuple[int, int]:
        guaranteed_small_keys = self.logic.max_small_keys_for_dungeon(dungeon_name)
        guaranteed_big_keys = 1

        for detailed_location in self.logic.detailed_locations_for_general_location(dungeon_name):
            if not self.logic.is_potential_key_location(dungeon_name, detailed_location):
                continue
            if self._non_key_requirements_met_for_location(dungeon_name, detailed_location):
                continue

            small_keys_required = self.logic.small_keys_required_for_location(dungeon_name, detailed_location)
            guaranteed_small_keys = min(guaranteed_small_keys, small_keys_required)
            guaranteed_big_keys = 0

        return guaranteed_small_keys, guaranteed_big_keys

    def _non_key_requirements_met_for_location(self, general_location: str, detailed_location: str) -> bool:
        if self.is_location_available(general_location, detailed_location):
            return True

        requirements = self.logic.requirements_for_location(general_location, detailed_location)
        small_key_name = self.logic.small_key_name(general_location)

        def is_item_true(requirement: Atom) -> bool:
            if atom_item_name(requirement) == small_key_name:
                return True  # assume every small key is held
            return self._is_requirement_met(requirement)

        return requirements.evaluate(is_item_true)
