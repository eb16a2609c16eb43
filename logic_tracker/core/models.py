from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, field_validator, model_validator

from .expressions import LOCATION_NAME_SEPARATOR, split_location_name

LocationType = Literal[
    "Dungeon",
    "Boss",
    "Tingle Statue",
    "Great Fairy",
    "Puzzle Secret Caves",
    "Combat Secret Caves",
    "Short Sidequest",
    "Long Sidequest",
    "Spoils Trading",
    "Minigame",
    "Free Gift",
    "Mail",
    "Platform",
    "Raft",
    "Submarine",
    "Eye Reef Chest",
    "Big Octo",
    "Sunken Treasure",
    "Expensive Purchases",
    "Island Puzzle",
    "Misc",
    "Other Chest",
]

RequirementPayload = Any


class StrictModel(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class ItemDefinition(StrictModel):
    name: str = Field(min_length=1)
    max_count: int = Field(default=1, alias="maxCount", ge=1)
    pretty_names: dict[int, str] = Field(default_factory=dict, alias="prettyNames")


class DungeonDefinition(StrictModel):
    name: str = Field(min_length=1)
    short_name: str = Field(alias="shortName", min_length=1)
    max_small_keys: int = Field(default=0, alias="maxSmallKeys", ge=0)
    is_main_dungeon: bool = Field(default=True, alias="isMainDungeon")


class DetailedLocationDefinition(StrictModel):
    name: str = Field(min_length=1)
    types: list[LocationType] = Field(default_factory=list)
    requirements: RequirementPayload = "Nothing"


class GeneralLocationDefinition(StrictModel):
    name: str = Field(min_length=1)
    locations: list[DetailedLocationDefinition] = Field(min_length=1)


class EntranceDefinition(StrictModel):
    name: str = Field(min_length=1)
    requirements: RequirementPayload = "Nothing"


class GameDefinition(StrictModel):
    final_location: str = Field(alias="finalLocation", min_length=1)

    @field_validator("final_location")
    @classmethod
    def validate_final_location(cls, value: str) -> str:
        split_location_name(value)
        return value


class TrackerState(BaseModel):
    """Read-only snapshot of held items and checked locations."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    items: dict[str, NonNegativeInt] = Field(default_factory=dict)
    checked_locations: frozenset[tuple[str, str]] = Field(default_factory=frozenset, alias="checkedLocations")

    @model_validator(mode="before")
    @classmethod
    def split_checked_location_names(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        for key in ("checked_locations", "checkedLocations"):
            raw = data.get(key)
            if raw is None:
                continue
            data = dict(data)
            data[key] = [split_location_name(entry) if isinstance(entry, str) else entry for entry in raw]
        return data

    def get_item_value(self, item_name: str) -> int:
        return self.items.get(item_name, 0)

    def is_location_checked(self, general_location: str, detailed_location: str) -> bool:
        return (general_location, detailed_location) in self.checked_locations

    def with_item(self, item_name: str, count: int) -> "TrackerState":
        items = dict(self.items)
        items[item_name] = count
        return TrackerState(items=items, checked_locations=self.checked_locations)

    def with_location_checked(self, general_location: str, detailed_location: str) -> "TrackerState":
        checked = self.checked_locations | {(general_location, detailed_location)}
        return TrackerState(items=self.items, checked_locations=checked)

    def as_dict(self) -> dict[str, Any]:
        return {
            "items": dict(sorted(self.items.items())),
            "checkedLocations": sorted(
                f"{general}{LOCATION_NAME_SEPARATOR}{detailed}" for general, detailed in self.checked_locations
            ),
        }
