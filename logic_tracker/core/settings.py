from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_PROGRESSION_TYPES: frozenset[str] = frozenset(
    {
        "Dungeon",
        "Boss",
        "Great Fairy",
        "Puzzle Secret Caves",
        "Combat Secret Caves",
        "Short Sidequest",
        "Free Gift",
        "Mail",
        "Platform",
        "Raft",
        "Submarine",
        "Big Octo",
        "Island Puzzle",
        "Misc",
        "Other Chest",
    }
)


class TrackerOptions(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    key_lunacy: bool = Field(default=False, alias="keyLunacy")
    progression_types: frozenset[str] = Field(default=DEFAULT_PROGRESSION_TYPES, alias="progressionTypes")

    def as_dict(self) -> dict[str, Any]:
        payload = json.loads(self.model_dump_json(by_alias=True))
        payload["progressionTypes"] = sorted(payload["progressionTypes"])
        return payload


def merge_options(payload: dict[str, Any] | None) -> TrackerOptions:
    if not isinstance(payload, dict):
        payload = {}
    return TrackerOptions.model_validate(payload)


def default_options() -> TrackerOptions:
    return TrackerOptions()
