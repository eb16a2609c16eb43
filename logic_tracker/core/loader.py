from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, TypeVar

from pydantic import TypeAdapter, ValidationError

from .errors import ContentValidationError, UnknownRequirementError
from .expressions import BooleanExpression, CrossLocation, ExpressionType, Item, ItemCount, Requirement, parse_atom
from .logic_data import LocationLogic, LogicData
from .models import (
    DungeonDefinition,
    EntranceDefinition,
    GameDefinition,
    GeneralLocationDefinition,
    ItemDefinition,
)
from .settings import TrackerOptions, default_options

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_CONTENT_DIR = Path(__file__).resolve().parents[1] / "content"


def _load_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ContentValidationError(f"Missing content file: {path}") from exc
    except json.JSONDecodeError as exc:
        raise ContentValidationError(f"Invalid JSON in {path.name}: {exc.msg} at line {exc.lineno}") from exc


def _validate_typed(path: Path, data: Any, item_type: type[T]) -> T:
    adapter = TypeAdapter(item_type)
    try:
        return adapter.validate_python(data)
    except ValidationError as exc:
        errors = []
        for issue in exc.errors():
            issue_path = ".".join(str(part) for part in issue.get("loc", [])) or "(root)"
            errors.append(f"{path.name}:{issue_path}: {issue.get('msg', 'validation error')}")
        raise ContentValidationError(f"Schema validation failed for {path.name}.", errors) from exc


def _load_typed_list(path: Path, item_type: type[T]) -> list[T]:
    return _validate_typed(path, _load_json(path), list[item_type])  # type: ignore[valid-type]


def _load_optional_typed_list(path: Path, item_type: type[T]) -> list[T]:
    if not path.exists():
        return []
    return _load_typed_list(path, item_type)


def _assert_unique_names(kind: str, values: list[Any]) -> None:
    seen: set[str] = set()
    for entry in values:
        if entry.name in seen:
            raise ContentValidationError(f"Duplicate {kind} name '{entry.name}'.")
        seen.add(entry.name)


def _assert_ref(exists: bool, message: str) -> None:
    if not exists:
        raise ContentValidationError(message)


def _build_requirement(payload: Any, path: str, item_names: set[str]) -> Requirement:
    if isinstance(payload, str):
        try:
            atom = parse_atom(payload, item_names)
        except UnknownRequirementError as exc:
            raise UnknownRequirementError(payload, path) from exc
        if isinstance(atom, (Item, ItemCount)):
            _assert_ref(atom.name in item_names, f"{path} references missing item '{atom.name}'.")
        return atom

    if not isinstance(payload, dict):
        raise ContentValidationError(f"{path} must be a string or an object.")
    if len(payload) != 1:
        raise ContentValidationError(f"{path} must contain exactly one boolean operator.")

    (op, value), = payload.items()
    try:
        expression_type = ExpressionType(op)
    except ValueError as exc:
        raise ContentValidationError(f"{path} uses unsupported boolean operator '{op}'.") from exc
    if not isinstance(value, list) or not value:
        raise ContentValidationError(f"{path}.{op} must be a non-empty array.")

    children = tuple(
        _build_requirement(child, f"{path}.{op}[{index}]", item_names) for index, child in enumerate(value)
    )
    return BooleanExpression(expression_type, children)


def build_requirements(payload: Any, path: str, item_names: set[str]) -> BooleanExpression:
    requirement = _build_requirement(payload, path, item_names)
    if isinstance(requirement, BooleanExpression):
        return requirement
    return BooleanExpression.and_(requirement)


def _validate_cross_references(logic: LogicData) -> None:
    def check(requirements: BooleanExpression, owner: str) -> None:
        for atom in requirements.iter_atoms():
            if isinstance(atom, CrossLocation):
                known = atom.detailed in logic.locations.get(atom.general, {})
                _assert_ref(known, f"{owner} references missing location '{atom.general}/{atom.detailed}'.")

    for general_location, detailed_locations in logic.locations.items():
        for detailed_location, entry in detailed_locations.items():
            check(entry.requirements, f"location '{general_location}/{detailed_location}'")
    for entrance_name, requirements in logic.entrances.items():
        check(requirements, f"entrance '{entrance_name}'")

    final_general, final_detailed = logic.final_location
    _assert_ref(
        final_detailed in logic.locations.get(final_general, {}),
        f"game finalLocation references missing location '{final_general}/{final_detailed}'.",
    )


def load_logic(content_dir: Path | str = DEFAULT_CONTENT_DIR, options: TrackerOptions | None = None) -> LogicData:
    base_path = Path(content_dir)
    options = options or default_options()

    items = _load_typed_list(base_path / "items.json", ItemDefinition)
    dungeons = _load_typed_list(base_path / "dungeons.json", DungeonDefinition)
    general_locations = _load_typed_list(base_path / "locations.json", GeneralLocationDefinition)
    entrance_definitions = _load_optional_typed_list(base_path / "entrances.json", EntranceDefinition)
    game_path = base_path / "game.json"
    game = _validate_typed(game_path, _load_json(game_path), GameDefinition)

    _assert_unique_names("item", items)
    _assert_unique_names("dungeon", dungeons)
    _assert_unique_names("general location", general_locations)
    _assert_unique_names("entrance", entrance_definitions)

    item_names = {item.name for item in items}
    for dungeon in dungeons:
        item_names.add(f"{dungeon.short_name} Small Key")
        item_names.add(f"{dungeon.short_name} Big Key")

    locations: dict[str, dict[str, LocationLogic]] = {}
    for general in general_locations:
        _assert_unique_names(f"location in '{general.name}'", general.locations)
        locations[general.name] = {
            detailed.name: LocationLogic(
                general=general.name,
                detailed=detailed.name,
                types=frozenset(detailed.types),
                requirements=build_requirements(
                    detailed.requirements,
                    f"location '{general.name}/{detailed.name}' requirements",
                    item_names,
                ),
            )
            for detailed in general.locations
        }

    entrances = {
        entrance.name: build_requirements(entrance.requirements, f"entrance '{entrance.name}' requirements", item_names)
        for entrance in entrance_definitions
    }

    for dungeon in dungeons:
        _assert_ref(dungeon.name in locations, f"dungeon '{dungeon.name}' has no general location entry.")

    logic = LogicData(
        items=items,
        dungeons=dungeons,
        locations=locations,
        entrances=entrances,
        final_location=LogicData.split_location_name(game.final_location),
        progression_types=frozenset(options.progression_types),
    )
    _validate_cross_references(logic)

    logger.debug(
        "loaded logic from %s: %d items, %d dungeons, %d general locations, %d entrances",
        base_path,
        len(items),
        len(dungeons),
        len(locations),
        len(entrances),
    )
    return logic
