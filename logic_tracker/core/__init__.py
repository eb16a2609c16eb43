"""Requirement evaluation engine for randomized-item game trackers."""

from .engine import LocationColor, LocationCounts, LogicEngine
from .errors import (
    ContentValidationError,
    LogicDataError,
    RequirementCycleError,
    RequirementFormatError,
    UnknownLocationError,
    UnknownRequirementError,
)
from .expressions import (
    BooleanExpression,
    CrossLocation,
    ExpressionType,
    Impossible,
    Item,
    ItemCount,
    Nothing,
    parse_atom,
)
from .formatting import ItemRequirementColor, RequirementToken
from .loader import load_logic
from .logic_data import LogicData
from .models import TrackerState
from .settings import TrackerOptions, default_options, merge_options

__all__ = [
    "BooleanExpression",
    "ContentValidationError",
    "CrossLocation",
    "ExpressionType",
    "Impossible",
    "Item",
    "ItemCount",
    "ItemRequirementColor",
    "LocationColor",
    "LocationCounts",
    "LogicData",
    "LogicDataError",
    "LogicEngine",
    "Nothing",
    "RequirementCycleError",
    "RequirementFormatError",
    "RequirementToken",
    "TrackerOptions",
    "TrackerState",
    "UnknownLocationError",
    "UnknownRequirementError",
    "default_options",
    "load_logic",
    "merge_options",
    "parse_atom",
]
