"""Requirement expression model.

Atoms are classified once, when logic data is loaded, into one of five
variants. Compound expressions combine atoms and nested compounds with AND/OR
and expose two folds that every evaluator in the package builds on:
``evaluate`` for plain truth values and ``reduce`` for anything that needs
to combine per-child results (distances, annotated trees).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Collection, Iterator, TypeVar, Union

from .errors import UnknownRequirementError

IMPOSSIBLE_TOKEN = "Impossible"
NOTHING_TOKEN = "Nothing"
LOCATION_NAME_SEPARATOR = "/"

_ITEM_COUNT_PATTERN = re.compile(r"^(?P<name>.+?) x(?P<count>\d+)$")
_OTHER_LOCATION_PATTERN = re.compile(r'^Has Accessed Other Location "(?P<location>[^"]+)"$')

A = TypeVar("A")


@dataclass(frozen=True, slots=True)
class Impossible:
    def __str__(self) -> str:
        return IMPOSSIBLE_TOKEN


@dataclass(frozen=True, slots=True)
class Nothing:
    def __str__(self) -> str:
        return NOTHING_TOKEN


@dataclass(frozen=True, slots=True)
class ItemCount:
    name: str
    count: int

    def __str__(self) -> str:
        return f"{self.name} x{self.count}"


@dataclass(frozen=True, slots=True)
class Item:
    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True, slots=True)
class CrossLocation:
    general: str
    detailed: str

    def __str__(self) -> str:
        return f'Has Accessed Other Location "{self.general}{LOCATION_NAME_SEPARATOR}{self.detailed}"'


Atom = Union[Impossible, Nothing, ItemCount, Item, CrossLocation]
ATOM_TYPES: tuple[type, ...] = (Impossible, Nothing, ItemCount, Item, CrossLocation)


class ExpressionType(str, Enum):
    AND = "and"
    OR = "or"


Requirement = Union[Atom, "BooleanExpression"]
Reducer = Callable[[A, Any, bool], A]


@dataclass(frozen=True, slots=True)
class BooleanExpression:
    type: ExpressionType
    items: tuple[Requirement, ...]

    @classmethod
    def and_(cls, *items: Requirement) -> "BooleanExpression":
        return cls(ExpressionType.AND, tuple(items))

    @classmethod
    def or_(cls, *items: Requirement) -> "BooleanExpression":
        return cls(ExpressionType.OR, tuple(items))

    def evaluate(self, is_item_true: Callable[[Atom], bool]) -> bool:
        results = (
            child.evaluate(is_item_true) if isinstance(child, BooleanExpression) else is_item_true(child)
            for child in self.items
        )
        if self.type is ExpressionType.AND:
            return all(results)
        return any(results)

    def reduce(
        self,
        and_initial: A,
        and_reducer: Reducer[A],
        or_initial: A,
        or_reducer: Reducer[A],
    ) -> A:
        """Fold the tree bottom-up.

        For each child the reducer receives ``(accumulator, item, is_reduced)``.
        Nested compounds are reduced first with the same reducers and passed with
        ``is_reduced=True``; atoms are passed as-is with ``is_reduced=False``.
        """
        if self.type is ExpressionType.AND:
            accumulator, reducer = and_initial, and_reducer
        else:
            accumulator, reducer = or_initial, or_reducer

        for child in self.items:
            if isinstance(child, BooleanExpression):
                reduced = child.reduce(and_initial, and_reducer, or_initial, or_reducer)
                accumulator = reducer(accumulator, reduced, True)
            else:
                accumulator = reducer(accumulator, child, False)
        return accumulator

    def iter_atoms(self) -> Iterator[Atom]:
        for child in self.items:
            if isinstance(child, BooleanExpression):
                yield from child.iter_atoms()
            else:
                yield child

    def __str__(self) -> str:
        joiner = f" {self.type.value} "
        parts = [f"({child})" if isinstance(child, BooleanExpression) else str(child) for child in self.items]
        return joiner.join(parts)


def is_atom(value: object) -> bool:
    return isinstance(value, ATOM_TYPES)


def atom_item_name(atom: Atom) -> str | None:
    if isinstance(atom, (Item, ItemCount)):
        return atom.name
    return None


def split_location_name(location_name: str) -> tuple[str, str]:
    general, separator, detailed = location_name.partition(LOCATION_NAME_SEPARATOR)
    if not separator or not general or not detailed:
        raise ValueError(f"Location name '{location_name}' is not of the form 'General/Detailed'.")
    return general, detailed


def parse_atom(token: str, item_names: Collection[str]) -> Atom:
    """Classify a raw requirement token.

    The checks run in a fixed priority order: sentinels, ``Name xN`` counts,
    known item names, then cross-location references.
    """
    if token == IMPOSSIBLE_TOKEN:
        return Impossible()
    if token == NOTHING_TOKEN:
        return Nothing()

    count_match = _ITEM_COUNT_PATTERN.match(token)
    if count_match:
        return ItemCount(name=count_match.group("name"), count=int(count_match.group("count")))

    if token in item_names:
        return Item(name=token)

    location_match = _OTHER_LOCATION_PATTERN.match(token)
    if location_match:
        try:
            general, detailed = split_location_name(location_match.group("location"))
        except ValueError as exc:
            raise UnknownRequirementError(token) from exc
        return CrossLocation(general=general, detailed=detailed)

    raise UnknownRequirementError(token)
