"""Readable, colorized explanations of requirement expressions."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterator, Union

from .errors import RequirementFormatError
from .expressions import Atom, BooleanExpression, ExpressionType, is_atom


class ItemRequirementColor(str, Enum):
    AVAILABLE_ITEM = "available-item"
    INCONSEQUENTIAL_ITEM = "inconsequential-item"
    PLAIN_TEXT = "plain-text"
    UNAVAILABLE_ITEM = "unavailable-item"


@dataclass(frozen=True, slots=True)
class RequirementToken:
    color: ItemRequirementColor
    text: str

    def to_dict(self) -> dict[str, str]:
        return {"color": self.color.value, "text": self.text}


@dataclass(frozen=True, slots=True)
class EvaluatedAtom:
    item: Atom
    value: bool


@dataclass(frozen=True, slots=True)
class EvaluatedExpression:
    type: ExpressionType
    items: tuple["EvaluatedNode", ...]
    value: bool


EvaluatedNode = Union[EvaluatedAtom, EvaluatedExpression]
ReadableRequirements = list[list[RequirementToken]]


def _plain(text: str) -> RequirementToken:
    return RequirementToken(ItemRequirementColor.PLAIN_TEXT, text)


def evaluated_requirements(
    requirements: BooleanExpression,
    is_requirement_met: Callable[[Atom], bool],
) -> EvaluatedExpression:
    """Annotate every node with its truth value; nested compounds come back sorted."""

    def reducer_for(combine: Callable[[bool, bool], bool]):
        def reducer(accumulator: EvaluatedExpression, item, is_reduced: bool) -> EvaluatedExpression:
            if is_reduced:
                child: EvaluatedNode = sort_requirements(item)
            else:
                child = EvaluatedAtom(item=item, value=is_requirement_met(item))
            return EvaluatedExpression(
                type=accumulator.type,
                items=accumulator.items + (child,),
                value=combine(accumulator.value, child.value),
            )

        return reducer

    return requirements.reduce(
        EvaluatedExpression(type=ExpressionType.AND, items=(), value=True),
        reducer_for(lambda accumulator, value: accumulator and value),
        EvaluatedExpression(type=ExpressionType.OR, items=(), value=False),
        reducer_for(lambda accumulator, value: accumulator or value),
    )


def sort_requirements(requirements: EvaluatedExpression) -> EvaluatedExpression:
    # True expressions list what is already held first, false ones list what is missing first.
    if requirements.value:
        sort_key = lambda node: 0 if node.value else 1  # noqa: E731
    else:
        sort_key = lambda node: 1 if node.value else 0  # noqa: E731
    return EvaluatedExpression(
        type=requirements.type,
        items=tuple(sorted(requirements.items, key=sort_key)),
        value=requirements.value,
    )


def _readable_tokens(
    node: EvaluatedNode,
    is_inconsequential: bool,
    pretty_name: Callable[[Atom], str],
) -> Iterator[RequirementToken]:
    if isinstance(node, EvaluatedAtom):
        if not is_atom(node.item):
            raise RequirementFormatError(node)
        if node.value:
            color = ItemRequirementColor.AVAILABLE_ITEM
        elif is_inconsequential:
            color = ItemRequirementColor.INCONSEQUENTIAL_ITEM
        else:
            color = ItemRequirementColor.UNAVAILABLE_ITEM
        yield RequirementToken(color, pretty_name(node.item))
        return

    if not isinstance(node, EvaluatedExpression) or node.type not in (ExpressionType.AND, ExpressionType.OR):
        raise RequirementFormatError(node)

    child_inconsequential = is_inconsequential or node.value
    last_index = len(node.items) - 1
    for index, child in enumerate(node.items):
        if isinstance(child, EvaluatedExpression):
            yield _plain("(")
            yield from _readable_tokens(child, child_inconsequential, pretty_name)
            yield _plain(")")
        else:
            yield from _readable_tokens(child, child_inconsequential, pretty_name)

        if index < last_index:
            yield _plain(node.type.value)


def create_readable_requirements(
    requirements: EvaluatedExpression,
    pretty_name: Callable[[Atom], str],
) -> ReadableRequirements:
    """Flatten a sorted evaluated tree into token lists.

    A top-level AND becomes one clause per child; a top-level OR is a single
    clause.
    """
    if not isinstance(requirements, EvaluatedExpression):
        raise RequirementFormatError(requirements)
    if requirements.type is ExpressionType.AND:
        return [list(_readable_tokens(item, requirements.value, pretty_name)) for item in requirements.items]
    if requirements.type is ExpressionType.OR:
        return [list(_readable_tokens(requirements, False, pretty_name))]
    raise RequirementFormatError(requirements)


def format_requirements(
    requirements: BooleanExpression,
    is_requirement_met: Callable[[Atom], bool],
    pretty_name: Callable[[Atom], str],
) -> ReadableRequirements:
    evaluated = evaluated_requirements(requirements, is_requirement_met)
    return create_readable_requirements(sort_requirements(evaluated), pretty_name)


def readable_requirements_as_text(clauses: ReadableRequirements) -> list[str]:
    return [" ".join(token.text for token in clause) for clause in clauses]
