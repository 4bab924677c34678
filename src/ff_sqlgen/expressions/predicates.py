"""
Typed predicate builder.

Predicates are plain node objects assembled with Python operators:

    from ff_sqlgen import col

    predicate = ((col("id") > 1) & (col("name") == "xin9le")) | (col("age") <= 30)
    predicate = col("id").in_(ids) & col("deleted_at").is_null()

Right-hand values are evaluated by the caller before the node is built; the
translator only ever sees plain values. Note that & and | bind tighter than
comparisons in Python, so each comparison needs its own parentheses.
"""

import collections.abc
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable


class Operator(str, Enum):
    """Comparison operators with their SQL spelling."""

    EQ = "="
    NE = "<>"
    LT = "<"
    LE = "<="
    GT = ">"
    GE = ">="


class Connective(str, Enum):
    """Top-level connective of a predicate fragment."""

    AND = "and"
    OR = "or"
    LEAF = "leaf"


class Predicate:
    """Base class of every boolean node; provides & and | composition."""

    __slots__ = ()

    def __and__(self, other: "Predicate") -> "Logical":
        return Logical(Connective.AND, self, other)

    def __or__(self, other: "Predicate") -> "Logical":
        return Logical(Connective.OR, self, other)

    def __bool__(self):
        raise TypeError(
            "Predicates cannot be used as Python booleans; "
            "combine them with & and | instead of 'and' / 'or'"
        )


@dataclass(frozen=True, eq=False)
class Member(Predicate):
    """
    Reference to an entity member.

    Comparison operators build Comparison nodes. Used directly as a predicate,
    a member is read as a boolean flag (member = True); ~member negates it.
    """

    name: str

    def __eq__(self, value: Any) -> "Comparison":  # type: ignore[override]
        return Comparison(self, Operator.EQ, value)

    def __ne__(self, value: Any) -> "Comparison":  # type: ignore[override]
        return Comparison(self, Operator.NE, value)

    def __lt__(self, value: Any) -> "Comparison":
        return Comparison(self, Operator.LT, value)

    def __le__(self, value: Any) -> "Comparison":
        return Comparison(self, Operator.LE, value)

    def __gt__(self, value: Any) -> "Comparison":
        return Comparison(self, Operator.GT, value)

    def __ge__(self, value: Any) -> "Comparison":
        return Comparison(self, Operator.GE, value)

    def __invert__(self) -> "Comparison":
        return Comparison(self, Operator.EQ, False)

    __hash__ = None  # type: ignore[assignment]

    def in_(self, values: Iterable[Any]) -> "Membership":
        """Membership test: member in values."""
        return Membership(self, values)

    def is_null(self) -> "Comparison":
        return Comparison(self, Operator.EQ, None)

    def is_not_null(self) -> "Comparison":
        return Comparison(self, Operator.NE, None)


@dataclass(frozen=True, eq=False)
class Comparison(Predicate):
    """member <operator> value"""

    member: Member
    operator: Operator
    value: Any


@dataclass(frozen=True, eq=False)
class Membership(Predicate):
    """
    member in values

    Collections are copied into a tuple on construction, so one-shot iterators
    such as generators translate the same way every time. Strings and
    non-iterables are kept as given and rejected by the translator.
    """

    member: Member
    values: Iterable[Any]

    def __post_init__(self):
        if isinstance(self.values, collections.abc.Iterable) and not isinstance(
            self.values, (str, bytes, bytearray)
        ):
            object.__setattr__(self, "values", tuple(self.values))


@dataclass(frozen=True, eq=False)
class Logical(Predicate):
    """left and/or right"""

    connective: Connective
    left: Predicate
    right: Predicate


@dataclass(frozen=True, eq=False)
class Literal(Predicate):
    """Constant true/false condition."""

    value: bool


TRUE = Literal(True)
FALSE = Literal(False)


def col(name: str) -> Member:
    """Reference an entity member by name."""
    return Member(name)
