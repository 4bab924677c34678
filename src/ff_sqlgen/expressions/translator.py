"""
Predicate-to-SQL translation.

Walks a predicate tree into SQL text plus named bind parameters:
- Comparisons bind their value as p<N> (null comparisons become is [not] null)
- And/or connectives get parentheses only where precedence requires them
- Membership tests are split into IN clauses of at most 1000 elements
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

from ..config import IN_CLAUSE_LIMIT
from ..dialects import Dialect, DialectProfile, DialectRegistry
from ..exceptions import InvalidArgumentError, UnsupportedExpressionError
from ..mapping.models import TableMapping
from ..query import BindParameterSet
from .predicates import (
    Comparison,
    Connective,
    Literal,
    Logical,
    Member,
    Membership,
    Operator,
    Predicate,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PredicateFragment:
    """
    SQL text produced for one predicate (sub)tree.

    Attributes:
        sql: SQL text without leading keyword
        parameters: Bind parameters contributed by this fragment, in emission order
        connective: Top-level connective (AND/OR) or LEAF
        next_index: First parameter index left unused by this fragment
    """

    sql: str
    parameters: BindParameterSet
    connective: Connective
    next_index: int

    @property
    def is_connective(self) -> bool:
        return self.connective is not Connective.LEAF


def chunk_values(values: List[Any], size: int = IN_CLAUSE_LIMIT) -> List[List[Any]]:
    """
    Split materialized membership values into IN clause chunks.

    When the values need more than one chunk, the trailing partial chunk is
    returned first, followed by the full chunks in their original order.

    Example:
        >>> [len(c) for c in chunk_values(list(range(1234)))]
        [234, 1000]
    """
    chunks = [values[i : i + size] for i in range(0, len(values), size)]
    if len(chunks) > 1 and len(chunks[-1]) < size:
        chunks.insert(0, chunks.pop())
    return chunks


class ExpressionTranslator:
    """
    Translates predicate trees against a table mapping.

    Parameter names follow the left-to-right order of comparison and
    membership leaves, starting at base_index. Null comparisons and literals
    consume no parameter.

    Usage:
        translator = ExpressionTranslator()
        fragment = translator.translate(col("age") >= 30, table, Dialect.SQLSERVER)
        fragment.sql         # [Age] >= @p1
        fragment.parameters  # {"p1": 30}
    """

    def __init__(self, dialects: Optional[DialectRegistry] = None):
        self.dialects = dialects or DialectRegistry()

    def translate(
        self,
        predicate: Predicate,
        table: TableMapping,
        dialect: Dialect,
        base_index: int = 1,
    ) -> PredicateFragment:
        """
        Translate a predicate into a SQL fragment.

        Args:
            predicate: Root predicate node
            table: Table mapping used to resolve member names
            dialect: Target dialect
            base_index: Index of the first allocated parameter

        Returns:
            PredicateFragment with SQL text and bind parameters

        Raises:
            InvalidArgumentError: If predicate, table or dialect is missing
            UnmappedMemberError: If a member is not part of the mapping
            UnsupportedExpressionError: If a node cannot be translated
        """
        if predicate is None:
            raise InvalidArgumentError("predicate")
        if table is None:
            raise InvalidArgumentError("table")
        if base_index < 1:
            raise InvalidArgumentError("base_index", "base_index must be 1 or greater")
        profile = self.dialects.get(dialect)

        fragment = _Visitor(table, profile, base_index).visit(predicate)
        logger.debug(
            "Translated predicate",
            extra={
                "entity": table.entity_type.__name__,
                "dialect": profile.dialect.value,
                "parameters": len(fragment.parameters),
            },
        )
        return fragment

    def resolve_ordering(self, member: Any, table: TableMapping, dialect: Dialect) -> str:
        """
        Resolve an ordering member to its quoted column name.

        Args:
            member: Member reference or member name
            table: Table mapping
            dialect: Target dialect

        Returns:
            Quoted column name (e.g. [Age])
        """
        if member is None:
            raise InvalidArgumentError("member")
        if table is None:
            raise InvalidArgumentError("table")
        profile = self.dialects.get(dialect)
        return profile.quote_identifier(table.column(member_name(member)).column_name)


def member_name(member: Any) -> str:
    """Accept either a Member node or a plain member name."""
    if isinstance(member, Member):
        return member.name
    if isinstance(member, str):
        return member
    raise UnsupportedExpressionError(
        f"Expected a member reference, got {type(member).__name__}", node=member
    )


class _Visitor:
    """Single translation pass; owns the parameter counter."""

    def __init__(self, table: TableMapping, profile: DialectProfile, base_index: int):
        self.table = table
        self.profile = profile
        self.index = base_index
        self.parameters = BindParameterSet()

    def visit(self, node: Predicate) -> PredicateFragment:
        sql, connective = self._visit(node)
        return PredicateFragment(sql, self.parameters, connective, self.index)

    def _visit(self, node: Any) -> Tuple[str, Connective]:
        if isinstance(node, Logical):
            return self._visit_logical(node)
        if isinstance(node, Comparison):
            return self._visit_comparison(node), Connective.LEAF
        if isinstance(node, Membership):
            return self._visit_membership(node)
        if isinstance(node, Literal):
            return _literal(node.value), Connective.LEAF
        if isinstance(node, Member):
            # Bare boolean member
            return self._visit_comparison(Comparison(node, Operator.EQ, True)), Connective.LEAF
        raise UnsupportedExpressionError(
            f"Unsupported expression node: {type(node).__name__}", node=node
        )

    def _visit_logical(self, node: Logical) -> Tuple[str, Connective]:
        if node.connective not in (Connective.AND, Connective.OR):
            raise UnsupportedExpressionError(
                f"Unsupported connective: {node.connective!r}", node=node
            )
        left = self._visit_child(node.left, node.connective)
        right = self._visit_child(node.right, node.connective)
        return f"{left} {node.connective.value} {right}", node.connective

    def _visit_child(self, node: Any, parent: Connective) -> str:
        sql, connective = self._visit(node)
        if connective is not Connective.LEAF and connective is not parent:
            return f"({sql})"
        return sql

    def _visit_comparison(self, node: Comparison) -> str:
        if not isinstance(node.operator, Operator):
            raise UnsupportedExpressionError(
                f"Unsupported operator: {node.operator!r}", node=node
            )
        column = self._column(node.member)
        value = node.value

        if isinstance(value, Predicate):
            raise UnsupportedExpressionError(
                "Right-hand side must be a plain value, not an expression", node=node
            )

        if value is None:
            if node.operator is Operator.EQ:
                return f"{column} is null"
            if node.operator is Operator.NE:
                return f"{column} is not null"
            raise UnsupportedExpressionError(
                f"Operator '{node.operator.value}' cannot be applied to null", node=node
            )

        return f"{column} {node.operator.value} {self._bind(value)}"

    def _visit_membership(self, node: Membership) -> Tuple[str, Connective]:
        column = self._column(node.member)
        source = node.values
        if isinstance(source, (str, bytes, bytearray)) or not isinstance(source, Iterable):
            raise UnsupportedExpressionError(
                f"Membership source must be a collection, got {type(source).__name__}",
                node=node,
            )

        chunks = chunk_values(list(source))
        if not chunks:
            # Nothing can match an empty collection
            return _literal(False), Connective.LEAF

        parts = [f"{column} in {self._bind(chunk)}" for chunk in chunks]
        if len(parts) == 1:
            return parts[0], Connective.LEAF
        return " or ".join(parts), Connective.OR

    def _column(self, member: Any) -> str:
        name = member_name(member)
        return self.profile.quote_identifier(self.table.column(name).column_name)

    def _bind(self, value: Any) -> str:
        name = f"p{self.index}"
        self.index += 1
        self.parameters.add(name, value)
        return self.profile.placeholder(name)


def _literal(value: bool) -> str:
    return "1 = 1" if value else "1 = 0"
