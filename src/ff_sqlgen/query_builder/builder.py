"""
Query builder session.

A QueryBuilder composes one statement and its clauses for one entity type and
one dialect:

    builder = QueryBuilder(Person, Dialect.SQLSERVER)
    builder.select()
    builder.where((col("age") >= 30) & col("name").is_not_null())
    builder.order_by("age")
    builder.then_by_descending("id")
    query = builder.build()

Sessions are single-owner and single-use: build once, then discard.
"""

import logging
from typing import Any, Iterable, List, Optional

from ..config import get_settings
from ..dialects import Dialect, DialectRegistry
from ..exceptions import InvalidArgumentError
from ..expressions.predicates import Member, Predicate
from ..expressions.translator import ExpressionTranslator
from ..mapping.catalog import MappingCatalog, get_catalog
from ..query import BindParameterSet, Query
from .statements import (
    INDENT,
    StatementBuilder,
    StatementKind,
    StatementOptions,
    ValuePriority,
    update_placeholders,
)

logger = logging.getLogger(__name__)


class QueryBuilder:
    """
    Stateful builder for one query.

    Call order: one statement, then optionally where, then optionally
    order_by followed by any number of then_by calls. Other orders are not
    validated.
    """

    def __init__(
        self,
        entity_type: type,
        dialect: Dialect,
        catalog: Optional[MappingCatalog] = None,
        dialects: Optional[DialectRegistry] = None,
        base_index: Optional[int] = None,
    ):
        """
        Initialize builder.

        Args:
            entity_type: Mapped Pydantic model class
            dialect: Target dialect
            catalog: Mapping catalog (default: process-wide catalog)
            dialects: Dialect registry (default: the catalog's registry)
            base_index: Index of the first bind parameter (default: settings)
        """
        if entity_type is None:
            raise InvalidArgumentError("entity_type")
        if dialect is None:
            raise InvalidArgumentError("dialect")
        if base_index is None:
            base_index = get_settings().parameter_base_index
        if base_index < 1:
            raise InvalidArgumentError("base_index", "base_index must be 1 or greater")

        self.base_index = base_index
        self.catalog = catalog if catalog is not None else get_catalog()
        self.dialects = dialects if dialects is not None else self.catalog.dialects
        self.profile = self.dialects.get(dialect)
        self.table = self.catalog.get(entity_type, self.profile.dialect)
        self._statements = StatementBuilder()
        self._translator = ExpressionTranslator(self.dialects)
        self._buffer: List[str] = []
        self._parameters = BindParameterSet()

    # ==================== Statements ====================

    def count(self) -> "QueryBuilder":
        return self._statement(StatementKind.COUNT)

    def select(self, columns: Optional[Iterable[Any]] = None) -> "QueryBuilder":
        """Append select statement for all columns or a member subset."""
        return self._statement(StatementKind.SELECT, StatementOptions(columns=columns))

    def insert(self, value_priority: ValuePriority = ValuePriority.DEFAULT) -> "QueryBuilder":
        return self._statement(
            StatementKind.INSERT, StatementOptions(value_priority=value_priority)
        )

    def update(
        self,
        columns: Optional[Iterable[Any]] = None,
        value_priority: ValuePriority = ValuePriority.DEFAULT,
    ) -> "QueryBuilder":
        """
        Append update statement; the modified-at column is always included.

        Each member placeholder in the set list is registered with a None value,
        so a following where clause numbers its parameters after them.
        """
        if columns is not None and not isinstance(columns, (str, Member)):
            columns = list(columns)
        self._statement(
            StatementKind.UPDATE,
            StatementOptions(columns=columns, value_priority=value_priority),
        )
        for member_name in update_placeholders(self.table, columns, value_priority):
            self._parameters.add(member_name, None)
        return self

    def delete(self) -> "QueryBuilder":
        return self._statement(StatementKind.DELETE)

    def truncate(self) -> "QueryBuilder":
        return self._statement(StatementKind.TRUNCATE)

    # ==================== Clauses ====================

    def where(self, predicate: Predicate) -> "QueryBuilder":
        """
        Append where clause.

        Parameters continue the numbering of those already accumulated.

        Raises:
            InvalidArgumentError: If predicate is None
            UnmappedMemberError: If the predicate references an unknown member
            UnsupportedExpressionError: If the predicate cannot be translated
        """
        if predicate is None:
            raise InvalidArgumentError("predicate")

        fragment = self._translator.translate(
            predicate,
            self.table,
            self.profile.dialect,
            base_index=self.base_index + len(self._parameters),
        )
        self._parameters.merge(fragment.parameters)
        self._append(f"where\n{INDENT}{fragment.sql}")
        return self

    def order_by(self, member: Any) -> "QueryBuilder":
        return self._order_by(member, descending=False)

    def order_by_descending(self, member: Any) -> "QueryBuilder":
        return self._order_by(member, descending=True)

    def then_by(self, member: Any) -> "QueryBuilder":
        return self._then_by(member, descending=False)

    def then_by_descending(self, member: Any) -> "QueryBuilder":
        return self._then_by(member, descending=True)

    # ==================== Build ====================

    def build(self) -> Query:
        """Snapshot the accumulated text and parameters into a Query."""
        statement = "".join(self._buffer)
        parameters = BindParameterSet(self._parameters) if self._parameters else None
        logger.debug(
            "Built query",
            extra={
                "entity": self.table.entity_type.__name__,
                "dialect": self.profile.dialect.value,
                "parameters": len(self._parameters),
            },
        )
        return Query(statement, parameters)

    # ==================== Helpers ====================

    def _statement(
        self, kind: StatementKind, options: Optional[StatementOptions] = None
    ) -> "QueryBuilder":
        sql = self._statements.build(kind, self.table, self.profile, options)
        self._append(sql)
        return self

    def _order_by(self, member: Any, descending: bool) -> "QueryBuilder":
        self._append(f"order by\n{self._ordering(member, descending)}")
        return self

    def _then_by(self, member: Any, descending: bool) -> "QueryBuilder":
        ordering = self._ordering(member, descending)
        self._buffer.append(f",\n{ordering}" if self._buffer else ordering)
        return self

    def _ordering(self, member: Any, descending: bool) -> str:
        if member is None:
            raise InvalidArgumentError("member")
        column = self._translator.resolve_ordering(member, self.table, self.profile.dialect)
        return f"{INDENT}{column} desc" if descending else f"{INDENT}{column}"

    def _append(self, block: str) -> None:
        if self._buffer:
            self._buffer.append("\n")
        self._buffer.append(block)


# ==================== One-shot helpers ====================


def _session(entity_type: type, dialect: Optional[Dialect], catalog: Optional[MappingCatalog]):
    if dialect is None:
        dialect = get_settings().default_dialect
    return QueryBuilder(entity_type, dialect, catalog=catalog)


def count(
    entity_type: type,
    predicate: Optional[Predicate] = None,
    dialect: Optional[Dialect] = None,
    catalog: Optional[MappingCatalog] = None,
) -> Query:
    """Build `select count(*)` with an optional where clause."""
    builder = _session(entity_type, dialect, catalog).count()
    if predicate is not None:
        builder.where(predicate)
    return builder.build()


def select(
    entity_type: type,
    predicate: Optional[Predicate] = None,
    columns: Optional[Iterable[Any]] = None,
    dialect: Optional[Dialect] = None,
    catalog: Optional[MappingCatalog] = None,
) -> Query:
    """Build select with an optional where clause."""
    builder = _session(entity_type, dialect, catalog).select(columns)
    if predicate is not None:
        builder.where(predicate)
    return builder.build()


def insert(
    entity_type: type,
    value_priority: ValuePriority = ValuePriority.DEFAULT,
    dialect: Optional[Dialect] = None,
    catalog: Optional[MappingCatalog] = None,
) -> Query:
    """Build insert statement."""
    return _session(entity_type, dialect, catalog).insert(value_priority).build()


def update(
    entity_type: type,
    predicate: Optional[Predicate] = None,
    columns: Optional[Iterable[Any]] = None,
    value_priority: ValuePriority = ValuePriority.DEFAULT,
    dialect: Optional[Dialect] = None,
    catalog: Optional[MappingCatalog] = None,
) -> Query:
    """Build update with an optional where clause."""
    builder = _session(entity_type, dialect, catalog).update(columns, value_priority)
    if predicate is not None:
        builder.where(predicate)
    return builder.build()


def delete(
    entity_type: type,
    predicate: Optional[Predicate] = None,
    dialect: Optional[Dialect] = None,
    catalog: Optional[MappingCatalog] = None,
) -> Query:
    """Build delete with an optional where clause."""
    builder = _session(entity_type, dialect, catalog).delete()
    if predicate is not None:
        builder.where(predicate)
    return builder.build()


def truncate(
    entity_type: type,
    dialect: Optional[Dialect] = None,
    catalog: Optional[MappingCatalog] = None,
) -> Query:
    return _session(entity_type, dialect, catalog).truncate().build()


def where(
    entity_type: type,
    predicate: Predicate,
    dialect: Optional[Dialect] = None,
    catalog: Optional[MappingCatalog] = None,
) -> Query:
    """Build a standalone where clause."""
    return _session(entity_type, dialect, catalog).where(predicate).build()


def order_by(
    entity_type: type,
    member: Any,
    dialect: Optional[Dialect] = None,
    catalog: Optional[MappingCatalog] = None,
) -> Query:
    return _session(entity_type, dialect, catalog).order_by(member).build()


def order_by_descending(
    entity_type: type,
    member: Any,
    dialect: Optional[Dialect] = None,
    catalog: Optional[MappingCatalog] = None,
) -> Query:
    return _session(entity_type, dialect, catalog).order_by_descending(member).build()
