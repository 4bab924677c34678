"""
Statement text generators.

Each generator is a pure function of (TableMapping, DialectProfile, options):
- Identifiers quoted with the dialect's bracket pair
- Column placeholders named after the member (@Name), bound later by the executor
- Column lists in the table mapping's declaration order
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, FrozenSet, Iterable, List, Optional

from ..dialects import DialectProfile
from ..exceptions import InvalidArgumentError
from ..expressions.predicates import Member
from ..expressions.translator import member_name
from ..mapping.models import ColumnMapping, TableMapping

INDENT = "    "


class StatementKind(str, Enum):
    COUNT = "count"
    SELECT = "select"
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"
    TRUNCATE = "truncate"


class ValuePriority(str, Enum):
    """
    Value source for created-at/modified-at columns that declare a SQL default.

    DEFAULT: emit the dialect default literal (e.g. SYSDATETIME())
    PROPERTY: emit a bound placeholder like every other column
    """

    DEFAULT = "default"
    PROPERTY = "property"


@dataclass(frozen=True)
class StatementOptions:
    """
    Options for a statement.

    Attributes:
        columns: Member subset for select/update (None = all columns)
        value_priority: Timestamp value source for insert/update
    """

    columns: Optional[Iterable[Any]] = None
    value_priority: ValuePriority = ValuePriority.DEFAULT


def uses_default_value(column: ColumnMapping, priority: ValuePriority) -> bool:
    """Whether a column's value comes from its SQL default instead of a placeholder."""
    return (
        priority is ValuePriority.DEFAULT
        and (column.is_created_at or column.is_modified_at)
        and column.default_value is not None
    )


class StatementBuilder:
    """Generates statement text for one table mapping and dialect."""

    def build(
        self,
        kind: StatementKind,
        table: TableMapping,
        profile: DialectProfile,
        options: Optional[StatementOptions] = None,
    ) -> str:
        """
        Build statement text.

        Args:
            kind: Statement kind
            table: Table mapping
            profile: Dialect profile
            options: Column subset and value priority

        Returns:
            SQL text

        Raises:
            InvalidArgumentError: If table or profile is missing, or no column is left to emit
            UnmappedMemberError: If the column subset names an unknown member
        """
        if table is None:
            raise InvalidArgumentError("table")
        if profile is None:
            raise InvalidArgumentError("profile")
        options = options or StatementOptions()

        kind = StatementKind(kind)
        if kind is StatementKind.COUNT:
            return self.build_count(table)
        if kind is StatementKind.SELECT:
            return self.build_select(table, profile, options.columns)
        if kind is StatementKind.INSERT:
            return self.build_insert(table, profile, options.value_priority)
        if kind is StatementKind.UPDATE:
            return self.build_update(table, profile, options.columns, options.value_priority)
        if kind is StatementKind.DELETE:
            return self.build_delete(table)
        return self.build_truncate(table)

    def build_count(self, table: TableMapping) -> str:
        return f"select count(*) as Count from {table.full_name}"

    def build_select(
        self,
        table: TableMapping,
        profile: DialectProfile,
        columns: Optional[Iterable[Any]] = None,
    ) -> str:
        """
        Build SELECT statement.

        Args:
            table: Table mapping
            profile: Dialect profile
            columns: Members to select (None = all), emitted in declaration order

        Returns:
            select
                [Id] as Id,
                [Name] as Name
            from [dbo].[Person]
        """
        targets = _target_members(table, columns)
        lines = [
            f"{INDENT}{profile.quote_identifier(column.column_name)} as {column.member_name}"
            for column in table.columns
            if targets is None or column.member_name in targets
        ]
        if not lines:
            raise InvalidArgumentError("columns", "No columns to select")
        return "\n".join(["select", ",\n".join(lines), f"from {table.full_name}"])

    def build_insert(
        self,
        table: TableMapping,
        profile: DialectProfile,
        value_priority: ValuePriority = ValuePriority.DEFAULT,
    ) -> str:
        """
        Build INSERT statement.

        Auto-increment columns are skipped. Under DEFAULT priority,
        created-at/modified-at columns with a SQL default emit that default.

        Args:
            table: Table mapping
            profile: Dialect profile
            value_priority: Timestamp value source

        Returns:
            insert into [dbo].[Person]
            (
                [Name],
                [CreatedAt]
            )
            values
            (
                @Name,
                SYSDATETIME()
            )
        """
        value_priority = ValuePriority(value_priority)
        columns = [column for column in table.columns if not column.is_auto_increment]
        if not columns:
            raise InvalidArgumentError("table", "No insertable columns")
        names = [f"{INDENT}{profile.quote_identifier(c.column_name)}" for c in columns]
        values = [f"{INDENT}{self._value(c, profile, value_priority)}" for c in columns]
        return "\n".join(
            [
                f"insert into {table.full_name}",
                "(",
                ",\n".join(names),
                ")",
                "values",
                "(",
                ",\n".join(values),
                ")",
            ]
        )

    def build_update(
        self,
        table: TableMapping,
        profile: DialectProfile,
        columns: Optional[Iterable[Any]] = None,
        value_priority: ValuePriority = ValuePriority.DEFAULT,
    ) -> str:
        """
        Build UPDATE statement.

        Auto-increment and created-at columns are never updated. The modified-at
        column is always set, whether or not the subset names it.

        Args:
            table: Table mapping
            profile: Dialect profile
            columns: Members to update (None = all)
            value_priority: Modified-at value source

        Returns:
            update [dbo].[Person]
            set
                [Name] = @Name,
                [ModifiedAt] = @ModifiedAt
        """
        value_priority = ValuePriority(value_priority)
        lines = [
            f"{INDENT}{profile.quote_identifier(column.column_name)} = "
            f"{self._value(column, profile, value_priority)}"
            for column in update_columns(table, columns)
        ]
        if not lines:
            raise InvalidArgumentError("columns", "No updatable columns")
        return "\n".join([f"update {table.full_name}", "set", ",\n".join(lines)])

    def build_delete(self, table: TableMapping) -> str:
        return f"delete from {table.full_name}"

    def build_truncate(self, table: TableMapping) -> str:
        return f"truncate table {table.full_name}"

    @staticmethod
    def _value(column: ColumnMapping, profile: DialectProfile, priority: ValuePriority) -> str:
        if uses_default_value(column, priority):
            return column.default_value
        return profile.placeholder(column.member_name)


def _target_members(table: TableMapping, columns: Optional[Iterable[Any]]) -> Optional[FrozenSet[str]]:
    if columns is None:
        return None
    if isinstance(columns, (str, Member)):
        columns = [columns]
    names: List[str] = []
    for member in columns:
        # Raises UnmappedMemberError for unknown members
        names.append(table.column(member_name(member)).member_name)
    return frozenset(names)


def update_columns(table: TableMapping, columns: Optional[Iterable[Any]] = None) -> List[ColumnMapping]:
    """
    Columns set by an update, in declaration order.

    Auto-increment and created-at columns are skipped; the modified-at column
    is kept whether or not the subset names it.
    """
    targets = _target_members(table, columns)
    return [
        column
        for column in table.columns
        if not column.is_auto_increment
        and not column.is_created_at
        and (column.is_modified_at or targets is None or column.member_name in targets)
    ]


def update_placeholders(
    table: TableMapping,
    columns: Optional[Iterable[Any]] = None,
    value_priority: ValuePriority = ValuePriority.DEFAULT,
) -> List[str]:
    """Member names bound by an update's set lines (SQL defaults excluded)."""
    value_priority = ValuePriority(value_priority)
    return [
        column.member_name
        for column in update_columns(table, columns)
        if not uses_default_value(column, value_priority)
    ]
