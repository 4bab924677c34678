"""
Row projection for bulk inserts.

Projects entity instances onto the insert column set, in declaration order.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Mapping

from ..mapping.models import TableMapping
from ..query_builder.statements import ValuePriority, uses_default_value


@dataclass(frozen=True)
class BulkColumn:
    """
    One column of a bulk insert.

    Attributes:
        member_name: Entity member (also the insert placeholder name)
        column_name: Unquoted column name
        is_nullable: Column accepts NULL
        getter: Reads the member value from a row
    """

    member_name: str
    column_name: str
    is_nullable: bool
    getter: Callable[[Any], Any]


def _getter(member_name: str) -> Callable[[Any], Any]:
    def read(row: Any) -> Any:
        if isinstance(row, Mapping):
            return row[member_name]
        return getattr(row, member_name)

    return read


def bulk_columns(
    table: TableMapping, value_priority: ValuePriority = ValuePriority.DEFAULT
) -> List[BulkColumn]:
    """
    Columns written by a bulk insert.

    Auto-increment columns are skipped. Under DEFAULT priority, created-at and
    modified-at columns with a SQL default are skipped as well, since the
    database fills them.
    """
    value_priority = ValuePriority(value_priority)
    return [
        BulkColumn(
            member_name=column.member_name,
            column_name=column.column_name,
            is_nullable=column.is_nullable,
            getter=_getter(column.member_name),
        )
        for column in table.columns
        if not column.is_auto_increment and not uses_default_value(column, value_priority)
    ]


def project_rows(
    table: TableMapping,
    rows: Iterable[Any],
    value_priority: ValuePriority = ValuePriority.DEFAULT,
) -> List[Dict[str, Any]]:
    """
    Project rows into parameter dicts keyed by member name.

    Args:
        table: Table mapping of the row type
        rows: Entity instances or mappings keyed by member name
        value_priority: Timestamp value source

    Returns:
        One dict per row, keys in column declaration order
    """
    columns = bulk_columns(table, value_priority)
    return [{column.member_name: column.getter(row) for column in columns} for row in rows]
