"""
Query builder module for statement generation.

Provides the QueryBuilder session, the statement generators and one-shot helpers.
"""

from .builder import (
    QueryBuilder,
    count,
    delete,
    insert,
    order_by,
    order_by_descending,
    select,
    truncate,
    update,
    where,
)
from .statements import (
    StatementBuilder,
    StatementKind,
    StatementOptions,
    ValuePriority,
    update_columns,
    update_placeholders,
    uses_default_value,
)

__all__ = [
    "QueryBuilder",
    "StatementBuilder",
    "StatementKind",
    "StatementOptions",
    "ValuePriority",
    "update_columns",
    "update_placeholders",
    "uses_default_value",
    "count",
    "delete",
    "insert",
    "order_by",
    "order_by_descending",
    "select",
    "truncate",
    "update",
    "where",
]
