"""
Bulk insert projection and adapters.
"""

from .adapters import BulkInsertAdapter, BulkInsertRegistry, ExecuteManyAdapter
from .projection import BulkColumn, bulk_columns, project_rows

__all__ = [
    "BulkColumn",
    "BulkInsertAdapter",
    "BulkInsertRegistry",
    "ExecuteManyAdapter",
    "bulk_columns",
    "project_rows",
]
