"""
Pydantic integration: entity base class, field metadata and type mapping.
"""

from .field_metadata import Entity, Field, Table
from .type_mapping import ColumnType, map_python_type_to_column_type, unwrap_optional

__all__ = [
    "Entity",
    "Field",
    "Table",
    "ColumnType",
    "map_python_type_to_column_type",
    "unwrap_optional",
]
