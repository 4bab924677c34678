"""
Type mapping from Pydantic/Python annotations to column type categories.

Handles:
- Optional[T] / T | None unwrapping (drives column nullability)
- Basic Python types (str, int, bool, float, bytes)
- Temporal and numeric types (datetime, date, time, Decimal, UUID)
- Custom type overrides via the db_type field metadata
"""

import re
import types
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from enum import Enum
from typing import Any, Optional, Tuple, Union, get_args, get_origin
from uuid import UUID

from pydantic.fields import FieldInfo

from .field_metadata import DB_TYPE


class ColumnType(str, Enum):
    """Coarse column type categories."""

    STRING = "string"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    DECIMAL = "decimal"
    FLOAT = "float"
    DATETIME = "datetime"
    DATE = "date"
    TIME = "time"
    INTERVAL = "interval"
    UUID = "uuid"
    BINARY = "binary"
    OBJECT = "object"


def unwrap_optional(python_type: Any) -> Tuple[Any, bool]:
    """
    Strip None from a Union annotation.

    Args:
        python_type: Annotation from a Pydantic field

    Returns:
        Tuple of (inner type, whether None was part of the annotation)

    Example:
        >>> unwrap_optional(Optional[int])
        (<class 'int'>, True)
    """
    origin = get_origin(python_type)
    if origin is Union or origin is types.UnionType:
        args = [arg for arg in get_args(python_type) if arg is not type(None)]
        is_optional = len(args) != len(get_args(python_type))
        if len(args) == 1:
            return args[0], is_optional
        return Union[tuple(args)], is_optional
    return python_type, python_type is type(None)


def map_python_type_to_column_type(
    python_type: Any,
    field_info: Optional[FieldInfo] = None,
) -> ColumnType:
    """
    Map a field annotation to a ColumnType.

    Args:
        python_type: Python type annotation (Optional already stripped or not)
        field_info: FieldInfo with db_* metadata

    Returns:
        ColumnType category, OBJECT when nothing more specific applies
    """
    metadata = (field_info.json_schema_extra if field_info else None) or {}

    # Check for custom db_type override (takes precedence)
    if isinstance(metadata, dict) and DB_TYPE in metadata:
        return _parse_custom_type(metadata[DB_TYPE])

    python_type, _ = unwrap_optional(python_type)

    # bool before int: bool is a subclass of int
    if python_type is bool:
        return ColumnType.BOOLEAN
    elif python_type is str:
        return ColumnType.STRING
    elif python_type is int:
        return ColumnType.INTEGER
    elif python_type is float:
        return ColumnType.FLOAT
    elif python_type is Decimal:
        return ColumnType.DECIMAL
    # datetime before date: datetime is a subclass of date
    elif python_type is datetime:
        return ColumnType.DATETIME
    elif python_type is date:
        return ColumnType.DATE
    elif python_type is time:
        return ColumnType.TIME
    elif python_type is timedelta:
        return ColumnType.INTERVAL
    elif python_type is UUID:
        return ColumnType.UUID
    elif python_type in (bytes, bytearray):
        return ColumnType.BINARY
    elif isinstance(python_type, type) and issubclass(python_type, Enum):
        if issubclass(python_type, int):
            return ColumnType.INTEGER
        return ColumnType.STRING

    return ColumnType.OBJECT


# Whole type names only: POINT or INTERVAL must not read as INT
_INTEGER_TYPE = re.compile(r"\b(?:TINY|SMALL|MEDIUM|BIG)?(?:INT(?:EGER|[248])?|SERIAL[248]?)\b")


def _parse_custom_type(custom_type_str: str) -> ColumnType:
    """
    Parse custom db_type string to ColumnType.

    Args:
        custom_type_str: SQL type string like "DECIMAL(15,2)"

    Returns:
        Appropriate ColumnType value
    """
    type_upper = custom_type_str.upper()

    if "UUID" in type_upper or "UNIQUEIDENTIFIER" in type_upper:
        return ColumnType.UUID
    elif "CHAR" in type_upper or "TEXT" in type_upper:
        return ColumnType.STRING
    elif "BOOL" in type_upper or type_upper == "BIT":
        return ColumnType.BOOLEAN
    elif "INTERVAL" in type_upper:
        return ColumnType.INTERVAL
    elif _INTEGER_TYPE.search(type_upper):
        return ColumnType.INTEGER
    elif "TIMESTAMP" in type_upper or "DATETIME" in type_upper:
        return ColumnType.DATETIME
    elif "DATE" in type_upper:
        return ColumnType.DATE
    elif "TIME" in type_upper:
        return ColumnType.TIME
    elif "DECIMAL" in type_upper or "NUMERIC" in type_upper or "MONEY" in type_upper:
        return ColumnType.DECIMAL
    elif "FLOAT" in type_upper or "REAL" in type_upper or "DOUBLE" in type_upper:
        return ColumnType.FLOAT
    elif "BINARY" in type_upper or "BLOB" in type_upper or "BYTEA" in type_upper:
        return ColumnType.BINARY
    else:
        return ColumnType.OBJECT  # Fallback
