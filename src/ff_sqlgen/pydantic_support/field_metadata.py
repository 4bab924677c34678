"""
Field and table declarations for entity models.

Column metadata rides on Pydantic's FieldInfo.json_schema_extra under db_* keys,
so entities stay ordinary Pydantic models:

    class Person(Entity):
        __tables__ = (Table(Dialect.SQLSERVER, "Person", schema="dbo"),)

        id: int = Field(primary_key=True, auto_increment=True)
        name: str = Field(column={Dialect.SQLSERVER: "FullName"})
        created_at: datetime = Field(created_at=True, default_sql={Dialect.SQLSERVER: "SYSDATETIME()"})
"""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict
from pydantic import Field as PydanticField

from ..dialects import Dialect

# Keys stored in json_schema_extra
DB_COLUMN = "db_column"
DB_PRIMARY_KEY = "db_primary_key"
DB_AUTO_INCREMENT = "db_auto_increment"
DB_ALLOW_NULL = "db_allow_null"
DB_CREATED_AT = "db_created_at"
DB_MODIFIED_AT = "db_modified_at"
DB_DEFAULT = "db_default"
DB_UNIQUE = "db_unique"
DB_MAPPED = "db_mapped"
DB_TYPE = "db_type"

ColumnName = Union[str, Mapping[Dialect, str]]


def Field(
    default: Any = ...,
    *,
    column: Optional[ColumnName] = None,
    primary_key: bool = False,
    auto_increment: bool = False,
    allow_null: bool = False,
    created_at: bool = False,
    modified_at: bool = False,
    default_sql: Optional[Mapping[Dialect, str]] = None,
    unique: Optional[int] = None,
    mapped: bool = True,
    db_type: Optional[str] = None,
    **kwargs: Any,
) -> Any:
    """
    Pydantic Field carrying database mapping metadata.

    Args:
        default: Field default (as in pydantic.Field)
        column: Column name, either one name or a per-dialect mapping
        primary_key: Member is the primary key
        auto_increment: Value is generated by the database
        allow_null: Column accepts NULL even if the annotation is not Optional
        created_at: Column holds the creation timestamp
        modified_at: Column holds the last modification timestamp
        default_sql: Per-dialect SQL default literal (e.g. {Dialect.SQLSERVER: "SYSDATETIME()"})
        unique: Unique constraint group index
        mapped: False excludes the member from the table mapping
        db_type: Native SQL type override
        **kwargs: Passed through to pydantic.Field

    Returns:
        A pydantic FieldInfo
    """
    extra: Dict[str, Any] = dict(kwargs.pop("json_schema_extra", None) or {})

    if column is not None:
        extra[DB_COLUMN] = column if isinstance(column, str) else dict(column)
    if primary_key:
        extra[DB_PRIMARY_KEY] = True
    if auto_increment:
        extra[DB_AUTO_INCREMENT] = True
    if allow_null:
        extra[DB_ALLOW_NULL] = True
    if created_at:
        extra[DB_CREATED_AT] = True
    if modified_at:
        extra[DB_MODIFIED_AT] = True
    if default_sql:
        extra[DB_DEFAULT] = dict(default_sql)
    if unique is not None:
        extra[DB_UNIQUE] = unique
    if not mapped:
        extra[DB_MAPPED] = False
    if db_type is not None:
        extra[DB_TYPE] = db_type

    return PydanticField(default, json_schema_extra=extra or None, **kwargs)


@dataclass(frozen=True)
class Table:
    """Table declaration for one dialect."""

    dialect: Dialect
    name: str
    schema: Optional[str] = None


class Entity(BaseModel):
    """
    Optional base class for mapped entities.

    Class-level declarations understood by the mapping catalog:
        __tables__: per-dialect Table declarations
        __table_name__ / __schema__: dialect-agnostic table declaration
        __primary_key__: member name of the primary key
        __not_mapped__: member names excluded from the mapping
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        populate_by_name=True,
        extra="ignore",
    )
