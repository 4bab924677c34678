"""
Mapping catalog: derives and caches TableMapping per (entity type, dialect).

Derivation reads the entity's Pydantic fields and the db_* metadata attached
through ff_sqlgen.Field, plus class-level declarations:
- __tables__: per-dialect Table declarations
- __table_name__ / __schema__: dialect-agnostic fallback
- __primary_key__: member holding the primary key
- __not_mapped__: members excluded from the mapping
"""

import logging
import threading
from functools import lru_cache
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel
from pydantic.fields import FieldInfo

from ..dialects import Dialect, DialectProfile, DialectRegistry
from ..exceptions import DuplicatePrimaryKeyError, InvalidArgumentError, UnmappedMemberError
from ..pydantic_support import field_metadata as meta
from ..pydantic_support.type_mapping import map_python_type_to_column_type, unwrap_optional
from .models import ColumnMapping, TableMapping

CacheKey = Tuple[type, Dialect]


class MappingCatalog:
    """
    Memoizing source of TableMapping instances.

    A mapping is derived at most once per (type, dialect): first-time requests
    for the same key serialize on a per-key lock, later reads hit the cache
    without locking since published mappings are immutable.

    Usage:
        catalog = MappingCatalog()
        table = catalog.get(Person, Dialect.SQLSERVER)
        table.full_name  # [dbo].[Person]
    """

    def __init__(self, dialects: Optional[DialectRegistry] = None, logger=None):
        """
        Initialize catalog.

        Args:
            dialects: Dialect registry used for identifier quoting
            logger: Optional logger instance
        """
        self.dialects = dialects or DialectRegistry()
        self.logger = logger or logging.getLogger(__name__)
        self._cache: Dict[CacheKey, TableMapping] = {}
        self._locks: Dict[CacheKey, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def get(self, entity_type: type, dialect: Dialect) -> TableMapping:
        """
        Get the table mapping of an entity type for a dialect.

        Args:
            entity_type: Pydantic model class
            dialect: Target dialect

        Returns:
            Cached TableMapping

        Raises:
            InvalidArgumentError: If entity_type or dialect is missing or invalid
            DuplicatePrimaryKeyError: If several members are declared primary key
            UnmappedMemberError: If a class-level declaration names a missing member
        """
        if entity_type is None:
            raise InvalidArgumentError("entity_type")
        profile = self.dialects.get(dialect)
        key = (entity_type, profile.dialect)

        table = self._cache.get(key)
        if table is not None:
            return table

        with self._lock_for(key):
            # Another caller may have published while we waited
            table = self._cache.get(key)
            if table is None:
                table = self._derive(entity_type, profile)
                self._cache[key] = table
        return table

    def clear(self) -> None:
        """Drop all cached mappings."""
        with self._locks_guard:
            self._cache.clear()
            self._locks.clear()

    def __len__(self) -> int:
        return len(self._cache)

    def _lock_for(self, key: CacheKey) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            return lock

    # ==================== Derivation ====================

    def _derive(self, entity_type: type, profile: DialectProfile) -> TableMapping:
        if not (isinstance(entity_type, type) and issubclass(entity_type, BaseModel)):
            raise InvalidArgumentError(
                "entity_type", f"{entity_type!r} is not a Pydantic model class"
            )

        entity_name = entity_type.__name__
        dialect = profile.dialect
        try:
            schema, name = self._resolve_table(entity_type, dialect)
            fields = entity_type.model_fields
            excluded = self._declared_members(entity_type, "__not_mapped__", fields)
            declared_pk = self._declared_members(entity_type, "__primary_key__", fields)

            columns = [
                self._derive_column(member_name, field_info, dialect, declared_pk)
                for member_name, field_info in fields.items()
                if member_name not in excluded and self._is_mapped(field_info)
            ]
            self._check_primary_key(entity_name, columns, declared_pk)
        except Exception as e:
            self.logger.error(
                f"Failed to derive table mapping for {entity_name}",
                extra={"entity": entity_name, "dialect": dialect.value, "error": str(e)},
            )
            raise

        if schema:
            full_name = f"{profile.quote_identifier(schema)}.{profile.quote_identifier(name)}"
        else:
            full_name = profile.quote_identifier(name)

        table = TableMapping(
            entity_type=entity_type,
            dialect=dialect,
            schema=schema,
            name=name,
            full_name=full_name,
            columns=tuple(columns),
        )
        self.logger.debug(
            f"Derived table mapping for {entity_name}",
            extra={"entity": entity_name, "dialect": dialect.value, "columns": len(columns)},
        )
        return table

    @staticmethod
    def _resolve_table(entity_type: type, dialect: Dialect) -> Tuple[Optional[str], str]:
        for declaration in getattr(entity_type, "__tables__", None) or ():
            if declaration.dialect == dialect:
                return declaration.schema, declaration.name

        name = getattr(entity_type, "__table_name__", None)
        if name:
            return getattr(entity_type, "__schema__", None), name

        return None, entity_type.__name__

    @staticmethod
    def _declared_members(
        entity_type: type, attribute: str, fields: Dict[str, FieldInfo]
    ) -> Tuple[str, ...]:
        declared = getattr(entity_type, attribute, None)
        if not declared:
            return ()
        members = (declared,) if isinstance(declared, str) else tuple(declared)
        for member in members:
            if member not in fields:
                raise UnmappedMemberError(member, entity_type.__name__)
        return members

    @staticmethod
    def _is_mapped(field_info: FieldInfo) -> bool:
        return _metadata(field_info).get(meta.DB_MAPPED, True)

    @staticmethod
    def _derive_column(
        member_name: str,
        field_info: FieldInfo,
        dialect: Dialect,
        declared_pk: Tuple[str, ...],
    ) -> ColumnMapping:
        metadata = _metadata(field_info)

        column = metadata.get(meta.DB_COLUMN)
        if isinstance(column, dict):
            column = column.get(dialect)
        defaults = metadata.get(meta.DB_DEFAULT) or {}

        declared_type, is_optional = unwrap_optional(field_info.annotation)
        allow_null = bool(metadata.get(meta.DB_ALLOW_NULL, False))

        return ColumnMapping(
            member_name=member_name,
            column_name=column or member_name,
            declared_type=declared_type,
            column_type=map_python_type_to_column_type(declared_type, field_info),
            is_primary_key=bool(metadata.get(meta.DB_PRIMARY_KEY)) or member_name in declared_pk,
            is_auto_increment=bool(metadata.get(meta.DB_AUTO_INCREMENT, False)),
            is_nullable=allow_null or is_optional,
            allow_null=allow_null,
            is_created_at=bool(metadata.get(meta.DB_CREATED_AT, False)),
            is_modified_at=bool(metadata.get(meta.DB_MODIFIED_AT, False)),
            default_value=defaults.get(dialect),
            unique_index=metadata.get(meta.DB_UNIQUE),
        )

    @staticmethod
    def _check_primary_key(
        entity_name: str, columns: List[ColumnMapping], declared_pk: Tuple[str, ...]
    ) -> None:
        members = [column.member_name for column in columns if column.is_primary_key]
        if len(members) > 1 or len(declared_pk) > 1:
            raise DuplicatePrimaryKeyError(entity_name, members or declared_pk)


def _metadata(field_info: FieldInfo) -> Dict[str, Any]:
    extra = field_info.json_schema_extra
    return extra if isinstance(extra, dict) else {}


@lru_cache
def get_catalog() -> MappingCatalog:
    """Get the process-wide catalog with default dialect profiles."""
    return MappingCatalog()
