"""
Unit tests for MappingCatalog.

Covers table resolution, column derivation from Field metadata and
class-level declarations, caching, and concurrent first access.
"""

import threading
import time
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import Optional
from unittest.mock import MagicMock, patch

import pytest
from pydantic import BaseModel

from ff_sqlgen import (
    ColumnType,
    Dialect,
    DuplicatePrimaryKeyError,
    Entity,
    Field,
    InvalidArgumentError,
    MappingCatalog,
    UnmappedMemberError,
)


class Account(BaseModel):
    """Plain Pydantic model with a dialect-agnostic table declaration."""

    __table_name__ = "accounts"
    __schema__ = "billing"
    __primary_key__ = "account_id"
    __not_mapped__ = ("display_label",)

    account_id: int
    owner: str
    display_label: str = ""
    cached_total: float = Field(0.0, mapped=False)
    closed_on: Optional[datetime] = None
    code: str = Field(allow_null=True, unique=1)


class Untitled(Entity):
    """No table declaration at all."""

    value: int


class TwoKeys(Entity):
    first: int = Field(primary_key=True)
    second: int = Field(primary_key=True)


class FlagAndDeclaredKey(Entity):
    __primary_key__ = "second"

    first: int = Field(primary_key=True)
    second: int


class BadNotMapped(Entity):
    __not_mapped__ = ("missing",)

    value: int


class BadPrimaryKey(Entity):
    __primary_key__ = "missing"

    value: int


class TestTableResolution:
    """Test how table name and schema are resolved."""

    def test_per_dialect_declaration(self, catalog, person):
        table = catalog.get(person, Dialect.SQLSERVER)

        assert table.schema == "dbo"
        assert table.name == "Person"
        assert table.full_name == "[dbo].[Person]"
        assert table.dialect is Dialect.SQLSERVER
        assert table.entity_type is person

    def test_other_dialect_declaration(self, catalog, person):
        table = catalog.get(person, Dialect.MYSQL)

        assert table.schema is None
        assert table.full_name == "`people`"

    def test_falls_back_to_class_name_without_declaration(self, catalog, person):
        """SQLite has no __tables__ entry for Person."""
        table = catalog.get(person, Dialect.SQLITE)

        assert table.schema is None
        assert table.name == "Person"
        assert table.full_name == '"Person"'

    def test_dialect_agnostic_declaration(self, catalog):
        table = catalog.get(Account, Dialect.POSTGRESQL)

        assert table.full_name == '"billing"."accounts"'

    def test_class_name_fallback(self, catalog):
        table = catalog.get(Untitled, Dialect.SQLSERVER)

        assert table.full_name == "[Untitled]"


class TestColumnDerivation:
    """Test per-member column metadata."""

    def test_columns_keep_declaration_order(self, person_table):
        assert [c.member_name for c in person_table.columns] == [
            "id",
            "name",
            "age",
            "has_children",
            "created_at",
            "modified_at",
        ]

    def test_column_name_override(self, person_table):
        assert person_table.column("name").column_name == "Name"

    def test_per_dialect_column_name(self, catalog, person):
        sqlserver = catalog.get(person, Dialect.SQLSERVER)
        mysql = catalog.get(person, Dialect.MYSQL)
        sqlite = catalog.get(person, Dialect.SQLITE)

        assert sqlserver.column("modified_at").column_name == "ModifiedAt"
        assert mysql.column("modified_at").column_name == "UpdatedOn"
        # No entry for the dialect: member name
        assert sqlite.column("modified_at").column_name == "modified_at"

    def test_primary_key_and_auto_increment(self, person_table):
        column = person_table.column("id")

        assert column.is_primary_key
        assert column.is_auto_increment
        assert person_table.primary_key is column

    def test_timestamp_flags_and_defaults(self, person_table):
        created = person_table.column("created_at")
        modified = person_table.column("modified_at")

        assert created.is_created_at and not created.is_modified_at
        assert modified.is_modified_at and not modified.is_created_at
        assert created.default_value == "SYSDATETIME()"
        assert person_table.modified_at is modified

    def test_default_value_is_dialect_specific(self, catalog, person):
        mysql = catalog.get(person, Dialect.MYSQL)

        assert mysql.column("created_at").default_value == "CURRENT_TIMESTAMP"
        assert mysql.column("modified_at").default_value is None

    def test_nullability(self, catalog):
        table = catalog.get(Account, Dialect.SQLSERVER)

        # Optional annotation
        assert table.column("closed_on").is_nullable
        assert not table.column("closed_on").allow_null
        # Explicit allow-null declaration
        assert table.column("code").is_nullable
        assert table.column("code").allow_null
        assert not table.column("owner").is_nullable

    def test_declared_type_and_column_type(self, catalog):
        table = catalog.get(Account, Dialect.SQLSERVER)
        closed_on = table.column("closed_on")

        assert closed_on.declared_type is datetime
        assert closed_on.column_type == ColumnType.DATETIME
        assert table.column("owner").column_type == ColumnType.STRING

    def test_unique_index(self, catalog):
        table = catalog.get(Account, Dialect.SQLSERVER)

        assert table.column("code").unique_index == 1
        assert table.column("code").is_unique
        assert not table.column("owner").is_unique

    def test_declared_primary_key(self, catalog):
        table = catalog.get(Account, Dialect.SQLSERVER)

        assert table.primary_key.member_name == "account_id"
        assert not table.primary_key.is_auto_increment

    def test_excluded_members(self, catalog):
        table = catalog.get(Account, Dialect.SQLSERVER)
        members = [c.member_name for c in table.columns]

        assert "display_label" not in members
        assert "cached_total" not in members
        assert members == ["account_id", "owner", "closed_on", "code"]

    def test_unknown_member_lookup_raises(self, person_table):
        with pytest.raises(UnmappedMemberError) as exc_info:
            person_table.column("nickname")

        assert exc_info.value.member == "nickname"
        assert exc_info.value.entity == "Person"
        assert str(exc_info.value) == "Member 'nickname' is not mapped on Person"
        assert isinstance(exc_info.value, KeyError)

    def test_mappings_are_immutable(self, person_table):
        with pytest.raises(AttributeError):
            person_table.name = "Other"
        with pytest.raises(TypeError):
            person_table.columns_by_member["other"] = None


class TestDerivationFailures:
    """Test errors raised while deriving a mapping."""

    def test_two_primary_key_flags(self, catalog):
        with pytest.raises(DuplicatePrimaryKeyError) as exc_info:
            catalog.get(TwoKeys, Dialect.SQLSERVER)

        assert exc_info.value.members == ("first", "second")

    def test_flag_and_declaration_on_different_members(self, catalog):
        with pytest.raises(DuplicatePrimaryKeyError):
            catalog.get(FlagAndDeclaredKey, Dialect.SQLSERVER)

    def test_not_mapped_names_missing_member(self, catalog):
        with pytest.raises(UnmappedMemberError) as exc_info:
            catalog.get(BadNotMapped, Dialect.SQLSERVER)

        assert exc_info.value.member == "missing"

    def test_primary_key_names_missing_member(self, catalog):
        with pytest.raises(UnmappedMemberError):
            catalog.get(BadPrimaryKey, Dialect.SQLSERVER)

    def test_failed_derivation_is_not_cached(self, catalog):
        with pytest.raises(DuplicatePrimaryKeyError):
            catalog.get(TwoKeys, Dialect.SQLSERVER)

        assert len(catalog) == 0

    def test_failure_is_logged(self, dialects):
        logger = MagicMock()
        catalog = MappingCatalog(dialects, logger=logger)

        with pytest.raises(DuplicatePrimaryKeyError):
            catalog.get(TwoKeys, Dialect.SQLSERVER)

        logger.error.assert_called_once()
        assert logger.error.call_args.kwargs["extra"]["entity"] == "TwoKeys"

    def test_none_entity_type(self, catalog):
        with pytest.raises(InvalidArgumentError):
            catalog.get(None, Dialect.SQLSERVER)

    def test_none_dialect(self, catalog, person):
        with pytest.raises(InvalidArgumentError):
            catalog.get(person, None)

    def test_non_model_type(self, catalog):
        with pytest.raises(InvalidArgumentError):
            catalog.get(dict, Dialect.SQLSERVER)


class TestCaching:
    """Test memoization per (type, dialect)."""

    def test_same_key_returns_same_instance(self, catalog, person):
        first = catalog.get(person, Dialect.SQLSERVER)
        second = catalog.get(person, "sqlserver")

        assert first is second
        assert len(catalog) == 1

    def test_dialects_are_cached_separately(self, catalog, person):
        sqlserver = catalog.get(person, Dialect.SQLSERVER)
        mysql = catalog.get(person, Dialect.MYSQL)

        assert sqlserver is not mysql
        assert len(catalog) == 2

    def test_derives_once(self, catalog, person):
        with patch.object(catalog, "_derive", wraps=catalog._derive) as derive:
            catalog.get(person, Dialect.SQLSERVER)
            catalog.get(person, Dialect.SQLSERVER)

        assert derive.call_count == 1

    def test_clear(self, catalog, person):
        first = catalog.get(person, Dialect.SQLSERVER)
        catalog.clear()

        assert len(catalog) == 0
        assert catalog.get(person, Dialect.SQLSERVER) is not first

    def test_concurrent_first_access_derives_once(self, catalog, person):
        """Many threads asking for the same key see one derivation and one instance."""
        workers = 16
        barrier = threading.Barrier(workers)
        original = catalog._derive

        def slow_derive(entity_type, profile):
            # Give the other threads time to pile up on the key lock
            time.sleep(0.05)
            return original(entity_type, profile)

        def request(_):
            barrier.wait()
            return catalog.get(person, Dialect.SQLSERVER)

        with patch.object(catalog, "_derive", side_effect=slow_derive) as derive:
            with ThreadPoolExecutor(max_workers=workers) as pool:
                tables = list(pool.map(request, range(workers)))

        assert derive.call_count == 1
        assert all(table is tables[0] for table in tables)
