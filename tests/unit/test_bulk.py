"""
Unit tests for bulk insert projection and adapters.

The executor is mocked: adapters only hand it the statement and the rows.
"""

from datetime import datetime
from unittest.mock import MagicMock

import pytest

from ff_sqlgen import (
    BulkInsertAdapter,
    BulkInsertRegistry,
    ConfigurationError,
    Dialect,
    ExecuteManyAdapter,
    InvalidArgumentError,
    ValuePriority,
)
from ff_sqlgen.bulk import bulk_columns, project_rows

STAMP = datetime(2024, 1, 2, 3, 4, 5)


@pytest.fixture
def people(person):
    return [
        person(id=1, name="xin9le", age=30, has_children=True, created_at=STAMP, modified_at=STAMP),
        person(id=2, name=None, age=45, created_at=STAMP, modified_at=STAMP),
    ]


class TestBulkColumns:
    """Test the column set written by bulk inserts."""

    def test_default_priority_skips_defaulted_timestamps(self, person_table):
        columns = bulk_columns(person_table)

        assert [c.member_name for c in columns] == ["name", "age", "has_children"]
        assert [c.column_name for c in columns] == ["Name", "Age", "HasChildren"]

    def test_property_priority_keeps_timestamps(self, person_table):
        columns = bulk_columns(person_table, ValuePriority.PROPERTY)

        assert [c.member_name for c in columns] == [
            "name",
            "age",
            "has_children",
            "created_at",
            "modified_at",
        ]

    def test_timestamp_without_dialect_default_is_kept(self, catalog, person):
        table = catalog.get(person, Dialect.MYSQL)

        assert [c.member_name for c in bulk_columns(table)] == [
            "name",
            "age",
            "has_children",
            "modified_at",
        ]

    def test_nullability(self, person_table):
        columns = {c.member_name: c for c in bulk_columns(person_table)}

        assert columns["name"].is_nullable
        assert not columns["age"].is_nullable

    def test_getter_reads_models_and_mappings(self, person_table, people):
        name = bulk_columns(person_table)[0]

        assert name.getter(people[0]) == "xin9le"
        assert name.getter({"name": "mapped"}) == "mapped"


class TestProjectRows:
    def test_rows_projected_in_declaration_order(self, person_table, people):
        rows = project_rows(person_table, people)

        assert rows == [
            {"name": "xin9le", "age": 30, "has_children": True},
            {"name": None, "age": 45, "has_children": False},
        ]
        assert list(rows[0]) == ["name", "age", "has_children"]

    def test_property_priority_includes_timestamps(self, person_table, people):
        rows = project_rows(person_table, people, ValuePriority.PROPERTY)

        assert rows[0]["created_at"] == STAMP
        assert rows[0]["modified_at"] == STAMP

    def test_no_rows(self, person_table):
        assert project_rows(person_table, []) == []


class TestExecuteManyAdapter:
    """Test the execute_many adapter against a mock executor."""

    def test_insert_hands_statement_and_rows_to_executor(self, person, catalog, people):
        executor = MagicMock()
        adapter = ExecuteManyAdapter(Dialect.SQLSERVER, catalog=catalog)

        inserted = adapter.insert(executor, person, people)

        assert inserted == 2
        executor.execute_many.assert_called_once()
        statement, params_list = executor.execute_many.call_args.args
        assert statement.startswith("insert into [dbo].[Person]")
        assert "    SYSDATETIME(),\n    SYSDATETIME()\n)" in statement
        assert params_list == project_rows(catalog.get(person, Dialect.SQLSERVER), people)

    def test_placeholders_match_row_keys(self, person, catalog, people):
        executor = MagicMock()
        adapter = ExecuteManyAdapter(Dialect.SQLSERVER, catalog=catalog)

        adapter.insert(executor, person, people, ValuePriority.PROPERTY)

        statement, params_list = executor.execute_many.call_args.args
        for name in params_list[0]:
            assert f"@{name}" in statement

    def test_empty_batch_skips_executor(self, person, catalog):
        executor = MagicMock()
        adapter = ExecuteManyAdapter(Dialect.SQLSERVER, catalog=catalog)

        assert adapter.insert(executor, person, []) == 0
        executor.execute_many.assert_not_called()

    def test_executor_failure_is_logged_and_raised(self, person, catalog, people):
        executor = MagicMock()
        executor.execute_many.side_effect = RuntimeError("connection reset")
        logger = MagicMock()
        adapter = ExecuteManyAdapter(Dialect.SQLSERVER, catalog=catalog, logger=logger)

        with pytest.raises(RuntimeError, match="connection reset"):
            adapter.insert(executor, person, people)

        logger.error.assert_called_once()
        assert logger.error.call_args.kwargs["extra"]["rows"] == 2

    def test_missing_arguments(self, person, catalog, people):
        adapter = ExecuteManyAdapter(Dialect.SQLSERVER, catalog=catalog)

        with pytest.raises(InvalidArgumentError):
            adapter.insert(None, person, people)
        with pytest.raises(InvalidArgumentError):
            adapter.insert(MagicMock(), person, None)
        with pytest.raises(InvalidArgumentError):
            ExecuteManyAdapter(None)


class TestBulkInsertRegistry:
    """Test explicit adapter registration."""

    def test_register_and_get(self):
        registry = BulkInsertRegistry()
        adapter = ExecuteManyAdapter(Dialect.SQLITE)

        registry.register(Dialect.SQLITE, adapter)

        assert registry.get(Dialect.SQLITE) is adapter
        assert registry.get("sqlite") is adapter
        assert Dialect.SQLITE in registry

    def test_unregistered_dialect(self):
        registry = BulkInsertRegistry()

        with pytest.raises(ConfigurationError):
            registry.get(Dialect.SQLSERVER)

    def test_registries_are_independent(self):
        first = BulkInsertRegistry()
        second = BulkInsertRegistry()
        first.register(Dialect.SQLITE, ExecuteManyAdapter(Dialect.SQLITE))

        assert Dialect.SQLITE not in second

    def test_custom_adapter(self, person, people):
        class RecordingAdapter(BulkInsertAdapter):
            def __init__(self):
                self.batches = []

            def insert(self, executor, entity_type, rows, value_priority=ValuePriority.DEFAULT):
                self.batches.append(list(rows))
                return len(self.batches[-1])

        registry = BulkInsertRegistry()
        adapter = RecordingAdapter()
        registry.register(Dialect.ORACLE, adapter)

        assert registry.get(Dialect.ORACLE).insert(None, person, people) == 2
        assert adapter.batches == [people]

    def test_register_none_adapter(self):
        with pytest.raises(InvalidArgumentError):
            BulkInsertRegistry().register(Dialect.SQLITE, None)

    def test_register_unknown_dialect(self):
        with pytest.raises(InvalidArgumentError):
            BulkInsertRegistry().register("db2", ExecuteManyAdapter(Dialect.SQLITE))

    def test_abstract_adapter_cannot_be_instantiated(self):
        with pytest.raises(TypeError):
            BulkInsertAdapter()
