"""
Example: Person entity with per-dialect mapping.

This example demonstrates:
- Entity with per-dialect table and column names
- Created/modified timestamps filled by SQL defaults
- Predicate builder with and/or/in/null
- Bulk insert through an execute_many executor
"""

import sqlite3
from datetime import datetime
from typing import Optional

from ff_sqlgen import (
    BulkInsertRegistry,
    Dialect,
    Entity,
    ExecuteManyAdapter,
    Field,
    QueryBuilder,
    Table,
    col,
)
from ff_sqlgen.query_builder import select

# ==================== Model Definition ====================


class Person(Entity):
    """Person table, schema-qualified on SQL Server."""

    __tables__ = (
        Table(Dialect.SQLSERVER, "Person", schema="dbo"),
        Table(Dialect.SQLITE, "people"),
    )

    id: int = Field(0, primary_key=True, auto_increment=True)
    name: str = Field(column={Dialect.SQLSERVER: "FullName"})
    age: int
    has_children: bool = False
    nickname: Optional[str] = None
    created_at: datetime = Field(
        default_factory=datetime.now,
        created_at=True,
        default_sql={Dialect.SQLSERVER: "SYSDATETIME()", Dialect.SQLITE: "CURRENT_TIMESTAMP"},
    )
    modified_at: datetime = Field(
        default_factory=datetime.now,
        modified_at=True,
        default_sql={Dialect.SQLSERVER: "SYSDATETIME()", Dialect.SQLITE: "CURRENT_TIMESTAMP"},
    )


# ==================== Query Building ====================


def build_queries():
    """Print a few generated statements."""
    builder = QueryBuilder(Person, Dialect.SQLSERVER)
    builder.select()
    builder.where(((col("age") >= 30) & col("nickname").is_not_null()) | col("has_children"))
    builder.order_by("age")
    builder.then_by_descending("id")
    query = builder.build()
    print(query.statement)
    print(query.parameters)

    query = select(Person, col("id").in_(range(1, 2001)), dialect=Dialect.SQLSERVER)
    print(query.statement)

    query = QueryBuilder(Person, Dialect.SQLSERVER).update(["name"]).where(col("id") == 1).build()
    print(query.statement)


# ==================== Bulk Insert ====================


class SqliteExecutor:
    """Minimal execute_many executor; sqlite3 accepts @name placeholders."""

    def __init__(self, connection: sqlite3.Connection):
        self.connection = connection

    def execute_many(self, query: str, params_list):
        self.connection.executemany(query, params_list)


def bulk_insert():
    connection = sqlite3.connect(":memory:")
    connection.execute(
        """
        create table people (
            id integer primary key autoincrement,
            name text not null,
            age integer not null,
            has_children integer not null,
            nickname text,
            created_at text not null,
            modified_at text not null
        )
        """
    )

    registry = BulkInsertRegistry()
    registry.register(Dialect.SQLITE, ExecuteManyAdapter(Dialect.SQLITE))

    people = [Person(name="xin9le", age=30), Person(name="anonymous", age=45, nickname="anon")]
    inserted = registry.get(Dialect.SQLITE).insert(SqliteExecutor(connection), Person, people)
    print(f"Inserted {inserted} rows")

    for row in connection.execute("select id, name, age from people"):
        print(row)


if __name__ == "__main__":
    build_queries()
    bulk_insert()
