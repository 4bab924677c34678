"""
Shared fixtures for ff-sqlgen tests.
"""

from datetime import datetime
from typing import Optional

import pytest

from ff_sqlgen import Dialect, DialectRegistry, Entity, Field, MappingCatalog, Table
from ff_sqlgen.config import get_settings


class Person(Entity):
    """Person entity mapped to [dbo].[Person] on SQL Server and `people` on MySQL."""

    __tables__ = (
        Table(Dialect.SQLSERVER, "Person", schema="dbo"),
        Table(Dialect.MYSQL, "people"),
    )

    id: int = Field(0, column="Id", primary_key=True, auto_increment=True)
    name: Optional[str] = Field(None, column="Name")
    age: int = Field(0, column="Age")
    has_children: bool = Field(False, column="HasChildren")
    created_at: datetime = Field(
        default_factory=datetime.now,
        column="CreatedAt",
        created_at=True,
        default_sql={Dialect.SQLSERVER: "SYSDATETIME()", Dialect.MYSQL: "CURRENT_TIMESTAMP"},
    )
    modified_at: datetime = Field(
        default_factory=datetime.now,
        column={Dialect.SQLSERVER: "ModifiedAt", Dialect.MYSQL: "UpdatedOn"},
        modified_at=True,
        default_sql={Dialect.SQLSERVER: "SYSDATETIME()"},
    )


@pytest.fixture
def person():
    """Person entity type."""
    return Person


@pytest.fixture
def dialects():
    """Fresh dialect registry with the default profiles."""
    return DialectRegistry()


@pytest.fixture
def catalog(dialects):
    """Fresh mapping catalog, isolated from the process-wide one."""
    return MappingCatalog(dialects)


@pytest.fixture
def person_table(catalog):
    """SQL Server mapping of Person."""
    return catalog.get(Person, Dialect.SQLSERVER)


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Settings are cached; drop the cache so env changes in a test stay local."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
