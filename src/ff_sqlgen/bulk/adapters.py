"""
Bulk insert adapters.

Adapters turn a batch of entities into one insert statement plus a parameter
list and hand both to an executor owned by the caller. The transport itself
(connections, bulk-copy APIs, transactions) stays outside this package.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, Optional

from ..dialects import Dialect, DialectRegistry
from ..exceptions import ConfigurationError, InvalidArgumentError
from ..mapping.catalog import MappingCatalog
from ..query_builder.builder import QueryBuilder
from ..query_builder.statements import ValuePriority
from .projection import project_rows


class BulkInsertAdapter(ABC):
    """
    Abstract base class for bulk insert adapters.

    Each adapter handles one way of shipping many rows:
    - execute_many over a DB-API style executor
    - vendor bulk-copy APIs, implemented outside this package
    """

    @abstractmethod
    def insert(
        self,
        executor: Any,
        entity_type: type,
        rows: Iterable[Any],
        value_priority: ValuePriority = ValuePriority.DEFAULT,
    ) -> int:
        """
        Insert rows through the executor.

        Args:
            executor: Caller-owned executor
            entity_type: Mapped Pydantic model class
            rows: Entity instances or mappings keyed by member name
            value_priority: Timestamp value source

        Returns:
            Number of rows handed to the executor
        """
        pass


class ExecuteManyAdapter(BulkInsertAdapter):
    """
    Adapter for executors exposing execute_many(query, params_list).

    The query is the generated insert statement and params_list holds one dict
    per row, keyed by placeholder name.
    """

    def __init__(
        self,
        dialect: Dialect,
        catalog: Optional[MappingCatalog] = None,
        logger=None,
    ):
        if dialect is None:
            raise InvalidArgumentError("dialect")
        self.dialect = dialect
        self.catalog = catalog
        self.logger = logger or logging.getLogger(__name__)

    def insert(
        self,
        executor: Any,
        entity_type: type,
        rows: Iterable[Any],
        value_priority: ValuePriority = ValuePriority.DEFAULT,
    ) -> int:
        if executor is None:
            raise InvalidArgumentError("executor")
        if rows is None:
            raise InvalidArgumentError("rows")

        builder = QueryBuilder(entity_type, self.dialect, catalog=self.catalog)
        query = builder.insert(value_priority).build()
        params_list = project_rows(builder.table, rows, value_priority)
        if not params_list:
            return 0

        try:
            executor.execute_many(query.statement, params_list)
        except Exception as e:
            self.logger.error(
                f"Bulk insert into {builder.table.full_name} failed",
                extra={
                    "entity": entity_type.__name__,
                    "dialect": builder.profile.dialect.value,
                    "rows": len(params_list),
                    "error": str(e),
                },
            )
            raise

        self.logger.debug(
            f"Bulk inserted {len(params_list)} rows into {builder.table.full_name}",
            extra={"entity": entity_type.__name__, "rows": len(params_list)},
        )
        return len(params_list)


class BulkInsertRegistry:
    """
    Explicit dialect -> bulk adapter lookup.

    Usage:
        registry = BulkInsertRegistry()
        registry.register(Dialect.SQLSERVER, ExecuteManyAdapter(Dialect.SQLSERVER))
        registry.get(Dialect.SQLSERVER).insert(executor, Person, people)
    """

    def __init__(self, dialects: Optional[DialectRegistry] = None, logger=None):
        self.dialects = dialects if dialects is not None else DialectRegistry()
        self.logger = logger or logging.getLogger(__name__)
        self._adapters: Dict[Dialect, BulkInsertAdapter] = {}

    def register(self, dialect: Dialect, adapter: BulkInsertAdapter) -> None:
        """Register or replace the adapter of a dialect."""
        if adapter is None:
            raise InvalidArgumentError("adapter")
        profile = self.dialects.get(dialect)
        self._adapters[profile.dialect] = adapter
        self.logger.debug(
            f"Registered bulk adapter {type(adapter).__name__}",
            extra={"dialect": profile.dialect.value},
        )

    def get(self, dialect: Dialect) -> BulkInsertAdapter:
        """
        Get the adapter registered for a dialect.

        Raises:
            InvalidArgumentError: If dialect is None or unknown
            ConfigurationError: If no adapter is registered for the dialect
        """
        profile = self.dialects.get(dialect)
        adapter = self._adapters.get(profile.dialect)
        if adapter is None:
            raise ConfigurationError(
                f"No bulk insert adapter registered for {profile.dialect.value}"
            )
        return adapter

    def __contains__(self, dialect: object) -> bool:
        return dialect in self._adapters
