"""
ff-sqlgen: SQL text generation for Pydantic entity models.

Features:
- Table/column mapping derived once per (entity type, dialect)
- Typed predicate builder translated to parameterized where clauses
- Count, select, insert, update, delete and truncate statements
- Dialect-aware identifier quoting and bind placeholders
- Bulk insert projection with pluggable adapters

Execution stays with the caller: every builder returns a Query holding the
statement text and its bind parameters.
"""

# Version is read from package metadata (pyproject.toml is the single source of truth)
try:
    from importlib.metadata import version

    __version__ = version("ff-sqlgen")
except Exception:
    __version__ = "0.1.0"

# Dialects and settings
from .config import IN_CLAUSE_LIMIT, SqlGenSettings, configure_logging, get_settings
from .dialects import BracketPair, Dialect, DialectProfile, DialectRegistry

# Entity declarations
from .pydantic_support import ColumnType, Entity, Field, Table

# Mapping
from .mapping import ColumnMapping, MappingCatalog, TableMapping, get_catalog

# Predicates and translation
from .expressions import (
    FALSE,
    TRUE,
    ExpressionTranslator,
    Member,
    Predicate,
    PredicateFragment,
    col,
)

# Statements
from .query import BindParameterSet, Query
from .query_builder import (
    QueryBuilder,
    StatementBuilder,
    StatementKind,
    StatementOptions,
    ValuePriority,
)

# Bulk insert
from .bulk import BulkInsertAdapter, BulkInsertRegistry, ExecuteManyAdapter, project_rows

# Exceptions
from .exceptions import (
    SqlGenError,
    UnmappedMemberError,
    UnsupportedExpressionError,
    DuplicatePrimaryKeyError,
    InvalidArgumentError,
    ConfigurationError,
)

__all__ = [
    # Version
    "__version__",
    # Dialects and settings
    "IN_CLAUSE_LIMIT",
    "SqlGenSettings",
    "configure_logging",
    "get_settings",
    "BracketPair",
    "Dialect",
    "DialectProfile",
    "DialectRegistry",
    # Entity declarations
    "ColumnType",
    "Entity",
    "Field",
    "Table",
    # Mapping
    "ColumnMapping",
    "MappingCatalog",
    "TableMapping",
    "get_catalog",
    # Predicates
    "FALSE",
    "TRUE",
    "ExpressionTranslator",
    "Member",
    "Predicate",
    "PredicateFragment",
    "col",
    # Statements
    "BindParameterSet",
    "Query",
    "QueryBuilder",
    "StatementBuilder",
    "StatementKind",
    "StatementOptions",
    "ValuePriority",
    # Bulk insert
    "BulkInsertAdapter",
    "BulkInsertRegistry",
    "ExecuteManyAdapter",
    "project_rows",
    # Exceptions
    "SqlGenError",
    "UnmappedMemberError",
    "UnsupportedExpressionError",
    "DuplicatePrimaryKeyError",
    "InvalidArgumentError",
    "ConfigurationError",
]
