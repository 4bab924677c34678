"""
Dialect profiles for SQL generation.

Each dialect carries the formatting facts the generators need:
- Identifier bracket pair ([name], `name`, "name")
- Bind parameter prefix (@name, :name)
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, Iterator, Optional

from .exceptions import InvalidArgumentError


class Dialect(str, Enum):
    """Closed set of supported database families."""

    SQLSERVER = "sqlserver"
    MYSQL = "mysql"
    SQLITE = "sqlite"
    POSTGRESQL = "postgresql"
    ORACLE = "oracle"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class BracketPair:
    """Begin/end characters used to quote identifiers."""

    begin: str
    end: str

    def wrap(self, identifier: str) -> str:
        return f"{self.begin}{identifier}{self.end}"


@dataclass(frozen=True)
class DialectProfile:
    """Static formatting facts for one dialect."""

    dialect: Dialect
    brackets: BracketPair
    parameter_prefix: str

    def quote_identifier(self, identifier: str) -> str:
        """
        Quote an identifier with this dialect's brackets.

        Args:
            identifier: Column or table name (can be schema.table)

        Returns:
            Quoted identifier, each dotted part wrapped separately
        """
        # Handle schema.table format
        if "." in identifier:
            parts = identifier.split(".", 1)
            return f"{self.brackets.wrap(parts[0])}.{self.brackets.wrap(parts[1])}"
        return self.brackets.wrap(identifier)

    def placeholder(self, name: str) -> str:
        """Return the bind placeholder for a parameter name (e.g. @p1)."""
        return f"{self.parameter_prefix}{name}"


DEFAULT_PROFILES = (
    DialectProfile(Dialect.SQLSERVER, BracketPair("[", "]"), "@"),
    DialectProfile(Dialect.MYSQL, BracketPair("`", "`"), "@"),
    DialectProfile(Dialect.SQLITE, BracketPair('"', '"'), "@"),
    DialectProfile(Dialect.POSTGRESQL, BracketPair('"', '"'), ":"),
    DialectProfile(Dialect.ORACLE, BracketPair('"', '"'), ":"),
    DialectProfile(Dialect.UNKNOWN, BracketPair('"', '"'), "@"),
)


class DialectRegistry:
    """
    Lookup of dialect profiles.

    Constructed once at startup and passed to the components that need it.
    Profiles can be overridden per instance without touching other registries.

    Usage:
        registry = DialectRegistry()
        profile = registry.get(Dialect.SQLSERVER)
        profile.quote_identifier("dbo.Person")  # [dbo].[Person]
    """

    def __init__(self, profiles: Optional[Iterable[DialectProfile]] = None):
        self._profiles: Dict[Dialect, DialectProfile] = {
            profile.dialect: profile for profile in (profiles or DEFAULT_PROFILES)
        }

    def get(self, dialect: Dialect) -> DialectProfile:
        """
        Get the profile for a dialect.

        Raises:
            InvalidArgumentError: If dialect is None or has no registered profile
        """
        if dialect is None:
            raise InvalidArgumentError("dialect")
        try:
            return self._profiles[Dialect(dialect)]
        except (KeyError, ValueError):
            raise InvalidArgumentError(
                "dialect", f"No dialect profile registered for {dialect!r}"
            ) from None

    def register(self, profile: DialectProfile) -> None:
        """Register or replace a profile."""
        self._profiles[profile.dialect] = profile

    def __iter__(self) -> Iterator[DialectProfile]:
        return iter(self._profiles.values())

    def __contains__(self, dialect: object) -> bool:
        return dialect in self._profiles
