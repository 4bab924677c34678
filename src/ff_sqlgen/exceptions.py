"""
Exceptions raised by ff-sqlgen.

All errors are local and deterministic: they describe a structural problem with
the entity metadata or the predicate handed in, so retrying never helps.
"""

from typing import Any, Iterable, Optional


class SqlGenError(Exception):
    """Base exception for all ff-sqlgen errors."""

    pass


class UnmappedMemberError(SqlGenError, KeyError):
    """Raised when a predicate, ordering or column subset references an unknown member."""

    def __init__(self, member: str, entity: Optional[str] = None):
        self.member = member
        self.entity = entity

        if entity:
            message = f"Member '{member}' is not mapped on {entity}"
        else:
            message = f"Member '{member}' is not mapped"

        super().__init__(message)

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return self.args[0]


class UnsupportedExpressionError(SqlGenError):
    """Raised when the translator meets a node shape or operator it cannot emit."""

    def __init__(self, message: str, node: Any = None):
        self.node = node
        super().__init__(message)


class DuplicatePrimaryKeyError(SqlGenError):
    """Raised when an entity declares its primary key on more than one member."""

    def __init__(self, entity: str, members: Iterable[str]):
        self.entity = entity
        self.members = tuple(members)
        super().__init__(
            f"{entity} declares more than one primary key: {', '.join(self.members)}"
        )


class InvalidArgumentError(SqlGenError, ValueError):
    """Raised when a required input is missing or leaves no column to emit."""

    def __init__(self, argument: str, message: Optional[str] = None):
        self.argument = argument
        super().__init__(message or f"Argument '{argument}' is required")


class ConfigurationError(SqlGenError):
    """Raised for invalid settings or an unregistered bulk adapter."""

    pass
