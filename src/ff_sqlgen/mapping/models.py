"""
Immutable table/column mapping value types.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional, Tuple

from ..dialects import Dialect
from ..exceptions import UnmappedMemberError
from ..pydantic_support.type_mapping import ColumnType


@dataclass(frozen=True)
class ColumnMapping:
    """
    Correspondence between one entity member and one column.

    column_type is descriptive metadata for callers; no statement generator
    reads it.
    """

    member_name: str
    column_name: str
    declared_type: Any
    column_type: ColumnType = ColumnType.OBJECT
    is_primary_key: bool = False
    is_auto_increment: bool = False
    is_nullable: bool = False
    allow_null: bool = False
    is_created_at: bool = False
    is_modified_at: bool = False
    default_value: Optional[str] = None
    unique_index: Optional[int] = None

    @property
    def is_unique(self) -> bool:
        return self.unique_index is not None


@dataclass(frozen=True)
class TableMapping:
    """
    Mapping of an entity type to a table for one dialect.

    Columns keep the declaration order of the entity's members; every generated
    column list relies on it.
    """

    entity_type: type
    dialect: Dialect
    schema: Optional[str]
    name: str
    full_name: str
    columns: Tuple[ColumnMapping, ...]
    columns_by_member: Mapping[str, ColumnMapping] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        by_member = MappingProxyType({column.member_name: column for column in self.columns})
        object.__setattr__(self, "columns_by_member", by_member)

    def column(self, member_name: str) -> ColumnMapping:
        """
        Get the column mapped to a member.

        Raises:
            UnmappedMemberError: If the member is not part of the mapping
        """
        try:
            return self.columns_by_member[member_name]
        except KeyError:
            raise UnmappedMemberError(member_name, self.entity_type.__name__) from None

    @property
    def primary_key(self) -> Optional[ColumnMapping]:
        return next((column for column in self.columns if column.is_primary_key), None)

    @property
    def modified_at(self) -> Optional[ColumnMapping]:
        return next((column for column in self.columns if column.is_modified_at), None)
