"""
Table and column mapping derived from entity metadata.
"""

from .catalog import MappingCatalog, get_catalog
from .models import ColumnMapping, TableMapping

__all__ = [
    "MappingCatalog",
    "get_catalog",
    "ColumnMapping",
    "TableMapping",
]
