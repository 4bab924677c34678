"""
Predicate builder and predicate-to-SQL translation.
"""

from .predicates import (
    FALSE,
    TRUE,
    Comparison,
    Connective,
    Literal,
    Logical,
    Member,
    Membership,
    Operator,
    Predicate,
    col,
)
from .translator import ExpressionTranslator, PredicateFragment, chunk_values

__all__ = [
    "FALSE",
    "TRUE",
    "Comparison",
    "Connective",
    "Literal",
    "Logical",
    "Member",
    "Membership",
    "Operator",
    "Predicate",
    "col",
    "ExpressionTranslator",
    "PredicateFragment",
    "chunk_values",
]
