"""
Query value types handed to the external executor.
"""

from collections.abc import Iterator, MutableMapping
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional


class BindParameterSet(MutableMapping):
    """
    Ordered name -> value mapping of bind parameters.

    Insertion order matches the order placeholders appear in the SQL text.
    Names are unique: adding an existing name raises KeyError.
    """

    def __init__(self, parameters: Optional[Mapping[str, Any]] = None):
        self._values: Dict[str, Any] = {}
        if parameters:
            self.merge(parameters)

    def add(self, name: str, value: Any) -> None:
        """Add a parameter, refusing to overwrite an existing name."""
        if name in self._values:
            raise KeyError(f"Bind parameter '{name}' is already defined")
        self._values[name] = value

    def merge(self, other: Mapping[str, Any]) -> None:
        """Append every parameter of another mapping, in its order."""
        for name, value in other.items():
            self.add(name, value)

    def __getitem__(self, name: str) -> Any:
        return self._values[name]

    def __setitem__(self, name: str, value: Any) -> None:
        self.add(name, value)

    def __delitem__(self, name: str) -> None:
        del self._values[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, BindParameterSet):
            return list(self._values.items()) == list(other._values.items())
        if isinstance(other, Mapping):
            return self._values == dict(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"BindParameterSet({self._values!r})"

    def to_dict(self) -> Dict[str, Any]:
        """Plain dict copy, suitable for a DB-API execute call."""
        return dict(self._values)


@dataclass(frozen=True)
class Query:
    """SQL statement text plus its bind parameters (None when there are none)."""

    statement: str
    bind_parameters: Optional[BindParameterSet] = None

    def __str__(self) -> str:
        return self.statement

    @property
    def parameters(self) -> Dict[str, Any]:
        """Bind parameters as a dict, empty when the statement has none."""
        return self.bind_parameters.to_dict() if self.bind_parameters else {}
