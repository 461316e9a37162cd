"""
Variable sets threaded through plan execution.
"""

from __future__ import annotations

from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

MAIN_KEY = "input"


def _normalize_key(name: str) -> str:
    # Only the running-input slot is case-insensitive.
    if name.lower() == MAIN_KEY:
        return MAIN_KEY
    return name


class VariableSet:
    """
    Ordered name -> text mapping with a distinguished running-input slot.

    The running input lives under ``input`` and is always present (empty by
    default). It is the value a plan threads from one step into the next.
    """

    def __init__(self, value: Optional[str] = None, variables: Mapping[str, Any] | None = None) -> None:
        self._values: Dict[str, str] = {MAIN_KEY: ""}
        if variables:
            for name, item in variables.items():
                self.set(name, item)
        if value is not None:
            self.update(value)

    @classmethod
    def coerce(cls, source: Any) -> "VariableSet":
        if source is None:
            return cls()
        if isinstance(source, VariableSet):
            return source
        if isinstance(source, str):
            return cls(source)
        if isinstance(source, Mapping):
            return cls(variables=source)
        raise TypeError(f"Cannot build a VariableSet from {type(source).__name__}")

    @property
    def input(self) -> str:
        return self._values[MAIN_KEY]

    def update(self, value: Any) -> "VariableSet":
        self._values[MAIN_KEY] = "" if value is None else str(value)
        return self

    def set(self, name: str, value: Any) -> None:
        key = _normalize_key(name)
        if value is None:
            self.remove(key)
            return
        self._values[key] = str(value)

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self._values.get(_normalize_key(name), default)

    def has_value(self, name: str) -> bool:
        return bool(self._values.get(_normalize_key(name)))

    def remove(self, name: str) -> None:
        key = _normalize_key(name)
        if key == MAIN_KEY:
            self._values[MAIN_KEY] = ""
        else:
            self._values.pop(key, None)

    def clone(self) -> "VariableSet":
        copy = VariableSet()
        copy._values = dict(self._values)
        return copy

    def items(self) -> List[Tuple[str, str]]:
        return list(self._values.items())

    def names(self) -> List[str]:
        return list(self._values.keys())

    def to_dict(self) -> Dict[str, str]:
        return dict(self._values)

    def __getitem__(self, name: str) -> str:
        key = _normalize_key(name)
        if key not in self._values:
            raise KeyError(name)
        return self._values[key]

    def __setitem__(self, name: str, value: Any) -> None:
        self.set(name, value)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and _normalize_key(name) in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._values))

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, VariableSet):
            return self._values == other._values
        return NotImplemented

    def __str__(self) -> str:
        return self.input

    def __repr__(self) -> str:
        return f"VariableSet({self._values!r})"
