"""
Typed argument values for parsed tool calls.

Model output carries arguments as loose JSON. Instead of passing raw
``Dict[str, Any]`` into the sandbox, every value is wrapped in an ArgValue
tagged with its JSON kind so operations can validate and coerce without
isinstance checks scattered through each tool.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, Mapping, Optional, Tuple


class ArgKind(str, Enum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    NULL = "null"
    OBJECT = "object"
    ARRAY = "array"


_TRUE_WORDS = {"true", "1", "yes", "on"}
_FALSE_WORDS = {"false", "0", "no", "off", ""}


@dataclass(frozen=True)
class ArgValue:
    """A single JSON value tagged with its kind."""

    kind: ArgKind
    value: Any = None

    @classmethod
    def from_json(cls, value: Any) -> "ArgValue":
        # bool is a subclass of int, check it first
        if value is None:
            return cls(ArgKind.NULL, None)
        if isinstance(value, bool):
            return cls(ArgKind.BOOLEAN, value)
        if isinstance(value, (int, float)):
            return cls(ArgKind.NUMBER, value)
        if isinstance(value, str):
            return cls(ArgKind.STRING, value)
        if isinstance(value, Mapping):
            return cls(ArgKind.OBJECT, {str(k): cls.from_json(v) for k, v in value.items()})
        if isinstance(value, (list, tuple)):
            return cls(ArgKind.ARRAY, tuple(cls.from_json(v) for v in value))
        return cls(ArgKind.STRING, str(value))

    def to_json(self) -> Any:
        if self.kind is ArgKind.OBJECT:
            return {k: v.to_json() for k, v in self.value.items()}
        if self.kind is ArgKind.ARRAY:
            return [v.to_json() for v in self.value]
        return self.value

    def as_str(self) -> Optional[str]:
        """
        Coerce to text. Scalars are stringified; null, objects and arrays
        have no textual form and return None.
        """
        if self.kind is ArgKind.STRING:
            return self.value
        if self.kind is ArgKind.BOOLEAN:
            return "true" if self.value else "false"
        if self.kind is ArgKind.NUMBER:
            return str(self.value)
        return None

    def as_bool(self) -> Optional[bool]:
        if self.kind is ArgKind.BOOLEAN:
            return self.value
        if self.kind is ArgKind.NUMBER:
            return self.value != 0
        if self.kind is ArgKind.STRING:
            word = self.value.strip().lower()
            if word in _TRUE_WORDS:
                return True
            if word in _FALSE_WORDS:
                return False
        return None

    def as_number(self) -> Optional[float]:
        if self.kind is ArgKind.NUMBER:
            return self.value
        if self.kind is ArgKind.STRING:
            try:
                return float(self.value.strip())
            except ValueError:
                return None
        return None


class Arguments(Mapping[str, ArgValue]):
    """
    Immutable, ordered mapping of argument name to ArgValue.

    Lookups go through ``first`` so each operation can list every historical
    alias of a field in priority order. Keys an operation does not recognise
    stay reachable through ``extras``.
    """

    __slots__ = ("_items",)

    def __init__(self, items: Iterable[Tuple[str, ArgValue]] = ()):
        self._items: Dict[str, ArgValue] = dict(items)

    @classmethod
    def from_json(cls, raw: Optional[Mapping[str, Any]]) -> "Arguments":
        return cls((str(k), ArgValue.from_json(v)) for k, v in (raw or {}).items())

    def __getitem__(self, key: str) -> ArgValue:
        return self._items[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Arguments):
            return self._items == other._items
        if isinstance(other, Mapping):
            return self.to_dict() == dict(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Arguments({self.to_dict()!r})"

    def first(self, *names: str) -> Optional[ArgValue]:
        """Return the value of the first alias present and not null."""
        for name in names:
            value = self._items.get(name)
            if value is not None and value.kind is not ArgKind.NULL:
                return value
        return None

    def text(self, *names: str) -> Optional[str]:
        value = self.first(*names)
        return value.as_str() if value is not None else None

    def flag(self, *names: str, default: bool = False) -> bool:
        value = self.first(*names)
        if value is None:
            return default
        coerced = value.as_bool()
        return default if coerced is None else coerced

    def extras(self, known: Iterable[str]) -> Dict[str, ArgValue]:
        known_set = set(known)
        return {k: v for k, v in self._items.items() if k not in known_set}

    def to_dict(self) -> Dict[str, Any]:
        return {k: v.to_json() for k, v in self._items.items()}


__all__ = ["ArgKind", "ArgValue", "Arguments"]
