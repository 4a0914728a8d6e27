from __future__ import annotations

from enum import IntEnum
from typing import Dict, Optional, Union


class StateKind(IntEnum):
    """
    Declared wire type of a state, as sent in the manifest's type column.
    Tags outside the known set map to UNKNOWN instead of failing.
    """

    COMMAND = -1
    BOOL = 0
    INT = 1
    FLOAT = 2
    DOUBLE = 3
    STRING = 4
    LONG = 5
    UNKNOWN = 404

    @classmethod
    def from_tag(cls, tag: int) -> "StateKind":
        try:
            return cls(tag)
        except ValueError:
            return cls.UNKNOWN

    @property
    def description(self) -> str:
        return KIND_DESCRIPTIONS[self]

    @property
    def payload_size(self) -> Optional[int]:
        """Fixed payload size in bytes, or None for variable/non-data kinds."""
        return KIND_SIZES.get(self)

    @property
    def is_data(self) -> bool:
        return self in DATA_KINDS


KIND_DESCRIPTIONS: Dict[StateKind, str] = {
    StateKind.COMMAND: "Command",
    StateKind.BOOL: "Bool",
    StateKind.INT: "Integer (Int32)",
    StateKind.FLOAT: "Float",
    StateKind.DOUBLE: "Double",
    StateKind.STRING: "String",
    StateKind.LONG: "Long (Int64)",
    StateKind.UNKNOWN: "Unknown type",
}

KIND_SIZES: Dict[StateKind, int] = {
    StateKind.BOOL: 1,
    StateKind.INT: 4,
    StateKind.FLOAT: 4,
    StateKind.DOUBLE: 8,
    StateKind.LONG: 8,
}

DATA_KINDS = frozenset(
    {StateKind.BOOL, StateKind.INT, StateKind.FLOAT, StateKind.DOUBLE, StateKind.STRING, StateKind.LONG}
)


def normalize_kind(kind: Union[int, StateKind]) -> StateKind:
    """Convert a raw tag or enum member into a StateKind."""
    return kind if isinstance(kind, StateKind) else StateKind.from_tag(int(kind))


__all__ = [
    "StateKind",
    "KIND_DESCRIPTIONS",
    "KIND_SIZES",
    "DATA_KINDS",
    "normalize_kind",
]
