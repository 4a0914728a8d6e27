from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from pydantic import BaseModel, ConfigDict, Field

from .constants import INT32_MAX, INT32_MIN, MANIFEST_ID
from .kinds import StateKind

StateValue = Union[bool, int, float, str]


class StateEntry(BaseModel):
    """One manifest record: numeric id, stable name and declared kind."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(..., ge=INT32_MIN, le=INT32_MAX, description="Numeric id, may differ per aircraft")
    name: str = Field(..., description="State name, stable across aircraft")
    kind: StateKind = Field(..., description="Declared wire type")

    def __str__(self) -> str:
        return f"{self.id} {self.name} [{self.kind.description}]"


@dataclass(frozen=True)
class Frame:
    """A complete length-delimited unit read off the stream."""

    id: int
    payload: bytes

    @property
    def is_manifest(self) -> bool:
        return self.id == MANIFEST_ID


__all__ = ["StateValue", "StateEntry", "Frame"]
