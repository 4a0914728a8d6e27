from __future__ import annotations

import logging
import re
from bisect import bisect_left
from typing import Dict, Iterable, Iterator, Optional, Sequence, Tuple

from .constants import INT32_MAX, INT32_MIN
from .kinds import StateKind
from .messages import StateEntry

logger = logging.getLogger(__name__)

_INT_FIELD = re.compile(r"[+-]?[0-9]+")


class Manifest:
    """
    Immutable snapshot of the remote's state schema.

    Entries are sorted by id so lookups by id can bisect. The name index is
    built in the same pass: when a name repeats, the entry with the later
    position wins, while every entry stays reachable by id.
    """

    __slots__ = ("_entries", "_ids", "_index_by_name")

    def __init__(self, entries: Iterable[StateEntry] = ()) -> None:
        ordered = sorted(entries, key=lambda entry: entry.id)
        self._entries: Tuple[StateEntry, ...] = tuple(ordered)
        self._ids: Tuple[int, ...] = tuple(entry.id for entry in ordered)
        self._index_by_name: Dict[str, int] = {}
        for index, entry in enumerate(self._entries):
            self._index_by_name[entry.name] = index

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[StateEntry]:
        return iter(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)

    def __repr__(self) -> str:
        return f"Manifest({len(self._entries)} states)"

    @property
    def entries(self) -> Tuple[StateEntry, ...]:
        return self._entries

    @property
    def ids(self) -> Tuple[int, ...]:
        return self._ids

    @property
    def names(self) -> Sequence[str]:
        return list(self._index_by_name)

    def find_by_id(self, state_id: int) -> Optional[StateEntry]:
        index = bisect_left(self._ids, state_id)
        if index < len(self._ids) and self._ids[index] == state_id:
            return self._entries[index]
        return None

    def find_by_name(self, name: str) -> Optional[StateEntry]:
        index = self._index_by_name.get(name)
        if index is None:
            return None
        return self._entries[index]


def _parse_int32(text: str) -> Optional[int]:
    if not _INT_FIELD.fullmatch(text):
        return None
    value = int(text)
    if not (INT32_MIN <= value <= INT32_MAX):
        return None
    return value


def parse_manifest(text: str) -> Manifest:
    """
    Parse manifest text made of ``id,type,name`` lines.

    Lines with fewer than three fields, or whose id/type are not int32
    integers, are skipped. Empty fields are ignored and anything after the
    type column forms the name.
    """
    entries = []
    skipped = 0
    for line in text.split("\n"):
        if not line:
            continue
        fields = [field for field in line.split(",") if field]
        if len(fields) < 3:
            skipped += 1
            continue
        state_id = _parse_int32(fields[0])
        tag = _parse_int32(fields[1])
        if state_id is None or tag is None:
            skipped += 1
            continue
        entries.append(StateEntry(id=state_id, name=",".join(fields[2:]), kind=StateKind.from_tag(tag)))

    manifest = Manifest(entries)
    logger.debug("Parsed manifest with %s states (%s lines skipped)", len(manifest), skipped)
    return manifest


class ManifestRegistry:
    """Holds the current manifest; rebuilds swap the whole snapshot at once."""

    def __init__(self) -> None:
        self._snapshot = Manifest()

    @property
    def snapshot(self) -> Manifest:
        return self._snapshot

    def rebuild(self, text: str) -> Manifest:
        manifest = parse_manifest(text)
        self._snapshot = manifest
        return manifest

    def find_by_id(self, state_id: int) -> Optional[StateEntry]:
        return self._snapshot.find_by_id(state_id)

    def find_by_name(self, name: str) -> Optional[StateEntry]:
        return self._snapshot.find_by_name(name)

    def clear(self) -> None:
        self._snapshot = Manifest()


__all__ = ["Manifest", "ManifestRegistry", "parse_manifest"]
