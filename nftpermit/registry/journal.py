"""
nftpermit.registry.journal — checkpointed undo log for registry state.

The registry keeps its state in a handful of plain dicts. Before a write inside
a checkpoint, the journal remembers the key's previous value (once per layer);
`revert()` restores those values in reverse order and truncates the event log,
`commit()` folds the layer into its parent (or drops it at the outermost level).

    j = Journal(event_log)
    j.begin()
    j.set(records, 7, new_record)
    j.set(balances, alice, 3)
    j.revert()                      # records/balances/events exactly as before begin()

Writes made with no open checkpoint are applied directly and are not undoable.
Nested checkpoints are supported; a nested `revert()` only discards its own layer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Hashable, List, MutableMapping, Set, Tuple

from .events import EventLog

_MISSING = object()


@dataclass
class _Layer:
    # (mapping, key, previous value or _MISSING), in first-touch order
    undo: List[Tuple[MutableMapping[Any, Any], Hashable, Any]] = field(default_factory=list)
    seen: Set[Tuple[int, Hashable]] = field(default_factory=set)
    events_mark: int = 0

    def remember(self, mapping: MutableMapping[Any, Any], key: Hashable) -> None:
        tag = (id(mapping), key)
        if tag in self.seen:
            return
        self.seen.add(tag)
        self.undo.append((mapping, key, mapping.get(key, _MISSING)))


class Journal:
    def __init__(self, events: EventLog) -> None:
        self._events = events
        self._layers: List[_Layer] = []

    # ------------------------------------------------------------------ #
    # Checkpointing
    # ------------------------------------------------------------------ #

    def depth(self) -> int:
        """Number of open checkpoints (0 when idle)."""
        return len(self._layers)

    def begin(self) -> int:
        self._layers.append(_Layer(events_mark=len(self._events)))
        return len(self._layers)

    def commit(self) -> None:
        if not self._layers:
            raise RuntimeError("journal commit without begin")
        top = self._layers.pop()
        if not self._layers:
            return
        parent = self._layers[-1]
        # The parent must still be able to restore values as of *its* begin().
        for mapping, key, prev in top.undo:
            tag = (id(mapping), key)
            if tag not in parent.seen:
                parent.seen.add(tag)
                parent.undo.append((mapping, key, prev))

    def revert(self) -> None:
        if not self._layers:
            raise RuntimeError("journal revert without begin")
        top = self._layers.pop()
        for mapping, key, prev in reversed(top.undo):
            if prev is _MISSING:
                mapping.pop(key, None)
            else:
                mapping[key] = prev
        self._events.truncate(top.events_mark)

    # ------------------------------------------------------------------ #
    # Writes
    # ------------------------------------------------------------------ #

    def set(self, mapping: MutableMapping[Any, Any], key: Hashable, value: Any) -> None:
        if self._layers:
            self._layers[-1].remember(mapping, key)
        mapping[key] = value

    def delete(self, mapping: MutableMapping[Any, Any], key: Hashable) -> None:
        if key not in mapping:
            return
        if self._layers:
            self._layers[-1].remember(mapping, key)
        del mapping[key]


__all__ = ["Journal"]
