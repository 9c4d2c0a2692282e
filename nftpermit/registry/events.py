"""
nftpermit.registry.events — ordered log of registry events.

Mirrors the ERC-721 event surface:

    Transfer(from, to, tokenId)
    Approval(owner, approved, tokenId)
    ApprovalForAll(owner, operator, approved)

The log is append-only from the registry's point of view; the journal truncates
it back to a checkpoint mark when a transaction is reverted, so a failed
operation never leaves an event behind. `logs_root()` gives a deterministic
digest of the log for comparisons in tests and tooling.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List

from ..utils.hash import keccak_256

TRANSFER = "Transfer"
APPROVAL = "Approval"
APPROVAL_FOR_ALL = "ApprovalForAll"


@dataclass(frozen=True)
class RegistryEvent:
    name: str
    args: Dict[str, Any] = field(default_factory=dict)

    def canonical_bytes(self) -> bytes:
        return json.dumps(
            {"name": self.name, "args": self.args},
            sort_keys=True,
            separators=(",", ":"),
        ).encode("utf-8")


class EventLog:
    """
    Collects RegistryEvent entries.

        log = EventLog()
        log.emit("Transfer", **{"from": a, "to": b, "tokenId": 0})
        [e.name for e in log.events]  # ["Transfer"]
    """

    __slots__ = ["_events"]

    def __init__(self) -> None:
        self._events: List[RegistryEvent] = []

    def emit(self, name: str, **args: Any) -> int:
        """Append an event. Returns its index."""
        self._events.append(RegistryEvent(name=name, args=dict(args)))
        return len(self._events) - 1

    def truncate(self, length: int) -> None:
        if length < 0:
            raise ValueError("length must be non-negative")
        del self._events[length:]

    @property
    def events(self) -> List[RegistryEvent]:
        return list(self._events)

    def named(self, name: str) -> List[RegistryEvent]:
        return [e for e in self._events if e.name == name]

    def __len__(self) -> int:  # pragma: no cover - trivial
        return len(self._events)

    def logs_root(self) -> bytes:
        """keccak256 chain over canonical event encodings; empty log → keccak256(b"")."""
        return _chain_digest(e.canonical_bytes() for e in self._events)


def _chain_digest(items: Iterable[bytes]) -> bytes:
    acc = keccak_256(b"")
    for item in items:
        acc = keccak_256(acc + keccak_256(item))
    return acc


__all__ = ["EventLog", "RegistryEvent", "TRANSFER", "APPROVAL", "APPROVAL_FOR_ALL"]
