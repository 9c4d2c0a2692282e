"""
nftpermit.registry.registry — the ownership ledger.

State
-----
- records:    asset_id → OwnershipRecord(owner, approved, nonce)
- operators:  (owner, operator) → True  (absent means not an operator)
- balances:   owner → number of assets held
- next id:    issuance counter

Every public mutating method runs inside `transaction()`, which takes the
registry's re-entrant lock and opens a journal checkpoint. Checks happen before
writes, and if anything raises inside the scope every write (and every event)
made there is undone before the exception leaves the registry. Callers that
compose several steps into one indivisible operation (the permit engine) open
an outer `transaction()` themselves; inner ones nest.

Invariants
----------
- nonce increases by exactly 1 on every successful transfer, never otherwise.
- approved is cleared on every ownership change.
- operator flags are keyed by owner and survive transfers of that owner's assets.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional, Tuple

from ..errors import AssetExists, InvalidRecipient, NotOwner, UnknownAsset
from ..types.identity import ZERO_IDENTITY, Identity, to_identity
from ..types.permit import UINT256_MAX, AssetId
from .events import APPROVAL, APPROVAL_FOR_ALL, TRANSFER, EventLog
from .journal import Journal
from .records import OwnershipRecord

log = logging.getLogger(__name__)

_NEXT_ID = "next_id"


class OwnershipRegistry:
    """
    In-memory, serializable asset ownership registry.

    Parameters
    ----------
    events : EventLog, optional
        Sink for Transfer/Approval/ApprovalForAll events (a fresh log by default).
    """

    def __init__(self, *, events: Optional[EventLog] = None) -> None:
        self._lock = threading.RLock()
        self._records: Dict[AssetId, OwnershipRecord] = {}
        self._operators: Dict[Tuple[Identity, Identity], bool] = {}
        self._balances: Dict[Identity, int] = {}
        self._counters: Dict[str, int] = {_NEXT_ID: 0}
        self.events = events if events is not None else EventLog()
        self._journal = Journal(self.events)

    # ------------------------------------------------------------------ #
    # Transactions
    # ------------------------------------------------------------------ #

    @contextmanager
    def transaction(self) -> Iterator["OwnershipRegistry"]:
        """
        Serialize and journal a group of operations.

        All-or-nothing: on any exception, state and events revert to what they
        were when the scope was entered, and the exception propagates.
        """
        with self._lock:
            self._journal.begin()
            try:
                yield self
            except BaseException:
                self._journal.revert()
                raise
            else:
                self._journal.commit()

    # ------------------------------------------------------------------ #
    # Views
    # ------------------------------------------------------------------ #

    def exists(self, asset_id: AssetId) -> bool:
        with self._lock:
            return asset_id in self._records

    def record_of(self, asset_id: AssetId) -> OwnershipRecord:
        with self._lock:
            rec = self._records.get(asset_id)
            if rec is None:
                raise UnknownAsset(asset_id)
            return rec

    def owner_of(self, asset_id: AssetId) -> Identity:
        return self.record_of(asset_id).owner

    def approved_of(self, asset_id: AssetId) -> Optional[Identity]:
        return self.record_of(asset_id).approved

    def nonce_of(self, asset_id: AssetId) -> int:
        return self.record_of(asset_id).nonce

    def is_operator(self, owner: Any, operator: Any) -> bool:
        key = (to_identity(owner), to_identity(operator))
        with self._lock:
            return self._operators.get(key, False)

    def balance_of(self, owner: Any) -> int:
        ident = to_identity(owner)
        if ident == ZERO_IDENTITY:
            raise InvalidRecipient("balance query for the zero identity", recipient=ident)
        with self._lock:
            return self._balances.get(ident, 0)

    def total_issued(self) -> int:
        with self._lock:
            return len(self._records)

    # ------------------------------------------------------------------ #
    # Issuance
    # ------------------------------------------------------------------ #

    def issue(self, to: Any, asset_id: Optional[AssetId] = None) -> AssetId:
        """
        Create the initial record (owner=to, approved=None, nonce=0).

        Without `asset_id` the next free id of the sequential counter is used.
        """
        owner = to_identity(to)
        if owner == ZERO_IDENTITY:
            raise InvalidRecipient("issue to the zero identity", recipient=owner)
        with self.transaction():
            if asset_id is None:
                asset_id = self._counters[_NEXT_ID]
                while asset_id in self._records:
                    asset_id += 1
            elif isinstance(asset_id, bool) or not isinstance(asset_id, int):
                raise TypeError("asset_id must be int")
            if asset_id < 0 or asset_id > UINT256_MAX:
                raise ValueError("asset_id out of uint256 range")
            if asset_id in self._records:
                raise AssetExists(asset_id)

            self._journal.set(self._records, asset_id, OwnershipRecord(owner=owner))
            self._journal.set(self._balances, owner, self._balances.get(owner, 0) + 1)
            if asset_id >= self._counters[_NEXT_ID]:
                self._journal.set(self._counters, _NEXT_ID, asset_id + 1)
            self.events.emit(TRANSFER, **{"from": ZERO_IDENTITY, "to": owner, "tokenId": asset_id})
        log.debug("asset issued", extra={"asset_id": asset_id, "owner": owner})
        return asset_id

    # ------------------------------------------------------------------ #
    # Mutations
    # ------------------------------------------------------------------ #

    def transfer(self, asset_id: AssetId, from_: Any, to: Any) -> None:
        """
        Move `asset_id` from `from_` to `to`.

        Raises UnknownAsset, NotOwner (from_ is not the current owner) or
        InvalidRecipient (to is the zero identity). On success the approval slot
        is cleared and the nonce advances by one.
        """
        sender = to_identity(from_)
        recipient = to_identity(to)
        with self.transaction():
            rec = self.record_of(asset_id)
            if rec.owner != sender:
                raise NotOwner(asset_id)
            if recipient == ZERO_IDENTITY:
                raise InvalidRecipient("transfer to the zero identity", recipient=recipient)

            self._journal.set(self._records, asset_id, rec.transferred_to(recipient))
            self._journal.set(self._balances, sender, self._balances.get(sender, 0) - 1)
            self._journal.set(self._balances, recipient, self._balances.get(recipient, 0) + 1)
            self.events.emit(TRANSFER, **{"from": sender, "to": recipient, "tokenId": asset_id})
        log.debug(
            "asset transferred",
            extra={"asset_id": asset_id, "from": sender, "to": recipient},
        )

    def set_approved(self, asset_id: AssetId, spender: Optional[Any]) -> None:
        """Set (or clear, with None / zero identity) the single approved spender."""
        approved: Optional[Identity] = None
        if spender is not None:
            approved = to_identity(spender)
            if approved == ZERO_IDENTITY:
                approved = None
        with self.transaction():
            rec = self.record_of(asset_id)
            self._journal.set(self._records, asset_id, rec.with_approved(approved))
            self.events.emit(
                APPROVAL,
                owner=rec.owner,
                approved=approved or ZERO_IDENTITY,
                tokenId=asset_id,
            )

    def set_operator_approval(self, owner: Any, operator: Any, approved: bool) -> None:
        """Grant or revoke blanket authority of `operator` over all of `owner`'s assets."""
        key = (to_identity(owner), to_identity(operator))
        with self.transaction():
            if approved:
                self._journal.set(self._operators, key, True)
            else:
                self._journal.delete(self._operators, key)
            self.events.emit(
                APPROVAL_FOR_ALL, owner=key[0], operator=key[1], approved=bool(approved)
            )

    # ------------------------------------------------------------------ #
    # Introspection
    # ------------------------------------------------------------------ #

    def snapshot(self) -> Dict[str, Any]:
        """A JSON-friendly copy of the full state (used for equality checks)."""
        with self._lock:
            return {
                "records": {k: v.to_dict() for k, v in sorted(self._records.items())},
                "operators": sorted(f"{o}:{p}" for (o, p) in self._operators),
                "balances": dict(sorted(self._balances.items())),
                "next_id": self._counters[_NEXT_ID],
                "events": len(self.events),
            }


__all__ = ["OwnershipRegistry"]
