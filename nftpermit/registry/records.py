"""
Per-asset ownership records.

Records are immutable; the registry replaces a record wholesale on every change,
which keeps journaling (and rollback) a matter of remembering the previous object.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict, Optional

from ..types.identity import Identity


@dataclass(frozen=True)
class OwnershipRecord:
    """
    owner:    current owner identity
    approved: single-slot approved spender, cleared on every ownership change
    nonce:    permit replay counter; +1 per transfer, never decreases
    """

    owner: Identity
    approved: Optional[Identity] = None
    nonce: int = 0

    def transferred_to(self, new_owner: Identity) -> "OwnershipRecord":
        return OwnershipRecord(owner=new_owner, approved=None, nonce=self.nonce + 1)

    def with_approved(self, spender: Optional[Identity]) -> "OwnershipRecord":
        return replace(self, approved=spender)

    def to_dict(self) -> Dict[str, Any]:
        return {"owner": self.owner, "approved": self.approved, "nonce": self.nonce}


__all__ = ["OwnershipRecord"]
