"""
Who may authorize actions on an asset.

An identity is entitled to approve (and, through the token facade, to transfer)
an asset when it is, at check time:

  1. the asset's current owner, or
  2. the asset's current approved spender, or
  3. an operator of the current owner.

Clause 2 lets an already-approved spender sign a fresh permit that re-delegates
approval to someone else. The delegate holds the same signing authority as the
owner until the next transfer, which clears the approval slot; an owner who wants
to revoke it earlier clears the slot (or approves someone else) directly.
"""

from __future__ import annotations

from typing import Any

from ..registry.registry import OwnershipRegistry
from ..types.identity import to_identity
from ..types.permit import AssetId


def is_authorized(signer: Any, asset_id: AssetId, registry: OwnershipRegistry) -> bool:
    """Raises UnknownAsset when `asset_id` was never issued."""
    ident = to_identity(signer)
    rec = registry.record_of(asset_id)
    if ident == rec.owner:
        return True
    if rec.approved is not None and ident == rec.approved:
        return True
    return registry.is_operator(rec.owner, ident)


__all__ = ["is_authorized"]
