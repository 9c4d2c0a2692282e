"""
nftpermit.token — an ERC-721 style token with permit support.

`PermitToken` is the contract-shaped surface over a registry and a fixed
EIP-712 domain. Every mutating method receives the ambient `caller` identity
explicitly (the execution environment supplies it; the token never guesses).

Public API
----------
Views:
- owner_of(asset_id), get_approved(asset_id), is_approved_for_all(owner, operator)
- balance_of(owner), nonces(asset_id), domain_separator(), typed_data(...)

Mutations:
- mint(caller)                                      -> asset_id  (fee collection is external)
- approve(caller, to, asset_id)
- set_approval_for_all(caller, operator, approved)
- transfer_from(caller, from_, to, asset_id), safe_transfer_from(...)
- permit(caller, spender, asset_id, deadline, signature)
- safe_transfer_from_with_permit(caller, from_, to, asset_id, deadline, signature)

`permit` and `safe_transfer_from_with_permit` take no nonce argument: the message
is rebuilt with the asset's *current* nonce, so a permit signed before a transfer
recovers to a different identity and is refused as InvalidSignature.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, Optional

from .config import PermitConfig
from .crypto.recover import SignatureLike
from .encoding.typed_data import domain_separator, permit_typed_data
from .errors import InvalidRecipient, NotApprovedOrOwner
from .permit.engine import apply_permit, transfer_with_permit
from .permit.policy import is_authorized
from .registry.registry import OwnershipRegistry
from .types.domain import DomainContext
from .types.identity import Identity, to_identity
from .types.permit import AssetId, PermitMessage

log = logging.getLogger(__name__)

Clock = Callable[[], int]


def _wall_clock() -> int:
    return int(time.time())


class PermitToken:
    def __init__(
        self,
        name: str,
        symbol: str,
        *,
        chain_id: int,
        verifying_contract: Any,
        version: str = "1",
        clock: Optional[Clock] = None,
        registry: Optional[OwnershipRegistry] = None,
    ) -> None:
        self.name = name
        self.symbol = symbol
        self.domain = DomainContext(
            name=name,
            version=version,
            chain_id=chain_id,
            verifying_contract=verifying_contract,
        )
        self.registry = registry if registry is not None else OwnershipRegistry()
        self._clock = clock if clock is not None else _wall_clock

    @classmethod
    def from_config(
        cls,
        cfg: PermitConfig,
        *,
        clock: Optional[Clock] = None,
        registry: Optional[OwnershipRegistry] = None,
    ) -> "PermitToken":
        d = cfg.domain_settings
        return cls(
            d.name,
            d.symbol,
            chain_id=d.chain_id,
            verifying_contract=d.verifying_contract,
            version=d.version,
            clock=clock,
            registry=registry,
        )

    def now(self) -> int:
        return int(self._clock())

    # ------------------------------------------------------------------ #
    # Views
    # ------------------------------------------------------------------ #

    def owner_of(self, asset_id: AssetId) -> Identity:
        return self.registry.owner_of(asset_id)

    def get_approved(self, asset_id: AssetId) -> Optional[Identity]:
        return self.registry.approved_of(asset_id)

    def is_approved_for_all(self, owner: Any, operator: Any) -> bool:
        return self.registry.is_operator(owner, operator)

    def balance_of(self, owner: Any) -> int:
        return self.registry.balance_of(owner)

    def nonces(self, asset_id: AssetId) -> int:
        return self.registry.nonce_of(asset_id)

    def domain_separator(self) -> bytes:
        return domain_separator(self.domain)

    def typed_data(
        self,
        spender: Any,
        asset_id: AssetId,
        deadline: int,
        *,
        nonce: Optional[int] = None,
    ) -> Dict[str, Any]:
        """EIP-712 document a holder signs to permit `spender` (current nonce by default)."""
        if nonce is None:
            nonce = self.registry.nonce_of(asset_id)
        msg = PermitMessage(spender=spender, asset_id=asset_id, nonce=nonce, deadline=deadline)
        return permit_typed_data(self.domain, msg)

    # ------------------------------------------------------------------ #
    # ERC-721 mutations
    # ------------------------------------------------------------------ #

    def mint(self, caller: Any) -> AssetId:
        asset_id = self.registry.issue(caller)
        log.debug("minted", extra={"asset_id": asset_id, "to": to_identity(caller)})
        return asset_id

    def approve(self, caller: Any, to: Any, asset_id: AssetId) -> None:
        sender = to_identity(caller)
        spender = to_identity(to)
        with self.registry.transaction():
            owner = self.registry.owner_of(asset_id)
            if spender == owner:
                raise InvalidRecipient("approval to current owner", recipient=spender)
            if sender != owner and not self.registry.is_operator(owner, sender):
                raise NotApprovedOrOwner(
                    asset_id, message="approve caller is not owner nor approved for all"
                )
            self.registry.set_approved(asset_id, spender)

    def set_approval_for_all(self, caller: Any, operator: Any, approved: bool) -> None:
        owner = to_identity(caller)
        op = to_identity(operator)
        if owner == op:
            raise InvalidRecipient("approve to caller", recipient=op)
        self.registry.set_operator_approval(owner, op, approved)

    def transfer_from(self, caller: Any, from_: Any, to: Any, asset_id: AssetId) -> None:
        with self.registry.transaction():
            if not is_authorized(caller, asset_id, self.registry):
                raise NotApprovedOrOwner(asset_id)
            self.registry.transfer(asset_id, from_, to)

    def safe_transfer_from(self, caller: Any, from_: Any, to: Any, asset_id: AssetId) -> None:
        # No receiver contracts exist here, so this is transfer_from.
        self.transfer_from(caller, from_, to, asset_id)

    # ------------------------------------------------------------------ #
    # Permit
    # ------------------------------------------------------------------ #

    def permit(
        self,
        caller: Any,
        spender: Any,
        asset_id: AssetId,
        deadline: int,
        signature: SignatureLike,
    ) -> None:
        """Anyone (`caller` is a relayer) may submit; approval goes to `spender`."""
        relayer = to_identity(caller)
        with self.registry.transaction():
            msg = PermitMessage(
                spender=spender,
                asset_id=asset_id,
                nonce=self.registry.nonce_of(asset_id),
                deadline=deadline,
            )
            apply_permit(self.domain, self.registry, msg, signature, now=self.now())
        log.debug("permit submitted", extra={"asset_id": asset_id, "relayer": relayer})

    def safe_transfer_from_with_permit(
        self,
        caller: Any,
        from_: Any,
        to: Any,
        asset_id: AssetId,
        deadline: int,
        signature: SignatureLike,
    ) -> None:
        """Approve `to` through the permit and move the asset to `to` in one step."""
        with self.registry.transaction():
            msg = PermitMessage(
                spender=to,
                asset_id=asset_id,
                nonce=self.registry.nonce_of(asset_id),
                deadline=deadline,
            )
            transfer_with_permit(
                self.domain,
                self.registry,
                caller,
                from_,
                to,
                msg,
                signature,
                now=self.now(),
            )


__all__ = ["Clock", "PermitToken"]
