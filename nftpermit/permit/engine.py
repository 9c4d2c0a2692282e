"""
nftpermit.permit.engine — verify signed permits and apply them to a registry.

Verification order (each step short-circuits; the order decides which error a
caller sees):

  1. digest  = EIP-712 digest of (domain, message)
  2. signer  = ECDSA recover(digest, signature)         any failure → InvalidSignature
  3. message.nonce == registry.nonce_of(asset_id)        mismatch    → InvalidSignature
  4. is_authorized(signer, asset_id, registry)           refused     → InvalidSignature
  5. now <= message.deadline                              expired     → DeadlineExpired

Steps 2–4 share one error: "right signer, stale nonce" and "wrong signer" are
indistinguishable to the submitter. Nothing about the failing step is put into
the exception, and the cause chain is suppressed.

`now` is the externally supplied block/ledger time; the engine never reads a
clock itself.
"""

from __future__ import annotations

import logging
from typing import Any

from ..crypto.recover import SignatureLike, recover
from ..encoding.typed_data import permit_digest
from ..errors import DeadlineExpired, InvalidSignature, SignatureError
from ..registry.registry import OwnershipRegistry
from ..types.domain import DomainContext
from ..types.identity import Identity, to_identity
from ..types.permit import PermitMessage
from .policy import is_authorized

log = logging.getLogger(__name__)


def _check_now(now: int) -> int:
    if isinstance(now, bool) or not isinstance(now, int) or now < 0:
        raise ValueError("now must be a non-negative int timestamp")
    return now


def verify_permit(
    domain: DomainContext,
    registry: OwnershipRegistry,
    message: PermitMessage,
    signature: SignatureLike,
    *,
    now: int,
) -> Identity:
    """
    Run checks 1–5 without mutating anything. Returns the recovered signer.

    Raises InvalidSignature, DeadlineExpired, or UnknownAsset (asset never issued).
    """
    now = _check_now(now)
    digest = permit_digest(domain, message)
    try:
        signer = recover(digest, signature)
    except SignatureError:
        raise InvalidSignature() from None

    if message.nonce != registry.nonce_of(message.asset_id):
        raise InvalidSignature()
    if not is_authorized(signer, message.asset_id, registry):
        raise InvalidSignature()
    if now > message.deadline:
        raise DeadlineExpired()
    return signer


def apply_permit(
    domain: DomainContext,
    registry: OwnershipRegistry,
    message: PermitMessage,
    signature: SignatureLike,
    *,
    now: int,
) -> None:
    """
    Verify `message`/`signature` and set `message.spender` as the asset's approved
    spender. The nonce is not consumed here; only a transfer advances it.
    """
    with registry.transaction():
        try:
            signer = verify_permit(domain, registry, message, signature, now=now)
        except (InvalidSignature, DeadlineExpired) as e:
            log.debug("permit rejected", extra={"asset_id": message.asset_id, "code": e.code})
            raise
        registry.set_approved(message.asset_id, message.spender)
    log.debug(
        "permit applied",
        extra={"asset_id": message.asset_id, "signer": signer, "spender": message.spender},
    )


def transfer_with_permit(
    domain: DomainContext,
    registry: OwnershipRegistry,
    caller: Any,
    from_: Any,
    to: Any,
    message: PermitMessage,
    signature: SignatureLike,
    *,
    now: int,
) -> None:
    """
    Redeem a permit and pull the asset to its spender in one indivisible step.

    Only the permit's spender may redeem it this way: `to` must equal
    `message.spender` and the ambient `caller` must equal `to`, otherwise
    InvalidSignature. After the permit checks pass the approval is recorded and
    `registry.transfer(asset_id, from_, to)` executes (clearing the approval and
    advancing the nonce). Any failure, including NotOwner from the transfer,
    leaves the registry exactly as it was.
    """
    recipient = to_identity(to)
    if message.spender != recipient or to_identity(caller) != recipient:
        log.debug("permit transfer rejected: caller is not the spender", extra={"asset_id": message.asset_id})
        raise InvalidSignature()

    with registry.transaction():
        try:
            signer = verify_permit(domain, registry, message, signature, now=now)
        except (InvalidSignature, DeadlineExpired) as e:
            log.debug("permit rejected", extra={"asset_id": message.asset_id, "code": e.code})
            raise
        registry.set_approved(message.asset_id, message.spender)
        registry.transfer(message.asset_id, from_, recipient)
    log.debug(
        "permit transfer applied",
        extra={"asset_id": message.asset_id, "signer": signer, "to": recipient},
    )


__all__ = ["verify_permit", "apply_permit", "transfer_with_permit"]
