"""
nftpermit.permit — authorization policy and the permit engine.

  - is_authorized(signer, asset_id, registry)
  - verify_permit(domain, registry, message, signature, *, now) -> signer
  - apply_permit(domain, registry, message, signature, *, now)
  - transfer_with_permit(domain, registry, caller, from_, to, message, signature, *, now)
"""

from .engine import apply_permit, transfer_with_permit, verify_permit
from .policy import is_authorized

__all__ = ["apply_permit", "is_authorized", "transfer_with_permit", "verify_permit"]
