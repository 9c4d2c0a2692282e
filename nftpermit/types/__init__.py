"""
nftpermit.types — value types shared by every layer.

  - Identity helpers (EIP-55 checksummed 20-byte addresses)
  - DomainContext (EIP-712 domain; fixed per registry deployment)
  - PermitMessage (the signed off-chain approval)
"""

from .domain import DomainContext
from .identity import ZERO_IDENTITY, Identity, is_identity, same_identity, to_identity
from .permit import UINT256_MAX, AssetId, PermitMessage

__all__ = [
    "AssetId",
    "DomainContext",
    "Identity",
    "PermitMessage",
    "UINT256_MAX",
    "ZERO_IDENTITY",
    "is_identity",
    "same_identity",
    "to_identity",
]
