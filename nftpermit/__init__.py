"""
nftpermit — off-chain signed approvals ("permits") for a uniquely-owned-asset registry.

This package exposes only lightweight metadata at import time. The engine, registry
and token facade live in their subpackages and should be imported explicitly:

    from nftpermit.registry import OwnershipRegistry
    from nftpermit.permit import apply_permit, transfer_with_permit
    from nftpermit.token import PermitToken
"""

from .version import __version__

__all__ = ["__version__"]
