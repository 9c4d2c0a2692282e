"""
nftpermit.crypto — signer recovery for permit digests.

Signing is an external capability (wallets, HSMs, test fixtures); this package
only derives *who* signed a digest. It says nothing about authorization.
"""

from .recover import SECP256K1_N, parse_signature, recover

__all__ = ["SECP256K1_N", "parse_signature", "recover"]
