"""
nftpermit utils — hashing helpers
=================================

- Keccak-256 (pre-standard SHA-3, the EVM/EIP-712 hash) via pycryptodome
- Hex helpers (`to_hex`, `from_hex`) with 0x-prefix handling

Keccak-256 differs from `hashlib.sha3_256` in its padding byte; the two are not
interchangeable and every digest in this package is Keccak.
"""

from __future__ import annotations

import binascii

from Crypto.Hash import keccak as _keccak

# ---------------------------------------------------------------------------
# Hex helpers
# ---------------------------------------------------------------------------

def to_hex(b: bytes, prefix: str = "0x") -> str:
    """
    Convert bytes to lower-case hex string with optional prefix (default `0x`).
    """
    if not isinstance(b, (bytes, bytearray, memoryview)):
        raise TypeError("to_hex expects bytes-like input")
    return (prefix or "") + binascii.hexlify(bytes(b)).decode("ascii")


def from_hex(s: str | bytes | bytearray | memoryview) -> bytes:
    """
    Parse hex into bytes. Accepts strings with/without 0x prefix and ignores
    leading/trailing whitespace.
    """
    if isinstance(s, (bytes, bytearray, memoryview)):
        s = bytes(s).decode("ascii")
    if not isinstance(s, str):
        raise TypeError("from_hex expects str or bytes-like input")

    s = s.strip().lower()
    if s.startswith("0x"):
        s = s[2:]
    if len(s) % 2:
        raise ValueError("invalid hex string: odd length")
    try:
        return binascii.unhexlify(s)
    except binascii.Error as e:
        raise ValueError(f"invalid hex string: {e}") from e


# ---------------------------------------------------------------------------
# Keccak-256
# ---------------------------------------------------------------------------

def keccak_256(data: bytes | bytearray | memoryview) -> bytes:
    """
    Keccak-256 digest of `data` (32 bytes).
    """
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise TypeError("keccak_256 expects bytes-like input")
    h = _keccak.new(digest_bits=256)
    h.update(bytes(data))
    return h.digest()


__all__ = ["to_hex", "from_hex", "keccak_256"]
