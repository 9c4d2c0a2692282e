"""
Account identities.

An identity is a 20-byte address. Internally it is always carried as an EIP-55
checksummed `0x…` string so that equality is plain string equality regardless
of how a caller spelled it (bytes, lower-case hex, checksummed hex).
"""

from __future__ import annotations

from typing import Any, Optional

from eth_utils import to_checksum_address

Identity = str

ZERO_IDENTITY: Identity = "0x" + "00" * 20

_HEX = frozenset("0123456789abcdef")


def to_identity(value: Any) -> Identity:
    """
    Normalize `value` into a checksummed identity.

    Accepts 20-byte bytes-like values or 40-hex-digit strings (with or without
    `0x`, any case). Raises ValueError otherwise.
    """
    if isinstance(value, (bytes, bytearray, memoryview)):
        raw = bytes(value)
        if len(raw) != 20:
            raise ValueError(f"identity must be 20 bytes, got {len(raw)}")
        return to_checksum_address(raw)
    if not isinstance(value, str):
        raise ValueError(f"identity must be bytes or hex str, got {type(value).__name__}")
    s = value.strip().lower()
    if s.startswith("0x"):
        s = s[2:]
    if len(s) != 40 or not set(s) <= _HEX:
        raise ValueError(f"invalid identity: {value!r}")
    return to_checksum_address("0x" + s)


def is_identity(value: Any) -> bool:
    try:
        to_identity(value)
    except ValueError:
        return False
    return True


def same_identity(a: Optional[Any], b: Optional[Any]) -> bool:
    """Case-insensitive identity equality; `None` only equals `None`."""
    if a is None or b is None:
        return a is None and b is None
    return to_identity(a) == to_identity(b)


__all__ = ["Identity", "ZERO_IDENTITY", "to_identity", "is_identity", "same_identity"]
