"""
nftpermit.crypto.recover — recover the signing identity of a 32-byte digest.

Accepted encodings
------------------
* 65 bytes  `r || s || v`        with v ∈ {27, 28} (wallet form) or {0, 1}
* 64 bytes  `r || vs`            EIP-2098 compact form, v folded into the top bit of s
* either of the above as a `0x…` hex string

Failures
--------
* MalformedSignature — wrong length, bad hex, r/s outside [1, n), high-s
  (s > n/2; the malleable twin of a valid signature is rejected so a signature
  has exactly one accepted encoding), or a digest that is not 32 bytes.
* RecoveryFailure — the recovery parameter v is not one of the values above,
  or no public key satisfies the signature.

The elliptic-curve work is delegated to eth_keys (secp256k1 ECDSA recover).
"""

from __future__ import annotations

from typing import Tuple, Union

from eth_keys import keys
from eth_keys.exceptions import BadSignature
from eth_utils import ValidationError

from ..errors import MalformedSignature, RecoveryFailure
from ..types.identity import Identity
from ..utils.hash import from_hex

SECP256K1_N = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
SECP256K1_HALF_N = SECP256K1_N // 2

_COMPACT_S_MASK = (1 << 255) - 1

SignatureLike = Union[bytes, bytearray, memoryview, str]


def _signature_bytes(signature: SignatureLike) -> bytes:
    if isinstance(signature, (bytes, bytearray, memoryview)):
        return bytes(signature)
    if isinstance(signature, str):
        try:
            return from_hex(signature)
        except ValueError as e:
            raise MalformedSignature(str(e)) from e
    raise MalformedSignature(f"signature must be bytes or hex str, got {type(signature).__name__}")


def parse_signature(signature: SignatureLike) -> Tuple[int, int, int]:
    """
    Split a signature into (v, r, s) with v normalized to {0, 1}.
    """
    raw = _signature_bytes(signature)
    if len(raw) == 65:
        r = int.from_bytes(raw[0:32], "big")
        s = int.from_bytes(raw[32:64], "big")
        v = raw[64]
    elif len(raw) == 64:
        r = int.from_bytes(raw[0:32], "big")
        vs = int.from_bytes(raw[32:64], "big")
        s = vs & _COMPACT_S_MASK
        v = 27 + (vs >> 255)
    else:
        raise MalformedSignature(f"signature must be 64 or 65 bytes, got {len(raw)}")

    if not (1 <= r < SECP256K1_N) or not (1 <= s < SECP256K1_N):
        raise MalformedSignature("signature r/s out of range")
    if s > SECP256K1_HALF_N:
        raise MalformedSignature("signature s value in upper half order")

    if v in (27, 28):
        v -= 27
    elif v not in (0, 1):
        raise RecoveryFailure(f"invalid recovery parameter v={v}")
    return v, r, s


def recover(digest: bytes, signature: SignatureLike) -> Identity:
    """
    Return the checksummed identity whose key signed exactly `digest`.
    """
    if not isinstance(digest, (bytes, bytearray, memoryview)) or len(digest) != 32:
        raise MalformedSignature("digest must be 32 bytes")
    v, r, s = parse_signature(signature)
    try:
        sig = keys.Signature(vrs=(v, r, s))
        public_key = sig.recover_public_key_from_msg_hash(bytes(digest))
    except (BadSignature, ValidationError) as e:
        raise RecoveryFailure(str(e) or "signature recovery failed") from e
    return public_key.to_checksum_address()


__all__ = ["SECP256K1_N", "SECP256K1_HALF_N", "parse_signature", "recover"]
