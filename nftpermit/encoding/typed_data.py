"""
nftpermit.encoding.typed_data — EIP-712 digests over an explicit schema.

A permit digest is built from two independently hashed components joined with a
fixed two-byte frame:

    digest          = keccak256(0x19 || 0x01 || domainSeparator || hashStruct(Permit))
    domainSeparator = hashStruct(EIP712Domain)
    hashStruct(s)   = keccak256(typeHash(s) || enc(v_1) || ... || enc(v_n))
    typeHash(s)     = keccak256("Name(type_1 name_1,...,type_n name_n)")

Every field is encoded into exactly one 32-byte word (dynamic `string`/`bytes`
values are replaced by their keccak256), so two distinct messages of the same
type cannot share an encoding, and the type hash prevents one struct from being
read as another. The domain separator binds chain id and verifying contract.

Schemas are declared as data (`StructType`) rather than assembled ad hoc; the
field order of `PERMIT` is part of the signed format and must not change:

    Permit(address spender,uint256 tokenId,uint256 nonce,uint256 deadline)

The asset id travels under the wire name `tokenId` so that signatures produced
by standard wallets (`eth_signTypedData_v4`) verify unchanged.

Every function here is pure: nothing is cached or retained between calls.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Tuple

from ..errors import EncodingError
from ..types.domain import DomainContext
from ..types.identity import to_identity
from ..types.permit import UINT256_MAX, PermitMessage
from ..utils.hash import from_hex, keccak_256

EIP191_PREFIX = b"\x19\x01"

WORD = 32


# =============================================================================
# Schema
# =============================================================================


@dataclass(frozen=True)
class Field:
    name: str
    type: str


@dataclass(frozen=True)
class StructType:
    """An ordered EIP-712 struct definition. Only atomic/dynamic member types."""

    name: str
    fields: Tuple[Field, ...]

    def field_names(self) -> Tuple[str, ...]:
        return tuple(f.name for f in self.fields)

    def to_typed_data(self) -> List[Dict[str, str]]:
        return [{"name": f.name, "type": f.type} for f in self.fields]


EIP712_DOMAIN = StructType(
    "EIP712Domain",
    (
        Field("name", "string"),
        Field("version", "string"),
        Field("chainId", "uint256"),
        Field("verifyingContract", "address"),
    ),
)

PERMIT = StructType(
    "Permit",
    (
        Field("spender", "address"),
        Field("tokenId", "uint256"),
        Field("nonce", "uint256"),
        Field("deadline", "uint256"),
    ),
)

_SUPPORTED_TYPES = frozenset({"address", "uint256", "bool", "bytes32", "string", "bytes"})


def encode_type(struct: StructType) -> str:
    """`Name(type_1 name_1,...)` — the canonical type string."""
    for f in struct.fields:
        if f.type not in _SUPPORTED_TYPES:
            raise EncodingError(f"unsupported field type {f.type!r} in {struct.name}")
    return f"{struct.name}(" + ",".join(f"{f.type} {f.name}" for f in struct.fields) + ")"


def type_hash(struct: StructType) -> bytes:
    return keccak_256(encode_type(struct).encode("utf-8"))


# =============================================================================
# Value encoding (one 32-byte word per field)
# =============================================================================


def _as_bytes(value: Any, *, name: str) -> bytes:
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    if isinstance(value, str):
        try:
            return from_hex(value)
        except ValueError as e:
            raise EncodingError(f"{name}: {e}") from e
    raise EncodingError(f"{name}: expected bytes or hex string")


def encode_value(type_name: str, value: Any, *, name: str = "value") -> bytes:
    """Encode one member value into its 32-byte EIP-712 word."""
    if type_name == "uint256":
        if isinstance(value, bool) or not isinstance(value, int):
            raise EncodingError(f"{name}: uint256 requires int")
        if value < 0 or value > UINT256_MAX:
            raise EncodingError(f"{name}: out of uint256 range")
        return value.to_bytes(WORD, "big")
    if type_name == "address":
        try:
            ident = to_identity(value)
        except ValueError as e:
            raise EncodingError(f"{name}: {e}") from e
        return bytes.fromhex(ident[2:]).rjust(WORD, b"\x00")
    if type_name == "bool":
        if not isinstance(value, bool):
            raise EncodingError(f"{name}: bool requires True/False")
        return int(value).to_bytes(WORD, "big")
    if type_name == "bytes32":
        raw = _as_bytes(value, name=name)
        if len(raw) != WORD:
            raise EncodingError(f"{name}: bytes32 requires exactly 32 bytes")
        return raw
    if type_name == "string":
        if not isinstance(value, str):
            raise EncodingError(f"{name}: string requires str")
        return keccak_256(value.encode("utf-8"))
    if type_name == "bytes":
        return keccak_256(_as_bytes(value, name=name))
    raise EncodingError(f"unsupported field type {type_name!r}")


def hash_struct(struct: StructType, values: Mapping[str, Any]) -> bytes:
    """
    keccak256(typeHash || enc(field_1) || ... || enc(field_n)).

    `values` must contain exactly the struct's fields; unknown keys are rejected
    so a message cannot silently carry data the signer never saw.
    """
    expected = struct.field_names()
    extra = set(values) - set(expected)
    if extra:
        raise EncodingError(f"{struct.name}: unexpected fields {sorted(extra)}")
    buf = bytearray(type_hash(struct))
    for f in struct.fields:
        if f.name not in values:
            raise EncodingError(f"{struct.name}: missing field {f.name!r}")
        buf += encode_value(f.type, values[f.name], name=f"{struct.name}.{f.name}")
    return keccak_256(bytes(buf))


# =============================================================================
# Permit-specific helpers
# =============================================================================


def domain_separator(domain: DomainContext) -> bytes:
    """hashStruct(EIP712Domain) for `domain`."""
    return hash_struct(EIP712_DOMAIN, domain.to_typed_data())


def permit_struct_hash(message: PermitMessage) -> bytes:
    return hash_struct(PERMIT, message.to_typed_data())


def permit_digest(domain: DomainContext, message: PermitMessage) -> bytes:
    """The 32-byte digest a permit signature must cover."""
    return keccak_256(EIP191_PREFIX + domain_separator(domain) + permit_struct_hash(message))


def permit_typed_data(domain: DomainContext, message: PermitMessage) -> Dict[str, Any]:
    """
    Full `eth_signTypedData_v4` document for wallets and external signers.
    Hashing this document with any compliant EIP-712 implementation yields
    `permit_digest(domain, message)`.
    """
    return {
        "types": {
            EIP712_DOMAIN.name: EIP712_DOMAIN.to_typed_data(),
            PERMIT.name: PERMIT.to_typed_data(),
        },
        "primaryType": PERMIT.name,
        "domain": domain.to_typed_data(),
        "message": message.to_typed_data(),
    }


__all__ = [
    "EIP191_PREFIX",
    "EIP712_DOMAIN",
    "PERMIT",
    "Field",
    "StructType",
    "domain_separator",
    "encode_type",
    "encode_value",
    "hash_struct",
    "permit_digest",
    "permit_struct_hash",
    "permit_typed_data",
    "type_hash",
]
