"""
nftpermit.encoding — deterministic EIP-712 structured-message hashing.

Public API (re-exported from .typed_data):
  - Field, StructType, EIP712_DOMAIN, PERMIT
  - encode_type, type_hash, encode_value, hash_struct
  - domain_separator, permit_struct_hash, permit_digest, permit_typed_data
"""

from .typed_data import (
    EIP712_DOMAIN,
    PERMIT,
    Field,
    StructType,
    domain_separator,
    encode_type,
    encode_value,
    hash_struct,
    permit_digest,
    permit_struct_hash,
    permit_typed_data,
    type_hash,
)

__all__ = [
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
