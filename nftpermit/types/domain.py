"""
DomainContext — the EIP-712 domain every permit digest is scoped to.

A domain is fixed when a registry/token is created. Binding `chain_id` and the
`verifying_contract` identity into every digest means a permit signed for one
deployment never verifies against another.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

from .identity import Identity, to_identity


@dataclass(frozen=True)
class DomainContext:
    name: str
    version: str
    chain_id: int
    verifying_contract: Identity

    def __post_init__(self) -> None:
        if not isinstance(self.name, str):
            raise TypeError("domain name must be str")
        if not isinstance(self.version, str):
            raise TypeError("domain version must be str")
        if isinstance(self.chain_id, bool) or not isinstance(self.chain_id, int) or self.chain_id < 0:
            raise ValueError("chain_id must be a non-negative int")
        object.__setattr__(self, "verifying_contract", to_identity(self.verifying_contract))

    def to_typed_data(self) -> Dict[str, Any]:
        """Domain object in `eth_signTypedData_v4` JSON shape."""
        return {
            "name": self.name,
            "version": self.version,
            "chainId": self.chain_id,
            "verifyingContract": self.verifying_contract,
        }


__all__ = ["DomainContext"]
