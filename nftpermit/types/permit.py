"""
PermitMessage — the struct an owner (or delegate) signs off-chain.

It is never persisted: it circulates as (fields, signature) until a single
submission consumes it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

from .identity import Identity, to_identity

AssetId = int

UINT256_MAX = (1 << 256) - 1


def _uint256(name: str, v: Any) -> int:
    if isinstance(v, bool) or not isinstance(v, int):
        raise TypeError(f"{name} must be int")
    if v < 0 or v > UINT256_MAX:
        raise ValueError(f"{name} out of uint256 range")
    return v


@dataclass(frozen=True)
class PermitMessage:
    spender: Identity
    asset_id: AssetId
    nonce: int
    deadline: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "spender", to_identity(self.spender))
        _uint256("asset_id", self.asset_id)
        _uint256("nonce", self.nonce)
        _uint256("deadline", self.deadline)

    def to_typed_data(self) -> Dict[str, Any]:
        """Message object in `eth_signTypedData_v4` JSON shape (wire field names)."""
        return {
            "spender": self.spender,
            "tokenId": self.asset_id,
            "nonce": self.nonce,
            "deadline": self.deadline,
        }


__all__ = ["AssetId", "PermitMessage", "UINT256_MAX"]
