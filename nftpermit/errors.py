"""
nftpermit.errors — exceptions raised by the registry, the permit engine and helpers.

Registry and permit failures are *typed exceptions* with a stable machine code so
callers (a transaction executor, an RPC bridge, the CLI) can map them onto receipts
or structured error payloads. They are pure-Python and dependency-free.

Hierarchy
---------
PermitError (base)
 ├─ UnknownAsset        : referenced asset id was never issued
 ├─ NotOwner            : plain transfer where `from_` is not the current owner
 ├─ InvalidSignature    : bad signature, stale nonce, unauthorized signer, wrong redeemer
 ├─ DeadlineExpired     : permit deadline is in the past
 ├─ NotApprovedOrOwner  : ambient caller may not act on the asset
 ├─ InvalidRecipient    : zero identity / approval to current owner / self-operator
 └─ AssetExists         : issuing an id that is already taken

SignatureError (base, raised by nftpermit.crypto.recover)
 ├─ MalformedSignature  : not a well-formed secp256k1 signature
 └─ RecoveryFailure     : no identity can be derived

EncodingError  : a value cannot be encoded under its EIP-712 type
ConfigError    : invalid configuration value

Notes
-----
* `InvalidSignature` deliberately carries no detail about *which* check failed.
  A stale nonce, a forged signature and an unauthorized signer must look the
  same to the submitter, otherwise old signed messages become a nonce oracle.
* No error is retried internally; every failure leaves the registry untouched.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class PermitError(Exception):
    """
    Base registry/permit error.

    Attributes:
        message: Human-readable explanation.
        code:    Stable machine code string (e.g., 'UNKNOWN_ASSET').
        data:    Optional structured details (kept JSON-serializable).
    """
    message: str = "permit error"
    code: str = "PERMIT_ERROR"
    data: Optional[Dict[str, Any]] = field(default=None)

    def __str__(self) -> str:  # pragma: no cover - trivial
        if self.data:
            return f"{self.code}: {self.message} ({self.data})"
        return f"{self.code}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-safe dict for receipts/logs/RPC errors."""
        out: Dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            out["data"] = self.data
        return out


class UnknownAsset(PermitError):
    """The asset id was never issued. Not retryable."""
    def __init__(self, asset_id: int, *, message: str = "unknown asset"):
        super().__init__(message=message, code="UNKNOWN_ASSET", data={"asset_id": int(asset_id)})


class NotOwner(PermitError):
    """A plain transfer named a `from_` identity that does not own the asset."""
    def __init__(self, asset_id: int, *, message: str = "transfer from incorrect owner"):
        super().__init__(message=message, code="NOT_OWNER", data={"asset_id": int(asset_id)})


class InvalidSignature(PermitError):
    """
    Catch-all permit rejection.

    Raised for malformed signatures, recovery failures, nonce mismatch, unauthorized
    signers and a wrong redeemer in the atomic path. Intentionally data-free.
    """
    def __init__(self, message: str = "INVALID_SIGNATURE"):
        super().__init__(message=message, code="INVALID_SIGNATURE", data=None)


class DeadlineExpired(PermitError):
    """The permit deadline is before the supplied current time."""
    def __init__(self, message: str = "DEADLINE_EXPIRED"):
        super().__init__(message=message, code="DEADLINE_EXPIRED", data=None)


class NotApprovedOrOwner(PermitError):
    """The ambient caller is neither owner, approved spender nor operator."""
    def __init__(
        self,
        asset_id: Optional[int] = None,
        *,
        message: str = "caller is not owner nor approved",
    ):
        d = {"asset_id": int(asset_id)} if asset_id is not None else None
        super().__init__(message=message, code="NOT_APPROVED_OR_OWNER", data=d)


class InvalidRecipient(PermitError):
    """Zero identity as recipient, approval to the current owner, or self-operator."""
    def __init__(self, message: str = "invalid recipient", *, recipient: Optional[str] = None):
        d = {"recipient": recipient} if recipient is not None else None
        super().__init__(message=message, code="INVALID_RECIPIENT", data=d)


class AssetExists(PermitError):
    """An issuance targeted an asset id that already has an ownership record."""
    def __init__(self, asset_id: int, *, message: str = "asset already issued"):
        super().__init__(message=message, code="ASSET_EXISTS", data={"asset_id": int(asset_id)})


# -------- signature recovery ----------------------------------------------------


class SignatureError(Exception):
    """Base class for failures of `nftpermit.crypto.recover.recover`."""


class MalformedSignature(SignatureError):
    """Wrong length, undecodable, out-of-range or malleable (high-s) signature."""


class RecoveryFailure(SignatureError):
    """Invalid recovery parameter or no public key satisfies the signature."""


# -------- encoding / config -----------------------------------------------------


class EncodingError(ValueError):
    """A value does not fit the EIP-712 type it is declared with."""


class ConfigError(ValueError):
    """Invalid configuration (environment variable or explicit override)."""


__all__ = [
    "PermitError",
    "UnknownAsset",
    "NotOwner",
    "InvalidSignature",
    "DeadlineExpired",
    "NotApprovedOrOwner",
    "InvalidRecipient",
    "AssetExists",
    "SignatureError",
    "MalformedSignature",
    "RecoveryFailure",
    "EncodingError",
    "ConfigError",
]
